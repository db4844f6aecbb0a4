"""
Scenario Catalogue

Named configuration functions for each field model. Builders such as
``wave_config(initial="rings", boundary="obstacles")`` look pieces up by
name and return a ready config struct; presets refer to these names.

Coordinates are cell indices. Lengths scale with the grid (NX/3 etc.) so
a scenario looks the same at any resolution.
"""

import numpy as np

from . import sdf
from .config import HeatConfig, ReactionDiffusionConfig, SandConfig, WaveConfig
from .fieldmath import dist, gaussian, triangle_wave
from .materials import Material


# =====================================================================
# WAVE: initial conditions
# =====================================================================

def wave_empty(grid, x, y):
    return 0.0


def wave_vertical_strip(grid, x, y):
    return np.where(x == grid.nx // 2 - 5, 0.5, 0.0)


def wave_standing(grid, x, y):
    """Standing wave in x-direction."""
    return (0.02 * np.sin(5.0 * x * (2.0 * np.pi / grid.nx))
            * np.sin(0.5 * y * (2.0 * np.pi / grid.ny)))


def wave_left_spot(grid, x, y):
    return gaussian(x, y, grid.nx / 6, grid.ny / 2, 15.0, 15.0, 1.0)


def wave_center_spot(grid, x, y):
    return gaussian(x, y, grid.nx / 2, grid.ny / 2, 5.0, 5.0, 3.0)


def wave_rings(grid, x, y):
    """Concentric circles around the middle."""
    d = dist(x, y, grid.nx // 2, grid.ny // 2)
    rings = 0.05 * np.sin(d * 10.0 * (4.0 * np.pi / grid.nx))
    return np.where(d < grid.ny / 4, rings, 0.0)


# =====================================================================
# WAVE: source functions
# =====================================================================

def source_none(grid, x, y, t):
    return 0.0


def source_oscillator(grid, x, y, t):
    """Static oscillator in the middle of the field."""
    return (30000.0 * np.sin(t * 100.0)
            * gaussian(x, y, grid.nx / 2, grid.ny / 2, 15.0, 15.0, 1.0))


def source_offset_oscillator(grid, x, y, t):
    return (30000.0 * np.sin(t * 100.0)
            * gaussian(x, y, 3 * grid.nx / 5, grid.ny / 4, 15.0, 15.0, 1.0))


def source_moving_oscillator(grid, x, y, t):
    """Oscillator travelling to the right."""
    return gaussian(x, y, grid.nx / 2 + t * 400.0, grid.ny / 2, 15.0, 15.0,
                    20000.0 * np.sin(t * 100.0))


def source_double_oscillator(grid, x, y, t):
    pair = (gaussian(x, y, 6 * grid.nx / 13, grid.ny / 2, 15.0, 15.0, 1.0)
            + gaussian(x, y, 7 * grid.nx / 13, grid.ny / 2, 15.0, 15.0, 1.0))
    return pair * 30000.0 * np.sin(t * 100.0)


# =====================================================================
# WAVE: boundary functions (True = reflecting wall)
# =====================================================================

def boundary_rect(grid, x, y, t):
    return sdf.domain_edge(grid, x, y)


def boundary_circle(grid, x, y, t):
    return dist(x, y, grid.nx // 2, grid.ny // 2) > 15 * grid.ny / 32


def boundary_spiked(grid, x, y, t):
    tx = triangle_wave(y, 30.0, grid.ny / 20)
    ty = triangle_wave(x, 30.0, grid.nx / 30)
    return ((x <= 20 + tx) | (x >= grid.nx - 21 + tx)
            | (y <= 20 + ty) | (y >= grid.ny - 21 + ty))


def boundary_spiked_circle(grid, x, y, t):
    angle = np.arctan2(y - grid.ny / 2, x - grid.nx / 2) + np.pi
    radius = 7 * grid.ny / 16.0 - triangle_wave(angle, 10.0, 0.133)
    return dist(x, y, grid.nx / 2, grid.ny / 2) > radius


def boundary_obstacles(grid, x, y, t):
    """Two circles and a rectangle inside a walled box."""
    nx, ny = grid.nx, grid.ny
    d = sdf.union(
        sdf.circle(x, y, nx / 3, ny / 4, nx / 15),
        sdf.rect(x, y, nx / 4, 2 * ny / 3, nx / 20, ny / 3),
        sdf.circle(x, y, 2 * nx / 3, ny / 2, nx / 8),
    )
    return sdf.inside(d) | sdf.domain_edge(grid, x, y)


def boundary_double_slit(grid, x, y, t):
    """Vertical wall at 1/3 width with two narrow openings."""
    nx, ny = grid.nx, grid.ny
    wall = sdf.rect(x, y, nx / 3, ny / 2, 2, ny / 2)
    gap = max(2, ny // 30)
    slits = sdf.union(
        sdf.rect(x, y, nx / 3, 2 * ny / 5, 3, gap),
        sdf.rect(x, y, nx / 3, 3 * ny / 5, 3, gap),
    )
    return sdf.inside(sdf.subtract(wall, slits)) | sdf.domain_edge(grid, x, y)


def boundary_orbiting(grid, x, y, t):
    """A circular obstacle circling the centre (use with dynamic boundaries)."""
    nx, ny = grid.nx, grid.ny
    cx = nx / 2 + nx / 4 * np.cos(t * 20.0)
    cy = ny / 2 + ny / 4 * np.sin(t * 20.0)
    return sdf.inside(sdf.circle(x, y, cx, cy, nx / 20)) | sdf.domain_edge(grid, x, y)


# =====================================================================
# WAVE: wave speed layouts
# =====================================================================

def speed_uniform(grid, x, y, t):
    return 6.0


def speed_corner(grid, x, y, t):
    """Triangular section in the lower left corner is slower."""
    return np.where(x + y < grid.ny, 4.0, 6.0)


def speed_left_third(grid, x, y, t):
    return np.where(x < grid.nx / 3, 4.0, 6.0)


def speed_left_half(grid, x, y, t):
    return np.where(x < grid.nx / 2, 4.0, 6.0)


def speed_strip(grid, x, y, t):
    """Vertical strip left of the middle acts as a slow lens."""
    return np.where((x < grid.nx / 2) & (x > 2 * grid.nx / 5), 4.0, 6.0)


WAVE_INITIAL = {
    "empty": wave_empty,
    "strip": wave_vertical_strip,
    "standing": wave_standing,
    "left_spot": wave_left_spot,
    "center_spot": wave_center_spot,
    "rings": wave_rings,
}

WAVE_SOURCES = {
    "none": source_none,
    "oscillator": source_oscillator,
    "offset_oscillator": source_offset_oscillator,
    "moving_oscillator": source_moving_oscillator,
    "double_oscillator": source_double_oscillator,
}

WAVE_BOUNDARIES = {
    "rect": boundary_rect,
    "circle": boundary_circle,
    "spiked": boundary_spiked,
    "spiked_circle": boundary_spiked_circle,
    "obstacles": boundary_obstacles,
    "double_slit": boundary_double_slit,
    "orbiting": boundary_orbiting,
}

WAVE_SPEEDS = {
    "uniform": speed_uniform,
    "corner": speed_corner,
    "left_third": speed_left_third,
    "left_half": speed_left_half,
    "strip": speed_strip,
}


def _lookup(table, name, kind):
    try:
        return table[name]
    except KeyError:
        raise ValueError(f"Unknown {kind} {name!r}, expected one of {sorted(table)}") from None


def wave_config(initial="rings", source="none", boundary="obstacles", speed="uniform"):
    """Build a WaveConfig from catalogue names."""
    return WaveConfig(
        initial=_lookup(WAVE_INITIAL, initial, "wave initial condition"),
        source=_lookup(WAVE_SOURCES, source, "wave source"),
        boundary=_lookup(WAVE_BOUNDARIES, boundary, "wave boundary"),
        wave_speed=_lookup(WAVE_SPEEDS, speed, "wave speed"),
    )


# =====================================================================
# REACTION-DIFFUSION
# =====================================================================

def rd_center(grid, x, y):
    """Gaussian blob of V in the centre, U depleted under it."""
    r = min(grid.nx, grid.ny) / 6.0
    d2 = (x - grid.nx / 2.0) ** 2 + (y - grid.ny / 2.0) ** 2
    blob = 0.25 * np.exp(-d2 / (2.0 * r * r))
    u = np.clip(1.0 - blob * 2.0, 0.0, 1.0)
    return u, blob


def rd_square(grid, x, y):
    """Classic Pearson start: a small square of (0.5, 0.25) in a U=1 sea."""
    half = max(2, min(grid.nx, grid.ny) // 10)
    inside = ((np.abs(x - grid.nx // 2) < half)
              & (np.abs(y - grid.ny // 2) < half))
    u = np.where(inside, 0.5, 1.0)
    v = np.where(inside, 0.25, 0.0)
    return u, v


def rd_scattered(seed=0, n_dots=20):
    """Random small dots of V. Returns an initial function."""
    def initial(grid, x, y):
        rng = np.random.default_rng(seed)
        u = np.ones(np.shape(x), dtype=np.float32)
        v = np.zeros(np.shape(x), dtype=np.float32)
        r = max(3, min(grid.nx, grid.ny) // 40)
        for _ in range(n_dots):
            cx = rng.integers(0, grid.nx)
            cy = rng.integers(0, grid.ny)
            mask = dist(x, y, cx, cy) < r
            u[mask] = 0.50
            v[mask] = 0.25
        return u, v
    return initial


def feed_constant(value):
    def feed(grid, x, y, u, v, t):
        return value
    return feed


def feed_contained(value):
    """Feed rate ramps up to 5x towards the edge, keeping patterns centred.

    Centre (within 40% radius): value
    Ramp (40% -> 70%): smoothly increases to 5x
    Beyond 70%: 5x, kills V rapidly and restores U = 1
    """
    def feed(grid, x, y, u, v, t):
        half = min(grid.nx, grid.ny) / 2.0
        d = dist(x, y, grid.nx / 2.0, grid.ny / 2.0) / half
        ramp = np.clip((d - 0.40) / 0.30, 0.0, 1.0)
        return value * (1.0 + ramp * 4.0)
    return feed


def feed_gradient(lo=0.01, hi=0.08):
    """Feed varies left to right (Pearson parameter map)."""
    def feed(grid, x, y, u, v, t):
        return lo + (hi - lo) * x / max(1, grid.nx - 1)
    return feed


def kill_gradient(lo=0.045, hi=0.07):
    """Kill varies top to bottom (Pearson parameter map)."""
    def kill(grid, x, y, u, v, t):
        return lo + (hi - lo) * y / max(1, grid.ny - 1)
    return kill


def reaction_ratio(ratio=2.0):
    """u + R*v -> (1+R)*v. ratio=2 is Gray-Scott."""
    def reaction(grid, x, y, u, v, t):
        return u * np.power(v, ratio)
    return reaction


RD_INITIAL = {
    "center": rd_center,
    "square": rd_square,
    "scattered": rd_scattered(),
}


def reaction_diffusion_config(initial="center", feed=0.037, kill=0.060,
                              Du=0.2097, Dv=0.105, ratio=2.0,
                              contained=False, parameter_map=False):
    """Build a ReactionDiffusionConfig.

    Args:
        initial: name in RD_INITIAL
        feed, kill: base feed/kill rates
        Du, Dv: diffusion rates
        ratio: reaction order of v (2 = Gray-Scott)
        contained: use the radial containment feed mask
        parameter_map: sweep feed along x and kill along y instead
    """
    if parameter_map:
        feed_fn, kill_fn = feed_gradient(), kill_gradient()
    elif contained:
        feed_fn, kill_fn = feed_contained(feed), feed_constant(kill)
    else:
        feed_fn, kill_fn = feed_constant(feed), feed_constant(kill)
    return ReactionDiffusionConfig(
        initial=_lookup(RD_INITIAL, initial, "reaction-diffusion initial condition"),
        feed=feed_fn,
        kill=kill_fn,
        reaction=reaction_ratio(ratio),
        Du=Du,
        Dv=Dv,
    )


# =====================================================================
# HEAT
# =====================================================================

def heat_grid_pattern(grid, x, y):
    """Hot 20-cell bars every 40 cells, with warm bars every 80."""
    field = np.zeros(np.shape(x), dtype=np.float32)
    field[(x % 40 < 20) | (y % 40 < 20)] = 1.0
    field[(x % 80 < 20) | (y % 80 < 20)] = 0.3
    return field


def heat_checkerboard(size=4):
    """Checkerboard of 0.3 / 1.0 blocks."""
    def initial(grid, x, y):
        return np.where(((x // size) + (y // size)) % 2 == 0, 1.0, 0.3)
    return initial


def heat_hot_spot(grid, x, y):
    d = dist(x, y, grid.nx / 2, grid.ny / 2)
    return np.where(d < min(grid.nx, grid.ny) / 8, 1.0, 0.0)


HEAT_INITIAL = {
    "grid": heat_grid_pattern,
    "checkerboard": heat_checkerboard(),
    "hot_spot": heat_hot_spot,
}


def heat_config(initial="grid", alpha=10.018):
    return HeatConfig(initial=_lookup(HEAT_INITIAL, initial, "heat initial condition"),
                      alpha=alpha)


# =====================================================================
# FALLING SAND
# =====================================================================

def sand_empty(grid, x, y):
    return Material.NONE


def sand_box(grid, x, y):
    """Bound walls around the edge of the grid."""
    return np.where(sdf.domain_edge(grid, x, y), Material.BOUND, Material.NONE)


def sand_garden(grid, x, y):
    """Walled box with a plant bed, a sand pile and a pool of water."""
    nx, ny = grid.nx, grid.ny
    cells = sand_box(grid, x, y)
    floor = ny - 2
    cells = np.where((y == floor) & (x > 0) & (x < nx // 3), Material.PLANT, cells)
    pile = (y < ny // 3) & (y > ny // 8) & (np.abs(x - nx // 2) < nx // 12)
    cells = np.where(pile, Material.SAND, cells)
    pool = (y > ny // 2) & (y < floor) & (x > 2 * nx // 3) & (x < nx - 1)
    cells = np.where(pool, Material.WATER, cells)
    return cells


def sand_smoke(grid, x, y):
    """Gas trapped under a layer of water in a walled box."""
    cells = sand_box(grid, x, y)
    free = cells == Material.NONE
    cells = np.where(free & (y > grid.ny * 3 // 4), Material.GAS, cells)
    cells = np.where(free & (y > grid.ny // 2) & (y <= grid.ny * 3 // 4),
                     Material.WATER, cells)
    return cells


SAND_INITIAL = {
    "empty": sand_empty,
    "box": sand_box,
    "garden": sand_garden,
    "smoke": sand_smoke,
}


def sand_config(initial="box"):
    return SandConfig(initial=_lookup(SAND_INITIAL, initial, "sand initial layout"))
