"""
Wave Equation Engine

Explicit finite-difference solver for the scalar wave equation

    d2u/dt2 = c(x, y, t)^2 * laplacian(u) + f(x, y, t)

on a uniform grid with spacing DX, using the leapfrog scheme:

    u_next = 2*u - u_prev + C^2 * lap(u) + dt^2 * f,   C^2 = (c*dt/DX)^2

The first step has no u_prev and uses the half-step start
u + 0.5*C^2*lap(u) + dt^2*f instead.

Stability: the scheme blows up once the Courant number c*dt/DX exceeds
MAX_COURANT, so every step re-checks it against the fastest cell and
shrinks dt when needed. ``iterate`` returns the dt actually used.

Obstacles are reflecting walls (u = 0) described by a boundary function,
usually a union of signed-distance primitives plus the domain edge.
Wall cells render black.
"""

import numpy as np

from . import scenarios
from .colormaps import get_colormap
from .engine_base import FieldEngine
from .grid import BufferRing, clamped_neighbors


def _broadcast(value, n, dtype=np.float32):
    return np.broadcast_to(np.asarray(value, dtype=dtype), (n,))


class WaveField(FieldEngine):

    engine_name = "wave"
    engine_label = "Wave Equation"

    DX = 0.01
    MAX_COURANT = 0.5
    COLOR_MODES = ("signed", "abs", "energy")
    BOUNDARY_MODES = ("cached", "dynamic")

    def __init__(self, nx, ny, dt=0.1, config=None, color_mode="abs",
                 boundary_mode="cached", damping=0.0, colormap="jet",
                 workers=None):
        """
        Args:
            nx, ny: Grid dimensions
            dt: Default timestep used by iterate() without an argument
            config: WaveConfig (defaults to the obstacle course scenario)
            color_mode: "signed" amplitude in [-1, 1], "abs" amplitude in
                [0, 1] or "energy" (amplitude squared) in [0, 1]
            boundary_mode: "cached" classifies walls once per row and keeps
                them, "dynamic" re-evaluates the boundary every step
            damping: Linear energy loss per unit time (0 = off)
            colormap: Name of a colormap in colormaps.COLORMAPS
            workers: Row threads (1 = run rows inline)
        """
        if color_mode not in self.COLOR_MODES:
            raise ValueError(f"color_mode must be one of {self.COLOR_MODES}")
        if boundary_mode not in self.BOUNDARY_MODES:
            raise ValueError(f"boundary_mode must be one of {self.BOUNDARY_MODES}")
        super().__init__(nx, ny, dt, dx=self.DX, workers=workers)
        self.config = config if config is not None else scenarios.wave_config()
        self.color_mode = color_mode
        self.boundary_mode = boundary_mode
        self.damping = float(damping)
        self._cmap = get_colormap(colormap)

        shape = self.grid.shape
        # current / previous / next amplitude
        self._u = BufferRing(3, shape)
        self._speed = np.zeros(shape, dtype=np.float32)
        self._c2 = np.zeros(shape, dtype=np.float32)
        # Boundary cache: a row is classified once, then never re-evaluated
        self._out_of_bounds = np.zeros(shape, dtype=bool)
        self._classified = np.zeros(self.ny, dtype=bool)

        self._xm, self._xp = clamped_neighbors(self.nx)
        self._row_x = np.arange(self.nx)
        self._first = True
        self._step_dt = 0.0
        self._step_t = 0.0
        self.max_wave_speed = 0.0

        self._init_field()

    def _init_field(self):
        x, y = self.grid.coords()
        self._u.current[:] = np.broadcast_to(
            self.config.initial(self.grid, x, y), self.grid.shape)
        self._update_speed(0.0)

    def _update_speed(self, t):
        x, y = self.grid.coords()
        self._speed[:] = np.broadcast_to(
            self.config.wave_speed(self.grid, x, y, t), self.grid.shape)
        # Largest magnitude: C^2 ignores the sign of the speed
        self.max_wave_speed = float(np.abs(self._speed).max())

    def courant_limit(self):
        """Largest stable dt for the current wave speeds."""
        if self.max_wave_speed <= 0:
            return float("inf")
        return self.MAX_COURANT * self.DX / self.max_wave_speed

    def _advance(self, dt):
        self._update_speed(self.t)

        # Courant number c*dt/dx must stay below MAX_COURANT
        dt = min(dt, self.courant_limit())

        np.multiply(self._speed, self._speed, out=self._c2)
        self._c2 *= np.float32(dt * dt / (self.DX * self.DX))

        self._step_dt = dt
        self._step_t = self.t + dt
        self.pool.run(self._update_row, self.ny)

        self._u.rotate()
        self._first = False
        return dt

    def _boundary_row(self, y, x, yy):
        if self.boundary_mode == "dynamic":
            self._out_of_bounds[y] = _broadcast(
                self.config.boundary(self.grid, x, yy, self._step_t), self.nx, bool)
        elif not self._classified[y]:
            self._out_of_bounds[y] = _broadcast(
                self.config.boundary(self.grid, x, yy, self._step_t), self.nx, bool)
            self._classified[y] = True
        return self._out_of_bounds[y]

    def _update_row(self, y):
        u = self._u.current
        dt = self._step_dt
        row = u[y]
        ym = max(y - 1, 0)
        yp = min(y + 1, self.ny - 1)
        lap = u[ym] + u[yp] + row[self._xm] + row[self._xp] - 4.0 * row

        x = self._row_x
        yy = np.full(self.nx, y)
        wall = self._boundary_row(y, x, yy)
        src = _broadcast(self.config.source(self.grid, x, yy, self._step_t), self.nx)
        c2 = self._c2[y]

        if self._first:
            val = row + 0.5 * c2 * lap + dt * dt * src
        else:
            val = 2.0 * row - self._u.previous[y] + c2 * lap + dt * dt * src
        if self.damping:
            val *= 1.0 - self.damping * dt
        val[wall] = 0.0
        self._u.next[y] = val

        out = self._rgb[y]
        if self.color_mode == "energy":
            self._cmap(val * val, 0.0, 1.0, out=out)
        elif self.color_mode == "abs":
            self._cmap(np.abs(val), 0.0, 1.0, out=out)
        else:
            self._cmap(val, -1.0, 1.0, out=out)
        out[wall] = 0.0

    @property
    def amplitude(self):
        """Current amplitude grid (ny, nx)."""
        return self._u.current

    @property
    def out_of_bounds(self):
        """Boolean wall mask as classified so far."""
        return self._out_of_bounds

    def add_blob(self, cx, cy, radius=15, value=0.8):
        """Pluck the field: add a smooth bump that starts at rest."""
        bump = self._blob(cx, cy, radius) * np.float32(value)
        bump[self._out_of_bounds] = 0.0
        self._u.current[:] += bump
        self._u.previous[:] += bump

    def clear(self):
        self._u.fill(0.0)
        self._first = True
        self.t = 0.0
        self.generation = 0

    def get_params(self):
        return {
            "damping": self.damping,
            "color_mode": self.color_mode,
            "boundary_mode": self.boundary_mode,
            "max_wave_speed": self.max_wave_speed,
        }

    def set_params(self, damping=None, color_mode=None, **_kw):
        if damping is not None:
            self.damping = float(damping)
        if color_mode is not None:
            if color_mode not in self.COLOR_MODES:
                raise ValueError(f"color_mode must be one of {self.COLOR_MODES}")
            self.color_mode = color_mode

    @property
    def stats(self):
        u = self._u.current
        return {
            "generation": self.generation,
            "t": self.t,
            "energy": float(np.sum(u.astype(np.float64) ** 2)),
            "max_amplitude": float(np.abs(u).max()),
            "boundary_pct": float(self._out_of_bounds.sum()) / u.size * 100,
            "max_wave_speed": self.max_wave_speed,
        }
