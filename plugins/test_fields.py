#!/usr/bin/env python3
"""
Test script for the stencil field engines and their shared infrastructure.

Verifies:
1. Colormaps (scalar and vectorized agree, endpoints, clamping)
2. Signed-distance primitives and float helpers
3. BufferRing rotation without copies
4. Wave solver (Courant clamp, color modes, walls, boundary caching, first step)
5. Reaction-diffusion bounds
6. Heat diffusion smoothing and dt clamp
7. Serial and threaded row updates give identical results
"""

import numpy as np
import pytest

from field_sims import colormaps, fieldmath, scenarios, sdf
from field_sims.config import HeatConfig, WaveConfig
from field_sims.grid import BufferRing, Grid, clamped_neighbors, wrapped_neighbors
from field_sims.heat import HeatField
from field_sims.reaction_diffusion import ReactionDiffusionField
from field_sims.wave import WaveField


def _point(px, py, value=1.0):
    def initial(grid, x, y):
        return np.where((x == px) & (y == py), value, 0.0)
    return initial


def _speed(value):
    def wave_speed(grid, x, y, t):
        return value
    return wave_speed


def test_jet_endpoints():
    """Jet runs dark blue -> dark red and clamps outside the range."""
    print("Testing jet colormap...")
    assert colormaps.to_rgb_jet(0.0, 1.0, 0.0) == (0.0, 0.0, 0.5), "min should be dark blue"
    assert colormaps.to_rgb_jet(0.0, 1.0, 1.0) == (0.5, 0.0, 0.0), "max should be dark red"
    assert colormaps.to_rgb_jet(0.0, 1.0, 0.5) == (0.5, 1.0, 0.5), "middle should be pale green"
    assert colormaps.to_rgb_jet(0.0, 1.0, 1.5) == colormaps.to_rgb_jet(0.0, 1.0, 1.0), \
        "values above max should clamp"
    assert colormaps.to_rgb_jet(0.0, 1.0, -3.0) == colormaps.to_rgb_jet(0.0, 1.0, 0.0), \
        "values below min should clamp"
    assert colormaps.to_rgb_jet(2.0, 2.0, 7.0) == (0.0, 0.0, 0.5), \
        "a zero-width range should map to the bottom color"
    print("  ✓ Jet endpoints correct")


def test_vectorized_colormaps_match_scalar():
    print("Testing vectorized colormaps...")
    values = np.linspace(-0.2, 1.2, 57)
    pairs = [
        (colormaps.jet, colormaps.to_rgb_jet),
        (colormaps.rainbow, colormaps.to_rgb),
        (colormaps.gray, colormaps.to_bw),
    ]
    for vec, scalar in pairs:
        rgb = vec(values, 0.0, 1.0)
        assert rgb.shape == (57, 3), f"{vec.__name__} shape: {rgb.shape}"
        expected = np.array([scalar(0.0, 1.0, v) for v in values])
        assert np.allclose(rgb, expected, atol=1e-6), f"{vec.__name__} disagrees with scalar form"
        assert rgb.min() >= 0.0 and rgb.max() <= 1.0, f"{vec.__name__} left [0, 1]"

    out = np.zeros((4, 3), dtype=np.float32)
    result = colormaps.jet(np.zeros(4), 0.0, 1.0, out=out)
    assert result is out, "jet should fill the provided buffer"

    with pytest.raises(ValueError):
        colormaps.get_colormap("viridis")
    print("  ✓ Vectorized colormaps match")


def test_sdf_primitives():
    print("Testing signed-distance primitives...")
    assert sdf.circle(0.0, 0.0, 0.0, 0.0, 1.0) == -1.0, "centre is one radius inside"
    assert sdf.circle(3.0, 0.0, 0.0, 0.0, 1.0) == 2.0, "distance outside"
    assert sdf.circle(1.0, 0.0, 0.0, 0.0, 1.0) == 0.0, "on the boundary"
    assert sdf.rect(0.0, 0.0, 0.0, 0.0, 2.0, 1.0) == -1.0, "nearest rect edge is 1 away"
    assert abs(sdf.rect(5.0, 4.0, 0.0, 0.0, 2.0, 1.0) - np.hypot(3.0, 3.0)) < 1e-9, \
        "corner distance outside the rect"

    x = np.array([0.0, 5.0, 10.0])
    y = np.zeros(3)
    d = sdf.union(sdf.circle(x, y, 0.0, 0.0, 1.0), sdf.circle(x, y, 10.0, 0.0, 1.0))
    assert list(sdf.inside(d)) == [True, False, True], f"union inside mask: {d}"
    assert not sdf.inside(sdf.subtract(sdf.circle(0.0, 0.0, 0.0, 0.0, 2.0),
                                       sdf.circle(0.0, 0.0, 0.0, 0.0, 1.0))), \
        "subtracted hole should be outside"
    assert sdf.intersection(-1.0, 2.0) == 2.0, "intersection is the pointwise max"

    grid = Grid(4, 3)
    gx, gy = grid.coords()
    edge = sdf.domain_edge(grid, gx, gy)
    assert edge.sum() == 4 * 3 - 2, f"only the 2 interior cells are off the edge: {edge.sum()}"
    print("  ✓ SDF primitives correct")


def test_fieldmath_helpers():
    print("Testing float helpers...")
    assert fieldmath.gaussian(3.0, 4.0, 3.0, 4.0, 5.0, 5.0, 2.5) == 2.5, "peak equals amp"
    tw = fieldmath.triangle_wave(np.linspace(0.0, 4.0, 401), 3.0, 2.0)
    assert abs(tw.max() - 3.0) < 1e-6 and abs(tw.min() + 3.0) < 1e-6, "triangle wave spans [-amp, amp]"
    print("  ✓ Float helpers correct")


def test_buffer_ring_rotates_without_copies():
    print("Testing BufferRing...")
    ring = BufferRing(3, (2, 2))
    a, b, c = ring.current, ring.next, ring.previous
    assert len({id(a), id(b), id(c)}) == 3, "three distinct buffers"

    ring.rotate()
    assert ring.current is b, "next becomes current"
    assert ring.previous is a, "current becomes previous"
    assert ring.next is c, "oldest buffer is reused as next"

    pair = BufferRing(2, (2, 2))
    first = pair.current
    pair.rotate()
    pair.rotate()
    assert pair.current is first, "two rotations return to the start"

    with pytest.raises(ValueError):
        BufferRing(1, (2, 2))
    print("  ✓ BufferRing rotates by index")


def test_neighbor_tables():
    minus, plus = clamped_neighbors(4)
    assert list(minus) == [0, 0, 1, 2] and list(plus) == [1, 2, 3, 3]
    minus, plus = wrapped_neighbors(4)
    assert list(minus) == [3, 0, 1, 2] and list(plus) == [1, 2, 3, 0]


def test_non_positive_dimensions_rejected():
    for cls in (WaveField, ReactionDiffusionField, HeatField):
        with pytest.raises(ValueError):
            cls(0, 10)
        with pytest.raises(ValueError):
            cls(10, -1)


def test_wave_courant_clamp():
    """Whatever dt is requested, c*dt/dx stays at or below 0.5."""
    print("Testing wave Courant clamp...")
    field = WaveField(40, 30, workers=1)
    limit = 0.5 * WaveField.DX / 6.0
    for requested in (1e-5, 1e-4, limit, 1e-3, 0.1, 10.0):
        adt = field.iterate(requested)
        assert adt <= requested + 1e-15, f"applied dt {adt} exceeds requested {requested}"
        assert field.max_wave_speed * adt / WaveField.DX <= 0.5 + 1e-9, \
            f"Courant number too large for requested {requested}: {adt}"
    assert field.iterate(1e-4) == 1e-4, "small dt should pass through untouched"
    assert abs(field.iterate(1.0) - limit) < 1e-12, f"large dt should clamp to {limit}"
    assert field.generation == 8
    print("  ✓ Courant clamp holds")


def test_wave_color_modes():
    """signed maps u over [-1, 1], abs maps |u| and energy maps u^2 over [0, 1]."""
    print("Testing wave color modes...")

    def flat(grid, x, y):
        return -0.3

    expected = {
        "signed": colormaps.to_rgb_jet(-1.0, 1.0, -0.3),
        "abs": colormaps.to_rgb_jet(0.0, 1.0, 0.3),
        "energy": colormaps.to_rgb_jet(0.0, 1.0, 0.09),
    }
    for mode in WaveField.COLOR_MODES:
        config = WaveConfig(initial=flat, wave_speed=_speed(1.0))
        field = WaveField(11, 11, dt=0.001, config=config, color_mode=mode, workers=1)
        field.iterate()
        # Flat interior: zero laplacian, so the centre keeps its amplitude
        assert abs(field.amplitude[5, 5] + 0.3) < 1e-6
        assert np.allclose(field.frame()[5, 5], expected[mode], atol=1e-5), \
            f"{mode}: {field.frame()[5, 5]} != {expected[mode]}"
    print("  ✓ Color modes map amplitude correctly")


def test_wave_courant_with_time_varying_speed():
    """Speed is re-read every step, so the clamp tightens as it grows."""
    print("Testing Courant clamp with growing speed...")

    def growing(grid, x, y, t):
        return 6.0 + 1000.0 * t

    field = WaveField(24, 16, config=WaveConfig(wave_speed=growing), workers=1)
    speeds = []
    for _ in range(20):
        t_before = field.t
        adt = field.iterate(1.0)
        assert abs(field.max_wave_speed - (6.0 + 1000.0 * t_before)) < 1e-3, \
            "speed should be evaluated at the start of the step"
        assert field.max_wave_speed * adt / WaveField.DX <= 0.5 + 1e-9, \
            f"Courant number too large at t={t_before}: {adt}"
        speeds.append(field.max_wave_speed)
    assert all(b > a for a, b in zip(speeds, speeds[1:])), f"speed should grow: {speeds}"
    print("  ✓ Clamp follows the current speed")


def test_wave_courant_with_negative_speed():
    """The clamp uses the speed magnitude, since C^2 is sign-blind."""
    def signed_speed(grid, x, y, t):
        return np.where(x < 5, -60.0, 6.0)

    field = WaveField(24, 16, config=WaveConfig(wave_speed=signed_speed), workers=1)
    adt = field.iterate(1.0)
    assert field.max_wave_speed == 60.0, f"max speed magnitude: {field.max_wave_speed}"
    assert 60.0 * adt / WaveField.DX <= 0.5 + 1e-9, f"Courant number too large: {adt}"
    assert np.isfinite(field.amplitude).all()


def test_wave_first_step_half_start():
    """First step uses u + 0.5*C^2*lap(u) since there is no previous state."""
    print("Testing wave first step...")
    config = WaveConfig(initial=_point(10, 10), wave_speed=_speed(1.0))
    field = WaveField(21, 21, dt=0.001, config=config, workers=1)
    adt = field.iterate()
    assert adt == 0.001
    # C^2 = (1 * 0.001 / 0.01)^2 = 0.01
    u = field.amplitude
    assert abs(u[10, 10] - 0.98) < 1e-6, f"centre after first step: {u[10, 10]}"
    assert abs(u[10, 11] - 0.005) < 1e-6, f"neighbor after first step: {u[10, 11]}"
    assert u[10, 12] == 0.0, "field should only spread one cell"
    print("  ✓ Half-step start applied")


def test_wave_walls_are_zero_and_black():
    print("Testing wave walls...")
    field = WaveField(48, 32, workers=1)
    field.step_n(20)
    walls = field.out_of_bounds
    assert walls.any(), "obstacle course should have walls"
    assert walls[0].all() and walls[:, 0].all(), "domain edge is a wall"
    assert np.all(field.amplitude[walls] == 0.0), "walls must hold zero amplitude"
    assert np.all(field.frame()[walls] == 0.0), "walls must render black"
    assert field.color.shape == (3 * 48 * 32,), f"color length: {field.color.shape}"
    assert not field.color.flags.writeable, "color buffer is read-only"
    print("  ✓ Walls zero and black")


def test_wave_boundary_modes():
    """Cached walls are classified once per row; dynamic ones every step."""
    print("Testing wave boundary modes...")

    def widening(grid, x, y, t):
        return x < (2 if t < 0.002 else 5)

    counts = {}
    for mode in WaveField.BOUNDARY_MODES:
        config = WaveConfig(boundary=widening, wave_speed=_speed(1.0))
        field = WaveField(16, 8, dt=0.001, config=config, boundary_mode=mode, workers=1)
        field.step_n(5)
        counts[mode] = set(field.out_of_bounds.sum(axis=1).tolist())
    assert counts["cached"] == {2}, f"cached walls should not change: {counts['cached']}"
    assert counts["dynamic"] == {5}, f"dynamic walls should follow t: {counts['dynamic']}"

    with pytest.raises(ValueError):
        WaveField(8, 8, boundary_mode="sometimes")
    print("  ✓ Boundary modes behave")


def test_wave_source_drives_field():
    config = scenarios.wave_config(initial="empty", source="oscillator", boundary="rect")
    field = WaveField(64, 48, config=config, color_mode="signed", workers=1)
    field.step_n(10)
    assert field.stats["max_amplitude"] > 0.0, "oscillator should excite the field"
    assert np.isfinite(field.amplitude).all()


def test_wave_serial_matches_threaded():
    print("Testing serial vs threaded wave...")
    results = []
    for workers in (1, 4):
        with WaveField(60, 40, workers=workers) as field:
            field.step_n(15)
            results.append((field.amplitude.copy(), np.array(field.color)))
    assert np.array_equal(results[0][0], results[1][0]), "amplitudes differ"
    assert np.array_equal(results[0][1], results[1][1]), "colors differ"
    print("  ✓ Threaded rows match serial")


def test_reaction_diffusion_stays_in_unit_range():
    print("Testing reaction-diffusion bounds...")
    config = scenarios.reaction_diffusion_config(initial="square", feed=0.029, kill=0.057)
    field = ReactionDiffusionField(48, 48, dt=1.0, config=config, workers=1)
    for _ in range(60):
        field.iterate()
        assert 0.0 <= field.u.min() and field.u.max() <= 1.0, "U left [0, 1]"
        assert 0.0 <= field.v.min() and field.v.max() <= 1.0, "V left [0, 1]"
    assert field.stats["mass"] > 0.0, "pattern should survive 60 steps"
    assert abs(field.v_max - float(field.v.max())) < 1e-7, "tracked v_max should match the grid"
    frame = field.frame()
    assert frame.min() >= 0.0 and frame.max() <= 1.0
    print("  ✓ U and V stay in [0, 1]")


def test_reaction_diffusion_blob_and_params():
    field = ReactionDiffusionField(32, 32, workers=1)
    before = float(field.v.sum())
    field.add_blob(16, 16, radius=5)
    assert float(field.v.sum()) > before, "blob should add V"
    seeded = float(field.v.sum())
    field.remove_blob(16, 16, radius=5)
    assert float(field.v.sum()) < seeded, "remove_blob should take V away"
    assert field.v.min() >= 0.0 and field.u.max() <= 1.0
    field.set_params(Du=0.15, display="u")
    assert field.get_params()["Du"] == 0.15
    assert field.get_params()["display"] == "u"
    with pytest.raises(ValueError):
        field.set_params(display="w")


def test_reaction_diffusion_serial_matches_threaded():
    results = []
    for workers in (1, 3):
        config = scenarios.reaction_diffusion_config(initial="center", parameter_map=True)
        with ReactionDiffusionField(40, 30, config=config, workers=workers) as field:
            field.step_n(20)
            results.append(field.v.copy())
    assert np.array_equal(results[0], results[1]), "threaded RD differs from serial"


def test_heat_checkerboard_smooths():
    print("Testing heat diffusion...")
    config = HeatConfig(initial=scenarios.heat_checkerboard(2))
    field = HeatField(16, 16, config=config, workers=1)
    var0 = field.stats["variance"]
    mean0 = field.stats["mean"]
    variances = [var0]
    for _ in range(10):
        field.iterate()
        variances.append(field.stats["variance"])
        T = field.temperature
        assert T.min() >= 0.0 and T.max() <= 1.0, "temperature left [0, 1]"
    assert all(b < a for a, b in zip(variances, variances[1:])), \
        f"variance should fall every step: {variances}"
    assert abs(field.stats["mean"] - mean0) < 1e-4, "insulated walls conserve heat"
    print("  ✓ Checkerboard smooths out")


def test_heat_dt_clamp():
    field = HeatField(8, 8, config=HeatConfig(alpha=10.0), workers=1)
    assert field.iterate(1.0) == 1.0 / 80.0, "dt should clamp to 1/(8*alpha)"
    assert field.iterate(0.001) == 0.001, "small dt passes through"
    assert abs(field.t - (1.0 / 80.0 + 0.001)) < 1e-12

def test_heat_zero_diffusivity():
    """alpha = 0 leaves the plate unchanged and never limits dt."""
    config = HeatConfig(initial=scenarios.heat_checkerboard(2), alpha=0.0)
    field = HeatField(8, 8, config=config, workers=1)
    before = field.temperature.copy()
    assert field.max_stable_dt() == float("inf")
    assert field.iterate(0.1) == 0.1, "dt passes through untouched"
    assert np.array_equal(field.temperature, before), "no diffusion without alpha"

    other = HeatField(8, 8, workers=1)
    other.set_params(alpha=0)
    assert other.iterate(0.5) == 0.5



if __name__ == "__main__":
    print("\n=== Testing Field Engines ===\n")

    test_jet_endpoints()
    test_vectorized_colormaps_match_scalar()
    test_sdf_primitives()
    test_fieldmath_helpers()
    test_buffer_ring_rotates_without_copies()
    test_neighbor_tables()
    test_non_positive_dimensions_rejected()
    test_wave_courant_clamp()
    test_wave_color_modes()
    test_wave_courant_with_time_varying_speed()
    test_wave_courant_with_negative_speed()
    test_wave_first_step_half_start()
    test_wave_walls_are_zero_and_black()
    test_wave_boundary_modes()
    test_wave_source_drives_field()
    test_wave_serial_matches_threaded()
    test_reaction_diffusion_stays_in_unit_range()
    test_reaction_diffusion_blob_and_params()
    test_reaction_diffusion_serial_matches_threaded()
    test_heat_checkerboard_smooths()
    test_heat_dt_clamp()
    test_heat_zero_diffusivity()

    print("\n✓ All tests passed!\n")
