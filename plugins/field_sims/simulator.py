"""
FieldSimulator - headless driver core

Builds a field engine from a preset and ticks it the way a display loop
would: once per frame, either with a fixed timestep or with the
wall-clock delta since the last frame. Accumulates simulated time from
the dt each step actually applied, and hands out frames for upload.

Usage:
    from field_sims.simulator import FieldSimulator
    sim = FieldSimulator("obstacles")
    sim.tick()                 # one step, fixed dt
    frame = sim.frame()        # (ny, nx, 3) float32 [0, 1]
"""

import time

from . import scenarios
from .falling_sand import FallingSandField
from .heat import HeatField
from .presets import get_preset
from .reaction_diffusion import ReactionDiffusionField
from .wave import WaveField


# Engine class registry
ENGINE_CLASSES = {
    "wave": WaveField,
    "reaction_diffusion": ReactionDiffusionField,
    "falling_sand": FallingSandField,
    "heat": HeatField,
}


def create_engine(preset, size=None, seed=None, workers=None):
    """Create a new engine instance from a preset dict.

    Args:
        preset: preset dict (see presets.PRESETS)
        size: (nx, ny) overriding the preset's default grid
        seed: random seed (falling sand only)
        workers: row threads for the stencil engines
    """
    engine_name = preset["engine"]
    if engine_name not in ENGINE_CLASSES:
        raise ValueError(f"Unknown engine: {engine_name!r}. "
                         f"Supported: {list(ENGINE_CLASSES.keys())}")
    cls = ENGINE_CLASSES[engine_name]
    nx, ny = size or preset.get("size", (320, 180))
    dt = preset.get("fixed_dt", 0.1)

    if engine_name == "wave":
        config = scenarios.wave_config(
            initial=preset.get("initial", "rings"),
            source=preset.get("source", "none"),
            boundary=preset.get("boundary", "obstacles"),
            speed=preset.get("speed", "uniform"),
        )
        return cls(
            nx, ny, dt, config=config,
            color_mode=preset.get("color_mode", "abs"),
            boundary_mode=preset.get("boundary_mode", "cached"),
            damping=preset.get("damping", 0.0),
            workers=workers,
        )
    elif engine_name == "reaction_diffusion":
        config = scenarios.reaction_diffusion_config(
            initial=preset.get("initial", "center"),
            feed=preset.get("feed", 0.037),
            kill=preset.get("kill", 0.060),
            Du=preset.get("Du", 0.2097),
            Dv=preset.get("Dv", 0.105),
            contained=preset.get("contained", False),
            parameter_map=preset.get("parameter_map", False),
        )
        return cls(
            nx, ny, dt, config=config,
            display=preset.get("display", "v"),
            workers=workers,
        )
    elif engine_name == "falling_sand":
        return cls(
            nx, ny, dt,
            config=scenarios.sand_config(preset.get("initial", "box")),
            seed=seed,
            brush_radius=preset.get("brush_radius", 2),
        )
    else:
        config = scenarios.heat_config(
            initial=preset.get("initial", "grid"),
            alpha=preset.get("alpha", 10.018),
        )
        return cls(nx, ny, dt, config=config, workers=workers)


class FieldSimulator:
    """Owns one engine and drives it tick by tick."""

    def __init__(self, preset_key="obstacles", size=None, fixed_dt=True,
                 seed=None, workers=None):
        """
        Args:
            preset_key: name in presets.PRESETS
            size: optional (nx, ny) grid override
            fixed_dt: True ticks with the preset's fixed dt, False with the
                wall-clock time since the previous tick
            seed: random seed for stochastic engines
            workers: row threads for the stencil engines
        """
        preset = get_preset(preset_key)
        if preset is None:
            raise ValueError(f"Unknown preset: {preset_key!r}")
        self.preset_key = preset_key
        self.preset = preset
        self.fixed_dt = fixed_dt
        self.engine = create_engine(preset, size=size, seed=seed, workers=workers)
        self.sim_time = 0.0
        self.paused = False
        self._last_time = None

    @property
    def engine_name(self):
        return self.preset["engine"]

    def tick(self, elapsed=None):
        """Advance the engine by one step.

        Args:
            elapsed: seconds since the last frame, used when fixed_dt is
                False; measured with perf_counter if omitted

        Returns:
            The dt the engine applied, 0.0 while paused.
        """
        now = time.perf_counter()
        if elapsed is None and self._last_time is not None:
            elapsed = now - self._last_time
        self._last_time = now

        if self.paused:
            return 0.0
        if self.fixed_dt or elapsed is None:
            adt = self.engine.iterate()
        else:
            adt = self.engine.iterate(max(elapsed, 1e-6))
        self.sim_time += adt
        return adt

    def run(self, steps):
        """Tick `steps` times. Returns the simulated time covered."""
        start = self.sim_time
        for _ in range(steps):
            self.tick()
        return self.sim_time - start

    def frame(self):
        """Current (ny, nx, 3) float32 color frame."""
        return self.engine.frame()

    def paint(self, x, y):
        """Brush input: paint material (sand) or add a blob (others)."""
        if isinstance(self.engine, FallingSandField):
            self.engine.draw_material(x, y)
        else:
            self.engine.add_blob(x, y, radius=max(3, self.engine.nx // 40))

    def cycle_material(self):
        """Switch to the next paint material (sand only). Returns it or None."""
        if isinstance(self.engine, FallingSandField):
            return self.engine.next_material()
        return None

    @property
    def stats(self):
        return {"preset": self.preset_key, "sim_time": self.sim_time,
                **self.engine.stats}

    def close(self):
        self.engine.close()
