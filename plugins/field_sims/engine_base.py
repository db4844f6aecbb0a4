"""
Abstract Base Class for Field Engines

All field models (wave, reaction-diffusion, falling sand, heat) implement
this interface so a driver can construct, iterate and display any of
them interchangeably:

    field = WaveField(320, 180)
    adt = field.iterate(0.01)      # timestep actually applied
    upload(field.color)            # flat RGB floats, 3 * nx * ny

Grids are (ny, nx) numpy arrays indexed [y, x]. The color buffer is a
flat float32 array with the RGB triple of cell (x, y) at 3 * (x + y * nx).
"""

from abc import ABC, abstractmethod

import numpy as np

from .grid import Grid
from .parallel import RowPool


class FieldEngine(ABC):
    """Base class for uniform-grid field engines."""

    engine_name = ""   # e.g. "wave", "heat"
    engine_label = ""  # e.g. "Wave Equation"

    def __init__(self, nx, ny, dt=0.1, dx=1.0, workers=None):
        if int(nx) <= 0 or int(ny) <= 0:
            raise ValueError(f"grid dimensions must be positive, got {nx}x{ny}")
        self._nx = int(nx)
        self._ny = int(ny)
        self.grid = Grid(self._nx, self._ny, dx)
        self.dt = float(dt)
        self.t = 0.0
        self.generation = 0

        self._color = np.zeros(3 * self._nx * self._ny, dtype=np.float32)
        # Row-major (ny, nx, 3) view over the same memory
        self._rgb = self._color.reshape(self._ny, self._nx, 3)
        self._color_view = self._color.view()
        self._color_view.flags.writeable = False

        self.pool = RowPool(workers)

    @property
    def nx(self):
        return self._nx

    @property
    def ny(self):
        return self._ny

    @property
    def color(self):
        """Read-only flat RGB buffer, length 3 * nx * ny."""
        return self._color_view

    def frame(self):
        """Read-only (ny, nx, 3) view of the color buffer."""
        return self._color_view.reshape(self._ny, self._nx, 3)

    def iterate(self, dt=None):
        """Advance exactly one step.

        Args:
            dt: requested timestep, defaults to the field's fixed dt

        Returns:
            The timestep actually applied (may be smaller than requested
            when the model clamps for stability).
        """
        requested = self.dt if dt is None else float(dt)
        adt = self._advance(requested)
        self.t += adt
        self.generation += 1
        return adt

    @abstractmethod
    def _advance(self, dt):
        """Compute one step with the requested dt. Returns the applied dt."""

    def step_n(self, n, dt=None):
        """Advance n steps. Returns the total simulated time."""
        total = 0.0
        for _ in range(n):
            total += self.iterate(dt)
        return total

    def add_blob(self, cx, cy, radius=15, value=0.8):
        """Add matter at (cx, cy) with a smooth falloff. Engines override."""
        raise NotImplementedError(f"{self.engine_label} does not support blobs")

    def _blob(self, cx, cy, radius):
        """Smooth (ny, nx) falloff mask, 1 at the centre and 0 past radius."""
        Y, X = np.ogrid[:self._ny, :self._nx]
        dist = np.sqrt((X - cx) ** 2 + (Y - cy) ** 2)
        return (np.clip(1.0 - dist / radius, 0, 1) ** 2).astype(np.float32)

    @abstractmethod
    def get_params(self):
        """Return dict of current scalar parameter values."""

    @abstractmethod
    def set_params(self, **params):
        """Update scalar parameters."""

    @property
    def stats(self):
        """Return current field statistics."""
        return {
            "generation": self.generation,
            "t": self.t,
        }

    def close(self):
        """Release worker threads."""
        self.pool.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
