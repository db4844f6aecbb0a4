"""
Heat Diffusion Engine

Explicit Euler step of the heat equation with edge-clamped neighbors
(insulated walls):

    T' = clamp01(T + dt * alpha * (sum(neighbors) - 4 * T))

The scheme is only stable for dt <= 1 / (8 * alpha), so larger requested
timesteps are cut down to that bound and the applied dt is returned.
"""

import numpy as np

from . import scenarios
from .colormaps import get_colormap
from .engine_base import FieldEngine
from .grid import BufferRing, clamped_neighbors


class HeatField(FieldEngine):

    engine_name = "heat"
    engine_label = "Heat Diffusion"

    def __init__(self, nx, ny, dt=0.1, config=None, colormap="jet", workers=None):
        super().__init__(nx, ny, dt, workers=workers)
        self.config = config if config is not None else scenarios.heat_config()
        self.alpha = float(self.config.alpha)
        self._cmap = get_colormap(colormap)

        self._T = BufferRing(2, self.grid.shape)
        self._xm, self._xp = clamped_neighbors(self.nx)
        self._step_dt = 0.0

        x, y = self.grid.coords()
        self._T.current[:] = np.clip(
            np.broadcast_to(self.config.initial(self.grid, x, y), self.grid.shape),
            0.0, 1.0)
        self._cmap(self._T.current, 0.0, 1.0, out=self._rgb)

    def max_stable_dt(self):
        """Largest stable dt, 1 / (8 * alpha). Unbounded when alpha <= 0."""
        if self.alpha <= 0:
            return float("inf")
        return 1.0 / (8.0 * self.alpha)

    def _advance(self, dt):
        dt = min(dt, self.max_stable_dt())
        self._step_dt = dt
        self.pool.run(self._update_row, self.ny)
        self._T.rotate()
        return dt

    def _update_row(self, y):
        T = self._T.current
        row = T[y]
        lap = (T[max(y - 1, 0)] + T[min(y + 1, self.ny - 1)]
               + row[self._xm] + row[self._xp] - 4.0 * row)
        out = self._T.next[y]
        np.clip(row + lap * (self._step_dt * self.alpha), 0.0, 1.0, out=out)
        self._cmap(out, 0.0, 1.0, out=self._rgb[y])

    @property
    def temperature(self):
        return self._T.current

    def add_blob(self, cx, cy, radius=15, value=0.8):
        """Heat up a disc around (cx, cy)."""
        np.clip(self._T.current + self._blob(cx, cy, radius) * np.float32(value),
                0.0, 1.0, out=self._T.current)

    def get_params(self):
        return {"alpha": self.alpha}

    def set_params(self, alpha=None, **_kw):
        if alpha is not None:
            self.alpha = float(alpha)

    @property
    def stats(self):
        T = self._T.current
        return {
            "generation": self.generation,
            "t": self.t,
            "mean": float(T.mean()),
            "variance": float(T.astype(np.float64).var()),
            "max": float(T.max()),
        }
