"""
Reaction-Diffusion Engine

Two chemical species (U, V) react and diffuse on a toroidal grid:
  U + 2V -> 3V  (autocatalytic reaction, the default R = U*V^2)
  U is continuously fed in, V is continuously removed.

Equations (explicit Euler, 4-neighbor laplacian sum(nb) - 4*center):
  U' = clamp01(U + dt * (Du * lap(U) - R + F * (1 - U)))
  V' = clamp01(V + dt * (Dv * lap(V) + R - (F + K) * V))

F, K and R are per-cell functions of position, state and time supplied
by a ReactionDiffusionConfig. Both species are clamped to [0, 1] every
step to keep a too-large dt from running away; the dt itself is trusted.

References:
  Pearson, "Complex Patterns in a Simple System" (1993)
  Karl Sims, RD Tool (karlsims.com/rdtool.html)
"""

import numpy as np

from . import scenarios
from .colormaps import get_colormap
from .engine_base import FieldEngine
from .grid import BufferRing, wrapped_neighbors


class ReactionDiffusionField(FieldEngine):

    engine_name = "reaction_diffusion"
    engine_label = "Reaction-Diffusion"

    DISPLAY_CHANNELS = ("u", "v")

    def __init__(self, nx, ny, dt=1.0, config=None, display="v",
                 colormap="jet", workers=None):
        """
        Args:
            nx, ny: Grid dimensions
            dt: Default timestep (Du * dt <= 0.25 keeps diffusion stable)
            config: ReactionDiffusionConfig (defaults to a centred blob)
            display: Species shown in the color buffer, "u" or "v"
            colormap: Name of a colormap in colormaps.COLORMAPS
            workers: Row threads (1 = run rows inline)
        """
        if display not in self.DISPLAY_CHANNELS:
            raise ValueError(f"display must be one of {self.DISPLAY_CHANNELS}")
        super().__init__(nx, ny, dt, workers=workers)
        self.config = (config if config is not None
                       else scenarios.reaction_diffusion_config())
        self.display = display
        self._cmap = get_colormap(colormap)

        shape = self.grid.shape
        self._u = BufferRing(2, shape, fill=1.0)
        self._v = BufferRing(2, shape)

        self._xm, self._xp = wrapped_neighbors(self.nx)
        self._row_x = np.arange(self.nx)
        # Per-row extrema, reduced after every step
        self._row_u_min = np.ones(self.ny, dtype=np.float32)
        self._row_v_max = np.zeros(self.ny, dtype=np.float32)
        self._step_dt = 0.0
        self._step_t = 0.0
        self._lo, self._hi = 0.0, 1.0

        x, y = self.grid.coords()
        u0, v0 = self.config.initial(self.grid, x, y)
        self._u.current[:] = np.clip(np.broadcast_to(u0, shape), 0.0, 1.0)
        self._v.current[:] = np.clip(np.broadcast_to(v0, shape), 0.0, 1.0)
        self.u_min = float(self._u.current.min())
        self.v_max = float(self._v.current.max())
        self._render_initial()

    def _display_range(self):
        if self.display == "v":
            lo, hi = 0.0, self.v_max
        else:
            lo, hi = self.u_min, 1.0
        if hi <= lo:
            return 0.0, 1.0
        return lo, hi

    def _render_initial(self):
        lo, hi = self._display_range()
        src = self._v.current if self.display == "v" else self._u.current
        self._cmap(src, lo, hi, out=self._rgb)

    def _advance(self, dt):
        self._step_dt = dt
        self._step_t = self.t + dt
        # Colors use the extrema of the state being read
        self._lo, self._hi = self._display_range()
        self.pool.run(self._update_row, self.ny)
        self._u.rotate()
        self._v.rotate()
        self.u_min = float(self._row_u_min.min())
        self.v_max = float(self._row_v_max.max())
        return dt

    def _update_row(self, y):
        cfg = self.config
        grid = self.grid
        dt = self._step_dt
        t = self._step_t
        U = self._u.current
        V = self._v.current
        ym = (y - 1) % self.ny
        yp = (y + 1) % self.ny

        u = U[y]
        v = V[y]
        lap_u = U[ym] + U[yp] + u[self._xm] + u[self._xp] - 4.0 * u
        lap_v = V[ym] + V[yp] + v[self._xm] + v[self._xp] - 4.0 * v

        x = self._row_x
        yy = np.full(self.nx, y)
        r = cfg.reaction(grid, x, yy, u, v, t)
        f = cfg.feed(grid, x, yy, u, v, t)
        k = cfg.kill(grid, x, yy, u, v, t)

        u_next = self._u.next[y]
        v_next = self._v.next[y]
        u_next[:] = np.clip(u + dt * (cfg.Du * lap_u - r + f * (1.0 - u)), 0.0, 1.0)
        v_next[:] = np.clip(v + dt * (cfg.Dv * lap_v + r - (k + f) * v), 0.0, 1.0)

        self._row_u_min[y] = u_next.min()
        self._row_v_max[y] = v_next.max()

        shown = v_next if self.display == "v" else u_next
        self._cmap(shown, self._lo, self._hi, out=self._rgb[y])

    @property
    def u(self):
        return self._u.current

    @property
    def v(self):
        return self._v.current

    def add_blob(self, cx, cy, radius=15, value=0.25):
        """Seed V at (cx, cy), consuming the same amount of U."""
        influence = self._blob(cx, cy, radius) * np.float32(value)
        np.clip(self._v.current + influence, 0, 1, out=self._v.current)
        np.clip(self._u.current - influence, 0, 1, out=self._u.current)

    def remove_blob(self, cx, cy, radius=15):
        """Remove V at (cx, cy), restore U."""
        influence = self._blob(cx, cy, radius)
        np.clip(self._v.current - influence * 0.5, 0, 1, out=self._v.current)
        np.clip(self._u.current + influence * 0.25, 0, 1, out=self._u.current)

    def clear(self):
        self._u.fill(1.0)
        self._v.fill(0.0)
        self.u_min = 1.0
        self.v_max = 0.0
        self.t = 0.0
        self.generation = 0
        self._render_initial()

    def get_params(self):
        return {
            "Du": self.config.Du,
            "Dv": self.config.Dv,
            "display": self.display,
        }

    def set_params(self, Du=None, Dv=None, display=None, **_kw):
        if Du is not None:
            self.config.Du = float(Du)
        if Dv is not None:
            self.config.Dv = float(Dv)
        if display is not None:
            if display not in self.DISPLAY_CHANNELS:
                raise ValueError(f"display must be one of {self.DISPLAY_CHANNELS}")
            self.display = display

    @property
    def stats(self):
        V = self._v.current
        return {
            "generation": self.generation,
            "t": self.t,
            "mass": float(V.sum()),
            "u_min": self.u_min,
            "v_max": self.v_max,
            "alive_pct": float((V > 0.01).sum()) / V.size * 100,
        }
