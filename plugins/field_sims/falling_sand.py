"""
Falling-Sand Cellular Automaton

Discrete material grid (sand, water, gas, plant, fire, walls) updated in
a single sequential pass, row-major, top row first. Movement is a swap
between two cells. The destination of a swap is flagged as moved and is
skipped when the scan reaches it, so nothing moves twice in one pass.

The pass reads and writes across row boundaries, so unlike the stencil
engines it never fans out over threads.

Brush:
    field.next_material()          # cycle NONE -> BOUND -> ... -> FIRE -> NONE
    field.draw_material(x, y)      # paint a disc of brush_radius cells
    field.move_cursor(x, y)        # cursor preview only

Cells under the cursor are drawn as a 50/50 blend of their own color and
the paint color; the preview never changes the grid.
"""

import numpy as np

from . import scenarios
from .engine_base import FieldEngine
from .materials import (
    ACTIVE, CONVERT, MATERIAL_ORDER, OUTSIDE, PALETTE, RULES, SWAP, Material,
)


class FallingSandField(FieldEngine):

    engine_name = "falling_sand"
    engine_label = "Falling Sand"

    def __init__(self, nx, ny, dt=0.1, config=None, seed=None,
                 brush_radius=2, material=Material.SAND, workers=1):
        """
        Args:
            nx, ny: Grid dimensions
            dt: Reported timestep (the automaton itself is unitless)
            config: SandConfig with the initial layout
            seed: Seed for the field's random generator
            brush_radius: Paint radius in cells
            material: Initial paint material
            workers: Unused, the pass is always sequential
        """
        super().__init__(nx, ny, dt, workers=workers)
        self.config = config if config is not None else scenarios.sand_config()
        self.rng = np.random.default_rng(seed)
        self.brush_radius = brush_radius
        self.material = Material(material)
        self.cursor = None

        self._cells = np.zeros(self.grid.shape, dtype=np.int8)
        self._moved = np.zeros(self.grid.shape, dtype=bool)

        x, y = self.grid.coords()
        self._cells[:] = np.broadcast_to(
            self.config.initial(self.grid, x, y), self.grid.shape)
        self._render()

    # --- Brush ---

    def next_material(self):
        """Cycle the paint material, wrapping from the last back to NONE."""
        i = MATERIAL_ORDER.index(self.material)
        self.material = MATERIAL_ORDER[(i + 1) % len(MATERIAL_ORDER)]
        return self.material

    def move_cursor(self, x, y):
        self.cursor = (float(x), float(y))
        self._render()

    def _brush_mask(self, cx, cy):
        Y, X = np.ogrid[:self.ny, :self.nx]
        return (X - cx) ** 2 + (Y - cy) ** 2 <= self.brush_radius ** 2

    def draw_material(self, x, y):
        """Paint the active material in a disc around (x, y)."""
        self.cursor = (float(x), float(y))
        self._cells[self._brush_mask(x, y)] = self.material
        self._render()

    # --- Grid access for scripted setups ---

    @property
    def cells(self):
        """Read-only view of the material grid (ny, nx)."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def set_cell(self, x, y, material):
        self._cells[y, x] = Material(material)
        self._render()

    def set_cells(self, cells):
        self._cells[:] = np.asarray(cells, dtype=np.int8)
        self._render()

    def counts(self):
        """Number of cells per material name."""
        n = np.bincount(self._cells.ravel(), minlength=len(MATERIAL_ORDER))
        return {m.name: int(n[m]) for m in MATERIAL_ORDER}

    # --- Simulation ---

    def _neighborhood(self, x, y):
        cells = self._cells
        nx, ny = self.nx, self.ny
        rows = []
        for yy in (y - 1, y, y + 1):
            if yy < 0 or yy >= ny:
                rows.append((OUTSIDE, OUTSIDE, OUTSIDE))
                continue
            r = cells[yy]
            rows.append(tuple(int(r[xx]) if 0 <= xx < nx else OUTSIDE
                              for xx in (x - 1, x, x + 1)))
        return tuple(rows)

    def _apply(self, x, y, effects):
        cells = self._cells
        for effect in effects:
            tx = x + effect[1]
            ty = y + effect[2]
            if effect[0] == SWAP:
                cells[y, x], cells[ty, tx] = cells[ty, tx], cells[y, x]
                self._moved[ty, tx] = True
            elif effect[0] == CONVERT:
                cells[ty, tx] = effect[3]
                if (tx, ty) != (x, y):
                    self._moved[ty, tx] = True

    def _advance(self, dt):
        cells = self._cells
        moved = self._moved
        moved[:] = False

        # Only cells active at the start of the pass can act. Anything that
        # becomes active later in scan order got there as a flagged
        # destination and would be skipped anyway.
        ys, xs = np.nonzero(np.isin(cells, ACTIVE))
        draws = self.rng.random(len(ys))

        for y, x, u in zip(ys.tolist(), xs.tolist(), draws.tolist()):
            if moved[y, x]:
                moved[y, x] = False
                continue
            entry = RULES.get(int(cells[y, x]))
            if entry is None:
                continue
            n_choices, rule = entry
            effects = rule(self._neighborhood(x, y), int(u * n_choices))
            if effects:
                self._apply(x, y, effects)

        self._render()
        return dt

    def _render(self):
        rgb = self._rgb
        np.take(PALETTE, self._cells, axis=0, out=rgb)
        if self.cursor is not None:
            mask = self._brush_mask(*self.cursor)
            rgb[mask] = 0.5 * rgb[mask] + 0.5 * PALETTE[self.material]

    def clear(self):
        self._cells[:] = Material.NONE
        self._moved[:] = False
        self.t = 0.0
        self.generation = 0
        self._render()

    def get_params(self):
        return {
            "material": self.material.name,
            "brush_radius": self.brush_radius,
        }

    def set_params(self, material=None, brush_radius=None, **_kw):
        if material is not None:
            self.material = Material[material] if isinstance(material, str) else Material(material)
        if brush_radius is not None:
            self.brush_radius = int(brush_radius)

    @property
    def stats(self):
        counts = self.counts()
        occupied = self._cells.size - counts["NONE"]
        return {
            "generation": self.generation,
            "t": self.t,
            "occupied_pct": occupied / self._cells.size * 100,
            **{k.lower(): v for k, v in counts.items()},
        }
