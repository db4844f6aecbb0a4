"""
Grid geometry and fixed-size buffer arenas.

``BufferRing`` holds N same-shaped arrays allocated once. Solvers read
``current`` / ``previous`` and write ``next``; ``rotate()`` then shifts
the roles by advancing an integer index, so no buffer is ever copied or
reallocated after construction.

    ring = BufferRing(3, (ny, nx))
    ring.next[:] = f(ring.current, ring.previous)
    ring.rotate()     # previous <- current, current <- next
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Grid:
    """Geometry passed to every configuration function."""
    nx: int
    ny: int
    dx: float = 1.0

    @property
    def shape(self):
        return (self.ny, self.nx)

    def coords(self):
        """Full-grid (x, y) integer coordinate arrays, each (ny, nx)."""
        y, x = np.mgrid[:self.ny, :self.nx]
        return x, y


class BufferRing:
    """Arena of ``size`` same-shaped arrays rotated by index."""

    def __init__(self, size, shape, dtype=np.float32, fill=0):
        if size < 2:
            raise ValueError("BufferRing needs at least 2 buffers")
        self.size = size
        self.buffers = [np.full(shape, fill, dtype=dtype) for _ in range(size)]
        self.index = 0

    def _at(self, offset):
        return self.buffers[(self.index + offset) % self.size]

    @property
    def current(self):
        return self._at(0)

    @property
    def next(self):
        return self._at(1)

    @property
    def previous(self):
        # With 2 buffers "previous" and "next" share a slot
        return self._at(-1)

    def rotate(self):
        """Make ``next`` current. Previous current becomes ``previous``."""
        self.index = (self.index + 1) % self.size

    def fill(self, value):
        for buf in self.buffers:
            buf[:] = value


def clamped_neighbors(n):
    """Index arrays (minus, plus) clamped to [0, n-1]."""
    idx = np.arange(n)
    return np.maximum(idx - 1, 0), np.minimum(idx + 1, n - 1)


def wrapped_neighbors(n):
    """Index arrays (minus, plus) wrapping around a torus."""
    idx = np.arange(n)
    return (idx - 1) % n, (idx + 1) % n
