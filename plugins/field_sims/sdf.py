"""
Signed-Distance Primitives

Each primitive returns the signed distance from (x, y) to the shape's
boundary: negative inside, zero on the boundary, positive outside.
Primitives compose with ``union`` (pointwise min) into compound obstacle
geometry. Inputs may be numpy arrays of any broadcastable shape.
"""

import numpy as np


def circle(x, y, cx, cy, r):
    """Circle of radius r centred on (cx, cy)."""
    return np.sqrt((x - cx) ** 2 + (y - cy) ** 2) - r


def rect(x, y, cx, cy, half_w, half_h):
    """Axis-aligned rectangle centred on (cx, cy) with half extents."""
    qx = np.abs(x - cx) - half_w
    qy = np.abs(y - cy) - half_h
    outside = np.sqrt(np.maximum(qx, 0.0) ** 2 + np.maximum(qy, 0.0) ** 2)
    inside = np.minimum(np.maximum(qx, qy), 0.0)
    return outside + inside


def union(d1, d2, *more):
    """Union of any number of distance fields."""
    d = np.minimum(d1, d2)
    for extra in more:
        d = np.minimum(d, extra)
    return d


def intersection(d1, d2):
    return np.maximum(d1, d2)


def subtract(d1, d2):
    """Shape d1 with shape d2 cut out of it."""
    return np.maximum(d1, -d2)


def inside(d):
    """Boolean mask of points strictly inside a distance field."""
    return np.asarray(d) < 0


def domain_edge(grid, x, y):
    """True on the outermost ring of cells of the grid."""
    return (x == 0) | (x == grid.nx - 1) | (y == 0) | (y == grid.ny - 1)
