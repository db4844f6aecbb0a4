"""
Colormaps for Field Visualization

Maps scalar values in a [min, max] range to RGB float triples in [0, 1].
Each map exists twice: a scalar form (``to_rgb_jet``) that returns a
tuple, and a vectorized form (``jet``) that fills an (..., 3) float32
array. Both forms produce identical values.

Jet breakpoints sit at 0.125 / 0.375 / 0.625 / 0.875 of the range:
dark blue -> blue -> cyan -> yellow -> red -> dark red.
"""

import numpy as np


def clamp(minv, maxv, v):
    """Return maxv if v > maxv, minv if v < minv, v otherwise."""
    return maxv if v > maxv else minv if v < minv else v


def _normalize(minv, maxv, val):
    """Clamp val to [minv, maxv] and rescale to [0, 1].

    A zero-width range maps everything to 0.
    """
    dif = maxv - minv
    if dif <= 0:
        return 0.0
    return (clamp(minv, maxv, val) - minv) / dif


def _normalize_array(values, minv, maxv):
    dif = maxv - minv
    if dif <= 0:
        return np.zeros(np.shape(values), dtype=np.float32)
    s = np.clip(np.asarray(values, dtype=np.float32), minv, maxv)
    s -= minv
    s /= dif
    return s


def _output(shape, out):
    if out is None:
        return np.empty(tuple(shape) + (3,), dtype=np.float32)
    return out


# --- Scalar forms ---

def to_rgb_jet(minv, maxv, val):
    """Jet color for a single value. Returns (r, g, b)."""
    s = _normalize(minv, maxv, val)
    if s < 0.125:
        return (0.0, 0.0, 4.0 * s + 0.5)
    if s < 0.375:
        return (0.0, 4.0 * (s - 0.125), 1.0)
    if s < 0.625:
        return (4.0 * (s - 0.375), 1.0, 1.0 - 4.0 * (s - 0.375))
    if s < 0.875:
        return (1.0, 1.0 - 4.0 * (s - 0.625), 0.0)
    return (1.0 - 4.0 * (s - 0.875), 0.0, 0.0)


def to_rgb(minv, maxv, val):
    """Four-segment rainbow: blue -> cyan -> green -> yellow -> red."""
    s = _normalize(minv, maxv, val)
    if s < 0.25:
        return (0.0, 4.0 * s, 1.0)
    if s < 0.5:
        return (0.0, 1.0, 1.0 - 4.0 * (s - 0.25))
    if s < 0.75:
        return (4.0 * (s - 0.5), 1.0, 0.0)
    return (1.0, 1.0 - 4.0 * (s - 0.75), 0.0)


def to_bw(minv, maxv, val):
    """Grayscale ramp."""
    s = _normalize(minv, maxv, val)
    return (s, s, s)


# --- Vectorized forms ---

def jet(values, minv, maxv, out=None):
    """
    Apply the jet colormap to an array.

    Args:
        values: array of any shape
        minv, maxv: value range mapped onto the colormap
        out: optional preallocated (..., 3) float32 array

    Returns:
        (..., 3) float32 RGB array
    """
    s = _normalize_array(values, minv, maxv)
    out = _output(s.shape, out)
    r = out[..., 0]
    g = out[..., 1]
    b = out[..., 2]

    seg0 = s < 0.125
    seg1 = (s >= 0.125) & (s < 0.375)
    seg2 = (s >= 0.375) & (s < 0.625)
    seg3 = (s >= 0.625) & (s < 0.875)
    seg4 = s >= 0.875

    r[...] = np.select([seg2, seg3, seg4],
                       [4.0 * (s - 0.375), 1.0, 1.0 - 4.0 * (s - 0.875)], 0.0)
    g[...] = np.select([seg1, seg2, seg3],
                       [4.0 * (s - 0.125), 1.0, 1.0 - 4.0 * (s - 0.625)], 0.0)
    b[...] = np.select([seg0, seg1, seg2],
                       [4.0 * s + 0.5, 1.0, 1.0 - 4.0 * (s - 0.375)], 0.0)
    return out


def rainbow(values, minv, maxv, out=None):
    """Vectorized ``to_rgb``."""
    s = _normalize_array(values, minv, maxv)
    out = _output(s.shape, out)
    seg0 = s < 0.25
    seg1 = (s >= 0.25) & (s < 0.5)
    seg2 = (s >= 0.5) & (s < 0.75)
    seg3 = s >= 0.75
    out[..., 0] = np.select([seg2, seg3], [4.0 * (s - 0.5), 1.0], 0.0)
    out[..., 1] = np.select([seg0, seg3], [4.0 * s, 1.0 - 4.0 * (s - 0.75)], 1.0)
    out[..., 2] = np.select([seg0, seg1], [1.0, 1.0 - 4.0 * (s - 0.25)], 0.0)
    return out


def gray(values, minv, maxv, out=None):
    """Vectorized ``to_bw``."""
    s = _normalize_array(values, minv, maxv)
    out = _output(s.shape, out)
    out[...] = s[..., None]
    return out


# Registry of all colormaps
COLORMAPS = {
    "jet": jet,
    "rainbow": rainbow,
    "gray": gray,
}

COLORMAP_ORDER = list(COLORMAPS.keys())


def get_colormap(name):
    """Get a vectorized colormap function by name."""
    try:
        return COLORMAPS[name]
    except KeyError:
        raise ValueError(
            f"Unknown colormap {name!r}, expected one of {COLORMAP_ORDER}"
        ) from None
