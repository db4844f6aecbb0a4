"""
Float helpers shared by scenario functions.

All helpers accept numpy arrays as well as plain floats and broadcast.
"""

import numpy as np


def dist(x, y, cx, cy):
    """Euclidean distance from (x, y) to (cx, cy)."""
    return np.sqrt((x - cx) ** 2 + (y - cy) ** 2)


def gaussian(x, y, x0, y0, sigmax, sigmay, amp):
    """Gaussian bump of the form a * exp(-((x-x0)^2/(2*sx) + (y-y0)^2/(2*sy))).

    Args:
        x, y: evaluation coordinates
        x0, y0: peak position
        sigmax, sigmay: width of the bump along each axis
        amp: value at the peak
    """
    xd = (x - x0) ** 2 / (2.0 * sigmax)
    yd = (y - y0) ** 2 / (2.0 * sigmay)
    return amp * np.exp(-(xd + yd))


def triangle_wave(t, amp, period):
    """Symmetric triangle wave in [-amp, amp] with the given period."""
    return (4.0 * amp / period) * np.abs(
        np.mod(t - period / 4.0, period) - period / 2.0) - amp

