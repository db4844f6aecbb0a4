"""
Configuration structs for the field models.

A scenario is a bundle of named pure functions handed to a field at
construction. Swapping a scenario means swapping the struct; solvers
never get subclassed for it.

Every function receives the ``Grid`` (nx, ny, dx) and numpy coordinate
arrays ``x``, ``y`` (cell indices, any broadcastable shape). Functions
may return a scalar where the value is uniform; solvers broadcast it.

    WaveConfig
      initial(grid, x, y)              -> amplitude
      source(grid, x, y, t)            -> forcing term
      boundary(grid, x, y, t)          -> bool, True = reflecting wall
      wave_speed(grid, x, y, t)        -> local wave speed

    ReactionDiffusionConfig
      initial(grid, x, y)              -> (u, v)
      feed(grid, x, y, u, v, t)        -> F
      kill(grid, x, y, u, v, t)        -> K
      reaction(grid, x, y, u, v, t)    -> R(u, v)

    HeatConfig
      initial(grid, x, y)              -> temperature in [0, 1]

    SandConfig
      initial(grid, x, y)              -> Material values
"""

from dataclasses import dataclass, field
from typing import Callable

import numpy as np


def _zero(grid, x, y, *_):
    return 0.0


def _edges(grid, x, y, t):
    return (x == 0) | (x == grid.nx - 1) | (y == 0) | (y == grid.ny - 1)


def _uniform_speed(grid, x, y, t):
    return 6.0


def _gray_scott(grid, x, y, u, v, t):
    return u * v * v


def _rd_empty(grid, x, y):
    return np.ones(np.shape(x), dtype=np.float32), np.zeros(np.shape(x), dtype=np.float32)


def _const(value):
    def f(grid, x, y, u, v, t):
        return value
    return f


@dataclass
class WaveConfig:
    initial: Callable = _zero
    source: Callable = _zero
    boundary: Callable = _edges
    wave_speed: Callable = _uniform_speed


@dataclass
class ReactionDiffusionConfig:
    initial: Callable = _rd_empty
    feed: Callable = field(default_factory=lambda: _const(0.037))
    kill: Callable = field(default_factory=lambda: _const(0.060))
    reaction: Callable = _gray_scott
    Du: float = 0.2097
    Dv: float = 0.105


@dataclass
class HeatConfig:
    initial: Callable = _zero
    alpha: float = 10.018    # thermal diffusivity of water


@dataclass
class SandConfig:
    initial: Callable = _zero
