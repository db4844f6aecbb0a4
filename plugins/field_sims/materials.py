"""
Falling-Sand Materials and Transition Rules

Each movable material has a rule: a pure function from its 3x3
neighborhood and a random choice to a tuple of effects. The automaton's
scan loop applies the effects; the rules never touch the grid, so they
can be tested in isolation.

Neighborhood: ``nb[dy + 1][dx + 1]`` is the material at offset (dx, dy),
with y growing downwards, so ``nb[2][1]`` is the cell below. Cells off the
grid read as OUTSIDE and never match a target set.

Effects:
    (SWAP, dx, dy)              exchange self with the cell at (dx, dy)
    (CONVERT, dx, dy, material) overwrite the cell at (dx, dy)
"""

import enum

import numpy as np


class Material(enum.IntEnum):
    NONE = 0
    BOUND = 1
    SAND = 2
    GAS = 3
    WATER = 4
    PLANT = 5
    FIRE = 6


MATERIAL_ORDER = list(Material)

OUTSIDE = -1

SWAP = "swap"
CONVERT = "convert"

# RGB per material, indexed by Material value
PALETTE = np.array([
    [0.00, 0.00, 0.00],   # NONE
    [0.20, 0.20, 0.20],   # BOUND
    [0.85, 0.80, 0.05],   # SAND
    [0.40, 0.70, 0.80],   # GAS
    [0.20, 0.40, 1.00],   # WATER
    [0.35, 0.85, 0.20],   # PLANT
    [0.95, 0.25, 0.00],   # FIRE
], dtype=np.float32)

SAND_TARGETS = frozenset({Material.NONE, Material.WATER, Material.GAS})
GAS_RISE_TARGETS = frozenset({Material.NONE, Material.WATER})
PLANT_GROW_TARGETS = frozenset({Material.NONE, Material.GAS})


def at(nb, dx, dy):
    return nb[dy + 1][dx + 1]


def sand_rule(nb, choice):
    """Fall straight down, else slide diagonally (choice 0 left, 1 right)."""
    if at(nb, 0, 1) in SAND_TARGETS:
        return ((SWAP, 0, 1),)
    side = -1 if choice == 0 else 1
    if at(nb, side, 1) in SAND_TARGETS:
        return ((SWAP, side, 1),)
    return ()


def gas_rule(nb, choice):
    """Upward-biased random walk: 2 of 5 choices rise, others drift."""
    if choice <= 1:
        if at(nb, 0, -1) in GAS_RISE_TARGETS:
            return ((SWAP, 0, -1),)
    elif choice == 2:
        if at(nb, 0, 1) == Material.NONE:
            return ((SWAP, 0, 1),)
    elif choice == 3:
        if at(nb, -1, 0) == Material.NONE:
            return ((SWAP, -1, 0),)
    elif at(nb, 1, 0) == Material.NONE:
        return ((SWAP, 1, 0),)
    return ()


def water_rule(nb, choice):
    """Fall, then slide diagonally, then spread sideways."""
    if at(nb, 0, 1) == Material.NONE:
        return ((SWAP, 0, 1),)
    side = -1 if choice == 0 else 1
    if at(nb, side, 1) == Material.NONE:
        return ((SWAP, side, 1),)
    if at(nb, -side, 0) == Material.NONE:
        return ((SWAP, -side, 0),)
    return ()


def plant_rule(nb, choice):
    """Rarely grow upwards (2%), even more rarely creep sideways."""
    if choice < 10:
        if at(nb, 0, -1) in PLANT_GROW_TARGETS:
            return ((CONVERT, 0, -1, Material.PLANT),)
    elif choice == 10:
        if at(nb, -1, 0) == Material.NONE:
            return ((SWAP, -1, 0),)
    elif choice == 11:
        if at(nb, 1, 0) == Material.NONE:
            return ((SWAP, 1, 0),)
    return ()


def fire_rule(nb, choice):
    """Burn out (1 in 5) or ignite one plant below/left/right.

    Plant directly above always catches, even on the step the fire dies.
    """
    effects = []
    if choice >= 16:
        effects.append((CONVERT, 0, 0, Material.GAS if choice == 19 else Material.NONE))
    else:
        for dx, dy in ((0, 1), (-1, 0), (1, 0)):
            if at(nb, dx, dy) == Material.PLANT:
                effects.append((CONVERT, dx, dy, Material.FIRE))
                break
    if at(nb, 0, -1) == Material.PLANT:
        effects.append((CONVERT, 0, -1, Material.FIRE))
    return tuple(effects)


# Material -> (number of choices, rule). NONE and BOUND are inert.
RULES = {
    Material.SAND: (2, sand_rule),
    Material.GAS: (5, gas_rule),
    Material.WATER: (2, water_rule),
    Material.PLANT: (500, plant_rule),
    Material.FIRE: (20, fire_rule),
}

ACTIVE = np.array(sorted(int(m) for m in RULES), dtype=np.int8)
