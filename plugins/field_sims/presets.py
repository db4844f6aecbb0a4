"""
Field Simulation Presets

Each preset defines an engine type, a scenario and parameters known to
produce interesting behavior. The "engine" field determines which field
model to instantiate (wave, reaction_diffusion, falling_sand, heat).

"size" is the default grid (nx, ny); "fixed_dt" is the timestep used when
the driver ticks at a fixed rate instead of wall-clock time.
"""

PRESETS = {
    # =====================================================================
    # WAVE EQUATION
    # =====================================================================
    "obstacles": {
        "engine": "wave",
        "name": "Obstacle Course",
        "description": "Concentric ripples bouncing off two discs and a bar",
        "initial": "rings", "source": "none", "boundary": "obstacles",
        "speed": "uniform", "color_mode": "abs",
        "size": (320, 180), "fixed_dt": 0.1,
    },
    "oscillator": {
        "engine": "wave",
        "name": "Oscillator",
        "description": "Point source ringing in a walled box",
        "initial": "empty", "source": "oscillator", "boundary": "rect",
        "speed": "uniform", "color_mode": "signed",
        "size": (320, 180), "fixed_dt": 0.1,
    },
    "doppler": {
        "engine": "wave",
        "name": "Doppler",
        "description": "Moving source compresses the wavefronts ahead of it",
        "initial": "empty", "source": "moving_oscillator", "boundary": "rect",
        "speed": "uniform", "color_mode": "signed",
        "size": (320, 180), "fixed_dt": 0.1,
    },
    "interference": {
        "engine": "wave",
        "name": "Interference",
        "description": "Two in-phase sources build an interference pattern",
        "initial": "empty", "source": "double_oscillator", "boundary": "rect",
        "speed": "uniform", "color_mode": "energy",
        "size": (320, 180), "fixed_dt": 0.1,
    },
    "double_slit": {
        "engine": "wave",
        "name": "Double Slit",
        "description": "Plane-ish wave from a strip diffracting through two slits",
        "initial": "strip", "source": "none", "boundary": "double_slit",
        "speed": "uniform", "color_mode": "abs",
        "size": (320, 180), "fixed_dt": 0.1,
    },
    "lens": {
        "engine": "wave",
        "name": "Slow Strip",
        "description": "A slow vertical strip refracts a ringing spot",
        "initial": "left_spot", "source": "none", "boundary": "rect",
        "speed": "strip", "color_mode": "abs",
        "size": (320, 180), "fixed_dt": 0.1,
    },
    "spiked_drum": {
        "engine": "wave",
        "name": "Spiked Drum",
        "description": "Central spot inside a serrated circular wall",
        "initial": "center_spot", "source": "none", "boundary": "spiked_circle",
        "speed": "uniform", "color_mode": "abs",
        "size": (240, 240), "fixed_dt": 0.1,
    },
    "orbit": {
        "engine": "wave",
        "name": "Orbiting Obstacle",
        "description": "A disc circles through a standing wave (dynamic walls)",
        "initial": "standing", "source": "none", "boundary": "orbiting",
        "speed": "uniform", "color_mode": "signed",
        "boundary_mode": "dynamic",
        "size": (240, 240), "fixed_dt": 0.1,
    },

    # =====================================================================
    # REACTION-DIFFUSION
    # =====================================================================
    "reef": {
        "engine": "reaction_diffusion",
        "name": "RD Spots",
        "description": "Holes and short tendrils growing from a central blob",
        "initial": "center", "feed": 0.037, "kill": 0.060,
        "Du": 0.21, "Dv": 0.105, "contained": True,
        "size": (320, 180), "fixed_dt": 1.0,
    },
    "labyrinth": {
        "engine": "reaction_diffusion",
        "name": "RD Maze",
        "description": "Maze-like winding patterns",
        "initial": "square", "feed": 0.029, "kill": 0.057,
        "Du": 0.21, "Dv": 0.105,
        "size": (320, 180), "fixed_dt": 1.0,
    },
    "mitosis": {
        "engine": "reaction_diffusion",
        "name": "RD Mitosis",
        "description": "Spots that grow and divide",
        "initial": "scattered", "feed": 0.0367, "kill": 0.0649,
        "Du": 0.21, "Dv": 0.105,
        "size": (320, 180), "fixed_dt": 1.0,
    },
    "pearson_map": {
        "engine": "reaction_diffusion",
        "name": "RD Parameter Map",
        "description": "Feed sweeps left to right, kill top to bottom",
        "initial": "scattered", "parameter_map": True,
        "Du": 0.21, "Dv": 0.105,
        "size": (320, 320), "fixed_dt": 1.0,
    },

    # =====================================================================
    # FALLING SAND
    # =====================================================================
    "sandbox": {
        "engine": "falling_sand",
        "name": "Sandbox",
        "description": "Empty walled box to paint into",
        "initial": "box", "brush_radius": 2,
        "size": (160, 90), "fixed_dt": 0.1,
    },
    "garden": {
        "engine": "falling_sand",
        "name": "Garden",
        "description": "Plant bed, a sand pile and a pool of water",
        "initial": "garden", "brush_radius": 3,
        "size": (160, 90), "fixed_dt": 0.1,
    },
    "bubbles": {
        "engine": "falling_sand",
        "name": "Bubbles",
        "description": "Gas trapped under water works its way up",
        "initial": "smoke", "brush_radius": 2,
        "size": (160, 90), "fixed_dt": 0.1,
    },

    # =====================================================================
    # HEAT
    # =====================================================================
    "heat_grid": {
        "engine": "heat",
        "name": "Heat Grid",
        "description": "Hot and warm bars diffusing into each other",
        "initial": "grid", "alpha": 10.018,
        "size": (320, 180), "fixed_dt": 0.1,
    },
    "heat_checker": {
        "engine": "heat",
        "name": "Heat Checkerboard",
        "description": "Fine checkerboard smoothing out to uniform",
        "initial": "checkerboard", "alpha": 10.018,
        "size": (160, 90), "fixed_dt": 0.1,
    },
    "heat_spot": {
        "engine": "heat",
        "name": "Hot Spot",
        "description": "A hot disc spreading into a cold plate",
        "initial": "hot_spot", "alpha": 10.018,
        "size": (160, 160), "fixed_dt": 0.1,
    },
}


PRESET_ORDERS = {
    "wave": [
        "obstacles", "oscillator", "doppler", "interference",
        "double_slit", "lens", "spiked_drum", "orbit",
    ],
    "reaction_diffusion": [
        "reef", "labyrinth", "mitosis", "pearson_map",
    ],
    "falling_sand": [
        "sandbox", "garden", "bubbles",
    ],
    "heat": [
        "heat_grid", "heat_checker", "heat_spot",
    ],
}

ENGINE_ORDER = ["wave", "reaction_diffusion", "falling_sand", "heat"]

# Flat list of all presets (for CLI)
PRESET_ORDER = [k for engine in ENGINE_ORDER for k in PRESET_ORDERS[engine]]


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def get_presets_for_engine(engine_name):
    """Return ordered list of preset keys for an engine."""
    return PRESET_ORDERS.get(engine_name, [])


def list_presets(engine=None):
    """Return list of (key, name, description) for presets.
    If engine is specified, filter to that engine only."""
    if engine:
        keys = PRESET_ORDERS.get(engine, [])
    else:
        keys = PRESET_ORDER
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in keys if k in PRESETS]
