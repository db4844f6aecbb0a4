"""
Field Simulations - Headless Runner

Usage:
    python -m field_sims [preset] [--size WxH] [--steps N] [--seed N]
                         [--workers N] [--snap] [--list]

Examples:
    python -m field_sims
    python -m field_sims oscillator --steps 500 --snap
    python -m field_sims garden --size 200x120 --seed 7 --snap
    python -m field_sims all --steps 200 --snap

Engines:
    wave                - Wave equation with obstacles and sources
    reaction_diffusion  - Gray-Scott style reaction-diffusion
    falling_sand        - Sand, water, gas, plants and fire
    heat                - Heat diffusion

Use --list to see all available presets.
"""

import os
import sys
import time

import numpy as np

from .presets import ENGINE_ORDER, PRESET_ORDER, list_presets
from .simulator import FieldSimulator


def save_frame(frame, path, scale=4):
    """Write a (ny, nx, 3) float frame as an upscaled PNG."""
    from PIL import Image
    rgb = (np.clip(frame, 0.0, 1.0) * 255).astype(np.uint8)
    img = Image.fromarray(rgb)
    if scale > 1:
        img = img.resize((img.width * scale, img.height * scale), Image.NEAREST)
    img.save(path)


def run(preset, size, steps, seed, workers, snap):
    """Run N steps of one or all presets, report stats, optionally snap."""
    screenshots_dir = os.path.join(os.getcwd(), "screenshots")
    presets_to_run = [preset] if preset != "all" else PRESET_ORDER

    for pkey in presets_to_run:
        sim = FieldSimulator(pkey, size=size, seed=seed, workers=workers)
        print(f"  {pkey}: running {steps} steps...", end="", flush=True)
        start = time.perf_counter()
        try:
            sim.run(steps)
        finally:
            sim.close()
        elapsed = time.perf_counter() - start

        stats = sim.stats
        print(f" done in {elapsed:.2f}s, sim time {stats['sim_time']:.4g}")
        for key, value in stats.items():
            if key in ("preset", "sim_time"):
                continue
            if isinstance(value, float):
                print(f"    {key:16s} {value:.6g}")
            else:
                print(f"    {key:16s} {value}")

        if snap:
            os.makedirs(screenshots_dir, exist_ok=True)
            path = os.path.join(screenshots_dir, f"fields_{pkey}.png")
            save_frame(sim.frame(), path)
            print(f"[fields] saved: {path}")


def main(argv=None):
    preset = "obstacles"
    size = None
    steps = 100
    seed = None
    workers = None
    snap = False

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--size" and i + 1 < len(args):
            parts = args[i + 1].lower().split("x")
            size = (int(parts[0]), int(parts[1]))
            i += 2
        elif arg == "--steps" and i + 1 < len(args):
            steps = int(args[i + 1])
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            seed = int(args[i + 1])
            i += 2
        elif arg == "--workers" and i + 1 < len(args):
            workers = int(args[i + 1])
            i += 2
        elif arg == "--snap":
            snap = True
            i += 1
        elif arg == "--list":
            print("\nAvailable presets:")
            for engine in ENGINE_ORDER:
                print(f"\n  [{engine}]")
                for key, name, desc in list_presets(engine):
                    print(f"    {key:16s} {name:20s} {desc}")
            print()
            return 0
        elif arg in ("--help", "-h"):
            print(__doc__)
            return 0
        elif arg in PRESET_ORDER or arg == "all":
            preset = arg
            i += 1
        elif arg.startswith("-"):
            print(f"Unknown option: {arg}")
            print("Use --help for usage")
            return 2
        else:
            print(f"Unknown preset: {arg}")
            print("Use --list to see available presets")
            return 2

    if size is not None and (size[0] <= 0 or size[1] <= 0):
        print(f"Grid size must be positive, got {size[0]}x{size[1]}")
        return 2

    print(f"[fields] {preset}: {steps} steps"
          + (f" @ {size[0]}x{size[1]}" if size else ""))
    run(preset, size, steps, seed, workers, snap)
    return 0


if __name__ == "__main__":
    sys.exit(main())
