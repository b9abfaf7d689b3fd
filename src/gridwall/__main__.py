"""Run one wall-generation session and report the result.

Usage:
    python -m gridwall [--count N] [--radius R] [--safe S] [--cluster P]
                       [--seed N] [--reference X Y] [--json] [--render]

Defaults come from GRIDWALL_* environment variables (see gridwall.config).
Walls are created in an in-memory factory, so this is a dry run of the
placement engine: it shows where walls would go and how the frame budget
was spent.
"""

from __future__ import annotations

import argparse
import json
import random
import sys
from dataclasses import replace

from loguru import logger

from .config import settings
from .host import HostLoop
from .placement import (
    ConfigError,
    GenerationConfig,
    RecordingEntityFactory,
    SessionController,
    render_ascii,
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gridwall", description=__doc__.splitlines()[0])
    p.add_argument("--count", type=int, help="walls to place")
    p.add_argument("--radius", type=int, help="grid radius in cells")
    p.add_argument("--spacing", type=float, help="grid spacing")
    p.add_argument("--safe", type=float, help="safe radius around the reference point")
    p.add_argument("--cluster", type=float, help="clustering probability 0-1")
    p.add_argument("--seed", type=int, help="RNG seed for a reproducible layout")
    p.add_argument("--reference", type=float, nargs=2, metavar=("X", "Y"),
                   default=(0.0, 0.0), help="reference (player) position")
    p.add_argument("--no-reference", action="store_true",
                   help="generate with no reference point (no safe zone)")
    p.add_argument("--json", action="store_true", help="print a JSON snapshot")
    p.add_argument("--render", action="store_true", help="print an ASCII map")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def config_from_args(args: argparse.Namespace) -> GenerationConfig:
    config = GenerationConfig.from_settings(settings)
    overrides = {
        "target_count": args.count,
        "grid_radius": args.radius,
        "spacing_unit": args.spacing,
        "safe_radius": args.safe,
        "clustering_probability": args.cluster,
        "seed": args.seed,
    }
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")

    config = config_from_args(args)
    reference = None if args.no_reference else tuple(args.reference)

    factory = RecordingEntityFactory(rng=random.Random(config.seed))
    controller = SessionController(factory, reference_provider=lambda: reference)

    try:
        controller.start_session(config)
    except ConfigError as e:
        logger.error(str(e))
        return 2

    stats = HostLoop(controller, tick_rate_hz=settings.tick_rate_hz).run()
    report = controller.report

    if args.render and controller.grid is not None:
        print(render_ascii(controller.grid, controller.placements))
    if args.json:
        snap = controller.snapshot()
        snap["frames"] = stats.to_dict()
        snap["walls"] = [w.to_dict() for w in factory.walls.values()]
        print(json.dumps(snap, indent=2))
    else:
        print(f"Placed {report.placed}/{report.requested} walls "
              f"in {stats.frames} frames ({report.stop_reason}, "
              f"{report.attempts} attempts, longest frame "
              f"{stats.longest_frame * 1000.0:.2f} ms)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
