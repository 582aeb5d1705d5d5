"""
Command line entry point: ``python -m gravitybox [scene]``.
"""

import argparse
import logging
import numpy as np
from .io import SceneLoader, default_scene
from .visualization import create_animator, run


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="gravitybox",
                                description="Animate a small ensemble of gravitating bodies")
    p.add_argument("scene", nargs="?", default=None,
                   help="JSON or YAML scene file (default: three-body demo)")
    p.add_argument("--speed", type=int, default=None, help="ticks computed per frame")
    p.add_argument("--scale", type=float, default=None, help="drawn body size multiplier")
    p.add_argument("--fps", type=float, default=60.0)
    p.add_argument("--seed", type=int, default=None, help="seed for body colours")
    p.add_argument("--duration", type=float, default=None,
                   help="stop after this many seconds")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    config = SceneLoader.load_config(args.scene) if args.scene else default_scene()

    collection = SceneLoader.create_collection_from_config(
        config, rng=np.random.default_rng(args.seed))
    animator = create_animator(collection, fps=args.fps)
    SceneLoader.apply_animator_config(animator, config)

    if args.speed is not None:
        animator.change_speed(args.speed)
    if args.scale is not None:
        animator.change_scale(args.scale)

    run(animator, frame_rate=args.fps, duration=args.duration)


if __name__ == "__main__":
    main()
