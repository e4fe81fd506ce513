#!/usr/bin/env python3
"""
Pool Sketch
Desktop window by default, or a browser page with --web.
"""
import argparse
import logging
import sys

from ripplepool.core.scene import SceneConfig


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Procedural pool with ripples and swim rings")
    parser.add_argument("--web", action="store_true", help="serve frames to a browser instead of opening a window")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible scene")
    parser.add_argument("--width", type=int, default=1280)
    parser.add_argument("--height", type=int, default=800)
    parser.add_argument("--fps", type=int, default=30)
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = SceneConfig(width=args.width, height=args.height, seed=args.seed)
    if args.web:
        from ripplepool.web import main as web_main
        web_main(config, port=args.port)
        return 0
    from ripplepool.app import main as app_main
    return app_main(config, fps=args.fps)


if __name__ == "__main__":
    sys.exit(main())
