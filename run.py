"""Command-line entry point for the Python CHIP-8 interpreter.

Usage: ``python run.py ROM [--scale N] [--delay MS] [--timers cycle|clock]``.
Keys 1-4/Q-R/A-F/Z-V map onto the hex keypad; Escape quits.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.cpu import TimerMode
from pychip8.ui.app import AppConfig, Chip8App


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {text}")
    return value


def _non_negative_float(text: str) -> float:
    value = float(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {text}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="run.py", description="CHIP-8 interpreter (Python)")
    parser.add_argument("rom", type=Path, help="CHIP-8 program image, loaded at 0x200")
    parser.add_argument(
        "--scale",
        type=_positive_int,
        default=10,
        help="Window pixels per CHIP-8 pixel (default: 10)",
    )
    parser.add_argument(
        "--delay",
        type=_non_negative_float,
        default=1.0,
        help="Milliseconds between instructions; 0 runs flat out (default: 1)",
    )
    parser.add_argument("--fullscreen", action="store_true", help="Open a fullscreen window")
    parser.add_argument(
        "--timers",
        choices=[mode.value for mode in TimerMode],
        default=TimerMode.CYCLE.value,
        help="Tick DT/ST once per instruction ('cycle') or at 60 Hz ('clock')",
    )
    parser.add_argument(
        "--wrap-sprites",
        action="store_true",
        help="Wrap sprites around the screen edges instead of clipping them",
    )
    parser.add_argument("--seed", type=int, help="Seed for the RND instruction")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if not args.rom.is_file():
        parser.error(f"ROM file not found: {args.rom}")

    app = Chip8App(
        AppConfig(
            rom_path=args.rom,
            scale=args.scale,
            delay_ms=args.delay,
            fullscreen=args.fullscreen,
            timer_mode=TimerMode(args.timers),
            sprite_wrap=args.wrap_sprites,
            seed=args.seed,
        )
    )
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
