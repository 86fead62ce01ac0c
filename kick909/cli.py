from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .audio import write_container
from .config import DEFAULT_DURATION, DEFAULT_SAMPLE_RATE, ControlParameters, SynthesisConfig
from .errors import ContainerWriteError, Kick909Error
from .logging_utils import DEBUG_ENV, configure_logging, log_exception
from .main import render

_LOGGER = logging.getLogger("kick909.cli")
# stdout may carry the WAV bytes; all human-readable output goes to stderr.
_CONSOLE = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kick909",
        description="Render a 909-style kick drum as a mono 24-bit WAV.",
    )
    parser.add_argument("tune", type=float, help="Body and sweep pitch, 0..1.")
    parser.add_argument("attack", type=float, help="Attack ramp length, 0..1.")
    parser.add_argument("decay", type=float, help="Decay length, 0..1.")
    parser.add_argument("level", type=float, help="Output level, 0..1.")
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Destination WAV file (default: stdout).",
    )
    parser.add_argument("--duration", type=float, default=DEFAULT_DURATION)
    parser.add_argument("--sample-rate", type=int, default=DEFAULT_SAMPLE_RATE)
    parser.add_argument(
        "--clamp",
        action="store_true",
        help="Clamp knobs into 0..1 instead of extrapolating.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    try:
        params = ControlParameters(
            tune=args.tune,
            attack=args.attack,
            decay=args.decay,
            level=args.level,
        )
        if args.clamp:
            params = params.clamped()
        config = SynthesisConfig.from_duration(args.duration, sample_rate=float(args.sample_rate))

        if args.output is None:
            audio = render(params, config)
            write_container(sys.stdout.buffer, audio, args.sample_rate)
            return 0

        target = Path(args.output)
        try:
            handle = target.open("wb")
        except OSError as exc:
            raise ContainerWriteError(f"Failed to open file '{target}' for writing.") from exc
        with handle:
            audio = render(params, config)
            written = write_container(handle, audio, args.sample_rate)
        _CONSOLE.print(
            f"Wrote {written} bytes to {target} (sr={args.sample_rate})",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return 0
    except (Kick909Error, ValueError) as exc:
        debug = bool(os.environ.get(DEBUG_ENV))
        _LOGGER.warning("kick909 CLI failed: %s", exc, exc_info=debug)
        log_exception("kick909 CLI", exc)
        _CONSOLE.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
