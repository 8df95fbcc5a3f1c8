"""Helper script to replay the self-check in real time with animation frames."""
from __future__ import annotations

import argparse

from fundcheck.cli import main


def _parse_args(argv: list[str] | None = None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(description="Replay the self-check as a visitor would see it")
    parser.add_argument(
        "--instant",
        action="store_true",
        help="Skip real-time pacing of the loading bar and count-up animation.",
    )
    return parser.parse_known_args(argv)


if __name__ == "__main__":  # pragma: no cover
    args, remaining = _parse_args()
    forward_args: list[str] = list(remaining)
    forward_args.append("--frames")
    if not args.instant:
        forward_args.append("--realtime")
    raise SystemExit(main(forward_args))
