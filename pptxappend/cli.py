from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import pptxappend


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pptxappend",
        description="Append slides described in the slide text format to a presentation.",
    )
    parser.add_argument(
        "deck",
        type=Path,
        help="Path to the .pptx file to append to.",
    )
    parser.add_argument(
        "slides",
        type=Path,
        nargs="?",
        help="Slide text file to read (default: stdin).",
    )
    parser.add_argument(
        "--new",
        action="store_true",
        help="Create the presentation from a minimal template instead of opening it.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every step to stderr.",
    )
    return parser


def _read_slides(source: Path | None) -> list[pptxappend.Slide]:
    if source is None:
        return pptxappend.decode_slides(sys.stdin)
    with open(source, "r", encoding="utf-8") as handle:
        return pptxappend.decode_slides(handle)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args, unknown = parser.parse_known_args(argv)
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        return code

    if unknown:
        unknown_str = " ".join(unknown)
        print(
            f"pptxappend: warning: unsupported arguments: {unknown_str}",
            file=sys.stderr,
        )
        return 1

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    try:
        slides = _read_slides(args.slides)
        if not slides:
            raise ValueError("no slides to add")
        if args.new:
            container = pptxappend.new_container(args.deck)
        else:
            container = pptxappend.open_container(args.deck)
        with container:
            for slide in slides:
                container.add(slide)
        print(f"Added {len(slides)} slides to {args.deck}")
        return 0
    except Exception as exc:
        print(f"pptxappend: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
