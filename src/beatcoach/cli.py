"""
Command-line feature extraction.

Analyzes an audio file and prints the feature payload as JSON.
"""

import argparse
import logging
import sys
from pathlib import Path

from beatcoach.core.config import (
    BLOCK_SIZE,
    HISTORY_SIZE,
    SECTION_COUNT,
    SENSITIVITY,
    AnalysisConfig,
)
from beatcoach.core.errors import ConfigError, DecodeError
from beatcoach.io.exporter import FeaturesExporter
from beatcoach.pipeline import AudioPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract tempo, energy and sections from an audio file"
    )

    parser.add_argument(
        "audio",
        type=Path,
        help="Input audio file (wav, flac, ogg)",
    )

    parser.add_argument(
        "--block-size",
        type=int,
        default=BLOCK_SIZE,
        help=f"Samples per energy block (default: {BLOCK_SIZE})",
    )

    parser.add_argument(
        "--history-size",
        type=int,
        default=HISTORY_SIZE,
        help=f"Blocks of trailing history for onset detection (default: {HISTORY_SIZE})",
    )

    parser.add_argument(
        "-s", "--sensitivity",
        type=float,
        default=SENSITIVITY,
        help=f"Onset threshold over the trailing mean (default: {SENSITIVITY})",
    )

    parser.add_argument(
        "--sections",
        type=int,
        default=SECTION_COUNT,
        help=f"Number of intensity sections (default: {SECTION_COUNT})",
    )

    parser.add_argument(
        "-p", "--precision",
        type=int,
        default=4,
        help="Decimal places in the JSON output (default: 4)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log analysis details to stderr",
    )

    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.audio.is_file():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        return 1

    try:
        config = AnalysisConfig(
            block_size=args.block_size,
            history_size=args.history_size,
            sensitivity=args.sensitivity,
            section_count=args.sections,
        )
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        features = AudioPipeline(config=config).process(args.audio)
    except DecodeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(FeaturesExporter(precision=args.precision).to_json(features))
    return 0


if __name__ == "__main__":
    sys.exit(main())
