#!/usr/bin/env python3
"""
Convert flight-tracker exports into a Garmin G1000 track log.

Usage:
    python run_converter.py [SOURCE ...] [--ident N12345] [--model C172]

Sources are FlightAware flight page URLs (the KML export is fetched from
`<url>/google_earth`) or local KML/GeoJSON files. Missing sources, ident or
model are prompted for.

Examples:
    python run_converter.py https://flightaware.com/live/flight/N12345/history/20230501/1200Z/KBOS/KJFK
    python run_converter.py leg1.kml leg2.kml --ident n12345 --model c172 --on-feed-error skip
"""

import argparse
import logging
import sys
from pathlib import Path

# Add tracklog to path
sys.path.insert(0, str(Path(__file__).parent))

from tracklog.errors import TrackLogError
from tracklog.services.converter import FEED_ERROR_POLICIES, ON_FEED_ERROR, convert
from tracklog.services.extractor import TRAJECTORY_FEATURE_INDEX
from tracklog.services.feed_loader import FETCH_TIMEOUT_S
from tracklog.services.writer import DEFAULT_OUTPUT_DIR


logger = logging.getLogger("run_converter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Flight track to G1000 track log converter")
    parser.add_argument(
        "sources",
        nargs="*",
        help="Flight page URLs or KML/GeoJSON files, concatenated in the order given"
    )
    parser.add_argument("--ident", "-i", help="Aircraft registration (N number)")
    parser.add_argument("--model", "-m", help="Aircraft model")
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Output file (default: <IDENT>-<start>.csv in the output folder)"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output folder (default: {DEFAULT_OUTPUT_DIR})"
    )
    parser.add_argument(
        "--feature-index",
        type=int,
        default=TRAJECTORY_FEATURE_INDEX,
        help=f"Feed feature holding the trajectory (default: {TRAJECTORY_FEATURE_INDEX})"
    )
    parser.add_argument(
        "--on-feed-error",
        choices=FEED_ERROR_POLICIES,
        default=ON_FEED_ERROR,
        help=f"Abort or skip a source whose feed fails (default: {ON_FEED_ERROR})"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=FETCH_TIMEOUT_S,
        help=f"Fetch timeout in seconds (default: {FETCH_TIMEOUT_S:g})"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging"
    )
    return parser


def prompt(message: str) -> str:
    """Ask until a non-empty answer is given."""
    answer = ""
    while not answer:
        answer = input(f"{message}: ").strip()
    return answer


def fill_missing(args: argparse.Namespace) -> argparse.Namespace:
    """Prompt for inputs not supplied on the command line."""
    if not args.sources:
        args.sources = [prompt("Paste the FlightAware link")]
    if not args.ident:
        args.ident = prompt("Provide the N Number")
    if not args.model:
        args.model = prompt("Provide the model of aircraft")
    return args


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        args = fill_missing(args)
    except (EOFError, KeyboardInterrupt):
        print("\nAborted.", file=sys.stderr)
        return 1

    try:
        _, path = convert(
            args.sources,
            ident=args.ident,
            model=args.model,
            output=args.output,
            output_dir=args.output_dir,
            feature_index=args.feature_index,
            on_feed_error=args.on_feed_error,
            timeout=args.timeout,
        )
    except TrackLogError as e:
        logger.error(str(e))
        return 1

    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
