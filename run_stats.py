#!/usr/bin/env python3
"""Streaming Statistics Export

Loads the streaming dataset, computes every derived chart series and writes
them as one JSON file for the static dashboard.

Usage:
    python run_stats.py                                  # Default dataset and output
    python run_stats.py --artist "Taylor Swift"          # Sidebar artist filter
    python run_stats.py --range spotify_popularity:60:   # Brush one axis (repeatable)
    python run_stats.py --fields spotify_streams youtube_views shazam_counts
"""

import argparse
import logging
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from streamstats.export.json_export import save_dashboard_data
from streamstats.pipeline import config, orchestrator
from streamstats.pipeline.records import load_records
from streamstats.stats.filters import parse_range

# Load environment variables
load_dotenv()


def setup_logging():
    """Configure logging to file and console."""
    log_dir = Path("logging")
    log_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"stats_{timestamp}.log"

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(),
        ],
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging to {log_file}")
    return logger


def _range_arg(value):
    try:
        return parse_range(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser():
    parser = argparse.ArgumentParser(
        description="Compute dashboard statistics from the streaming dataset",
        epilog="""
Examples:
  python run_stats.py                                  # Default dataset and output
  python run_stats.py --artist "Taylor Swift"          # Only one artist
  python run_stats.py --range spotify_popularity:60:   # Popularity >= 60
  python run_stats.py --range tiktok_views:1e6:1e9 --range spotify_streams::5e8

Environment:
  STREAMSTATS_DATA_PATH    default for --data
  STREAMSTATS_OUTPUT_DIR   default directory for --output
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--data",
        default=config.get_data_path(),
        help="Dataset CSV (default: %(default)s)",
    )
    parser.add_argument(
        "--output",
        default=str(Path(config.get_output_dir()) / config.DASHBOARD_DATA_FILE),
        help="JSON output file (default: %(default)s)",
    )
    parser.add_argument(
        "--artist",
        default=None,
        help="Keep only this artist's tracks",
    )
    parser.add_argument(
        "--range",
        dest="ranges",
        action="append",
        type=_range_arg,
        default=[],
        metavar="FIELD:MIN:MAX",
        help="Inclusive range on a numeric field; leave a bound empty for open-ended",
    )
    parser.add_argument(
        "--fields",
        nargs="+",
        default=None,
        help="Fields of the correlation matrix (default: multi-platform metrics)",
    )
    return parser


def main(argv=None):
    """Run the statistics export."""
    args = build_parser().parse_args(argv)
    logger = setup_logging()

    print("=" * 60)
    print("STREAMING STATISTICS EXPORT")
    print("=" * 60)
    print(f"Dataset: {args.data}")
    print(f"Artist: {args.artist or 'all'}")
    print("=" * 60)

    logger.info(f"Starting export: data={args.data}, artist={args.artist}, ranges={args.ranges}")
    start_time = datetime.now()

    records = load_records(args.data)
    data = orchestrator.build_dashboard_data(
        records,
        artist=args.artist,
        ranges=dict(args.ranges),
        correlation_fields=args.fields,
    )
    output_path = save_dashboard_data(data, args.output)

    elapsed = datetime.now() - start_time
    print()
    for line in orchestrator.summarize(data):
        print(line)
    print("\n" + "=" * 60)
    print("EXPORT COMPLETE!")
    print("=" * 60)
    print(f"\nOutput: {output_path}")
    print(f"Total time: {elapsed}")

    logger.info(f"Export complete! Total time: {elapsed}")


if __name__ == "__main__":
    main()
