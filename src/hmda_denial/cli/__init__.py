"""
HMDA Denial Analysis CLI
========================

Command-line interface for the denial analysis workflows.

Commands
--------
- hmda-denial sample: Draw a row sample from a full LAR file
- hmda-denial analyze: Run the analysis on a sampled LAR extract

Example Usage
-------------
# Sample 1% of the 2008 register
$ hmda-denial sample data/raw/hmda_2008_nationwide.zip data/raw/hmda_2008_sample.csv

# Analyze the sample with county-level outlier rejection
$ hmda-denial analyze data/raw/hmda_2008_sample.csv --plots

For detailed help on each command:
$ hmda-denial sample --help
$ hmda-denial analyze --help
"""

import argparse
import logging
import sys
from typing import Sequence

from .analyze import configure_analyze_parser
from .sample import configure_sample_parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the HMDA denial CLI.

    Parameters
    ----------
    argv : Sequence[str] | None, optional
        Command line arguments. If None, uses sys.argv[1:]

    Returns
    -------
    int
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        prog="hmda-denial",
        description="HMDA Denial Analysis - Geographic and demographic denial disparities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sample 1% of a full LAR file
  hmda-denial sample data/raw/hmda_2008_nationwide.zip data/raw/hmda_2008_sample.csv

  # Analyze the sample and render figures
  hmda-denial analyze data/raw/hmda_2008_sample.csv --plots

  # Group outliers by state
  hmda-denial analyze data/raw/hmda_2008_sample.csv --group-level state
        """,
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )

    # Create subcommands
    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        help="Command to execute",
    )

    sample_parser = subparsers.add_parser(
        "sample",
        help="Draw a row sample from a full LAR file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    configure_sample_parser(sample_parser)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Run the denial analysis on a LAR extract",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    configure_analyze_parser(analyze_parser)

    # Parse arguments
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    # Execute command
    try:
        return args.handler(args)
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user", file=sys.stderr)
        return 130
    except Exception as e:
        logging.error(f"Command failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
