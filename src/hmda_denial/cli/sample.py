"""
Sample Command CLI
==================

Command-line interface for drawing a row sample from a full LAR file.
"""

import argparse
import logging

from ..core.config import SAMPLE_FRACTION
from ..core.errors import AnalysisError
from ..core.load import sample_lar_file

logger = logging.getLogger(__name__)


def configure_sample_parser(parser: argparse.ArgumentParser) -> None:
    """
    Configure the sample subcommand parser.

    Parameters
    ----------
    parser : argparse.ArgumentParser
        Parser to configure
    """
    parser.description = """
Draw a row sample from a full LAR file so the analysis can run in memory.

Without --seed every k-th row is kept (k = 1 / fraction). With --seed rows
are picked by a seeded hash of the row index, giving roughly the same share.
Both read the file lazily.

Examples:
  # Keep 1% of rows
  hmda-denial sample data/raw/hmda_2008_nationwide.zip data/raw/hmda_2008_sample.csv

  # Reproducible 0.5% random sample
  hmda-denial sample data/raw/hmda_2008.csv data/raw/sample.csv --fraction 0.005 --seed 42
    """

    parser.add_argument(
        "source",
        type=str,
        help="Full LAR file (delimited text or zip archive)",
    )
    parser.add_argument(
        "destination",
        type=str,
        help="Output path for the header-less sample",
    )
    parser.add_argument(
        "--fraction",
        type=float,
        default=SAMPLE_FRACTION,
        help=f"Share of rows to keep (default: {SAMPLE_FRACTION})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Hash seed for a pseudo-random sample (default: systematic every-k-th-row sample)",
    )
    parser.add_argument(
        "--separator",
        type=str,
        default=None,
        help="Field delimiter (default: detected from the file)",
    )
    parser.set_defaults(handler=handle_sample_command)


def handle_sample_command(args: argparse.Namespace) -> int:
    """
    Handle the sample command.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments

    Returns
    -------
    int
        Exit code (0 for success, non-zero for failure)
    """
    try:
        sample_lar_file(
            args.source,
            args.destination,
            fraction=args.fraction,
            seed=args.seed,
            separator=args.separator,
        )
        return 0

    except (AnalysisError, ValueError, FileNotFoundError) as e:
        logger.error("Sampling failed: %s", e)
        return 1
