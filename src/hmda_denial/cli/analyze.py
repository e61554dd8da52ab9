"""
Analyze Command CLI
===================

Command-line interface for running the denial analysis on a LAR extract.
"""

import argparse
import logging

from ..core.config import OUTPUT_DIR, RACE_NAMES, REFERENCE_RACE, Z_SCORE_BOUND
from ..core.errors import AnalysisError
from ..core.workflows import run_analysis, save_analysis_figures, save_analysis_outputs
from ..utils.geo import load_region_reference

logger = logging.getLogger(__name__)


def configure_analyze_parser(parser: argparse.ArgumentParser) -> None:
    """
    Configure the analyze subcommand parser.

    Parameters
    ----------
    parser : argparse.ArgumentParser
        Parser to configure
    """
    parser.description = """
Run the denial analysis on a header-less 2007-2017 format LAR extract.

Writes county and state summaries, choropleth-ready map tables, coefficient
tables for the income and race models, and a report of dropped records.

Examples:
  # Analyze a sample with county-level outlier rejection
  hmda-denial analyze data/raw/hmda_2008_sample.csv

  # Group outliers by state and render figures
  hmda-denial analyze data/raw/hmda_2008_sample.csv --group-level state --plots

  # Attach county names to the county summary
  hmda-denial analyze data/raw/hmda_2008_sample.csv --regions data/county_names.csv
    """

    parser.add_argument(
        "path",
        type=str,
        help="Header-less delimited LAR extract",
    )
    parser.add_argument(
        "--separator",
        type=str,
        default=None,
        help="Field delimiter (default: detected from the file)",
    )
    parser.add_argument(
        "--group-level",
        choices=["county", "state"],
        default="county",
        help="Geography used to group records for outlier rejection (default: county)",
    )
    parser.add_argument(
        "--z-bound",
        type=float,
        default=Z_SCORE_BOUND,
        help=f"Z-score bound for outlier rejection (default: {Z_SCORE_BOUND})",
    )
    parser.add_argument(
        "--reference-race",
        choices=list(RACE_NAMES.values()),
        default=REFERENCE_RACE,
        help=f"Race category held out in the race model (default: {REFERENCE_RACE})",
    )
    parser.add_argument(
        "--normalize-action-filter",
        action="store_true",
        help="Also drop withdrawn and purchased applications from the income model",
    )
    parser.add_argument(
        "--regions",
        type=str,
        default=None,
        metavar="PATH",
        help="CSV with 'fips' and 'name' columns used to label counties",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=str(OUTPUT_DIR),
        metavar="PATH",
        help="Folder for output tables (default: ./output)",
    )
    parser.add_argument(
        "--plots",
        action="store_true",
        help="Also render summary figures to the output folder",
    )
    parser.set_defaults(handler=handle_analyze_command)


def handle_analyze_command(args: argparse.Namespace) -> int:
    """
    Handle the analyze command.

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
        results = run_analysis(
            args.path,
            separator=args.separator,
            group_level=args.group_level,
            z_bound=args.z_bound,
            normalize_action_filter=args.normalize_action_filter,
            reference_race=args.reference_race,
        )
        region_reference = load_region_reference(args.regions) if args.regions else None
        save_analysis_outputs(results, args.output_dir, region_reference=region_reference)
        if args.plots:
            save_analysis_figures(results, args.output_dir)

        if results.model_errors:
            logger.warning("Some models failed to fit: %s", ", ".join(results.model_errors))
            return 1

        return 0

    except (AnalysisError, FileNotFoundError) as e:
        logger.error("Analysis failed: %s", e)
        return 1
