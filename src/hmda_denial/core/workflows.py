"""
HMDA Denial Analysis Workflows
==============================

High-level orchestration of the analysis: load, clean, filter outliers,
aggregate by geography, and fit the denial models.

Functions
---------
- run_analysis: Run every stage on a sampled LAR extract
- save_analysis_outputs: Write aggregates and coefficient tables to disk
- save_analysis_figures: Render the summary figures

Example Usage
-------------
>>> from hmda_denial.core.workflows import run_analysis, save_analysis_outputs
>>> results = run_analysis("data/raw/hmda_2008_sample.csv")
>>> results.race_model.to_frame()
>>> save_analysis_outputs(results, "output")
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Sequence

import polars as pl

from ..utils.cleaning import clean_lar
from ..utils.geo import attach_region_names
from ..utils.outliers import filter_outliers, find_degenerate_groups
from ..utils.plots import plot_denial_probability, plot_race_coefficients, plot_ratio_vs_denial
from ..utils.regression import (
    denial_probability_curve,
    fit_income_model,
    fit_race_model,
)
from ..utils.summary import denial_rates_by, map_table, summarize_by_geography
from .config import (
    LAR_2007_2017_COLUMNS,
    OUTPUT_DIR,
    REFERENCE_RACE,
    Z_SCORE_BOUND,
    get_group_column,
)
from .errors import DegenerateStatisticsError, ModelFitError
from .load import load_lar_sample
from .results import DropReport, RegressionResult

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResults:
    """Everything produced by one analysis run."""

    cleaned: pl.DataFrame
    filtered: pl.DataFrame
    county_summary: pl.DataFrame
    state_summary: pl.DataFrame
    race_denial_rates: pl.DataFrame
    degenerate_groups: pl.DataFrame
    drop_report: DropReport
    income_model: RegressionResult | None = None
    race_model: RegressionResult | None = None
    model_errors: dict[str, str] = field(default_factory=dict)

    @property
    def models(self) -> list[RegressionResult]:
        return [m for m in (self.income_model, self.race_model) if m is not None]


def run_analysis(
    path: Path | str,
    columns: Sequence[str] = LAR_2007_2017_COLUMNS,
    separator: str | None = None,
    group_level: Literal["county", "state"] = "county",
    z_bound: float = Z_SCORE_BOUND,
    normalize_action_filter: bool = False,
    reference_race: str = REFERENCE_RACE,
) -> AnalysisResults:
    """
    Run the full denial analysis on a sampled LAR extract.

    Parameters
    ----------
    path : Path | str
        Header-less delimited LAR extract.
    columns : Sequence[str]
        Ordered column names of the extract.
    separator : str | None
        Field delimiter; sniffed when None.
    group_level : {"county", "state"}, default "county"
        Geography used to group records for outlier rejection.
    z_bound : float
        Z-score bound for outlier rejection.
    normalize_action_filter : bool, default False
        Also exclude withdrawn and purchased applications from the income
        model, matching the race model.
    reference_race : str
        Race category held out as the race model baseline.

    Returns
    -------
    AnalysisResults
        Frames, aggregates, fitted models and drop counts. A model that
        fails to fit is recorded in ``model_errors`` and left as None.

    Raises
    ------
    SchemaMismatchError
        If the extract does not match ``columns``.
    DegenerateStatisticsError
        If no records survive cleaning or outlier rejection.
    """
    logger.info("=" * 60)
    logger.info("HMDA Denial Analysis")
    logger.info("=" * 60)
    logger.info("Input: %s", path)
    logger.info("Outlier grouping: %s", group_level)

    raw = load_lar_sample(path, columns=columns, separator=separator)
    cleaned, clean_report = clean_lar(raw)

    group_col = get_group_column(group_level)
    filtered, outlier_report = filter_outliers(cleaned, group_col=group_col, z_bound=z_bound)

    results = AnalysisResults(
        cleaned=cleaned,
        filtered=filtered,
        county_summary=summarize_by_geography(filtered, "county"),
        state_summary=summarize_by_geography(filtered, "state"),
        race_denial_rates=denial_rates_by(filtered, "applicant_race_name"),
        degenerate_groups=find_degenerate_groups(cleaned, group_col),
        drop_report=clean_report.merge(outlier_report),
    )

    model_fits = (
        ("income_model", lambda: fit_income_model(filtered, exclude_non_decisions=normalize_action_filter)),
        ("race_model", lambda: fit_race_model(filtered, reference=reference_race)),
    )
    for name, fit in model_fits:
        try:
            setattr(results, name, fit())
        except (ModelFitError, DegenerateStatisticsError) as e:
            logger.error("%s failed: %s", name, e)
            results.model_errors[name] = str(e)

    results.drop_report.log_summary("analysis")
    if results.model_errors:
        logger.warning("Analysis finished with %d model failure(s)", len(results.model_errors))
    else:
        logger.info("Analysis completed successfully")
    return results


def save_analysis_outputs(
    results: AnalysisResults,
    output_dir: Path | str = OUTPUT_DIR,
    region_reference: pl.DataFrame | None = None,
) -> list[Path]:
    """
    Write summaries, map tables and coefficient tables.

    Tables are written as pipe-delimited CSV; the two summaries are also
    written as parquet.

    Parameters
    ----------
    results : AnalysisResults
        Output of ``run_analysis``.
    output_dir : Path | str
        Destination folder, created if needed.
    region_reference : pl.DataFrame | None
        Optional county name lookup (see ``load_region_reference``) joined
        onto the county summary.

    Returns
    -------
    list[Path]
        Paths of every file written.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    county_summary = results.county_summary
    if region_reference is not None:
        county_summary = attach_region_names(county_summary, region_reference)

    tables = {
        "county_summary": county_summary,
        "state_summary": results.state_summary,
        "county_denial_map": map_table(results.county_summary, "denial_percent"),
        "county_loan_to_income_map": map_table(results.county_summary, "mean_loan_to_income"),
        "state_denial_map": map_table(results.state_summary, "denial_percent"),
        "race_denial_rates": results.race_denial_rates,
        "degenerate_groups": results.degenerate_groups,
        "drop_report": results.drop_report.to_frame(),
    }
    if results.models:
        tables["coefficients"] = pl.concat([model.to_frame() for model in results.models])

    written = []
    for stem, table in tables.items():
        csv_path = output_dir / f"{stem}.csv"
        table.write_csv(csv_path, separator="|")
        written.append(csv_path)
    for stem in ("county_summary", "state_summary"):
        parquet_path = output_dir / f"{stem}.parquet"
        tables[stem].write_parquet(parquet_path)
        written.append(parquet_path)

    logger.info("Saved %d output files to %s", len(written), output_dir)
    return written


def save_analysis_figures(
    results: AnalysisResults, output_dir: Path | str = OUTPUT_DIR
) -> list[Path]:
    """Render the county scatter and, where fitted, the model figures."""
    output_dir = Path(output_dir)
    figures = [plot_ratio_vs_denial(results.county_summary, output_dir / "ratio_vs_denial.png")]
    if results.income_model is not None:
        curve = denial_probability_curve(results.income_model)
        figures.append(plot_denial_probability(curve, output_dir / "denial_probability.png"))
    if results.race_model is not None:
        figures.append(plot_race_coefficients(results.race_model, output_dir / "race_coefficients.png"))
    return figures


__all__ = [
    "AnalysisResults",
    "run_analysis",
    "save_analysis_outputs",
    "save_analysis_figures",
]
