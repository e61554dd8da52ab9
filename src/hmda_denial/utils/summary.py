"""
HMDA Geographic Summary Functions
=================================

This module aggregates outlier-filtered loan records by geography and hands
the results to map and chart renderers.

Key Features:
- One summary row per county (5-digit FIPS) or state (2-digit FIPS)
- Mean loan amount, mean loan-to-income ratio and denial rate per key
- Two-column key/value tables for choropleth renderers
- Denial rates by any categorical column (e.g. applicant race)

Notes:
- The loan-to-income ratio uses its own income floor, applied as a
  separate filter step before the ratio is averaged.
- Keys with no record above that floor get a null ratio and a warning.
"""

import logging
from typing import Literal

import polars as pl

from ..core.config import DENIED_ACTIONS, RATIO_INCOME_FLOOR, get_group_column
from ..core.errors import DegenerateStatisticsError


logger = logging.getLogger(__name__)

GEOGRAPHIC_KEYS = ("county_fips", "state_code")


def _denied() -> pl.Expr:
    return pl.col("action_taken").is_in(list(DENIED_ACTIONS))


def apply_ratio_income_floor(
    df: pl.DataFrame, income_floor: int = RATIO_INCOME_FLOOR
) -> pl.DataFrame:
    """Keep records whose income is above the loan-to-income ratio floor."""
    return df.filter(pl.col("income") > income_floor)


def summarize_by_geography(
    df: pl.DataFrame,
    level: Literal["county", "state"] = "county",
    income_floor: int = RATIO_INCOME_FLOOR,
) -> pl.DataFrame:
    """
    Summarize loan records by geographic key.

    Parameters
    ----------
    df : pl.DataFrame
        Outlier-filtered loan records.
    level : {"county", "state"}
        Aggregation level. County uses ``county_fips``, state uses ``state_code``.
    income_floor : int
        Income floor (exclusive) for records entering the loan-to-income ratio.

    Returns
    -------
    pl.DataFrame
        One row per key with ``loan_count``, ``mean_loan_amount``,
        ``mean_loan_to_income``, ``denial_rate`` and ``denial_percent``,
        sorted by key.

    Raises
    ------
    DegenerateStatisticsError
        If ``df`` has no records.
    """
    key = get_group_column(level)
    if df.is_empty():
        raise DegenerateStatisticsError(f"Cannot summarize by {level}: no records")

    base = df.group_by(key).agg(
        pl.len().alias("loan_count"),
        pl.col("loan_amount").mean().alias("mean_loan_amount"),
        _denied().mean().alias("denial_rate"),
    )
    ratios = (
        apply_ratio_income_floor(df, income_floor)
        .group_by(key)
        .agg((pl.col("loan_amount") / pl.col("income")).mean().alias("mean_loan_to_income"))
    )
    summary = (
        base.join(ratios, on=key, how="left")
        .with_columns((pl.col("denial_rate") * 100).alias("denial_percent"))
        .select(
            key,
            "loan_count",
            "mean_loan_amount",
            "mean_loan_to_income",
            "denial_rate",
            "denial_percent",
        )
        .sort(key)
    )

    missing_ratio = summary.filter(pl.col("mean_loan_to_income").is_null()).height
    if missing_ratio:
        logger.warning(
            "%d %s keys have no income above %s; their loan-to-income ratio is null",
            missing_ratio,
            level,
            income_floor,
        )
    logger.info("Summarized %d records into %d %s rows", df.height, summary.height, level)
    return summary


def map_table(summary: pl.DataFrame, value_col: str) -> pl.DataFrame:
    """Return the two-column (geographic key, value) table a map renderer consumes."""
    keys = [column for column in GEOGRAPHIC_KEYS if column in summary.columns]
    if not keys:
        raise ValueError("Summary has no geographic key column")
    if value_col not in summary.columns:
        raise ValueError(f"Summary has no column named {value_col}")
    return summary.select(keys[0], value_col)


def denial_rates_by(df: pl.DataFrame, column: str) -> pl.DataFrame:
    """Denial rate and record count for each value of ``column``."""
    if column not in df.columns:
        raise ValueError(f"Cannot compute denial rates: {column} not in frame")
    return (
        df.group_by(column)
        .agg(
            pl.len().alias("loan_count"),
            _denied().mean().alias("denial_rate"),
        )
        .sort(column)
    )


__all__ = [
    "apply_ratio_income_floor",
    "summarize_by_geography",
    "map_table",
    "denial_rates_by",
]
