"""
Outlier rejection (Polars): per-geography z-scores and absolute income bounds.

Loan amounts are standardized against their group mean. Incomes are
standardized against the area median income rather than the group mean,
using the group's income dispersion.

A group with fewer than two records, or with no spread in a column, has no
usable dispersion for that column. Its z-score in that column is defined as
0 so the records pass the z-score stage; such groups are reported through
``find_degenerate_groups`` and a warning.
"""

import logging

import polars as pl

from ..core.config import INCOME_CEILING, INCOME_FLOOR, Z_SCORE_BOUND
from ..core.errors import DegenerateStatisticsError
from ..core.results import DropReport


logger = logging.getLogger(__name__)


def _has_dispersion(column: str, group_col: str) -> pl.Expr:
    return (pl.col(column).count().over(group_col) >= 2) & (
        pl.col(column).min().over(group_col) != pl.col(column).max().over(group_col)
    )


def _standardize(deviation: pl.Expr, column: str, group_col: str) -> pl.Expr:
    std = pl.col(column).std(ddof=1).over(group_col)
    return (
        pl.when(_has_dispersion(column, group_col))
        .then(deviation / std)
        .otherwise(pl.lit(0.0))
    )


def add_group_zscores(df: pl.DataFrame, group_col: str = "county_fips") -> pl.DataFrame:
    """Add ``z_loan`` and ``z_income`` computed within each geographic group.

    Parameters
    ----------
    df : pl.DataFrame
        Cleaned loan records.
    group_col : str
        Geographic key to group by (``county_fips`` or ``state_code``).

    Returns
    -------
    pl.DataFrame
        Input frame with two Float64 columns added.
    """
    loan_deviation = pl.col("loan_amount") - pl.col("loan_amount").mean().over(group_col)
    income_deviation = pl.col("income") - pl.col("median_income")
    return df.with_columns(
        _standardize(loan_deviation, "loan_amount", group_col).cast(pl.Float64).alias("z_loan"),
        _standardize(income_deviation, "income", group_col).cast(pl.Float64).alias("z_income"),
    )


def find_degenerate_groups(df: pl.DataFrame, group_col: str = "county_fips") -> pl.DataFrame:
    """Return the groups whose loan amount or income has no usable dispersion."""
    return (
        df.group_by(group_col)
        .agg(
            pl.len().alias("record_count"),
            (pl.col("loan_amount").min() == pl.col("loan_amount").max()).alias("constant_loan_amount"),
            (pl.col("income").min() == pl.col("income").max()).alias("constant_income"),
        )
        .with_columns((pl.col("record_count") < 2).alias("too_few_records"))
        .filter(
            pl.col("too_few_records") | pl.col("constant_loan_amount") | pl.col("constant_income")
        )
        .sort(group_col)
    )


def filter_outliers(
    df: pl.DataFrame,
    group_col: str = "county_fips",
    z_bound: float = Z_SCORE_BOUND,
    income_bounds: tuple[int, int] = (INCOME_FLOOR, INCOME_CEILING),
) -> tuple[pl.DataFrame, DropReport]:
    """Drop records outside the z-score bound or the absolute income bounds.

    Retained records satisfy ``|z_loan| < z_bound``, ``|z_income| < z_bound``
    and ``income_bounds[0] < income < income_bounds[1]``. The z-score columns
    are kept on the output for the model fitter.

    Raises
    ------
    DegenerateStatisticsError
        If ``df`` has no records.
    """
    if df.is_empty():
        raise DegenerateStatisticsError("Cannot filter outliers: no records survived cleaning")

    degenerate = find_degenerate_groups(df, group_col)
    if degenerate.height:
        n_groups = df.get_column(group_col).n_unique()
        logger.warning(
            "%d of %d %s groups lack dispersion; their z-scores are set to 0",
            degenerate.height,
            n_groups,
            group_col,
        )

    scored = add_group_zscores(df, group_col)
    within = scored.filter(
        (pl.col("z_loan").abs() < z_bound) & (pl.col("z_income").abs() < z_bound)
    )
    lower, upper = income_bounds
    bounded = within.filter((pl.col("income") > lower) & (pl.col("income") < upper))

    report = (
        DropReport()
        .with_count("z_score", scored.height - within.height)
        .with_count("income_bounds", within.height - bounded.height)
    )
    logger.info(
        "Outlier filter kept %d of %d records (|z| < %s, %s < income < %s)",
        bounded.height,
        df.height,
        z_bound,
        lower,
        upper,
    )
    return bounded, report


__all__ = [
    "add_group_zscores",
    "find_degenerate_groups",
    "filter_outliers",
]
