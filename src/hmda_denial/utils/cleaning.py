"""
Cleaning utilities (Polars): projection, NA handling, typed parsing, recoding.

Every function returns a new frame. Steps that drop records also return a
``DropReport`` so the counts can be surfaced at the end of a run.
"""

import logging
from typing import Sequence

import polars as pl

from ..core.config import (
    INTEGER_COLUMNS,
    RACE_NAMES,
    RACE_NOT_APPLICABLE,
    REQUIRED_COLUMNS,
    SEX_NAMES,
    THOUSANDS_COLUMNS,
)
from ..core.results import DropReport
from .geo import COUNTY_FIPS_PATTERN, STATE_FIPS_PATTERN, add_geographic_keys
from .schema import is_thousands_column, rename_hmda_columns, resolve_source_columns


logger = logging.getLogger(__name__)

NA_LIKE = ("NA", "N/A", "Exempt", "Not Applicable", "nan", "")

CLEAN_COLUMN_ORDER = REQUIRED_COLUMNS + ["applicant_race_name"]


def replace_na_like_values(
    df: pl.DataFrame,
    columns: Sequence[str],
    na_like: Sequence[str] = NA_LIKE,
) -> pl.DataFrame:
    """Trim string columns and replace NA-like tokens with null."""
    columns_to_update = [
        column for column in columns if column in df.columns and df.schema[column] == pl.String
    ]
    if not columns_to_update:
        return df.clone()
    replacements = list(na_like)
    return df.with_columns(
        [
            pl.col(column)
            .str.strip_chars()
            .replace(replacements, [None] * len(replacements))
            .alias(column)
            for column in columns_to_update
        ]
    )


def select_analysis_columns(df: pl.DataFrame) -> pl.DataFrame:
    """Keep only the fields used by the analysis, under their analysis names.

    Accepts either a raw LAR frame or an already-cleaned frame.
    """
    out = df.select(resolve_source_columns(df.columns))
    out = replace_na_like_values(out, out.columns)
    out = rename_hmda_columns(out)
    return add_geographic_keys(out)


def _parse_integer(column: str) -> pl.Expr:
    text = pl.col(column).str.strip_chars()
    if is_thousands_column(column):
        # Values are zero-padded counts of thousands, e.g. "00125"
        text = text.str.strip_chars_start("0")
        text = pl.when(text == "").then(pl.lit("0")).otherwise(text)
    return text.cast(pl.Int64, strict=False)


def parse_numeric_columns(df: pl.DataFrame) -> tuple[pl.DataFrame, DropReport]:
    """Parse integer fields and validate geographic keys.

    A non-null value that cannot be parsed marks the record as malformed: it
    is dropped and counted under ``malformed_<column>``. Each dropped record
    is counted once, against the first malformed column found.
    """
    report = DropReport()
    out = df
    for column in INTEGER_COLUMNS:
        if column not in out.columns:
            continue
        if out.schema[column] == pl.Int64:
            continue
        if out.schema[column] != pl.String:
            out = out.with_columns(pl.col(column).cast(pl.Int64))
            continue
        parsed = _parse_integer(column)
        malformed = pl.col(column).is_not_null() & parsed.is_null()
        n_malformed = out.select(malformed.sum()).item()
        if n_malformed:
            logger.debug("Dropping %d records with malformed %s", n_malformed, column)
        out = out.filter(~malformed).with_columns(parsed.alias(column))
        report = report.with_count(f"malformed_{column}", n_malformed)

    for column, pattern in (
        ("state_code", STATE_FIPS_PATTERN),
        ("county_fips", COUNTY_FIPS_PATTERN),
    ):
        malformed = pl.col(column).is_not_null() & ~pl.col(column).str.contains(pattern)
        n_malformed = out.select(malformed.sum()).item()
        out = out.filter(~malformed)
        report = report.with_count(f"malformed_{column}", n_malformed)

    return out, report


def replace_sentinel_codes(df: pl.DataFrame) -> tuple[pl.DataFrame, DropReport]:
    """Map sentinel demographic codes to null.

    Sex codes other than male/female become null. Race code 7 (not
    applicable) becomes null; any race code outside 1-7 is malformed.
    """
    valid_race = list(RACE_NAMES) + [RACE_NOT_APPLICABLE]
    malformed = pl.col("applicant_race").is_not_null() & ~pl.col("applicant_race").is_in(valid_race)
    n_malformed = df.select(malformed.sum()).item()
    out = df.filter(~malformed).with_columns(
        pl.when(pl.col("applicant_sex").is_in(list(SEX_NAMES)))
        .then(pl.col("applicant_sex"))
        .otherwise(None)
        .alias("applicant_sex"),
        pl.when(pl.col("applicant_race") == RACE_NOT_APPLICABLE)
        .then(None)
        .otherwise(pl.col("applicant_race"))
        .alias("applicant_race"),
    )
    return out, DropReport().with_count("malformed_applicant_race", n_malformed)


def drop_missing_required(df: pl.DataFrame) -> tuple[pl.DataFrame, DropReport]:
    """Drop records with any missing required field. No imputation."""
    subset = [
        column for column in REQUIRED_COLUMNS + list(THOUSANDS_COLUMNS) if column in df.columns
    ]
    out = df.drop_nulls(subset=subset)
    return out, DropReport().with_count("missing_required", df.height - out.height)


def rescale_thousands(df: pl.DataFrame) -> pl.DataFrame:
    """Convert thousands-denominated amounts to dollars.

    ``loan_amount_000s`` and ``applicant_income_000s`` become ``loan_amount``
    and ``income``. Frames without the ``_000s`` columns are returned
    unchanged, so the conversion is applied exactly once.
    """
    out = df
    for raw_column, dollar_column in THOUSANDS_COLUMNS.items():
        if raw_column not in out.columns:
            continue
        out = out.with_columns((pl.col(raw_column) * 1000).alias(dollar_column)).drop(raw_column)
    return out


def drop_non_positive(df: pl.DataFrame) -> tuple[pl.DataFrame, DropReport]:
    out = df.filter(
        (pl.col("loan_amount") > 0) & (pl.col("income") > 0) & (pl.col("median_income") > 0)
    )
    return out, DropReport().with_count("non_positive", df.height - out.height)


def label_race(df: pl.DataFrame) -> pl.DataFrame:
    """Add ``applicant_race_name`` from the race code lookup table.

    Raises
    ------
    ValueError
        If any race code is outside the allow-list.
    """
    invalid = df.filter(~pl.col("applicant_race").is_in(list(RACE_NAMES)))
    if invalid.height:
        codes = sorted(invalid.get_column("applicant_race").unique().to_list(), key=str)
        raise ValueError(f"Race codes outside the allow-list: {codes}")
    return df.with_columns(
        pl.col("applicant_race")
        .replace_strict(RACE_NAMES, return_dtype=pl.String)
        .alias("applicant_race_name")
    )


def clean_lar(df: pl.DataFrame) -> tuple[pl.DataFrame, DropReport]:
    """Clean a LAR frame into one typed record per application.

    Steps: column projection, NA-like tokens to null, typed parsing,
    sentinel codes to null, missing-row elimination, rescale of thousands,
    positivity check, race recode. Re-applying to the output is a no-op.

    Parameters
    ----------
    df : pl.DataFrame
        Raw LAR frame (all strings) or a previously cleaned frame.

    Returns
    -------
    tuple[pl.DataFrame, DropReport]
        Cleaned frame with ``CLEAN_COLUMN_ORDER`` columns and the counts
        of records dropped by reason.
    """
    rows_in = df.height
    out = select_analysis_columns(df)
    out, report = parse_numeric_columns(out)
    out, sentinel_report = replace_sentinel_codes(out)
    out, missing_report = drop_missing_required(out)
    out = rescale_thousands(out)
    out, positive_report = drop_non_positive(out)
    out = label_race(out).select(CLEAN_COLUMN_ORDER)

    report = report.merge(sentinel_report).merge(missing_report).merge(positive_report)
    logger.info("Cleaned %d of %d records (%d dropped)", out.height, rows_in, report.total)
    return out, report


__all__ = [
    "NA_LIKE",
    "CLEAN_COLUMN_ORDER",
    "replace_na_like_values",
    "select_analysis_columns",
    "parse_numeric_columns",
    "replace_sentinel_codes",
    "drop_missing_required",
    "rescale_thousands",
    "drop_non_positive",
    "label_race",
    "clean_lar",
]
