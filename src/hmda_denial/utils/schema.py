"""
Schema utilities: column renaming and source-column resolution.
"""

import polars as pl

from ..core.config import ANALYSIS_RENAME_DICTIONARY, THOUSANDS_COLUMNS
from ..core.errors import SchemaMismatchError


# Analysis field -> candidate source columns, raw LAR name first.
# Cleaned names are accepted so that cleaning can be re-applied to its own output.
ANALYSIS_SOURCE_COLUMNS = {
    "loan_amount": ("loan_amount_000s", "loan_amount"),
    "action_taken": ("action_taken",),
    "state_code": ("state_code",),
    "county": ("county_code", "county_fips"),
    "applicant_race": ("applicant_race_1", "applicant_race"),
    "applicant_sex": ("applicant_sex",),
    "income": ("applicant_income_000s", "income"),
    "median_income": ("hud_median_family_income", "median_income"),
}


def rename_hmda_columns(df: pl.DataFrame) -> pl.DataFrame:
    """Rename raw LAR columns kept by the analysis to their analysis names.

    Thousands-denominated columns keep their ``_000s`` names until they are
    rescaled, so the unit stays visible in the schema.
    """
    return df.rename(ANALYSIS_RENAME_DICTIONARY, strict=False)


def resolve_source_columns(columns: list[str]) -> list[str]:
    """Return the column to read for every analysis field.

    Raises
    ------
    SchemaMismatchError
        If a field has none of its candidate columns in ``columns``.
    """
    resolved = []
    missing = []
    for field, candidates in ANALYSIS_SOURCE_COLUMNS.items():
        present = [column for column in candidates if column in columns]
        if present:
            resolved.append(present[0])
        else:
            missing.append(field)
    if missing:
        raise SchemaMismatchError(f"Frame is missing required LAR fields: {missing}")
    return resolved


def is_thousands_column(column: str) -> bool:
    return column in THOUSANDS_COLUMNS


__all__ = [
    "ANALYSIS_SOURCE_COLUMNS",
    "rename_hmda_columns",
    "resolve_source_columns",
    "is_thousands_column",
]
