"""Shared fixtures: raw LAR rows, cleaned loan frames and LAR files."""

from pathlib import Path

import numpy as np
import polars as pl
import pytest

from hmda_denial.core.config import LAR_2007_2017_COLUMNS


RAW_DEFAULTS = {
    "as_of_year": "2008",
    "respondent_id": "0000012345",
    "agency_code": "1",
    "loan_type": "1",
    "property_type": "1",
    "loan_purpose": "1",
    "owner_occupancy": "1",
    "loan_amount_000s": "00150",
    "preapproval": "3",
    "action_taken": "1",
    "msamd": "31084",
    "state_code": "06",
    "county_code": "037",
    "census_tract_number": "2071.00",
    "applicant_ethnicity": "2",
    "co_applicant_ethnicity": "5",
    "applicant_race_1": "5",
    "applicant_sex": "1",
    "co_applicant_sex": "5",
    "applicant_income_000s": "0075",
    "purchaser_type": "0",
    "rate_spread": "NA",
    "hoepa_status": "2",
    "lien_status": "1",
    "edit_status": "NA",
    "sequence_number": "0000001",
    "population": "4562",
    "minority_population": "45.10",
    "hud_median_family_income": "65300",
    "tract_to_msamd_income": "110.20",
    "number_of_owner_occupied_units": "1200",
    "number_of_1_to_4_family_units": "1500",
    "application_date_indicator": "0",
}

CLEAN_DEFAULTS = {
    "loan_amount": 150_000,
    "action_taken": 1,
    "state_code": "06",
    "county_fips": "06037",
    "applicant_race": 5,
    "applicant_sex": 1,
    "income": 50_000,
    "median_income": 50_000,
    "applicant_race_name": "White",
}


def raw_row(**overrides: str | None) -> dict[str, str | None]:
    """One raw LAR record with every one of the 45 fields as text."""
    row = {column: RAW_DEFAULTS.get(column, "NA") for column in LAR_2007_2017_COLUMNS}
    row.update(overrides)
    return row


@pytest.fixture
def make_raw_lar():
    """Build an all-string raw LAR frame from per-row overrides."""

    def _make(rows: list[dict[str, str | None]]) -> pl.DataFrame:
        records = [raw_row(**overrides) for overrides in rows]
        return pl.DataFrame(
            records, schema={column: pl.String for column in LAR_2007_2017_COLUMNS}
        )

    return _make


@pytest.fixture
def make_loans():
    """Build a cleaned loan frame; columns not given take default values."""

    def _make(**columns) -> pl.DataFrame:
        n = len(next(iter(columns.values())))
        data = {
            name: columns.get(name, [default] * n) for name, default in CLEAN_DEFAULTS.items()
        }
        data.update({k: v for k, v in columns.items() if k not in data})
        return pl.DataFrame(data).with_columns(
            [
                pl.col(column).cast(pl.Int64)
                for column in (
                    "loan_amount",
                    "action_taken",
                    "applicant_race",
                    "applicant_sex",
                    "income",
                    "median_income",
                )
            ]
        )

    return _make


def write_lar_file(path: Path, rows: list[dict[str, str | None]], separator: str = ",") -> Path:
    """Write header-less LAR rows to ``path``."""
    lines = []
    for overrides in rows:
        row = raw_row(**overrides)
        lines.append(separator.join(row[column] or "" for column in LAR_2007_2017_COLUMNS))
    path.write_text("\n".join(lines) + "\n")
    return path


def synthetic_rows(n: int = 600, seed: int = 7, races: tuple[int, ...] = (1, 2, 3, 4, 5, 6)):
    """Deterministic raw rows spread over four counties in two states."""
    rng = np.random.default_rng(seed)
    counties = [("06", "001"), ("06", "037"), ("06", "075"), ("36", "061")]
    actions = [1, 1, 1, 2, 3, 4, 5, 6]
    rows = []
    for i in range(n):
        state, county = counties[i % len(counties)]
        rows.append(
            {
                "state_code": state,
                "county_code": county,
                "loan_amount_000s": f"{int(rng.normal(200, 40)):05d}",
                "applicant_income_000s": f"{int(rng.normal(80, 15)):04d}",
                "hud_median_family_income": str(int(rng.normal(65000, 5000))),
                "applicant_race_1": str(races[int(rng.integers(len(races)))]),
                "applicant_sex": str(int(rng.integers(1, 3))),
                "action_taken": str(actions[int(rng.integers(len(actions)))]),
                "sequence_number": f"{i:07d}",
            }
        )
    return rows
