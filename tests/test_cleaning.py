"""Tests for the LAR cleaning utilities."""

import polars as pl
import pytest

from hmda_denial import SchemaMismatchError, clean_lar
from hmda_denial.core.config import RACE_NAMES, SEX_NAMES
from hmda_denial.utils.cleaning import (
    CLEAN_COLUMN_ORDER,
    label_race,
    parse_numeric_columns,
    replace_na_like_values,
    rescale_thousands,
)
from hmda_denial.utils.schema import is_thousands_column


def test_clean_lar_rescales_and_types_fields(make_raw_lar):
    raw = make_raw_lar([{"loan_amount_000s": "00150", "applicant_income_000s": "0075"}])

    cleaned, report = clean_lar(raw)

    assert cleaned.columns == CLEAN_COLUMN_ORDER
    row = cleaned.row(0, named=True)
    assert row["loan_amount"] == 150_000
    assert row["income"] == 75_000
    assert row["median_income"] == 65_300
    assert row["county_fips"] == "06037"
    assert row["state_code"] == "06"
    assert row["applicant_race_name"] == "White"
    assert cleaned.schema["loan_amount"] == pl.Int64
    assert report.total == 0


def test_clean_lar_zero_pads_geographic_codes(make_raw_lar):
    raw = make_raw_lar([{"state_code": "6", "county_code": "37"}])

    cleaned, _ = clean_lar(raw)

    assert cleaned["county_fips"].to_list() == ["06037"]
    assert cleaned["state_code"].to_list() == ["06"]


def test_clean_lar_drops_sentinel_demographics(make_raw_lar):
    raw = make_raw_lar(
        [
            {},
            {"applicant_sex": "3"},
            {"applicant_sex": "4"},
            {"applicant_race_1": "7"},
            {"applicant_sex": "2", "applicant_race_1": "3"},
        ]
    )

    cleaned, report = clean_lar(raw)

    assert cleaned.height == 2
    assert report.counts == {"missing_required": 3}
    assert set(cleaned["applicant_sex"].to_list()) == {1, 2}
    assert cleaned["applicant_race_name"].to_list() == ["White", "Black or African American"]


def test_clean_lar_counts_malformed_fields(make_raw_lar):
    raw = make_raw_lar(
        [
            {},
            {"loan_amount_000s": "12x"},
            {"applicant_income_000s": "abc"},
            {"applicant_race_1": "9"},
            {"county_code": "0A7"},
        ]
    )

    cleaned, report = clean_lar(raw)

    assert cleaned.height == 1
    assert report.counts == {
        "malformed_loan_amount_000s": 1,
        "malformed_applicant_income_000s": 1,
        "malformed_applicant_race": 1,
        "malformed_county_fips": 1,
    }


def test_clean_lar_drops_missing_and_non_positive(make_raw_lar):
    raw = make_raw_lar(
        [
            {"applicant_income_000s": "NA"},
            {"hud_median_family_income": "  "},
            {"loan_amount_000s": "00000"},
            {},
        ]
    )

    cleaned, report = clean_lar(raw)

    assert cleaned.height == 1
    assert report.counts == {"missing_required": 2, "non_positive": 1}


def test_cleaned_records_satisfy_invariants(make_raw_lar):
    raw = make_raw_lar(
        [
            {"applicant_race_1": str(race), "applicant_sex": str(sex)}
            for race in range(1, 8)
            for sex in range(1, 5)
        ]
    )

    cleaned, _ = clean_lar(raw)

    assert cleaned.height == 12
    assert cleaned["applicant_race"].is_in(list(RACE_NAMES)).all()
    assert cleaned["applicant_sex"].is_in(list(SEX_NAMES)).all()
    for column in ("loan_amount", "income", "median_income"):
        assert (cleaned[column] > 0).all()
    assert cleaned.null_count().sum_horizontal().item() == 0


def test_clean_lar_is_idempotent(make_raw_lar):
    raw = make_raw_lar([{}, {"applicant_race_1": "2", "action_taken": "3"}, {"applicant_sex": "3"}])

    once, _ = clean_lar(raw)
    twice, report = clean_lar(once)

    assert twice.equals(once)
    assert report.total == 0


def test_clean_lar_does_not_modify_input(make_raw_lar):
    raw = make_raw_lar([{}])
    before = raw.clone()

    clean_lar(raw)

    assert raw.equals(before)


def test_clean_lar_requires_analysis_fields():
    df = pl.DataFrame({"loan_amount_000s": ["00100"], "action_taken": ["1"]})

    with pytest.raises(SchemaMismatchError):
        clean_lar(df)


def test_replace_na_like_values_replaces_tokens():
    df = pl.DataFrame({"col": ["NA", " value ", ""], "num": [1, 2, 3]})

    result = replace_na_like_values(df, ["col", "num"])

    assert result["col"].to_list() == [None, "value", None]
    assert result["num"].to_list() == [1, 2, 3]


def test_rescale_thousands_is_noop_without_thousands_columns():
    df = pl.DataFrame({"loan_amount": [150_000], "income": [75_000]})

    assert rescale_thousands(df).equals(df)


def test_label_race_rejects_codes_outside_allow_list():
    df = pl.DataFrame({"applicant_race": [5, 8]})

    with pytest.raises(ValueError, match="allow-list"):
        label_race(df)


def test_parse_numeric_columns_reads_zero_padded_thousands():
    df = pl.DataFrame(
        {
            "loan_amount_000s": ["00000", "00125", " 0042"],
            "applicant_income_000s": ["0075", "0000", "0310"],
            "state_code": ["06", "06", "06"],
            "county_fips": ["06037", "06037", "06037"],
        }
    )

    parsed, report = parse_numeric_columns(df)

    assert parsed["loan_amount_000s"].to_list() == [0, 125, 42]
    assert parsed["applicant_income_000s"].to_list() == [75, 0, 310]
    assert report.total == 0
    assert is_thousands_column("loan_amount_000s")
    assert not is_thousands_column("loan_amount")
