"""Tests for geographic aggregation and map tables."""

import polars as pl
import pytest

from hmda_denial import DegenerateStatisticsError, map_table, summarize_by_geography
from hmda_denial.utils.summary import denial_rates_by


def test_summarize_by_county_one_row_per_key(make_loans):
    df = make_loans(
        loan_amount=[100_000, 200_000, 300_000, 150_000, 250_000],
        income=[50_000, 100_000, 100_000, 50_000, 50_000],
        action_taken=[3, 1, 5, 1, 1],
        county_fips=["06001", "06001", "06001", "06075", "06075"],
    )

    summary = summarize_by_geography(df, "county")

    assert summary["county_fips"].to_list() == ["06001", "06075"]
    first = summary.row(0, named=True)
    assert first["loan_count"] == 3
    assert first["mean_loan_amount"] == pytest.approx(200_000)
    assert first["mean_loan_to_income"] == pytest.approx((2 + 2 + 3) / 3)
    assert first["denial_rate"] == pytest.approx(2 / 3)
    assert first["denial_percent"] == pytest.approx(200 / 3)
    second = summary.row(1, named=True)
    assert second["denial_rate"] == 0


def test_summary_means_lie_within_group_range(make_loans):
    df = make_loans(
        loan_amount=[90_000, 400_000, 120_000, 180_000, 75_000, 310_000],
        income=[30_000, 150_000, 60_000, 45_000, 20_000, 90_000],
        county_fips=["06001", "06001", "06001", "36061", "36061", "36061"],
        state_code=["06", "06", "06", "36", "36", "36"],
    )

    summary = summarize_by_geography(df, "county")
    bounds = df.group_by("county_fips").agg(
        pl.col("loan_amount").min().alias("lo"), pl.col("loan_amount").max().alias("hi")
    )

    checked = summary.join(bounds, on="county_fips")
    assert checked.height == df["county_fips"].n_unique()
    assert ((checked["mean_loan_amount"] >= checked["lo"]) & (checked["mean_loan_amount"] <= checked["hi"])).all()


def test_ratio_uses_its_own_income_floor(make_loans):
    df = make_loans(
        loan_amount=[100_000, 200_000],
        income=[50_000, 1_000],
    )

    summary = summarize_by_geography(df)

    row = summary.row(0, named=True)
    assert row["loan_count"] == 2
    assert row["mean_loan_amount"] == pytest.approx(150_000)
    assert row["mean_loan_to_income"] == pytest.approx(2.0)


def test_ratio_is_null_when_no_income_above_floor(make_loans):
    df = make_loans(loan_amount=[100_000], income=[800])

    summary = summarize_by_geography(df)

    assert summary["mean_loan_to_income"].to_list() == [None]


def test_summarize_by_state(make_loans):
    df = make_loans(
        loan_amount=[100_000, 200_000, 300_000],
        county_fips=["06001", "06075", "36061"],
        state_code=["06", "06", "36"],
    )

    summary = summarize_by_geography(df, "state")

    assert summary["state_code"].to_list() == ["06", "36"]
    assert summary["loan_count"].to_list() == [2, 1]


def test_summarize_rejects_empty_frame(make_loans):
    with pytest.raises(DegenerateStatisticsError):
        summarize_by_geography(make_loans(loan_amount=[1]).clear())


def test_summarize_rejects_unknown_level(make_loans):
    with pytest.raises(ValueError):
        summarize_by_geography(make_loans(loan_amount=[1]), "tract")


def test_map_table_has_key_and_value_only(make_loans):
    summary = summarize_by_geography(make_loans(loan_amount=[100_000, 200_000]))

    table = map_table(summary, "denial_percent")

    assert table.columns == ["county_fips", "denial_percent"]
    with pytest.raises(ValueError):
        map_table(summary, "not_a_column")


def test_denial_rates_by_race(make_loans):
    df = make_loans(
        loan_amount=[1, 1, 1, 1],
        action_taken=[3, 1, 1, 1],
        applicant_race_name=["Black or African American", "Black or African American", "White", "White"],
    )

    rates = denial_rates_by(df, "applicant_race_name")

    assert rates["denial_rate"].to_list() == [0.5, 0.0]
