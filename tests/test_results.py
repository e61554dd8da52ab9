"""Tests for the result containers."""

import logging

import pytest

from hmda_denial import CoefficientEstimate, DropReport, RegressionResult


def test_drop_report_accumulates_counts():
    report = DropReport().with_count("z_score", 2).with_count("z_score", 3).with_count("non_positive", 0)

    assert report.counts == {"z_score": 5}
    assert report.total == 5


def test_drop_report_merge_leaves_inputs_unchanged():
    first = DropReport({"missing_required": 1})
    second = DropReport({"missing_required": 2, "z_score": 4})

    merged = first.merge(second)

    assert merged.counts == {"missing_required": 3, "z_score": 4}
    assert first.counts == {"missing_required": 1}


def test_drop_report_frame_is_sorted_by_reason():
    frame = DropReport({"z_score": 1, "income_bounds": 2}).to_frame()

    assert frame["reason"].to_list() == ["income_bounds", "z_score"]
    assert frame["dropped"].to_list() == [2, 1]


def test_drop_report_logs_each_reason(caplog):
    with caplog.at_level(logging.INFO, logger="hmda_denial.core.results"):
        DropReport({"z_score": 1, "income_bounds": 2}).log_summary("outliers")

    assert "Dropped 2 records: income_bounds" in caplog.text
    assert "Dropped 3 records in total" in caplog.text


def test_regression_result_lookup():
    result = RegressionResult(
        model="race_indicators",
        outcome="denied",
        coefficients=(
            CoefficientEstimate("intercept", -1.5, 0.1, -15.0, 0.0),
            CoefficientEstimate("race_asian", 0.2, 0.3, 0.67, 0.5),
        ),
        n_obs=200,
        converged=True,
        log_likelihood=-90.0,
        pseudo_r_squared=0.01,
    )

    assert result.predictors == ["race_asian"]
    assert not result.coefficient("race_asian").is_significant()
    assert result.intercept.is_significant()
    with pytest.raises(KeyError):
        result.coefficient("race_white")
