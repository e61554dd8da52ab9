"""
Logistic regression of loan denial (statsmodels).

Two models are fit on outlier-filtered records:

- Model A (``income_zscore``): denial on the applicant income z-score.
- Model B (``race_indicators``): denial on one-hot applicant race
  indicators, one category held out as the reference.

Predictors and the outcome are checked for variation before the solver
runs. Non-convergence, perfect separation and non-finite estimates raise
``ModelFitError`` instead of returning coefficients.
"""

import logging
import re
import warnings

import numpy as np
import polars as pl
import statsmodels.api as sm
from scipy.special import expit
from statsmodels.tools.sm_exceptions import (
    ConvergenceWarning,
    PerfectSeparationError,
    PerfectSeparationWarning,
)

from ..core.config import DENIED_ACTIONS, NON_DECISION_ACTIONS, RACE_NAMES, REFERENCE_RACE
from ..core.errors import DegeneratePredictorError, DegenerateStatisticsError, ModelFitError
from ..core.results import CoefficientEstimate, RegressionResult


logger = logging.getLogger(__name__)

OUTCOME_COLUMN = "denied"
INCOME_PREDICTOR = "z_income"
INTERCEPT_NAME = "intercept"


def add_denial_outcome(df: pl.DataFrame) -> pl.DataFrame:
    """Add the binary ``denied`` outcome (1 for denied or closed for incompleteness)."""
    return df.with_columns(
        pl.col("action_taken").is_in(list(DENIED_ACTIONS)).cast(pl.Int8).alias(OUTCOME_COLUMN)
    )


def drop_non_decisions(df: pl.DataFrame) -> pl.DataFrame:
    """Drop withdrawn applications and purchased loans."""
    return df.filter(~pl.col("action_taken").is_in(list(NON_DECISION_ACTIONS)))


def race_indicator_name(race_name: str) -> str:
    """Column name of the one-hot indicator for a race category."""
    return "race_" + re.sub(r"[^a-z0-9]+", "_", race_name.lower()).strip("_")


def add_race_indicators(
    df: pl.DataFrame, reference: str = REFERENCE_RACE
) -> tuple[pl.DataFrame, list[str]]:
    """Add one Int8 indicator per race category except ``reference``.

    Returns the new frame and the indicator column names in code order.
    """
    if reference not in RACE_NAMES.values():
        raise ValueError(
            f"Unknown reference race {reference!r}; expected one of {list(RACE_NAMES.values())}"
        )
    indicators = {
        race_indicator_name(name): code for code, name in RACE_NAMES.items() if name != reference
    }
    out = df.with_columns(
        [
            (pl.col("applicant_race") == code).cast(pl.Int8).alias(column)
            for column, code in indicators.items()
        ]
    )
    return out, list(indicators)


def _check_variation(df: pl.DataFrame, columns: list[str]) -> None:
    for column in columns:
        values = df.get_column(column)
        if values.null_count():
            raise ValueError(f"Column {column} has {values.null_count()} missing values")
        if values.n_unique() < 2:
            raise DegeneratePredictorError(
                f"Column {column} has no variation across {df.height} records"
            )


def _fit_logit(
    df: pl.DataFrame,
    predictors: list[str],
    model: str,
    maxiter: int = 100,
) -> RegressionResult:
    """Fit ``denied ~ predictors`` and package the estimates."""
    if df.is_empty():
        raise DegenerateStatisticsError(f"Cannot fit {model}: no records")
    _check_variation(df, [OUTCOME_COLUMN])
    _check_variation(df, predictors)

    endog = df.get_column(OUTCOME_COLUMN).to_numpy().astype(float)
    exog = sm.add_constant(df.select(predictors).to_pandas().astype(float), has_constant="add")

    logger.info("Fitting %s on %d records with predictors %s", model, df.height, predictors)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ConvergenceWarning)
            warnings.simplefilter("error", PerfectSeparationWarning)
            fitted = sm.Logit(endog, exog).fit(disp=0, maxiter=maxiter)
    except (np.linalg.LinAlgError, PerfectSeparationError, PerfectSeparationWarning) as e:
        raise ModelFitError(f"{model} failed to fit: {e}") from e

    if not fitted.mle_retvals.get("converged", False):
        raise ModelFitError(f"{model} did not converge after {maxiter} iterations")

    estimates = np.column_stack([fitted.params, fitted.bse, fitted.tvalues, fitted.pvalues])
    if not np.isfinite(estimates).all():
        raise ModelFitError(f"{model} produced non-finite estimates")

    names = [INTERCEPT_NAME if name == "const" else name for name in exog.columns]
    coefficients = tuple(
        CoefficientEstimate(
            name=name,
            estimate=float(row[0]),
            std_error=float(row[1]),
            z_value=float(row[2]),
            p_value=float(row[3]),
        )
        for name, row in zip(names, estimates)
    )
    return RegressionResult(
        model=model,
        outcome=OUTCOME_COLUMN,
        coefficients=coefficients,
        n_obs=int(fitted.nobs),
        converged=True,
        log_likelihood=float(fitted.llf),
        pseudo_r_squared=float(fitted.prsquared),
    )


def fit_income_model(
    df: pl.DataFrame, exclude_non_decisions: bool = False
) -> RegressionResult:
    """
    Fit Model A: denial on the applicant income z-score.

    Parameters
    ----------
    df : pl.DataFrame
        Outlier-filtered records carrying ``z_income``.
    exclude_non_decisions : bool, default False
        Drop withdrawn (4) and purchased (6) applications first, as the race
        model always does. Off by default to reproduce the original results.

    Returns
    -------
    RegressionResult
        Intercept and ``z_income`` slope.
    """
    if INCOME_PREDICTOR not in df.columns:
        raise ValueError(f"{INCOME_PREDICTOR} not in frame; run filter_outliers first")
    frame = add_denial_outcome(df)
    if exclude_non_decisions:
        frame = drop_non_decisions(frame)
    return _fit_logit(frame, [INCOME_PREDICTOR], model="income_zscore")


def fit_race_model(df: pl.DataFrame, reference: str = REFERENCE_RACE) -> RegressionResult:
    """
    Fit Model B: denial on one-hot race indicators.

    Withdrawn (4) and purchased (6) applications are excluded. Six race
    categories give five indicators; ``reference`` is the implicit baseline.
    """
    frame = drop_non_decisions(add_denial_outcome(df))
    frame, indicators = add_race_indicators(frame, reference)
    return _fit_logit(frame, indicators, model="race_indicators")


def probability_of_denial(result: RegressionResult, z):
    """Predicted denial probability ``exp(b0 + b1 z) / (1 + exp(b0 + b1 z))``.

    Accepts a scalar or an array of z values and returns the same shape.
    """
    if len(result.coefficients) != 2:
        raise ValueError(
            f"Model {result.model} has {len(result.coefficients) - 1} predictors; expected 1"
        )
    b0 = result.intercept.estimate
    b1 = result.coefficients[1].estimate
    probability = expit(b0 + b1 * np.asarray(z, dtype=float))
    if np.ndim(probability) == 0:
        return float(probability)
    return probability


def denial_probability_curve(
    result: RegressionResult, z_grid: np.ndarray | None = None
) -> pl.DataFrame:
    """Denial probability over a grid of income z-scores, for plotting."""
    if z_grid is None:
        z_grid = np.linspace(-2.0, 2.0, 81)
    z_grid = np.asarray(z_grid, dtype=float)
    return pl.DataFrame(
        {
            INCOME_PREDICTOR: z_grid,
            "probability_denied": probability_of_denial(result, z_grid),
        }
    )


__all__ = [
    "OUTCOME_COLUMN",
    "add_denial_outcome",
    "drop_non_decisions",
    "race_indicator_name",
    "add_race_indicators",
    "fit_income_model",
    "fit_race_model",
    "probability_of_denial",
    "denial_probability_curve",
]
