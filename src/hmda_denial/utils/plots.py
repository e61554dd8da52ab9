"""
Figure helpers (matplotlib) for geographic summaries and fitted models.
"""

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import polars as pl  # noqa: E402

from ..core.results import RegressionResult  # noqa: E402


logger = logging.getLogger(__name__)


def _save(fig, save_file: Path | str) -> Path:
    save_file = Path(save_file)
    save_file.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(save_file, dpi=250)
    plt.close(fig)
    logger.info("Saved figure to %s", save_file)
    return save_file


def plot_ratio_vs_denial(summary: pl.DataFrame, save_file: Path | str) -> Path:
    """Scatter of mean loan-to-income ratio against denial rate, one point per key."""
    points = summary.drop_nulls(subset=["mean_loan_to_income", "denial_rate"])
    fig, ax = plt.subplots(figsize=(7, 5))
    ax.scatter(
        points["mean_loan_to_income"].to_numpy(),
        points["denial_percent"].to_numpy(),
        s=12,
        alpha=0.5,
    )
    ax.set_xlabel("Mean loan-to-income ratio")
    ax.set_ylabel("Denial rate (%)")
    ax.set_title(f"Loan-to-income ratio vs. denial rate ({points.height} areas)")
    return _save(fig, save_file)


def plot_denial_probability(curve: pl.DataFrame, save_file: Path | str) -> Path:
    """Line plot of predicted denial probability against the income z-score."""
    fig, ax = plt.subplots(figsize=(7, 5))
    ax.plot(curve["z_income"].to_numpy(), curve["probability_denied"].to_numpy())
    ax.axvline(0, color="grey", linewidth=0.8, linestyle="--")
    ax.set_xlabel("Income z-score (relative to area median income)")
    ax.set_ylabel("Probability of denial")
    ax.set_ylim(0, 1)
    return _save(fig, save_file)


def plot_race_coefficients(result: RegressionResult, save_file: Path | str) -> Path:
    """Horizontal bars of race coefficients with 95% confidence intervals."""
    coefficients = result.coefficients[1:]
    labels = [c.name.removeprefix("race_").replace("_", " ") for c in coefficients]
    fig, ax = plt.subplots(figsize=(7, 0.6 * len(coefficients) + 1.5))
    ax.barh(
        labels,
        [c.estimate for c in coefficients],
        xerr=[1.96 * c.std_error for c in coefficients],
        color=["tab:red" if c.is_significant() else "tab:grey" for c in coefficients],
    )
    ax.axvline(0, color="black", linewidth=0.8)
    ax.set_xlabel("Log-odds of denial relative to reference")
    return _save(fig, save_file)


__all__ = [
    "plot_ratio_vs_denial",
    "plot_denial_probability",
    "plot_race_coefficients",
]
