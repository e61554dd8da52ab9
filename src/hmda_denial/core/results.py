"""
Result containers produced by the analysis stages.

Frames flow between stages as ``polars.DataFrame`` objects; the containers
here carry everything else a stage hands back: drop counts from the cleaner
and outlier filter, and fitted coefficients from the model fitter.
"""

import logging
from dataclasses import dataclass, field

import polars as pl


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DropReport:
    """Counts of records dropped by a stage, keyed by reason."""

    counts: dict[str, int] = field(default_factory=dict)

    def with_count(self, reason: str, dropped: int) -> "DropReport":
        """Return a new report with ``dropped`` added under ``reason``."""
        if dropped <= 0:
            return self
        counts = dict(self.counts)
        counts[reason] = counts.get(reason, 0) + dropped
        return DropReport(counts)

    def merge(self, other: "DropReport") -> "DropReport":
        report = self
        for reason, dropped in other.counts.items():
            report = report.with_count(reason, dropped)
        return report

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def log_summary(self, stage: str = "analysis") -> None:
        """Log one line per drop reason, then the total."""
        if not self.counts:
            logger.info("[%s] No records dropped", stage)
            return
        for reason, dropped in sorted(self.counts.items()):
            logger.info("[%s] Dropped %d records: %s", stage, dropped, reason)
        logger.info("[%s] Dropped %d records in total", stage, self.total)

    def to_frame(self) -> pl.DataFrame:
        return pl.DataFrame(
            {
                "reason": list(self.counts.keys()),
                "dropped": list(self.counts.values()),
            },
            schema={"reason": pl.String, "dropped": pl.Int64},
        ).sort("reason")


@dataclass(frozen=True)
class CoefficientEstimate:
    """A single fitted coefficient with its standard error and significance."""

    name: str
    estimate: float
    std_error: float
    z_value: float
    p_value: float

    def is_significant(self, alpha: float = 0.05) -> bool:
        return self.p_value < alpha


@dataclass(frozen=True)
class RegressionResult:
    """Fitted logistic regression.

    Coefficients are stored intercept first, followed by one estimate per
    predictor in the order the predictors were supplied.
    """

    model: str
    outcome: str
    coefficients: tuple[CoefficientEstimate, ...]
    n_obs: int
    converged: bool
    log_likelihood: float
    pseudo_r_squared: float

    @property
    def intercept(self) -> CoefficientEstimate:
        return self.coefficients[0]

    @property
    def predictors(self) -> list[str]:
        return [coefficient.name for coefficient in self.coefficients[1:]]

    def coefficient(self, name: str) -> CoefficientEstimate:
        """Return the coefficient named ``name``.

        Raises
        ------
        KeyError
            If the model has no coefficient with that name.
        """
        for coefficient in self.coefficients:
            if coefficient.name == name:
                return coefficient
        raise KeyError(f"Model {self.model} has no coefficient named {name!r}")

    def to_frame(self) -> pl.DataFrame:
        """Coefficient table for tabular display."""
        return pl.DataFrame(
            {
                "model": [self.model] * len(self.coefficients),
                "term": [c.name for c in self.coefficients],
                "estimate": [c.estimate for c in self.coefficients],
                "std_error": [c.std_error for c in self.coefficients],
                "z_value": [c.z_value for c in self.coefficients],
                "p_value": [c.p_value for c in self.coefficients],
            },
            schema={
                "model": pl.String,
                "term": pl.String,
                "estimate": pl.Float64,
                "std_error": pl.Float64,
                "z_value": pl.Float64,
                "p_value": pl.Float64,
            },
        )


__all__ = [
    "DropReport",
    "CoefficientEstimate",
    "RegressionResult",
]
