"""Analysis errors and failure typing."""


class AnalysisError(Exception):
    """Base class for analysis failures."""

    error_code = "ANALYSIS_ERROR"


class SchemaMismatchError(AnalysisError):
    """Raised when a file does not match the supplied column schema."""

    error_code = "SCHEMA_MISMATCH"


class DegenerateStatisticsError(AnalysisError):
    """Raised when a statistic is undefined for the data it is given."""

    error_code = "DEGENERATE_STATISTICS"


class DegeneratePredictorError(DegenerateStatisticsError):
    """Raised when a model predictor or outcome has zero variance."""

    error_code = "DEGENERATE_PREDICTOR"


class ModelFitError(AnalysisError):
    """Raised when a regression fails to produce usable estimates."""

    error_code = "MODEL_FIT_ERROR"


__all__ = [
    "AnalysisError",
    "SchemaMismatchError",
    "DegenerateStatisticsError",
    "DegeneratePredictorError",
    "ModelFitError",
]
