"""
Core HMDA Denial Analysis Functionality
=======================================

This module contains configuration, error types, result containers, the
LAR loader and the end-to-end analysis workflow.

Modules
-------
- config: Paths, thresholds, LAR layout and code tables
- errors: Analysis error hierarchy
- results: Drop reports and regression results
- load: Loading and sampling of header-less LAR extracts
- workflows: End-to-end analysis and output writing
"""

# Import configuration constants and code tables
from .config import (
    # Path configuration
    PROJECT_DIR,
    DATA_DIR,
    RAW_DIR,
    OUTPUT_DIR,
    # Thresholds
    Z_SCORE_BOUND,
    INCOME_FLOOR,
    INCOME_CEILING,
    RATIO_INCOME_FLOOR,
    SAMPLE_FRACTION,
    # LAR layout and codes
    LAR_2007_2017_COLUMNS,
    RACE_NAMES,
    SEX_NAMES,
    ACTION_NAMES,
    DENIED_ACTIONS,
    NON_DECISION_ACTIONS,
    REFERENCE_RACE,
    get_group_column,
)
from .errors import (
    AnalysisError,
    SchemaMismatchError,
    DegenerateStatisticsError,
    DegeneratePredictorError,
    ModelFitError,
)
from .results import (
    DropReport,
    CoefficientEstimate,
    RegressionResult,
)

# Import loading and workflow functions
from .load import (
    load_lar_sample,
    sample_lar_file,
)
from .workflows import (
    AnalysisResults,
    run_analysis,
    save_analysis_outputs,
    save_analysis_figures,
)

__all__ = [
    # Path configuration
    "PROJECT_DIR",
    "DATA_DIR",
    "RAW_DIR",
    "OUTPUT_DIR",
    # Thresholds
    "Z_SCORE_BOUND",
    "INCOME_FLOOR",
    "INCOME_CEILING",
    "RATIO_INCOME_FLOOR",
    "SAMPLE_FRACTION",
    # LAR layout and codes
    "LAR_2007_2017_COLUMNS",
    "RACE_NAMES",
    "SEX_NAMES",
    "ACTION_NAMES",
    "DENIED_ACTIONS",
    "NON_DECISION_ACTIONS",
    "REFERENCE_RACE",
    "get_group_column",
    # Errors
    "AnalysisError",
    "SchemaMismatchError",
    "DegenerateStatisticsError",
    "DegeneratePredictorError",
    "ModelFitError",
    # Results
    "DropReport",
    "CoefficientEstimate",
    "RegressionResult",
    # Loading and workflows
    "load_lar_sample",
    "sample_lar_file",
    "AnalysisResults",
    "run_analysis",
    "save_analysis_outputs",
    "save_analysis_figures",
]
