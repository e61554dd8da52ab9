"""
HMDA Denial Analysis
====================

Exploratory analysis of geographic and demographic disparities in mortgage
denials, using the 2008 Home Mortgage Disclosure Act (HMDA) loan application
register (LAR).

This package provides functionality for:
- Sampling and loading header-less 2007-2017 format LAR extracts
- Cleaning and recoding loan records
- Rejecting per-geography statistical outliers
- Aggregating loan amounts, loan-to-income ratios and denial rates by
  county or state
- Fitting logistic regressions of denial on income and applicant race

Main Modules
------------
- core: Configuration, loading, result containers and workflows
- utils: Per-stage cleaning, outlier, summary and regression functions

Example Usage
-------------
>>> from hmda_denial import run_analysis, save_analysis_outputs
>>> results = run_analysis("data/raw/hmda_2008_sample.csv", group_level="county")
>>> results.county_summary.head()
>>> results.race_model.to_frame()
>>> save_analysis_outputs(results, "output")

Notes
-----
Stages never modify their input; each returns a new frame. Records dropped
by the cleaner and the outlier filter are counted by reason in a
``DropReport`` that is logged at the end of a run.
"""

__version__ = "0.1.0"

from .core import (
    AnalysisError,
    SchemaMismatchError,
    DegenerateStatisticsError,
    DegeneratePredictorError,
    ModelFitError,
    DropReport,
    CoefficientEstimate,
    RegressionResult,
    AnalysisResults,
    load_lar_sample,
    sample_lar_file,
    run_analysis,
    save_analysis_outputs,
    save_analysis_figures,
)
from .utils import (
    clean_lar,
    filter_outliers,
    summarize_by_geography,
    map_table,
    fit_income_model,
    fit_race_model,
    probability_of_denial,
    load_region_reference,
    attach_region_names,
)

__all__ = [
    "__version__",
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
    "AnalysisResults",
    # Pipeline stages
    "load_lar_sample",
    "sample_lar_file",
    "clean_lar",
    "filter_outliers",
    "summarize_by_geography",
    "map_table",
    "fit_income_model",
    "fit_race_model",
    "probability_of_denial",
    "load_region_reference",
    "attach_region_names",
    # Workflows
    "run_analysis",
    "save_analysis_outputs",
    "save_analysis_figures",
]
