"""
Utility Functions for HMDA Denial Analysis
==========================================

This module contains the per-stage transformations applied to loan records.

Modules
-------
- io: Delimiter sniffing, row width checks, archive extraction
- schema: Column renaming and source-column resolution
- geo: FIPS keys and the region name reference table
- cleaning: Projection, typed parsing, sentinel codes, rescaling
- outliers: Per-geography z-scores and income bounds
- summary: Geographic aggregates and map tables
- regression: Logistic denial models
- plots: Summary figures
"""

from .io import (
    get_delimiter,
    find_ragged_rows,
    unzip_hmda_file,
)
from .schema import (
    rename_hmda_columns,
    resolve_source_columns,
)
from .geo import (
    add_geographic_keys,
    load_region_reference,
    attach_region_names,
)
from .cleaning import (
    clean_lar,
    replace_na_like_values,
    select_analysis_columns,
    parse_numeric_columns,
    replace_sentinel_codes,
    drop_missing_required,
    rescale_thousands,
    drop_non_positive,
    label_race,
)
from .outliers import (
    add_group_zscores,
    find_degenerate_groups,
    filter_outliers,
)
from .summary import (
    apply_ratio_income_floor,
    summarize_by_geography,
    map_table,
    denial_rates_by,
)
from .regression import (
    add_denial_outcome,
    drop_non_decisions,
    add_race_indicators,
    fit_income_model,
    fit_race_model,
    probability_of_denial,
    denial_probability_curve,
)

__all__ = [
    # File handling
    "get_delimiter",
    "find_ragged_rows",
    "unzip_hmda_file",

    # Schema and geography
    "rename_hmda_columns",
    "resolve_source_columns",
    "add_geographic_keys",
    "load_region_reference",
    "attach_region_names",

    # Cleaning
    "clean_lar",
    "replace_na_like_values",
    "select_analysis_columns",
    "parse_numeric_columns",
    "replace_sentinel_codes",
    "drop_missing_required",
    "rescale_thousands",
    "drop_non_positive",
    "label_race",

    # Outliers and aggregation
    "add_group_zscores",
    "find_degenerate_groups",
    "filter_outliers",
    "apply_ratio_income_floor",
    "summarize_by_geography",
    "map_table",
    "denial_rates_by",

    # Models
    "add_denial_outcome",
    "drop_non_decisions",
    "add_race_indicators",
    "fit_income_model",
    "fit_race_model",
    "probability_of_denial",
    "denial_probability_curve",
]
