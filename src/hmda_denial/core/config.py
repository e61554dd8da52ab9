# -*- coding: utf-8 -*-
"""
Configuration management for the HMDA denial analysis.

This module handles path configuration, analysis thresholds read from the
environment, and the fixed code tables of the 2007-2017 LAR format.
"""

# Import Packages
from decouple import config
from pathlib import Path
from typing import Literal

# Specific Data Folders
# Note: __file__.parent.parent.parent.parent goes from src/hmda_denial/core/ back to project root
PROJECT_DIR = Path(config("PROJECT_DIR", default=Path(__file__).parent.parent.parent.parent))
DATA_DIR = Path(config("DATA_DIR", default=PROJECT_DIR / "data"))
RAW_DIR = Path(config("HMDA_RAW_DIR", default=DATA_DIR / "raw"))
OUTPUT_DIR = Path(config("HMDA_OUTPUT_DIR", default=PROJECT_DIR / "output"))


# ============================================================================
# Analysis Thresholds
# ============================================================================

# Records with |z| at or beyond this bound are rejected as outliers
Z_SCORE_BOUND = config("HMDA_Z_SCORE_BOUND", default=2.0, cast=float)

# Absolute income sanity bounds in dollars (exclusive)
INCOME_FLOOR = config("HMDA_INCOME_FLOOR", default=1_000, cast=int)
INCOME_CEILING = config("HMDA_INCOME_CEILING", default=300_000, cast=int)

# Income floor for the loan-to-income ratio, applied as its own step
RATIO_INCOME_FLOOR = config("HMDA_RATIO_INCOME_FLOOR", default=1_000, cast=int)

# Default sampling fraction when drawing a LAR extract
SAMPLE_FRACTION = config("HMDA_SAMPLE_FRACTION", default=0.01, cast=float)


# ============================================================================
# 2007-2017 LAR Layout
# ============================================================================

# Ordered column names of the header-less 2007-2017 LAR extract (45 fields)
LAR_2007_2017_COLUMNS = [
    "as_of_year",
    "respondent_id",
    "agency_code",
    "loan_type",
    "property_type",
    "loan_purpose",
    "owner_occupancy",
    "loan_amount_000s",
    "preapproval",
    "action_taken",
    "msamd",
    "state_code",
    "county_code",
    "census_tract_number",
    "applicant_ethnicity",
    "co_applicant_ethnicity",
    "applicant_race_1",
    "applicant_race_2",
    "applicant_race_3",
    "applicant_race_4",
    "applicant_race_5",
    "co_applicant_race_1",
    "co_applicant_race_2",
    "co_applicant_race_3",
    "co_applicant_race_4",
    "co_applicant_race_5",
    "applicant_sex",
    "co_applicant_sex",
    "applicant_income_000s",
    "purchaser_type",
    "denial_reason_1",
    "denial_reason_2",
    "denial_reason_3",
    "rate_spread",
    "hoepa_status",
    "lien_status",
    "edit_status",
    "sequence_number",
    "population",
    "minority_population",
    "hud_median_family_income",
    "tract_to_msamd_income",
    "number_of_owner_occupied_units",
    "number_of_1_to_4_family_units",
    "application_date_indicator",
]

# Raw fields reported in thousands of dollars, mapped to their dollar-valued names
THOUSANDS_COLUMNS = {
    "loan_amount_000s": "loan_amount",
    "applicant_income_000s": "income",
}

# Raw name -> analysis name for the fields kept by the cleaner
ANALYSIS_RENAME_DICTIONARY = {
    "applicant_race_1": "applicant_race",
    "hud_median_family_income": "median_income",
}

# Fields every cleaned record must carry
REQUIRED_COLUMNS = [
    "loan_amount",
    "action_taken",
    "state_code",
    "county_fips",
    "applicant_race",
    "applicant_sex",
    "income",
    "median_income",
]

# Integer-coded fields parsed by the cleaner (all non-geographic required fields)
INTEGER_COLUMNS = [
    "loan_amount_000s",
    "applicant_income_000s",
    "loan_amount",
    "income",
    "median_income",
    "action_taken",
    "applicant_race",
    "applicant_sex",
]


# ============================================================================
# Code Tables
# ============================================================================

# Applicant race (applicant_race_1). Code 7 = "Not applicable" is treated as missing.
RACE_NAMES = {
    1: "American Indian or Alaska Native",
    2: "Asian",
    3: "Black or African American",
    4: "Native Hawaiian or Other Pacific Islander",
    5: "White",
    6: "Information not provided",
}
RACE_NOT_APPLICABLE = 7

# Applicant sex. 3 = information not provided, 4 = not applicable (both missing)
SEX_NAMES = {
    1: "Male",
    2: "Female",
}

# Action taken codes
ACTION_NAMES = {
    1: "Loan originated",
    2: "Application approved but not accepted",
    3: "Application denied by financial institution",
    4: "Application withdrawn by applicant",
    5: "File closed for incompleteness",
    6: "Loan purchased by the institution",
    7: "Preapproval request denied by financial institution",
    8: "Preapproval request approved but not accepted",
}
DENIED_ACTIONS = (3, 5)
NON_DECISION_ACTIONS = (4, 6)

# Default reference (held-out) category for the race model
REFERENCE_RACE = "White"


# ============================================================================
# Helper Functions
# ============================================================================


def get_group_column(level: Literal["county", "state"]) -> str:
    """Return the geographic key column for an aggregation level.

    Parameters
    ----------
    level : {"county", "state"}
        County-level (5-digit FIPS) or state-level (2-digit FIPS) grouping.

    Returns
    -------
    str
        Name of the key column in a cleaned frame.
    """
    if level == "county":
        return "county_fips"
    if level == "state":
        return "state_code"
    raise ValueError(f"Unknown geographic level: {level}")
