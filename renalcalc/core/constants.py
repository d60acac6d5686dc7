"""
Clinical and Numerical Constants for renalcalc.

This module centralizes magic numbers used by the renal function equations.

NOTE: Only add constants here that are ACTIVELY IMPORTED elsewhere.
"""

from dataclasses import dataclass

# Creatinine unit conversion (used in units.py).
# 1 mg/dL creatinine = 88.40 umol/L (MW 113.12 g/mol).
SCR_MGDL_TO_UMOLL = 88.40

# Reference body surface area for relative reporting (m^2).
BSA_REFERENCE = 1.73

# Output rate conversion from mL/min (used in units.py).
ML_MIN_TO_L_HR = 60.0 / 1000.0
ML_MIN_TO_ML_HR = 60.0

# Jelliffe equation for unstable renal function (used in equations.py).
# Values below this floor are treated as a data-quality problem.
JELLIFFE_UNSTABLE_FLOOR = 1.0

# Default sample spacing (days) when times are absent or non-increasing.
JELLIFFE_UNSTABLE_DEFAULT_DT = 1.0

# Body weight basis (used in body_size.py).
# Fraction of excess weight added to IBW for adjusted body weight.
ABW_DEFAULT_FACTOR = 0.4

# Weight/IBW ratio above which adaptive dosing weight switches to ABW.
DOSING_WEIGHT_OBESE_RATIO = 1.2

# Age (years) from which adult equations are used for ideal body weight.
ADULT_AGE = 18.0


@dataclass(frozen=True)
class SchwartzTuning:
    """k-coefficients for the Schwartz family (height in cm, scr in mg/dL)."""
    # Original Schwartz (1987)
    k_default: float = 0.55
    k_infant: float = 0.45
    k_infant_preterm: float = 0.33
    k_adolescent_male: float = 0.7
    adolescent_age: float = 13.0

    # Revised / bedside Schwartz (2009)
    k_bedside: float = 0.413

    # Age (years) below which the equations lose validity
    infant_age: float = 1.0


@dataclass(frozen=True)
class LundMalmoTuning:
    """Revised Lund-Malmo coefficients (scr in umol/L)."""
    female_threshold: float = 150.0
    female_intercept: float = 2.50
    female_slope: float = 0.0121
    male_threshold: float = 180.0
    male_intercept: float = 2.56
    male_slope: float = 0.00968
    log_slope: float = 0.926
    log_reference: float = 150.0
    age_linear: float = 0.0158
    age_log: float = 0.438
