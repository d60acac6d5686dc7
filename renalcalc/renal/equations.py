import numpy as np
from typing import Optional

from renalcalc.core.constants import (
    BSA_REFERENCE,
    JELLIFFE_UNSTABLE_DEFAULT_DT,
    LundMalmoTuning,
    SchwartzTuning,
)

# =============================================================================
# RENAL FUNCTION EQUATIONS - LITERATURE REFERENCES
# =============================================================================
#
# Cockcroft & Gault. Nephron. 1976;16:31-41
# MDRD: Levey et al. Ann Intern Med. 1999;130:461-470 (186 version)
# CKD-EPI: Levey et al. Ann Intern Med. 2009;150:604-612 (single-slope form)
# Revised Lund-Malmo: Nyman et al. Clin Chem Lab Med. 2014;52:815-824
# Schwartz: Schwartz et al. Pediatr Clin North Am. 1987;34:571-590
# Bedside Schwartz: Schwartz et al. J Am Soc Nephrol. 2009;20:629-637
# Jelliffe: Jelliffe. Ann Intern Med. 1973;79:604-605
# Jelliffe (unstable): Jelliffe. Am J Nephrol. 2002;22:320-324
# Wright: Wright et al. Br J Cancer. 2001;84:452-459
#
# Units:
#   - age: years, weight: kg, height: cm, bsa: m^2
#   - scr: mg/dL unless the argument is named scr_umol
#   - result: mL/min (absolute) or mL/min/1.73m^2 (relative), see methods.py
# =============================================================================

_SCHWARTZ = SchwartzTuning()
_LUND_MALMO = LundMalmoTuning()


def cockcroft_gault(scr: np.ndarray, age: float, weight: float, female: bool) -> np.ndarray:
    """Creatinine clearance (mL/min, absolute)."""
    f_sex = 0.85 if female else 1.0
    return f_sex * (140.0 - age) / scr * (weight / 72.0)


def mdrd(scr: np.ndarray, age: float, female: bool, black: bool) -> np.ndarray:
    f_sex = 0.762 if female else 1.0
    f_race = 1.210 if black else 1.0
    return 186.0 * scr ** (-1.154) * age ** (-0.203) * f_sex * f_race


def ckd_epi(scr: np.ndarray, age: float, female: bool, black: bool) -> np.ndarray:
    f_sex = 1.018 if female else 1.0
    f_race = 1.159 if black else 1.0
    return (141.0
            * np.minimum(scr, 1.0) ** (-0.329)
            * np.maximum(scr, 1.0) ** (-1.209)
            * 0.993 ** age * f_sex * f_race)


def lund_malmo_revised(scr_umol: np.ndarray, age: float, female: bool) -> np.ndarray:
    """
    Revised Lund-Malmo eGFR.

    Piecewise in creatinine: linear below the sex-specific threshold,
    logarithmic above it.
    """
    t = _LUND_MALMO
    scr_umol = np.asarray(scr_umol, dtype=float)
    log_part = t.log_slope * np.log(scr_umol / t.log_reference)
    if female:
        x = np.where(scr_umol < t.female_threshold,
                     t.female_intercept + t.female_slope * (t.female_threshold - scr_umol),
                     t.female_intercept - log_part)
    else:
        x = np.where(scr_umol < t.male_threshold,
                     t.male_intercept + t.male_slope * (t.male_threshold - scr_umol),
                     t.male_intercept - log_part)
    return np.exp(x - t.age_linear * age + t.age_log * np.log(age))


def schwartz_k(age: float, female: bool, preterm: bool) -> float:
    """k-coefficient for the original (1987) Schwartz equation."""
    t = _SCHWARTZ
    if age < t.infant_age:
        return t.k_infant_preterm if preterm else t.k_infant
    if age > t.adolescent_age and not female:
        return t.k_adolescent_male
    return t.k_default


def schwartz(scr: np.ndarray, height: float, k: float) -> np.ndarray:
    return k * height / scr


def jelliffe(scr_umol: np.ndarray, age: float, bsa: float, female: bool) -> np.ndarray:
    f_female = 1.0 if female else 0.0
    return (((98.0 - 0.8 * (age - 20.0)) * (1.0 - 0.01 * f_female) * bsa / BSA_REFERENCE)
            / (scr_umol * 0.0113))


def jelliffe_unstable(scr: np.ndarray, age: float, weight: float, female: bool,
                      times: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Jelliffe creatinine clearance for unstable renal function.

    Each value uses the previous observation as the starting creatinine and
    the elapsed time (days) since it. The first observation is compared
    with itself. Missing times or non-positive intervals count as 1 day.
    Returns unfloored values.
    """
    scr = np.asarray(scr, dtype=float)
    f_sex = 0.765 if female else 0.85
    vol = 0.4 * weight * 10.0
    out = np.empty_like(scr)
    # Evaluated in index order: element i depends on element i-1.
    for i in range(len(scr)):
        scr2 = scr[i]
        scr1 = scr[i - 1] if i > 0 else scr2
        scr_av = (scr1 + scr2) / 2.0
        dt = JELLIFFE_UNSTABLE_DEFAULT_DT
        if times is not None and i > 0:
            dt = times[i] - times[i - 1]
            if not dt > 0:
                dt = JELLIFFE_UNSTABLE_DEFAULT_DT
        production = ((29.305 - 0.203 * age) * weight
                      * (1.037 - 0.0338 * scr_av) * f_sex)
        out[i] = ((vol * (scr1 - scr2) / dt + production) * 100.0) / (1440.0 * scr_av)
    return out


def wright(scr_umol: np.ndarray, age: float, bsa: float, female: bool) -> np.ndarray:
    f_female = 1.0 if female else 0.0
    return ((6580.0 - 38.8 * age) * bsa * (1.0 - 0.168 * f_female)) / scr_umol
