"""
Unit conversion helpers for creatinine and clearance handling.

Internal convention:
- Creatinine: "mg/dL" or "umol/L" (canonical spellings)
- Clearance: mL/min, converted to the requested output unit last
"""

from typing import Dict, Sequence

import numpy as np

from .constants import ML_MIN_TO_L_HR, ML_MIN_TO_ML_HR, SCR_MGDL_TO_UMOLL
from .errors import UnknownUnitError

MG_DL = "mg/dL"
UMOL_L = "umol/L"

_SCR_UNIT_ALIASES: Dict[str, str] = {
    "mg/dl": MG_DL,
    "umol/l": UMOL_L,
    "mumol/l": UMOL_L,
    "micromol/l": UMOL_L,
}

_OUTPUT_UNIT_ALIASES: Dict[str, str] = {
    "ml/min": "mL/min",
    "l/hr": "L/hr",
    "l/h": "L/hr",
    "ml/hr": "mL/hr",
    "ml/h": "mL/hr",
}

# Multiplicative factors from mL/min.
_CLEARANCE_CONVERSIONS: Dict[str, float] = {
    "mL/min": 1.0,
    "L/hr": ML_MIN_TO_L_HR,
    "mL/hr": ML_MIN_TO_ML_HR,
}


def _clean_unit(unit: str) -> str:
    u = unit.strip()
    u = u.replace("%2F", "/").replace("%2f", "/")
    u = u.replace("µ", "u").replace("μ", "u")
    u = u.replace(" ", "")
    return u.lower()


def normalize_scr_unit(unit: str) -> str:
    """Normalize a creatinine unit string to "mg/dL" or "umol/L"."""
    key = _clean_unit(unit or "")
    if key not in _SCR_UNIT_ALIASES:
        raise UnknownUnitError(unit, "serum creatinine", sorted(_SCR_UNIT_ALIASES))
    return _SCR_UNIT_ALIASES[key]


def normalize_output_unit(unit: str) -> str:
    """Normalize a clearance output unit to "mL/min", "L/hr" or "mL/hr"."""
    key = _clean_unit(unit or "")
    if key not in _OUTPUT_UNIT_ALIASES:
        raise UnknownUnitError(unit, "output", sorted(_CLEARANCE_CONVERSIONS))
    return _OUTPUT_UNIT_ALIASES[key]


def convert_scr(values: np.ndarray, units: Sequence[str], to_unit: str) -> np.ndarray:
    """
    Convert creatinine values element-wise to `to_unit`.

    `units` holds one normalized unit per element. Returns a new array.
    """
    values = np.asarray(values, dtype=float)
    out = values.copy()
    for i, unit in enumerate(units):
        if unit == to_unit:
            continue
        if to_unit == UMOL_L:
            out[i] = values[i] * SCR_MGDL_TO_UMOLL
        else:
            out[i] = values[i] / SCR_MGDL_TO_UMOLL
    return out


def convert_clearance(value, from_unit: str, to_unit: str):
    """
    Convert clearance between mL/min, L/hr and mL/hr.

    Works on scalars and numpy arrays.
    """
    from_norm = normalize_output_unit(from_unit)
    to_norm = normalize_output_unit(to_unit)
    if from_norm == to_norm:
        return value
    return value / _CLEARANCE_CONVERSIONS[from_norm] * _CLEARANCE_CONVERSIONS[to_norm]
