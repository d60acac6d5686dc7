"""
Shared utility functions for renalcalc.
"""

from typing import Optional

import numpy as np


def clamp_values(values: np.ndarray,
                 min_value: Optional[float] = None,
                 max_value: Optional[float] = None) -> np.ndarray:
    """
    Apply an optional floor and/or ceiling element-wise.

    Either bound may be None. Returns a new array.
    """
    out = np.array(values, dtype=float)
    if min_value is not None:
        out[out < min_value] = min_value
    if max_value is not None:
        out[out > max_value] = max_value
    return out


def is_missing(value) -> bool:
    """True for None, NaN, or an empty sequence/string."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, float) and np.isnan(value):
        return True
    if isinstance(value, (list, tuple, np.ndarray)):
        return len(value) == 0
    return False
