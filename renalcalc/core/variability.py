"""
Residual variability helper.

Not applied by the estimator itself; callers use it to simulate observed
values around a prediction.
"""

from typing import Dict, Optional

import numpy as np

_RUV_KEYS = ("prop", "add", "exp")


def add_ruv(value, ruv: Dict[str, float], rng: Optional[np.random.Generator] = None):
    """
    Add residual variability to a value or array of values.

    Args:
        value: Prediction(s).
        ruv: Standard deviations, e.g. {"prop": 0.1, "add": 1.0, "exp": 0.0}.
            Missing components are treated as 0.
        rng: numpy Generator; a fresh default generator if None.

    Returns:
        Values of the same shape as `value`:
        (value * (1 + prop*e1) + add*e2) * exp(exp*e3), e ~ N(0, 1).
    """
    unknown = set(ruv) - set(_RUV_KEYS)
    if unknown:
        raise ValueError(f"Unknown residual variability components: {sorted(unknown)}")
    if rng is None:
        rng = np.random.default_rng()

    arr = np.asarray(value, dtype=float)
    prop = ruv.get("prop", 0.0)
    add = ruv.get("add", 0.0)
    exp = ruv.get("exp", 0.0)

    out = arr * (1.0 + rng.normal(0.0, 1.0, arr.shape) * prop)
    out = out + rng.normal(0.0, 1.0, arr.shape) * add
    out = out * np.exp(rng.normal(0.0, 1.0, arr.shape) * exp)
    if np.ndim(value) == 0:
        return float(out)
    return out
