"""
Body size estimators: ideal, adjusted and dosing body weight, and BSA.

Heights are in cm, weights in kg, ages in years, BSA in m^2.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from renalcalc.core.constants import (
    ABW_DEFAULT_FACTOR,
    ADULT_AGE,
    DOSING_WEIGHT_OBESE_RATIO,
)
from renalcalc.core.enums import Sex, WeightBasis
from renalcalc.core.errors import RenalFunctionError

CM_PER_INCH = 2.54


def calc_ibw(height: float, age: float, sex: str) -> float:
    """
    Ideal body weight.

    Adults: Devine (1974). Children 1-17 y: Traub & Johnson (1980).
    """
    if age < 1:
        raise RenalFunctionError(
            "Ideal body weight is not defined for patients < 1 year of age")
    if age < ADULT_AGE:
        return 1.65 * height ** 2 / 1000.0
    height_in = height / CM_PER_INCH
    base = 50.0 if Sex(sex) == Sex.MALE else 45.5
    return base + 2.3 * (height_in - 60.0)


def calc_abw(weight: float, ibw: float, factor: float = ABW_DEFAULT_FACTOR) -> float:
    """Adjusted body weight: IBW plus a fraction of the weight in excess of IBW."""
    return ibw + factor * (weight - ibw)


def calc_dosing_weight(weight: float, height: float, age: float, sex: str,
                       factor: float = ABW_DEFAULT_FACTOR) -> Tuple[float, str]:
    """
    Adaptive dosing weight.

    Total weight for patients below IBW, adjusted weight for obese patients
    (weight > 1.2 x IBW), ideal weight otherwise.

    Returns:
        (weight in kg, weight basis label)
    """
    ibw = calc_ibw(height, age, sex)
    if weight < ibw:
        return weight, WeightBasis.TOTAL.value
    if weight > DOSING_WEIGHT_OBESE_RATIO * ibw:
        return calc_abw(weight, ibw, factor), WeightBasis.ADJUSTED.value
    return ibw, WeightBasis.IDEAL.value


def _bsa_dubois(weight: float, height: float) -> float:
    return 0.007184 * (weight ** 0.425) * (height ** 0.725)


def _bsa_mosteller(weight: float, height: float) -> float:
    return math.sqrt(weight * height / 3600.0)


def _bsa_haycock(weight: float, height: float) -> float:
    return 0.024265 * (weight ** 0.5378) * (height ** 0.3964)


def _bsa_gehan_george(weight: float, height: float) -> float:
    return 0.0235 * (weight ** 0.51456) * (height ** 0.42246)


def _bsa_boyd(weight: float, height: float) -> float:
    # Boyd uses weight in grams
    w_g = weight * 1000.0
    return 0.0003207 * (height ** 0.3) * (w_g ** (0.7285 - 0.0188 * math.log10(w_g)))


_BSA_METHODS: Dict[str, Callable[[float, float], float]] = {
    "dubois": _bsa_dubois,
    "mosteller": _bsa_mosteller,
    "haycock": _bsa_haycock,
    "gehan_george": _bsa_gehan_george,
    "boyd": _bsa_boyd,
}


def normalize_bsa_method(method: str) -> str:
    """Map a BSA method name to its key in the BSA table."""
    key = str(method).strip().lower().replace("-", "_")
    if key not in _BSA_METHODS:
        raise RenalFunctionError(
            f"BSA method '{method}' not recognized. Choose from: {', '.join(_BSA_METHODS)}"
        )
    return key


def calc_bsa(weight: float, height: float, method: str = "dubois") -> float:
    """Body surface area (m^2) from weight (kg) and height (cm)."""
    return _BSA_METHODS[normalize_bsa_method(method)](weight, height)


@dataclass(frozen=True)
class BodySizeEstimators:
    """
    Weight and BSA estimators used by the renal equations.

    Replace any of them to plug in a different estimator, e.g. a local
    ideal body weight convention. Call signatures:

        ideal_weight(height, age, sex)
        adjusted_weight(weight, ideal_weight, factor)   factor passed by position
        dosing_weight(weight, height, age, sex) -> (weight, basis label)
        bsa(weight, height, method)

    The default dosing_weight also honours the configured adjusted
    weight factor; a replacement receives only the four covariates.
    """
    ideal_weight: Callable[[float, float, str], float] = calc_ibw
    adjusted_weight: Callable[[float, float, float], float] = calc_abw
    dosing_weight: Callable[[float, float, float, str], Tuple[float, str]] = calc_dosing_weight
    bsa: Callable[[float, float, str], float] = calc_bsa


DEFAULT_ESTIMATORS = BodySizeEstimators()
