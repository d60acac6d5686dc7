"""
Method table for renal function estimation.

Each Method maps to one MethodSpec: the covariates it requires, the
creatinine unit its equation expects, whether it natively reports per
1.73 m^2, which weight basis replaces total body weight, and the handler
that evaluates the equation over a creatinine series.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from renalcalc.core.constants import JELLIFFE_UNSTABLE_FLOOR, SchwartzTuning
from renalcalc.core.enums import AdvisoryCode
from renalcalc.core.errors import UnknownMethodError
from renalcalc.core.state import Advisory
from renalcalc.core.units import MG_DL, UMOL_L
from renalcalc.patient.patient import Patient

from . import equations


class Method(str, Enum):
    COCKCROFT_GAULT = "cockcroft_gault"
    COCKCROFT_GAULT_IDEAL = "cockcroft_gault_ideal"
    COCKCROFT_GAULT_ADJUSTED = "cockcroft_gault_adjusted"
    COCKCROFT_GAULT_ADAPTIVE = "cockcroft_gault_adaptive"
    MDRD = "mdrd"
    CKD_EPI = "ckd_epi"
    MALMO_LUND_REVISED = "malmo_lund_revised"
    SCHWARTZ = "schwartz"
    SCHWARTZ_REVISED = "schwartz_revised"
    JELLIFFE = "jelliffe"
    JELLIFFE_UNSTABLE = "jelliffe_unstable"
    WRIGHT = "wright"


_METHOD_ALIASES: Dict[str, Method] = {
    "malmo_lund_rev": Method.MALMO_LUND_REVISED,
    "lund_malmo_revised": Method.MALMO_LUND_REVISED,
    "lund_malmo_rev": Method.MALMO_LUND_REVISED,
    "bedside_schwartz": Method.SCHWARTZ_REVISED,
}


def available_methods() -> List[str]:
    """Canonical method identifiers followed by accepted aliases."""
    return [m.value for m in Method] + list(_METHOD_ALIASES)


def resolve_method(name) -> Method:
    """
    Normalize a method name and map it to a Method.

    Case-insensitive, hyphens read as underscores, and the historical
    "cockroft" spelling is accepted.
    """
    if isinstance(name, Method):
        return name
    key = str(name).strip().lower().replace("-", "_")
    key = key.replace("cockroft", "cockcroft")
    if key in _METHOD_ALIASES:
        return _METHOD_ALIASES[key]
    try:
        return Method(key)
    except ValueError:
        raise UnknownMethodError(str(name), available_methods()) from None


@dataclass
class MethodInputs:
    """Covariates handed to a method handler, plus its advisory sink."""
    patient: Patient
    bsa: Optional[float] = None
    times: Optional[np.ndarray] = None
    advisories: List[Advisory] = field(default_factory=list)

    def advise(self, code: AdvisoryCode, message: str, index: Optional[int] = None):
        self.advisories.append(Advisory(code, message, index))


Handler = Callable[[np.ndarray, MethodInputs], np.ndarray]

_SCHWARTZ = SchwartzTuning()


@dataclass(frozen=True)
class MethodSpec:
    method: Method
    label: str
    family: str
    required: Tuple[str, ...]  # Patient fields; "bsa" may be derived
    scr_unit: str              # unit the equation expects
    native_relative: bool      # True if the equation reports per 1.73 m^2
    handler: Handler
    weight_basis: Optional[str] = None  # "ideal", "adjusted" or "adaptive"
    uses_times: bool = False            # reads sampling times


def _cockcroft_gault(scr, inputs):
    p = inputs.patient
    return equations.cockcroft_gault(scr, p.age, p.weight, p.is_female)


def _mdrd(scr, inputs):
    p = inputs.patient
    return equations.mdrd(scr, p.age, p.is_female, p.is_black)


def _ckd_epi(scr, inputs):
    p = inputs.patient
    return equations.ckd_epi(scr, p.age, p.is_female, p.is_black)


def _lund_malmo(scr, inputs):
    p = inputs.patient
    return equations.lund_malmo_revised(scr, p.age, p.is_female)


def _schwartz(scr, inputs):
    p = inputs.patient
    k = equations.schwartz_k(p.age, p.is_female, p.preterm)
    return equations.schwartz(scr, p.height, k)


def _schwartz_revised(scr, inputs):
    p = inputs.patient
    tuning = _SCHWARTZ
    if p.age < tuning.infant_age:
        inputs.advise(AdvisoryCode.SCHWARTZ_AGE_UNDER_ONE,
                      "This equation is not meant for patients < 1 years of age.")
    return equations.schwartz(scr, p.height, tuning.k_bedside)


def _jelliffe(scr, inputs):
    p = inputs.patient
    return equations.jelliffe(scr, p.age, inputs.bsa, p.is_female)


def _jelliffe_unstable(scr, inputs):
    p = inputs.patient
    crcl = equations.jelliffe_unstable(scr, p.age, p.weight, p.is_female, inputs.times)
    for i in np.flatnonzero(crcl < JELLIFFE_UNSTABLE_FLOOR):
        inputs.advise(
            AdvisoryCode.JELLIFFE_FLOORED,
            f"eGFR of {crcl[i]:.3g} mL/min from the Jelliffe equation for unstable "
            f"patients was set to {JELLIFFE_UNSTABLE_FLOOR:g} mL/min. Please check input data.",
            index=int(i),
        )
    return np.maximum(crcl, JELLIFFE_UNSTABLE_FLOOR)


def _wright(scr, inputs):
    p = inputs.patient
    return equations.wright(scr, p.age, inputs.bsa, p.is_female)


_CG_REQUIRED = ("sex", "age", "weight")
_CG_VARIANT_REQUIRED = ("sex", "age", "weight", "height")

METHOD_SPECS: Dict[Method, MethodSpec] = {
    Method.COCKCROFT_GAULT: MethodSpec(
        Method.COCKCROFT_GAULT, "Cockcroft-Gault", "cockcroft_gault",
        _CG_REQUIRED, MG_DL, False, _cockcroft_gault),
    Method.COCKCROFT_GAULT_IDEAL: MethodSpec(
        Method.COCKCROFT_GAULT_IDEAL, "Cockcroft-Gault (ideal body weight)", "cockcroft_gault",
        _CG_VARIANT_REQUIRED, MG_DL, False, _cockcroft_gault, weight_basis="ideal"),
    Method.COCKCROFT_GAULT_ADJUSTED: MethodSpec(
        Method.COCKCROFT_GAULT_ADJUSTED, "Cockcroft-Gault (adjusted body weight)", "cockcroft_gault",
        _CG_VARIANT_REQUIRED, MG_DL, False, _cockcroft_gault, weight_basis="adjusted"),
    Method.COCKCROFT_GAULT_ADAPTIVE: MethodSpec(
        Method.COCKCROFT_GAULT_ADAPTIVE, "Cockcroft-Gault (adaptive body weight)", "cockcroft_gault",
        _CG_VARIANT_REQUIRED, MG_DL, False, _cockcroft_gault, weight_basis="adaptive"),
    Method.MDRD: MethodSpec(
        Method.MDRD, "MDRD", "mdrd",
        ("sex", "age", "race"), MG_DL, True, _mdrd),
    Method.CKD_EPI: MethodSpec(
        Method.CKD_EPI, "CKD-EPI", "ckd_epi",
        ("sex", "age", "race"), MG_DL, True, _ckd_epi),
    Method.MALMO_LUND_REVISED: MethodSpec(
        Method.MALMO_LUND_REVISED, "Revised Lund-Malmo", "lund_malmo",
        ("sex", "age"), UMOL_L, True, _lund_malmo),
    Method.SCHWARTZ: MethodSpec(
        Method.SCHWARTZ, "Schwartz", "schwartz",
        ("sex", "age", "height", "preterm"), MG_DL, True, _schwartz),
    Method.SCHWARTZ_REVISED: MethodSpec(
        Method.SCHWARTZ_REVISED, "Revised/Bedside Schwartz", "schwartz",
        ("sex", "age", "height"), MG_DL, True, _schwartz_revised),
    Method.JELLIFFE: MethodSpec(
        Method.JELLIFFE, "Jelliffe", "jelliffe",
        ("sex", "age", "bsa"), UMOL_L, True, _jelliffe),
    Method.JELLIFFE_UNSTABLE: MethodSpec(
        Method.JELLIFFE_UNSTABLE, "Jelliffe (unstable renal function)", "jelliffe",
        ("sex", "age", "weight"), MG_DL, True, _jelliffe_unstable, uses_times=True),
    Method.WRIGHT: MethodSpec(
        Method.WRIGHT, "Wright", "wright",
        ("sex", "age", "bsa"), UMOL_L, True, _wright),
}


def get_method_spec(method) -> MethodSpec:
    return METHOD_SPECS[resolve_method(method)]
