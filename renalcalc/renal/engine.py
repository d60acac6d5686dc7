"""
Renal function estimation pipeline.

One call runs, in order: method resolution, covariate validation and
weight substitution, creatinine unit normalization, the equation itself,
relative/absolute conversion, output unit conversion and clamping.
No input is modified; each stage produces new values.
"""

import logging
from functools import partial
from typing import List, Optional, Sequence, Tuple

import numpy as np

from renalcalc.core.constants import ABW_DEFAULT_FACTOR, BSA_REFERENCE
from renalcalc.core.enums import AdvisoryCode, WeightBasis
from renalcalc.core.errors import (
    MissingBSAError,
    MissingCovariateError,
    RenalFunctionError,
    SeriesLengthError,
)
from renalcalc.core.state import Advisory, EstimationConfig, RenalFunctionResult
from renalcalc.core.units import (
    MG_DL,
    convert_clearance,
    convert_scr,
    normalize_output_unit,
    normalize_scr_unit,
)
from renalcalc.core.utils import clamp_values, is_missing
from renalcalc.patient.body_size import (
    DEFAULT_ESTIMATORS,
    BodySizeEstimators,
    calc_bsa,
    calc_dosing_weight,
    normalize_bsa_method,
)
from renalcalc.patient.patient import Patient

from .methods import MethodInputs, MethodSpec, get_method_spec

logger = logging.getLogger(__name__)

RELATIVE_SUFFIX = "/1.73m^2"


def prepare_series(spec: MethodSpec, scr, scr_unit=None, times=None
                   ) -> Tuple[np.ndarray, List[str], Optional[np.ndarray], List[Advisory]]:
    """
    Validate a creatinine series and broadcast its unit tags.

    Returns:
        (values, one normalized unit per value, times or None, advisories)
    """
    advisories = []
    if is_missing(scr):
        raise MissingCovariateError(spec.label, ["scr"])
    values = np.atleast_1d(np.asarray(scr, dtype=float))
    if np.any(np.isnan(values)):
        raise MissingCovariateError(spec.label, ["scr"])
    if np.any(values <= 0):
        raise RenalFunctionError("Serum creatinine values must be positive")
    n = len(values)

    if is_missing(scr_unit):
        advisories.append(Advisory(AdvisoryCode.SCR_UNIT_ASSUMED,
                                   "Creatinine unit not specified, assuming mg/dL."))
        units = [MG_DL] * n
    elif isinstance(scr_unit, str):
        units = [normalize_scr_unit(scr_unit)] * n
    else:
        units = [normalize_scr_unit(u) for u in scr_unit]
        if len(units) == 1:
            units = units * n
        if len(units) != n:
            raise SeriesLengthError("scr_unit", n, len(units))

    time_values = None
    if spec.uses_times and not is_missing(times):
        time_values = np.atleast_1d(np.asarray(times, dtype=float))
        if len(time_values) != n:
            raise SeriesLengthError("times", n, len(time_values))
    return values, units, time_values, advisories


def validate_covariates(spec: MethodSpec, patient: Patient, bsa: Optional[float]):
    """Raise MissingCovariateError naming every absent required covariate."""
    missing = patient.missing(name for name in spec.required if name != "bsa")
    if "bsa" in spec.required and bsa is None:
        missing.append("bsa (or weight and height)")
    if missing:
        raise MissingCovariateError(spec.label, missing)


def resolve_dosing_weight(spec: MethodSpec, patient: Patient,
                          estimators: BodySizeEstimators = DEFAULT_ESTIMATORS,
                          abw_factor: float = ABW_DEFAULT_FACTOR) -> Tuple[Patient, str]:
    """
    Swap total body weight for the weight basis the method calls for.

    Returns a new Patient and the label of the weight actually used.
    """
    if spec.weight_basis is None:
        return patient, WeightBasis.TOTAL.value
    p = patient
    if spec.weight_basis == "adaptive":
        dosing_weight = estimators.dosing_weight
        if dosing_weight is calc_dosing_weight:
            dosing_weight = partial(calc_dosing_weight, factor=abw_factor)
        weight, label = dosing_weight(p.weight, p.height, p.age, p.sex)
        return p.with_weight(weight), label
    ibw = estimators.ideal_weight(p.height, p.age, p.sex)
    if spec.weight_basis == "ideal":
        return p.with_weight(ibw), WeightBasis.IDEAL.value
    abw = estimators.adjusted_weight(p.weight, ibw, abw_factor)
    return p.with_weight(abw), WeightBasis.ADJUSTED.value


def apply_reporting_basis(values: np.ndarray, native_relative: bool, relative: bool,
                          bsa: Optional[float], label: str = "eGFR") -> np.ndarray:
    """
    Convert between absolute and per-1.73 m^2 reporting.

    Natively relative equations are multiplied by BSA/1.73 to report an
    absolute value; natively absolute ones are divided by it.
    """
    if native_relative == relative:
        return values
    if bsa is None:
        raise MissingBSAError(label)
    if native_relative:
        return values * (bsa / BSA_REFERENCE)
    return values / (bsa / BSA_REFERENCE)


def _log_advisories(advisories: Sequence[Advisory]):
    for adv in advisories:
        if adv.code == AdvisoryCode.JELLIFFE_FLOORED:
            logger.warning(adv.message)
        else:
            logger.info(adv.message)


def estimate_renal_function(
    method="cockcroft_gault",
    sex=None,
    age=None,
    scr=None,
    scr_unit=None,
    race="other",
    weight=None,
    height=None,
    bsa=None,
    bsa_method=None,
    preterm=False,
    ckd=False,
    times=None,
    relative=None,
    unit_out=None,
    min_value=None,
    max_value=None,
    verbose=None,
    abw_factor=None,
    config: Optional[EstimationConfig] = None,
    estimators: BodySizeEstimators = DEFAULT_ESTIMATORS,
) -> RenalFunctionResult:
    """
    Estimate GFR / creatinine clearance from serum creatinine.

    Args:
        method: Equation, see renal.methods.Method (aliases accepted).
        sex: "male" or "female".
        age: Age in years.
        scr: Serum creatinine, a value or a sequence of values.
        scr_unit: "mg/dL" or "umol/L", one per value or one for all.
            Assumed mg/dL (with an advisory) when None.
        race: "black" or "other" (MDRD and CKD-EPI only).
        weight: Weight in kg.
        height: Height in cm.
        bsa: Body surface area in m^2; derived from weight and height if None.
        bsa_method: BSA equation used when deriving BSA.
        preterm: Preterm birth (original Schwartz only).
        ckd: Chronic kidney disease. Recorded only.
        times: Sampling times in days (Jelliffe for unstable patients only).
        relative: Report per 1.73 m^2. None uses the method's convention.
        unit_out: "mL/min", "L/hr" or "mL/hr".
        min_value, max_value: Optional clamp on reported values.
        verbose: Log advisories as they are raised.
        abw_factor: Excess-weight fraction for adjusted body weight.
        config: Defaults for any of the options above left as None.
        estimators: Weight and BSA estimators.

    Returns:
        RenalFunctionResult with one value per creatinine observation.
    """
    cfg = config or EstimationConfig()
    unit_out = normalize_output_unit(unit_out if unit_out is not None else cfg.unit_out)
    bsa_method = bsa_method if bsa_method is not None else cfg.bsa_method
    if estimators.bsa is calc_bsa:
        bsa_method = normalize_bsa_method(bsa_method)
    verbose = cfg.verbose if verbose is None else verbose
    abw_factor = cfg.abw_factor if abw_factor is None else abw_factor
    min_value = cfg.min_value if min_value is None else min_value
    max_value = cfg.max_value if max_value is None else max_value

    spec = get_method_spec(method)
    values, units, time_values, advisories = prepare_series(spec, scr, scr_unit, times)

    patient = Patient(sex=sex, age=age, weight=weight, height=height, race=race,
                      bsa=bsa, preterm=preterm, ckd=ckd)
    # BSA always comes from total body weight, never the substituted weight.
    patient_bsa = patient.resolve_bsa(bsa_method, estimators.bsa)
    validate_covariates(spec, patient, patient_bsa)

    relative = spec.native_relative if relative is None else bool(relative)
    if relative != spec.native_relative and patient_bsa is None:
        raise MissingBSAError(spec.label)

    dosing_patient, weight_basis = resolve_dosing_weight(spec, patient, estimators, abw_factor)

    inputs = MethodInputs(dosing_patient, bsa=patient_bsa, times=time_values)
    scr_norm = convert_scr(values, units, spec.scr_unit)
    crcl = spec.handler(scr_norm, inputs)
    advisories.extend(inputs.advisories)

    crcl = apply_reporting_basis(crcl, spec.native_relative, relative, patient_bsa, spec.label)
    if spec.family == "schwartz" and not relative:
        advisories.append(Advisory(
            AdvisoryCode.SCHWARTZ_ABSOLUTE,
            "eGFR from Schwartz commonly reported as relative to 1.73m^2 BSA. "
            "Consider using relative=True."))

    crcl = convert_clearance(crcl, "mL/min", unit_out)
    crcl = clamp_values(crcl, min_value, max_value)

    if verbose:
        _log_advisories(advisories)

    return RenalFunctionResult(
        values=crcl,
        unit=unit_out + RELATIVE_SUFFIX if relative else unit_out,
        weight_basis=weight_basis,
        method=spec.method.value,
        relative=relative,
        bsa=patient_bsa,
        advisories=tuple(advisories),
    )
