from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Optional

from renalcalc.core.enums import Race, Sex
from renalcalc.core.errors import RenalFunctionError
from renalcalc.core.utils import is_missing

from .body_size import calc_bsa

_SEX_ALIASES = {
    "male": Sex.MALE.value,
    "m": Sex.MALE.value,
    "female": Sex.FEMALE.value,
    "f": Sex.FEMALE.value,
}

_POSITIVE_FIELDS = ("age", "weight", "height", "bsa")


def _normalize_sex(sex) -> Optional[str]:
    if is_missing(sex):
        return None
    key = sex.value if isinstance(sex, Sex) else str(sex).strip().lower()
    if key not in _SEX_ALIASES:
        raise RenalFunctionError(f"Sex '{sex}' not recognized, use 'male' or 'female'")
    return _SEX_ALIASES[key]


def _normalize_race(race) -> Optional[str]:
    if is_missing(race):
        return None
    key = race.value if isinstance(race, Race) else str(race).strip().lower()
    return Race.BLACK.value if key == Race.BLACK.value else Race.OTHER.value


@dataclass(frozen=True)
class Patient:
    """
    Patient covariates for a renal function estimate.

    Every field may be None; which ones are required depends on the
    equation. Instances are never modified, derived weights produce
    a new Patient.
    """
    sex: Optional[str] = None      # "male" or "female"
    age: Optional[float] = None    # years, fractional for infants
    weight: Optional[float] = None  # kg
    height: Optional[float] = None  # cm
    race: Optional[str] = "other"  # "black" or "other"
    bsa: Optional[float] = None    # m^2, derived from weight/height if absent
    preterm: Optional[bool] = False
    ckd: Optional[bool] = False    # recorded, not used by any equation

    def __post_init__(self):
        object.__setattr__(self, "sex", _normalize_sex(self.sex))
        object.__setattr__(self, "race", _normalize_race(self.race))
        if self.preterm is not None:
            object.__setattr__(self, "preterm", bool(self.preterm))
        if self.ckd is not None:
            object.__setattr__(self, "ckd", bool(self.ckd))
        for name in _POSITIVE_FIELDS:
            value = getattr(self, name)
            if not is_missing(value) and value <= 0:
                raise RenalFunctionError(f"{name} must be positive, got {value}")

    @property
    def is_female(self) -> bool:
        return self.sex == Sex.FEMALE.value

    @property
    def is_black(self) -> bool:
        return self.race == Race.BLACK.value

    def missing(self, names: Iterable[str]) -> List[str]:
        """Names of covariates in `names` that are absent."""
        return [name for name in names if is_missing(getattr(self, name))]

    def resolve_bsa(self, method: str = "dubois",
                    estimator: Optional[Callable[..., float]] = None) -> Optional[float]:
        """Supplied BSA, else BSA from weight and height, else None."""
        if not is_missing(self.bsa):
            return float(self.bsa)
        if is_missing(self.weight) or is_missing(self.height):
            return None
        if estimator is None:
            estimator = calc_bsa
        return estimator(self.weight, self.height, method)

    def with_weight(self, weight: float) -> "Patient":
        return replace(self, weight=weight)
