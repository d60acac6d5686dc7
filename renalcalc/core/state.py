from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .constants import ABW_DEFAULT_FACTOR
from .enums import AdvisoryCode


@dataclass
class EstimationConfig:
    """Call-independent options for renal function estimation."""
    unit_out: str = "mL/min"   # "mL/min", "L/hr" or "mL/hr"
    bsa_method: str = "dubois"  # see body_size.calc_bsa
    abw_factor: float = ABW_DEFAULT_FACTOR  # excess-weight fraction for adjusted BW
    verbose: bool = True        # log advisories as they are raised

    # Optional clamp applied after unit conversion.
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EstimationConfig":
        """Build a config from a mapping, ignoring unrelated keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass(frozen=True)
class Advisory:
    """A non-fatal notice attached to a result."""
    code: AdvisoryCode
    message: str
    index: Optional[int] = None  # creatinine observation, if element-specific


@dataclass(frozen=True)
class RenalFunctionResult:
    """Outcome of one renal function estimate."""
    values: np.ndarray
    unit: str
    weight_basis: str
    method: str
    relative: bool
    bsa: Optional[float] = None
    advisories: Tuple[Advisory, ...] = field(default_factory=tuple)

    def has_advisory(self, code: AdvisoryCode) -> bool:
        return any(a.code == code for a in self.advisories)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": [float(v) for v in self.values],
            "unit": self.unit,
            "weight": self.weight_basis,
        }
