from enum import Enum


class Sex(str, Enum):
    """Biological sex used by the renal equations."""
    MALE = "male"
    FEMALE = "female"


class Race(str, Enum):
    """Race categories (MDRD and CKD-EPI only)."""
    BLACK = "black"
    OTHER = "other"


class WeightBasis(str, Enum):
    """Weight used in place of total body weight."""
    TOTAL = "Total BW"
    IDEAL = "Ideal BW"
    ADJUSTED = "Adjusted BW"


class AdvisoryCode(Enum):
    """Non-fatal notices raised during an estimation."""
    SCR_UNIT_ASSUMED = "scr_unit_assumed"
    SCHWARTZ_AGE_UNDER_ONE = "schwartz_age_under_one"
    SCHWARTZ_ABSOLUTE = "schwartz_absolute"
    JELLIFFE_FLOORED = "jelliffe_floored"
