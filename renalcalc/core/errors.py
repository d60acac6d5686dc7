"""
Exceptions raised by renalcalc.

All errors subclass ValueError, so callers catching ValueError for bad
input keep working.
"""

from typing import Iterable, List


class RenalFunctionError(ValueError):
    """Base class for invalid input to a renal function estimate."""


class UnknownMethodError(RenalFunctionError):
    def __init__(self, method: str, available: Iterable[str]):
        self.method = method
        self.available = list(available)
        super().__init__(
            f"eGFR calculation method '{method}' not recognized. "
            f"Please choose from: {' '.join(self.available)}"
        )


class UnknownUnitError(RenalFunctionError):
    def __init__(self, unit: str, kind: str, allowed: Iterable[str]):
        self.unit = unit
        self.kind = kind
        super().__init__(
            f"Unsupported {kind} unit '{unit}'. Allowed: {', '.join(allowed)}"
        )


class MissingCovariateError(RenalFunctionError):
    def __init__(self, method: str, missing: List[str]):
        self.method = method
        self.missing = list(missing)
        super().__init__(
            f"{method} requires {', '.join(self.missing)} as input"
        )


class MissingBSAError(RenalFunctionError):
    def __init__(self, method: str):
        self.method = method
        super().__init__(
            f"{method}: BSA not specified and not derivable from weight and height. "
            "Can't convert between absolute and relative eGFR"
        )


class SeriesLengthError(RenalFunctionError):
    def __init__(self, name: str, expected: int, actual: int):
        self.name = name
        super().__init__(
            f"{name} has {actual} elements, expected {expected} "
            "(one per creatinine observation)"
        )
