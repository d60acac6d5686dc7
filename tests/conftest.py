from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from renalcalc.patient.patient import Patient


DEFAULT_PATIENT = dict(sex="male", age=50, weight=70, height=170)


@pytest.fixture
def patient():
    """Standard adult patient used across most tests."""
    return Patient(**DEFAULT_PATIENT)


@pytest.fixture
def covariates():
    """Every covariate any equation may require, as estimate_renal_function kwargs."""
    return dict(sex="male", age=50, weight=70, height=170, race="other",
                preterm=False, scr_unit="mg/dL", verbose=False)


@pytest.fixture
def child_covariates():
    return dict(sex="female", age=8, weight=25, height=128, race="other",
                preterm=False, scr_unit="mg/dL", verbose=False)
