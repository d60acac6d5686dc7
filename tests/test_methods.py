import pytest

from renalcalc.core.errors import UnknownMethodError
from renalcalc.core.units import MG_DL, UMOL_L
from renalcalc.renal.methods import (
    METHOD_SPECS,
    Method,
    available_methods,
    get_method_spec,
    resolve_method,
)


@pytest.mark.parametrize("raw,expected", [
    ("cockcroft_gault", Method.COCKCROFT_GAULT),
    ("Cockcroft-Gault", Method.COCKCROFT_GAULT),
    ("cockroft_gault", Method.COCKCROFT_GAULT),
    ("COCKROFT-GAULT-IDEAL", Method.COCKCROFT_GAULT_IDEAL),
    ("CKD-EPI", Method.CKD_EPI),
    ("lund_malmo_rev", Method.MALMO_LUND_REVISED),
    ("malmo-lund-revised", Method.MALMO_LUND_REVISED),
    ("bedside_schwartz", Method.SCHWARTZ_REVISED),
    ("jelliffe_unstable", Method.JELLIFFE_UNSTABLE),
    (Method.WRIGHT, Method.WRIGHT),
])
def test_resolve_method(raw, expected):
    assert resolve_method(raw) == expected


def test_unknown_method_lists_choices():
    with pytest.raises(UnknownMethodError) as exc:
        resolve_method("cystatin_c")
    msg = str(exc.value)
    for name in ("cockcroft_gault", "ckd_epi", "wright", "bedside_schwartz"):
        assert name in msg
    assert exc.value.method == "cystatin_c"


def test_unknown_method_is_value_error():
    with pytest.raises(ValueError):
        resolve_method("not_a_method")


def test_every_method_has_spec():
    assert set(METHOD_SPECS) == set(Method)
    assert len(available_methods()) == len(Method) + 4


class TestMethodTable:
    """Default reporting, canonical creatinine unit and weight basis per method."""

    def test_only_cockcroft_gault_is_absolute(self):
        for method, spec in METHOD_SPECS.items():
            expected = not method.value.startswith("cockcroft_gault")
            assert spec.native_relative == expected, method

    @pytest.mark.parametrize("method", [Method.MALMO_LUND_REVISED, Method.JELLIFFE, Method.WRIGHT])
    def test_micromolar_equations(self, method):
        assert METHOD_SPECS[method].scr_unit == UMOL_L

    @pytest.mark.parametrize("method", [Method.COCKCROFT_GAULT, Method.MDRD, Method.CKD_EPI,
                                        Method.SCHWARTZ, Method.SCHWARTZ_REVISED,
                                        Method.JELLIFFE_UNSTABLE])
    def test_mgdl_equations(self, method):
        assert METHOD_SPECS[method].scr_unit == MG_DL

    def test_weight_basis(self):
        assert get_method_spec("cockcroft_gault").weight_basis is None
        assert get_method_spec("cockcroft_gault_ideal").weight_basis == "ideal"
        assert get_method_spec("cockcroft_gault_adjusted").weight_basis == "adjusted"
        assert get_method_spec("cockcroft_gault_adaptive").weight_basis == "adaptive"

    def test_required_covariates(self):
        assert get_method_spec("mdrd").required == ("sex", "age", "race")
        assert get_method_spec("schwartz").required == ("sex", "age", "height", "preterm")
        assert get_method_spec("wright").required == ("sex", "age", "bsa")
        assert "height" in get_method_spec("cockcroft_gault_adaptive").required
