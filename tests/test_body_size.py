import pytest

from renalcalc.core.enums import WeightBasis
from renalcalc.core.errors import RenalFunctionError
from renalcalc.patient.body_size import (
    BodySizeEstimators,
    calc_abw,
    calc_bsa,
    calc_dosing_weight,
    calc_ibw,
)
from renalcalc.patient.patient import Patient


class TestIdealWeight:

    def test_devine_adult(self):
        # 170 cm = 66.93 in -> 50 + 2.3 * 6.93
        assert calc_ibw(170, 50, "male") == pytest.approx(65.94, abs=0.01)
        assert calc_ibw(170, 50, "female") == pytest.approx(61.44, abs=0.01)

    def test_traub_johnson_child(self):
        assert calc_ibw(140, 10, "male") == pytest.approx(32.34)

    def test_infant_rejected(self):
        with pytest.raises(RenalFunctionError):
            calc_ibw(60, 0.5, "male")


def test_adjusted_weight():
    assert calc_abw(100.0, 60.0) == pytest.approx(76.0)
    assert calc_abw(100.0, 60.0, factor=0.3) == pytest.approx(72.0)


class TestDosingWeight:

    def test_underweight_uses_total(self):
        weight, label = calc_dosing_weight(55, 170, 50, "male")
        assert weight == 55
        assert label == WeightBasis.TOTAL.value

    def test_normal_uses_ideal(self):
        weight, label = calc_dosing_weight(70, 170, 50, "male")
        assert weight == pytest.approx(calc_ibw(170, 50, "male"))
        assert label == WeightBasis.IDEAL.value

    def test_obese_uses_adjusted(self):
        ibw = calc_ibw(170, 50, "male")
        weight, label = calc_dosing_weight(110, 170, 50, "male")
        assert weight == pytest.approx(ibw + 0.4 * (110 - ibw))
        assert label == WeightBasis.ADJUSTED.value


class TestBSA:

    def test_dubois(self):
        assert calc_bsa(70, 170) == pytest.approx(1.81, abs=0.01)

    def test_mosteller(self):
        assert calc_bsa(70, 170, "mosteller") == pytest.approx(1.818, abs=0.001)

    @pytest.mark.parametrize("method", ["dubois", "mosteller", "haycock", "gehan_george", "boyd"])
    def test_methods_agree_for_average_adult(self, method):
        # All published equations land near 1.8 m^2 for 70 kg / 170 cm.
        assert 1.7 < calc_bsa(70, 170, method) < 1.9

    def test_method_name_normalized(self):
        assert calc_bsa(70, 170, "Gehan-George") == calc_bsa(70, 170, "gehan_george")

    def test_unknown_method(self):
        with pytest.raises(RenalFunctionError):
            calc_bsa(70, 170, "unknown")


class TestPatient:

    def test_sex_and_race_normalized(self):
        p = Patient(sex="F", race="BLACK", age=40)
        assert p.sex == "female" and p.is_female
        assert p.is_black

    def test_unrecognized_race_reads_as_other(self):
        assert Patient(race="asian").race == "other"

    def test_missing(self):
        p = Patient(sex="male", age=50, weight=None, race=None)
        assert p.missing(["sex", "age", "weight", "race"]) == ["weight", "race"]

    def test_resolve_bsa_prefers_supplied(self, patient):
        p = Patient(sex="male", age=50, weight=70, height=170, bsa=2.0)
        assert p.resolve_bsa() == 2.0
        assert patient.resolve_bsa() == pytest.approx(calc_bsa(70, 170))
        assert Patient(weight=70).resolve_bsa() is None

    def test_resolve_bsa_custom_estimator(self, patient):
        estimators = BodySizeEstimators(bsa=lambda w, h, method: 1.5)
        assert patient.resolve_bsa("dubois", estimators.bsa) == 1.5

    def test_with_weight_returns_copy(self, patient):
        heavier = patient.with_weight(90)
        assert heavier.weight == 90
        assert patient.weight == 70

    def test_preterm_booleanized(self):
        assert Patient(preterm=1).preterm is True
        assert Patient(preterm=None).preterm is None

    @pytest.mark.parametrize("field", ["age", "weight", "height", "bsa"])
    def test_non_positive_measurements_rejected(self, field):
        with pytest.raises(RenalFunctionError, match=f"{field} must be positive"):
            Patient(sex="male", **{field: 0})

    def test_fractional_infant_age_accepted(self):
        assert Patient(sex="female", age=0.25).age == 0.25
