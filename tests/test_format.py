"""Display units and number formatting."""

import pytest

from gridcalc import (
    DisplayQuantity,
    UnitError,
    auto_display,
    display_as,
    evaluate,
    format_latex,
    format_quantity,
    format_text,
    make_quantity,
    prefs_for_system,
)

METRIC = prefs_for_system("metric_mm")


class TestFormatQuantity:
    def test_with_unit(self):
        assert format_quantity(make_quantity(5, "ft")) == "5 ft"

    def test_without_unit(self):
        assert format_quantity(make_quantity(2.5)) == "2.5"

    def test_unknown_unit_is_shown(self):
        assert format_quantity(make_quantity(5, "furlong")) == "5 furlong"

    def test_product_unit(self):
        assert format_quantity(evaluate("2 ft * 3 ft")) == "6 ft·ft"


class TestDisplayAs:
    def test_area(self):
        dq = display_as(evaluate("2 ft * 3 ft"), "in^2")
        assert dq.value == pytest.approx(864)
        assert dq.unit == "in^2"

    def test_moment(self):
        assert display_as(evaluate("100 lb * 2 ft"), "lb·in").value == pytest.approx(2400)
        assert display_as(evaluate("100 lb * 2 ft"), "lb*in").value == pytest.approx(2400)

    def test_stress(self):
        assert display_as(evaluate("100 lb / (2 in * 1 in)"), "lb/in^2").value == pytest.approx(50)

    def test_wrong_dimension(self):
        with pytest.raises(UnitError, match="cannot display"):
            display_as(make_quantity(1, "ft"), "lb")

    def test_unknown_unit(self):
        with pytest.raises(UnitError, match="unknown unit"):
            display_as(make_quantity(1, "ft"), "furlong")


class TestAutoDisplay:
    def test_dimensionless(self):
        assert auto_display(evaluate("3")) == DisplayQuantity(value=3, unit="")

    def test_length_uses_preferred_base(self):
        dq = auto_display(evaluate("1 ft + 12 in"))
        assert dq.value == pytest.approx(24)
        assert dq.unit == "in"

    def test_length_uses_hint(self):
        dq = auto_display(evaluate("1 ft + 12 in"), lhs_unit="ft")
        assert dq.value == pytest.approx(2)
        assert dq.unit == "ft"

    def test_non_length_hint_is_ignored(self):
        assert auto_display(evaluate("1 ft"), rhs_unit="psi").unit == "in"

    def test_area(self):
        dq = auto_display(evaluate("2 ft * 3 ft"))
        assert dq.value == pytest.approx(864)
        assert dq.unit == "in^2"

    def test_metric_length(self):
        dq = auto_display(evaluate("1 m"), METRIC)
        assert dq.value == pytest.approx(1000)
        assert dq.unit == "mm"

    def test_psi_scales_to_ksi(self):
        dq = auto_display(evaluate("500 psi"))
        assert dq.value == pytest.approx(500)
        assert dq.unit == "psi"
        dq = auto_display(evaluate("1000 lb / (1 in * 1 in)"))
        assert dq.value == pytest.approx(1)
        assert dq.unit == "ksi"

    @pytest.mark.parametrize(
        ("source", "value", "unit"),
        [("2 MPa", 2, "MPa"), ("5 kPa", 5, "kPa"), ("10 Pa", 10, "Pa")],
    )
    def test_metric_stress(self, source, value, unit):
        dq = auto_display(evaluate(source), METRIC)
        assert dq.value == pytest.approx(value)
        assert dq.unit == unit

    def test_small_moment_in_lb_in(self):
        dq = auto_display(evaluate("100 lb * 2 in"))
        assert dq.value == pytest.approx(200)
        assert dq.unit == "lb·in"

    def test_large_moment_in_lb_ft(self):
        dq = auto_display(evaluate("100 lb * 20 ft"))
        assert dq.value == pytest.approx(2000)
        assert dq.unit == "lb·ft"

    def test_metric_moment(self):
        dq = auto_display(evaluate("3 N * 2 m"), METRIC)
        assert dq.value == pytest.approx(6)
        assert dq.unit == "N·m"

    def test_composite(self):
        dq = auto_display(evaluate("10 ft / 2 s"))
        assert dq.value == pytest.approx(60)
        assert dq.unit == "in/s"


class TestText:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2.5, "2.5"), (2.0, "2"), (0.1234, "0.123"), (0, "0"), (-0.0, "0"), (1234567, "1.235e+06"), (0.0001, "1.000e-04")],
    )
    def test_numbers(self, value, expected):
        assert format_text(DisplayQuantity(value=value)) == expected

    def test_with_unit(self):
        assert format_text(DisplayQuantity(value=864, unit="in^2")) == "864 in^2"

    def test_latex(self):
        assert format_latex(DisplayQuantity(value=864, unit="in^2")) == "864\\,\\mathrm{in^{2}}"
        assert format_latex(DisplayQuantity(value=3, unit="lb·in")) == "3\\,\\mathrm{lb\\cdot in}"
        assert format_latex(DisplayQuantity(value=3)) == "3"
