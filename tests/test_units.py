"""Unit registry, dimension algebra and quantity arithmetic."""

from fractions import Fraction

import pytest
from pydantic import ValidationError

from gridcalc import Dims, DivisionByZeroError, IncompatibleUnitsError, UnitError, convert, is_unit, make_quantity
from gridcalc.quantity import add, combine_units, divide, multiply, power, subtract
from gridcalc.units import (
    DIMENSIONLESS,
    FORCE,
    LENGTH,
    PRESSURE,
    TIME,
    as_exponent,
    combine_dims,
    dims_equal,
    scale_dims,
    unit_factor,
)


class TestRegistry:
    @pytest.mark.parametrize("symbol", ["in", "ft", "mm", "m", "N", "kip", "kg", "psi", "MPa", "s", "deg"])
    def test_known_units(self, symbol):
        assert is_unit(symbol)

    def test_unknown_unit(self):
        assert not is_unit("furlong")
        with pytest.raises(UnitError, match="unknown unit: furlong"):
            unit_factor("furlong")

    def test_factors(self):
        assert unit_factor("ft") == pytest.approx(0.3048)
        assert unit_factor("kN") == 1000
        assert unit_factor("ksi") == pytest.approx(1000 * unit_factor("psi"))


class TestDims:
    def test_multiply_and_divide(self):
        assert combine_dims(LENGTH, LENGTH, "*") == Dims(L=Fraction(2))
        assert combine_dims(FORCE, combine_dims(LENGTH, LENGTH, "*"), "/") == PRESSURE
        assert combine_dims(LENGTH, TIME, "/") == Dims(L=Fraction(1), T=Fraction(-1))

    def test_bad_operator(self):
        with pytest.raises(ValueError):
            combine_dims(LENGTH, LENGTH, "+")

    def test_rational_exponents(self):
        assert scale_dims(Dims(L=Fraction(2)), 0.5) == LENGTH
        assert scale_dims(LENGTH, 1 / 3) == Dims(L=Fraction(1, 3))
        assert as_exponent(1 / 3) == Fraction(1, 3)

    def test_dims_equal_is_exact(self):
        assert dims_equal(scale_dims(scale_dims(LENGTH, 1 / 3), 3), LENGTH)
        assert not dims_equal(LENGTH, FORCE)

    def test_str(self):
        assert str(PRESSURE) == "L^-2·F"
        assert str(DIMENSIONLESS) == "1"


class TestConvert:
    def test_length(self):
        assert convert(12, "in", "ft") == pytest.approx(1)
        assert convert(1, "m", "mm") == pytest.approx(1000)

    def test_pressure(self):
        assert convert(1, "ksi", "psi") == pytest.approx(1000)

    def test_incompatible(self):
        with pytest.raises(UnitError, match="incompatible units"):
            convert(1, "ft", "N")

    def test_unknown(self):
        with pytest.raises(UnitError):
            convert(1, "ft", "furlong")


class TestQuantity:
    def test_make_quantity(self):
        q = make_quantity(5, "ft")
        assert q.value == 5
        assert q.value_si == pytest.approx(1.524)
        assert q.dims == LENGTH
        assert q.factor == pytest.approx(0.3048)

    def test_unknown_unit_is_dimensionless(self):
        q = make_quantity(5, "furlong")
        assert q.is_dimensionless
        assert q.unit is None
        assert q.display_unit == "furlong"
        assert q.value_si == 5

    def test_quantities_are_frozen(self):
        q = make_quantity(1)
        with pytest.raises(ValidationError):
            q.value = 2

    def test_add_converts_right_operand(self):
        q = add(make_quantity(1, "m"), make_quantity(50, "cm"))
        assert q.unit == "m"
        assert q.value == pytest.approx(1.5)

    def test_subtract(self):
        q = subtract(make_quantity(1, "kip"), make_quantity(500, "lb"))
        assert q.unit == "kip"
        assert q.value == pytest.approx(0.5)

    def test_add_unitless_keeps_other_unit(self):
        q = add(make_quantity(2), make_quantity(1, "rad"))
        assert q.unit == "rad"
        assert q.value == 3

    def test_add_incompatible(self):
        with pytest.raises(IncompatibleUnitsError):
            add(make_quantity(1, "ft"), make_quantity(1, "psi"))

    def test_multiply_by_scalar_keeps_unit(self):
        q = multiply(make_quantity(2), make_quantity(3, "ft"))
        assert q.unit == "ft"
        assert q.value == 6

    def test_divide_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            divide(make_quantity(1, "ft"), make_quantity(0, "s"))

    def test_power_label(self):
        q = power(make_quantity(2, "in"), make_quantity(3))
        assert q.unit == "in^3"
        assert q.dims == Dims(L=Fraction(3))

    def test_combine_units(self):
        assert combine_units("*", "lb", "ft") == "lb·ft"
        assert combine_units("/", "lb", "in^2") == "lb/in^2"
        assert combine_units("/", None, "s") == "1/s"
        assert combine_units("/", "ft", None) == "ft"
        assert combine_units("*", None, None) is None
