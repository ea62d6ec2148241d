"""Quantities: values tagged with a dimension vector and a display unit.

Invariant: ``value_si == value * factor`` where ``factor`` is the to-SI factor
of ``unit`` (1 for unitless values). Every operation below preserves it.
"""

import math

from pydantic import BaseModel, ConfigDict

from .errors import DivisionByZeroError, EvaluationError, IncompatibleUnitsError
from .units import DIMENSIONLESS, UNITS, Dims, combine_dims, dims_equal, scale_dims


class Quantity(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: float
    unit: str | None = None
    value_si: float
    dims: Dims = DIMENSIONLESS
    display_unit: str | None = None
    factor: float = 1.0

    @property
    def is_dimensionless(self) -> bool:
        return dims_equal(self.dims, DIMENSIONLESS)


def make_quantity(value: float, unit: str | None = None) -> Quantity:
    """Build a quantity from a literal; unknown units are treated as unitless."""
    value = float(value)
    if unit is None or unit not in UNITS:
        return Quantity(value=value, value_si=value, display_unit=unit)
    u = UNITS[unit]
    return Quantity(
        value=value,
        unit=unit,
        value_si=value * u.to_si,
        dims=u.dims,
        display_unit=unit,
        factor=u.to_si,
    )


def zero() -> Quantity:
    return make_quantity(0.0)


def format_exponent(exp: float) -> str:
    return str(int(exp)) if float(exp).is_integer() else f"{exp:g}"


def combine_units(op: str, left: str | None, right: str | None) -> str | None:
    """Syntactic unit label for a product or quotient."""
    if not left and not right:
        return None
    if op == "*":
        if not left:
            return right
        if not right:
            return left
        return f"{left}·{right}"
    if not right:
        return left
    return f"{left or 1}/{right}"


def add(left: Quantity, right: Quantity, op: str = "+") -> Quantity:
    if not dims_equal(left.dims, right.dims):
        verb = "add" if op == "+" else "subtract"
        raise IncompatibleUnitsError(
            f"cannot {verb} incompatible units: {left.unit or left.dims} and {right.unit or right.dims}"
        )
    value_si = left.value_si + right.value_si if op == "+" else left.value_si - right.value_si
    base = left if left.unit else right
    return Quantity(
        value=value_si / base.factor,
        unit=base.unit,
        value_si=value_si,
        dims=left.dims,
        display_unit=left.display_unit or right.display_unit,
        factor=base.factor,
    )


def subtract(left: Quantity, right: Quantity) -> Quantity:
    return add(left, right, op="-")


def multiply(left: Quantity, right: Quantity) -> Quantity:
    return Quantity(
        value=left.value * right.value,
        unit=combine_units("*", left.unit, right.unit),
        value_si=left.value_si * right.value_si,
        dims=combine_dims(left.dims, right.dims, "*"),
        display_unit=combine_units("*", left.display_unit, right.display_unit),
        factor=left.factor * right.factor,
    )


def divide(left: Quantity, right: Quantity) -> Quantity:
    if right.value == 0:
        raise DivisionByZeroError("division by zero")
    return Quantity(
        value=left.value / right.value,
        unit=combine_units("/", left.unit, right.unit),
        value_si=left.value_si / right.value_si,
        dims=combine_dims(left.dims, right.dims, "/"),
        display_unit=combine_units("/", left.display_unit, right.display_unit),
        factor=left.factor / right.factor,
    )


def power(base: Quantity, exponent: Quantity) -> Quantity:
    if not exponent.is_dimensionless:
        raise IncompatibleUnitsError(f"exponent must be dimensionless, got {exponent.unit or exponent.dims}")
    exp = exponent.value_si
    try:
        value = math.pow(base.value, exp)
        value_si = math.pow(base.value_si, exp)
        factor = math.pow(base.factor, exp)
    except (ValueError, OverflowError) as e:
        raise EvaluationError(f"cannot raise {base.value:g} to the power {exp:g}") from e
    suffix = format_exponent(exp)
    return Quantity(
        value=value,
        unit=f"{base.unit}^{suffix}" if base.unit else None,
        value_si=value_si,
        dims=scale_dims(base.dims, exp),
        display_unit=f"{base.display_unit}^{suffix}" if base.display_unit else None,
        factor=factor,
    )


def negate(q: Quantity) -> Quantity:
    return q.model_copy(update={"value": -q.value, "value_si": -q.value_si})
