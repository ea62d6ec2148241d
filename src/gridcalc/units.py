"""Unit and dimension registry.

Every unit maps to a dimension vector over (L, M, T, F) and a factor to SI.
Force is its own base dimension, so pressure is F/L^2 and a moment is F*L.
Exponents are Fractions so square roots and other rational powers compare
exactly.
"""

import math
from fractions import Fraction
from typing import NamedTuple


class UnitError(ValueError):
    pass


class Dims(NamedTuple):
    L: Fraction = Fraction(0)
    M: Fraction = Fraction(0)
    T: Fraction = Fraction(0)
    F: Fraction = Fraction(0)

    def __str__(self) -> str:
        parts = [f"{name}^{exp}" if exp != 1 else name for name, exp in zip(self._fields, self) if exp]
        return "·".join(parts) or "1"


DIMENSIONLESS = Dims()
LENGTH = Dims(L=Fraction(1))
MASS = Dims(M=Fraction(1))
TIME = Dims(T=Fraction(1))
FORCE = Dims(F=Fraction(1))
PRESSURE = Dims(L=Fraction(-2), F=Fraction(1))

# Exponents like 1/3 arrive as floats; snap them to the nearest small rational.
_MAX_DENOMINATOR = 1_000_000


class UnitDef(NamedTuple):
    symbol: str
    dims: Dims
    to_si: float


def _define(*defs: tuple[str, Dims, float]) -> dict[str, UnitDef]:
    return {symbol: UnitDef(symbol, dims, to_si) for symbol, dims, to_si in defs}


UNITS: dict[str, UnitDef] = _define(
    # Length
    ("in", LENGTH, 0.0254),
    ("ft", LENGTH, 0.3048),
    ("yd", LENGTH, 0.9144),
    ("mm", LENGTH, 0.001),
    ("cm", LENGTH, 0.01),
    ("m", LENGTH, 1.0),
    ("km", LENGTH, 1000.0),
    ("mil", LENGTH, 0.0000254),
    # Force
    ("N", FORCE, 1.0),
    ("kN", FORCE, 1000.0),
    ("lb", FORCE, 4.4482216153),
    ("lbs", FORCE, 4.4482216153),
    ("kip", FORCE, 4448.2216153),
    # Mass
    ("kg", MASS, 1.0),
    # Pressure
    ("Pa", PRESSURE, 1.0),
    ("kPa", PRESSURE, 1000.0),
    ("MPa", PRESSURE, 1_000_000.0),
    ("GPa", PRESSURE, 1_000_000_000.0),
    ("psi", PRESSURE, 6894.75729),
    ("psf", PRESSURE, 47.8802589),
    ("ksi", PRESSURE, 6_894_757.29),
    # Time
    ("s", TIME, 1.0),
    ("sec", TIME, 1.0),
    # Angle (dimensionless, radians are SI)
    ("deg", DIMENSIONLESS, math.pi / 180),
    ("rad", DIMENSIONLESS, 1.0),
)


def is_unit(symbol: str) -> bool:
    return symbol in UNITS


def get_unit(symbol: str) -> UnitDef:
    try:
        return UNITS[symbol]
    except KeyError:
        raise UnitError(f"unknown unit: {symbol}") from None


def unit_factor(symbol: str) -> float:
    return get_unit(symbol).to_si


def as_exponent(value: float | Fraction) -> Fraction:
    if isinstance(value, Fraction):
        return value
    return Fraction(value).limit_denominator(_MAX_DENOMINATOR)


def combine_dims(a: Dims, b: Dims, op: str) -> Dims:
    """Dimension of a*b (component-wise sum) or a/b (difference)."""
    if op == "*":
        return Dims(*(x + y for x, y in zip(a, b)))
    if op == "/":
        return Dims(*(x - y for x, y in zip(a, b)))
    raise ValueError(f"cannot combine dimensions with {op!r}")


def scale_dims(d: Dims, exponent: float | Fraction) -> Dims:
    exp = as_exponent(exponent)
    return Dims(*(x * exp for x in d))


def dims_equal(a: Dims, b: Dims) -> bool:
    return tuple(a) == tuple(b)


def convert(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a value between two registered units of the same dimension."""
    src = get_unit(from_unit)
    dst = get_unit(to_unit)
    if not dims_equal(src.dims, dst.dims):
        raise UnitError(f"incompatible units: {from_unit} -> {to_unit}")
    return value * src.to_si / dst.to_si
