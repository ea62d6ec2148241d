"""Display formatting for quantities.

A quantity can be shown in an explicit unit (``display_as``) or in a unit
chosen from its dimensions and the user's unit preferences
(``auto_display``).
"""

import math
import re
from fractions import Fraction

from pydantic import BaseModel

from .config import DEFAULT_PREFS, UnitPrefs
from .quantity import Quantity
from .units import UNITS, Dims, UnitError, combine_dims, dims_equal, get_unit, scale_dims

_UNIT_TERM = re.compile(r"^([A-Za-z]+)(?:\^(-?\d+))?$")
_TERM_SEPARATOR = re.compile(r"[·.*]")


class DisplayQuantity(BaseModel):
    value: float
    unit: str = ""


def _plain(value: float) -> str:
    return f"{value:.12g}"


def format_quantity(q: Quantity) -> str:
    """Render as "5 ft", or "5" when unitless."""
    unit = q.display_unit or q.unit
    return f"{_plain(q.value)} {unit}" if unit else _plain(q.value)


def _parse_unit(unit: str) -> tuple[float, Dims]:
    """Factor and dimensions of a composite unit like lb·in or lb/in^2."""
    numerator, _, denominator = unit.partition("/")
    factor = 1.0
    dims = Dims()
    for part, sign in ((numerator, 1), (denominator, -1)):
        for term in _TERM_SEPARATOR.split(part):
            term = term.strip()
            if not term or term == "1":
                continue
            m = _UNIT_TERM.match(term)
            if not m:
                raise UnitError(f"unknown unit: {term}")
            u = get_unit(m.group(1))
            exp = (int(m.group(2)) if m.group(2) else 1) * sign
            factor *= u.to_si**exp
            dims = combine_dims(dims, scale_dims(u.dims, exp), "*")
    return factor, dims


def display_as(q: Quantity, unit: str) -> DisplayQuantity:
    """Express q in the given (possibly composite) unit."""
    factor, dims = _parse_unit(unit)
    if not dims_equal(dims, q.dims):
        raise UnitError(f"cannot display {q.dims} as {unit}")
    return DisplayQuantity(value=q.value_si / factor, unit=unit)


def _unit_power(symbol: str, p: Fraction) -> str:
    return symbol if p == 1 else f"{symbol}^{p}"


def auto_display(
    q: Quantity,
    prefs: UnitPrefs | None = None,
    lhs_unit: str | None = None,
    rhs_unit: str | None = None,
) -> DisplayQuantity:
    """Pick a readable unit for q from its dimensions.

    Pure lengths, areas and volumes use a hinted length unit or the preferred
    length base; stresses scale between psi/ksi or Pa/kPa/MPa by magnitude;
    moments use lb·in (lb·ft past 100 lb·ft) or N·m; anything else is built
    from the base units.
    """
    prefs = prefs or DEFAULT_PREFS
    d = q.dims

    if q.is_dimensionless:
        return DisplayQuantity(value=q.value, unit=q.unit or "")

    if d.M == 0 and d.T == 0 and d.F == 0:
        base = lhs_unit or rhs_unit or prefs.length_base
        u = UNITS.get(base)
        if u is None or u.dims != Dims(L=Fraction(1)):
            u = UNITS[prefs.length_base]
        return DisplayQuantity(value=q.value_si / u.to_si ** float(d.L), unit=_unit_power(u.symbol, d.L))

    if d == Dims(L=Fraction(-2), F=Fraction(1)):
        if prefs.stress_scale == "psi/ksi":
            value = q.value_si / UNITS["psi"].to_si
            if abs(value) >= 1000:
                return DisplayQuantity(value=value / 1000, unit="ksi")
            return DisplayQuantity(value=value, unit="psi")
        value = q.value_si
        if abs(value) >= 1_000_000:
            return DisplayQuantity(value=value / 1_000_000, unit="MPa")
        if abs(value) >= 1000:
            return DisplayQuantity(value=value / 1000, unit="kPa")
        return DisplayQuantity(value=value, unit="Pa")

    if d == Dims(L=Fraction(1), F=Fraction(1)):
        if prefs.force_base == "lb":
            lb_in = q.value_si / UNITS["lb"].to_si / UNITS["in"].to_si
            if abs(lb_in) >= 1200:
                return DisplayQuantity(value=q.value_si / UNITS["lb"].to_si / UNITS["ft"].to_si, unit="lb·ft")
            return DisplayQuantity(value=lb_in, unit="lb·in")
        return DisplayQuantity(value=q.value_si, unit="N·m")

    base_l = lhs_unit if lhs_unit in UNITS and UNITS[lhs_unit].dims == Dims(L=Fraction(1)) else prefs.length_base
    value = q.value_si
    numerator: list[str] = []
    denominator: list[str] = []
    for symbol, exp in ((base_l, d.L), (prefs.force_base, d.F), (prefs.time_base, d.T), ("kg", d.M)):
        if exp == 0:
            continue
        value /= UNITS[symbol].to_si ** float(exp)
        (numerator if exp > 0 else denominator).append(_unit_power(symbol, abs(exp)))
    unit = "·".join(numerator) or "1"
    if denominator:
        unit = f"{unit}/{'·'.join(denominator)}"
    return DisplayQuantity(value=value, unit=unit)


def _format_number(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    if value != 0 and (abs(value) >= 1e6 or abs(value) < 1e-3):
        return f"{value:.3e}"
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_text(dq: DisplayQuantity) -> str:
    v = _format_number(dq.value)
    return f"{v} {dq.unit}" if dq.unit else v


def format_latex(dq: DisplayQuantity) -> str:
    v = _format_number(dq.value)
    if not dq.unit:
        return v
    unit = re.sub(r"\^(-?[\d/]+)", r"^{\1}", dq.unit).replace("·", "\\cdot ")
    return f"{v}\\,\\mathrm{{{unit}}}"
