"""Built-in functions callable from formulas.

Names are matched case-insensitively against a closed allow-list.
"""

import math
from collections.abc import Callable

from .errors import EvaluationError, IncompatibleUnitsError, UnknownFunctionError
from .quantity import Quantity, make_quantity, power
from .units import dims_equal

Function = Callable[[list[Quantity]], Quantity]


def _arity(name: str, args: list[Quantity], n: int) -> None:
    if len(args) != n:
        raise EvaluationError(f"{name} takes {n} argument{'s' if n != 1 else ''}, got {len(args)}")


def _abs(args: list[Quantity]) -> Quantity:
    _arity("ABS", args, 1)
    q = args[0]
    return q.model_copy(update={"value": abs(q.value), "value_si": abs(q.value_si)})


def _sqrt(args: list[Quantity]) -> Quantity:
    _arity("SQRT", args, 1)
    if args[0].value < 0:
        raise EvaluationError("SQRT of a negative value")
    return power(args[0], make_quantity(0.5))


def _extreme(name: str, pick: Callable) -> Function:
    def fn(args: list[Quantity]) -> Quantity:
        if not args:
            raise EvaluationError(f"{name} needs at least one argument")
        first = args[0]
        for q in args[1:]:
            if not dims_equal(q.dims, first.dims):
                raise IncompatibleUnitsError(f"{name} of incompatible units")
        return pick(args, key=lambda q: q.value_si)

    return fn


def _trig(name: str, func: Callable[[float], float]) -> Function:
    def fn(args: list[Quantity]) -> Quantity:
        _arity(name, args, 1)
        if not args[0].is_dimensionless:
            raise IncompatibleUnitsError(f"{name} needs an angle or plain number")
        # value_si is radians for deg/rad, and the plain value otherwise
        return make_quantity(func(args[0].value_si))

    return fn


def _pi(args: list[Quantity]) -> Quantity:
    _arity("PI", args, 0)
    return make_quantity(math.pi)


BUILTINS: dict[str, Function] = {
    "ABS": _abs,
    "SQRT": _sqrt,
    "MIN": _extreme("MIN", min),
    "MAX": _extreme("MAX", max),
    "SIN": _trig("SIN", math.sin),
    "COS": _trig("COS", math.cos),
    "TAN": _trig("TAN", math.tan),
    "PI": _pi,
}


def get_function(name: str) -> Function:
    try:
        return BUILTINS[name.upper()]
    except KeyError:
        raise UnknownFunctionError(name) from None
