"""Evaluator: walks parsed formulas into dimension-checked quantities.

Every call is a fresh recursive walk. Cell references re-evaluate the
referenced cell's text, and variables defined in a cell are re-derived from
that cell's current text, so results never go stale. A ``visiting`` set is
threaded through every recursive call to detect circular references.

Example:
    from gridcalc import evaluate, evaluate_cell

    evaluate("1 ft + 12 in").value  # 2.0
    grid = [["L = 5", "=L * 2"]]
    evaluate_cell(grid, grid[0][0], 0, 0)  # 5.0
    evaluate_cell(grid, grid[0][1], 0, 1)  # 10.0
"""

import logging
import re
from collections.abc import Callable, Sequence

from pydantic import BaseModel, ConfigDict

from . import ast
from .a1 import rc_to_ref, ref_to_rc
from .cycle import cell_key, parse_cell_key, variable_key, visit
from .errors import (
    BadReferenceError,
    EvaluationError,
    RangeEvaluationError,
    TextEvaluationError,
    UndefinedVariableError,
)
from .functions import get_function
from .names import VariableRegistry, default_registry
from .parser import parse
from .quantity import Quantity, add, divide, make_quantity, multiply, negate, power, subtract, zero
from .units import is_unit

logger = logging.getLogger(__name__)

Grid = Sequence[Sequence[str]]

# Plain numbers skip the parser entirely
_PLAIN_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


class EvaluationContext(BaseModel):
    """Hooks supplied by the surface doing the evaluation.

    get_cell: raw text of a cell given its A1 reference.
    get_variable / set_variable: override the variable registry.
    cell_key: "row:col" of the cell being evaluated; assignments bind to it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    get_cell: Callable[[str], str | None] | None = None
    get_variable: Callable[[str], Quantity | None] | None = None
    set_variable: Callable[[str, Quantity], None] | None = None
    cell_key: str | None = None


def grid_reader(grid: Grid) -> Callable[[str], str]:
    """A get_cell callback over a 2-D grid of raw strings."""

    def get_cell(ref: str) -> str:
        address = ref_to_rc(ref)
        if address is None:
            raise BadReferenceError(f"invalid cell reference: {ref}")
        row, col = address
        if row >= len(grid) or col >= len(grid[row]):
            return ""
        return grid[row][col] or ""

    return get_cell


class Evaluator:
    """Evaluates formula text against a variable registry."""

    def __init__(self, registry: VariableRegistry | None = None):
        self.registry = registry if registry is not None else default_registry

    def evaluate(
        self,
        raw: str,
        context: EvaluationContext | None = None,
        visiting: set[str] | None = None,
    ) -> Quantity:
        """Evaluate one cell or line: a number, an expression or an assignment."""
        ctx = context or EvaluationContext()
        seen = set() if visiting is None else visiting

        text = raw.strip()
        if not text:
            return zero()
        if _PLAIN_NUMBER.match(text):
            return make_quantity(float(text))

        match parse(text):
            case ast.Assignment(name=name, expr=expr):
                return self._assign(name, expr, ctx, seen)
            case ast.Expression(expr=expr):
                return self.evaluate_expr(expr, ctx, seen)
            case ast.Text(raw=source):
                raise TextEvaluationError(f"cannot evaluate text: {source!r}")

    def evaluate_cell(self, grid: Grid, raw: str, row: int, col: int) -> float:
        """Evaluate the text of cell (row, col); returns the value in SI units."""
        return self.evaluate_cell_quantity(grid, raw, row, col).value_si

    def evaluate_cell_quantity(self, grid: Grid, raw: str, row: int, col: int) -> Quantity:
        key = cell_key(row, col)
        ctx = EvaluationContext(get_cell=grid_reader(grid), cell_key=key)
        visiting: set[str] = set()
        with visit(key, visiting):
            return self.evaluate(raw, ctx, visiting)

    def evaluate_with_grid(self, grid: Grid, raw: str) -> float:
        """Evaluate text that may reference cells of grid; returns SI value."""
        ctx = EvaluationContext(get_cell=grid_reader(grid))
        return self.evaluate(raw, ctx, set()).value_si

    def evaluate_expr(self, expr: ast.Expr, context: EvaluationContext, visiting: set[str]) -> Quantity:
        match expr:
            case ast.Number(value=value, unit=unit):
                return make_quantity(value, unit)

            case ast.Variable(name=name):
                return self._resolve_variable(name, context, visiting)

            case ast.Cell(ref=ref):
                return self._resolve_cell(ref, context, visiting)

            case ast.Unary(op=op, operand=operand):
                q = self.evaluate_expr(operand, context, visiting)
                return negate(q) if op == "-" else q

            case ast.Binary(op=op, left=left, right=right):
                lhs = self.evaluate_expr(left, context, visiting)
                rhs = self.evaluate_expr(right, context, visiting)
                match op:
                    case "+":
                        return add(lhs, rhs)
                    case "-":
                        return subtract(lhs, rhs)
                    case "*":
                        return multiply(lhs, rhs)
                    case "/":
                        return divide(lhs, rhs)
                    case "^":
                        return power(lhs, rhs)
                    case _:
                        raise EvaluationError(f"unknown op: {op}")

            case ast.Call(func=func, args=args):
                fn = get_function(func)
                return fn([self.evaluate_expr(a, context, visiting) for a in args])

            case ast.Range(start=start, end=end):
                raise RangeEvaluationError(f"range {start}:{end} cannot be used as a single value")

            case ast.Assign(name=name):
                raise EvaluationError(f"assignment to {name} is only allowed at the start of a line")

            case _:
                raise EvaluationError(f"unknown expr type: {type(expr)}")

    def _assign(self, name: str, expr: ast.Expr, context: EvaluationContext, visiting: set[str]) -> Quantity:
        with visit(variable_key(name), visiting):
            value = self.evaluate_expr(expr, context, visiting)

        if context.set_variable is not None:
            context.set_variable(name, value)
        elif context.cell_key is not None:
            self.registry.define_variable_in_cell(name, value, context.cell_key)
        else:
            self.registry.define_variable(name, value)
        logger.debug("bound %s = %r (cell %s)", name, value.value, context.cell_key)
        return value

    def _resolve_variable(self, name: str, context: EvaluationContext, visiting: set[str]) -> Quantity:
        if context.get_variable is not None:
            override = context.get_variable(name)
            if override is not None:
                return override

        defining_cell = self.registry.get_variable_defining_cell(name)
        if defining_cell is not None and context.get_cell is not None:
            derived = self._rederive(name, defining_cell, context, visiting)
            if derived is not None:
                return derived

        stored = self.registry.resolve_quantity(name)
        if stored is not None:
            return stored

        if is_unit(name):
            return make_quantity(1.0, name)

        raise UndefinedVariableError(name)

    def _rederive(
        self, name: str, defining_cell: str, context: EvaluationContext, visiting: set[str]
    ) -> Quantity | None:
        """Re-run the cell that owns name, if it still assigns it."""
        row, col = parse_cell_key(defining_cell)
        ref = rc_to_ref(row, col)
        raw = context.get_cell(ref) or ""
        parsed = parse(raw)
        if not isinstance(parsed, ast.Assignment) or parsed.name != name:
            logger.debug("cell %s no longer defines %s", ref, name)
            return None
        logger.debug("re-deriving %s from cell %s", name, ref)
        return self._evaluate_cell_text(defining_cell, raw, context, visiting)

    def _resolve_cell(self, ref: str, context: EvaluationContext, visiting: set[str]) -> Quantity:
        address = ref_to_rc(ref)
        if address is None:
            raise BadReferenceError(f"invalid cell reference: {ref}")
        if context.get_cell is None:
            raise BadReferenceError(f"cell references are not available here: {ref}")
        raw = context.get_cell(ref) or ""
        return self._evaluate_cell_text(cell_key(*address), raw, context, visiting)

    def _evaluate_cell_text(
        self, key: str, raw: str, context: EvaluationContext, visiting: set[str]
    ) -> Quantity:
        """Evaluate a cell's text as its own top-level formula."""
        with visit(key, visiting):
            if not raw.strip():
                return zero()
            return self.evaluate(raw, context.model_copy(update={"cell_key": key}), visiting)


_default_evaluator = Evaluator()


def evaluate(raw: str, context: EvaluationContext | None = None) -> Quantity:
    """Evaluate a formula, literal or assignment using the shared registry."""
    return _default_evaluator.evaluate(raw, context)


def evaluate_cell(grid: Grid, raw: str, row: int, col: int) -> float:
    return _default_evaluator.evaluate_cell(grid, raw, row, col)


def evaluate_with_grid(grid: Grid, raw: str) -> float:
    return _default_evaluator.evaluate_with_grid(grid, raw)
