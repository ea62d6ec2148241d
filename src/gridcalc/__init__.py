"""gridcalc: unit-aware formulas for spreadsheet grids and calculation lines.

Pipeline: normalize text -> tokenize -> parse -> evaluate to a dimension-checked
quantity, with cell references and named variables resolved on demand.

Example:
    from gridcalc import evaluate, evaluate_cell

    evaluate("2 ft * 3 ft").dims  # Dims(L=2, ...)
    grid = [["L = 5", "=L + 1", "=A1 * 2"]]
    evaluate_cell(grid, grid[0][2], 0, 2)  # 10.0
"""

__version__ = "0.1.0"

from .a1 import Address, col_to_index, index_to_col, rc_to_ref, ref_to_rc
from .ast import (
    Assign,
    Assignment,
    Binary,
    Call,
    Cell,
    Expr,
    Expression,
    Number,
    ParseResult,
    Range,
    Text,
    Unary,
    Variable,
    expr_to_string,
)
from .config import ConfigError, UnitPrefs, load_prefs, prefs_for_system
from .cycle import visit
from .errors import (
    BadReferenceError,
    CycleError,
    DivisionByZeroError,
    EvaluationError,
    IncompatibleUnitsError,
    RangeEvaluationError,
    TextEvaluationError,
    UndefinedVariableError,
    UnknownFunctionError,
)
from .evaluator import EvaluationContext, Evaluator, evaluate, evaluate_cell, evaluate_with_grid
from .format import DisplayQuantity, auto_display, display_as, format_latex, format_quantity, format_text
from .names import (
    VariableRegistry,
    clear_variables,
    clear_variables_in_cell,
    default_registry,
    define_variable,
    define_variable_in_cell,
    get_variable_defining_cell,
    has_variable,
    resolve_variable,
)
from .normalize import normalize_for_parser
from .parser import Lexer, ParseError, Parser, Token, classify_input, is_formula, parse, tokenize
from .quantity import Quantity, make_quantity
from .units import Dims, UnitError, convert, is_unit

__all__ = [
    # Parse
    "parse",
    "tokenize",
    "classify_input",
    "is_formula",
    "normalize_for_parser",
    "Lexer",
    "Parser",
    "Token",
    "ParseError",
    # AST
    "Expr",
    "Number",
    "Variable",
    "Cell",
    "Range",
    "Binary",
    "Unary",
    "Call",
    "Assign",
    "Assignment",
    "Expression",
    "Text",
    "ParseResult",
    "expr_to_string",
    # Evaluate
    "evaluate",
    "evaluate_cell",
    "evaluate_with_grid",
    "Evaluator",
    "EvaluationContext",
    "visit",
    # Errors
    "EvaluationError",
    "CycleError",
    "IncompatibleUnitsError",
    "DivisionByZeroError",
    "UndefinedVariableError",
    "UnknownFunctionError",
    "BadReferenceError",
    "RangeEvaluationError",
    "TextEvaluationError",
    # Units
    "Dims",
    "Quantity",
    "UnitError",
    "make_quantity",
    "convert",
    "is_unit",
    # Names
    "VariableRegistry",
    "default_registry",
    "define_variable",
    "resolve_variable",
    "has_variable",
    "clear_variables",
    "define_variable_in_cell",
    "get_variable_defining_cell",
    "clear_variables_in_cell",
    # Addresses
    "Address",
    "col_to_index",
    "index_to_col",
    "ref_to_rc",
    "rc_to_ref",
    # Display and config
    "DisplayQuantity",
    "format_quantity",
    "display_as",
    "auto_display",
    "format_text",
    "format_latex",
    "UnitPrefs",
    "ConfigError",
    "load_prefs",
    "prefs_for_system",
]
