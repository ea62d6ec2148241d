"""AST nodes and parse results for formula text."""

from typing import Annotated
from typing import Literal as TypingLiteral

from pydantic import BaseModel, Field


# Expression nodes, discriminated on `type`
class Number(BaseModel):
    type: TypingLiteral["number"] = "number"
    value: float
    unit: str | None = None


class Variable(BaseModel):
    """Named variable reference (e.g. 'L' or 'Area')."""

    type: TypingLiteral["variable"] = "variable"
    name: str


class Cell(BaseModel):
    """Cell reference in A1 notation."""

    type: TypingLiteral["cell"] = "cell"
    ref: str


class Range(BaseModel):
    """Rectangular span like A1:B10; only meaningful as a function argument."""

    type: TypingLiteral["range"] = "range"
    start: str
    end: str


class Binary(BaseModel):
    type: TypingLiteral["binary"] = "binary"
    op: str  # +, -, *, /, ^
    left: "Expr"
    right: "Expr"


class Unary(BaseModel):
    type: TypingLiteral["unary"] = "unary"
    op: str  # -, +
    operand: "Expr"


class Call(BaseModel):
    """Function call (e.g. sqrt(A1), max(a, b))."""

    type: TypingLiteral["call"] = "call"
    func: str
    args: list["Expr"] = []


class Assign(BaseModel):
    type: TypingLiteral["assign"] = "assign"
    name: str
    expr: "Expr"


Expr = Annotated[
    Number | Variable | Cell | Range | Binary | Unary | Call | Assign,
    Field(discriminator="type"),
]


# Parse results
class Assignment(BaseModel):
    """`name = expr` line: evaluates expr and binds name."""

    kind: TypingLiteral["assignment"] = "assignment"
    name: str
    expr: Expr


class Expression(BaseModel):
    kind: TypingLiteral["expression"] = "expression"
    expr: Expr


class Text(BaseModel):
    """Input that did not parse; shown verbatim."""

    kind: TypingLiteral["text"] = "text"
    raw: str


ParseResult = Annotated[Assignment | Expression | Text, Field(discriminator="kind")]


def expr_to_string(expr: Expr) -> str:
    """Render an expression back to text, fully parenthesized."""
    match expr:
        case Number(value=value, unit=unit):
            text = str(int(value)) if value.is_integer() else repr(value)
            return f"{text} {unit}" if unit else text
        case Variable(name=name):
            return name
        case Cell(ref=ref):
            return ref
        case Range(start=start, end=end):
            return f"{start}:{end}"
        case Binary(op=op, left=left, right=right):
            return f"({expr_to_string(left)} {op} {expr_to_string(right)})"
        case Unary(op=op, operand=operand):
            return f"{op}{expr_to_string(operand)}"
        case Call(func=func, args=args):
            return f"{func}({', '.join(expr_to_string(a) for a in args)})"
        case Assign(name=name, expr=inner):
            return f"{name} = {expr_to_string(inner)}"
        case _:
            raise TypeError(f"unknown expr type: {type(expr)}")


# Resolve the recursive "Expr" references
Binary.model_rebuild()
Unary.model_rebuild()
Call.model_rebuild()
Assign.model_rebuild()
Assignment.model_rebuild()
Expression.model_rebuild()
