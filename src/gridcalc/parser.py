"""Tokenizer and recursive descent parser for formula text.

Grammar (lowest to highest precedence):
    line        = "=" expr | IDENT "=" expr | expr
    expr        = add_expr
    add_expr    = mul_expr (("+" | "-") mul_expr)*
    mul_expr    = unary (("*" | "/") unary)*
    unary       = ("-" | "+") unary | power
    power       = primary ("^" unary)?          # right-associative
    primary     = NUMBER [UNIT] | CELL | RANGE | UNIT | "(" expr ")"
                | IDENT ["(" [expr ("," expr)*] ")"]

Input that does not parse is kept as text rather than raising.
"""

import logging
import re
from dataclasses import dataclass

from . import ast
from .normalize import normalize_for_parser
from .units import is_unit

logger = logging.getLogger(__name__)


@dataclass
class Token:
    type: str
    value: str


class ParseError(SyntaxError):
    def __init__(self, msg: str, token: Token | None = None):
        super().__init__(msg)
        self.token = token


class Lexer:
    """Regex lexer; patterns are tried in order, first match wins."""

    TOKEN_PATTERNS = [
        (re.compile(r"\s+"), "WS"),
        (re.compile(r"\d+(?:\.\d*)?|\.\d+"), "NUMBER"),
        # Ranges before single cells: A1:B10 starts with a valid cell ref
        (re.compile(r"[A-Za-z]+\d+:[A-Za-z]+\d+(?![A-Za-z0-9_'])"), "RANGE"),
        (re.compile(r"[A-Za-z]+\d+(?![A-Za-z0-9_'])"), "CELL"),
        (re.compile(r"[A-Za-z][A-Za-z0-9_']*"), "IDENT"),
        (re.compile(r"[-+*/^=]"), "OP"),
        (re.compile(r"\("), "LPAREN"),
        (re.compile(r"\)"), "RPAREN"),
        (re.compile(r","), "COMMA"),
    ]

    def __init__(self, source: str):
        self.source = normalize_for_parser(source)
        self.pos = 0
        self.tokens: list[Token] = []
        self._tokenise()

    def _tokenise(self) -> None:
        while self.pos < len(self.source):
            for pattern, ttype in self.TOKEN_PATTERNS:
                m = pattern.match(self.source, self.pos)
                if m:
                    value = m.group(0)
                    if ttype != "WS":
                        if ttype == "IDENT" and is_unit(value):
                            ttype = "UNIT"
                        self.tokens.append(Token(ttype, value))
                    self.pos += len(value)
                    break
            else:
                raise ParseError(f"unexpected char: {self.source[self.pos]!r}")

        self.tokens.append(Token("EOF", ""))


def tokenize(source: str) -> list[Token]:
    """Tokens for source, without the trailing EOF marker."""
    return Lexer(source).tokens[:-1]


class Parser:
    """Recursive descent parser over a token list."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[idx]

    def at(self, *types: str) -> bool:
        return self.peek().type in types

    def at_op(self, *ops: str) -> bool:
        tok = self.peek()
        return tok.type == "OP" and tok.value in ops

    def consume(self, ttype: str) -> Token:
        tok = self.peek()
        if tok.type != ttype:
            raise ParseError(f"expected {ttype}, got {tok.type}", tok)
        self.pos += 1
        return tok

    def match_op(self, *ops: str) -> Token | None:
        if self.at_op(*ops):
            tok = self.peek()
            self.pos += 1
            return tok
        return None

    def parse_line(self) -> ast.Assignment | ast.Expression:
        """Parse a whole cell or calculation line."""
        if self.match_op("="):
            # Legacy grid dialect: "=A1+B1"
            return ast.Expression(expr=self.parse_complete())

        if self.at("IDENT") and self.peek(1).value == "=" and self.peek(2).type != "EOF":
            name = self.consume("IDENT").value
            self.consume("OP")
            return ast.Assignment(name=name, expr=self.parse_complete())

        return ast.Expression(expr=self.parse_complete())

    def parse_complete(self) -> ast.Expr:
        expr = self.parse_expr()
        tok = self.peek()
        if tok.type != "EOF":
            raise ParseError(f"unexpected token: {tok.type} {tok.value!r}", tok)
        return expr

    def parse_expr(self) -> ast.Expr:
        return self.parse_add()

    def parse_add(self) -> ast.Expr:
        left = self.parse_mul()
        while tok := self.match_op("+", "-"):
            right = self.parse_mul()
            left = ast.Binary(op=tok.value, left=left, right=right)
        return left

    def parse_mul(self) -> ast.Expr:
        left = self.parse_unary()
        while tok := self.match_op("*", "/"):
            right = self.parse_unary()
            left = ast.Binary(op=tok.value, left=left, right=right)
        return left

    def parse_unary(self) -> ast.Expr:
        if tok := self.match_op("-", "+"):
            return ast.Unary(op=tok.value, operand=self.parse_unary())
        return self.parse_power()

    def parse_power(self) -> ast.Expr:
        base = self.parse_primary()
        if self.match_op("^"):
            return ast.Binary(op="^", left=base, right=self.parse_unary())
        return base

    def parse_primary(self) -> ast.Expr:
        tok = self.peek()

        if tok.type == "NUMBER":
            value = float(self.consume("NUMBER").value)
            if self.at("UNIT"):
                return ast.Number(value=value, unit=self.consume("UNIT").value)
            return ast.Number(value=value)
        if tok.type == "CELL":
            return ast.Cell(ref=self.consume("CELL").value.upper())
        if tok.type == "RANGE":
            start, end = self.consume("RANGE").value.upper().split(":")
            return ast.Range(start=start, end=end)
        if tok.type == "UNIT":
            # A bare unit symbol reads as one of that unit
            return ast.Variable(name=self.consume("UNIT").value)
        if tok.type == "LPAREN":
            self.consume("LPAREN")
            expr = self.parse_expr()
            self.consume("RPAREN")
            return expr
        if tok.type == "IDENT":
            name = self.consume("IDENT").value
            if self.at("LPAREN"):
                return ast.Call(func=name, args=self._parse_args())
            return ast.Variable(name=name)
        if tok.type == "EOF":
            raise ParseError("unexpected end of expression", tok)

        raise ParseError(f"unexpected token: {tok.type} {tok.value!r}", tok)

    def _parse_args(self) -> list[ast.Expr]:
        self.consume("LPAREN")
        args = []
        if not self.at("RPAREN"):
            args.append(self.parse_expr())
            while self.at("COMMA"):
                self.consume("COMMA")
                args.append(self.parse_expr())
        self.consume("RPAREN")
        return args


def parse(source: str) -> ast.Assignment | ast.Expression | ast.Text:
    """Parse a cell or line; anything that fails to parse comes back as Text."""
    try:
        return Parser(Lexer(source).tokens).parse_line()
    except ParseError as e:
        logger.debug("keeping %r as text: %s", source, e)
        return ast.Text(raw=source)


def classify_input(source: str) -> str:
    """'assignment', 'expression' or 'text'."""
    return parse(source).kind


_FORMULA_HINT = re.compile(r"[-+*/^]|^[A-Za-z][A-Za-z0-9_']*\s*=")


def is_formula(source: str) -> bool:
    """Whether source looks like a formula rather than plain text or a number."""
    normalized = normalize_for_parser(source)
    return normalized.startswith("=") or bool(_FORMULA_HINT.search(normalized))
