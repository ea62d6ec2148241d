"""Evaluation errors.

Each error carries a short spreadsheet-style marker that a grid can render in
place of a value.
"""


class EvaluationError(Exception):
    marker = "#VALUE!"


class CycleError(EvaluationError):
    """A cell or variable was re-entered while still being evaluated."""

    marker = "#CYCLE!"

    def __init__(self, key: str | None = None):
        super().__init__("#CYCLE!")
        self.key = key


class IncompatibleUnitsError(EvaluationError):
    marker = "#UNITS!"


class DivisionByZeroError(EvaluationError, ZeroDivisionError):
    marker = "#DIV/0!"


class UndefinedVariableError(EvaluationError):
    marker = "#NAME?"

    def __init__(self, name: str):
        super().__init__(f"undefined variable: {name}")
        self.name = name


class UnknownFunctionError(EvaluationError):
    marker = "#NAME?"

    def __init__(self, name: str):
        super().__init__(f"unknown function: {name}")
        self.name = name


class BadReferenceError(EvaluationError):
    marker = "#REF!"


class RangeEvaluationError(EvaluationError):
    pass


class TextEvaluationError(EvaluationError):
    pass
