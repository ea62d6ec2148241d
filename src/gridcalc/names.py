"""Variable registry: which cell defines each name, plus last known values.

A variable assigned in a grid cell (``L = 5 ft``) is bound to that cell's key
(``"row:col"``) so later readers re-derive it from the cell's current text.
Values are also kept by name for lines evaluated outside any grid.

Example:
    registry = VariableRegistry()
    registry.define_variable_in_cell("L", 5, "0:0")
    registry.get_variable_defining_cell("L")  # "0:0"
    registry.clear_variables_in_cell("0:0")
    registry.has_variable("L")  # False
"""

import logging

from .quantity import Quantity, make_quantity

logger = logging.getLogger(__name__)


def _as_quantity(value: Quantity | float) -> Quantity:
    if isinstance(value, Quantity):
        return value
    return make_quantity(value)


class VariableRegistry:
    """Last-writer-wins store of variable bindings for one session."""

    def __init__(self) -> None:
        self._values: dict[str, Quantity] = {}
        # name -> "row:col" of the cell whose assignment owns it
        self._defining_cells: dict[str, str] = {}

    def define_variable(self, name: str, value: Quantity | float) -> None:
        """Bind a value with no owning cell, replacing any cell binding."""
        self._defining_cells.pop(name, None)
        self._values[name] = _as_quantity(value)

    def define_variable_in_cell(self, name: str, value: Quantity | float, cell_key: str) -> None:
        previous = self._defining_cells.get(name)
        if previous is not None and previous != cell_key:
            logger.debug("variable %s moves from cell %s to %s", name, previous, cell_key)
        self._defining_cells[name] = cell_key
        self._values[name] = _as_quantity(value)

    def resolve_quantity(self, name: str) -> Quantity | None:
        return self._values.get(name)

    def resolve_variable(self, name: str) -> float | None:
        """Stored value of a variable in SI units, or None if unknown."""
        q = self._values.get(name)
        return q.value_si if q is not None else None

    def has_variable(self, name: str) -> bool:
        return name in self._values or name in self._defining_cells

    def get_variable_defining_cell(self, name: str) -> str | None:
        return self._defining_cells.get(name)

    def variables_in_cell(self, cell_key: str) -> list[str]:
        return [name for name, key in self._defining_cells.items() if key == cell_key]

    def clear_variables_in_cell(self, cell_key: str) -> None:
        """Forget every name the given cell defines (call when its text changes)."""
        for name in self.variables_in_cell(cell_key):
            del self._defining_cells[name]
            self._values.pop(name, None)

    def clear_variables(self) -> None:
        self._values.clear()
        self._defining_cells.clear()

    def __contains__(self, name: str) -> bool:
        return self.has_variable(name)

    def __len__(self) -> int:
        return len(self._values.keys() | self._defining_cells.keys())


# Shared registry for callers that do not manage their own
default_registry = VariableRegistry()


def define_variable(name: str, value: Quantity | float) -> None:
    default_registry.define_variable(name, value)


def resolve_variable(name: str) -> float | None:
    return default_registry.resolve_variable(name)


def has_variable(name: str) -> bool:
    return default_registry.has_variable(name)


def clear_variables() -> None:
    default_registry.clear_variables()


def define_variable_in_cell(name: str, value: Quantity | float, cell_key: str) -> None:
    default_registry.define_variable_in_cell(name, value, cell_key)


def get_variable_defining_cell(name: str) -> str | None:
    return default_registry.get_variable_defining_cell(name)


def clear_variables_in_cell(cell_key: str) -> None:
    default_registry.clear_variables_in_cell(cell_key)
