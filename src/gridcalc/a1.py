"""A1-style cell addressing.

Columns use bijective base-26 letters (A=1 ... Z=26, AA=27 ...); rows are
1-based in the label and 0-based everywhere else.
"""

import re
from typing import NamedTuple

_ADDRESS_RE = re.compile(r"^([A-Z]+)([1-9][0-9]*)$")


class Address(NamedTuple):
    row: int
    col: int


def col_to_index(label: str) -> int:
    """Column letters to a 0-based index ("A" -> 0). Returns -1 if not A-Z."""
    result = 0
    for ch in label.upper():
        if not "A" <= ch <= "Z":
            return -1
        result = result * 26 + (ord(ch) - 64)
    return result - 1


def index_to_col(index: int) -> str:
    """0-based column index to letters (1 -> "B", 26 -> "AA")."""
    if index < 0:
        raise ValueError(f"negative column index: {index}")
    label = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(65 + rem) + label
    return label


def ref_to_rc(ref: str) -> Address | None:
    """Parse "B12" into Address(row=11, col=1), or None if malformed."""
    m = _ADDRESS_RE.match(ref.strip().upper())
    if not m:
        return None
    col = col_to_index(m.group(1))
    row = int(m.group(2)) - 1
    if col < 0 or row < 0:
        return None
    return Address(row, col)


def rc_to_ref(row: int, col: int) -> str:
    return f"{index_to_col(col)}{row + 1}"
