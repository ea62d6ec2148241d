"""Canonicalize editor text so tokenizing is stable across typing and paste."""

import re

from .units import UNITS

_UNICODE_SPACES = re.compile("[\u00a0\u1680\u2000-\u200a\u202f\u205f\u3000]")
_ZERO_WIDTH = re.compile("[\u200b-\u200d\ufeff]")

# Longest symbols first so "mm" wins over "m" and "kPa" over "Pa".
UNIT_ALTERNATION = "|".join(sorted(UNITS, key=len, reverse=True))
_NUM_UNIT = re.compile(rf"(?<![A-Za-z0-9_'])(\d[\d.,]*)\s*({UNIT_ALTERNATION})\b")

_MULTIPLY = re.compile(r"\\cdot|\\times|\u00b7|\u00d7")
_DIVIDE = re.compile(r"\\div|\u00f7")
_EQUALS = re.compile(r"\s*=\s*")


def normalize_for_parser(raw: str) -> str:
    if not raw:
        return ""
    s = _ZERO_WIDTH.sub("", raw)
    s = _UNICODE_SPACES.sub(" ", s)
    s = re.sub(r"\s+", " ", s)

    s = _NUM_UNIT.sub(r"\1 \2", s)

    s = _MULTIPLY.sub("*", s)
    s = _DIVIDE.sub("/", s)
    s = s.replace("\u2212", "-")

    s = _EQUALS.sub(" = ", s)
    return s.strip()
