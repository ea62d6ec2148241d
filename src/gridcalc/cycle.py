"""Cycle guard for recursive cell and variable evaluation.

One ``visiting`` set is created per top-level evaluation and passed down every
recursive call. A key present in the set is still being evaluated, so meeting
it again means the reference chain loops back on itself.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from .errors import CycleError

logger = logging.getLogger(__name__)


def cell_key(row: int, col: int) -> str:
    return f"{row}:{col}"


def variable_key(name: str) -> str:
    return f"var:{name}"


def parse_cell_key(key: str) -> tuple[int, int]:
    row, col = key.split(":")
    return int(row), int(col)


@contextmanager
def visit(key: str, visiting: set[str]) -> Iterator[None]:
    """Mark key as in progress for the duration of the block."""
    if key in visiting:
        logger.info("cycle detected at %s", key)
        raise CycleError(key)
    visiting.add(key)
    try:
        yield
    finally:
        visiting.discard(key)
