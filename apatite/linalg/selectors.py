"""
Cell selectors for matrix iteration.

A selector names a subset of cell positions. Cells are always produced in
row-major order.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator

from ..core.errors import InvalidArgumentError


class Selector(str, Enum):
    """Named subsets of matrix cells."""

    ALL = "all"  # every cell
    DIAGONAL = "diagonal"  # row == column
    OFF_DIAGONAL = "off_diagonal"  # row != column
    LOWER = "lower"  # row >= column
    STRICT_LOWER = "strict_lower"  # row > column
    UPPER = "upper"  # row <= column
    STRICT_UPPER = "strict_upper"  # row < column

    @classmethod
    def parse(cls, which: "Selector | str") -> "Selector":
        """
        Resolve a selector given as enum member or name.

        Raises:
            InvalidArgumentError: If ``which`` names no selector
        """
        if isinstance(which, cls):
            return which
        try:
            return cls(str(which).lower())
        except ValueError:
            names = ", ".join(s.value for s in cls)
            raise InvalidArgumentError(
                f"expected {which!r} to be one of {names}", argument="selector"
            ) from None


def cells(row_count: int, column_count: int, which: Selector | str = Selector.ALL) -> Iterator[tuple[int, int]]:
    """
    Yield ``(row, column)`` positions selected by ``which``.

    The selector is validated before the first position is produced.
    """
    selector = Selector.parse(which)
    return _cells(row_count, column_count, selector)


def _cells(row_count: int, column_count: int, selector: Selector) -> Iterator[tuple[int, int]]:
    last = column_count - 1
    for i in range(row_count):
        if selector is Selector.ALL:
            columns = range(column_count)
        elif selector is Selector.DIAGONAL:
            if i > last:
                return
            columns = range(i, i + 1)
        elif selector is Selector.OFF_DIAGONAL:
            columns = (j for j in range(column_count) if j != i)
        elif selector is Selector.LOWER:
            columns = range(min(i, last) + 1)
        elif selector is Selector.STRICT_LOWER:
            columns = range(min(i, column_count))
        elif selector is Selector.UPPER:
            columns = range(i, column_count)
        else:
            columns = range(i + 1, column_count)
        for j in columns:
            yield i, j
