"""Plain-text tables with elastic, space-padded columns."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import groupby

PADDING = 2
"""Spaces added to the widest cell of a column."""


def _assign_widths(
    lines: list[list[str]],
    widths: list[list[int]],
    indices: Sequence[int],
    column: int,
) -> None:
    """Fill in *widths* for *column* over the lines at *indices*, then recurse.

    A column block is a run of consecutive lines that all have a cell in the
    column followed by another cell; a line without one ends the block.
    """
    for has_cell, group in groupby(indices, key=lambda i: len(lines[i]) - 1 > column):
        if not has_cell:
            continue
        block = list(group)
        width = max(len(lines[i][column]) for i in block) + PADDING
        for i in block:
            widths[i][column] = width
        _assign_widths(lines, widths, block, column + 1)


def format_table(rows: Iterable[Sequence[object]]) -> str:
    """Lay out *rows* of cells as aligned text, one line per row.

    Every cell but the last in a row is padded to the width of its column
    block plus two spaces; the last cell is written as it is.
    """
    lines = [[str(cell) for cell in row] for row in rows]
    widths = [[0] * max(len(cells) - 1, 0) for cells in lines]
    _assign_widths(lines, widths, range(len(lines)), 0)

    out = []
    for cells, cell_widths in zip(lines, widths):
        parts = [cell.ljust(width) for cell, width in zip(cells[:-1], cell_widths)]
        if cells:
            parts.append(cells[-1])
        out.append("".join(parts) + "\n")
    return "".join(out)