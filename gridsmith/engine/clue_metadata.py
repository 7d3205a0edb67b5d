"""Clue numbering over finished ``N``/``W``/``B`` grids.

Numbering follows the usual convention: scanning rows top to bottom and
columns left to right, every ``N`` cell takes the next number. A numbered cell
starts an across word when the cell to its right holds a letter and the cell
to its left does not; down words are detected the same way vertically.
"""

from __future__ import annotations

from typing import List, Sequence

from ..core.constants import BLOCK, NUMBERED, Direction
from ..core.models import CellGrid, ClueLengthSpec, ClueMetadata


def _is_letter(grid: Sequence[Sequence[str]], row: int, col: int) -> bool:
    if row < 0 or row >= len(grid) or col < 0 or col >= len(grid[0]):
        return False
    return grid[row][col] != BLOCK


def extract_clue_metadata(grid: Sequence[Sequence[str]]) -> List[ClueMetadata]:
    """Return the ``(number, direction, row, col)`` entries of ``grid``."""

    clues: List[ClueMetadata] = []
    if not grid:
        return clues

    current_number = 1
    for r, row in enumerate(grid):
        for c, symbol in enumerate(row):
            if symbol != NUMBERED:
                continue
            if _is_letter(grid, r, c + 1) and not _is_letter(grid, r, c - 1):
                clues.append(ClueMetadata(current_number, Direction.ACROSS, r, c))
            if _is_letter(grid, r + 1, c) and not _is_letter(grid, r - 1, c):
                clues.append(ClueMetadata(current_number, Direction.DOWN, r, c))
            current_number += 1
    return clues


def measure_run_length(
    grid: Sequence[Sequence[str]], row: int, col: int, direction: Direction
) -> int:
    """Count letter cells from ``(row, col)`` until a block or the grid edge."""

    dr, dc = direction.step
    length = 0
    r, c = row, col
    while r < len(grid) and c < len(grid[0]) and grid[r][c] != BLOCK:
        length += 1
        r += dr
        c += dc
    return length


def grid_clue_lengths(grid: Sequence[Sequence[str]]) -> List[ClueLengthSpec]:
    return [
        ClueLengthSpec(
            number=clue.number,
            direction=clue.direction,
            length=measure_run_length(grid, clue.row, clue.col, clue.direction),
        )
        for clue in extract_clue_metadata(grid)
    ]


def parse_grid_string(grid_string: str) -> CellGrid:
    return [row.strip().split(" ") for row in grid_string.split("\n")]


def to_grid_string(grid: Sequence[Sequence[str]]) -> str:
    return "\n".join(" ".join(row) for row in grid)


__all__ = [
    "extract_clue_metadata",
    "grid_clue_lengths",
    "measure_run_length",
    "parse_grid_string",
    "to_grid_string",
]
