"""Consistency checks between a stored grid and its answer key."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.constants import BLOCK, Direction
from ..io.answer_key import rot13
from .clue_metadata import extract_clue_metadata

BLOCKED_CELL = "blocked_cell"
LENGTH_MISMATCH = "length_mismatch"
MISSING_CLUE = "missing_clue"

ANSWER_SEPARATOR_RE = re.compile(r"[\s-]")


@dataclass
class IntegrityError:
    number: int
    direction: Direction
    error_type: str
    expected_length: int
    actual_length: int
    message: str
    cells: List[Tuple[int, int]] = field(default_factory=list)


@dataclass
class IntegrityReport:
    is_valid: bool
    errors: List[IntegrityError]
    total_clues: int
    valid_clues: int

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "totalClues": self.total_clues,
            "validClues": self.valid_clues,
            "errors": [
                {
                    "clueNumber": error.number,
                    "direction": error.direction.value,
                    "errorType": error.error_type,
                    "expectedLength": error.expected_length,
                    "actualLength": error.actual_length,
                    "message": error.message,
                    "cells": [list(cell) for cell in error.cells],
                }
                for error in self.errors
            ],
        }


def _find_answer(answers: Mapping[str, Any], direction: Direction, number: int) -> Optional[str]:
    for entry in answers.get(direction.value) or []:
        if entry.get("number") == number:
            return str(entry.get("answer") or "")
    return None


def check_grid_integrity(
    grid: Sequence[Sequence[str]],
    answers: Mapping[str, Any],
    encoded: bool = False,
) -> IntegrityReport:
    """Compare each numbered run in ``grid`` with the matching answer's length.

    ``answers`` holds ``across``/``down`` lists of ``{"number", "answer"}``
    entries; set ``encoded`` when the answers are stored ROT13-obfuscated.
    """

    if not grid or not grid[0]:
        empty = IntegrityError(0, Direction.ACROSS, BLOCKED_CELL, 0, 0, "Grid is empty")
        return IntegrityReport(is_valid=False, errors=[empty], total_clues=0, valid_clues=0)

    metadata = extract_clue_metadata(grid)
    errors: List[IntegrityError] = []
    for clue in metadata:
        dr, dc = clue.direction.step
        cells: List[Tuple[int, int]] = []
        r, c = clue.row, clue.col
        while r < len(grid) and c < len(grid[0]) and grid[r][c] != BLOCK:
            cells.append((r, c))
            r += dr
            c += dc
        actual_length = len(cells)

        answer = _find_answer(answers, clue.direction, clue.number)
        if answer is None:
            errors.append(
                IntegrityError(
                    clue.number,
                    clue.direction,
                    MISSING_CLUE,
                    0,
                    actual_length,
                    f"Clue {clue.number} {clue.direction.value} not found in answers",
                    cells,
                )
            )
            continue

        decoded = (rot13(answer) if encoded else answer).upper()
        expected_length = len(ANSWER_SEPARATOR_RE.sub("", decoded))

        if actual_length == 0:
            errors.append(
                IntegrityError(
                    clue.number,
                    clue.direction,
                    BLOCKED_CELL,
                    expected_length,
                    0,
                    f"Clue {clue.number} {clue.direction.value}: Answer starts at a blocked cell",
                    cells,
                )
            )
            continue

        if actual_length != expected_length:
            errors.append(
                IntegrityError(
                    clue.number,
                    clue.direction,
                    LENGTH_MISMATCH,
                    expected_length,
                    actual_length,
                    f"Clue {clue.number} {clue.direction.value}: Grid has {actual_length} cells "
                    f'but answer "{decoded}" has {expected_length} letters',
                    cells,
                )
            )

    structural = sum(1 for error in errors if error.error_type != MISSING_CLUE)
    return IntegrityReport(
        is_valid=not errors,
        errors=errors,
        total_clues=len(metadata),
        valid_clues=len(metadata) - structural,
    )


__all__ = ["IntegrityError", "IntegrityReport", "check_grid_integrity"]
