"""Solver board state and single-spec placement."""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from ..core.constants import Bounds, CellKind
from ..core.exceptions import PlacementError
from ..core.models import DirectionSpec, NumberSpec


class SolverState:
    """Board cells plus the start cell chosen for every placed clue number."""

    __slots__ = ("bounds", "kinds", "chars", "chosen")

    def __init__(
        self,
        bounds: Bounds,
        kinds: Optional[List[CellKind]] = None,
        chars: Optional[List[Optional[str]]] = None,
        chosen: Optional[Dict[int, int]] = None,
    ) -> None:
        self.bounds = bounds
        self.kinds: List[CellKind] = kinds if kinds is not None else [CellKind.UNKNOWN] * bounds.size
        self.chars: List[Optional[str]] = chars if chars is not None else [None] * bounds.size
        self.chosen: Dict[int, int] = chosen if chosen is not None else {}

    @classmethod
    def empty(cls, width: int, height: int) -> "SolverState":
        return cls(Bounds(rows=height, cols=width))

    def clone(self) -> "SolverState":
        return SolverState(self.bounds, self.kinds[:], self.chars[:], dict(self.chosen))

    # ------------------------------------------------------------------
    # Cell transitions
    # ------------------------------------------------------------------
    def can_set_block(self, index: int) -> bool:
        return self.kinds[index] is not CellKind.LETTER

    def can_set_letter(self, index: int, char: Optional[str] = None) -> bool:
        if self.kinds[index] is CellKind.BLOCK:
            return False
        if not char:
            return True
        existing = self.chars[index]
        return not existing or existing == char

    def set_block(self, index: int) -> None:
        if not self.can_set_block(index):
            raise PlacementError(f"Cell {self.bounds.position(index)} already holds a letter")
        self.kinds[index] = CellKind.BLOCK
        self.chars[index] = None

    def set_letter(self, index: int, char: Optional[str] = None) -> None:
        if not self.can_set_letter(index, char):
            raise PlacementError(
                f"Cell {self.bounds.position(index)} cannot take letter {char!r}"
            )
        self.kinds[index] = CellKind.LETTER
        if char:
            self.chars[index] = char

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def start_indices(self) -> Set[int]:
        return set(self.chosen.values())


def _check_component(
    state: SolverState, row: int, col: int, dr: int, dc: int, part: DirectionSpec
) -> bool:
    bounds = state.bounds
    end_row = row + dr * part.length
    end_col = col + dc * part.length
    if end_row > bounds.rows or end_col > bounds.cols:
        return False

    before_row, before_col = row - dr, col - dc
    if bounds.contains(before_row, before_col):
        if not state.can_set_block(bounds.index(before_row, before_col)):
            return False
    if bounds.contains(end_row, end_col):
        if not state.can_set_block(bounds.index(end_row, end_col)):
            return False

    for offset in range(part.length):
        index = bounds.index(row + dr * offset, col + dc * offset)
        if not state.can_set_letter(index, part.letter_at(offset)):
            return False
    return True


def check_placement(state: SolverState, spec: NumberSpec, cell_index: int) -> bool:
    """Return whether ``spec`` can start at ``cell_index`` without mutating ``state``."""

    if not state.can_set_letter(cell_index):
        return False

    if spec.across is not None and spec.down is not None:
        first_across = spec.across.letter_at(0)
        first_down = spec.down.letter_at(0)
        if first_across and first_down and first_across != first_down:
            return False

    row, col = state.bounds.position(cell_index)
    for direction, part in spec.components():
        dr, dc = direction.step
        if not _check_component(state, row, col, dr, dc, part):
            return False
    return True


def apply_placement(state: SolverState, spec: NumberSpec, cell_index: int) -> None:
    """Commit ``spec`` at ``cell_index``; callers must have run :func:`check_placement`."""

    bounds = state.bounds
    state.set_letter(cell_index)
    row, col = bounds.position(cell_index)

    for direction, part in spec.components():
        dr, dc = direction.step
        if bounds.contains(row - dr, col - dc):
            state.set_block(bounds.index(row - dr, col - dc))
        end_row, end_col = row + dr * part.length, col + dc * part.length
        if bounds.contains(end_row, end_col):
            state.set_block(bounds.index(end_row, end_col))
        for offset in range(part.length):
            state.set_letter(
                bounds.index(row + dr * offset, col + dc * offset), part.letter_at(offset)
            )


__all__ = ["SolverState", "apply_placement", "check_placement"]
