"""Render a solver board as an ``N``/``W``/``B`` grid."""

from __future__ import annotations

from typing import AbstractSet, List

from ..core.constants import BLOCK, NUMBERED, WHITE, CellKind
from ..core.models import CellGrid
from .board import SolverState


def build_grid(state: SolverState, start_indices: AbstractSet[int]) -> CellGrid:
    """Unknown and blocked cells become ``B``; chosen start cells become ``N``."""

    bounds = state.bounds
    grid: CellGrid = []
    for r in range(bounds.rows):
        row: List[str] = []
        for c in range(bounds.cols):
            index = bounds.index(r, c)
            if state.kinds[index] is not CellKind.LETTER:
                row.append(BLOCK)
            elif index in start_indices:
                row.append(NUMBERED)
            else:
                row.append(WHITE)
        grid.append(row)
    return grid


def build_grid_from_state(state: SolverState) -> CellGrid:
    return build_grid(state, state.start_indices())


__all__ = ["build_grid", "build_grid_from_state"]
