"""Geometric start-cell candidates for each spec."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..core.constants import Bounds
from ..core.models import NumberSpec


def fits_geometrically(bounds: Bounds, spec: NumberSpec, index: int) -> bool:
    row, col = bounds.position(index)
    if spec.across is not None and col + spec.across.length > bounds.cols:
        return False
    if spec.down is not None and row + spec.down.length > bounds.rows:
        return False
    return True


def compute_candidates(bounds: Bounds, specs: Sequence[NumberSpec]) -> Dict[int, List[int]]:
    """Map each spec number to its ascending list of eligible start cells.

    Board state is ignored; this only prunes cells where a word would run off
    the grid.
    """

    return {
        spec.number: [index for index in range(bounds.size) if fits_geometrically(bounds, spec, index)]
        for spec in specs
    }


__all__ = ["compute_candidates", "fits_geometrically"]
