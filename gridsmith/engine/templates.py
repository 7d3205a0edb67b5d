"""Fallback matching against previously known grids."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.constants import GRID_SYMBOLS
from ..core.exceptions import TemplateGridError
from ..core.models import CellGrid, GridConstructorInput, TemplateGrid
from ..utils.logger import get_logger
from .signatures import get_answer_key_length_signature, get_grid_length_signature


LOGGER = get_logger(__name__)


def parse_template_grid(template: TemplateGrid) -> CellGrid:
    """Parse a grid string or copy a cell grid, rejecting ragged or unknown cells."""

    if isinstance(template, str):
        grid = [row.strip().split(" ") for row in template.strip().split("\n")]
    else:
        grid = [list(row) for row in template]

    if not grid or not grid[0]:
        raise TemplateGridError("Template grid is empty")
    width = len(grid[0])
    for index, row in enumerate(grid):
        if len(row) != width:
            raise TemplateGridError(f"Template row {index} has {len(row)} cells, expected {width}")
        unknown = set(row) - GRID_SYMBOLS
        if unknown:
            raise TemplateGridError(f"Template row {index} has unknown cells {sorted(unknown)}")
    return grid


def find_template_match(
    data: GridConstructorInput,
    template_grids: Sequence[TemplateGrid],
    expected_signature: Optional[str] = None,
) -> Optional[CellGrid]:
    """Return the single template matching the input's size and signature.

    Zero matches and several matches both return ``None``; an ambiguous match
    is never resolved by picking one.
    """

    if not template_grids:
        return None

    signature = expected_signature or get_answer_key_length_signature(data)
    matches: List[CellGrid] = []
    for position, template in enumerate(template_grids):
        try:
            grid = parse_template_grid(template)
        except TemplateGridError as exc:
            LOGGER.warning("Skipping template %s: %s", position, exc)
            continue
        if len(grid) != data.height or len(grid[0]) != data.width:
            continue
        if get_grid_length_signature(grid) == signature:
            matches.append(grid)

    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        LOGGER.warning("%s templates share the answer key signature; ignoring all", len(matches))
    return None


def build_trusted_templates(records: Iterable[Tuple[str, GridConstructorInput]]) -> List[str]:
    """Select stored grids that are safe to use as fallback templates.

    A grid is trusted when its own signature equals its answer key's
    signature, and no other distinct trusted grid shares that signature.
    """

    return trusted_templates_by_signature(
        (grid_string, get_answer_key_length_signature(data)) for grid_string, data in records
    )


def trusted_templates_by_signature(records: Iterable[Tuple[str, str]]) -> List[str]:
    """Same as :func:`build_trusted_templates` for precomputed answer signatures."""

    buckets: Dict[str, List[str]] = {}
    for grid_string, answer_signature in records:
        try:
            grid = parse_template_grid(grid_string)
        except TemplateGridError as exc:
            LOGGER.warning("Skipping stored grid: %s", exc)
            continue
        if answer_signature != get_grid_length_signature(grid):
            continue
        bucket = buckets.setdefault(answer_signature, [])
        if grid_string not in bucket:
            bucket.append(grid_string)

    return [bucket[0] for bucket in buckets.values() if len(bucket) == 1]


__all__ = [
    "build_trusted_templates",
    "find_template_match",
    "parse_template_grid",
    "trusted_templates_by_signature",
]
