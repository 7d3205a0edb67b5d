"""Pretty-print helpers for reconstructed grids."""

from __future__ import annotations

import sys
from typing import Sequence

from ..core.constants import BLOCK, NUMBERED
from ..core.models import GridConstructorResult


def format_grid(grid: Sequence[Sequence[str]]) -> str:
    """Render a boxed grid with clue numbers in the numbered cells."""

    if not grid:
        return ""
    width = len(grid[0])
    border = "+" + "---+" * width
    lines = [border]
    current_number = 1
    for row in grid:
        rendered = "|"
        for symbol in row:
            if symbol == BLOCK:
                rendered += "###|"
            elif symbol == NUMBERED:
                rendered += f"{current_number:<2} |"
                current_number += 1
            else:
                rendered += "   |"
        lines.append(rendered)
        lines.append(border)
    return "\n".join(lines)


def print_result(result: GridConstructorResult, *, stream=None) -> None:
    """Print the grid (when any) and a short outcome summary."""

    stream = stream or sys.stdout
    if result.grid:
        print(format_grid(result.grid), file=stream)
        total = len(result.grid) * len(result.grid[0])
        blocks = sum(row.count(BLOCK) for row in result.grid)
        numbered = sum(row.count(NUMBERED) for row in result.grid)
        print(file=stream)
        print(f"  Size:          {len(result.grid)} x {len(result.grid[0])} ({total} cells)", file=stream)
        print(f"  Blocks:        {blocks} ({blocks / total * 100:.0f}%)", file=stream)
        print(f"  Numbered:      {numbered}", file=stream)
    print(f"  Explored:      {result.explored_states:,} states", file=stream)
    if result.message:
        print(f"  {result.message}", file=stream)
