"""Independent re-validation of candidate grids against the input specs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ..core.constants import Direction
from ..core.exceptions import ValidationError
from ..core.models import ClueMetadata, NumberSpec
from ..utils.logger import get_logger
from .clue_metadata import extract_clue_metadata, measure_run_length


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class GridValidator:
    """Re-derives clue numbering from a grid and compares it with the specs.

    The search's ordering rule alone does not guarantee that scanning the
    finished grid reproduces the input numbering, so every complete
    assignment goes through this check before it is accepted.
    """

    def __init__(self, specs: Sequence[NumberSpec]) -> None:
        self.specs = list(specs)
        self.expected_across = {s.number: s.across for s in self.specs if s.across is not None}
        self.expected_down = {s.number: s.down for s in self.specs if s.down is not None}

    def validate(self, grid: Sequence[Sequence[str]]) -> ValidationResult:
        try:
            positions = self._positions(extract_clue_metadata(grid))
            self._check_clue_counts(positions)
            self._check_lengths(grid, positions)
        except ValidationError as exc:
            LOGGER.debug("Candidate grid rejected: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def is_valid(self, grid: Sequence[Sequence[str]]) -> bool:
        return self.validate(grid).ok

    @staticmethod
    def _positions(metadata: List[ClueMetadata]) -> Dict[Direction, Dict[int, Tuple[int, int]]]:
        positions: Dict[Direction, Dict[int, Tuple[int, int]]] = {
            Direction.ACROSS: {},
            Direction.DOWN: {},
        }
        for clue in metadata:
            positions[clue.direction][clue.number] = (clue.row, clue.col)
        return positions

    def _check_clue_counts(self, positions: Dict[Direction, Dict[int, Tuple[int, int]]]) -> None:
        across = len(positions[Direction.ACROSS])
        down = len(positions[Direction.DOWN])
        if across != len(self.expected_across):
            raise ValidationError(
                f"Grid has {across} across clues, expected {len(self.expected_across)}"
            )
        if down != len(self.expected_down):
            raise ValidationError(
                f"Grid has {down} down clues, expected {len(self.expected_down)}"
            )

    def _check_lengths(
        self,
        grid: Sequence[Sequence[str]],
        positions: Dict[Direction, Dict[int, Tuple[int, int]]],
    ) -> None:
        for spec in self.specs:
            for direction, part in spec.components():
                position = positions[direction].get(spec.number)
                if position is None:
                    raise ValidationError(f"Clue {spec.number} {direction.value} missing from grid")
                length = measure_run_length(grid, position[0], position[1], direction)
                if length != part.length:
                    raise ValidationError(
                        f"Clue {spec.number} {direction.value} has {length} cells, expected {part.length}"
                    )


__all__ = ["GridValidator", "ValidationResult"]
