"""Shared constants and enumerations for grid reconstruction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class CellKind(str, Enum):
    """Solver-side state of a single board cell."""

    UNKNOWN = "UNKNOWN"
    BLOCK = "BLOCK"
    LETTER = "LETTER"


class Direction(str, Enum):
    """Word directions supported by the grid."""

    ACROSS = "across"
    DOWN = "down"

    @property
    def code(self) -> str:
        return "a" if self is Direction.ACROSS else "d"

    @property
    def step(self) -> Tuple[int, int]:
        return (0, 1) if self is Direction.ACROSS else (1, 0)


class StopReason(str, Enum):
    """Why a search ended without a solution."""

    EXHAUSTED = "exhausted"
    MAX_STATES = "max_states"
    TIME_LIMIT = "time_limit"


# Wire symbols of the grid text format.
NUMBERED = "N"
WHITE = "W"
BLOCK = "B"
GRID_SYMBOLS = frozenset({NUMBERED, WHITE, BLOCK})

DEFAULT_MAX_STATES = 500_000
DEFAULT_MAX_MILLIS = 4_000
TIME_CHECK_INTERVAL = 100

SIGNATURE_SEPARATOR = "|"
TEMPLATE_MATCH_MESSAGE = "Solved via template signature match"
CP_SAT_MESSAGE = "Solved via CP-SAT after the search budget ran out"
DEFAULT_CP_SAT_SECONDS = 10.0


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper with row-major cell indexing."""

    rows: int
    cols: int

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def position(self, index: int) -> Tuple[int, int]:
        return divmod(index, self.cols)
