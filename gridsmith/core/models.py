"""Data models supporting grid reconstruction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .constants import (DEFAULT_CP_SAT_SECONDS, DEFAULT_MAX_MILLIS, DEFAULT_MAX_STATES,
                        Direction, StopReason)

CellGrid = List[List[str]]
TemplateGrid = Union[str, Sequence[Sequence[str]]]


@dataclass
class AnswerEntry:
    """One numbered entry of an answer key."""

    number: int
    answer: Optional[str] = None
    clue: Optional[str] = None
    length: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AnswerEntry":
        length = payload.get("length")
        return cls(
            number=int(payload["number"]),
            answer=payload.get("answer"),
            clue=payload.get("clue"),
            length=int(length) if length is not None else None,
        )


@dataclass
class GridConstructorInput:
    """Grid dimensions plus the across and down entries to place."""

    width: int
    height: int
    across: List[AnswerEntry] = field(default_factory=list)
    down: List[AnswerEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GridConstructorInput":
        return cls(
            width=int(payload["width"]),
            height=int(payload["height"]),
            across=[AnswerEntry.from_dict(item) for item in payload.get("across") or []],
            down=[AnswerEntry.from_dict(item) for item in payload.get("down") or []],
        )


@dataclass
class GridConstructorOptions:
    """Search budgets and fallback configuration."""

    max_states: int = DEFAULT_MAX_STATES
    max_millis: int = DEFAULT_MAX_MILLIS
    template_grids: List[TemplateGrid] = field(default_factory=list)
    include_diagnostics_in_message: bool = False
    cp_sat_fallback: bool = False
    cp_sat_seconds: float = DEFAULT_CP_SAT_SECONDS


@dataclass(frozen=True)
class DirectionSpec:
    """Length and optional fixed letters for one direction of a clue number."""

    length: int
    letters: Optional[str] = None

    def letter_at(self, offset: int) -> Optional[str]:
        if self.letters and offset < len(self.letters):
            return self.letters[offset]
        return None


@dataclass
class NumberSpec:
    """Constraints for one clue number: an across word, a down word, or both."""

    number: int
    across: Optional[DirectionSpec] = None
    down: Optional[DirectionSpec] = None

    def components(self) -> List[Tuple[Direction, DirectionSpec]]:
        parts: List[Tuple[Direction, DirectionSpec]] = []
        if self.across is not None:
            parts.append((Direction.ACROSS, self.across))
        if self.down is not None:
            parts.append((Direction.DOWN, self.down))
        return parts


@dataclass(frozen=True)
class ClueMetadata:
    number: int
    direction: Direction
    row: int
    col: int


@dataclass(frozen=True)
class ClueLengthSpec:
    number: int
    direction: Direction
    length: int


@dataclass
class GridConstructorResult:
    """Outcome of a reconstruction attempt."""

    success: bool
    explored_states: int = 0
    grid: Optional[CellGrid] = None
    grid_string: Optional[str] = None
    message: Optional[str] = None
    stop_reason: Optional[StopReason] = None
    from_template: bool = False

    def to_jsonable(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success}
        if self.grid is not None:
            payload["grid"] = [list(row) for row in self.grid]
        if self.grid_string is not None:
            payload["gridString"] = self.grid_string
        if self.message is not None:
            payload["message"] = self.message
        payload["exploredStates"] = self.explored_states
        return payload
