"""Answer-key entries to per-number solver specs."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

from ..core.constants import Direction
from ..core.exceptions import InputError
from ..core.models import (AnswerEntry, ClueLengthSpec, DirectionSpec,
                           GridConstructorInput, NumberSpec)

ANSWER_STRIP_RE = re.compile(r"[^A-Z0-9]")
ENUMERATION_RE = re.compile(r"\(([^)]+)\)\s*$")
ENUMERATION_SPLIT_RE = re.compile(r"[^0-9]+")


def normalize_answer_letters(answer: str) -> str:
    """Upper-case ``answer`` and keep only ``A-Z`` and digits."""

    return ANSWER_STRIP_RE.sub("", answer.upper())


def parse_length_from_clue(clue: str) -> Optional[int]:
    """Sum a trailing enumeration such as ``(6,3)`` or ``(5-4)``."""

    match = ENUMERATION_RE.search(clue)
    if not match:
        return None
    parts = [part for part in ENUMERATION_SPLIT_RE.split(match.group(1)) if part]
    if not parts:
        return None
    return sum(int(part) for part in parts)


def entry_length(entry: AnswerEntry) -> int:
    """Resolve an entry's length: explicit, then answer, then clue enumeration."""

    if entry.length is not None and entry.length > 0:
        return entry.length

    if entry.answer:
        normalized = normalize_answer_letters(entry.answer)
        if normalized:
            return len(normalized)

    if entry.clue:
        parsed = parse_length_from_clue(entry.clue)
        if parsed:
            return parsed

    raise InputError(f"Could not determine length for clue #{entry.number}")


def _direction_spec(entry: AnswerEntry) -> DirectionSpec:
    return DirectionSpec(
        length=entry_length(entry),
        letters=normalize_answer_letters(entry.answer) if entry.answer else None,
    )


def build_specs(data: GridConstructorInput) -> List[NumberSpec]:
    """Merge across and down entries by number, sorted ascending."""

    by_number: Dict[int, NumberSpec] = {}
    for entry in data.across:
        spec = by_number.setdefault(entry.number, NumberSpec(number=entry.number))
        spec.across = _direction_spec(entry)
    for entry in data.down:
        spec = by_number.setdefault(entry.number, NumberSpec(number=entry.number))
        spec.down = _direction_spec(entry)
    return sorted(by_number.values(), key=lambda spec: spec.number)


def expected_clue_lengths(specs: Iterable[NumberSpec]) -> List[ClueLengthSpec]:
    out: List[ClueLengthSpec] = []
    for spec in specs:
        if spec.across is not None:
            out.append(ClueLengthSpec(spec.number, Direction.ACROSS, spec.across.length))
        if spec.down is not None:
            out.append(ClueLengthSpec(spec.number, Direction.DOWN, spec.down.length))
    return out


__all__ = [
    "build_specs",
    "entry_length",
    "expected_clue_lengths",
    "normalize_answer_letters",
    "parse_length_from_clue",
]
