"""Canonical length signatures used as equality keys."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..core.constants import SIGNATURE_SEPARATOR
from ..core.models import ClueLengthSpec, GridConstructorInput
from .clue_metadata import grid_clue_lengths
from .specs import build_specs, expected_clue_lengths


def clue_length_signature(items: Iterable[ClueLengthSpec]) -> str:
    return SIGNATURE_SEPARATOR.join(
        sorted(f"{item.number}-{item.direction.code}-{item.length}" for item in items)
    )


def get_answer_key_length_signature(data: GridConstructorInput) -> str:
    """Signature of the (number, direction, length) triples an answer key demands."""

    return clue_length_signature(expected_clue_lengths(build_specs(data)))


def get_grid_length_signature(grid: Sequence[Sequence[str]]) -> str:
    """Signature of the (number, direction, length) triples a grid actually has."""

    return clue_length_signature(grid_clue_lengths(grid))


__all__ = [
    "clue_length_signature",
    "get_answer_key_length_signature",
    "get_grid_length_signature",
]
