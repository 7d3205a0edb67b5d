"""Crossword grid reconstruction from numbered answer keys.

This package exposes the public API surface via:

- ``gridsmith.engine.constructor.construct_grid_from_answer_key``: rebuilds a
  grid layout from across/down entries, with template fallback.
- ``gridsmith.engine.signatures``: canonical length signatures for answer keys
  and grids.
- ``gridsmith.engine.integrity.check_grid_integrity``: audits a stored grid
  against its answer key.
- ``gridsmith.engine.cpsat.solve_with_cp_sat``: optional CP-SAT layout solver
  used when the backtracking search runs out of budget.
"""

from .core.exceptions import GridSolverError, InputError
from .core.models import (AnswerEntry, GridConstructorInput,
                          GridConstructorOptions, GridConstructorResult)
from .engine.constructor import GridConstructor, construct_grid_from_answer_key
from .engine.integrity import IntegrityReport, check_grid_integrity
from .engine.signatures import get_answer_key_length_signature, get_grid_length_signature

__all__ = [
    "AnswerEntry",
    "GridConstructor",
    "GridConstructorInput",
    "GridConstructorOptions",
    "GridConstructorResult",
    "GridSolverError",
    "InputError",
    "IntegrityReport",
    "check_grid_integrity",
    "construct_grid_from_answer_key",
    "get_answer_key_length_signature",
    "get_grid_length_signature",
]

__version__ = "0.1.0"
