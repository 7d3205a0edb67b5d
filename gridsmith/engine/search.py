"""Backtracking search with forward checking over start-cell assignments."""

from __future__ import annotations

import logging
import time
from bisect import bisect_right
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ..core.constants import (DEFAULT_MAX_MILLIS, DEFAULT_MAX_STATES,
                              TIME_CHECK_INTERVAL, Bounds, StopReason)
from ..core.exceptions import BudgetExceeded, SearchExhausted
from ..core.models import NumberSpec
from ..utils.logger import get_logger
from .board import SolverState, apply_placement, check_placement
from .builder import build_grid_from_state
from .candidates import compute_candidates
from .validator import GridValidator

LOGGER = get_logger(__name__)

Clock = Callable[[], float]


@dataclass
class SearchBudget:
    max_states: int = DEFAULT_MAX_STATES
    max_millis: int = DEFAULT_MAX_MILLIS


@dataclass
class SearchCounters:
    """Mutable counters shared by every node of one search run."""

    started_at: float = 0.0
    explored_states: int = 0
    candidate_placements: int = 0
    complete_assignments: int = 0

    def describe(self) -> str:
        return (
            f"explored={self.explored_states:,}, "
            f"placements={self.candidate_placements:,}, "
            f"completeAssignments={self.complete_assignments:,}"
        )


class BacktrackingSearch:
    """Assign a start cell to every spec in ascending number order.

    Start cells must strictly increase from one spec to the next, which mirrors
    the row-major numbering of the finished grid. Each tentative placement is
    applied to a cloned board and kept only if every later spec still has a
    feasible start cell beyond the running lower bound.
    """

    def __init__(
        self,
        bounds: Bounds,
        specs: Sequence[NumberSpec],
        budget: Optional[SearchBudget] = None,
        validator: Optional[GridValidator] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.bounds = bounds
        self.specs: List[NumberSpec] = list(specs)
        self.budget = budget or SearchBudget()
        self.validator = validator or GridValidator(self.specs)
        self.clock = clock
        self.candidates: Dict[int, List[int]] = compute_candidates(bounds, self.specs)

    def new_counters(self) -> SearchCounters:
        return SearchCounters(started_at=self.clock())

    def run(self, counters: Optional[SearchCounters] = None) -> SolverState:
        """Return the first validated solution.

        Raises :class:`BudgetExceeded` when a budget trips and
        :class:`SearchExhausted` when no assignment validates.
        """

        counters = counters if counters is not None else self.new_counters()
        if LOGGER.isEnabledFor(logging.DEBUG):
            for spec in self.specs:
                LOGGER.debug("Spec %s: %s geometric candidates", spec.number, len(self.candidates[spec.number]))

        solved = self._search(0, -1, SolverState(self.bounds), counters)
        if solved is None:
            raise SearchExhausted("No valid grid satisfies all constraints (search exhausted)")
        return solved

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------
    def _search(
        self,
        spec_index: int,
        min_cell_index: int,
        state: SolverState,
        counters: SearchCounters,
    ) -> Optional[SolverState]:
        if counters.explored_states % TIME_CHECK_INTERVAL == 0:
            elapsed_ms = (self.clock() - counters.started_at) * 1000
            if elapsed_ms > self.budget.max_millis:
                raise BudgetExceeded(StopReason.TIME_LIMIT)

        if counters.explored_states >= self.budget.max_states:
            raise BudgetExceeded(StopReason.MAX_STATES)

        if spec_index >= len(self.specs):
            counters.complete_assignments += 1
            if self.validator.is_valid(build_grid_from_state(state)):
                return state
            return None

        counters.explored_states += 1

        spec = self.specs[spec_index]
        candidates = self.candidates[spec.number]
        for position in range(bisect_right(candidates, min_cell_index), len(candidates)):
            cell_index = candidates[position]
            counters.candidate_placements += 1

            if not check_placement(state, spec, cell_index):
                continue

            next_state = state.clone()
            apply_placement(next_state, spec, cell_index)
            next_state.chosen[spec.number] = cell_index

            if not self._forward_check(spec_index, cell_index, next_state):
                continue

            result = self._search(spec_index + 1, cell_index, next_state, counters)
            if result is not None:
                return result

        return None

    def _forward_check(self, spec_index: int, cell_index: int, state: SolverState) -> bool:
        """Every later spec needs a feasible start beyond the running bound.

        The bound advances to the first feasible candidate found, an
        optimistic floor rather than the cell the search will pick.
        """

        last_min_index = cell_index
        for next_spec in self.specs[spec_index + 1:]:
            candidates = self.candidates[next_spec.number]
            for position in range(bisect_right(candidates, last_min_index), len(candidates)):
                future = candidates[position]
                if check_placement(state, next_spec, future):
                    last_min_index = future
                    break
            else:
                return False
        return True


__all__ = ["BacktrackingSearch", "SearchBudget", "SearchCounters"]
