"""Grid reconstruction orchestration.

Pipeline:
  1. Build per-number specs from the answer key.
  2. Backtracking search with forward checking, bounded by state/time budgets.
  3. Optionally, when a budget trips, a CP-SAT model of the same layout rules.
  4. On failure, fall back to a uniquely matching template grid.
"""

from __future__ import annotations

import time
from typing import List, Optional

from ..core.constants import CP_SAT_MESSAGE, TEMPLATE_MATCH_MESSAGE, Bounds, StopReason
from ..core.exceptions import BudgetExceeded, InputError, SearchExhausted
from ..core.models import (GridConstructorInput, GridConstructorOptions,
                           GridConstructorResult, NumberSpec)
from ..utils.logger import get_logger
from .builder import build_grid_from_state
from .clue_metadata import to_grid_string
from .cpsat import solve_with_cp_sat
from .search import BacktrackingSearch, Clock, SearchBudget, SearchCounters
from .signatures import clue_length_signature
from .specs import build_specs, expected_clue_lengths
from .templates import find_template_match


LOGGER = get_logger(__name__)


class GridConstructor:
    """Rebuild a grid layout from numbered answer lengths."""

    def __init__(
        self,
        options: Optional[GridConstructorOptions] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.options = options or GridConstructorOptions()
        self.clock = clock

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def construct(self, data: GridConstructorInput) -> GridConstructorResult:
        """Reconstruct ``data``; raises :class:`InputError` for unusable input."""

        if data.width <= 0 or data.height <= 0:
            raise InputError("Grid dimensions must be positive")

        specs = build_specs(data)
        if not specs:
            raise InputError("No clues provided")

        search = BacktrackingSearch(
            Bounds(rows=data.height, cols=data.width),
            specs,
            budget=SearchBudget(
                max_states=self.options.max_states,
                max_millis=self.options.max_millis,
            ),
            clock=self.clock,
        )
        counters = search.new_counters()
        LOGGER.info(
            "Reconstructing %sx%s grid from %s clue numbers", data.width, data.height, len(specs)
        )

        solved = None
        try:
            solved = search.run(counters)
        except SearchExhausted as exc:
            LOGGER.info("Search exhausted after %s states", counters.explored_states)
            return self._fallback(data, specs, exc.reason, counters)
        except BudgetExceeded as exc:
            LOGGER.info("Search stopped (%s) after %s states", exc.reason.value, counters.explored_states)
            if self.options.cp_sat_fallback:
                solved = solve_with_cp_sat(
                    search.bounds, specs, timeout=self.options.cp_sat_seconds, validator=search.validator
                )
            if solved is None:
                return self._fallback(data, specs, exc.reason, counters)
            grid = build_grid_from_state(solved)
            return GridConstructorResult(
                success=True,
                grid=grid,
                grid_string=to_grid_string(grid),
                message=CP_SAT_MESSAGE,
                explored_states=counters.explored_states,
                stop_reason=exc.reason,
            )

        grid = build_grid_from_state(solved)
        LOGGER.info("Grid reconstructed after %s explored states", counters.explored_states)
        return GridConstructorResult(
            success=True,
            grid=grid,
            grid_string=to_grid_string(grid),
            explored_states=counters.explored_states,
        )

    # ------------------------------------------------------------------
    # Failure handling
    # ------------------------------------------------------------------
    def _fallback(
        self,
        data: GridConstructorInput,
        specs: List[NumberSpec],
        reason: StopReason,
        counters: SearchCounters,
    ) -> GridConstructorResult:
        template = find_template_match(
            data,
            self.options.template_grids,
            expected_signature=clue_length_signature(expected_clue_lengths(specs)),
        )
        if template is not None:
            LOGGER.info("Using template grid with matching signature")
            return GridConstructorResult(
                success=True,
                grid=template,
                grid_string=to_grid_string(template),
                message=TEMPLATE_MATCH_MESSAGE,
                explored_states=counters.explored_states,
                stop_reason=reason,
                from_template=True,
            )

        return GridConstructorResult(
            success=False,
            message=self._failure_message(reason, counters),
            explored_states=counters.explored_states,
            stop_reason=reason,
        )

    def _failure_message(self, reason: StopReason, counters: SearchCounters) -> str:
        if reason is StopReason.TIME_LIMIT:
            message = f"No valid grid found before time limit ({self.options.max_millis}ms)"
        elif reason is StopReason.MAX_STATES:
            message = f"No valid grid found within {self.options.max_states:,} explored states"
        else:
            message = "No valid grid satisfies all constraints (search exhausted)"

        if self.options.include_diagnostics_in_message:
            message += f" [{counters.describe()}]"
        return message


def construct_grid_from_answer_key(
    data: GridConstructorInput,
    options: Optional[GridConstructorOptions] = None,
) -> GridConstructorResult:
    """Convenience wrapper around :class:`GridConstructor`."""

    return GridConstructor(options).construct(data)


__all__ = ["GridConstructor", "construct_grid_from_answer_key"]
