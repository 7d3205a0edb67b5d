"""CP-SAT layout solver using OR-Tools.

Used as an optional second stage when the backtracking search runs out of
budget. The model picks one start cell per clue number and a letter/block
state per cell; every layout it returns still goes through
:class:`GridValidator` before it is accepted.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from ortools.sat.python import cp_model

from ..core.constants import DEFAULT_CP_SAT_SECONDS, Bounds, CellKind, Direction
from ..core.models import NumberSpec
from ..utils.logger import get_logger
from .board import SolverState
from .builder import build_grid_from_state
from .candidates import compute_candidates
from .validator import GridValidator

LOGGER = get_logger(__name__)

# Layouts rejected by the validator are excluded and the model re-solved at
# most this many times.
MAX_SOLVE_ROUNDS = 5


def solve_with_cp_sat(
    bounds: Bounds,
    specs: Sequence[NumberSpec],
    timeout: float = DEFAULT_CP_SAT_SECONDS,
    validator: Optional[GridValidator] = None,
) -> Optional[SolverState]:
    """Find a validated layout via CP-SAT.

    Args:
        bounds: Grid rectangle.
        specs: Per-number specs in ascending number order.
        timeout: Solver time limit in seconds for each solve round.
        validator: Grid validator; built from ``specs`` when omitted.

    Returns:
        Solver state with ``chosen`` start cells, or None if no layout was found.
    """
    specs = list(specs)
    numbers = [spec.number for spec in specs]
    if numbers != list(range(1, len(specs) + 1)):
        # Grid numbering is always 1..K, so gaps can never validate.
        LOGGER.info("CP-SAT: clue numbers are not consecutive from 1, skipping")
        return None
    validator = validator or GridValidator(specs)

    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: Cell variables (True = letter, False = block)
    # ------------------------------------------------------------------
    letters = [model.new_bool_var(f"L_{index}") for index in range(bounds.size)]
    run_starts = {
        (index, direction): _run_start_var(model, bounds, letters, index, direction)
        for index in range(bounds.size)
        for direction in Direction
    }
    char_vars: Dict[int, Dict[str, cp_model.IntVar]] = defaultdict(dict)

    def char_var(index: int, char: str) -> cp_model.IntVar:
        if char not in char_vars[index]:
            char_vars[index][char] = model.new_bool_var(f"C_{index}_{char}")
        return char_vars[index][char]

    # ------------------------------------------------------------------
    # Step 2: One start cell per clue number
    # ------------------------------------------------------------------
    candidates = compute_candidates(bounds, specs)
    starts: Dict[Tuple[int, int], cp_model.IntVar] = {}
    starts_by_cell: Dict[int, List[cp_model.IntVar]] = defaultdict(list)
    positions = []

    for spec in specs:
        spec_starts: List[Tuple[int, cp_model.IntVar]] = []
        if not _start_letters_agree(spec):
            LOGGER.info("CP-SAT: clue %s has conflicting first letters", spec.number)
            return None
        for index in candidates[spec.number]:
            start = model.new_bool_var(f"S_{spec.number}_{index}")
            starts[(spec.number, index)] = start
            starts_by_cell[index].append(start)
            spec_starts.append((index, start))
            _add_placement(model, bounds, letters, char_var, spec, index, start)

            covered = {direction for direction, _ in spec.components()}
            for direction in Direction:
                run = run_starts[(index, direction)]
                if direction in covered:
                    if run is None:
                        model.add(start == 0)
                    else:
                        model.add_implication(start, run)
                elif run is not None:
                    model.add_implication(start, ~run)

        if not spec_starts:
            LOGGER.info("CP-SAT: clue %s has no candidate start cell", spec.number)
            return None
        model.add_exactly_one([start for _, start in spec_starts])
        position = model.new_int_var(0, bounds.size - 1, f"P_{spec.number}")
        model.add(position == sum(index * start for index, start in spec_starts))
        positions.append(position)

    # Start cells follow the row-major numbering.
    for earlier, later in zip(positions, positions[1:]):
        model.add(earlier < later)

    # ------------------------------------------------------------------
    # Step 3: Every run start belongs to a clue number, one per cell
    # ------------------------------------------------------------------
    for index in range(bounds.size):
        cell_starts = starts_by_cell.get(index, [])
        if len(cell_starts) > 1:
            model.add_at_most_one(cell_starts)
        for direction in Direction:
            run = run_starts[(index, direction)]
            if run is None:
                continue
            if cell_starts:
                model.add_bool_or(cell_starts).only_enforce_if(run)
            else:
                model.add(run == 0)
    for by_char in char_vars.values():
        if len(by_char) > 1:
            model.add_at_most_one(list(by_char.values()))

    # ------------------------------------------------------------------
    # Step 4: Solve, re-solving while the validator rejects the layout
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    # Single worker keeps the returned layout reproducible.
    solver.parameters.num_workers = 1

    LOGGER.info(
        "CP-SAT: %d clue numbers, %d start vars, solving (timeout=%0.1fs)...",
        len(specs),
        len(starts),
        timeout,
    )

    for _ in range(MAX_SOLVE_ROUNDS):
        status = solver.solve(model)
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            LOGGER.warning("CP-SAT: no layout found (status=%s)", solver.status_name(status))
            return None

        state = _extract_state(solver, bounds, letters, starts)
        if validator.is_valid(build_grid_from_state(state)):
            LOGGER.info("CP-SAT: layout found in %.2fs", solver.wall_time)
            return state

        LOGGER.warning("CP-SAT: layout failed validation, excluding it and re-solving")
        model.add_bool_or([~starts[(number, index)] for number, index in state.chosen.items()])

    return None


def _start_letters_agree(spec: NumberSpec) -> bool:
    if spec.across is None or spec.down is None:
        return True
    first_across = spec.across.letter_at(0)
    first_down = spec.down.letter_at(0)
    return not (first_across and first_down and first_across != first_down)


def _run_start_var(
    model: cp_model.CpModel,
    bounds: Bounds,
    letters: List[cp_model.IntVar],
    index: int,
    direction: Direction,
) -> Optional[cp_model.IntVar]:
    """Bool var true iff a word of length two or more starts at ``index``."""
    row, col = bounds.position(index)
    dr, dc = direction.step
    if not bounds.contains(row + dr, col + dc):
        return None

    literals = [letters[index], letters[bounds.index(row + dr, col + dc)]]
    if bounds.contains(row - dr, col - dc):
        literals.append(~letters[bounds.index(row - dr, col - dc)])

    run = model.new_bool_var(f"R_{index}_{direction.code}")
    model.add_bool_and(literals).only_enforce_if(run)
    model.add_bool_or([~literal for literal in literals]).only_enforce_if(~run)
    return run


def _add_placement(model, bounds, letters, char_var, spec, index, start) -> None:
    """Placing ``spec`` at ``index`` fixes its letter cells and bounding blocks."""
    row, col = bounds.position(index)
    model.add_implication(start, letters[index])
    for direction, part in spec.components():
        dr, dc = direction.step
        if bounds.contains(row - dr, col - dc):
            model.add_implication(start, ~letters[bounds.index(row - dr, col - dc)])
        end_row, end_col = row + dr * part.length, col + dc * part.length
        if bounds.contains(end_row, end_col):
            model.add_implication(start, ~letters[bounds.index(end_row, end_col)])
        for offset in range(part.length):
            cell = bounds.index(row + dr * offset, col + dc * offset)
            model.add_implication(start, letters[cell])
            char = part.letter_at(offset)
            if char:
                model.add_implication(start, char_var(cell, char))


def _extract_state(
    solver: cp_model.CpSolver,
    bounds: Bounds,
    letters: List[cp_model.IntVar],
    starts: Dict[Tuple[int, int], cp_model.IntVar],
) -> SolverState:
    state = SolverState(bounds)
    for index, letter in enumerate(letters):
        state.kinds[index] = CellKind.LETTER if solver.boolean_value(letter) else CellKind.BLOCK
    for (number, index), start in starts.items():
        if solver.boolean_value(start):
            state.chosen[number] = index
    return state


__all__ = ["MAX_SOLVE_ROUNDS", "solve_with_cp_sat"]
