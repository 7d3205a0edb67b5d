import unittest

from gridsmith.core.constants import CP_SAT_MESSAGE, Bounds, StopReason
from gridsmith.core.models import AnswerEntry, GridConstructorInput, GridConstructorOptions
from gridsmith.engine.builder import build_grid_from_state
from gridsmith.engine.clue_metadata import parse_grid_string
from gridsmith.engine.constructor import construct_grid_from_answer_key
from gridsmith.engine.cpsat import solve_with_cp_sat
from gridsmith.engine.signatures import (get_answer_key_length_signature,
                                         get_grid_length_signature)
from gridsmith.engine.specs import build_specs
from gridsmith.engine.validator import GridValidator

from test_clue_metadata import PUZZLE_INPUT, VALID_PUZZLE_GRID

CORNER_INPUT = GridConstructorInput(
    width=3,
    height=3,
    across=[AnswerEntry(number=1, length=2), AnswerEntry(number=3, length=2)],
    down=[AnswerEntry(number=1, length=2), AnswerEntry(number=2, length=2)],
)


def _solve(data: GridConstructorInput):
    return solve_with_cp_sat(Bounds(rows=data.height, cols=data.width), build_specs(data), timeout=10.0)


class CpSatSolverTests(unittest.TestCase):
    def test_layout_passes_validator(self) -> None:
        state = _solve(CORNER_INPUT)
        self.assertIsNotNone(state)
        grid = build_grid_from_state(state)
        self.assertTrue(GridValidator(build_specs(CORNER_INPUT)).is_valid(grid))
        self.assertEqual(sorted(state.chosen), [1, 2, 3])
        cells = [state.chosen[number] for number in sorted(state.chosen)]
        self.assertEqual(cells, sorted(cells))

    def test_single_column_word(self) -> None:
        data = GridConstructorInput(width=1, height=5, down=[AnswerEntry(number=1, length=5)])
        state = _solve(data)
        self.assertEqual(build_grid_from_state(state), [["N"], ["W"], ["W"], ["W"], ["W"]])

    def test_one_letter_words_are_infeasible(self) -> None:
        data = GridConstructorInput(
            width=2,
            height=1,
            across=[AnswerEntry(number=1, answer="AB")],
            down=[AnswerEntry(number=1, answer="X"), AnswerEntry(number=2, answer="Y")],
        )
        self.assertIsNone(_solve(data))

    def test_numbering_gaps_are_skipped(self) -> None:
        data = GridConstructorInput(
            width=3,
            height=3,
            across=[AnswerEntry(number=1, length=3), AnswerEntry(number=4, length=3)],
        )
        self.assertIsNone(_solve(data))

    def test_conflicting_first_letters(self) -> None:
        data = GridConstructorInput(
            width=3,
            height=3,
            across=[AnswerEntry(number=1, answer="CAT")],
            down=[AnswerEntry(number=1, answer="DOG")],
        )
        self.assertIsNone(_solve(data))


class CpSatFallbackTests(unittest.TestCase):
    def test_fallback_after_state_budget(self) -> None:
        options = GridConstructorOptions(max_states=1, cp_sat_fallback=True)
        result = construct_grid_from_answer_key(CORNER_INPUT, options)
        self.assertTrue(result.success)
        self.assertFalse(result.from_template)
        self.assertEqual(result.message, CP_SAT_MESSAGE)
        self.assertIs(result.stop_reason, StopReason.MAX_STATES)
        self.assertEqual(
            get_grid_length_signature(result.grid),
            get_answer_key_length_signature(CORNER_INPUT),
        )

    def test_fallback_is_opt_in(self) -> None:
        result = construct_grid_from_answer_key(CORNER_INPUT, GridConstructorOptions(max_states=1))
        self.assertFalse(result.success)

    def test_puzzle_answers_rebuild_source_layout(self) -> None:
        options = GridConstructorOptions(max_states=1, cp_sat_fallback=True, cp_sat_seconds=60.0)
        result = construct_grid_from_answer_key(PUZZLE_INPUT, options)
        self.assertTrue(result.success)
        self.assertEqual(
            get_grid_length_signature(result.grid),
            get_grid_length_signature(parse_grid_string(VALID_PUZZLE_GRID)),
        )


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
