import unittest

from gridsmith.core.constants import Direction
from gridsmith.core.models import AnswerEntry, GridConstructorInput, GridConstructorOptions
from gridsmith.engine.clue_metadata import (extract_clue_metadata, grid_clue_lengths,
                                            measure_run_length, parse_grid_string,
                                            to_grid_string)
from gridsmith.engine.constructor import construct_grid_from_answer_key
from gridsmith.engine.signatures import (clue_length_signature,
                                         get_answer_key_length_signature,
                                         get_grid_length_signature)
from gridsmith.engine.specs import build_specs
from gridsmith.engine.validator import GridValidator

VALID_PUZZLE_GRID = """N W N W N W N B N W N W N W B
W B W B W B W B W B W B W B N
N W W W W W W B N W W W W W W
W B W B B B W B W B W B W B W
N W W B N W W W W W W W W W W
W B W B W B B B W B B B W B W
N W W W W B N W W W N W W W W
B B W B W B W B W B W B W B B
N W W W W W W W W B N W W W N
W B W B B B W B B B W B W B W
N W W W N W W W N W W B N W W
W B W B W B W B W B B B W B W
N W W W W W W B N W N W W W W
W B W B W B W B W B W B W B W
B N W W W W W B N W W W W W W"""

# Answers are kept ROT13-encoded, as in the stored answer keys.
ANSWERS = {
    "across": [
        (1, "Qhenoyr"), (5, "Nyybjf"), (9, "Jvpxrgf"), (10, "Cerprqr"),
        (11, "Trr"), (12, "Wblyrffarff"), (13, "Erfva"), (14, "Chepunfre"),
        (16, "Sevpnffrr"), (17, "Hfure"), (19, "Pbagergrzcf"), (22, "VZS"),
        (23, "Qevir-va"), (24, "Yrvcmvt"), (26, "Fgnapr"), (27, "Erchyfr"),
    ],
    "down": [
        (1, "Qbjntre"), (2, "Ebpxrg fpvragvfg"), (3, "Orr"), (4, "Rffnl"),
        (5, "Nccyr gerr"), (6, "Yrrxf"), (7, "Jvrare fpuavgmry"), (8, "Trlfre"),
        (12, "Whagn"), (14, "Cnfg grafr"), (15, "Ubhef"), (16, "Snpnqr"),
        (18, "Ershttr"), (20, "Eurva"), (21, "Zbyne"), (25, "Vzc"),
    ],
}

PUZZLE_INPUT = GridConstructorInput(
    width=15,
    height=15,
    across=[AnswerEntry(number=n, answer=a) for n, a in ANSWERS["across"]],
    down=[AnswerEntry(number=n, answer=a) for n, a in ANSWERS["down"]],
)


class ClueMetadataTests(unittest.TestCase):
    def test_numbers_follow_scan_order(self) -> None:
        grid = parse_grid_string("N B N\nW B N\nN W W")
        metadata = [(m.number, m.direction, m.row, m.col) for m in extract_clue_metadata(grid)]
        # (1,2) is numbered but starts nothing; it still consumes number 3.
        self.assertEqual(
            metadata,
            [
                (1, Direction.DOWN, 0, 0),
                (2, Direction.DOWN, 0, 2),
                (4, Direction.ACROSS, 2, 0),
            ],
        )

    def test_empty_grid_has_no_clues(self) -> None:
        self.assertEqual(extract_clue_metadata([]), [])

    def test_measure_run_length_stops_at_block(self) -> None:
        grid = parse_grid_string("N W B\nW B N\nB N W")
        self.assertEqual(measure_run_length(grid, 0, 0, Direction.ACROSS), 2)
        self.assertEqual(measure_run_length(grid, 0, 0, Direction.DOWN), 2)
        self.assertEqual(measure_run_length(grid, 1, 2, Direction.DOWN), 2)
        self.assertEqual(measure_run_length(grid, 0, 2, Direction.DOWN), 0)

    def test_grid_string_is_byte_exact(self) -> None:
        text = "N W B\nW B N\nB N W"
        self.assertEqual(to_grid_string(parse_grid_string(text)), text)

    def test_puzzle_grid_clue_count(self) -> None:
        grid = parse_grid_string(VALID_PUZZLE_GRID)
        lengths = grid_clue_lengths(grid)
        self.assertEqual(sum(1 for item in lengths if item.direction is Direction.ACROSS), 16)
        self.assertEqual(sum(1 for item in lengths if item.direction is Direction.DOWN), 16)


class SignatureTests(unittest.TestCase):
    def test_signature_format(self) -> None:
        grid = parse_grid_string("N B N\nW B N\nN W W")
        self.assertEqual(get_grid_length_signature(grid), "1-d-3|2-d-3|4-a-3")

    def test_signature_sorts_as_strings(self) -> None:
        data = GridConstructorInput(
            width=15,
            height=15,
            across=[AnswerEntry(number=10, length=4), AnswerEntry(number=2, length=12)],
        )
        self.assertEqual(get_answer_key_length_signature(data), "10-a-4|2-a-12")

    def test_answer_key_and_grid_agree(self) -> None:
        grid = parse_grid_string(VALID_PUZZLE_GRID)
        self.assertEqual(
            get_answer_key_length_signature(PUZZLE_INPUT),
            get_grid_length_signature(grid),
        )
        self.assertEqual(
            clue_length_signature(grid_clue_lengths(grid)),
            get_grid_length_signature(grid),
        )

    def test_puzzle_template_fallback(self) -> None:
        options = GridConstructorOptions(max_states=1, template_grids=[VALID_PUZZLE_GRID])
        result = construct_grid_from_answer_key(PUZZLE_INPUT, options)
        self.assertTrue(result.success)
        self.assertEqual(result.grid_string, VALID_PUZZLE_GRID)


class ValidatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = GridValidator(build_specs(PUZZLE_INPUT))

    def test_source_grid_is_accepted(self) -> None:
        result = self.validator.validate(parse_grid_string(VALID_PUZZLE_GRID))
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])

    def test_changed_length_is_rejected(self) -> None:
        rows = VALID_PUZZLE_GRID.split("\n")
        # Blocking the end of 1-across shortens it from 7 to 6.
        rows[0] = "N W N W N W B B N W N W N W B"
        result = self.validator.validate(parse_grid_string("\n".join(rows)))
        self.assertFalse(result.ok)
        self.assertEqual(len(result.messages), 1)

    def test_extra_clue_is_rejected(self) -> None:
        validator = GridValidator(
            build_specs(GridConstructorInput(width=2, height=2, across=[AnswerEntry(number=1, length=2)]))
        )
        self.assertTrue(validator.is_valid(parse_grid_string("N W\nB B")))
        self.assertFalse(validator.is_valid(parse_grid_string("N W\nW B")))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
