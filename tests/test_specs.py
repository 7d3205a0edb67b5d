import unittest

from gridsmith.core.exceptions import InputError
from gridsmith.core.models import AnswerEntry, GridConstructorInput
from gridsmith.engine.specs import (build_specs, entry_length, expected_clue_lengths,
                                    normalize_answer_letters, parse_length_from_clue)


class NormalizationTests(unittest.TestCase):
    def test_normalize_strips_punctuation_and_uppercases(self) -> None:
        self.assertEqual(normalize_answer_letters("Drive-in"), "DRIVEIN")
        self.assertEqual(normalize_answer_letters("Apple tree"), "APPLETREE")
        self.assertEqual(normalize_answer_letters("r2 d2!"), "R2D2")

    def test_parse_length_sums_trailing_enumeration(self) -> None:
        self.assertEqual(parse_length_from_clue("Scientist with a rocket (6,9)"), 15)
        self.assertEqual(parse_length_from_clue("Open-air cinema (5-2)  "), 7)
        self.assertEqual(parse_length_from_clue("Bee (3)"), 3)

    def test_parse_length_requires_trailing_numbers(self) -> None:
        self.assertIsNone(parse_length_from_clue("No enumeration here"))
        self.assertIsNone(parse_length_from_clue("Letters only (abc)"))
        self.assertIsNone(parse_length_from_clue("(4) not at the end"))


class EntryLengthTests(unittest.TestCase):
    def test_explicit_length_wins(self) -> None:
        entry = AnswerEntry(number=1, answer="Apple tree", clue="Fruit (5,4)", length=4)
        self.assertEqual(entry_length(entry), 4)

    def test_answer_used_before_clue(self) -> None:
        entry = AnswerEntry(number=1, answer="Drive-in", clue="Cinema (9)")
        self.assertEqual(entry_length(entry), 7)

    def test_clue_enumeration_is_last_resort(self) -> None:
        self.assertEqual(entry_length(AnswerEntry(number=2, clue="Big cat (4,5)")), 9)

    def test_non_positive_length_falls_through(self) -> None:
        self.assertEqual(entry_length(AnswerEntry(number=2, answer="abc", length=0)), 3)

    def test_empty_normalized_answer_falls_through(self) -> None:
        self.assertEqual(entry_length(AnswerEntry(number=3, answer="--", clue="Dashes (3)")), 3)

    def test_unresolvable_length_raises(self) -> None:
        with self.assertRaises(InputError) as ctx:
            entry_length(AnswerEntry(number=7, clue="Nothing to go on"))
        self.assertIn("#7", str(ctx.exception))


class BuildSpecsTests(unittest.TestCase):
    def test_specs_merge_by_number_and_sort(self) -> None:
        data = GridConstructorInput(
            width=5,
            height=5,
            across=[AnswerEntry(number=5, answer="tree"), AnswerEntry(number=1, answer="Apple")],
            down=[AnswerEntry(number=1, length=3), AnswerEntry(number=3, clue="Bee (3)")],
        )
        specs = build_specs(data)
        self.assertEqual([spec.number for spec in specs], [1, 3, 5])

        first = specs[0]
        assert first.across is not None and first.down is not None
        self.assertEqual(first.across.length, 5)
        self.assertEqual(first.across.letters, "APPLE")
        self.assertEqual(first.down.length, 3)
        self.assertIsNone(first.down.letters)
        self.assertIsNone(specs[1].across)
        self.assertIsNone(specs[2].down)

    def test_letters_beyond_answer_are_unconstrained(self) -> None:
        data = GridConstructorInput(width=5, height=1, across=[AnswerEntry(number=1, answer="ab", length=4)])
        spec = build_specs(data)[0]
        assert spec.across is not None
        self.assertEqual(spec.across.letter_at(1), "B")
        self.assertIsNone(spec.across.letter_at(2))

    def test_expected_clue_lengths_lists_each_direction(self) -> None:
        data = GridConstructorInput(
            width=3,
            height=3,
            across=[AnswerEntry(number=1, length=3)],
            down=[AnswerEntry(number=1, length=2), AnswerEntry(number=2, length=3)],
        )
        triples = [
            (item.number, item.direction.value, item.length)
            for item in expected_clue_lengths(build_specs(data))
        ]
        self.assertEqual(triples, [(1, "across", 3), (1, "down", 2), (2, "down", 3)])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
