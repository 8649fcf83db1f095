import unittest

from arrowword.core.constants import ArrowVariant, CellKind
from arrowword.core.exceptions import InvalidEditError
from arrowword.engine.grid import GridConfig, PuzzleGrid


class GridEditTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = PuzzleGrid(GridConfig(size=4))

    def test_default_size(self) -> None:
        self.assertEqual(PuzzleGrid().size, 12)
        with self.assertRaises(ValueError):
            PuzzleGrid(GridConfig(size=0))

    def test_set_letter_normalizes(self) -> None:
        self.assertEqual(self.grid.set_letter((1, 1), "ö"), "Ö")
        self.assertEqual(self.grid.set_letter((1, 2), "ß"), "ß")
        self.assertEqual(self.grid.cell(1, 1).letter, "Ö")
        self.grid.clear_letter((1, 1))
        self.assertTrue(self.grid.cell(1, 1).is_blank())

    def test_place_clue_defaults_and_normalizes_answer(self) -> None:
        clue = self.grid.place_clue((0, 0), "  Pet  ", None, "c a-t!")
        self.assertEqual(clue.prompt_text, "Pet")
        self.assertEqual(clue.arrow_variant, ArrowVariant.LEFT_CLUE_RIGHT)
        self.assertEqual(clue.answer, "CAT")
        self.assertTrue(self.grid.is_clue((0, 0)))
        self.assertFalse(self.grid.is_clue((9, 9)))

    def test_place_clue_replaces_letter_and_accepts_variant_string(self) -> None:
        self.grid.set_letter((2, 2), "A")
        clue = self.grid.place_clue((2, 2), "x", ArrowVariant.ABOVE_CLUE_DOWN.value)
        self.assertEqual(clue.arrow_variant, ArrowVariant.ABOVE_CLUE_DOWN)
        self.assertEqual(self.grid.cell(2, 2).letter, "")

    def test_unknown_variant_is_rejected(self) -> None:
        with self.assertRaises(InvalidEditError):
            self.grid.place_clue((0, 0), "x", "sideways")

    def test_remove_clue(self) -> None:
        self.grid.place_clue((0, 0), "x")
        self.grid.remove_clue((0, 0))
        self.assertEqual(self.grid.cell(0, 0).kind, CellKind.EMPTY)
        self.assertIsNone(self.grid.cell(0, 0).clue)
        with self.assertRaises(InvalidEditError):
            self.grid.remove_clue((0, 0))

    def test_clear_answers_keeps_clues_and_marks(self) -> None:
        self.grid.place_clue((0, 0), "x", answer="ab")
        self.grid.set_letter((0, 1), "A")
        self.grid.toggle_solution_mark((0, 1))
        self.grid.clear_answers()
        self.assertEqual(self.grid.cell(0, 1).letter, "")
        self.assertEqual(self.grid.cell(0, 1).solution_mark_number, 1)
        self.assertEqual(self.grid.cell(0, 0).clue.answer, "AB")

    def test_copy_is_independent(self) -> None:
        clone = self.grid.copy()
        clone.set_letter((3, 3), "Z")
        self.assertEqual(self.grid.cell(3, 3).letter, "")
        self.assertNotEqual(clone, self.grid)


class SolutionMarkTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = PuzzleGrid(GridConfig(size=4))

    def test_toggle_numbers_in_order(self) -> None:
        self.assertEqual(self.grid.toggle_solution_mark((1, 1)), 1)
        self.assertEqual(self.grid.toggle_solution_mark((0, 3)), 2)
        self.assertEqual(self.grid.next_solution_mark, 3)

    def test_unmarking_renumbers_higher_marks(self) -> None:
        for position in ((0, 0), (1, 1), (2, 2), (3, 3)):
            self.grid.toggle_solution_mark(position)
        self.assertIsNone(self.grid.toggle_solution_mark((1, 1)))
        numbers = [self.grid.cell(r, r).solution_mark_number for r in range(4)]
        self.assertEqual(numbers, [1, None, 2, 3])

    def test_marks_only_on_answer_cells(self) -> None:
        self.grid.place_clue((0, 0), "x")
        with self.assertRaises(InvalidEditError):
            self.grid.toggle_solution_mark((0, 0))

    def test_placing_clue_drops_its_mark(self) -> None:
        self.grid.toggle_solution_mark((1, 1))
        self.grid.toggle_solution_mark((2, 2))
        self.grid.place_clue((1, 1), "x")
        self.assertIsNone(self.grid.cell(1, 1).solution_mark_number)
        self.assertEqual(self.grid.cell(2, 2).solution_mark_number, 1)

    def test_solution_word_leaves_gaps_blank(self) -> None:
        self.grid.toggle_solution_mark((0, 1))
        self.grid.toggle_solution_mark((0, 2))
        self.grid.toggle_solution_mark((0, 3))
        self.grid.set_letter((0, 1), "o")
        self.grid.set_letter((0, 3), "t")
        self.assertEqual(self.grid.solution_letters(), ["O", "", "T"])
        self.assertEqual(self.grid.solution_word(), "OT")
        self.grid.reset_solution_marks()
        self.assertEqual(self.grid.solution_letters(), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
