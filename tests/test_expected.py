import unittest

from arrowword.core.constants import ArrowVariant
from arrowword.core.models import Clue
from arrowword.engine.expected import map_expected
from arrowword.engine.grid import GridConfig, PuzzleGrid
from arrowword.engine.segments import build_segments


def expected_row(grid: PuzzleGrid, row: int):
    return [grid.cell(row, col).expected_letter for col in range(grid.size)]


class ExpectedLetterMapperTests(unittest.TestCase):
    def test_answer_longer_than_run_fills_every_cell(self) -> None:
        grid = PuzzleGrid(GridConfig(size=4))
        grid.place_clue((0, 0), "Pets", ArrowVariant.LEFT_CLUE_RIGHT, "cats")
        annotated = map_expected(grid)
        self.assertEqual(expected_row(annotated, 0), [None, "C", "A", "T"])
        self.assertFalse(any(annotated.cell(1, c).expected_letter for c in range(4)))

    def test_answer_shorter_than_run_leaves_trailing_cells_blank(self) -> None:
        grid = PuzzleGrid(GridConfig(size=5))
        grid.place_clue((0, 0), "Short", ArrowVariant.LEFT_CLUE_RIGHT, "ab")
        annotated = map_expected(grid)
        self.assertEqual(expected_row(annotated, 0), [None, "A", "B", None, None])

    def test_clue_without_answer_sets_no_expectation(self) -> None:
        grid = PuzzleGrid(GridConfig(size=4))
        grid.place_clue((0, 0), "Open", ArrowVariant.LEFT_CLUE_RIGHT)
        self.assertFalse(map_expected(grid).has_expectations())

    def test_whitespace_in_answer_is_ignored(self) -> None:
        grid = PuzzleGrid(GridConfig(size=4))
        grid.place_clue((0, 0), "Pet", ArrowVariant.LEFT_CLUE_RIGHT)
        grid.cell(0, 0).clue = Clue(prompt_text="Pet", answer=" c a t ")
        self.assertEqual(expected_row(map_expected(grid), 0), [None, "C", "A", "T"])

    def test_stale_expectations_are_reset(self) -> None:
        grid = PuzzleGrid(GridConfig(size=4))
        grid.cell(2, 2).expected_letter = "Q"
        annotated = map_expected(grid)
        self.assertIsNone(annotated.cell(2, 2).expected_letter)

    def test_input_grid_is_not_mutated(self) -> None:
        grid = PuzzleGrid(GridConfig(size=4))
        grid.place_clue((0, 0), "Pet", ArrowVariant.LEFT_CLUE_RIGHT, "cat")
        map_expected(grid, build_segments(grid))
        self.assertIsNone(grid.cell(0, 1).expected_letter)

    def test_crossing_runs_share_a_cell(self) -> None:
        grid = PuzzleGrid(GridConfig(size=4))
        grid.place_clue((1, 0), "across", ArrowVariant.LEFT_CLUE_RIGHT, "ABC")
        grid.place_clue((0, 2), "down", ArrowVariant.ABOVE_CLUE_DOWN, "BXY")
        annotated = map_expected(grid)
        self.assertEqual(annotated.cell(1, 2).expected_letter, "B")
        self.assertEqual(annotated.cell(2, 2).expected_letter, "X")
        self.assertEqual(annotated.cell(3, 2).expected_letter, "Y")

    def test_umlauts_and_sharp_s_are_preserved(self) -> None:
        grid = PuzzleGrid(GridConfig(size=6))
        grid.place_clue((0, 0), "Road", ArrowVariant.LEFT_CLUE_RIGHT, "Straße")
        grid.place_clue((1, 0), "Over", ArrowVariant.LEFT_CLUE_RIGHT, "über")
        annotated = map_expected(grid)
        self.assertEqual(expected_row(annotated, 0), [None, "S", "T", "R", "A", "ß"])
        self.assertEqual(expected_row(annotated, 1)[1:5], ["Ü", "B", "E", "R"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
