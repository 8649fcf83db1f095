import unittest

from arrowword.core.constants import ArrowVariant, Direction
from arrowword.engine.grid import GridConfig, PuzzleGrid
from arrowword.engine.segments import (
    arrow_starts,
    build_segments,
    completed_segment_ids,
    find_segment_for_clue,
    segments_by_cell,
)


def grid_with_clue(size: int, position, variant: ArrowVariant, answer: str = "") -> PuzzleGrid:
    grid = PuzzleGrid(GridConfig(size=size))
    grid.place_clue(position, "clue", variant, answer)
    return grid


class VariantLayoutTests(unittest.TestCase):
    EXPECTED = {
        ArrowVariant.LEFT_CLUE_RIGHT: ((2, 3), Direction.RIGHT, ((2, 3), (2, 4))),
        ArrowVariant.ABOVE_CLUE_DOWN: ((3, 2), Direction.DOWN, ((3, 2), (4, 2))),
        ArrowVariant.LEFT_CLUE_DOWN: ((2, 3), Direction.DOWN, ((2, 3), (3, 3), (4, 3))),
        ArrowVariant.ABOVE_CLUE_RIGHT: ((3, 2), Direction.RIGHT, ((3, 2), (3, 3), (3, 4))),
        ArrowVariant.ABOVE_OF_CLUE_RIGHT: ((1, 2), Direction.RIGHT, ((1, 2), (1, 3), (1, 4))),
        ArrowVariant.LEFT_OF_CLUE_DOWN: ((2, 1), Direction.DOWN, ((2, 1), (3, 1), (4, 1))),
    }

    def test_every_variant_resolves_start_and_direction(self) -> None:
        for variant, (start, direction, cells) in self.EXPECTED.items():
            with self.subTest(variant=variant):
                segments = build_segments(grid_with_clue(5, (2, 2), variant))
                self.assertEqual(len(segments), 1)
                segment = segments[0]
                self.assertEqual(segment.id, "2-2")
                self.assertEqual(segment.clue_position, (2, 2))
                self.assertEqual(segment.start_position, start)
                self.assertEqual(segment.direction, direction)
                self.assertEqual(segment.cells, cells)


class SegmentBuilderTests(unittest.TestCase):
    def test_clue_pointing_outside_grid_is_skipped(self) -> None:
        grid = grid_with_clue(4, (0, 0), ArrowVariant.ABOVE_OF_CLUE_RIGHT)
        grid.place_clue((2, 0), "left edge", ArrowVariant.LEFT_OF_CLUE_DOWN)
        self.assertEqual(build_segments(grid), [])

    def test_run_stops_before_next_clue(self) -> None:
        grid = grid_with_clue(5, (0, 0), ArrowVariant.LEFT_CLUE_RIGHT)
        grid.place_clue((0, 3), "blocker", ArrowVariant.ABOVE_CLUE_DOWN)
        segments = {segment.id: segment for segment in build_segments(grid)}
        self.assertEqual(segments["0-0"].cells, ((0, 1), (0, 2)))
        self.assertEqual(segments["0-3"].cells, ((1, 3), (2, 3), (3, 3), (4, 3)))

    def test_run_ends_at_grid_boundary(self) -> None:
        grid = grid_with_clue(4, (3, 1), ArrowVariant.LEFT_CLUE_RIGHT)
        self.assertEqual(build_segments(grid)[0].cells, ((3, 2), (3, 3)))

    def test_empty_run_is_still_emitted(self) -> None:
        grid = grid_with_clue(4, (0, 0), ArrowVariant.LEFT_CLUE_RIGHT)
        grid.place_clue((0, 1), "below", ArrowVariant.ABOVE_CLUE_DOWN)
        segment = find_segment_for_clue(build_segments(grid), (0, 0))
        self.assertIsNotNone(segment)
        assert segment is not None
        self.assertEqual(segment.cells, ())
        self.assertEqual(segment.length, 0)

    def test_row_major_order_and_determinism(self) -> None:
        grid = PuzzleGrid(GridConfig(size=6))
        grid.place_clue((3, 0), "c", ArrowVariant.LEFT_CLUE_RIGHT)
        grid.place_clue((0, 4), "b", ArrowVariant.ABOVE_CLUE_DOWN)
        grid.place_clue((0, 1), "a", ArrowVariant.ABOVE_CLUE_RIGHT)
        first = build_segments(grid)
        second = build_segments(grid)
        self.assertEqual(first, second)
        self.assertEqual([segment.id for segment in first], ["0-1", "0-4", "3-0"])

    def test_segment_cells_never_include_clue_cells(self) -> None:
        grid = PuzzleGrid(GridConfig(size=6))
        grid.place_clue((0, 0), "a", ArrowVariant.LEFT_CLUE_DOWN)
        grid.place_clue((3, 1), "b", ArrowVariant.ABOVE_OF_CLUE_RIGHT)
        grid.place_clue((4, 4), "c", ArrowVariant.LEFT_OF_CLUE_DOWN)
        for segment in build_segments(grid):
            for position in segment.cells:
                self.assertFalse(grid.is_clue(position))

    def test_letters_do_not_change_segments(self) -> None:
        grid = grid_with_clue(4, (0, 0), ArrowVariant.LEFT_CLUE_RIGHT)
        before = build_segments(grid)
        grid.set_letter((0, 1), "x")
        self.assertEqual(build_segments(grid), before)


class SegmentLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = PuzzleGrid(GridConfig(size=4))
        self.grid.place_clue((1, 0), "across", ArrowVariant.LEFT_CLUE_RIGHT)
        self.grid.place_clue((0, 2), "down", ArrowVariant.ABOVE_CLUE_DOWN)
        self.segments = build_segments(self.grid)

    def test_segments_by_cell_lists_crossing_runs(self) -> None:
        index = segments_by_cell(self.segments)
        self.assertEqual([segment.id for segment in index[(1, 2)]], ["0-2", "1-0"])
        self.assertEqual([segment.id for segment in index[(1, 1)]], ["1-0"])
        self.assertNotIn((0, 0), index)

    def test_arrow_starts(self) -> None:
        starts = arrow_starts(self.segments)
        self.assertEqual(starts[(1, 1)], {Direction.RIGHT})
        self.assertEqual(starts[(1, 2)], {Direction.DOWN})

    def test_completed_segment_ids_ignore_correctness(self) -> None:
        for col, letter in zip((1, 2, 3), "XYZ"):
            self.grid.set_letter((1, col), letter)
        self.assertEqual(completed_segment_ids(self.grid, self.segments), {"1-0"})


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
