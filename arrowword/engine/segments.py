"""Derive answer runs (segments) from clue placement and arrow variants."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..core.constants import VARIANT_LAYOUT, Direction, Position
from ..core.models import Segment
from ..utils.logger import get_logger
from .grid import PuzzleGrid


LOGGER = get_logger(__name__)


def segment_id(clue_position: Position) -> str:
    row, col = clue_position
    return f"{row}-{col}"


def resolve_run_start(grid: PuzzleGrid, clue_position: Position) -> Optional[Tuple[Position, Direction]]:
    """Return the start cell and direction of the clue's run, or None.

    None means the arrow points outside the grid; such a clue is inert.
    """

    cell = grid.cell_at(clue_position)
    if not cell.is_clue():
        return None
    (dr, dc), direction = VARIANT_LAYOUT[cell.clue.arrow_variant]
    start = (clue_position[0] + dr, clue_position[1] + dc)
    if not grid.bounds.contains(*start):
        return None
    return start, direction


def walk_run(grid: PuzzleGrid, start: Position, direction: Direction) -> Tuple[Position, ...]:
    """Collect cells from ``start`` until a clue cell or the grid edge."""

    dr, dc = direction.step
    cells: List[Position] = []
    r, c = start
    while grid.bounds.contains(r, c) and not grid.cell(r, c).is_clue():
        cells.append((r, c))
        r += dr
        c += dc
    return tuple(cells)


def build_segments(grid: PuzzleGrid) -> List[Segment]:
    """Scan clue cells in row-major order and emit one segment per usable clue.

    Runs may be empty (the start cell is itself a clue); they are still
    emitted so callers can find the segment for a clue cell.
    """

    segments: List[Segment] = []
    skipped = 0
    for position in grid.positions():
        cell = grid.cell_at(position)
        if not cell.is_clue():
            continue
        resolved = resolve_run_start(grid, position)
        if resolved is None:
            skipped += 1
            continue
        start, direction = resolved
        segments.append(
            Segment(
                id=segment_id(position),
                clue_position=position,
                direction=direction,
                start_position=start,
                cells=walk_run(grid, start, direction),
                clue=cell.clue,
            )
        )
    LOGGER.debug("Built %d segments (%d clues without room)", len(segments), skipped)
    return segments


# ----------------------------------------------------------------------
# Lookups
# ----------------------------------------------------------------------
def segments_by_cell(segments: Iterable[Segment]) -> Dict[Position, List[Segment]]:
    """Map each answer cell to the segments covering it, in build order."""

    index: Dict[Position, List[Segment]] = defaultdict(list)
    for segment in segments:
        for position in segment.cells:
            index[position].append(segment)
    return dict(index)


def arrow_starts(segments: Iterable[Segment]) -> Dict[Position, Set[Direction]]:
    """Start cell -> directions of the runs beginning there."""

    starts: Dict[Position, Set[Direction]] = defaultdict(set)
    for segment in segments:
        starts[segment.start_position].add(segment.direction)
    return dict(starts)


def find_segment_for_clue(segments: Iterable[Segment], clue_position: Position) -> Optional[Segment]:
    for segment in segments:
        if segment.clue_position == clue_position:
            return segment
    return None


def completed_segment_ids(grid: PuzzleGrid, segments: Iterable[Segment]) -> Set[str]:
    """Ids of non-empty runs whose every cell holds a letter, right or wrong."""

    return {
        segment.id
        for segment in segments
        if segment.cells and all(grid.cell_at(pos).letter for pos in segment.cells)
    }
