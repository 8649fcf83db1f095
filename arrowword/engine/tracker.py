"""Incremental correctness tracking with persistent per-cell error marks.

Error marks have hysteresis: a run that still has blank expected cells never
sets or clears marks. Only a fully filled run is re-judged, and a cell the
player just edited loses its mark immediately.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set

from ..core.constants import Position
from ..core.models import Segment
from .grid import PuzzleGrid

FLASH_DURATION_MS = 600


@dataclass(frozen=True)
class CorrectnessState:
    """Tracker output for one evaluation pass.

    ``errors`` is the only field that carries over between passes; the rest
    is derived from the grid each time.
    """

    errors: FrozenSet[Position] = frozenset()
    solved_segment_ids: FrozenSet[str] = frozenset()
    newly_solved_ids: FrozenSet[str] = frozenset()
    complete: bool = False


def has_expectation(grid: PuzzleGrid, segment: Segment) -> bool:
    return any(grid.cell_at(pos).expected_letter for pos in segment.cells)


def is_fully_filled(grid: PuzzleGrid, segment: Segment) -> bool:
    """Every cell that expects a letter holds one."""

    return all(
        grid.cell_at(pos).letter
        for pos in segment.cells
        if grid.cell_at(pos).expected_letter
    )


def is_cell_wrong(grid: PuzzleGrid, position: Position) -> bool:
    cell = grid.cell_at(position)
    if cell.expected_letter:
        return cell.letter != cell.expected_letter
    return bool(cell.letter)


def wrong_cells(grid: PuzzleGrid, segment: Segment) -> Set[Position]:
    return {pos for pos in segment.cells if is_cell_wrong(grid, pos)}


def is_segment_solved(grid: PuzzleGrid, segment: Segment) -> bool:
    return (
        has_expectation(grid, segment)
        and is_fully_filled(grid, segment)
        and not wrong_cells(grid, segment)
    )


def solved_segment_ids(grid: PuzzleGrid, segments: Iterable[Segment]) -> FrozenSet[str]:
    return frozenset(segment.id for segment in segments if is_segment_solved(grid, segment))


def is_puzzle_complete(grid: PuzzleGrid) -> bool:
    """True iff some cell expects a letter and every such cell matches."""

    expected_seen = False
    for position in grid.positions():
        cell = grid.cell_at(position)
        if not cell.expected_letter:
            continue
        expected_seen = True
        if cell.letter != cell.expected_letter:
            return False
    return expected_seen


def evaluate_correctness(
    previous: CorrectnessState,
    grid: PuzzleGrid,
    segments: Sequence[Segment],
    touched: Iterable[Position] = (),
) -> CorrectnessState:
    """Compute the next tracker state after an edit.

    ``grid`` must carry expected letters (see :func:`map_expected`).
    ``touched`` lists the cells the edit wrote to or erased.
    """

    errors: Set[Position] = set(previous.errors)
    errors.difference_update(touched)

    for segment in segments:
        if not has_expectation(grid, segment):
            continue
        if not is_fully_filled(grid, segment):
            continue
        errors.difference_update(segment.cells)
        errors.update(wrong_cells(grid, segment))

    solved = solved_segment_ids(grid, segments)
    return CorrectnessState(
        errors=frozenset(errors),
        solved_segment_ids=solved,
        newly_solved_ids=solved - previous.solved_segment_ids,
        complete=is_puzzle_complete(grid),
    )


@dataclass
class HighlightSchedule:
    """Time-boxed "just solved" highlights, one per segment id."""

    duration_ms: int = FLASH_DURATION_MS
    clock: Callable[[], float] = time.monotonic
    _expiry: Dict[str, float] = field(default_factory=dict)

    def flash(self, segment_ids: Iterable[str]) -> None:
        deadline = self.clock() + self.duration_ms / 1000.0
        for segment_id in segment_ids:
            self._expiry[segment_id] = deadline

    def active(self) -> FrozenSet[str]:
        """Segment ids still highlighted; expired entries are dropped."""

        now = self.clock()
        expired: List[str] = [sid for sid, deadline in self._expiry.items() if deadline <= now]
        for segment_id in expired:
            del self._expiry[segment_id]
        return frozenset(self._expiry)

    def clear(self) -> None:
        self._expiry.clear()


def first_error(state: CorrectnessState) -> Optional[Position]:
    """Top-left-most flagged cell, handy for jumping the cursor."""

    return min(state.errors) if state.errors else None
