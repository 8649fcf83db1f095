"""Active-run cursor used while playing: selection, typing and backspace."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.constants import Direction, Position
from ..core.models import Segment
from .segments import find_segment_for_clue


@dataclass(frozen=True)
class Cursor:
    """The segment being typed into and the index of the active cell."""

    segment: Segment
    index: int = 0

    @property
    def position(self) -> Position:
        return self.segment.cells[self.index]

    def advanced(self) -> "Cursor":
        if self.index < self.segment.length - 1:
            return Cursor(self.segment, self.index + 1)
        return self

    def retreated(self) -> "Cursor":
        if self.index > 0:
            return Cursor(self.segment, self.index - 1)
        return self


def choose_segment(
    candidates: Sequence[Segment],
    active: Optional[Segment] = None,
) -> Optional[Segment]:
    """Pick the run to activate when a shared cell is selected.

    Keeps the active run if it covers the cell, otherwise prefers a RIGHT run
    over a DOWN run, falling back to build order.
    """

    if not candidates:
        return None
    if active is not None:
        for segment in candidates:
            if segment.id == active.id:
                return segment
    for segment in candidates:
        if segment.direction == Direction.RIGHT:
            return segment
    return candidates[0]


def select_cell(
    segments: Sequence[Segment],
    position: Position,
    active: Optional[Cursor] = None,
) -> Optional[Cursor]:
    """Return the cursor resulting from selecting ``position``.

    Selecting a clue cell activates its own run at the first cell; selecting
    an answer cell activates a covering run at that cell.
    """

    own = find_segment_for_clue(segments, position)
    if own is not None:
        return Cursor(own, 0) if own.cells else None

    candidates = [segment for segment in segments if segment.covers(position)]
    chosen = choose_segment(candidates, active.segment if active else None)
    if chosen is None:
        return None
    return Cursor(chosen, chosen.index_of(position))


def rebind(cursor: Optional[Cursor], segments: Sequence[Segment]) -> Optional[Cursor]:
    """Re-attach ``cursor`` to the rebuilt segment with the same id, if any."""

    if cursor is None:
        return None
    for segment in segments:
        if segment.id == cursor.segment.id and segment.cells:
            return Cursor(segment, min(cursor.index, segment.length - 1))
    return None
