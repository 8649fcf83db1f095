"""Map clue answers onto their runs as per-cell expected letters."""

from __future__ import annotations

from typing import Iterable, Optional

from ..core.models import Segment
from ..data.normalization import normalize_answer
from .grid import PuzzleGrid
from .segments import build_segments


def answer_letters(segment: Segment) -> str:
    return normalize_answer(segment.clue.answer)


def map_expected(grid: PuzzleGrid, segments: Optional[Iterable[Segment]] = None) -> PuzzleGrid:
    """Return a copy of ``grid`` with every ``expected_letter`` recomputed.

    Answers shorter than their run leave the trailing cells without an
    expectation; extra answer letters beyond the run are dropped. Crossing
    runs that disagree are not reconciled here, the last segment wins.
    """

    annotated = grid.copy()
    for position in annotated.positions():
        annotated.cell_at(position).expected_letter = None

    if segments is None:
        segments = build_segments(annotated)
    for segment in segments:
        letters = answer_letters(segment)
        if not letters:
            continue
        for position, letter in zip(segment.cells, letters):
            annotated.cell_at(position).expected_letter = letter
    return annotated
