"""Authoring checks for a puzzle before it is shared for solving."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.constants import Position
from ..core.exceptions import ValidationError
from ..core.models import Segment
from ..utils.logger import get_logger
from .expected import answer_letters
from .grid import PuzzleGrid
from .segments import build_segments, segments_by_cell


LOGGER = get_logger(__name__)


def segment_letter(segment: Segment, position: Position) -> str:
    """Letter the answer of ``segment`` puts at ``position`` ("" when none)."""

    letters = answer_letters(segment)
    index = segment.index_of(position)
    return letters[index] if index < len(letters) else ""


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class PuzzleValidator:
    """Runs deterministic validation over an authored grid.

    Unlike the expected-letter mapper, which silently lets the last run win,
    the validator reports every crossing where two answers disagree.
    """

    def validate(self, grid: PuzzleGrid, segments: Optional[Sequence[Segment]] = None) -> ValidationResult:
        segments = build_segments(grid) if segments is None else segments
        messages: List[str] = []
        messages.extend(self._check_crossings(segments))
        messages.extend(self._check_answer_lengths(segments))
        messages.extend(self._check_solution_marks(grid))
        for message in messages:
            LOGGER.warning("Puzzle check: %s", message)
        return ValidationResult(ok=not messages, messages=messages)

    def ensure_valid(self, grid: PuzzleGrid) -> None:
        result = self.validate(grid)
        if not result.ok:
            raise ValidationError("; ".join(result.messages))

    @staticmethod
    def _check_crossings(segments: Sequence[Segment]) -> List[str]:
        messages: List[str] = []
        for position, covering in segments_by_cell(segments).items():
            claims = [
                (segment.id, segment_letter(segment, position))
                for segment in covering
                if segment_letter(segment, position)
            ]
            for (first_id, first), (other_id, other) in zip(claims, claims[1:]):
                if first != other:
                    messages.append(
                        f"Conflict at {position}: run {first_id} expects "
                        f"'{first}', run {other_id} expects '{other}'"
                    )
        return messages

    @staticmethod
    def _check_answer_lengths(segments: Sequence[Segment]) -> List[str]:
        messages: List[str] = []
        for segment in segments:
            letters = answer_letters(segment)
            if len(letters) > segment.length:
                messages.append(
                    f"Answer '{letters}' of run {segment.id} needs {len(letters)} cells, "
                    f"run has {segment.length}"
                )
        return messages

    @staticmethod
    def _check_solution_marks(grid: PuzzleGrid) -> List[str]:
        numbers = sorted(
            grid.cell_at(pos).solution_mark_number
            for pos in grid.positions()
            if grid.cell_at(pos).solution_mark_number is not None
        )
        if numbers != list(range(1, len(numbers) + 1)):
            return [f"Solution marks are not numbered 1..{len(numbers)}: {numbers}"]
        return []
