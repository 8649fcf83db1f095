"""Grid representation and edit primitives."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

from ..core.constants import (
    DEFAULT_GRID_SIZE,
    DEFAULT_VARIANT,
    ArrowVariant,
    Bounds,
    CellKind,
    Position,
)
from ..core.exceptions import InvalidEditError, RestoreError
from ..core.models import Cell, Clue
from ..data.normalization import normalize_answer, normalize_letter
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class GridConfig:
    """Configuration values driving the grid layout."""

    size: int = DEFAULT_GRID_SIZE

    def bounds(self) -> Bounds:
        return Bounds(rows=self.size, cols=self.size)


class PuzzleGrid:
    """The canonical N×N cell array with the edits the editor can perform.

    The grid itself has no notion of answers runs or correctness; those are
    derived by :mod:`arrowword.engine.segments` and friends after each edit.
    """

    def __init__(self, config: Optional[GridConfig] = None) -> None:
        self.config = config or GridConfig()
        if self.config.size < 1:
            raise ValueError(f"Grid size must be positive, got {self.config.size}")
        self.bounds = self.config.bounds()
        self.cells: List[List[Cell]] = [
            [Cell() for _ in range(self.bounds.cols)] for _ in range(self.bounds.rows)
        ]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        return self.bounds.rows

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def cell_at(self, position: Position) -> Cell:
        row, col = position
        return self.cells[row][col]

    def positions(self) -> Iterator[Position]:
        """Yield every position in row-major order."""

        for r in range(self.bounds.rows):
            for c in range(self.bounds.cols):
                yield r, c

    def is_clue(self, position: Position) -> bool:
        return self.bounds.contains(*position) and self.cell_at(position).is_clue()

    def has_expectations(self) -> bool:
        return any(self.cell_at(pos).expected_letter for pos in self.positions())

    def copy(self) -> "PuzzleGrid":
        clone = PuzzleGrid.__new__(PuzzleGrid)
        clone.config = self.config
        clone.bounds = self.bounds
        clone.cells = copy.deepcopy(self.cells)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PuzzleGrid):
            return NotImplemented
        return self.bounds == other.bounds and self.cells == other.cells

    # ------------------------------------------------------------------
    # Letter edits
    # ------------------------------------------------------------------
    def set_letter(self, position: Position, letter: str) -> str:
        """Write ``letter`` into an answer cell and return the stored letter."""

        cell = self._answer_cell(position)
        normalized = normalize_letter(letter)
        if normalized is None:
            raise InvalidEditError(f"Not a puzzle letter: {letter!r}")
        cell.letter = normalized
        return normalized

    def clear_letter(self, position: Position) -> None:
        self._answer_cell(position).letter = ""

    def clear_answers(self) -> None:
        """Blank every answer cell; clues and solution marks are kept."""

        for pos in self.positions():
            cell = self.cell_at(pos)
            if cell.kind == CellKind.EMPTY:
                cell.letter = ""

    def _answer_cell(self, position: Position) -> Cell:
        self._check_bounds(position)
        cell = self.cell_at(position)
        if cell.kind == CellKind.CLUE:
            raise InvalidEditError(f"Cell {position} holds a clue, not a letter")
        return cell

    def _check_bounds(self, position: Position) -> None:
        if not self.bounds.contains(*position):
            raise InvalidEditError(f"Position outside grid: {position}")

    # ------------------------------------------------------------------
    # Clue edits
    # ------------------------------------------------------------------
    def place_clue(
        self,
        position: Position,
        prompt_text: str,
        variant: ArrowVariant | str | None = None,
        answer: Optional[str] = None,
    ) -> Clue:
        """Create or replace the clue at ``position``."""

        self._check_bounds(position)
        try:
            arrow = ArrowVariant(variant) if variant else DEFAULT_VARIANT
        except ValueError as exc:
            raise InvalidEditError(f"Unknown arrow variant: {variant!r}") from exc
        clue = Clue(
            prompt_text=(prompt_text or "").strip(),
            arrow_variant=arrow,
            answer=normalize_answer(answer) or None,
        )
        cell = self.cell_at(position)
        if cell.solution_mark_number is not None:
            self._drop_solution_mark(cell.solution_mark_number)
        cell.kind = CellKind.CLUE
        cell.clue = clue
        cell.letter = ""
        cell.expected_letter = None
        LOGGER.debug("Clue placed at %s (%s)", position, arrow.value)
        return clue

    def remove_clue(self, position: Position) -> None:
        self._check_bounds(position)
        cell = self.cell_at(position)
        if cell.kind != CellKind.CLUE:
            raise InvalidEditError(f"No clue at {position}")
        cell.kind = CellKind.EMPTY
        cell.clue = None
        cell.letter = ""
        LOGGER.debug("Clue removed at %s", position)

    # ------------------------------------------------------------------
    # Solution marks
    # ------------------------------------------------------------------
    @property
    def next_solution_mark(self) -> int:
        marks = [self.cell_at(pos).solution_mark_number or 0 for pos in self.positions()]
        return max(marks, default=0) + 1

    def toggle_solution_mark(self, position: Position) -> Optional[int]:
        """Mark ``position`` with the next number, or unmark it.

        Returns the new number or None when the mark was removed. Marks stay
        dense: removing one shifts every higher number down by one.
        """

        cell = self._answer_cell(position)
        if cell.solution_mark_number is not None:
            self._drop_solution_mark(cell.solution_mark_number)
            return None
        cell.solution_mark_number = self.next_solution_mark
        return cell.solution_mark_number

    def clear_solution_marks(self, positions: Iterable[Position]) -> None:
        for pos in positions:
            number = self.cell_at(pos).solution_mark_number
            if number is not None:
                self._drop_solution_mark(number)

    def reset_solution_marks(self) -> None:
        for pos in self.positions():
            self.cell_at(pos).solution_mark_number = None

    def solution_letters(self) -> List[str]:
        """Letters of the marked cells ordered by mark number ("" when blank)."""

        marked = {}
        for pos in self.positions():
            cell = self.cell_at(pos)
            if cell.solution_mark_number:
                marked[cell.solution_mark_number] = cell.letter
        highest = max(marked, default=0)
        return [marked.get(number, "") for number in range(1, highest + 1)]

    def solution_word(self) -> str:
        return "".join(self.solution_letters())

    def _drop_solution_mark(self, number: int) -> None:
        for pos in self.positions():
            cell = self.cell_at(pos)
            if cell.solution_mark_number is None:
                continue
            if cell.solution_mark_number == number:
                cell.solution_mark_number = None
            elif cell.solution_mark_number > number:
                cell.solution_mark_number -= 1

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> Dict[str, List[List[dict]]]:
        """Snapshot without derived fields; ``expected_letter`` is never stored."""

        serialized: List[List[dict]] = []
        for row in self.cells:
            serialized_row: List[dict] = []
            for cell in row:
                entry: Dict[str, Any] = {"kind": cell.kind.value}
                if cell.clue is not None:
                    clue: Dict[str, Any] = {
                        "prompt_text": cell.clue.prompt_text,
                        "arrow_variant": cell.clue.arrow_variant.value,
                    }
                    if cell.clue.answer:
                        clue["answer"] = cell.clue.answer
                    entry["clue"] = clue
                entry["letter"] = cell.letter
                entry["solution_mark_number"] = cell.solution_mark_number
                serialized_row.append(entry)
            serialized.append(serialized_row)
        return {"cells": serialized}

    @classmethod
    def from_jsonable(cls, payload: Any) -> "PuzzleGrid":
        """Rebuild a grid from :meth:`to_jsonable` output.

        Any structural problem raises :class:`RestoreError`; no partially
        restored grid is ever returned.
        """

        rows = payload.get("cells") if isinstance(payload, dict) else None
        if not isinstance(rows, list) or not rows:
            raise RestoreError("Snapshot has no cell rows")
        size = len(rows)
        if any(not isinstance(row, list) or len(row) != size for row in rows):
            raise RestoreError(f"Snapshot is not a square {size}x{size} grid")

        grid = cls(GridConfig(size=size))
        for r, row in enumerate(rows):
            for c, entry in enumerate(row):
                grid.cells[r][c] = _cell_from_jsonable(entry, (r, c))
        return grid


def _cell_from_jsonable(entry: Any, position: Position) -> Cell:
    if not isinstance(entry, dict):
        raise RestoreError(f"Cell {position} is not an object")
    try:
        kind = CellKind(entry.get("kind", CellKind.EMPTY.value))
    except ValueError as exc:
        raise RestoreError(f"Cell {position} has unknown kind {entry.get('kind')!r}") from exc

    clue: Optional[Clue] = None
    raw_clue = entry.get("clue")
    if kind == CellKind.CLUE:
        if not isinstance(raw_clue, dict):
            raise RestoreError(f"Clue cell {position} is missing its clue")
        try:
            variant = ArrowVariant(raw_clue.get("arrow_variant") or DEFAULT_VARIANT)
        except ValueError as exc:
            raise RestoreError(f"Clue cell {position} has an unknown arrow variant") from exc
        clue = Clue(
            prompt_text=_text_field(raw_clue, "prompt_text", position),
            arrow_variant=variant,
            answer=normalize_answer(_text_field(raw_clue, "answer", position)) or None,
        )

    mark = entry.get("solution_mark_number")
    if mark is not None and (not isinstance(mark, int) or isinstance(mark, bool) or mark < 1):
        raise RestoreError(f"Cell {position} has an invalid solution mark {mark!r}")

    raw_letter = _text_field(entry, "letter", position)
    letter = "" if kind == CellKind.CLUE else normalize_letter(raw_letter) or ""
    return Cell(kind=kind, clue=clue, letter=letter, solution_mark_number=mark)


def _text_field(entry: Dict[str, Any], key: str, position: Position) -> str:
    value = entry.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise RestoreError(f"Cell {position} has a non-text {key} {value!r}")
    return value
