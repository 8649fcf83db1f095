"""Edit dispatch: apply one edit, then rebuild the derived puzzle state.

Every edit runs the same ordered pipeline::

    segments -> expected letters -> correctness -> completion gate

Segments and expected letters are only rebuilt for edits that touch clues;
letter edits reuse the current segments.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple, Union

from ..core.constants import ArrowVariant, Position
from ..core.exceptions import InvalidEditError
from ..core.models import Segment
from ..utils.logger import get_logger
from .cursor import Cursor, rebind, select_cell
from .expected import map_expected
from .grid import GridConfig, PuzzleGrid
from .segments import build_segments, find_segment_for_clue
from .tracker import CorrectnessState, HighlightSchedule, evaluate_correctness


LOGGER = get_logger(__name__)


# ----------------------------------------------------------------------
# Edit events
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class SetLetter:
    position: Position
    letter: str


@dataclass(frozen=True)
class ClearLetter:
    position: Position


@dataclass(frozen=True)
class PlaceClue:
    """Add a clue or replace the one already at ``position``."""

    position: Position
    prompt_text: str
    variant: ArrowVariant = ArrowVariant.LEFT_CLUE_RIGHT
    answer: Optional[str] = None


@dataclass(frozen=True)
class RemoveClue:
    position: Position


@dataclass(frozen=True)
class ToggleSolutionMark:
    position: Position


@dataclass(frozen=True)
class ResetSolutionMarks:
    pass


@dataclass(frozen=True)
class ClearAnswers:
    pass


@dataclass(frozen=True)
class ClearPuzzle:
    pass


Edit = Union[
    SetLetter,
    ClearLetter,
    PlaceClue,
    RemoveClue,
    ToggleSolutionMark,
    ResetSolutionMarks,
    ClearAnswers,
    ClearPuzzle,
]

STRUCTURAL_EDITS = (PlaceClue, RemoveClue, ToggleSolutionMark, ResetSolutionMarks)


@dataclass(frozen=True)
class EditOutcome:
    """What changed after one edit went through the pipeline."""

    edit: Edit
    state: CorrectnessState
    segments_rebuilt: bool = False
    just_completed: bool = False
    win_time_ms: Optional[int] = None

    @property
    def newly_solved_ids(self):
        return self.state.newly_solved_ids


class RunClock:
    """Stopwatch for a timed run; the clock source is injectable for tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started_at: Optional[float] = None
        self._stopped_ms: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._started_at is not None and self._stopped_ms is None

    def start(self) -> None:
        self._started_at = self._clock()
        self._stopped_ms = None

    def stop(self) -> int:
        if self._started_at is None:
            return 0
        if self._stopped_ms is None:
            self._stopped_ms = self._measure()
        return self._stopped_ms

    def reset(self) -> None:
        self._started_at = None
        self._stopped_ms = None

    @property
    def elapsed_ms(self) -> int:
        if self._started_at is None:
            return 0
        if self._stopped_ms is not None:
            return self._stopped_ms
        return self._measure()

    def _measure(self) -> int:
        return max(0, int((self._clock() - self._started_at) * 1000))


class PuzzleSession:
    """Owns the mutable grid and the correctness tracker state."""

    def __init__(
        self,
        grid: Optional[PuzzleGrid] = None,
        *,
        locked: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.locked = locked
        self.grid = grid.copy() if grid is not None else PuzzleGrid()
        self.segments: List[Segment] = []
        self.state = CorrectnessState()
        self.cursor: Optional[Cursor] = None
        self.highlights = HighlightSchedule(clock=clock)
        self.run_clock = RunClock(clock)
        self.win_time_ms: Optional[int] = None
        self._rebuild()
        self.state = evaluate_correctness(CorrectnessState(), self.grid, self.segments)
        # A restored grid that is already solved must not flash or "win" again.
        self.state = replace(self.state, newly_solved_ids=frozenset())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def errors(self):
        return self.state.errors

    @property
    def complete(self) -> bool:
        return self.state.complete

    def segment_for_clue(self, position: Position) -> Optional[Segment]:
        return find_segment_for_clue(self.segments, position)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def apply(self, edit: Edit) -> EditOutcome:
        """Apply ``edit`` to the grid and recompute everything derived from it."""

        if self.locked and isinstance(edit, STRUCTURAL_EDITS):
            raise InvalidEditError("Puzzle is locked for solving; structure cannot change")

        previous = self.state
        rebuilt = False
        touched: Tuple[Position, ...] = ()

        if isinstance(edit, SetLetter):
            self.grid.set_letter(edit.position, edit.letter)
            touched = (edit.position,)
        elif isinstance(edit, ClearLetter):
            self.grid.clear_letter(edit.position)
            touched = (edit.position,)
        elif isinstance(edit, PlaceClue):
            self.grid.place_clue(edit.position, edit.prompt_text, edit.variant, edit.answer)
            touched = (edit.position,)
            rebuilt = True
        elif isinstance(edit, RemoveClue):
            segment = self.segment_for_clue(edit.position)
            if segment is not None:
                self.grid.clear_solution_marks(segment.cells)
            self.grid.remove_clue(edit.position)
            touched = (edit.position,)
            rebuilt = True
        elif isinstance(edit, ToggleSolutionMark):
            self.grid.toggle_solution_mark(edit.position)
        elif isinstance(edit, ResetSolutionMarks):
            self.grid.reset_solution_marks()
        elif isinstance(edit, ClearAnswers):
            self.grid.clear_answers()
            previous = replace(previous, errors=frozenset())
            self.highlights.clear()
        elif isinstance(edit, ClearPuzzle):
            self.grid = PuzzleGrid(GridConfig(size=self.grid.size))
            previous = CorrectnessState()
            self.cursor = None
            self.locked = False
            self.highlights.clear()
            self.run_clock.reset()
            self.win_time_ms = None
            rebuilt = True
        else:
            raise InvalidEditError(f"Unsupported edit: {edit!r}")

        if rebuilt:
            self._rebuild()

        self.state = evaluate_correctness(previous, self.grid, self.segments, touched)
        if self.state.newly_solved_ids:
            self.highlights.flash(self.state.newly_solved_ids)

        just_completed = self.state.complete and not previous.complete
        if just_completed:
            self.win_time_ms = self.run_clock.stop() if self.run_clock.running else None
            self.cursor = None
            LOGGER.info("Puzzle completed (time: %s ms)", self.win_time_ms)

        return EditOutcome(
            edit=edit,
            state=self.state,
            segments_rebuilt=rebuilt,
            just_completed=just_completed,
            win_time_ms=self.win_time_ms if just_completed else None,
        )

    def apply_all(self, edits: Sequence[Edit]) -> List[EditOutcome]:
        return [self.apply(edit) for edit in edits]

    def _rebuild(self) -> None:
        self.segments = build_segments(self.grid)
        self.grid = map_expected(self.grid, self.segments)
        self.cursor = rebind(self.cursor, self.segments)

    # ------------------------------------------------------------------
    # Timed run
    # ------------------------------------------------------------------
    def start_run(self) -> None:
        self.win_time_ms = None
        self.run_clock.start()

    # ------------------------------------------------------------------
    # Cursor and typing
    # ------------------------------------------------------------------
    def select(self, position: Position) -> Optional[Cursor]:
        self.cursor = select_cell(self.segments, position, self.cursor)
        return self.cursor

    def type_letter(self, letter: str) -> Optional[EditOutcome]:
        """Write ``letter`` at the cursor and move to the next cell of the run."""

        if self.cursor is None:
            return None
        cursor = self.cursor
        outcome = self.apply(SetLetter(cursor.position, letter))
        if self.cursor is not None:
            self.cursor = cursor.advanced()
        return outcome

    def backspace(self) -> Optional[EditOutcome]:
        """Erase the active cell, or step back and erase the previous one."""

        if self.cursor is None:
            return None
        if self.grid.cell_at(self.cursor.position).letter:
            return self.apply(ClearLetter(self.cursor.position))
        if self.cursor.index == 0:
            return None
        self.cursor = self.cursor.retreated()
        return self.apply(ClearLetter(self.cursor.position))
