"""Data models shared by the puzzle engine and the leaderboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .constants import ArrowVariant, CellKind, Direction, Position


@dataclass(frozen=True)
class Clue:
    """Represents the content of a clue cell."""

    prompt_text: str
    arrow_variant: ArrowVariant = ArrowVariant.LEFT_CLUE_RIGHT
    answer: Optional[str] = None


@dataclass
class Cell:
    """Represents a grid cell with metadata."""

    kind: CellKind = CellKind.EMPTY
    clue: Optional[Clue] = None
    letter: str = ""
    solution_mark_number: Optional[int] = None
    expected_letter: Optional[str] = field(default=None, compare=False)

    def is_clue(self) -> bool:
        return self.kind == CellKind.CLUE and self.clue is not None

    def is_blank(self) -> bool:
        return not self.letter


@dataclass(frozen=True)
class Segment:
    """An answer run governed by one clue.

    Segments are rebuilt from the grid after every structural change and are
    never mutated; ``id`` only depends on the clue cell position.
    """

    id: str
    clue_position: Position
    direction: Direction
    start_position: Position
    cells: Tuple[Position, ...]
    clue: Clue

    @property
    def length(self) -> int:
        return len(self.cells)

    def index_of(self, position: Position) -> int:
        return self.cells.index(position)

    def covers(self, position: Position) -> bool:
        return position in self.cells


class RunOutcome(str, Enum):
    """How a timed run ended."""

    COMPLETED = "completed"
    ABANDONED_VIA_RELOAD = "abandoned_via_reload"


RELOAD_SENTINEL_MS = 0


@dataclass(frozen=True)
class ScoreRow:
    """A single leaderboard entry as delivered by the highscore store."""

    id: Optional[int]
    nickname: str
    time_ms: int
    created_at: datetime

    @property
    def outcome(self) -> RunOutcome:
        if self.time_ms == RELOAD_SENTINEL_MS:
            return RunOutcome.ABANDONED_VIA_RELOAD
        return RunOutcome.COMPLETED

    @property
    def completed_ms(self) -> Optional[int]:
        if self.outcome is RunOutcome.ABANDONED_VIA_RELOAD:
            return None
        return self.time_ms

    @property
    def created_date(self) -> str:
        """Calendar date of ``created_at`` in UTC as ``YYYY-MM-DD``."""

        stamp = self.created_at
        if stamp.tzinfo is not None:
            stamp = stamp.astimezone(timezone.utc)
        return stamp.date().isoformat()

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ScoreRow":
        created = payload.get("created_at")
        if isinstance(created, datetime):
            created_at = created
        elif created:
            created_at = datetime.fromisoformat(str(created).replace("Z", "+00:00"))
        else:
            created_at = datetime.now(timezone.utc)
        raw_id = payload.get("id")
        return cls(
            id=int(raw_id) if raw_id is not None else None,
            nickname=str(payload.get("nickname") or ""),
            time_ms=int(payload.get("time_ms") or 0),
            created_at=created_at,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nickname": self.nickname,
            "time_ms": self.time_ms,
            "created_at": self.created_at.isoformat(),
        }
