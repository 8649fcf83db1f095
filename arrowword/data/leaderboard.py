"""Leaderboard aggregation over raw highscore rows.

Processing order is fixed: filter by calendar date, reduce to one row per
nickname (best-time view only), sort, search, paginate. Rows are never
mutated; every view is derived fresh from the raw list.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.models import RunOutcome, ScoreRow
from ..utils.logger import get_logger
from .normalization import ANONYMOUS_NICKNAME_KEY, nickname_key


LOGGER = get_logger(__name__)

DEFAULT_PAGE_SIZE = 10


class ViewMode(str, Enum):
    """Which slice of the highscores the leaderboard shows."""

    TODAY = "today"
    BY_DATE = "by-date"
    BEST_PER_NICKNAME = "best-per-nickname"


@dataclass
class LeaderboardConfig:
    """Configuration for leaderboard pagination and grouping."""

    page_size: int = DEFAULT_PAGE_SIZE
    nickname_placeholder: str = ANONYMOUS_NICKNAME_KEY


@dataclass(frozen=True)
class LeaderboardQuery:
    mode: ViewMode = ViewMode.TODAY
    reference_date: Optional[date] = None
    search_term: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE
    page_index: int = 0
    nickname_placeholder: str = ANONYMOUS_NICKNAME_KEY


@dataclass(frozen=True)
class SearchOutcome:
    """Result of a nickname search; ``rank`` is 1-based, None when not found."""

    term: str
    rank: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.rank is not None


@dataclass(frozen=True)
class LeaderboardPage:
    rows: List[ScoreRow]
    total_count: int
    page_index: int
    page_count: int
    page_size: int
    search: Optional[SearchOutcome] = None

    @property
    def first_rank(self) -> int:
        """Rank of the first row on this page."""
        return self.page_index * self.page_size + 1

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0


# ----------------------------------------------------------------------
# Pipeline steps
# ----------------------------------------------------------------------
def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def filter_rows(
    rows: Iterable[ScoreRow],
    mode: ViewMode,
    reference_date: Optional[date] = None,
    today: Optional[date] = None,
) -> List[ScoreRow]:
    """Keep rows created on the day the view mode asks for."""

    if mode == ViewMode.TODAY:
        day = today or utc_today()
    else:
        day = reference_date or today or utc_today()
    day_key = day.isoformat()

    selected = [row for row in rows if row.created_date == day_key]
    if mode == ViewMode.BEST_PER_NICKNAME:
        selected = [row for row in selected if row.outcome is RunOutcome.COMPLETED]
    return selected


def _beats(candidate: ScoreRow, current: ScoreRow) -> bool:
    if candidate.outcome is RunOutcome.ABANDONED_VIA_RELOAD:
        return False
    if current.outcome is RunOutcome.ABANDONED_VIA_RELOAD:
        return True
    return candidate.time_ms < current.time_ms


def best_per_nickname(
    rows: Iterable[ScoreRow],
    placeholder: str = ANONYMOUS_NICKNAME_KEY,
) -> List[ScoreRow]:
    """One row per normalized nickname: the fastest real completion."""

    best: Dict[str, ScoreRow] = {}
    for row in rows:
        key = nickname_key(row.nickname, placeholder)
        current = best.get(key)
        if current is None or _beats(row, current):
            best[key] = row
    return list(best.values())


def sort_key(row: ScoreRow) -> tuple:
    return (row.outcome is RunOutcome.ABANDONED_VIA_RELOAD, row.time_ms)


def sort_rows(rows: Iterable[ScoreRow]) -> List[ScoreRow]:
    """Ascending by time; reload sentinels go last whatever their value."""

    return sorted(rows, key=sort_key)


def search_rank(rows: Sequence[ScoreRow], term: str) -> Optional[int]:
    """1-based rank of the first row whose nickname contains ``term``."""

    needle = term.strip().casefold()
    if not needle:
        return None
    for index, row in enumerate(rows):
        if needle in (row.nickname or "").casefold():
            return index + 1
    return None


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total else 0


def clamp_page(page_index: int, total: int, page_size: int) -> int:
    last = max(page_count(total, page_size) - 1, 0)
    return min(max(page_index, 0), last)


def aggregate(
    rows: Iterable[ScoreRow],
    query: LeaderboardQuery,
    today: Optional[date] = None,
) -> LeaderboardPage:
    """Run the full filter/reduce/sort/search/paginate pipeline."""

    if query.page_size < 1:
        raise ValueError(f"page_size must be positive, got {query.page_size}")

    selected = filter_rows(rows, query.mode, query.reference_date, today)
    if query.mode == ViewMode.BEST_PER_NICKNAME:
        selected = best_per_nickname(selected, query.nickname_placeholder)
    ordered = sort_rows(selected)

    page_index = query.page_index
    search: Optional[SearchOutcome] = None
    if query.search_term and query.search_term.strip():
        rank = search_rank(ordered, query.search_term)
        search = SearchOutcome(term=query.search_term, rank=rank)
        if rank is not None:
            page_index = (rank - 1) // query.page_size

    total = len(ordered)
    page_index = clamp_page(page_index, total, query.page_size)
    start = page_index * query.page_size
    LOGGER.debug(
        "Leaderboard %s: %d rows, page %d/%d",
        query.mode.value, total, page_index + 1, page_count(total, query.page_size),
    )
    return LeaderboardPage(
        rows=ordered[start:start + query.page_size],
        total_count=total,
        page_index=page_index,
        page_count=page_count(total, query.page_size),
        page_size=query.page_size,
        search=search,
    )


# ----------------------------------------------------------------------
# View state
# ----------------------------------------------------------------------
@dataclass
class LeaderboardView:
    """Mutable view parameters driven by the leaderboard screen.

    Switching the mode or the reference date starts over at the first page and
    forgets the last search result.
    """

    config: LeaderboardConfig = field(default_factory=LeaderboardConfig)
    mode: ViewMode = ViewMode.TODAY
    reference_date: Optional[date] = None
    page_index: int = 0
    search_outcome: Optional[SearchOutcome] = None
    today: Optional[date] = None

    def set_mode(self, mode: ViewMode | str) -> None:
        mode = ViewMode(mode)
        if mode != self.mode:
            self.mode = mode
            self._reset()

    def set_reference_date(self, reference_date: date) -> None:
        if reference_date != self.reference_date:
            self.reference_date = reference_date
            self._reset()

    def go_to_page(self, page_index: int) -> None:
        self.page_index = page_index

    def next_page(self) -> None:
        self.page_index += 1

    def previous_page(self) -> None:
        self.page_index = max(self.page_index - 1, 0)

    def search(self, rows: Iterable[ScoreRow], term: str) -> LeaderboardPage:
        page = aggregate(rows, replace(self._query(), search_term=term), self.today)
        self.search_outcome = page.search
        self.page_index = page.page_index
        return page

    def render(self, rows: Iterable[ScoreRow]) -> LeaderboardPage:
        page = aggregate(rows, self._query(), self.today)
        self.page_index = page.page_index
        return replace(page, search=self.search_outcome)

    def _query(self) -> LeaderboardQuery:
        return LeaderboardQuery(
            mode=self.mode,
            reference_date=self.reference_date,
            page_size=self.config.page_size,
            page_index=self.page_index,
            nickname_placeholder=self.config.nickname_placeholder,
        )

    def _reset(self) -> None:
        self.page_index = 0
        self.search_outcome = None
