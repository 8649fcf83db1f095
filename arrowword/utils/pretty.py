"""Pretty-print helpers for puzzles, run times and leaderboards."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, AbstractSet, Iterable, Mapping, Optional

from ..core.constants import ArrowVariant, Direction, Position

if TYPE_CHECKING:
    from ..core.models import Cell, Segment
    from ..data.leaderboard import LeaderboardPage
    from ..engine.grid import PuzzleGrid


ARROW_SYMBOLS = {
    ArrowVariant.LEFT_CLUE_RIGHT: "→",
    ArrowVariant.ABOVE_CLUE_DOWN: "↓",
    ArrowVariant.LEFT_CLUE_DOWN: "↴",
    ArrowVariant.ABOVE_CLUE_RIGHT: "↳",
    ArrowVariant.ABOVE_OF_CLUE_RIGHT: "↱",
    ArrowVariant.LEFT_OF_CLUE_DOWN: "↙",
}

# blank cell where runs begin
START_SYMBOLS = {
    frozenset({Direction.RIGHT}): ">",
    frozenset({Direction.DOWN}): "v",
    frozenset({Direction.RIGHT, Direction.DOWN}): "+",
}


def cell_symbol(
    cell: Cell,
    flagged: bool = False,
    starts: AbstractSet[Direction] = frozenset(),
) -> str:
    if cell.is_clue():
        return ARROW_SYMBOLS.get(cell.clue.arrow_variant, "#")
    if cell.letter:
        return cell.letter.lower() if flagged else cell.letter
    return START_SYMBOLS.get(frozenset(starts), ".")


def format_grid(
    grid: PuzzleGrid,
    errors: AbstractSet[Position] = frozenset(),
    starts: Optional[Mapping[Position, AbstractSet[Direction]]] = None,
) -> str:
    """Render the grid; flagged letters are shown in lowercase.

    ``starts`` (see :func:`arrowword.engine.segments.arrow_starts`) marks the
    blank cells where answer runs begin.
    """

    starts = starts or {}
    width = grid.bounds.cols
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r in range(grid.bounds.rows):
        row_cells = [
            cell_symbol(grid.cell(r, c), (r, c) in errors, starts.get((r, c), frozenset()))
            for c in range(width)
        ]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def format_segments(grid: PuzzleGrid, segments: Iterable[Segment]) -> str:
    lines = []
    for segment in segments:
        typed = "".join(grid.cell_at(pos).letter or "_" for pos in segment.cells)
        lines.append(
            f"{segment.id:>6} {segment.direction.value:<5} len={segment.length:<2} "
            f"{typed:<12} {segment.clue.prompt_text}"
        )
    return "\n".join(lines)


def format_time(ms: int) -> str:
    """``m:ss.hh`` as shown on the run timer."""

    total = max(0, int(ms))
    minutes = total // 60000
    seconds = (total % 60000) // 1000
    hundredths = (total % 1000) // 10
    return f"{minutes}:{seconds:02d}.{hundredths:02d}"


def format_leaderboard(page: LeaderboardPage) -> str:
    if page.is_empty:
        return "No runs yet."
    lines = []
    for offset, row in enumerate(page.rows):
        rank = page.first_rank + offset
        time_text = format_time(row.time_ms) if row.completed_ms is not None else "reload"
        lines.append(f"{rank:>3}. {row.nickname:<20} {time_text:>9}")
    lines.append(f"page {page.page_index + 1}/{page.page_count} ({page.total_count} runs)")
    if page.search is not None:
        if page.search.found:
            lines.append(f"'{page.search.term}' found at rank {page.search.rank}")
        else:
            lines.append(f"'{page.search.term}' not found")
    return "\n".join(lines)


def pretty_print_grid(
    grid: PuzzleGrid,
    *,
    errors: AbstractSet[Position] = frozenset(),
    starts: Optional[Mapping[Position, AbstractSet[Direction]]] = None,
    label: Optional[str] = None,
    stream=None,
) -> None:
    """Print the puzzle grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid, errors, starts), file=stream)
