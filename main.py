"""CLI entrypoint for inspecting arrowword puzzles and leaderboards."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import List, Tuple

from arrowword.core.exceptions import PuzzleError, RestoreError, ScoreStoreError
from arrowword.core.models import ScoreRow
from arrowword.data.leaderboard import LeaderboardConfig, LeaderboardView, ViewMode
from arrowword.engine.grid import PuzzleGrid
from arrowword.engine.segments import arrow_starts, completed_segment_ids
from arrowword.engine.session import PuzzleSession
from arrowword.engine.tracker import first_error
from arrowword.engine.validator import PuzzleValidator
from arrowword.io.score_client import ScoreStoreClient, ScoreStoreConfig, rows_from_payload
from arrowword.io.sharing import document_from_text, make_share_fragment, parse_share_fragment
from arrowword.utils.logger import configure_logging, parse_level
from arrowword.utils.pretty import format_leaderboard, format_segments, pretty_print_grid


def add_puzzle_source(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="Puzzle document (JSON) to load")
    source.add_argument("--code", type=str, help="Share fragment ('p=...&lock=1') or bare share code")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect Swedish crossword puzzles and highscores",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    show = commands.add_parser("show", help="Render a puzzle with its answer runs")
    add_puzzle_source(show)

    check = commands.add_parser("check", help="Evaluate the letters filled in so far")
    add_puzzle_source(check)

    share = commands.add_parser("share", help="Encode a puzzle document as a share fragment")
    share.add_argument("--file", type=Path, required=True, help="Puzzle document (JSON) to encode")
    share.add_argument("--lock", action="store_true", help="Produce a solve-only link without letters")

    board = commands.add_parser("leaderboard", help="Show a highscore view")
    board_source = board.add_mutually_exclusive_group()
    board_source.add_argument("--rows-file", type=Path, help="JSON file with highscore rows")
    board_source.add_argument("--url", type=str, help="Highscore endpoint (default from environment)")
    board.add_argument(
        "--mode",
        type=str,
        choices=[mode.value for mode in ViewMode],
        default=ViewMode.TODAY.value,
        help="Which runs to list",
    )
    board.add_argument("--date", type=date.fromisoformat, help="Reference date (YYYY-MM-DD)")
    board.add_argument("--search", type=str, help="Nickname substring to locate")
    board.add_argument("--page", type=int, default=0, help="Zero-based page index")
    board.add_argument("--page-size", type=int, default=10, help="Rows per page")
    return parser


def load_puzzle(args: argparse.Namespace) -> Tuple[PuzzleGrid, bool]:
    if args.file:
        return document_from_text(args.file.read_text(encoding="utf-8")), False
    fragment = args.code if "p=" in args.code else f"p={args.code}"
    shared = parse_share_fragment(fragment)
    return shared.grid, shared.locked


def load_rows(args: argparse.Namespace) -> List[ScoreRow]:
    if args.rows_file:
        try:
            data = json.loads(args.rows_file.read_text(encoding="utf-8"))
        except ValueError as exc:
            raise ScoreStoreError(f"Rows file {args.rows_file} is not valid JSON: {exc}") from exc
        return rows_from_payload(data)
    config = ScoreStoreConfig(url=args.url) if args.url else ScoreStoreConfig()
    return ScoreStoreClient(config).fetch_rows()


def run_show(args: argparse.Namespace) -> int:
    grid, locked = load_puzzle(args)
    session = PuzzleSession(grid, locked=locked)
    pretty_print_grid(
        session.grid,
        starts=arrow_starts(session.segments),
        label=f"{grid.size}x{grid.size} puzzle{' (locked)' if locked else ''}",
    )
    print()
    print(format_segments(session.grid, session.segments))
    word = session.grid.solution_word()
    if word:
        print(f"\nSolution word: {word}")
    result = PuzzleValidator().validate(session.grid, session.segments)
    for message in result.messages:
        print(f"warning: {message}")
    return 0


def run_check(args: argparse.Namespace) -> int:
    grid, locked = load_puzzle(args)
    session = PuzzleSession(grid, locked=locked)
    pretty_print_grid(session.grid, errors=session.errors)
    total = len(session.segments)
    filled = len(completed_segment_ids(session.grid, session.segments))
    solved = len(session.state.solved_segment_ids)
    print(f"\nFilled runs: {filled}/{total}")
    print(f"Solved runs: {solved}/{total}")
    print(f"Wrong cells: {sorted(session.errors)}")
    jump = first_error(session.state)
    if jump is not None:
        print(f"First wrong cell: row {jump[0]}, col {jump[1]}")
    print("Puzzle complete!" if session.complete else "Puzzle not complete yet.")
    return 0 if session.complete else 1


def run_share(args: argparse.Namespace) -> int:
    grid = document_from_text(args.file.read_text(encoding="utf-8"))
    print(f"#{make_share_fragment(grid, lock=args.lock)}")
    return 0


def run_leaderboard(args: argparse.Namespace) -> int:
    rows = load_rows(args)
    view = LeaderboardView(config=LeaderboardConfig(page_size=args.page_size))
    view.set_mode(args.mode)
    if args.date:
        view.set_reference_date(args.date)
    view.go_to_page(args.page)
    page = view.search(rows, args.search) if args.search else view.render(rows)
    print(format_leaderboard(page))
    return 0


COMMANDS = {
    "show": run_show,
    "check": run_check,
    "share": run_share,
    "leaderboard": run_leaderboard,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(parse_level(args.log_level))

    try:
        return COMMANDS[args.command](args)
    except RestoreError as exc:
        print(f"Could not restore puzzle: {exc}", file=sys.stderr)
        return 2
    except PuzzleError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
