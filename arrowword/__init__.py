"""Logic core for a Swedish crossword (arrowword) editor and player.

This package exposes the public API surface via:

- ``arrowword.engine.session.PuzzleSession``: applies edits and recomputes
  runs, expected letters, error marks and completion.
- ``arrowword.engine.segments.build_segments`` and
  ``arrowword.engine.expected.map_expected``: the pure derivation steps.
- ``arrowword.data.leaderboard`` helpers: highscore views.
- ``arrowword.io.sharing`` and ``arrowword.io.score_client``: snapshot
  encoding and the highscore service client.
"""

from .data.leaderboard import LeaderboardQuery, LeaderboardView, ViewMode, aggregate
from .engine.expected import map_expected
from .engine.grid import GridConfig, PuzzleGrid
from .engine.segments import build_segments
from .engine.session import PuzzleSession
from .engine.tracker import CorrectnessState, evaluate_correctness, is_puzzle_complete

__all__ = [
    "CorrectnessState",
    "GridConfig",
    "LeaderboardQuery",
    "LeaderboardView",
    "PuzzleGrid",
    "PuzzleSession",
    "ViewMode",
    "aggregate",
    "build_segments",
    "evaluate_correctness",
    "is_puzzle_complete",
    "map_expected",
]

__version__ = "0.1.0"
