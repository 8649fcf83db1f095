"""Shared constants and enumerations for the arrowword core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

DEFAULT_GRID_SIZE = 12

# Letters a cell may hold. ß stays a single character.
ALPHABET = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZÄÖÜß")

Position = Tuple[int, int]


class CellKind(str, Enum):
    """The two kinds of grid cells."""

    EMPTY = "empty"
    CLUE = "clue"


class Direction(str, Enum):
    """Writing directions of an answer run."""

    RIGHT = "RIGHT"
    DOWN = "DOWN"

    @property
    def step(self) -> Tuple[int, int]:
        return (0, 1) if self is Direction.RIGHT else (1, 0)


class ArrowVariant(str, Enum):
    """Arrow drawn in a clue cell; selects where the answer starts and runs."""

    LEFT_CLUE_RIGHT = "LEFT_CLUE_RIGHT"
    ABOVE_CLUE_DOWN = "ABOVE_CLUE_DOWN"
    LEFT_CLUE_DOWN = "LEFT_CLUE_DOWN"
    ABOVE_CLUE_RIGHT = "ABOVE_CLUE_RIGHT"
    ABOVE_OF_CLUE_RIGHT = "ABOVE_OF_CLUE_RIGHT"
    LEFT_OF_CLUE_DOWN = "LEFT_OF_CLUE_DOWN"


DEFAULT_VARIANT = ArrowVariant.LEFT_CLUE_RIGHT

# variant -> (row offset, col offset) of the start cell, run direction
VARIANT_LAYOUT: Dict[ArrowVariant, Tuple[Tuple[int, int], Direction]] = {
    ArrowVariant.LEFT_CLUE_RIGHT: ((0, 1), Direction.RIGHT),
    ArrowVariant.ABOVE_CLUE_DOWN: ((1, 0), Direction.DOWN),
    ArrowVariant.LEFT_CLUE_DOWN: ((0, 1), Direction.DOWN),
    ArrowVariant.ABOVE_CLUE_RIGHT: ((1, 0), Direction.RIGHT),
    ArrowVariant.ABOVE_OF_CLUE_RIGHT: ((-1, 0), Direction.RIGHT),
    ArrowVariant.LEFT_OF_CLUE_DOWN: ((0, -1), Direction.DOWN),
}


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
