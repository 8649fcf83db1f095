"""Custom exception hierarchy for the arrowword core."""


class PuzzleError(Exception):
    """Base exception for puzzle failures."""


class InvalidEditError(PuzzleError):
    """Raised when an edit cannot be applied to the grid."""


class RestoreError(PuzzleError):
    """Raised when a snapshot, document or share code cannot be decoded."""


class ValidationError(PuzzleError):
    """Raised when the authoring integrity checks fail."""


class ScoreStoreError(PuzzleError, RuntimeError):
    """Raised when the highscore service responds with an error."""
