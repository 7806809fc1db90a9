"""Error taxonomy for King's Escape.

Every error here is an expected, recoverable condition. Move errors carry
the status message shown to the player; a rejected move never changes the
board.
"""


class MoveError(ValueError):
    """A requested king move was rejected."""

    status: str = "Invalid move."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.status)
        self.status = message or self.status


class GameOverError(MoveError):
    """Move attempted while the game is not in progress."""

    status = "Game over. Start a new game to play again."


class GameNotStartedError(GameOverError):
    """Move attempted before any game was started."""

    status = "No game in progress. Start a new game first."


class OutOfBoundsError(MoveError):
    """Destination lies outside the board."""

    status = "Invalid move: out of bounds."


class NotAdjacentError(MoveError):
    """Destination is not one king step away."""

    status = "Invalid move: King can only move one square in any direction."


class OccupiedError(MoveError):
    """Destination holds an enemy or an ally."""

    status = "Invalid move: target tile is occupied."


class ConfigRangeError(ValueError):
    """Configuration values were outside their playable range.

    Raised only on request (strict mode); the default policy clamps.

    Attributes:
        adjustments: Description of every clamped value
    """

    def __init__(self, adjustments: list[str]) -> None:
        self.adjustments = list(adjustments)
        super().__init__("Configuration out of range: " + "; ".join(self.adjustments))
