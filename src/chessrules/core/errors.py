"""Engine error hierarchy.

Every error is a :class:`ValueError` so callers that only guard FEN/SAN
parsing with ``except ValueError`` keep working.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Failure category reported back to the presentation layer."""

    INVALID_SQUARE = "invalid_square"
    ILLEGAL_MOVE = "illegal_move"
    EMPTY_HISTORY = "empty_history"
    MALFORMED_POSITION = "malformed_position"


class ChessError(ValueError):
    """Base class for all recoverable engine failures."""

    kind: ErrorKind


class InvalidSquareError(ChessError):
    """A coordinate or square name outside the 8x8 board."""

    kind = ErrorKind.INVALID_SQUARE


class IllegalMoveError(ChessError):
    """A well-formed move request that is not legal in the current position."""

    kind = ErrorKind.ILLEGAL_MOVE


class EmptyHistoryError(ChessError):
    """Undo (or redo) requested with nothing to undo."""

    kind = ErrorKind.EMPTY_HISTORY


class MalformedPositionError(ChessError):
    """A position string that cannot be loaded."""

    kind = ErrorKind.MALFORMED_POSITION
