"""chessrules - a pure-Python chess rules engine.

The engine knows board state, legal moves, check / mate / draw detection and
a move history with undo. Rendering and input belong to the caller.
"""

from chessrules.config import RulesConfig
from chessrules.core import (
    STARTING_FEN,
    Color,
    DrawReason,
    GameResult,
    GameStatus,
    Move,
    Piece,
    PieceType,
    Position,
)
from chessrules.core.errors import (
    ChessError,
    EmptyHistoryError,
    ErrorKind,
    IllegalMoveError,
    InvalidSquareError,
    MalformedPositionError,
)
from chessrules.game.api import (
    LoadResult,
    MoveResult,
    UndoResult,
    apply_move,
    apply_san,
    board_grid,
    captured_pieces,
    export_fen,
    export_notation,
    export_pgn,
    is_promotion_move,
    legal_destinations,
    legal_moves,
    load_position,
    new_game,
    piece_at,
    redo,
    status,
    undo,
    undo_to,
)
from chessrules.game.record import GameRecord, MoveRecord

__version__ = "0.1.0"

__all__ = [
    "STARTING_FEN",
    "ChessError",
    "Color",
    "DrawReason",
    "EmptyHistoryError",
    "ErrorKind",
    "GameRecord",
    "GameResult",
    "GameStatus",
    "IllegalMoveError",
    "InvalidSquareError",
    "LoadResult",
    "MalformedPositionError",
    "Move",
    "MoveRecord",
    "MoveResult",
    "Piece",
    "PieceType",
    "Position",
    "RulesConfig",
    "UndoResult",
    "apply_move",
    "apply_san",
    "board_grid",
    "captured_pieces",
    "export_fen",
    "export_notation",
    "export_pgn",
    "is_promotion_move",
    "legal_destinations",
    "legal_moves",
    "load_position",
    "new_game",
    "piece_at",
    "redo",
    "status",
    "undo",
    "undo_to",
]
