"""Core domain layer - pure chess logic with zero external dependencies.

Quick start::

    from chessrules.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
"""

from chessrules.core.board import Board
from chessrules.core.enums import (
    CastlingRights,
    Color,
    DrawReason,
    GameResult,
    MoveFlag,
    PieceType,
)
from chessrules.core.errors import (
    ChessError,
    EmptyHistoryError,
    ErrorKind,
    IllegalMoveError,
    InvalidSquareError,
    MalformedPositionError,
)
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator, perft
from chessrules.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.rules import GameStatus, Rules
from chessrules.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "DrawReason",
    "GameResult",
    "MoveFlag",
    "PieceType",
    # Errors
    "ChessError",
    "EmptyHistoryError",
    "ErrorKind",
    "IllegalMoveError",
    "InvalidSquareError",
    "MalformedPositionError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "GameStatus",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    "perft",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]
