"""Notation package: FEN load/save, SAN rendering/parsing, PGN export."""

from chessrules.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from chessrules.core.notation.pgn import (
    build_pgn,
    pgn_movetext_from_sans,
    pgn_result_token,
)
from chessrules.core.notation.san import move_to_san, parse_san

__all__ = [
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
    "move_to_san",
    "parse_san",
    "pgn_result_token",
    "pgn_movetext_from_sans",
    "build_pgn",
]
