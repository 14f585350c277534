"""Zobrist keys for the repetition hash.

A position key XORs one key per (piece, square), one for black to move, one
for the castling-rights mask and one for the en passant target. Two
positions repeat exactly when these four components match.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from chessrules.core.enums import CastlingRights, Color
from chessrules.core.piece import Piece
from chessrules.core.types import Square

if TYPE_CHECKING:
    from chessrules.core.board import Board

_MASK_64: Final = (1 << 64) - 1

# Layout of the flat key table.
_PIECE_BASE: Final = 0
_SIDE_INDEX: Final = 12 * 64
_CASTLING_BASE: Final = _SIDE_INDEX + 1
_EN_PASSANT_BASE: Final = _CASTLING_BASE + 16
_KEY_COUNT: Final = _EN_PASSANT_BASE + 64


def _generate_keys(count: int, seed: int = 0x2545F4914F6CDD1D) -> tuple[int, ...]:
    """Fixed pseudo-random 64-bit keys (splitmix64), identical on every run."""
    keys: list[int] = []
    state = seed
    for _ in range(count):
        state = (state + 0x9E3779B97F4A7C15) & _MASK_64
        z = state
        z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
        z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK_64
        keys.append(z ^ (z >> 31))
    return tuple(keys)


_KEYS: Final = _generate_keys(_KEY_COUNT)


def piece_key(piece: Piece, sq: Square) -> int:
    index = (int(piece.color) * 6 + int(piece.piece_type) - 1) * 64 + sq
    return _KEYS[_PIECE_BASE + index]


def side_to_move_key() -> int:
    """Toggled in whenever black is to move."""
    return _KEYS[_SIDE_INDEX]


def castling_key(castling: CastlingRights) -> int:
    return _KEYS[_CASTLING_BASE + (int(castling) & 0xF)]


def en_passant_key(ep_square: Square) -> int:
    return _KEYS[_EN_PASSANT_BASE + ep_square]


def full_key(
    board: Board,
    side_to_move: Color,
    castling: CastlingRights,
    en_passant: Square | None,
) -> int:
    """Key of a position computed from scratch (no incremental state)."""
    key = castling_key(castling)
    if side_to_move == Color.BLACK:
        key ^= side_to_move_key()
    if en_passant is not None:
        key ^= en_passant_key(en_passant)
    for sq in range(64):
        piece = board[sq]
        if piece is not None:
            key ^= piece_key(piece, sq)
    return key
