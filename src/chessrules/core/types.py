"""Squares and coordinate helpers.

A square is a plain ``int`` from 0 (a1) to 63 (h8), counted file first::

    a1=0  b1=1  ...  h1=7
    a2=8  ...        h2=15
    ...
    a8=56 ...        h8=63
"""

from __future__ import annotations

from typing import TypeAlias

from chessrules.core.errors import InvalidSquareError

Square: TypeAlias = int

FILES = "abcdefgh"
RANKS = "12345678"


def file_of(sq: Square) -> int:
    return sq % 8


def rank_of(sq: Square) -> int:
    return sq // 8


def make_square(file: int, rank: int) -> Square:
    """Square at *file*, *rank* (both 0-7); off-board coordinates raise."""
    if file not in range(8) or rank not in range(8):
        raise InvalidSquareError(f"Coordinate off the board: ({file}, {rank})")
    return rank * 8 + file


def is_valid_square(sq: int) -> bool:
    return isinstance(sq, int) and 0 <= sq < 64


def square_name(sq: Square) -> str:
    """``0`` -> ``"a1"``, ``63`` -> ``"h8"``."""
    if not is_valid_square(sq):
        raise InvalidSquareError(f"Invalid square index: {sq!r}")
    return FILES[file_of(sq)] + RANKS[rank_of(sq)]


def parse_square(name: str) -> Square:
    """``"e4"`` -> ``28``."""
    if len(name) != 2 or name[0] not in FILES or name[1] not in RANKS:
        raise InvalidSquareError(f"Invalid square name: {name!r}")
    return RANKS.index(name[1]) * 8 + FILES.index(name[0])


def coerce_square(value: Square | str) -> Square:
    """Accept a square index or a square name from the presentation layer."""
    if isinstance(value, str):
        return parse_square(value)
    if not is_valid_square(value):
        raise InvalidSquareError(f"Invalid square index: {value!r}")
    return value


def is_light_square(sq: Square) -> bool:
    # a1 is dark.
    return (file_of(sq) + rank_of(sq)) % 2 == 1


(A1, B1, C1, D1, E1, F1, G1, H1,
 A2, B2, C2, D2, E2, F2, G2, H2,
 A3, B3, C3, D3, E3, F3, G3, H3,
 A4, B4, C4, D4, E4, F4, G4, H4,
 A5, B5, C5, D5, E5, F5, G5, H5,
 A6, B6, C6, D6, E6, F6, G6, H6,
 A7, B7, C7, D7, E7, F7, G7, H7,
 A8, B8, C8, D8, E8, F8, G8, H8) = range(64)  # fmt: skip
