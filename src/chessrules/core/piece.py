"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import Color, PieceType
from chessrules.core.errors import MalformedPositionError

# Indexed by PieceType value; index 0 is unused.
_LETTERS = " pnbrqk"
_WHITE_GLYPHS = " ♙♘♗♖♕♔"
_BLACK_GLYPHS = " ♟♞♝♜♛♚"


@dataclass(frozen=True, slots=True)
class Piece:
    """A side's piece of one kind. Compared and hashed by value."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """FEN letter: uppercase for white, lowercase for black."""
        letter = _LETTERS[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Piece for a FEN letter, e.g. ``"N"`` is a white knight."""
        index = _LETTERS.find(char.lower()) if len(char) == 1 else -1
        if index < 1:
            raise MalformedPositionError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, PieceType(index))

    @property
    def symbol(self) -> str:
        """Unicode chess glyph, e.g. ♞."""
        glyphs = _WHITE_GLYPHS if self.color == Color.WHITE else _BLACK_GLYPHS
        return glyphs[self.piece_type]
