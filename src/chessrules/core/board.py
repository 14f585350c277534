"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from chessrules.core.enums import Color, PieceType
from chessrules.core.piece import Piece
from chessrules.core.types import Square, make_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

_ALL_PIECES: tuple[Piece, ...] = tuple(
    Piece(color, piece_type) for color in Color for piece_type in PieceType
)


def _bit_squares(bitboard: int) -> list[Square]:
    """Set bits of *bitboard* as squares, lowest first."""
    squares: list[Square] = []
    while bitboard:
        lsb = bitboard & -bitboard
        squares.append(lsb.bit_length() - 1)
        bitboard ^= lsb
    return squares


class Board:
    """Square-to-piece mapping plus one occupancy bitboard per piece.

    ``board[sq]`` is the piece on *sq* or ``None``. Every assignment keeps
    the per-piece and per-colour bitboards in step, so count and lookup
    queries never scan the 64 squares. A :class:`Board` is only mutated by
    the :class:`~chessrules.core.position.Position` that owns it.
    """

    __slots__ = ("_cells", "_by_piece", "_by_color")

    def __init__(self) -> None:
        self._cells: list[Piece | None] = [None] * 64
        self._by_piece: dict[Piece, int] = dict.fromkeys(_ALL_PIECES, 0)
        self._by_color: list[int] = [0, 0]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._cells[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        previous = self._cells[sq]
        if previous == piece:
            return
        bit = 1 << sq
        if previous is not None:
            self._by_piece[previous] &= ~bit
            self._by_color[previous.color] &= ~bit
        self._cells[sq] = piece
        if piece is not None:
            self._by_piece[piece] |= bit
            self._by_color[piece.color] |= bit

    def is_empty(self, sq: Square) -> bool:
        return self._cells[sq] is None

    # -- Query helpers ------------------------------------------------------

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Occupancy bitboard of *color*'s *piece_type*."""
        return self._by_piece[Piece(color, piece_type)]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        return _bit_squares(self.pieces_bitboard(color, piece_type))

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return self.pieces_bitboard(color, piece_type) != 0

    def count(self, color: Color, piece_type: PieceType) -> int:
        return self.pieces_bitboard(color, piece_type).bit_count()

    def all_pieces(self, color: Color) -> list[Square]:
        """Every square holding one of *color*'s pieces."""
        return _bit_squares(self._by_color[color])

    def occupied_count(self) -> int:
        return (self._by_color[0] | self._by_color[1]).bit_count()

    def king_square(self, color: Color) -> Square:
        """Square of *color*'s king (the lowest one if several are present)."""
        kings = self.pieces_bitboard(color, PieceType.KING)
        if not kings:
            raise ValueError(f"No {color.name} king on board")
        return (kings & -kings).bit_length() - 1

    def grid(self) -> list[list[Piece | None]]:
        """8x8 view for drawing: row 0 is rank 8, column 0 is the a-file."""
        return [self._cells[rank * 8 : rank * 8 + 8] for rank in range(7, -1, -1)]

    # -- Copying / factory --------------------------------------------------

    def copy(self) -> Board:
        clone = Board.__new__(Board)
        clone._cells = self._cells.copy()
        clone._by_piece = self._by_piece.copy()
        clone._by_color = self._by_color.copy()
        return clone

    @classmethod
    def initial(cls) -> Board:
        """Standard starting placement."""
        board = cls()
        for file, piece_type in enumerate(_BACK_RANK):
            board[make_square(file, 0)] = Piece(Color.WHITE, piece_type)
            board[make_square(file, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            board[make_square(file, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            board[make_square(file, 7)] = Piece(Color.BLACK, piece_type)
        return board

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        lines = [
            f"{8 - row} " + " ".join(str(p) if p else "." for p in cells)
            for row, cells in enumerate(self.grid())
        ]
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
