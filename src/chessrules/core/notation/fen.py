"""FEN parsing and serialization."""

from __future__ import annotations

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, PieceType
from chessrules.core.errors import InvalidSquareError, MalformedPositionError
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    Raises :class:`MalformedPositionError` for anything that is not a
    playable position, including a king count other than one per side.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise MalformedPositionError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # 1. Piece placement
    board = _parse_placement(placement, fen)
    _validate_material(board, fen)

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise MalformedPositionError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        seen: set[str] = set()
        for ch in castling_part:
            right = _CASTLING_CHARS.get(ch)
            if right is None or ch in seen:
                raise MalformedPositionError(
                    f"Invalid FEN castling field: {castling_part!r}"
                )
            seen.add(ch)
            castling |= right

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except InvalidSquareError:
            raise MalformedPositionError(
                f"Invalid FEN en-passant square: {ep_part!r}"
            ) from None
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise MalformedPositionError(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    # 5–6. Clocks (optional)
    halfmove = _parse_clock(parts, 4, default=0, minimum=0, label="halfmove clock")
    fullmove = _parse_clock(parts, 5, default=1, minimum=1, label="fullmove number")

    position = Position(board, side, castling, ep, halfmove, fullmove)
    if MoveGenerator(position).is_in_check(side.opposite):
        raise MalformedPositionError(
            f"Invalid FEN: side not to move is in check: {fen!r}"
        )
    return position


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(
        ch for ch, right in _CASTLING_CHARS.items() if pos.castling & right
    )
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return f"{board_str} {side_str} {castling_str} {ep_str} {pos.halfmove_clock} {pos.fullmove_number}"


def _parse_placement(placement: str, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise MalformedPositionError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch in "12345678":
                file += int(ch)
            else:
                if file >= 8:
                    raise MalformedPositionError(f"Invalid FEN rank width: {fen!r}")
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise MalformedPositionError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise MalformedPositionError(f"Invalid FEN rank width: {fen!r}")
    return board


def _validate_material(board: Board, fen: str) -> None:
    for color in (Color.WHITE, Color.BLACK):
        kings = board.count(color, PieceType.KING)
        if kings != 1:
            raise MalformedPositionError(
                f"Invalid FEN: {color} has {kings} kings, expected 1: {fen!r}"
            )
        for sq in board.pieces(color, PieceType.PAWN):
            if rank_of(sq) in (0, 7):
                raise MalformedPositionError(
                    f"Invalid FEN: pawn on back rank {square_name(sq)}: {fen!r}"
                )


def _parse_clock(
    parts: list[str], index: int, *, default: int, minimum: int, label: str
) -> int:
    if len(parts) <= index:
        return default
    try:
        value = int(parts[index])
    except ValueError:
        raise MalformedPositionError(f"Invalid FEN {label}: {parts[index]!r}") from None
    if value < minimum:
        raise MalformedPositionError(f"Invalid FEN {label}: {parts[index]!r}")
    return value
