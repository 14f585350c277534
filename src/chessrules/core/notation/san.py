"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

from chessrules.core.enums import PieceType
from chessrules.core.errors import IllegalMoveError, InvalidSquareError
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.position import Position
from chessrules.core.types import file_of, parse_square, rank_of, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in _SAN_PIECE.items()}


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    piece_type = move.piece.piece_type

    if move.is_castle_kingside:
        san = "O-O"
    elif move.is_castle_queenside:
        san = "O-O-O"
    else:
        san = ""
        if piece_type == PieceType.PAWN:
            if move.is_capture:
                san += chr(ord("a") + file_of(move.from_sq))
        else:
            san += _SAN_PIECE[piece_type]
            san += _disambiguation(position, move)

        if move.is_capture:
            san += "x"

        san += square_name(move.to_sq)

        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    # Check / checkmate suffix
    position.make_move(move)
    gen_after = MoveGenerator(position)
    if gen_after.is_in_check(position.side_to_move):
        san += "+" if gen_after.has_legal_move() else "#"
    position.unmake_move(move)

    return san


def _disambiguation(position: Position, move: Move) -> str:
    """File, rank or full square of the origin when another piece of the
    same kind can reach the same destination."""
    legal = MoveGenerator(position).generate_legal_moves()
    rivals = [
        m
        for m in legal
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and m.piece == move.piece
    ]
    if not rivals:
        return ""
    same_file = any(file_of(m.from_sq) == file_of(move.from_sq) for m in rivals)
    same_rank = any(rank_of(m.from_sq) == rank_of(move.from_sq) for m in rivals)
    if not same_file:
        return chr(ord("a") + file_of(move.from_sq))
    if not same_rank:
        return str(rank_of(move.from_sq) + 1)
    return square_name(move.from_sq)


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a legal :class:`Move` for *position*.

    Raises :class:`IllegalMoveError` when the text matches no legal move or
    more than one.
    """
    legal = MoveGenerator(position).generate_legal_moves()

    clean = san.strip().rstrip("+#!?")

    if clean in ("O-O", "0-0"):
        return _single(san, [m for m in legal if m.is_castle_kingside])
    if clean in ("O-O-O", "0-0-0"):
        return _single(san, [m for m in legal if m.is_castle_queenside])

    # Promotion, with or without "="
    promotion: PieceType | None = None
    if clean and clean[-1] in "NBRQ" and len(clean) > 2 and clean[-2] != "x":
        promo_type = _SAN_PIECE_REV.get(clean[-1])
        if clean[-2] == "=" or clean[-2] in "18":
            promotion = promo_type
            clean = clean[:-1].rstrip("=")

    # Destination (last two chars)
    try:
        to_sq = parse_square(clean[-2:])
    except InvalidSquareError:
        raise IllegalMoveError(f"Unreadable move: {san!r}") from None
    clean = clean[:-2]

    if clean.endswith("x"):
        clean = clean[:-1]

    if clean and clean[0] in _SAN_PIECE_REV:
        piece_type = _SAN_PIECE_REV[clean[0]]
        clean = clean[1:]
    else:
        piece_type = PieceType.PAWN

    from_file: int | None = None
    from_rank: int | None = None
    for ch in clean:
        if ch in "abcdefgh":
            from_file = ord(ch) - ord("a")
        elif ch in "12345678":
            from_rank = int(ch) - 1
        else:
            raise IllegalMoveError(f"Unreadable move: {san!r}")

    candidates = [
        m
        for m in legal
        if m.piece.piece_type == piece_type
        and m.to_sq == to_sq
        and m.promotion == promotion
        and (from_file is None or file_of(m.from_sq) == from_file)
        and (from_rank is None or rank_of(m.from_sq) == from_rank)
    ]
    return _single(san, candidates)


def _single(san: str, candidates: list[Move]) -> Move:
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise IllegalMoveError(f"Illegal move: {san}")
    raise IllegalMoveError(f"Ambiguous move: {san} → {[str(m) for m in candidates]}")
