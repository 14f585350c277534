"""Tests for FEN, SAN and PGN export."""

import pytest

from chessrules.core.enums import CastlingRights, Color, GameResult, PieceType
from chessrules.core.errors import ErrorKind, IllegalMoveError, MalformedPositionError
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import (
    STARTING_FEN,
    build_pgn,
    move_to_san,
    parse_san,
    pgn_movetext_from_sans,
    pgn_result_token,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.types import E1, E3, E8, parse_square

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestFenParsing:
    def test_starting_position(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert pos.side_to_move == Color.WHITE
        assert pos.castling == CastlingRights.ALL
        assert pos.en_passant is None
        assert pos.halfmove_clock == 0
        assert pos.fullmove_number == 1
        assert pos.board[E1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[E8] == Piece(Color.BLACK, PieceType.KING)

    def test_en_passant_square(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        assert position_from_fen(fen).en_passant == E3

    def test_partial_castling(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w Kq - 0 1"
        pos = position_from_fen(fen)
        assert pos.castling == (
            CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_QUEENSIDE
        )

    def test_clocks_are_optional(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4K3 b - -")
        assert pos.side_to_move == Color.BLACK
        assert pos.halfmove_clock == 0
        assert pos.fullmove_number == 1

    def test_clock_values(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 37 52")
        assert pos.halfmove_clock == 37
        assert pos.fullmove_number == 52


class TestFenRoundTrip:
    @pytest.mark.parametrize(
        "fen",
        [
            STARTING_FEN,
            KIWIPETE,
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
            "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
            "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8",
        ],
    )
    def test_round_trip(self, fen: str) -> None:
        assert position_to_fen(position_from_fen(fen)) == fen

    def test_default_position_serialises_to_start(self) -> None:
        assert position_to_fen(Position()) == STARTING_FEN


class TestFenErrors:
    @pytest.mark.parametrize(
        "fen",
        [
            "",
            "8/8/8 w - - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KX - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KK - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq z9 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e3 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - x 1",
            "rnbqkbnr/ppppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/ppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/ppppxppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "4k3/8/8/8/8/8/8/²3K3 w - - 0 1",
            "4k3/8/8/8/8/8/8/04K3 w - - 0 1",
        ],
    )
    def test_malformed(self, fen: str) -> None:
        with pytest.raises(MalformedPositionError) as info:
            position_from_fen(fen)
        assert info.value.kind == ErrorKind.MALFORMED_POSITION

    def test_missing_king(self) -> None:
        with pytest.raises(MalformedPositionError, match="kings"):
            position_from_fen("8/8/8/8/8/8/8/4K3 w - - 0 1")

    def test_two_kings_of_one_colour(self) -> None:
        with pytest.raises(MalformedPositionError, match="kings"):
            position_from_fen("4k3/8/8/8/8/8/8/K3K3 w - - 0 1")

    def test_pawn_on_back_rank(self) -> None:
        with pytest.raises(MalformedPositionError, match="back rank"):
            position_from_fen("P3k3/8/8/8/8/8/8/4K3 w - - 0 1")
        with pytest.raises(MalformedPositionError, match="back rank"):
            position_from_fen("4k3/8/8/8/8/8/8/p3K3 w - - 0 1")

    def test_side_not_to_move_in_check(self) -> None:
        with pytest.raises(MalformedPositionError, match="in check"):
            position_from_fen("4k3/8/8/8/8/8/8/4R1K1 w - - 0 1")

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            position_from_fen("not a fen")


class TestSanRendering:
    def _san(self, fen: str, uci: str) -> str:
        pos = position_from_fen(fen)
        move = next(
            m for m in MoveGenerator(pos).generate_legal_moves() if m.uci == uci
        )
        return move_to_san(pos, move)

    def test_pawn_push(self) -> None:
        assert self._san(STARTING_FEN, "e2e4") == "e4"

    def test_knight_move(self) -> None:
        assert self._san(STARTING_FEN, "g1f3") == "Nf3"

    def test_castling(self) -> None:
        fen = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
        assert self._san(fen, "e1g1") == "O-O"
        assert self._san(fen, "e1c1") == "O-O-O"

    def test_pawn_capture_names_file(self) -> None:
        fen = "4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1"
        assert self._san(fen, "e4d5") == "exd5"

    def test_en_passant(self) -> None:
        fen = "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1"
        assert self._san(fen, "e5d6") == "exd6"

    def test_promotion(self) -> None:
        fen = "8/4P3/8/8/8/8/8/k3K3 w - - 0 1"
        assert self._san(fen, "e7e8q") == "e8=Q"
        assert self._san(fen, "e7e8n") == "e8=N"

    def test_check_suffix(self) -> None:
        assert self._san("4k3/8/8/8/8/8/8/R3K3 w - - 0 1", "a1a8") == "Ra8+"

    def test_mate_suffix(self) -> None:
        assert self._san("6k1/5ppp/8/8/8/8/8/R3K3 w - - 0 1", "a1a8") == "Ra8#"

    def test_file_disambiguation(self) -> None:
        assert self._san("7k/8/8/8/8/8/8/K1N3N1 w - - 0 1", "c1e2") == "Nce2"

    def test_rank_disambiguation(self) -> None:
        fen = "7k/8/8/R7/8/8/8/R3K3 w - - 0 1"
        assert self._san(fen, "a1a3") == "R1a3"
        assert self._san(fen, "a5a3") == "R5a3"

    def test_full_square_disambiguation(self) -> None:
        fen = "8/7k/8/8/8/Q7/8/Q1Q4K w - - 0 1"
        assert self._san(fen, "a1b2") == "Qa1b2"

    def test_rendering_leaves_position_untouched(self) -> None:
        pos = position_from_fen(KIWIPETE)
        before = pos.copy()
        for move in MoveGenerator(pos).generate_legal_moves():
            move_to_san(pos, move)
        assert pos == before


class TestSanParsing:
    def test_pawn_push(self) -> None:
        move = parse_san(Position(), "e4")
        assert move.uci == "e2e4"

    def test_piece_move(self) -> None:
        assert parse_san(Position(), "Nf3").uci == "g1f3"

    def test_check_suffix_ignored(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        assert parse_san(pos, "Ra8+").uci == "a1a8"

    @pytest.mark.parametrize("text", ["O-O", "0-0", "O-O+"])
    def test_castle_kingside(self, text: str) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        assert parse_san(pos, text).is_castle_kingside

    @pytest.mark.parametrize("text", ["O-O-O", "0-0-0"])
    def test_castle_queenside(self, text: str) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        assert parse_san(pos, text).is_castle_queenside

    @pytest.mark.parametrize("text", ["e8=Q", "e8Q"])
    def test_promotion(self, text: str) -> None:
        pos = position_from_fen("8/4P3/8/8/8/8/8/k3K3 w - - 0 1")
        assert parse_san(pos, text).promotion == PieceType.QUEEN

    def test_underpromotion(self) -> None:
        pos = position_from_fen("8/4P3/8/8/8/8/8/k3K3 w - - 0 1")
        assert parse_san(pos, "e8=N").promotion == PieceType.KNIGHT

    def test_en_passant(self) -> None:
        pos = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        assert parse_san(pos, "exd6").is_en_passant

    def test_disambiguated(self) -> None:
        pos = position_from_fen("7k/8/8/8/8/8/8/K1N3N1 w - - 0 1")
        assert parse_san(pos, "Nce2").from_sq == parse_square("c1")
        assert parse_san(pos, "Nge2").from_sq == parse_square("g1")

    def test_full_square_origin(self) -> None:
        pos = position_from_fen("8/7k/8/8/8/Q7/8/Q1Q4K w - - 0 1")
        assert parse_san(pos, "Qa1b2").from_sq == parse_square("a1")

    def test_ambiguous(self) -> None:
        pos = position_from_fen("7k/8/8/8/8/8/8/K1N3N1 w - - 0 1")
        with pytest.raises(IllegalMoveError, match="Ambiguous"):
            parse_san(pos, "Ne2")

    def test_illegal(self) -> None:
        with pytest.raises(IllegalMoveError, match="Illegal"):
            parse_san(Position(), "Ke2")

    @pytest.mark.parametrize("text", ["", "Zz9", "e", "N?f3"])
    def test_unreadable(self, text: str) -> None:
        with pytest.raises(IllegalMoveError):
            parse_san(Position(), text)

    def test_round_trip_all_kiwipete_moves(self) -> None:
        pos = position_from_fen(KIWIPETE)
        for move in MoveGenerator(pos).generate_legal_moves():
            assert parse_san(pos, move_to_san(pos, move)) == move


class TestPgnExport:
    def test_result_tokens(self) -> None:
        assert pgn_result_token(GameResult.WHITE_WINS) == "1-0"
        assert pgn_result_token(GameResult.BLACK_WINS) == "0-1"
        assert pgn_result_token(GameResult.DRAW) == "1/2-1/2"
        assert pgn_result_token(GameResult.IN_PROGRESS) == "*"

    def test_movetext(self) -> None:
        assert pgn_movetext_from_sans(["e4", "e5", "Nf3"], "*") == "1. e4 e5 2. Nf3 *"

    def test_movetext_black_first(self) -> None:
        text = pgn_movetext_from_sans(["e5", "Nf3", "Nc6"], "*", True, 12)
        assert text == "12... e5 13. Nf3 Nc6 *"

    def test_movetext_empty(self) -> None:
        assert pgn_movetext_from_sans([], "1/2-1/2") == "1/2-1/2"

    def test_build_fills_seven_tag_roster(self) -> None:
        pgn = build_pgn({"White": "Alice"}, ["f3", "e5", "g4", "Qh4#"], "0-1")
        lines = pgn.splitlines()
        assert lines[:7] == [
            '[Event "?"]',
            '[Site "?"]',
            '[Date "?"]',
            '[Round "?"]',
            '[White "Alice"]',
            '[Black "?"]',
            '[Result "0-1"]',
        ]
        assert lines[7] == ""
        assert lines[8] == "1. f3 e5 2. g4 Qh4# 0-1"

    def test_build_extra_tags_and_escaping(self) -> None:
        pgn = build_pgn({"Annotator": 'The "Bot"'}, [], "*")
        assert '[Annotator "The \\"Bot\\""]' in pgn

    def test_build_with_setup(self) -> None:
        fen = "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"
        pgn = build_pgn({}, ["Ra8+"], "*", start_fen=fen)
        assert '[SetUp "1"]' in pgn
        assert f'[FEN "{fen}"]' in pgn
