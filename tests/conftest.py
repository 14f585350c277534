"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.position import Position
from chessrules.game import api
from chessrules.game.record import GameRecord

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


def find_move(position: Position, uci: str) -> Move:
    """The legal move whose UCI text is *uci* (fails the test otherwise)."""
    for move in MoveGenerator(position).generate_legal_moves():
        if move.uci == uci:
            return move
    raise AssertionError(f"{uci} is not legal in {position!r}")


@pytest.fixture
def move_of() -> Callable[[Position, str], Move]:
    return find_move


@pytest.fixture
def play() -> Callable[..., GameRecord]:
    """Play SAN moves on a record (default: new game), asserting each one."""

    def _play(*sans: str, record: GameRecord | None = None) -> GameRecord:
        current = record if record is not None else api.new_game()
        for san in sans:
            result = api.apply_san(current, san)
            assert result.success, f"{san}: {result.error}"
            current = result.record
        return current

    return _play
