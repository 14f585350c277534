"""Rule-set configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class RulesConfig:
    """Draw thresholds for one game.

    The defaults are the standard rules. Thresholds are checked with ``>=``.
    """

    repetition_threshold: int = 3
    fifty_move_halfmoves: int = 100
    detect_insufficient_material: bool = True

    def __post_init__(self) -> None:
        if self.repetition_threshold < 2:
            raise ValueError("repetition_threshold must be >= 2")
        if self.fifty_move_halfmoves < 1:
            raise ValueError("fifty_move_halfmoves must be >= 1")


DEFAULT_RULES = RulesConfig()
