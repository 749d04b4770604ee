"""Move record for the nonogram game."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Move:
    """One guess: which tile, what was guessed, whether it was right, when."""

    x: int
    y: int
    guess: bool
    correct: bool
    time: float

    def get_move(self) -> tuple[int, int, bool, bool, float]:
        return self.x, self.y, self.guess, self.correct, self.time
