"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

import time

from backend.models.board import Board
from backend.models.move import Move


class GameState:
    """The board being played, every guess made so far, and the play clock.

    The clock only runs while the game is in progress: the frontend pauses
    it on the win screen so the final time stays put.
    """

    def __init__(self, board: Board) -> None:
        self.board = board
        self.move_list: list[Move] = []
        self.errors: int = 0
        self._banked: float = 0.0
        self._running_since: float | None = time.monotonic()

    # -- clock ----------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running_since is not None

    @property
    def elapsed_time(self) -> float:
        if self._running_since is None:
            return self._banked
        return self._banked + time.monotonic() - self._running_since

    def pause(self) -> None:
        if self._running_since is not None:
            self._banked = self.elapsed_time
            self._running_since = None

    def resume(self) -> None:
        if self._running_since is None:
            self._running_since = time.monotonic()

    # -- moves ----------------------------------------------------------------

    def add_move(self, x: int, y: int, guess: bool, correct: bool) -> Move:
        """Record a guess; wrong guesses also count as errors."""
        move = Move(x, y, guess, correct, round(self.elapsed_time, 2))
        self.move_list.append(move)
        if not correct:
            self.errors += 1
        return move

    @property
    def moves(self) -> int:
        return len(self.move_list)

    @property
    def is_solved(self) -> bool:
        return self.board.is_solved()
