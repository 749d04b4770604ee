"""Core gameplay logic: guesses, deduction steps and the win condition."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamesolver import LineSolver
from backend.engine.gamestate import GameState
from backend.models.board import Board
from backend.models.puzzle_file import load_puzzle

logger = logging.getLogger(__name__)

# (x, y, full) in board coordinates.
Cell = tuple[int, int, bool]


@dataclass
class SolveReport:
    steps: int
    cells: int
    solved: bool
    stalled: bool  # deduction ran dry before the board was solved


class GamePlay:
    """Orchestrates a single game session."""

    def __init__(self, board: Board, solver: LineSolver | None = None) -> None:
        self.state = GameState(board)
        self.solver = solver or LineSolver()

    @classmethod
    def from_file(cls, path: Path, solver: LineSolver | None = None) -> GamePlay:
        """Create a game session from a ``.puz`` file."""
        return cls(load_puzzle(path), solver)

    @classmethod
    def random(
        cls,
        width: int | None = None,
        height: int | None = None,
        solver: LineSolver | None = None,
    ) -> GamePlay:
        return cls(GameGenerator.random(width, height), solver)

    @property
    def board(self) -> Board:
        return self.state.board

    # -- guessing -------------------------------------------------------------

    def guess(self, x: int, y: int, full: bool) -> bool:
        """Reveal the tile at (x, y) and record whether *full* was right.

        Returns False without recording anything if the tile is already known.
        """
        board = self.board
        if board.get_known(x, y):
            return False
        board.set_known(x, y, True)
        correct = board.get_state(x, y) == full
        self.state.add_move(x, y, full, correct)
        return correct

    # -- deduction ------------------------------------------------------------

    def hint(self) -> list[Cell] | None:
        """Return the next deduction on any unsolved line, without applying it."""
        for line, to_xy in self.board.lines():
            if line.solved:
                continue
            moves = self.solver.solve_line(line)
            if moves:
                return [(*to_xy(i), full) for i, full in moves]
        return None

    def step(self) -> list[Cell] | None:
        """Visit dirty lines until one yields moves, and apply them.

        Lines are marked clean as they are visited; applying moves marks the
        row and column of every revealed tile dirty again.
        """
        for line, to_xy in self.board.lines():
            if not line.changed:
                continue
            line.changed = False
            if line.solved:
                continue
            moves = self.solver.solve_line(line)
            if not moves:
                continue
            cells = [(*to_xy(i), full) for i, full in moves]
            for x, y, full in cells:
                if not self.guess(x, y, full):
                    logger.error("Deduced a wrong value for tile (%d, %d)", x, y)
            return cells
        return None

    def auto_solve(
        self,
        max_steps: int | None = None,
        on_step: Callable[[int, list[Cell]], None] | None = None,
    ) -> SolveReport:
        """Apply deduction steps until the board is solved or nothing is left.

        *on_step* is called after every applied step with the step number
        and the cells it revealed.
        """
        steps = cells = 0
        stalled = False
        while not self.is_won and (max_steps is None or steps < max_steps):
            applied = self.step()
            if applied is None:
                stalled = True
                break
            steps += 1
            cells += len(applied)
            if on_step is not None:
                on_step(steps, applied)
        report = SolveReport(
            steps=steps, cells=cells, solved=self.is_won, stalled=stalled
        )
        if report.stalled:
            logger.info("Deduction stalled after %d steps; a guess is needed", steps)
        return report

    # -- queries --------------------------------------------------------------

    @property
    def is_won(self) -> bool:
        return self.state.is_solved
