"""Generates nonogram boards."""

from __future__ import annotations

import random

from backend.models.board import Board

MIN_RANDOM_SIZE = 6
MAX_RANDOM_SIZE = 20


class GameGenerator:
    """Creates boards from random noise."""

    @staticmethod
    def random(
        width: int | None = None,
        height: int | None = None,
        density: float = 0.5,
        rng: random.Random | None = None,
    ) -> Board:
        """Return a board whose tiles are Full with probability *density*.

        Missing dimensions are picked at random between 6 and 20.
        """
        if not 0.0 <= density <= 1.0:
            raise ValueError(f"Density must be within [0, 1], got {density}.")
        rng = rng or random.Random()
        width = width or rng.randint(MIN_RANDOM_SIZE, MAX_RANDOM_SIZE)
        height = height or rng.randint(MIN_RANDOM_SIZE, MAX_RANDOM_SIZE)

        rows = [[rng.random() < density for _ in range(width)] for _ in range(height)]
        return Board.from_rows(rows, name="random")
