"""Tile model: the atomic cell of a nonogram board."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TileState(StrEnum):
    UNKNOWN = "unknown"
    FULL = "full"
    EMPTY = "empty"


@dataclass(eq=False)
class Tile:
    """A single cell with a secret state and a revealed flag.

    ``full`` is the ground truth of the puzzle.  ``known`` records whether
    that truth has been revealed to the solving process yet.  Tiles compare
    by identity: a row and a column share the same object.
    """

    full: bool = False
    known: bool = False

    def get_state(self) -> bool:
        return self.full

    def get_known(self) -> bool:
        return self.known

    def set_state(self, full: bool) -> None:
        self.full = full

    def set_known(self, known: bool) -> None:
        self.known = known

    @property
    def view(self) -> TileState:
        """What the solver is allowed to see of this tile."""
        if not self.known:
            return TileState.UNKNOWN
        return TileState.FULL if self.full else TileState.EMPTY
