"""Clue model: the length of one run of Full tiles."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from backend.models.tile import Tile


@dataclass(frozen=True)
class Clue:
    """Immutable run length plus a derived ``solved`` flag.

    ``solved`` is informational only; the line solver never reads it.
    """

    size: int
    solved: bool = False

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Clue size must be positive, got {self.size}.")

    @classmethod
    def from_run(cls, tiles: Sequence[Tile]) -> Clue:
        """Build a clue from a contiguous run of Full tiles."""
        return cls(size=len(tiles), solved=all(t.known for t in tiles))

    def get_size(self) -> int:
        return self.size
