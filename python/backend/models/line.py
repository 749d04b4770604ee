"""Line model: one row or column of a nonogram board."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from backend.models.clue import Clue
from backend.models.tile import Tile


class Line:
    """An ordered list of tile references and the clues describing them.

    The tiles are shared with the board (and with the crossing lines), so
    revealing a tile through any view is visible through every other one.
    Clues describe the ground-truth solution of the line, not what the
    solver currently knows about it.

    ``changed`` is the dirty flag used by schedulers to decide which lines
    are worth another look; the line itself never reads it.
    """

    def __init__(
        self,
        tiles: Iterable[Tile],
        clues: Sequence[Clue] | None = None,
    ) -> None:
        self.tiles: list[Tile] = list(tiles)
        self.solved: bool = False
        self.changed: bool = False
        self.clues: list[Clue] = []
        if clues is None:
            self.derive_clues()
        else:
            self.clues = list(clues)
        self.check_solved()

    # -- accessors ------------------------------------------------------------

    @property
    def length(self) -> int:
        return len(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def get_tile(self, i: int) -> Tile:
        return self.tiles[i]

    def get_state(self, i: int) -> bool:
        return self.tiles[i].full

    def get_known(self, i: int) -> bool:
        return self.tiles[i].known

    def get_clues(self) -> list[Clue]:
        return self.clues

    @property
    def clue_sizes(self) -> list[int]:
        return [c.size for c in self.clues]

    # -- derived state --------------------------------------------------------

    def derive_clues(self) -> list[Clue]:
        """Rebuild the clue list from the runs of ground-truth Full tiles."""
        clues: list[Clue] = []
        run: list[Tile] = []
        for tile in self.tiles:
            if tile.full:
                run.append(tile)
            elif run:
                clues.append(Clue.from_run(run))
                run = []
        if run:
            clues.append(Clue.from_run(run))
        self.clues = clues
        return clues

    def check_solved(self) -> bool:
        """Solved once every ground-truth Full tile has been revealed."""
        self.solved = not any(t.full and not t.known for t in self.tiles)
        return self.solved

    # -- derived lines --------------------------------------------------------

    def reverse(self) -> Line:
        """Return a new line with tiles and clues in reverse order."""
        return Line(reversed(self.tiles), list(reversed(self.clues)))

    def subline(
        self,
        tile_start: int,
        tile_end: int,
        clue_start: int,
        clue_end: int,
    ) -> Line:
        """Return a new line over closed tile and clue ranges.

        ``clue_start > clue_end`` yields a line without clues.  The result
        holds no reference to this line; translating positions back is up
        to the caller.
        """
        return Line(
            self.tiles[tile_start : tile_end + 1],
            self.clues[clue_start : clue_end + 1],
        )

    # -- debugging ------------------------------------------------------------

    def describe(self) -> str:
        """Render clues and current knowledge, e.g. ``Clues: { 3 1 }  O_X``."""
        sizes = " ".join(str(s) for s in self.clue_sizes)
        cells = "".join(
            "_" if not t.known else ("O" if t.full else "X") for t in self.tiles
        )
        return f"Clues: {{ {sizes} }}  {cells}"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"Line(length={self.length}, clues={self.clue_sizes})"
