"""Board model for the nonogram game."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

from backend.models.clue import Clue
from backend.models.line import Line
from backend.models.tile import Tile

# Maps a position along a line back to board (x, y) coordinates.
ToXY = Callable[[int], tuple[int, int]]


@dataclass
class Board:
    """Represents a nonogram board.

    Tiles are stored once, in a flat row-major list.  Every row and every
    column is a :class:`Line` holding references into that list, so each
    tile is seen by exactly one row and one column.
    """

    width: int
    height: int
    name: str = "blank"
    tiles: list[Tile] = field(default_factory=list, repr=False)
    rows: list[Line] = field(init=False, repr=False)
    columns: list[Line] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(
                f"Board must be at least 1×1, got {self.width}×{self.height}."
            )
        if not self.tiles:
            self.tiles = [Tile() for _ in range(self.width * self.height)]
        elif len(self.tiles) != self.width * self.height:
            raise ValueError(
                f"Expected {self.width * self.height} tiles for a "
                f"{self.width}×{self.height} board, got {len(self.tiles)}."
            )
        self.rows = [
            Line(self.tiles[y * self.width : (y + 1) * self.width])
            for y in range(self.height)
        ]
        self.columns = [
            Line(self.tiles[x :: self.width]) for x in range(self.width)
        ]
        for line in self.rows + self.columns:
            line.changed = True

    # -- construction helpers -------------------------------------------------

    @classmethod
    def blank(cls, width: int, height: int, name: str = "blank") -> Board:
        return cls(width=width, height=height, name=name)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[bool]], name: str = "default") -> Board:
        """Create a board from its solution, one list of bools per row.

        Example::

            Board.from_rows([[True, False], [True, True]], name="tiny")
        """
        if not rows or not rows[0]:
            raise ValueError("A board needs at least one row and one column.")
        width = len(rows[0])
        tiles: list[Tile] = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {y} has {len(row)} tiles, expected {width}."
                )
            tiles.extend(Tile(full=bool(v)) for v in row)
        return cls(width=width, height=len(rows), name=name, tiles=tiles)

    # -- queries --------------------------------------------------------------

    def index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Tile ({x}, {y}) is off a {self.width}×{self.height} board."
            )
        return y * self.width + x

    def get_tile(self, x: int, y: int) -> Tile:
        return self.tiles[self.index(x, y)]

    def get_state(self, x: int, y: int) -> bool:
        return self.get_tile(x, y).full

    def get_known(self, x: int, y: int) -> bool:
        return self.get_tile(x, y).known

    def row_clues(self, y: int) -> list[Clue]:
        return self.rows[y].get_clues()

    def column_clues(self, x: int) -> list[Clue]:
        return self.columns[x].get_clues()

    def is_row_solved(self, y: int) -> bool:
        return self.rows[y].solved

    def is_column_solved(self, x: int) -> bool:
        return self.columns[x].solved

    def is_solved(self) -> bool:
        """A board is solved once every Full tile has been revealed."""
        return all(row.solved for row in self.rows)

    def lines(self) -> Iterator[tuple[Line, ToXY]]:
        """Yield every row, then every column, with its position mapper."""
        for y, row in enumerate(self.rows):
            yield row, lambda i, y=y: (i, y)
        for x, column in enumerate(self.columns):
            yield column, lambda i, x=x: (x, i)

    # -- mutation -------------------------------------------------------------

    def set_state(self, x: int, y: int, full: bool) -> None:
        """Change the ground truth of a tile; clues and solved flags follow."""
        self.get_tile(x, y).set_state(full)
        self._refresh(x, y)

    def fill_tile(self, x: int, y: int) -> None:
        self.set_state(x, y, True)

    def set_known(self, x: int, y: int, known: bool = True) -> None:
        """Reveal (or hide) a tile and refresh both lines that hold it."""
        self.get_tile(x, y).set_known(known)
        self._refresh(x, y)

    def _refresh(self, x: int, y: int) -> None:
        for line in (self.rows[y], self.columns[x]):
            line.derive_clues()
            line.check_solved()
            line.changed = True

    def reveal_all(self) -> None:
        for tile in self.tiles:
            tile.known = True
        for line in self.rows + self.columns:
            line.derive_clues()
            line.check_solved()
            line.changed = True

    def copy(self) -> Board:
        """Return an independent board with the same truth and knowledge."""
        return Board(
            width=self.width,
            height=self.height,
            name=self.name,
            tiles=[Tile(full=t.full, known=t.known) for t in self.tiles],
        )
