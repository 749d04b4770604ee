"""Reading and writing ``.puz`` puzzle definitions.

The format is plain text::

    ducky          <- puzzle name (blank means "oddly blank")
    5              <- width
    4              <- height
    01100          <- one line per row, 1 = Full, 0 = Empty
    ...
"""

from __future__ import annotations

from pathlib import Path

from backend.models.board import Board

PUZZLE_SUFFIX = ".puz"


class PuzzleFileError(ValueError):
    """Raised when a puzzle definition cannot be parsed."""


def _read_dimension(raw: str, label: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise PuzzleFileError(f"Puzzle {label} is not a number: {raw!r}.") from exc
    if value < 1:
        raise PuzzleFileError(f"Puzzle {label} must be at least 1, got {value}.")
    return value


def parse_puzzle(text: str) -> Board:
    """Parse the contents of a ``.puz`` file into a :class:`Board`."""
    lines = text.splitlines()
    if len(lines) < 3:
        raise PuzzleFileError("Puzzle header needs a name, a width and a height.")

    name = lines[0].strip() or "oddly blank"
    width = _read_dimension(lines[1], "width")
    height = _read_dimension(lines[2], "height")

    body = lines[3 : 3 + height]
    if len(body) != height:
        raise PuzzleFileError(f"Expected {height} rows, found {len(body)}.")

    rows: list[list[bool]] = []
    for y, raw in enumerate(body):
        raw = raw.rstrip()
        if len(raw) != width:
            raise PuzzleFileError(
                f"Row {y} has {len(raw)} characters, expected {width}."
            )
        row: list[bool] = []
        for ch in raw:
            if ch not in "01":
                raise PuzzleFileError(f"Bad tile character {ch!r} in row {y}.")
            row.append(ch == "1")
        rows.append(row)

    return Board.from_rows(rows, name=name)


def load_puzzle(path: Path) -> Board:
    return parse_puzzle(Path(path).read_text())


def dump_puzzle(board: Board) -> str:
    rows = [
        "".join("1" if board.get_state(x, y) else "0" for x in range(board.width))
        for y in range(board.height)
    ]
    return "\n".join([board.name, str(board.width), str(board.height), *rows]) + "\n"


def save_puzzle(board: Board, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_puzzle(board))


def list_puzzles(directory: Path) -> list[str]:
    """Return the names (file stems) of every puzzle in *directory*."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.glob(f"*{PUZZLE_SUFFIX}"))
