from backend.models.board import Board
from backend.models.clue import Clue
from backend.models.line import Line
from backend.models.move import Move
from backend.models.puzzle_file import PuzzleFileError, load_puzzle, save_puzzle
from backend.models.tile import Tile, TileState

__all__ = [
    "Board",
    "Clue",
    "Line",
    "Move",
    "PuzzleFileError",
    "Tile",
    "TileState",
    "load_puzzle",
    "save_puzzle",
]
