#!/usr/bin/env python3
"""Nonogram Game.

Usage::

    python main.py                    # play the first puzzle in puzzles/
    python main.py -p ducky           # play a named puzzle
    python main.py --random -W 12     # play a random 12-wide board
    python main.py -p ducky --solve   # deduce as far as possible and print
    python main.py --list             # list the bundled puzzles
"""

import logging
import random
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
PUZZLES_DIR = PROJECT_ROOT / "puzzles"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine.gamegenerator import GameGenerator  # noqa: E402
from backend.engine.gameplay import GamePlay  # noqa: E402
from backend.engine.gamesolver import LineSolver, SolverConfig  # noqa: E402
from backend.models.puzzle_file import (  # noqa: E402
    PUZZLE_SUFFIX,
    PuzzleFileError,
    list_puzzles,
)


# -- helpers ------------------------------------------------------------------


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _resolve_puzzle(puzzle: str) -> Path:
    """Accept a path to a ``.puz`` file or the name of a bundled puzzle."""
    path = Path(puzzle)
    if path.suffix == PUZZLE_SUFFIX or path.exists():
        return path
    return PUZZLES_DIR / f"{puzzle}{PUZZLE_SUFFIX}"


def _print_puzzles() -> None:
    names = list_puzzles(PUZZLES_DIR)
    print("\n  === PUZZLES ===")
    if not names:
        print("  No puzzles found.\n")
        return
    for i, name in enumerate(names, 1):
        print(f"  {i:>2}. {name}")
    print()


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    puzzle: Optional[str] = typer.Option(
        None, "-p", "--puzzle",
        help="Puzzle name (from puzzles/) or path to a .puz file.",
    ),
    random_board: bool = typer.Option(
        False, "--random",
        help="Play a randomly filled board instead of a puzzle.",
    ),
    width: Optional[int] = typer.Option(
        None, "-W", "--width", min=1, max=40,
        help="Random board width (default: 6-20).",
    ),
    height: Optional[int] = typer.Option(
        None, "-H", "--height", min=1, max=40,
        help="Random board height (default: 6-20).",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed for random boards.",
    ),
    solve: bool = typer.Option(
        False, "--solve",
        help="Deduce as far as possible, print the board and exit.",
    ),
    max_depth: int = typer.Option(
        SolverConfig.max_depth, "--max-depth", min=0,
        help="Cap on the line solver's recursion depth.",
    ),
    list_only: bool = typer.Option(
        False, "--list",
        help="List the bundled puzzles and exit.",
    ),
    log_level: str = typer.Option(
        "warning", "--log-level",
        help="Logging level (debug, info, warning, error).",
    ),
) -> None:
    """Nonogram Game."""
    _configure_logging(log_level)

    if list_only:
        _print_puzzles()
        return

    solver = LineSolver(SolverConfig(max_depth=max_depth))
    try:
        if random_board:
            rng = random.Random(seed)
            game = GamePlay(GameGenerator.random(width, height, rng=rng), solver)
        elif puzzle is not None:
            game = GamePlay.from_file(_resolve_puzzle(puzzle), solver)
        else:
            game = None
    except (OSError, PuzzleFileError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--puzzle") from exc

    from frontend.cli.rich import app as rich_app

    if solve:
        if game is None:
            raise typer.BadParameter("--solve needs --puzzle or --random.")
        report = game.auto_solve()
        rich_app.print_board(game.board, report)
        raise typer.Exit(code=0 if report.solved else 1)

    rich_app.run(PUZZLES_DIR, puzzle=puzzle, game=game, solver=solver)


if __name__ == "__main__":
    app()
