"""Gameplay, puzzle file, generator and CLI tests."""

from __future__ import annotations

import os
import random
import sys
import threading
from pathlib import Path

import pytest
from typer.testing import CliRunner

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gameplay import GamePlay
from backend.engine.gamesolver import LineSolver, SolverConfig
from backend.models.board import Board
from backend.models.puzzle_file import (
    PuzzleFileError,
    dump_puzzle,
    list_puzzles,
    load_puzzle,
    parse_puzzle,
    save_puzzle,
)

PUZZLES_DIR = Path(__file__).resolve().parents[2] / "puzzles"


def _game(name: str) -> GamePlay:
    return GamePlay.from_file(PUZZLES_DIR / f"{name}.puz")


# -- guessing -----------------------------------------------------------------


def test_guess_records_moves_and_errors() -> None:
    game = GamePlay(Board.from_rows([[True, False]]))

    assert game.guess(0, 0, True)
    assert not game.guess(1, 0, True)
    assert game.state.moves == 2
    assert game.state.errors == 1
    assert [m.correct for m in game.state.move_list] == [True, False]


def test_guess_on_known_tile_is_ignored() -> None:
    game = GamePlay(Board.from_rows([[True, False]]))
    game.guess(0, 0, True)

    assert not game.guess(0, 0, True)
    assert game.state.moves == 1
    assert game.state.errors == 0


def test_revealing_every_full_wins() -> None:
    game = GamePlay(Board.from_rows([[True, False], [False, True]]))
    game.guess(0, 0, True)
    assert not game.is_won
    game.guess(1, 1, True)
    assert game.is_won


# -- deduction ----------------------------------------------------------------


def test_hint_does_not_touch_the_board() -> None:
    game = _game("stripes")

    assert game.hint() == [(x, 0, True) for x in range(5)]
    assert game.state.moves == 0
    assert not game.board.get_known(0, 0)


def test_step_applies_one_line_of_moves() -> None:
    game = _game("stripes")

    cells = game.step()
    assert cells == [(x, 0, True) for x in range(5)]
    assert all(game.board.get_known(x, 0) for x in range(5))
    assert game.state.errors == 0


def test_auto_solve_finishes_a_line_solvable_puzzle() -> None:
    game = _game("stripes")

    report = game.auto_solve()
    assert report.solved and not report.stalled
    assert report.steps >= 3
    assert game.state.errors == 0


def test_auto_solve_respects_max_steps() -> None:
    game = _game("stripes")

    report = game.auto_solve(max_steps=1)
    assert report.steps == 1
    assert not report.solved and not report.stalled


@pytest.mark.parametrize("name", ["heart", "ducky", "arrow", "longneck"])
def test_auto_solve_never_makes_mistakes(name: str) -> None:
    game = _game(name)

    report = game.auto_solve()
    assert game.state.errors == 0
    assert report.solved != report.stalled
    assert report.cells == game.state.moves


def test_random_boards_are_deduced_without_mistakes() -> None:
    rng = random.Random(3)
    for _ in range(20):
        game = GamePlay(GameGenerator.random(8, 8, rng=rng))
        game.auto_solve()
        assert game.state.errors == 0


def test_auto_solve_reports_each_step() -> None:
    game = _game("stripes")
    seen: list[tuple[int, int]] = []

    report = game.auto_solve(on_step=lambda step, cells: seen.append((step, len(cells))))

    assert [step for step, _ in seen] == list(range(1, report.steps + 1))
    assert sum(n for _, n in seen) == report.cells


def test_filled_blank_board_is_not_solved_until_revealed() -> None:
    board = Board.blank(3, 3)
    board.fill_tile(1, 1)
    game = GamePlay(board)
    assert not game.is_won

    # Lines without clues are already solved and never visited, so the lone
    # Full cannot be deduced.
    report = game.auto_solve()
    assert report.stalled and not report.solved
    assert report.cells == 0
    assert not board.get_known(1, 1)


def test_step_on_a_finished_board_returns_none() -> None:
    game = _game("stripes")
    game.auto_solve()
    assert game.step() is None


def test_zero_depth_solver_still_solves_without_recursion() -> None:
    game = GamePlay(_game("stripes").board, LineSolver(SolverConfig(max_depth=0)))
    assert game.auto_solve().solved


# -- puzzle files -------------------------------------------------------------


def test_parse_puzzle() -> None:
    board = parse_puzzle("tiny\n3\n2\n101\n010\n")

    assert (board.name, board.width, board.height) == ("tiny", 3, 2)
    assert [c.size for c in board.row_clues(0)] == [1, 1]
    assert [c.size for c in board.column_clues(1)] == [1]


def test_blank_name_gets_a_placeholder() -> None:
    assert parse_puzzle("\n1\n1\n1\n").name == "oddly blank"


@pytest.mark.parametrize(
    "text, message",
    [
        ("tiny\n3\n", "header"),
        ("tiny\nthree\n1\n111\n", "not a number"),
        ("tiny\n0\n1\n\n", "at least 1"),
        ("tiny\n3\n2\n101\n", "Expected 2 rows"),
        ("tiny\n3\n1\n10\n", "expected 3"),
        ("tiny\n3\n1\n1#1\n", "Bad tile"),
    ],
)
def test_malformed_puzzles_are_rejected(text: str, message: str) -> None:
    with pytest.raises(PuzzleFileError, match=message):
        parse_puzzle(text)


def test_save_and_load(tmp_path: Path) -> None:
    board = Board.from_rows([[True, False, True], [False, True, False]], name="zig")
    path = tmp_path / "nested" / "zig.puz"

    save_puzzle(board, path)
    loaded = load_puzzle(path)

    assert loaded.name == "zig"
    assert dump_puzzle(loaded) == dump_puzzle(board)
    assert list_puzzles(path.parent) == ["zig"]


def test_list_puzzles() -> None:
    assert "stripes" in list_puzzles(PUZZLES_DIR)
    assert list_puzzles(PUZZLES_DIR / "missing") == []


# -- generator ----------------------------------------------------------------


def test_generator_density_extremes() -> None:
    full = GameGenerator.random(4, 3, density=1.0)
    empty = GameGenerator.random(4, 3, density=0.0)

    assert (full.width, full.height) == (4, 3)
    assert all(t.full for t in full.tiles)
    assert not any(t.full for t in empty.tiles)
    assert empty.is_solved()


def test_generator_picks_missing_dimensions() -> None:
    board = GameGenerator.random(rng=random.Random(1))
    assert 6 <= board.width <= 20
    assert 6 <= board.height <= 20


def test_generator_rejects_bad_density() -> None:
    with pytest.raises(ValueError):
        GameGenerator.random(3, 3, density=1.5)


# -- command line -------------------------------------------------------------


runner = CliRunner()


def test_cli_lists_puzzles() -> None:
    from main import app

    result = runner.invoke(app, ["--list"])
    assert result.exit_code == 0
    assert "stripes" in result.output


def test_cli_solves_a_puzzle() -> None:
    from main import app

    result = runner.invoke(app, ["-p", "stripes", "--solve"])
    assert result.exit_code == 0
    assert "Solved" in result.output


def test_cli_rejects_a_missing_puzzle() -> None:
    from main import app

    result = runner.invoke(app, ["-p", "no-such-puzzle", "--solve"])
    assert result.exit_code == 2


# -- clock and terminal frontend ---------------------------------------------


@pytest.mark.parametrize(
    "keys, action",
    [
        ("f", "full"),
        (" ", "full"),
        ("x", "empty"),
        ("N", "step"),
        ("\x1b[A", "up"),
        ("\x1b[D", "left"),
        ("\x1b", "quit"),
        ("z", "z"),
    ],
)
def test_key_decoding(keys: str, action: str) -> None:
    from frontend.cli.input_handler import _decode

    pending = iter(keys[1:])
    assert _decode(keys[0], lambda: next(pending, None)) == action


def test_render_board_shows_clues() -> None:
    from rich.console import Console

    from frontend.cli.rich.app import render_board

    console = Console(width=80, record=True)
    console.print(render_board(_game("stripes").board, cursor=(0, 0)))
    text = console.export_text()
    assert "5" in text
    assert "1" in text


def test_paused_clock_stands_still() -> None:
    game = _game("stripes")
    game.state.pause()
    frozen = game.state.elapsed_time

    assert not game.state.running
    assert game.state.elapsed_time == frozen
    game.state.resume()
    assert game.state.running
    assert game.state.elapsed_time >= frozen


def test_moves_table_lists_every_guess() -> None:
    from rich.console import Console

    from frontend.cli.rich.app import render_moves

    game = GamePlay(Board.from_rows([[True, False]]))
    game.guess(0, 0, True)
    game.guess(1, 0, True)

    console = Console(width=80, record=True)
    console.print(render_moves(game))
    text = console.export_text()
    assert "correct" in text and "wrong" in text
    assert "1,0" in text


def test_session_games_share_the_configured_solver() -> None:
    from frontend.cli.rich.app import _Session

    solver = LineSolver(SolverConfig(max_depth=3))
    session = _Session(PUZZLES_DIR, list_puzzles(PUZZLES_DIR), 0, solver)

    assert session.load().solver is solver
    assert session.next().solver is solver
    assert session.random().solver is solver
    assert _Session(PUZZLES_DIR, [], 0, solver).load().solver is solver


@pytest.mark.skipif(os.name == "nt", reason="needs a pseudo-terminal")
def test_keys_are_read_from_a_raw_terminal(monkeypatch) -> None:
    import pty

    from frontend.cli import input_handler

    master, slave = pty.openpty()
    with os.fdopen(slave, "r") as stdin:
        monkeypatch.setattr(sys, "stdin", stdin)
        assert input_handler.get_key_timeout(0.01) is None

        # Raw mode flushes pending input, so type only once the read is waiting.
        threading.Timer(0.2, os.write, (master, b"\x1b[A")).start()
        assert input_handler.get_key() == "up"

        threading.Timer(0.2, os.write, (master, b"m")).start()
        assert input_handler.get_key_timeout(5.0) == "moves"
    os.close(master)
