"""Rich terminal frontend: clue headers, a cursor, and a ticking clock.

The board is drawn as a Rich table with the row clues on the left and the
column clues stacked above each column.  Lines whose Full tiles have all
been revealed have their clues dimmed.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.gameplay import GamePlay, SolveReport
from backend.engine.gameplay.game import Cell
from backend.engine.gamesolver import LineSolver
from backend.models.board import Board
from backend.models.puzzle_file import PUZZLE_SUFFIX, list_puzzles
from frontend.cli.input_handler import get_key, get_key_timeout

console = Console()

_MOVES = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

# (key, label, style) for the legend under the board.
_CONTROLS = [
    ("↑↓←→/WASD", "move", "bold cyan"),
    ("F", "full", "bold cyan"),
    ("X", "empty", "bold cyan"),
    ("N", "deduce", "bold cyan"),
    ("V", "solve", "bold cyan"),
    ("P", "peek", "bold cyan"),
    ("M", "moves", "bold cyan"),
    ("R", "random", "bold yellow"),
    ("L", "next", "bold yellow"),
    ("Q", "quit", "bold cyan"),
]


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _clue_text(sizes: list[int], sep: str) -> str:
    return sep.join(str(s) for s in sizes) if sizes else "0"


# -- board rendering ----------------------------------------------------------


def _cell(board: Board, x: int, y: int, peek: bool) -> str:
    tile = board.get_tile(x, y)
    if tile.known:
        return "[bold white]■[/bold white]" if tile.full else "[red]×[/red]"
    if peek and tile.full:
        return "[dim cyan]□[/dim cyan]"
    return "[dim]·[/dim]"


def render_board(
    board: Board,
    cursor: tuple[int, int] | None = None,
    peek: bool = False,
) -> Table:
    """Return a Rich Table representing the puzzle grid and its clues."""
    table = Table(
        show_header=True,
        show_edge=True,
        box=rich.box.SIMPLE_HEAD,
        border_style="bright_blue",
        padding=(0, 0),
    )
    table.add_column("", justify="right", no_wrap=True)
    for x, column in enumerate(board.columns):
        style = "dim" if column.solved else "bold #b4befe"
        table.add_column(
            Text(_clue_text(column.clue_sizes, "\n"), style=style),
            justify="center",
            vertical="bottom",
            width=2,
        )

    for y, row in enumerate(board.rows):
        style = "dim" if row.solved else "bold #b4befe"
        cells = [f"[{style}]{_clue_text(row.clue_sizes, ' ')}[/] "]
        for x in range(board.width):
            cell = _cell(board, x, y, peek)
            if cursor == (x, y):
                cell = f"[reverse]{cell}[/reverse]"
            cells.append(cell)
        table.add_row(*cells)

    return table


def print_board(board: Board, report: SolveReport | None = None) -> None:
    """Print the board once, without clearing the screen."""
    panel = Panel(
        Align.center(render_board(board)),
        title=f"[bold cyan]{board.name}  {board.width}×{board.height}[/bold cyan]",
        border_style="bright_blue",
        padding=(1, 2),
    )
    console.print(panel)
    if report is not None:
        verdict = (
            "[bold green]Solved[/bold green]"
            if report.solved
            else "[yellow]Stalled: a guess is needed[/yellow]"
        )
        console.print(
            f"  {verdict} after {report.steps} steps, {report.cells} cells deduced."
        )


# -- solver helpers -----------------------------------------------------------


def _apply_step(game: GamePlay) -> str:
    cells = game.step()
    if cells is None:
        if game.is_won:
            return "[green]Already solved![/green]"
        return "[yellow]No deduction available: time to guess.[/yellow]"
    return f"[cyan]Deduced[/cyan] [bold]{len(cells)}[/bold] tile(s)."


def _auto_solve(game: GamePlay) -> str:
    board = game.board

    def show(step: int, cells: list[Cell]) -> None:
        console.clear()
        progress = Text()
        progress.append(f"  Solving… step {step} ", style="bold cyan")
        progress.append(f"({len(cells)} tile(s))", style="dim")

        panel = Panel(
            Align.center(render_board(board)),
            title=f"[bold cyan]Auto-Solve  {board.name}[/bold cyan]",
            border_style="cyan",
            padding=(1, 2),
        )
        console.print()
        console.print(Align.center(panel))
        console.print(Align.center(progress))
        sys.stdout.flush()
        time.sleep(0.05)

    report = game.auto_solve(on_step=show)
    if report.stalled:
        return f"[yellow]Stalled after {report.steps} steps: time to guess.[/yellow]"
    return f"[bold green]Solved in {report.steps} steps![/bold green]"


# -- screens ------------------------------------------------------------------


def _stats(game: GamePlay) -> Text:
    stats = Text()
    stats.append("  Time: ", style="dim")
    stats.append(_format_time(game.state.elapsed_time), style="bold yellow")
    stats.append("    Errors: ", style="dim")
    stats.append(str(game.state.errors), style="bold red")
    stats.append("    Moves: ", style="dim")
    stats.append(str(game.state.moves), style="bold yellow")
    return stats


def _draw_game(
    game: GamePlay,
    cursor: tuple[int, int],
    peek: bool,
    status: str = "",
) -> None:
    console.clear()
    board = game.board

    controls = Text()
    for key, label, style in _CONTROLS:
        controls.append(f"  {key}", style=style)
        controls.append(f" {label} ", style="dim")

    panel = Panel(
        Align.center(render_board(board, cursor=cursor, peek=peek)),
        title=f"[bold cyan]{board.name}  {board.width}×{board.height}[/bold cyan]",
        border_style="yellow" if peek else "bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(_stats(game)))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def render_moves(game: GamePlay) -> Table:
    """Every guess so far, oldest first."""
    table = Table(title="Moves", box=rich.box.SIMPLE_HEAD, border_style="bright_blue")
    for header in ("#", "time", "tile", "guess", ""):
        table.add_column(header, justify="right")
    for n, move in enumerate(game.state.move_list, 1):
        x, y, guess, correct, at = move.get_move()
        table.add_row(
            str(n),
            f"{at:.2f}s",
            f"{x},{y}",
            "Full" if guess else "Empty",
            "[green]correct[/green]" if correct else "[red]wrong[/red]",
        )
    return table


def _show_moves(game: GamePlay) -> None:
    console.clear()
    console.print()
    console.print(Align.center(render_moves(game)))
    console.print(Align.center(Text("\n  Press any key to return.\n", style="dim")))
    get_key()


def _draw_win(game: GamePlay) -> None:
    console.clear()
    board = game.board

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append("SOLVED!", style="bold green")
    congrats.append(f"  {board.name}  ", style="green")
    congrats.append("★\n", style="bold yellow")

    panel = Panel(
        Group(
            Align.center(render_board(board)),
            Align.center(congrats),
            Align.center(_stats(game)),
        ),
        title=f"[bold green]{board.name}  {board.width}×{board.height}[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))


# -- game loop ----------------------------------------------------------------


class _Session:
    """Which puzzle is on screen, and how to start the next game."""

    def __init__(
        self,
        puzzles_dir: Path,
        names: list[str],
        index: int,
        solver: LineSolver | None = None,
    ) -> None:
        self.puzzles_dir = puzzles_dir
        self.names = names
        self.index = index
        self.solver = solver or LineSolver()

    def load(self) -> GamePlay:
        if not self.names:
            return self.random()
        return GamePlay.from_file(
            self.puzzles_dir / f"{self.names[self.index]}{PUZZLE_SUFFIX}",
            self.solver,
        )

    def random(self) -> GamePlay:
        return GamePlay.random(solver=self.solver)

    def next(self) -> GamePlay:
        if self.names:
            self.index = (self.index + 1) % len(self.names)
        return self.load()


def _play(session: _Session, game: GamePlay) -> None:
    cursor = (0, 0)
    peek = False
    status = ""

    while True:
        if game.is_won:
            game.state.pause()
            _draw_win(game)
            console.print(
                Align.center(
                    Text("\n  Press L for the next puzzle, R for a random one, "
                         "Q to quit.\n", style="dim")
                )
            )
            key = get_key()
        else:
            _draw_game(game, cursor, peek, status)
            status = ""
            # Wait for input with a short timeout so the clock keeps ticking.
            key = get_key_timeout(0.5)
            if key is None:
                continue

        if key in _MOVES:
            dx, dy = _MOVES[key]
            board = game.board
            cursor = (
                min(max(cursor[0] + dx, 0), board.width - 1),
                min(max(cursor[1] + dy, 0), board.height - 1),
            )
        elif key in ("full", "enter", "empty"):
            x, y = cursor
            if game.board.get_known(x, y):
                status = "[dim]Already revealed.[/dim]"
            elif game.guess(x, y, key != "empty"):
                status = "[green]Correct.[/green]"
            else:
                status = "[red]Wrong![/red]"
        elif key == "step":
            status = _apply_step(game)
        elif key == "solve":
            status = _auto_solve(game)
        elif key == "peek":
            peek = not peek
        elif key == "moves":
            _show_moves(game)
        elif key == "random":
            game, cursor = session.random(), (0, 0)
        elif key == "next":
            game, cursor = session.next(), (0, 0)
        elif key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return


# -- public entry point -------------------------------------------------------


def run(
    puzzles_dir: Path,
    puzzle: str | None = None,
    game: GamePlay | None = None,
    solver: LineSolver | None = None,
) -> None:
    """Launch the Rich CLI on *game*, or on *puzzle* from *puzzles_dir*.

    *solver* drives hints and auto-solve in every game started from the
    session, including random and next-puzzle boards.
    """
    names = list_puzzles(puzzles_dir)
    index = names.index(puzzle) if puzzle in names else 0
    session = _Session(puzzles_dir, names, index, solver)
    _play(session, game or session.load())
