"""Line solver tests.

Seeded random lines with a known ground truth are used to check that the
solver never deduces anything false, whichever technique fires and however
deep the recursion goes.
"""

from __future__ import annotations

import logging
import random

import pytest

from backend.engine.gamesolver import solve_line
from backend.engine.gamesolver.solver import (
    BATTERY,
    DeductionContractError,
    LineSolver,
    Technique,
    mirror,
    offset,
    union,
)
from backend.engine.gamesolver.techniques import Assignment
from backend.models.clue import Clue
from backend.models.line import Line
from backend.models.tile import Tile

F, E = True, False


# -- helpers ------------------------------------------------------------------


def _line(cells: str, clues: list[int]) -> Line:
    tiles = [Tile(full=c == "O", known=c != "_") for c in cells]
    return Line(tiles, [Clue(s) for s in clues])


def _random_line(rng: random.Random, length: int) -> Line:
    """A line whose clues come from a random ground truth, partly revealed."""
    density = rng.choice([0.3, 0.5, 0.7])
    reveal = rng.choice([0.0, 0.2, 0.4, 0.6])
    tiles = [
        Tile(full=rng.random() < density, known=rng.random() < reveal)
        for _ in range(length)
    ]
    return Line(tiles)


def _random_lines(count: int, seed: int, max_length: int = 25) -> list[Line]:
    rng = random.Random(seed)
    return [_random_line(rng, rng.randint(1, max_length)) for _ in range(count)]


def _assert_sound(line: Line, moves: list[Assignment] | None) -> None:
    for index, full in moves or []:
        assert not line.get_known(index), f"{index} was already known on {line}"
        assert line.get_state(index) == full, f"wrong value at {index} on {line}"


def _apply(line: Line, moves: list[Assignment]) -> None:
    for index, _ in moves:
        line.get_tile(index).set_known(True)


# -- concrete scenarios -------------------------------------------------------


def test_single_clue_filling_the_line() -> None:
    assert solve_line(_line("_____", [5])) == [(i, F) for i in range(5)]


def test_line_without_clues() -> None:
    assert solve_line(_line("______", [])) == [(i, E) for i in range(6)]


def test_full_edge_tile_is_extended_and_capped() -> None:
    moves = solve_line(_line("O_________", [3, 1, 2]))
    assert sorted(moves) == [(1, F), (2, F), (3, E)]


def test_lone_full_far_from_the_edge_is_not_enough() -> None:
    assert solve_line(_line("___O___", [4])) is None


def test_full_near_the_edge_is_padded_to_clue_length() -> None:
    assert sorted(solve_line(_line("_O_____", [4]))) == [(2, F), (3, F)]


def test_perfect_fit_wins_before_overlap() -> None:
    moves = solve_line(_line("_____", [2, 2]))
    assert sorted(moves) == [(0, F), (1, F), (2, E), (3, F), (4, F)]


def test_completed_edge_clue_gets_capped_first() -> None:
    assert solve_line(_line("OO____", [2, 1])) == [(2, E)]


def test_interior_is_solved_after_trimming() -> None:
    assert solve_line(_line("OX_____", [1, 3])) == [(4, F)]


def test_split_on_bounding_empty() -> None:
    assert solve_line(_line("_O_X___", [2, 2])) == [(5, F)]


def test_nothing_to_deduce_returns_none() -> None:
    assert solve_line(_line("__________", [1, 1, 1])) is None


def test_fully_known_line_returns_none() -> None:
    assert solve_line(_line("OXO", [1, 1])) is None


def test_result_indices_are_unique() -> None:
    # Both Full ranges of fill_bound_edgemost_clue cover index 1 here.
    line = _line("O_OX______", [3, 1])
    assert LineSolver().attempt(BATTERY[11], line) == [(1, F)]


# -- index helpers ------------------------------------------------------------


def test_offset_and_mirror() -> None:
    moves = [Assignment(0, F), Assignment(2, E)]
    assert offset(moves, 3) == [(3, F), (5, E)]
    assert mirror(moves, 5) == [(4, F), (2, E)]


def test_union_keeps_each_position_once() -> None:
    merged = union([Assignment(0, F), Assignment(1, E)], [Assignment(1, E), Assignment(4, F)])
    assert merged == [(0, F), (1, E), (4, F)]


def test_union_rejects_contradictions() -> None:
    with pytest.raises(DeductionContractError):
        union([Assignment(1, F)], [Assignment(1, E)])


# -- contract -----------------------------------------------------------------


def _rogue(moves: list[Assignment]) -> Technique:
    return Technique("rogue", lambda line: moves)


def test_move_on_known_tile_is_a_contract_violation() -> None:
    solver = LineSolver(battery=[_rogue([Assignment(0, True)])])
    with pytest.raises(DeductionContractError, match="already known"):
        solver.solve_line(_line("O__", [3]))


def test_move_off_the_line_is_a_contract_violation() -> None:
    solver = LineSolver(battery=[_rogue([Assignment(3, True)])])
    with pytest.raises(DeductionContractError, match="outside"):
        solver.solve_line(_line("___", [3]))


def test_duplicate_move_is_a_contract_violation() -> None:
    solver = LineSolver(battery=[_rogue([Assignment(1, True), Assignment(1, True)])])
    with pytest.raises(DeductionContractError, match="twice"):
        solver.solve_line(_line("___", [3]))


def test_inverted_recursion_bounds_abort_the_branch(caplog) -> None:
    def backwards(line, solve_range):
        return solve_range(line, 3, 1, 0, 0)

    solver = LineSolver(battery=[Technique("backwards", backwards, recursive=True)])
    with caplog.at_level(logging.WARNING):
        assert solver.solve_line(_line("_____", [2])) is None
    assert "Bad recursion bounds" in caplog.text


# -- properties ---------------------------------------------------------------


@pytest.mark.parametrize("seed", range(4))
def test_solve_line_is_sound(seed: int) -> None:
    for line in _random_lines(300, seed):
        _assert_sound(line, solve_line(line))


@pytest.mark.parametrize("technique", BATTERY, ids=lambda t: t.name)
def test_each_technique_is_sound(technique: Technique) -> None:
    solver = LineSolver()
    for line in _random_lines(400, seed=sum(map(ord, technique.name))):
        _assert_sound(line, solver.attempt(technique, line))


@pytest.mark.parametrize(
    "technique",
    [t for t in BATTERY if t.reversible and not t.recursive],
    ids=lambda t: t.name,
)
def test_reversed_runs_never_contradict_forward_runs(technique: Technique) -> None:
    for line in _random_lines(300, seed=7):
        forward = technique.apply(line) or []
        backward = mirror(technique.apply(line.reverse()) or [], line.length)
        seen = dict(forward)
        for index, full in backward:
            assert seen.get(index, full) == full


@pytest.mark.parametrize("seed", range(3))
def test_repeated_solving_reaches_a_sound_fixpoint(seed: int) -> None:
    for line in _random_lines(100, seed + 100, max_length=30):
        for _ in range(line.length + 1):
            moves = solve_line(line)
            if moves is None:
                break
            _assert_sound(line, moves)
            _apply(line, moves)
        else:
            pytest.fail(f"no fixpoint after {line.length + 1} rounds on {line}")


def test_recursion_depth_is_bounded_by_line_length() -> None:
    deepest = 0

    class DepthTracker(LineSolver):
        def _solve(self, line, call):
            nonlocal deepest
            deepest = max(deepest, call.depth)
            return super()._solve(line, call)

    tracker = DepthTracker()
    for line in _random_lines(300, seed=11, max_length=40):
        deepest = 0
        _assert_sound(line, tracker.solve_line(line))
        assert deepest <= line.length


# -- long lines ---------------------------------------------------------------


def test_long_unknown_line_terminates() -> None:
    rng = random.Random(5)
    tiles = [Tile(full=rng.random() < 0.5) for _ in range(1000)]
    assert solve_line(Line(tiles)) is None


def test_long_line_with_known_empties_is_a_perfect_fit_inside() -> None:
    # O X O X ... with every Empty revealed: trimming the last Empty leaves
    # 500 single clues packed into 999 tiles.
    tiles = [Tile(full=i % 2 == 0, known=i % 2 == 1) for i in range(1000)]
    line = Line(tiles)
    moves = solve_line(line)
    assert moves is not None and len(moves) == 500
    _assert_sound(line, moves)
