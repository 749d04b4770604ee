"""Nonogram line solver.

Given a :class:`Line`, :meth:`LineSolver.solve_line` runs a fixed battery
of techniques in order and returns the moves produced by the first one that
finds anything, or ``None`` when none of them does.  Nothing is guessed:
every returned move follows from the clues and the tiles already known.

Two techniques recurse.  They cut the line into smaller sub-lines whose
clues are known exactly, solve those with the full battery, and translate
the positions back.  Each recursive call covers a strictly shorter range of
tiles, so recursion always ends; ``SolverConfig.max_depth`` caps it anyway.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from backend.engine.gamesolver import techniques as t
from backend.engine.gamesolver.techniques import Assignment, Moves
from backend.models.line import Line

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100

# Solves the closed range ``(tile_start, tile_end, clue_start, clue_end)`` of
# a line and returns moves already translated into that line's positions.
SolveRange = Callable[[Line, int, int, int, int], "Moves | None"]


class DeductionContractError(AssertionError):
    """A technique produced a move it had no right to produce.

    This is a bug in a deduction rule, never a property of the puzzle.
    """


@dataclass(frozen=True)
class SolverConfig:
    max_depth: int = DEFAULT_MAX_DEPTH
    check_contract: bool = True


@dataclass(frozen=True)
class Technique:
    name: str
    apply: Callable[..., Moves | None]
    reversible: bool = False
    recursive: bool = False


@dataclass
class _Call:
    """Scratch state for one top-level ``solve_line`` call."""

    depth: int = 0
    memo: dict[tuple[tuple[int, ...], tuple[int, ...]], Moves | None] = field(
        default_factory=dict
    )


# -- index helpers ------------------------------------------------------------


def offset(moves: Sequence[Assignment], k: int) -> Moves:
    """Shift sub-line positions by *k* into the parent line's positions."""
    return [Assignment(m.index + k, m.full) for m in moves]


def mirror(moves: Sequence[Assignment], length: int) -> Moves:
    """Map positions of a reversed line back onto the original line."""
    return [Assignment(length - 1 - m.index, m.full) for m in moves]


def union(first: Sequence[Assignment], second: Sequence[Assignment]) -> Moves:
    """Merge two move lists, keeping each position once."""
    merged: dict[int, bool] = {}
    for move in [*first, *second]:
        if merged.get(move.index, move.full) != move.full:
            raise DeductionContractError(
                f"Conflicting moves for position {move.index}."
            )
        merged[move.index] = move.full
    return [Assignment(i, v) for i, v in merged.items()]


# -- recursive techniques -----------------------------------------------------


def recurse_without_bounding_clues_and_empties(
    line: Line, solve_range: SolveRange
) -> Moves | None:
    """Trim finished business off both edges and solve what is left.

    Walking in from each edge over known tiles, Empties are skipped and runs
    of Fulls are counted against the edgemost unfinished clue.  A clue that
    is complete but not yet capped yields that single Empty cap straight
    away.  Otherwise, if anything was trimmed, the interior is solved as a
    sub-line with the remaining clues.
    """
    sizes = line.clue_sizes
    if not sizes:
        return None
    length = line.length

    start, start_clue, count = 0, 0, 0
    for i in range(length):
        if not line.get_known(i):
            break
        if not line.get_state(i):
            start, count = i + 1, 0
            continue
        if start_clue >= len(sizes):
            break
        count += 1
        if count == sizes[start_clue]:
            start_clue, count, start = start_clue + 1, 0, i + 1
            if i + 1 < length and not line.get_known(i + 1):
                logger.debug("Capping finished clue at %d", i + 1)
                return [Assignment(i + 1, False)]

    end, end_clue, count = length - 1, len(sizes) - 1, 0
    for i in range(length - 1, -1, -1):
        if not line.get_known(i):
            break
        if not line.get_state(i):
            end, count = i - 1, 0
            continue
        if end_clue < 0:
            break
        count += 1
        if count == sizes[end_clue]:
            end_clue, count, end = end_clue - 1, 0, i - 1
            if i - 1 >= 0 and not line.get_known(i - 1):
                logger.debug("Capping finished clue at %d", i - 1)
                return [Assignment(i - 1, False)]

    if start == 0 and end == length - 1:
        # Nothing trimmed; recursing would just loop on the same line.
        return None
    if start > end:
        return None

    return solve_range(line, start, end, start_clue, end_clue)


def recursive_fill_bound_edgemost_clue(
    line: Line, solve_range: SolveRange
) -> Moves | None:
    """Split the line at the Empty bounding clue 1 and solve both halves.

    The left half holds clue 1 alone; the right half holds the others.
    """
    scan = t.bounded_edge_scan(line)
    if scan is None:
        return None
    empty = scan[2]
    last = len(line.clues) - 1

    logger.debug(
        "Splitting %r into 0..%d and %d..%d", line, empty - 1, empty + 1, line.length - 1
    )
    left = solve_range(line, 0, empty - 1, 0, 0)
    right = solve_range(line, empty + 1, line.length - 1, 1, last)

    if left and right:
        return union(left, right)
    return left or right or None


# -- the solver ---------------------------------------------------------------


BATTERY: tuple[Technique, ...] = (
    Technique("recurse_without_bounding_clues_and_empties",
              recurse_without_bounding_clues_and_empties, recursive=True),
    Technique("empty_clue_list", t.empty_clue_list),
    Technique("full_line_clue", t.full_line_clue),
    Technique("perfect_fit", t.perfect_fit),
    Technique("all_empties_accounted_for", t.all_empties_accounted_for),
    Technique("all_fulls_accounted_for", t.all_fulls_accounted_for),
    Technique("extend_and_bound_edge_clue", t.extend_and_bound_edge_clue, reversible=True),
    Technique("off_by_one", t.off_by_one, reversible=True),
    Technique("full_near_edge", t.full_near_edge, reversible=True),
    Technique("pad_empties_on_single_clue", t.pad_empties_on_single_clue),
    Technique("empty_too_small_edgemost_gap", t.empty_too_small_edgemost_gap, reversible=True),
    Technique("fill_bound_edgemost_clue", t.fill_bound_edgemost_clue, reversible=True),
    Technique("unbounded_largest_clue", t.unbounded_largest_clue),
    Technique("single_clue_wider_than_half_the_line", t.single_clue_wider_than_half_the_line),
    Technique("shift_and_overlap", t.shift_and_overlap),
    Technique("recursive_fill_bound_edgemost_clue",
              recursive_fill_bound_edgemost_clue, reversible=True, recursive=True),
    Technique("gapped_fulls_longer_than_longest_clue", t.gapped_fulls_longer_than_longest_clue),
)


class LineSolver:
    """Stateless deduction engine; the config is fixed at construction."""

    def __init__(
        self,
        config: SolverConfig | None = None,
        battery: Sequence[Technique] = BATTERY,
    ) -> None:
        self.config = config or SolverConfig()
        self.battery = tuple(battery)

    def solve_line(self, line: Line) -> Moves | None:
        """Return new moves for *line*, or ``None`` if nothing can be deduced."""
        return self._solve(line, _Call())

    def attempt(self, technique: Technique, line: Line) -> Moves | None:
        """Run one technique (both directions if reversible) on *line*."""
        return self._attempt(technique, line, _Call())

    # -- internals ------------------------------------------------------------

    def _solve(self, line: Line, call: _Call) -> Moves | None:
        for technique in self.battery:
            moves = self._attempt(technique, line, call)
            if moves:
                logger.debug("%s -> %d move(s) on %s", technique.name, len(moves), line)
                return moves
        return None

    def _attempt(self, technique: Technique, line: Line, call: _Call) -> Moves | None:
        moves = self._apply(technique, line, call)
        if not moves and technique.reversible:
            reversed_moves = self._apply(technique, line.reverse(), call)
            if reversed_moves:
                moves = mirror(reversed_moves, line.length)
        if moves and self.config.check_contract:
            self._check(technique, line, moves)
        return moves or None

    def _apply(self, technique: Technique, line: Line, call: _Call) -> Moves | None:
        if not technique.recursive:
            return technique.apply(line)

        def solve_range(
            parent: Line, tile_start: int, tile_end: int, clue_start: int, clue_end: int
        ) -> Moves | None:
            return self._solve_range(
                parent, tile_start, tile_end, clue_start, clue_end, call
            )

        return technique.apply(line, solve_range)

    def _solve_range(
        self,
        line: Line,
        tile_start: int,
        tile_end: int,
        clue_start: int,
        clue_end: int,
        call: _Call,
    ) -> Moves | None:
        if tile_start > tile_end or tile_start < 0 or tile_end >= line.length:
            logger.warning(
                "Bad recursion bounds %d..%d on a line of %d tiles",
                tile_start, tile_end, line.length,
            )
            return None
        if call.depth >= self.config.max_depth:
            logger.warning("Recursion depth %d reached, giving up", call.depth)
            return None

        sub = line.subline(tile_start, tile_end, clue_start, clue_end)
        key = (tuple(map(id, sub.tiles)), tuple(map(id, sub.clues)))
        if key not in call.memo:
            call.depth += 1
            try:
                call.memo[key] = self._solve(sub, call)
            finally:
                call.depth -= 1

        moves = call.memo[key]
        return offset(moves, tile_start) if moves else None

    def _check(self, technique: Technique, line: Line, moves: Moves) -> None:
        seen: set[int] = set()
        for index, _ in moves:
            if not 0 <= index < line.length:
                raise DeductionContractError(
                    f"{technique.name} produced position {index} "
                    f"outside a line of {line.length} tiles."
                )
            if line.get_known(index):
                raise DeductionContractError(
                    f"{technique.name} produced a move for already known "
                    f"position {index} on {line}."
                )
            if index in seen:
                raise DeductionContractError(
                    f"{technique.name} produced position {index} twice."
                )
            seen.add(index)


_DEFAULT_SOLVER = LineSolver()


def solve_line(line: Line) -> Moves | None:
    """Solve *line* with the default configuration."""
    return _DEFAULT_SOLVER.solve_line(line)


__all__ = [
    "BATTERY",
    "DEFAULT_MAX_DEPTH",
    "DeductionContractError",
    "LineSolver",
    "SolverConfig",
    "Technique",
    "mirror",
    "offset",
    "solve_line",
    "union",
]
