"""Single-line deduction techniques.

Each technique inspects what is currently known about a :class:`Line` and
either returns a non-empty list of :class:`Assignment` for tiles that are
not yet known, or ``None`` when it has nothing to say.  Techniques never
mutate the line.

Techniques marked *reversible* in the solver's battery only look at the
left edge of the line; the solver runs them a second time on
``line.reverse()`` to cover the right edge.

Worked examples in the comments use ``O`` for a known Full tile, ``X`` for
a known Empty tile and ``_`` for an unknown one.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from backend.models.line import Line


class Assignment(NamedTuple):
    """Position ``index`` of a line must have full-state ``full``."""

    index: int
    full: bool


Moves = list[Assignment]


# -- helpers ------------------------------------------------------------------


def _is_full(line: Line, i: int) -> bool:
    return line.get_known(i) and line.get_state(i)


def _is_empty(line: Line, i: int) -> bool:
    return line.get_known(i) and not line.get_state(i)


def _assign_unknown(line: Line, indices: Iterable[int], full: bool) -> Moves:
    """Assign *full* to every index in range that is still unknown."""
    return [
        Assignment(i, full)
        for i in indices
        if 0 <= i < line.length and not line.get_known(i)
    ]


def _moves_or_none(moves: Moves) -> Moves | None:
    """Drop duplicate indices; an empty result means "nothing new"."""
    seen: set[int] = set()
    unique: Moves = []
    for move in moves:
        if move.index not in seen:
            seen.add(move.index)
            unique.append(move)
    return unique or None


def sum_of_clues(line: Line) -> int:
    return sum(line.clue_sizes)


def largest_clue(line: Line) -> int:
    return max(line.clue_sizes, default=0)


def full_runs(line: Line) -> list[tuple[int, int]]:
    """Return ``(start, length)`` of every maximal run of known Full tiles."""
    runs: list[tuple[int, int]] = []
    start = -1
    for i in range(line.length):
        if _is_full(line, i):
            if start < 0:
                start = i
        elif start >= 0:
            runs.append((start, i - start))
            start = -1
    if start >= 0:
        runs.append((start, line.length - start))
    return runs


def bounded_edge_scan(line: Line) -> tuple[int, int, int] | None:
    """Find a known Empty near the left edge that only clue 1 can precede.

    Two clues need at least ``c1 + 1 + c2`` tiles, so a stretch of at most
    ``c1 + c2`` tiles ending in a known Empty can hold clue 1 and nothing
    else.  If that stretch also contains a known Full, it *is* clue 1.

    Returns ``(leftmost_full, rightmost_full, empty)`` or ``None``.
    """
    sizes = line.clue_sizes
    if len(sizes) < 2:
        return None

    leftmost = rightmost = -1
    for i in range(min(sizes[0] + sizes[1] + 1, line.length)):
        if _is_empty(line, i):
            if leftmost < 0:
                return None
            return leftmost, rightmost, i
        if _is_full(line, i):
            if leftmost < 0:
                leftmost = i
            rightmost = i
    return None


# -- whole-line techniques ----------------------------------------------------


def empty_clue_list(line: Line) -> Moves | None:
    """No clues at all: every unknown tile is Empty."""
    if line.clues:
        return None
    return _moves_or_none(_assign_unknown(line, range(line.length), False))


def full_line_clue(line: Line) -> Moves | None:
    """A single clue as long as the line: every unknown tile is Full."""
    if line.clue_sizes != [line.length]:
        return None
    return _moves_or_none(_assign_unknown(line, range(line.length), True))


def perfect_fit(line: Line) -> Moves | None:
    """Clues plus single gaps fill the line exactly, so the layout is forced."""
    sizes = line.clue_sizes
    if not sizes or sum(sizes) + len(sizes) - 1 != line.length:
        return None

    layout: list[bool] = []
    for n, size in enumerate(sizes):
        if n:
            layout.append(False)
        layout.extend([True] * size)

    return _moves_or_none(
        [Assignment(i, v) for i, v in enumerate(layout) if not line.get_known(i)]
    )


def all_empties_accounted_for(line: Line) -> Moves | None:
    """Every Empty is already known, so the remaining tiles are Full."""
    found = sum(1 for i in range(line.length) if _is_empty(line, i))
    if found != line.length - sum_of_clues(line):
        return None
    return _moves_or_none(_assign_unknown(line, range(line.length), True))


def all_fulls_accounted_for(line: Line) -> Moves | None:
    """Every Full is already known, so the remaining tiles are Empty."""
    found = sum(1 for i in range(line.length) if _is_full(line, i))
    if found != sum_of_clues(line):
        return None
    return _moves_or_none(_assign_unknown(line, range(line.length), False))


# -- edge techniques (reversible) ---------------------------------------------


def extend_and_bound_edge_clue(line: Line) -> Moves | None:
    """A Full on the edge starts clue 1: extend it and cap it with an Empty.

    e.g. {3 1} ``O_____`` -> ``OOOX__``
    """
    if not line.clues or not _is_full(line, 0):
        return None
    size = line.clues[0].size
    moves = _assign_unknown(line, range(1, size), True)
    moves += _assign_unknown(line, [size], False)
    return _moves_or_none(moves)


def off_by_one(line: Line) -> Moves | None:
    """Tile ``s1`` is Full, so clue 1 cannot start on tile 0."""
    if not line.clues:
        return None
    size = line.clues[0].size
    if size < line.length and _is_full(line, size):
        return _moves_or_none(_assign_unknown(line, [0], False))
    return None


def full_near_edge(line: Line) -> Moves | None:
    """A Full within ``s1`` tiles of the edge belongs to clue 1.

    Clue 1 then covers everything from that Full out to tile ``s1 - 1``.
    e.g. {4} ``_O_____`` -> ``_OOO___``
    """
    if not line.clues:
        return None
    size = min(line.clues[0].size, line.length)
    for i in range(size):
        if _is_full(line, i):
            return _moves_or_none(_assign_unknown(line, range(i + 1, size), True))
    return None


def empty_too_small_edgemost_gap(line: Line) -> Moves | None:
    """The gap before the first Empty is too small for clue 1: all Empty.

    e.g. {3} ``__X____`` -> ``XXX____``
    """
    if not line.clues:
        return None
    for i in range(min(line.clues[0].size, line.length)):
        if _is_full(line, i):
            return None
        if _is_empty(line, i):
            return _moves_or_none(_assign_unknown(line, range(i), False))
    return None


def fill_bound_edgemost_clue(line: Line) -> Moves | None:
    """Pin clue 1 between the edge and a nearby Empty.

    See :func:`bounded_edge_scan` for why only clue 1 fits there.  Tiles out
    of its reach become Empty, tiles every placement covers become Full.
    """
    scan = bounded_edge_scan(line)
    if scan is None:
        return None
    leftmost, rightmost, empty = scan
    size = line.clues[0].size

    moves = _assign_unknown(line, range(0, rightmost - size + 1), False)
    moves += _assign_unknown(line, range(leftmost + size, empty), False)
    moves += _assign_unknown(line, range(leftmost + 1, size), True)
    moves += _assign_unknown(line, range(max(empty - size, 0), rightmost + 1), True)
    return _moves_or_none(moves)


# -- single-clue techniques ---------------------------------------------------


def pad_empties_on_single_clue(line: Line) -> Moves | None:
    """One clue: tiles beyond its reach from the known Fulls are Empty."""
    if len(line.clues) != 1:
        return None
    runs = full_runs(line)
    if not runs:
        return None
    size = line.clues[0].size
    leftmost = runs[0][0]
    rightmost = runs[-1][0] + runs[-1][1] - 1

    moves = _assign_unknown(line, range(0, rightmost - size + 1), False)
    moves += _assign_unknown(line, range(leftmost + size, line.length), False)
    return _moves_or_none(moves)


def single_clue_wider_than_half_the_line(line: Line) -> Moves | None:
    """One clue longer than half the line always covers the middle."""
    if len(line.clues) != 1:
        return None
    size = line.clues[0].size
    if size * 2 <= line.length:
        return None
    return _moves_or_none(_assign_unknown(line, range(line.length - size, size), True))


# -- whole-clue-list techniques -----------------------------------------------


def unbounded_largest_clue(line: Line) -> Moves | None:
    """A run of Fulls as long as the largest clue is complete: cap it."""
    largest = largest_clue(line)
    if not largest:
        return None

    moves: Moves = []
    start, run = -1, 0
    for i in range(line.length):
        if not _is_full(line, i):
            start, run = -1, 0
            continue
        if start < 0:
            start, run = i, 1
        else:
            run += 1
        if run == largest:
            moves += _assign_unknown(line, [start - 1, start + run], False)
            start, run = -1, 0
    return _moves_or_none(moves)


def shift_and_overlap(line: Line) -> Moves | None:
    """Overlap the leftmost and rightmost packings of the clues.

    Any tile claimed by the same clue in both packings is Full.  Known
    tiles are not used to narrow the packings.

    e.g. {3 1 2} on ten tiles::

        left:   111_2_33__
        right:  __111_2_33
        Full:     ^
    """
    sizes = line.clue_sizes
    if not sizes:
        return None
    minimal = sum(sizes) + len(sizes) - 1
    shift = line.length - minimal
    if shift < 0:
        return None

    packed: list[int] = []
    for n, size in enumerate(sizes, start=1):
        if n > 1:
            packed.append(0)
        packed.extend([n] * size)
    leftish = packed + [0] * shift
    rightish = [0] * shift + packed

    return _moves_or_none(
        _assign_unknown(
            line,
            (i for i, (a, b) in enumerate(zip(leftish, rightish)) if a and a == b),
            True,
        )
    )


def gapped_fulls_longer_than_longest_clue(line: Line) -> Moves | None:
    """Two Full runs one unknown tile apart that would join into too long a run.

    The gap must be Empty.  e.g. {1 5 1 2} ``____OOO_OO_____``: the gap at
    index 7 would make a run of six.
    """
    largest = largest_clue(line)
    if not largest:
        return None

    moves: Moves = []
    runs = full_runs(line)
    for (left, left_len), (right, right_len) in zip(runs, runs[1:]):
        gap = left + left_len
        if right == gap + 1 and left_len + 1 + right_len > largest:
            moves += _assign_unknown(line, [gap], False)
    return _moves_or_none(moves)


__all__ = [
    "Assignment",
    "Moves",
    "all_empties_accounted_for",
    "all_fulls_accounted_for",
    "bounded_edge_scan",
    "empty_clue_list",
    "empty_too_small_edgemost_gap",
    "extend_and_bound_edge_clue",
    "fill_bound_edgemost_clue",
    "full_line_clue",
    "full_near_edge",
    "full_runs",
    "gapped_fulls_longer_than_longest_clue",
    "largest_clue",
    "off_by_one",
    "pad_empties_on_single_clue",
    "perfect_fit",
    "shift_and_overlap",
    "single_clue_wider_than_half_the_line",
    "sum_of_clues",
    "unbounded_largest_clue",
]
