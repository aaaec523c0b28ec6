"""Match detection.

A match rule is any callable taking a :class:`Grid` and returning a list of
:class:`MatchGroup`. :func:`find_matches` is the standard rule (straight runs
of three or more, with same-symbol runs that touch fused into one group);
:func:`run_length_matcher` builds the same rule for other run lengths.
Alternative shapes only need to return groups of the same form.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, List, Set

from orbfall.board.grid import EMPTY, Grid, Position
from orbfall.constants import MIN_MATCH_LENGTH


@dataclass(frozen=True, slots=True)
class MatchGroup:
    symbol: int
    cells: FrozenSet[Position]

    @property
    def size(self) -> int:
        return len(self.cells)

    @property
    def anchor(self) -> Position:
        """Top-most, then left-most cell; used to order groups."""
        return min(self.cells)


MatchStrategy = Callable[[Grid], List[MatchGroup]]


def sort_groups(groups: Iterable[MatchGroup]) -> List[MatchGroup]:
    """Order groups top-to-bottom, left-to-right by their anchor cell."""
    return sorted(groups, key=lambda group: group.anchor)


def find_matches(grid: Grid, *, min_length: int = MIN_MATCH_LENGTH) -> List[MatchGroup]:
    """Return every connected group of matched cells on ``grid``."""
    marked = _mark_runs(grid, min_length)
    if not marked:
        return []
    return _group_marked(grid, marked)


def run_length_matcher(min_length: int) -> MatchStrategy:
    if min_length < 2:
        raise ValueError(f"Minimum run length must be at least 2, got {min_length}")

    def matcher(grid: Grid) -> List[MatchGroup]:
        return find_matches(grid, min_length=min_length)

    return matcher


def _mark_runs(grid: Grid, min_length: int) -> Set[Position]:
    marked: Set[Position] = set()
    # Horizontal runs
    for r in range(grid.rows):
        c = 0
        while c < grid.cols:
            symbol = grid.cell_at(r, c)
            end = c
            while end + 1 < grid.cols and symbol is not EMPTY and grid.cell_at(r, end + 1) == symbol:
                end += 1
            if symbol is not EMPTY and end - c + 1 >= min_length:
                marked.update((r, i) for i in range(c, end + 1))
            c = end + 1
    # Vertical runs
    for c in range(grid.cols):
        r = 0
        while r < grid.rows:
            symbol = grid.cell_at(r, c)
            end = r
            while end + 1 < grid.rows and symbol is not EMPTY and grid.cell_at(end + 1, c) == symbol:
                end += 1
            if symbol is not EMPTY and end - r + 1 >= min_length:
                marked.update((i, c) for i in range(r, end + 1))
            r = end + 1
    return marked


def _group_marked(grid: Grid, marked: Set[Position]) -> List[MatchGroup]:
    visited: Set[Position] = set()
    groups: List[MatchGroup] = []
    for start in sorted(marked):
        if start in visited:
            continue
        symbol = grid.cell_at(*start)
        component: Set[Position] = set()
        stack = [start]
        visited.add(start)
        while stack:
            row, col = stack.pop()
            component.add((row, col))
            for neighbour in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1)):
                if neighbour in visited or neighbour not in marked:
                    continue
                if grid.cell_at(*neighbour) != symbol:
                    continue
                visited.add(neighbour)
                stack.append(neighbour)
        groups.append(MatchGroup(symbol=symbol, cells=frozenset(component)))
    return groups
