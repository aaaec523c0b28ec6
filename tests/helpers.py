from __future__ import annotations

from typing import Sequence

from orbfall.board.grid import EMPTY, BoardMode, Grid
from orbfall.board.match_finder import MatchGroup
from orbfall.board.resolution import ResolutionResult, ResolvedGroup


def grid_from(*rows: str, mode: BoardMode = BoardMode.CLEAR, type_count: int | None = None) -> Grid:
    """Build a grid from strings like ``"01.2"``; ``.`` is an empty cell.

    Defaults to clear mode so gravity never spawns random symbols.
    """
    parsed = [[EMPTY if ch == '.' else int(ch) for ch in row.replace(' ', '')] for row in rows]
    return Grid.from_rows(parsed, mode=mode, type_count=type_count)


def load_rows(grid: Grid, *rows: str) -> None:
    """Overwrite an existing grid in place, same notation as :func:`grid_from`."""
    for r, row in enumerate(rows):
        for c, ch in enumerate(row.replace(' ', '')):
            grid.set_cell(r, c, EMPTY if ch == '.' else int(ch))


def make_group(symbol: int, count: int, row: int = 0) -> MatchGroup:
    """A horizontal group of ``count`` cells; geometry does not matter to combat."""
    return MatchGroup(symbol=symbol, cells=frozenset((row, c) for c in range(count)))


def resolved(*groups: MatchGroup, combo_start: int = 0) -> ResolutionResult:
    """Wrap groups into a single-pass resolution result, numbering combos in order."""
    entries: list[ResolvedGroup] = [
        ResolvedGroup(group=group, combo=combo_start + i + 1, depth=1) for i, group in enumerate(groups)
    ]
    return ResolutionResult(total_combo=combo_start + len(entries), groups=entries, passes=1 if entries else 0)


def symbol_counts(grid: Grid) -> dict[int, int]:
    counts: dict[int, int] = {}
    for r, c in grid.positions():
        cell = grid.cell_at(r, c)
        if cell is not EMPTY:
            counts[cell] = counts.get(cell, 0) + 1
    return counts


def ids(symbols: Sequence) -> list[int]:
    return [s.id for s in symbols]
