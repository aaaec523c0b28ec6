from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from orbfall.errors import OutOfBounds

Position = Tuple[int, int]
Cell = Optional[int]
EMPTY: Cell = None

# Picks one symbol id out of the allowed candidates, e.g. ``random.Random().choice``.
SymbolGenerator = Callable[[Sequence[int]], int]

# Endless seeding rejects at most two candidates per cell, so a third always remains.
MIN_SEED_TYPES = 3
# Fresh budgets tried before clear mode keeps a fill that contains a forced run.
CLEAR_POPULATE_ATTEMPTS = 20


class BoardMode(Enum):
    ENDLESS = "endless"
    CLEAR = "clear"


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: Position
    target: Position
    symbol: int

    @property
    def distance(self) -> int:
        return self.target[0] - self.source[0]


class Grid:
    """Fixed-size board of symbol ids; row 0 is the top, gravity pulls towards ``rows - 1``."""

    def __init__(self, rows: int, cols: int, *, mode: BoardMode = BoardMode.ENDLESS, type_count: int = 6):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.mode = mode
        self.type_count = type_count
        self._cells: List[List[Cell]] = [[EMPTY for _ in range(cols)] for _ in range(rows)]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]], *, mode: BoardMode = BoardMode.ENDLESS, type_count: int | None = None) -> "Grid":
        """Build a grid from literal rows (top row first)."""
        if not rows or not rows[0]:
            raise ValueError("Grid needs at least one row and one column")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("All grid rows must have the same length")
        if type_count is None:
            present = [cell for row in rows for cell in row if cell is not None]
            type_count = max(present) + 1 if present else 1
        grid = cls(len(rows), width, mode=mode, type_count=type_count)
        for r, row in enumerate(rows):
            grid._cells[r] = list(row)
        return grid

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise OutOfBounds(row, col, self.rows, self.cols)

    def cell_at(self, row: int, col: int) -> Cell:
        self._check(row, col)
        return self._cells[row][col]

    def is_empty(self, row: int, col: int) -> bool:
        return self.cell_at(row, col) is EMPTY

    def is_clear(self) -> bool:
        """True once every cell is empty (the clear-mode win condition)."""
        return all(cell is EMPTY for row in self._cells for cell in row)

    def remaining_count(self) -> int:
        return sum(1 for row in self._cells for cell in row if cell is not EMPTY)

    def positions(self) -> Iterator[Position]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def snapshot(self) -> Tuple[Tuple[Cell, ...], ...]:
        return tuple(tuple(row) for row in self._cells)

    def symbol_ids(self) -> List[int]:
        return list(range(self.type_count))

    def would_match(self, row: int, col: int, symbol: int) -> bool:
        """Return True if placing ``symbol`` at (row, col) completes a 3-run with cells already placed."""
        cells = self._cells

        def same(r: int, c: int) -> bool:
            return 0 <= r < self.rows and 0 <= c < self.cols and cells[r][c] == symbol

        for dr, dc in ((0, 1), (1, 0)):
            if same(row - dr, col - dc) and same(row - 2 * dr, col - 2 * dc):
                return True
            if same(row + dr, col + dc) and same(row + 2 * dr, col + 2 * dc):
                return True
            if same(row - dr, col - dc) and same(row + dr, col + dc):
                return True
        return False

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_cell(self, row: int, col: int, value: Cell) -> None:
        self._check(row, col)
        self._cells[row][col] = value

    def swap(self, r1: int, c1: int, r2: int, c2: int) -> None:
        """Exchange two cells. Adjacency is the caller's business."""
        self._check(r1, c1)
        self._check(r2, c2)
        cells = self._cells
        cells[r1][c1], cells[r2][c2] = cells[r2][c2], cells[r1][c1]

    def remove(self, cells: Iterable[Position]) -> List[Position]:
        targets = list(cells)
        for row, col in targets:
            self._check(row, col)
        removed: List[Position] = []
        for row, col in targets:
            if self._cells[row][col] is not EMPTY:
                self._cells[row][col] = EMPTY
                removed.append((row, col))
        return removed

    def compact_column(self, col: int) -> List[GravityMove]:
        """Drop the column's symbols to the bottom, keeping their order; empties end up on top."""
        self._check(0, col)
        moves: List[GravityMove] = []
        target_row = self.rows - 1
        for row in range(self.rows - 1, -1, -1):
            symbol = self._cells[row][col]
            if symbol is EMPTY:
                continue
            if row != target_row:
                self._cells[target_row][col] = symbol
                self._cells[row][col] = EMPTY
                moves.append(GravityMove(source=(row, col), target=(target_row, col), symbol=symbol))
            target_row -= 1
        return moves

    def refill_column(self, col: int, generator: SymbolGenerator) -> List[Position]:
        """Fill the empty top of a column in endless mode. Clear mode leaves gaps."""
        self._check(0, col)
        if self.mode is BoardMode.CLEAR:
            return []
        spawned: List[Position] = []
        choices = self.symbol_ids()
        # Fill bottom-up so each new symbol is checked against the one below it.
        for row in range(self.rows - 1, -1, -1):
            if self._cells[row][col] is not EMPTY:
                continue
            available = [s for s in choices if not self.would_match(row, col, s)]
            self._cells[row][col] = generator(available or choices)
            spawned.append((row, col))
        return spawned

    def populate(self, mode: BoardMode | None = None, type_count: int | None = None, *, rng: random.Random | None = None) -> None:
        """Fill every cell so that no 3-in-a-row exists."""
        if mode is not None:
            self.mode = mode
        if type_count is not None:
            self.type_count = type_count
        rng = rng or random.Random()
        if self.mode is BoardMode.CLEAR:
            for _ in range(CLEAR_POPULATE_ATTEMPTS):
                if self._populate_clear(rng):
                    break
            return
        if self.type_count < MIN_SEED_TYPES:
            raise ValueError(f"Populating without matches needs at least {MIN_SEED_TYPES} symbol types, got {self.type_count}")
        self._cells = [[EMPTY for _ in range(self.cols)] for _ in range(self.rows)]
        choices = self.symbol_ids()
        for r in range(self.rows):
            for c in range(self.cols):
                # The row and column rules reject at most two candidates.
                available = [s for s in choices if not self._seed_conflict(r, c, s)]
                self._cells[r][c] = rng.choice(available)

    def clear_counts(self, rng: random.Random) -> List[int]:
        """Per-type budgets for clear mode: every count a multiple of 3, summing to the grid area."""
        total = self.rows * self.cols
        if total % 3 != 0:
            raise ValueError(f"Clear mode needs an area divisible by 3, got {self.rows}x{self.cols}")
        if total < 3 * self.type_count:
            raise ValueError(f"Clear mode needs at least {3 * self.type_count} cells for {self.type_count} types")
        counts = [3] * self.type_count
        remaining = total - 3 * self.type_count
        while remaining > 0:
            counts[rng.randrange(self.type_count)] += 3
            remaining -= 3
        return counts

    def _populate_clear(self, rng: random.Random) -> bool:
        """One budgeted fill. Returns False if the fallback had to place a run."""
        budget = self.clear_counts(rng)
        self._cells = [[EMPTY for _ in range(self.cols)] for _ in range(self.rows)]
        clean = True
        for r in range(self.rows):
            for c in range(self.cols):
                valid = [t for t, left in enumerate(budget) if left > 0 and not self._seed_conflict(r, c, t)]
                if valid:
                    symbol = rng.choice(valid)
                else:
                    # Budget forces a symbol that may complete a run; the last attempt keeps it.
                    symbol = next(t for t, left in enumerate(budget) if left > 0)
                    clean = clean and not self._seed_conflict(r, c, symbol)
                budget[symbol] -= 1
                self._cells[r][c] = symbol
        return clean

    def _seed_conflict(self, row: int, col: int, symbol: int) -> bool:
        cells = self._cells
        if col >= 2 and cells[row][col - 1] == symbol and cells[row][col - 2] == symbol:
            return True
        if row >= 2 and cells[row - 1][col] == symbol and cells[row - 2][col] == symbol:
            return True
        return False

    def __repr__(self) -> str:
        body = "\n".join(" ".join("." if cell is EMPTY else str(cell) for cell in row) for row in self._cells)
        return f"Grid({self.rows}x{self.cols}, {self.mode.value})\n{body}"
