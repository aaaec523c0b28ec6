from dataclasses import dataclass

from orbfall.board.grid import Grid
from orbfall.components.symbol import SymbolPalette

@dataclass(slots=True)
class Board:
    grid: Grid
    palette: SymbolPalette

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols
