"""Game state resource describing the active board variant and its outcome."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from orbfall.board.grid import BoardMode


class GameMode(Enum):
    """Board variants; battle plays on an endless board."""
    ENDLESS = auto()
    CLEAR = auto()
    BATTLE = auto()

    @property
    def board_mode(self) -> BoardMode:
        return BoardMode.CLEAR if self is GameMode.CLEAR else BoardMode.ENDLESS


class Outcome(Enum):
    BOARD_CLEARED = auto()
    DEFEATED = auto()
    RUN_COMPLETED = auto()


@dataclass
class GameState:
    """Singleton component storing the mode, best combo and final outcome."""
    mode: GameMode = GameMode.ENDLESS
    max_combo: int = 0
    outcome: Optional[Outcome] = None
