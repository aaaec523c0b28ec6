from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(slots=True)
class TurnState:
    """Tracks the drag currently in progress.

    ``combo`` carries across the swaps of one drag and resets when a new drag
    starts; ``groups`` keeps every resolved group of the drag for the combat
    phase.
    """

    dragging: bool = False
    combo: int = 0
    groups: List = field(default_factory=list)
    swaps: int = 0
    origin: Optional[tuple] = None
