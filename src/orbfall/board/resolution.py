from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, List, Optional, Sequence

from orbfall.board.grid import GravityMove, Grid, Position, SymbolGenerator
from orbfall.board.match_finder import MatchGroup, MatchStrategy, find_matches, sort_groups
from orbfall.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_COMBO,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
)

logger = logging.getLogger(__name__)


class ResolutionPhase(Enum):
    IDLE = auto()
    RESOLVING = auto()
    FALLING = auto()


@dataclass(frozen=True, slots=True)
class ResolvedGroup:
    """A removed match group tagged with the combo level it was resolved at."""
    group: MatchGroup
    combo: int
    depth: int

    @property
    def symbol(self) -> int:
        return self.group.symbol

    @property
    def cells(self) -> FrozenSet[Position]:
        return self.group.cells

    @property
    def size(self) -> int:
        return self.group.size


@dataclass(slots=True)
class GravityResult:
    moves: List[GravityMove] = field(default_factory=list)
    spawned: List[Position] = field(default_factory=list)


@dataclass(slots=True)
class ResolutionResult:
    total_combo: int = 0
    groups: List[ResolvedGroup] = field(default_factory=list)
    passes: int = 0

    @property
    def group_count(self) -> int:
        return len(self.groups)


class ResolutionEngine:
    """Runs the match -> remove -> gravity loop until the board is quiet.

    ``resolve_to_quiescence`` is the one-call entry point. Callers that animate
    each step can drive ``scan`` / ``clear_groups`` / ``apply_gravity`` themselves
    in that order; the grid must not be touched in between.
    """

    def __init__(
        self,
        *,
        match_finder: MatchStrategy = find_matches,
        generator: Optional[SymbolGenerator] = None,
        event_bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
    ):
        self.match_finder = match_finder
        self._rng = rng or random.Random()
        self.generator: SymbolGenerator = generator or self._rng.choice
        self.event_bus = event_bus
        self.phase = ResolutionPhase.IDLE

    def _emit(self, name: str, **payload) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(name, **payload)

    # ------------------------------------------------------------------
    # Individual steps
    # ------------------------------------------------------------------

    def scan(self, grid: Grid) -> List[MatchGroup]:
        return sort_groups(self.match_finder(grid))

    def clear_groups(self, grid: Grid, groups: Sequence[MatchGroup], combo_start: int, *, depth: int = 1) -> List[ResolvedGroup]:
        """Number each group with the next combo level, then remove all of them at once."""
        self.phase = ResolutionPhase.RESOLVING
        resolved: List[ResolvedGroup] = []
        combo = combo_start
        for group in groups:
            combo += 1
            entry = ResolvedGroup(group=group, combo=combo, depth=depth)
            resolved.append(entry)
            self._emit(EVENT_COMBO, combo=combo, group=entry)
        positions = sorted({pos for group in groups for pos in group.cells})
        grid.remove(positions)
        self._emit(EVENT_MATCH_CLEARED, positions=positions, depth=depth)
        return resolved

    def apply_gravity(self, grid: Grid, *, depth: int = 1) -> GravityResult:
        self.phase = ResolutionPhase.FALLING
        result = GravityResult()
        for col in range(grid.cols):
            result.moves.extend(grid.compact_column(col))
            result.spawned.extend(grid.refill_column(col, self.generator))
        self._emit(EVENT_GRAVITY_APPLIED, moves=result.moves, depth=depth)
        if result.spawned:
            self._emit(EVENT_REFILL_COMPLETED, new_tiles=result.spawned, depth=depth)
        return result

    # ------------------------------------------------------------------
    # Full cascade
    # ------------------------------------------------------------------

    def resolve_to_quiescence(self, grid: Grid, combo_start: int = 0) -> ResolutionResult:
        result = ResolutionResult(total_combo=combo_start)
        depth = 0
        try:
            while True:
                self.phase = ResolutionPhase.RESOLVING
                groups = self.scan(grid)
                if not groups:
                    break
                depth += 1
                positions = sorted({pos for group in groups for pos in group.cells})
                self._emit(EVENT_MATCH_FOUND, groups=groups, positions=positions, depth=depth)
                resolved = self.clear_groups(grid, groups, result.total_combo, depth=depth)
                result.groups.extend(resolved)
                result.total_combo += len(resolved)
                self.apply_gravity(grid, depth=depth)
                logger.debug("Cascade pass %d removed %d groups, combo now %d", depth, len(resolved), result.total_combo)
                self._emit(EVENT_CASCADE_STEP, depth=depth, combo=result.total_combo)
        finally:
            self.phase = ResolutionPhase.IDLE
        result.passes = depth
        if depth:
            self._emit(EVENT_CASCADE_COMPLETE, depth=depth, combo=result.total_combo)
        return result
