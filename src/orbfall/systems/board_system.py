import logging
from typing import Optional, Tuple

from esper import World

from orbfall.board.grid import Grid
from orbfall.board.match_finder import MatchStrategy, run_length_matcher
from orbfall.board.resolution import ResolutionEngine, ResolutionPhase, ResolutionResult
from orbfall.components.board import Board
from orbfall.components.game_state import GameMode, Outcome
from orbfall.errors import OutOfBounds
from orbfall.events.bus import (
    EventBus,
    EVENT_BOARD_CLEARED,
    EVENT_BOARD_POPULATED,
    EVENT_CASCADE_STEP,
    EVENT_DRAG_END,
    EVENT_DRAG_START,
    EVENT_SWAP_APPLIED,
    EVENT_SWAP_REJECTED,
    EVENT_SWAP_REQUEST,
    EVENT_TURN_RESOLVED,
)
from orbfall.utils.game_state import get_game_state, get_or_create_turn_state

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class BoardSystem:
    """Owns the board entity and drives one drag: swaps while dragging, resolve on release."""

    def __init__(self, world: World, event_bus: EventBus, *, match_finder: Optional[MatchStrategy] = None):
        self.world = world
        self.event_bus = event_bus
        config = world.config.board
        state = get_game_state(world)
        grid = Grid(config.rows, config.cols, mode=state.mode.board_mode, type_count=config.type_count)
        self.board_entity = self.world.create_entity(Board(grid=grid, palette=config.palette()))
        self.engine = ResolutionEngine(
            match_finder=match_finder or run_length_matcher(config.min_match_length),
            event_bus=event_bus,
            rng=world.random,
        )
        self.event_bus.subscribe(EVENT_DRAG_START, self.on_drag_start)
        self.event_bus.subscribe(EVENT_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_DRAG_END, self.on_drag_end)
        self.event_bus.subscribe(EVENT_CASCADE_STEP, self.on_cascade_step)
        self.reset_board()

    @property
    def grid(self) -> Grid:
        return self.world.component_for_entity(self.board_entity, Board).grid

    def reset_board(self) -> None:
        grid = self.grid
        grid.populate(get_game_state(self.world).mode.board_mode, rng=self.world.random)
        self.event_bus.emit(EVENT_BOARD_POPULATED, mode=grid.mode, rows=grid.rows, cols=grid.cols)

    def accepting_input(self) -> bool:
        state = get_game_state(self.world)
        return state.outcome is None and self.engine.phase is ResolutionPhase.IDLE

    def on_drag_start(self, sender, **kwargs):
        if not self.accepting_input():
            return
        turn = get_or_create_turn_state(self.world)
        turn.dragging = True
        turn.combo = 0
        turn.groups = []
        turn.swaps = 0
        row, col = kwargs.get('row'), kwargs.get('col')
        turn.origin = (row, col) if row is not None and col is not None else None

    def on_swap_request(self, sender, **kwargs):
        src: Optional[Position] = kwargs.get('src')
        dst: Optional[Position] = kwargs.get('dst')
        if not src or not dst:
            return
        turn = get_or_create_turn_state(self.world)
        if not turn.dragging or not self.accepting_input():
            self.event_bus.emit(EVENT_SWAP_REJECTED, src=src, dst=dst, reason='not_dragging')
            return
        try:
            self.grid.swap(src[0], src[1], dst[0], dst[1])
        except OutOfBounds:
            self.event_bus.emit(EVENT_SWAP_REJECTED, src=src, dst=dst, reason='out_of_bounds')
            return
        turn.swaps += 1
        self.event_bus.emit(EVENT_SWAP_APPLIED, src=src, dst=dst)

    def on_drag_end(self, sender, **kwargs):
        turn = get_or_create_turn_state(self.world)
        if not turn.dragging:
            return
        turn.dragging = False
        result = self.resolve(combo_start=turn.combo)
        turn.combo = result.total_combo
        turn.groups.extend(result.groups)
        state = get_game_state(self.world)
        state.max_combo = max(state.max_combo, result.total_combo)
        self.event_bus.emit(EVENT_TURN_RESOLVED, result=result)

    def resolve(self, combo_start: int = 0) -> ResolutionResult:
        result = self.engine.resolve_to_quiescence(self.grid, combo_start)
        logger.debug("Resolved %d combos over %d passes", result.total_combo, result.passes)
        return result

    def on_cascade_step(self, sender, **kwargs):
        state = get_game_state(self.world)
        if state.mode is not GameMode.CLEAR or state.outcome is not None:
            return
        if self.grid.is_clear():
            state.outcome = Outcome.BOARD_CLEARED
            logger.info("Board cleared")
            self.event_bus.emit(EVENT_BOARD_CLEARED, combo=kwargs.get('combo', 0))
