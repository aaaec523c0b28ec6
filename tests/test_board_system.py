import random

from orbfall.board.grid import BoardMode
from orbfall.board.match_finder import find_matches
from orbfall.components.board import Board
from orbfall.components.game_state import GameMode, Outcome
from orbfall.config import BoardConfig, GameConfig
from orbfall.events.bus import (
    EventBus,
    EVENT_BOARD_CLEARED,
    EVENT_BOARD_POPULATED,
    EVENT_DRAG_END,
    EVENT_DRAG_START,
    EVENT_SWAP_APPLIED,
    EVENT_SWAP_REJECTED,
    EVENT_SWAP_REQUEST,
    EVENT_TURN_RESOLVED,
)
from orbfall.systems.board_system import BoardSystem
from orbfall.utils.game_state import get_game_state, get_or_create_turn_state
from orbfall.world import create_world

from tests.helpers import load_rows

ENDLESS_LAYOUT = (
    "001023",
    "123451",
    "234512",
    "345123",
    "451234",
)


def _endless(seed=0):
    bus = EventBus()
    world = create_world(bus, rng=random.Random(seed))
    system = BoardSystem(world, bus)
    load_rows(system.grid, *ENDLESS_LAYOUT)
    return bus, world, system


def _small_clear():
    bus = EventBus()
    symbols = BoardConfig().symbols[:3]
    config = GameConfig(board=BoardConfig(rows=3, cols=3, symbols=symbols))
    world = create_world(bus, config, mode=GameMode.CLEAR, rng=random.Random(0))
    system = BoardSystem(world, bus)
    load_rows(system.grid, "010", "101", "222")
    return bus, world, system


def test_board_entity_created_and_populated():
    bus = EventBus()
    populated = []
    bus.subscribe(EVENT_BOARD_POPULATED, lambda s, **k: populated.append(k))
    world = create_world(bus, rng=random.Random(3))
    system = BoardSystem(world, bus)
    board = world.component_for_entity(system.board_entity, Board)
    assert (board.rows, board.cols) == (5, 6)
    assert board.palette.recovery_ids() == [5]
    assert populated == [{"mode": BoardMode.ENDLESS, "rows": 5, "cols": 6}]
    assert find_matches(system.grid) == []


def test_clear_mode_board_uses_clear_generation():
    bus = EventBus()
    world = create_world(bus, mode=GameMode.CLEAR, rng=random.Random(1))
    system = BoardSystem(world, bus)
    assert system.grid.mode is BoardMode.CLEAR
    assert system.grid.remaining_count() == 30


def test_swap_outside_drag_is_rejected():
    bus, world, system = _endless()
    rejected = []
    bus.subscribe(EVENT_SWAP_REJECTED, lambda s, **k: rejected.append(k))
    bus.emit(EVENT_SWAP_REQUEST, src=(0, 2), dst=(0, 3))
    assert rejected[0]["reason"] == "not_dragging"
    assert system.grid.cell_at(0, 2) == 1


def test_swap_out_of_bounds_is_rejected():
    bus, world, system = _endless()
    rejected = []
    bus.subscribe(EVENT_SWAP_REJECTED, lambda s, **k: rejected.append(k))
    bus.emit(EVENT_DRAG_START, row=0, col=5)
    bus.emit(EVENT_SWAP_REQUEST, src=(0, 5), dst=(0, 6))
    assert rejected[0]["reason"] == "out_of_bounds"
    assert system.grid.cell_at(0, 5) == 3


def test_drag_swaps_then_resolves_on_release():
    bus, world, system = _endless()
    applied, turns = [], []
    bus.subscribe(EVENT_SWAP_APPLIED, lambda s, **k: applied.append(k))
    bus.subscribe(EVENT_TURN_RESOLVED, lambda s, **k: turns.append(k["result"]))

    bus.emit(EVENT_DRAG_START, row=0, col=2)
    bus.emit(EVENT_SWAP_REQUEST, src=(0, 2), dst=(0, 3))
    # Nothing resolves mid-drag.
    assert system.grid.cell_at(0, 2) == 0
    assert turns == []
    bus.emit(EVENT_DRAG_END)

    assert applied == [{"src": (0, 2), "dst": (0, 3)}]
    result = turns[0]
    assert result.total_combo >= 1
    first = result.groups[0]
    assert first.symbol == 0
    assert first.cells == frozenset({(0, 0), (0, 1), (0, 2)})
    assert find_matches(system.grid) == []
    assert system.grid.remaining_count() == 30

    turn = get_or_create_turn_state(world)
    assert not turn.dragging
    assert turn.swaps == 1
    assert turn.combo == result.total_combo
    assert get_game_state(world).max_combo == result.total_combo


def test_new_drag_resets_combo():
    bus, world, system = _endless()
    bus.emit(EVENT_DRAG_START, row=0, col=2)
    bus.emit(EVENT_SWAP_REQUEST, src=(0, 2), dst=(0, 3))
    bus.emit(EVENT_DRAG_END)
    best = get_game_state(world).max_combo

    turns = []
    bus.subscribe(EVENT_TURN_RESOLVED, lambda s, **k: turns.append(k["result"]))
    bus.emit(EVENT_DRAG_START, row=0, col=0)
    assert get_or_create_turn_state(world).combo == 0
    bus.emit(EVENT_DRAG_END)
    assert turns[0].total_combo == 0
    assert get_game_state(world).max_combo == best


def test_drag_end_without_drag_is_ignored():
    bus, world, system = _endless()
    turns = []
    bus.subscribe(EVENT_TURN_RESOLVED, lambda s, **k: turns.append(k))
    bus.emit(EVENT_DRAG_END)
    assert turns == []


def test_clearing_every_cell_wins_clear_mode():
    bus, world, system = _small_clear()
    cleared, rejected = [], []
    bus.subscribe(EVENT_BOARD_CLEARED, lambda s, **k: cleared.append(k))
    bus.subscribe(EVENT_SWAP_REJECTED, lambda s, **k: rejected.append(k))

    bus.emit(EVENT_DRAG_START, row=0, col=1)
    bus.emit(EVENT_SWAP_REQUEST, src=(0, 1), dst=(1, 1))
    bus.emit(EVENT_DRAG_END)

    assert system.grid.is_clear()
    assert cleared == [{"combo": 3}]
    assert get_game_state(world).outcome is Outcome.BOARD_CLEARED
    assert get_game_state(world).max_combo == 3

    # Input is closed once the board is cleared.
    bus.emit(EVENT_DRAG_START, row=0, col=0)
    bus.emit(EVENT_SWAP_REQUEST, src=(0, 0), dst=(0, 1))
    assert rejected[-1]["reason"] == "not_dragging"


def test_clear_mode_partial_clear_keeps_playing():
    bus, world, system = _small_clear()
    load_rows(system.grid, "111", "020", "202")
    cleared = []
    bus.subscribe(EVENT_BOARD_CLEARED, lambda s, **k: cleared.append(k))
    bus.emit(EVENT_DRAG_START, row=1, col=0)
    bus.emit(EVENT_DRAG_END)
    assert cleared == []
    assert system.grid.remaining_count() == 6
    assert get_game_state(world).outcome is None
