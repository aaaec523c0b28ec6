from esper import World

from orbfall.components.game_state import GameState
from orbfall.components.turn_state import TurnState


def get_game_state(world: World) -> GameState:
    """Return the GameState singleton, creating it in endless mode if absent."""
    existing = list(world.get_component(GameState))
    if existing:
        return existing[0][1]
    state = GameState()
    world.create_entity(state)
    return state


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = list(world.get_component(TurnState))
    if existing:
        return existing[0][1]
    state = TurnState()
    world.create_entity(state)
    return state
