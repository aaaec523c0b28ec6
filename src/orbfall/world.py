import random

from esper import World

from orbfall.config import GameConfig
from orbfall.events.bus import EventBus
from orbfall.components.actor import ActorState
from orbfall.components.game_state import GameMode, GameState
from orbfall.components.player import Player, RunProgress
from orbfall.components.turn_state import TurnState


def create_world(
    event_bus: EventBus,
    config: GameConfig | None = None,
    mode: GameMode = GameMode.ENDLESS,
    *,
    rng: random.Random | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "config", config or GameConfig())
    setattr(world, "event_bus", event_bus)

    # Global state resources.
    world.create_entity(GameState(mode=mode), TurnState())

    world.create_entity(
        Player(),
        ActorState.from_stats(world.config.player),
        RunProgress(),
    )
    return world
