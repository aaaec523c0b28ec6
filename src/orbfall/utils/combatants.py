from __future__ import annotations

from esper import World

from orbfall.components.actor import ActorState
from orbfall.components.monster import Monster
from orbfall.components.player import Player, RunProgress


def find_player(world: World) -> int | None:
    for entity, _ in world.get_component(Player):
        return entity
    return None


def player_components(world: World) -> tuple[int, ActorState, RunProgress] | None:
    entity = find_player(world)
    if entity is None:
        return None
    try:
        actor = world.component_for_entity(entity, ActorState)
        progress = world.component_for_entity(entity, RunProgress)
    except KeyError:
        return None
    return entity, actor, progress


def active_monster(world: World) -> tuple[int, Monster, ActorState] | None:
    """Return the first monster entity with its encounter data and stats."""
    for entity, (monster, actor) in world.get_components(Monster, ActorState):
        return entity, monster, actor
    return None
