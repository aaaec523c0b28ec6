from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from esper import World

from orbfall.components.actor import ActorState
from orbfall.components.monster import Monster


@dataclass(frozen=True, slots=True)
class MonsterDef:
    slug: str
    name: str
    element: str
    hp: int
    atk: int
    defense: int
    turn_count: int
    gold: int


MONSTERS: Dict[str, MonsterDef] = {
    definition.slug: definition
    for definition in (
        MonsterDef("slime_green", "Green Slime", "wood", hp=80, atk=8, defense=0, turn_count=2, gold=10),
        MonsterDef("slime_red", "Red Slime", "fire", hp=100, atk=12, defense=0, turn_count=2, gold=12),
        MonsterDef("slime_blue", "Blue Slime", "water", hp=90, atk=10, defense=2, turn_count=2, gold=12),
        MonsterDef("goblin", "Goblin", "dark", hp=150, atk=18, defense=3, turn_count=2, gold=20),
        MonsterDef("golem", "Stone Golem", "light", hp=300, atk=25, defense=8, turn_count=3, gold=35),
        MonsterDef("dragon", "Fire Dragon", "fire", hp=500, atk=40, defense=5, turn_count=3, gold=60),
    )
}


def get_monster_def(slug: str) -> MonsterDef:
    try:
        return MONSTERS[slug]
    except KeyError as exc:
        raise ValueError(f"Unknown monster '{slug}'") from exc


def create_monster(world: World, slug: str) -> int:
    """Spawn a fresh monster entity at full health with its attack countdown primed."""
    definition = get_monster_def(slug)
    return world.create_entity(
        ActorState(
            hp=definition.hp,
            max_hp=definition.hp,
            atk=definition.atk,
            defense=definition.defense,
        ),
        Monster(
            slug=definition.slug,
            name=definition.name,
            element=definition.element,
            turn_count=definition.turn_count,
            countdown=definition.turn_count,
            gold=definition.gold,
        ),
    )
