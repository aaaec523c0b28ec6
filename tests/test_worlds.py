import pytest
from esper import World

from orbfall.components.actor import ActorState
from orbfall.components.monster import Monster
from orbfall.components.player import RunProgress
from orbfall.factories.monsters import MONSTERS, create_monster, get_monster_def
from orbfall.factories.worlds import WORLDS, advance, current_monster_slug


def test_every_stage_references_known_monsters():
    for world_def in WORLDS:
        for stage in world_def.stages:
            assert stage.monsters
            for slug in stage.monsters:
                assert slug in MONSTERS


def test_unknown_monster_raises():
    with pytest.raises(ValueError):
        get_monster_def("kraken")


def test_create_monster_components():
    world = World()
    ent = create_monster(world, "golem")
    actor = world.component_for_entity(ent, ActorState)
    monster = world.component_for_entity(ent, Monster)
    assert (actor.hp, actor.max_hp, actor.atk, actor.defense) == (300, 300, 25, 8)
    assert (monster.turn_count, monster.countdown, monster.gold) == (3, 3, 35)
    monster.countdown = 0
    monster.reset_countdown()
    assert monster.countdown == 3


def test_advance_walks_the_whole_run():
    progress = RunProgress()
    steps = []
    slugs = []
    while True:
        slugs.append(current_monster_slug(progress))
        step = advance(progress)
        steps.append(step)
        if step == "run":
            break
    assert len(slugs) == sum(len(stage.monsters) for w in WORLDS for stage in w.stages)
    assert slugs[0] == "slime_green"
    assert slugs[-1] == "dragon"
    assert steps.count("stage") == 4
    assert steps.count("world") == 1
    assert current_monster_slug(progress) is None


def test_advance_within_stage():
    progress = RunProgress()
    assert advance(progress) == "monster"
    assert (progress.world_idx, progress.stage_idx, progress.monster_idx) == (0, 0, 1)
    assert advance(progress) == "stage"
    assert (progress.world_idx, progress.stage_idx, progress.monster_idx) == (0, 1, 0)
