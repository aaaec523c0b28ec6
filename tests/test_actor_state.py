import pytest

from orbfall.components.actor import ActorState
from orbfall.config import ActorStats


def _player():
    return ActorState.from_stats(ActorStats())


def test_starting_stats():
    actor = _player()
    assert (actor.hp, actor.max_hp, actor.atk, actor.defense, actor.rcv, actor.extra_lives) == (100, 100, 10, 2, 5, 0)


def test_take_damage_subtracts_defense():
    actor = _player()
    assert actor.take_damage(20) == 18
    assert actor.hp == 82


def test_take_damage_always_lands_one():
    actor = _player()
    assert actor.take_damage(1) == 1
    assert actor.hp == 99
    tank = ActorState(hp=50, max_hp=50, defense=999)
    assert tank.take_damage(1) == 1
    assert tank.hp == 49


def test_take_damage_floors_hp_at_zero():
    actor = _player()
    actor.take_damage(500)
    assert actor.hp == 0
    assert actor.is_dead()


def test_lose_hp_ignores_defense():
    actor = _player()
    assert actor.lose_hp(7) == 7
    assert actor.hp == 93
    assert actor.lose_hp(200) == 93
    assert actor.hp == 0


def test_heal_caps_at_max():
    actor = _player()
    actor.hp = 70
    assert actor.heal(5) == 5
    assert actor.hp == 75
    assert actor.heal(100) == 25
    assert actor.hp == 100


def test_revive_consumes_a_life():
    actor = _player()
    actor.extra_lives = 2
    actor.hp = 0
    assert actor.try_revive()
    assert actor.hp == 100
    assert actor.extra_lives == 1


def test_revive_without_lives_changes_nothing():
    actor = _player()
    actor.hp = 0
    assert not actor.try_revive()
    assert actor.hp == 0
    assert actor.is_dead()


def test_clamp_restores_invariant():
    actor = ActorState(hp=150, max_hp=100)
    actor.clamp()
    assert actor.hp == 100
    actor.hp = -4
    actor.clamp()
    assert actor.hp == 0


def test_max_hp_upgrade_grants_same_hp():
    actor = _player()
    actor.hp = 80
    actor.apply_stat_upgrade("max_hp", 20)
    assert actor.max_hp == 120
    assert actor.hp == 100


def test_unknown_stat_upgrade_raises():
    with pytest.raises(ValueError):
        _player().apply_stat_upgrade("speed", 1)


def test_negative_heal_changes_nothing():
    actor = _player()
    actor.hp = 40
    assert actor.heal(-10) == 0
    assert actor.hp == 40


def test_max_hp_downgrade_keeps_hp_in_range():
    actor = _player()
    actor.apply_stat_upgrade("max_hp", -30)
    assert (actor.hp, actor.max_hp) == (70, 70)
    actor.hp = 5
    actor.apply_stat_upgrade("max_hp", -10)
    assert 0 <= actor.hp <= actor.max_hp


def test_max_hp_cannot_drop_below_one():
    actor = _player()
    with pytest.raises(ValueError):
        actor.apply_stat_upgrade("max_hp", -150)
    assert (actor.hp, actor.max_hp) == (100, 100)
