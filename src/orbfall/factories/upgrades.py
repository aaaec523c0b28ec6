from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional

from orbfall.components.actor import UPGRADABLE_STATS, ActorState
from orbfall.components.player import RunProgress

UNLIMITED = -1


@dataclass(frozen=True, slots=True)
class UpgradeDef:
    slug: str
    name: str
    description: str
    stat: Optional[str]
    value: int
    base_cost: int
    cost_scale: float
    max_level: int = UNLIMITED
    apply: str = "stat_add"  # or "custom" for effects handled elsewhere
    category: str = "utility"


UPGRADES: Dict[str, UpgradeDef] = {
    definition.slug: definition
    for definition in (
        UpgradeDef("hp_up", "HP Up", "Increase max HP by 20", "max_hp", 20, 30, 1.5, category="defense"),
        UpgradeDef("atk_up", "ATK Up", "Increase attack by 3", "atk", 3, 40, 1.5, category="offense"),
        UpgradeDef("def_up", "DEF Up", "Increase defense by 2", "defense", 2, 35, 1.4, category="defense"),
        UpgradeDef("rcv_up", "RCV Up", "Increase recovery by 2", "rcv", 2, 30, 1.4, category="defense"),
        UpgradeDef("revive", "Revive", "Gain 1 extra life", "extra_lives", 1, 100, 2.0, max_level=3),
        UpgradeDef("timeout_up", "Time Up", "Increase drag time by 2s", "bonus_timeout_ms", 2000, 50, 1.8, max_level=5),
    )
}


def get_upgrade_def(slug: str) -> UpgradeDef:
    try:
        return UPGRADES[slug]
    except KeyError as exc:
        raise ValueError(f"Unknown upgrade '{slug}'") from exc


def upgrade_cost(progress: RunProgress, upgrade: UpgradeDef) -> int:
    level = progress.upgrade_level(upgrade.slug)
    return math.floor(upgrade.base_cost * upgrade.cost_scale ** level)


def is_maxed(progress: RunProgress, upgrade: UpgradeDef) -> bool:
    return upgrade.max_level != UNLIMITED and progress.upgrade_level(upgrade.slug) >= upgrade.max_level


def can_purchase(progress: RunProgress, upgrade: UpgradeDef) -> bool:
    if is_maxed(progress, upgrade):
        return False
    return progress.gold >= upgrade_cost(progress, upgrade)


def purchase_upgrade(actor: ActorState, progress: RunProgress, upgrade: UpgradeDef) -> bool:
    """Spend gold on ``upgrade`` and apply it. Returns False if unaffordable or maxed."""
    adds_stat = upgrade.apply == "stat_add" and bool(upgrade.stat)
    if adds_stat and upgrade.stat not in UPGRADABLE_STATS and not hasattr(progress, upgrade.stat):
        raise ValueError(f"Upgrade '{upgrade.slug}' targets unknown stat '{upgrade.stat}'")
    if not can_purchase(progress, upgrade):
        return False
    progress.gold -= upgrade_cost(progress, upgrade)
    progress.upgrade_levels[upgrade.slug] = progress.upgrade_level(upgrade.slug) + 1
    if adds_stat:
        if upgrade.stat in UPGRADABLE_STATS:
            actor.apply_stat_upgrade(upgrade.stat, upgrade.value)
        else:
            setattr(progress, upgrade.stat, getattr(progress, upgrade.stat) + upgrade.value)
    return True
