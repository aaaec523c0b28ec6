from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from orbfall.components.player import RunProgress


@dataclass(frozen=True, slots=True)
class StageDef:
    name: str
    monsters: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class WorldDef:
    slug: str
    name: str
    stages: Tuple[StageDef, ...]


WORLDS: Tuple[WorldDef, ...] = (
    WorldDef(
        "forest",
        "Dark Forest",
        (
            StageDef("Forest Edge", ("slime_green", "slime_green")),
            StageDef("Deep Woods", ("slime_green", "slime_red", "goblin")),
            StageDef("Forest Heart", ("goblin", "goblin", "golem")),
        ),
    ),
    WorldDef(
        "volcano",
        "Volcanic Depths",
        (
            StageDef("Lava Fields", ("slime_red", "slime_red", "goblin")),
            StageDef("Magma Caverns", ("golem", "goblin", "goblin")),
            StageDef("Dragon's Lair", ("golem", "dragon")),
        ),
    ),
)


def current_monster_slug(progress: RunProgress, worlds: Sequence[WorldDef] = WORLDS) -> Optional[str]:
    """Slug of the monster the run is currently facing, or None once every world is cleared."""
    if progress.world_idx >= len(worlds):
        return None
    stage = worlds[progress.world_idx].stages[progress.stage_idx]
    return stage.monsters[progress.monster_idx]


def advance(progress: RunProgress, worlds: Sequence[WorldDef] = WORLDS) -> str:
    """Move past the defeated monster.

    Returns ``"monster"`` when the stage continues, ``"stage"`` when a stage was
    cleared, ``"world"`` when a whole world was cleared and ``"run"`` when it was
    the last one.
    """
    world = worlds[progress.world_idx]
    progress.monster_idx += 1
    if progress.monster_idx < len(world.stages[progress.stage_idx].monsters):
        return "monster"
    progress.monster_idx = 0
    progress.stage_idx += 1
    if progress.stage_idx < len(world.stages):
        return "stage"
    progress.stage_idx = 0
    progress.world_idx += 1
    if progress.world_idx < len(worlds):
        return "world"
    return "run"
