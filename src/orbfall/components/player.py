from dataclasses import dataclass, field
from typing import Dict


@dataclass
class Player:
    """Tag for the human-controlled entity."""
    name: str = "Player"


@dataclass
class RunProgress:
    """Per-run roguelike progression carried between encounters."""
    gold: int = 0
    world_idx: int = 0
    stage_idx: int = 0
    monster_idx: int = 0
    bonus_timeout_ms: int = 0
    upgrade_levels: Dict[str, int] = field(default_factory=dict)

    def effective_timeout_ms(self, base_timeout_ms: int) -> int:
        return base_timeout_ms + self.bonus_timeout_ms

    def upgrade_level(self, slug: str) -> int:
        return self.upgrade_levels.get(slug, 0)
