"""
Match-driven combat formulas
----------------------------
Pure calculations, no world access.

- Each resolved group contributes ``stat * (1 + size_bonus * (cells - 3))``.
- The summed base is scaled by ``1 + combo_scale * (combos - 1)``.
- Attack uses the combo count of the whole cascade; recovery only counts
  recovery groups.
- Flooring happens once per aggregate, never per group.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Protocol, Sequence

from orbfall.config import CombatConfig


class SupportsGroup(Protocol):
    symbol: int
    cells: FrozenSet


class SupportsStats(Protocol):
    atk: int
    defense: int
    rcv: int


class GroupClassification(NamedTuple):
    attack_groups: List
    recovery_groups: List


@dataclass(frozen=True, slots=True)
class AttackResult:
    final_damage: int
    raw_damage: int
    combo_multiplier: float


@dataclass(frozen=True, slots=True)
class RecoveryResult:
    total_recovery: int
    combo_multiplier: float = 1.0


class CombatResolver:
    """Turns a cascade's resolved groups into damage and healing numbers."""

    def __init__(self, config: Optional[CombatConfig] = None):
        self.config = config or CombatConfig()

    # --------------------------------------------------------

    def classify_groups(self, groups: Iterable[SupportsGroup]) -> GroupClassification:
        attack: List = []
        recovery: List = []
        for group in groups:
            if group.symbol == self.config.recovery_symbol:
                recovery.append(group)
            else:
                attack.append(group)
        return GroupClassification(attack, recovery)

    def group_magnitude(self, group: SupportsGroup, stat_value: float) -> float:
        extra = len(group.cells) - self.config.min_match_length
        return stat_value * (1 + self.config.size_bonus_factor * extra)

    def combo_multiplier(self, combo_count: int) -> float:
        return 1 + self.config.combo_scale_factor * (combo_count - 1)

    # --------------------------------------------------------

    def calculate_attack_damage(
        self,
        attacker: SupportsStats,
        defender: SupportsStats,
        attack_groups: Sequence[SupportsGroup],
        total_combos: int,
    ) -> AttackResult:
        if not attack_groups:
            return AttackResult(final_damage=0, raw_damage=0, combo_multiplier=1.0)
        base = sum(self.group_magnitude(group, attacker.atk) for group in attack_groups)
        multiplier = self.combo_multiplier(total_combos)
        raw = math.floor(base * multiplier)
        return AttackResult(final_damage=max(1, raw - defender.defense), raw_damage=raw, combo_multiplier=multiplier)

    def calculate_recovery(self, actor: SupportsStats, recovery_groups: Sequence[SupportsGroup]) -> RecoveryResult:
        if not recovery_groups:
            return RecoveryResult(total_recovery=0)
        base = sum(self.group_magnitude(group, actor.rcv) for group in recovery_groups)
        multiplier = self.combo_multiplier(len(recovery_groups))
        return RecoveryResult(total_recovery=math.floor(base * multiplier), combo_multiplier=multiplier)

    def calculate_monster_damage(self, monster: SupportsStats, player: SupportsStats) -> int:
        return max(1, monster.atk - player.defense)

    # --------------------------------------------------------
    # Per-group variants, for callers that resolve combat as each combo lands.

    def calculate_group_damage(self, attacker: SupportsStats, defender: SupportsStats, group: SupportsGroup, combo: int) -> int:
        raw = math.floor(self.group_magnitude(group, attacker.atk) * self.combo_multiplier(combo))
        return max(1, raw - defender.defense)

    def calculate_group_recovery(self, actor: SupportsStats, group: SupportsGroup, combo: int) -> int:
        return math.floor(self.group_magnitude(group, actor.rcv) * self.combo_multiplier(combo))
