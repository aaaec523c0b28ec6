from dataclasses import dataclass

from orbfall.config import ActorStats

UPGRADABLE_STATS = ("max_hp", "atk", "defense", "rcv", "extra_lives")


@dataclass
class ActorState:
    """Combat stats for the player or a monster."""
    hp: int
    max_hp: int
    atk: int = 0
    defense: int = 0
    rcv: int = 0
    extra_lives: int = 0

    @classmethod
    def from_stats(cls, stats: ActorStats) -> "ActorState":
        return cls(
            hp=stats.hp,
            max_hp=stats.hp,
            atk=stats.atk,
            defense=stats.defense,
            rcv=stats.rcv,
            extra_lives=stats.extra_lives,
        )

    def clamp(self) -> None:
        if self.hp < 0:
            self.hp = 0
        if self.hp > self.max_hp:
            self.hp = self.max_hp

    def take_damage(self, raw_amount: int) -> int:
        """Apply an unmitigated hit; defense is subtracted but at least 1 always lands."""
        actual = max(1, raw_amount - self.defense)
        self.hp = max(0, self.hp - actual)
        return actual

    def lose_hp(self, amount: int) -> int:
        """Remove already-mitigated damage. Returns the hp actually lost."""
        before = self.hp
        self.hp = max(0, self.hp - max(0, amount))
        return before - self.hp

    def heal(self, amount: int) -> int:
        before = self.hp
        self.hp = min(self.max_hp, self.hp + max(0, amount))
        return self.hp - before

    def is_dead(self) -> bool:
        return self.hp <= 0

    def try_revive(self) -> bool:
        if self.extra_lives > 0:
            self.extra_lives -= 1
            self.hp = self.max_hp
            return True
        return False

    def apply_stat_upgrade(self, stat: str, delta: int) -> None:
        if stat not in UPGRADABLE_STATS:
            raise ValueError(f"Unknown stat '{stat}'")
        if stat == "max_hp" and self.max_hp + delta < 1:
            raise ValueError(f"max_hp cannot drop below 1, got {self.max_hp + delta}")
        setattr(self, stat, getattr(self, stat) + delta)
        # Raising max hp grants the same amount of current hp, nothing more.
        if stat == "max_hp":
            self.hp += delta
            self.clamp()
