from dataclasses import dataclass


@dataclass(slots=True)
class Monster:
    """Encounter data for an enemy; its combat stats live in ActorState."""
    slug: str
    name: str
    element: str
    turn_count: int
    countdown: int
    gold: int

    def reset_countdown(self) -> None:
        self.countdown = self.turn_count
