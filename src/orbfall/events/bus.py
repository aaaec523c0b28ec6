from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere else alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT (forwarded by the gesture layer)
# ============================================================================
EVENT_DRAG_START = "drag_start"                    # payload: row, col
EVENT_SWAP_REQUEST = "swap_request"                # payload: src=(r,c), dst=(r,c)
EVENT_DRAG_END = "drag_end"                        # payload: None


# ============================================================================
# BOARD & CASCADE
# ============================================================================
EVENT_BOARD_POPULATED = "board_populated"          # payload: mode=BoardMode, rows=int, cols=int
EVENT_SWAP_APPLIED = "swap_applied"                # payload: src=(r,c), dst=(r,c)
EVENT_SWAP_REJECTED = "swap_rejected"              # payload: src, dst, reason=str
EVENT_MATCH_FOUND = "match_found"                  # payload: groups=list[MatchGroup], positions=[(r,c),...], depth=int
EVENT_COMBO = "combo"                              # payload: combo=int, group=ResolvedGroup
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove], depth=int
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...], depth=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, combo=int
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, combo=int
EVENT_TURN_RESOLVED = "turn_resolved"              # payload: result=ResolutionResult
EVENT_BOARD_CLEARED = "board_cleared"              # payload: combo=int


# ============================================================================
# HEALTH & DAMAGE
# ============================================================================
EVENT_HEALTH_DAMAGE = "health_damage"      # payload: source_entity=int|None, target_entity=int, amount=int, reason=str
EVENT_HEALTH_HEAL = "health_heal"          # payload: source_entity=int|None, target_entity=int, amount=int, reason=str
EVENT_HEALTH_CHANGED = "health_changed"    # payload: entity=int, current=int, max_hp=int, delta=int, reason=str
EVENT_ENTITY_DEFEATED = "entity_defeated"  # payload: entity=int, reason=str


# ============================================================================
# COMBAT
# ============================================================================
EVENT_ENCOUNTER_STARTED = "encounter_started"  # payload: monster_entity=int, slug=str, world_idx, stage_idx, monster_idx
EVENT_BATTLE_RESOLVED = "battle_resolved"      # payload: attack=AttackResult, recovery=RecoveryResult, combo=int
EVENT_MONSTER_COUNTDOWN = "monster_countdown"  # payload: monster_entity=int, remaining=int
EVENT_MONSTER_ATTACK = "monster_attack"        # payload: monster_entity=int, target_entity=int, amount=int
EVENT_ENEMY_DEFEATED = "enemy_defeated"        # payload: entity=int, slug=str, gold=int
EVENT_PLAYER_REVIVED = "player_revived"        # payload: entity=int, lives_left=int
EVENT_PLAYER_DEFEATED = "player_defeated"      # payload: entity=int


# ============================================================================
# PROGRESSION
# ============================================================================
EVENT_STAGE_START_REQUEST = "stage_start_request"          # payload: None
EVENT_STAGE_CLEARED = "stage_cleared"                      # payload: world_idx=int, stage_idx=int
EVENT_WORLD_CLEARED = "world_cleared"                      # payload: world_idx=int
EVENT_RUN_COMPLETED = "run_completed"                      # payload: gold=int
EVENT_GOLD_CHANGED = "gold_changed"                        # payload: entity=int, gold=int, delta=int
EVENT_UPGRADE_PURCHASE_REQUEST = "upgrade_purchase_request"  # payload: upgrade=str
EVENT_UPGRADE_PURCHASED = "upgrade_purchased"              # payload: upgrade=str, level=int, cost=int
EVENT_UPGRADE_REJECTED = "upgrade_rejected"                # payload: upgrade=str, reason=str
