import logging
from typing import Optional, Sequence

from esper import World

from orbfall.board.resolution import ResolutionResult
from orbfall.combat.resolver import CombatResolver
from orbfall.components.actor import ActorState
from orbfall.components.game_state import GameMode, Outcome
from orbfall.components.monster import Monster
from orbfall.events.bus import (
    EventBus,
    EVENT_BATTLE_RESOLVED,
    EVENT_ENCOUNTER_STARTED,
    EVENT_ENEMY_DEFEATED,
    EVENT_GOLD_CHANGED,
    EVENT_HEALTH_CHANGED,
    EVENT_HEALTH_DAMAGE,
    EVENT_HEALTH_HEAL,
    EVENT_MONSTER_ATTACK,
    EVENT_MONSTER_COUNTDOWN,
    EVENT_PLAYER_DEFEATED,
    EVENT_PLAYER_REVIVED,
    EVENT_RUN_COMPLETED,
    EVENT_STAGE_CLEARED,
    EVENT_STAGE_START_REQUEST,
    EVENT_TURN_RESOLVED,
    EVENT_WORLD_CLEARED,
)
from orbfall.factories.monsters import create_monster
from orbfall.factories.worlds import WORLDS, WorldDef, advance, current_monster_slug
from orbfall.utils.combatants import active_monster, player_components
from orbfall.utils.game_state import get_game_state

logger = logging.getLogger(__name__)


class BattleSystem:
    """Runs the combat phase after each resolved drag in battle mode.

    Order per turn: recovery, player attack, then either the monster's defeat
    (gold, progression, next encounter) or the monster's turn countdown and
    counter-attack. HP changes go through HealthSystem events, so a
    HealthSystem must be registered on the same bus.
    """

    def __init__(self, world: World, event_bus: EventBus, *, worlds: Sequence[WorldDef] = WORLDS):
        self.world = world
        self.event_bus = event_bus
        self.worlds = worlds
        self.resolver = CombatResolver(world.config.combat)
        self.event_bus.subscribe(EVENT_TURN_RESOLVED, self.on_turn_resolved)
        self.event_bus.subscribe(EVENT_STAGE_START_REQUEST, self.on_stage_start_request)
        self.start_encounter()

    def _in_battle(self) -> bool:
        state = get_game_state(self.world)
        return state.mode is GameMode.BATTLE and state.outcome is None

    # --------------------------------------------------------
    # Encounters
    # --------------------------------------------------------

    def start_encounter(self) -> Optional[int]:
        if not self._in_battle():
            return None
        existing = active_monster(self.world)
        if existing is not None:
            return existing[0]
        player = player_components(self.world)
        if player is None:
            return None
        _, _, progress = player
        slug = current_monster_slug(progress, self.worlds)
        if slug is None:
            return None
        monster_entity = create_monster(self.world, slug)
        logger.info("Encounter started: %s (world %d, stage %d, #%d)", slug, progress.world_idx, progress.stage_idx, progress.monster_idx)
        self.event_bus.emit(
            EVENT_ENCOUNTER_STARTED,
            monster_entity=monster_entity,
            slug=slug,
            world_idx=progress.world_idx,
            stage_idx=progress.stage_idx,
            monster_idx=progress.monster_idx,
        )
        return monster_entity

    def on_stage_start_request(self, sender, **kwargs):
        self.start_encounter()

    # --------------------------------------------------------
    # Combat phase
    # --------------------------------------------------------

    def on_turn_resolved(self, sender, **kwargs):
        result: Optional[ResolutionResult] = kwargs.get('result')
        if result is None or not self._in_battle():
            return
        player = player_components(self.world)
        monster = active_monster(self.world)
        if player is None or monster is None:
            return
        player_entity, player_actor, _ = player
        monster_entity, _, monster_actor = monster

        attack_groups, recovery_groups = self.resolver.classify_groups(result.groups)
        recovery = self.resolver.calculate_recovery(player_actor, recovery_groups)
        if recovery.total_recovery > 0:
            self.event_bus.emit(
                EVENT_HEALTH_HEAL,
                source_entity=player_entity,
                target_entity=player_entity,
                amount=recovery.total_recovery,
                reason='recovery_match',
            )
        attack = self.resolver.calculate_attack_damage(player_actor, monster_actor, attack_groups, result.total_combo)
        if attack.final_damage > 0:
            self.event_bus.emit(
                EVENT_HEALTH_DAMAGE,
                source_entity=player_entity,
                target_entity=monster_entity,
                amount=attack.final_damage,
                reason='match_attack',
            )
        logger.debug(
            "Combat phase: combo=%d damage=%d (raw %d, x%.2f) recovery=%d",
            result.total_combo,
            attack.final_damage,
            attack.raw_damage,
            attack.combo_multiplier,
            recovery.total_recovery,
        )
        self.event_bus.emit(EVENT_BATTLE_RESOLVED, attack=attack, recovery=recovery, combo=result.total_combo)

        if monster_actor.is_dead():
            self._handle_monster_defeated(monster_entity)
        else:
            self._monster_turn(monster_entity, player_entity)

    def _monster_turn(self, monster_entity: int, player_entity: int) -> None:
        monster = self.world.component_for_entity(monster_entity, Monster)
        monster_actor = self.world.component_for_entity(monster_entity, ActorState)
        player_actor = self.world.component_for_entity(player_entity, ActorState)
        monster.countdown -= 1
        self.event_bus.emit(EVENT_MONSTER_COUNTDOWN, monster_entity=monster_entity, remaining=max(0, monster.countdown))
        if monster.countdown > 0:
            return
        damage = self.resolver.calculate_monster_damage(monster_actor, player_actor)
        self.event_bus.emit(
            EVENT_HEALTH_DAMAGE,
            source_entity=monster_entity,
            target_entity=player_entity,
            amount=damage,
            reason='monster_attack',
        )
        self.event_bus.emit(EVENT_MONSTER_ATTACK, monster_entity=monster_entity, target_entity=player_entity, amount=damage)
        monster.reset_countdown()
        if player_actor.is_dead():
            self._handle_player_down(player_entity, player_actor)

    def _handle_player_down(self, player_entity: int, player_actor: ActorState) -> None:
        if player_actor.try_revive():
            logger.info("Player revived, %d extra lives left", player_actor.extra_lives)
            self.event_bus.emit(EVENT_PLAYER_REVIVED, entity=player_entity, lives_left=player_actor.extra_lives)
            self.event_bus.emit(
                EVENT_HEALTH_CHANGED,
                entity=player_entity,
                current=player_actor.hp,
                max_hp=player_actor.max_hp,
                delta=player_actor.hp,
                reason='revive',
                source_entity=None,
            )
            return
        get_game_state(self.world).outcome = Outcome.DEFEATED
        logger.info("Player defeated")
        self.event_bus.emit(EVENT_PLAYER_DEFEATED, entity=player_entity)

    def _handle_monster_defeated(self, monster_entity: int) -> None:
        monster = self.world.component_for_entity(monster_entity, Monster)
        player_entity, _, progress = player_components(self.world)
        progress.gold += monster.gold
        self.event_bus.emit(EVENT_GOLD_CHANGED, entity=player_entity, gold=progress.gold, delta=monster.gold)
        self.event_bus.emit(EVENT_ENEMY_DEFEATED, entity=monster_entity, slug=monster.slug, gold=monster.gold)
        self.world.delete_entity(monster_entity, immediate=True)

        world_idx, stage_idx = progress.world_idx, progress.stage_idx
        step = advance(progress, self.worlds)
        if step == "monster":
            self.start_encounter()
            return
        self.event_bus.emit(EVENT_STAGE_CLEARED, world_idx=world_idx, stage_idx=stage_idx)
        if step == "stage":
            return
        self.event_bus.emit(EVENT_WORLD_CLEARED, world_idx=world_idx)
        if step == "run":
            get_game_state(self.world).outcome = Outcome.RUN_COMPLETED
            logger.info("Run completed with %d gold", progress.gold)
            self.event_bus.emit(EVENT_RUN_COMPLETED, gold=progress.gold)
