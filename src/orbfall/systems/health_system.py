from esper import World

from orbfall.components.actor import ActorState
from orbfall.events.bus import (
    EventBus,
    EVENT_ENTITY_DEFEATED,
    EVENT_HEALTH_CHANGED,
    EVENT_HEALTH_DAMAGE,
    EVENT_HEALTH_HEAL,
)


class HealthSystem:
    """Manages health state changes via events.

    Subscribes to EVENT_HEALTH_DAMAGE and EVENT_HEALTH_HEAL and applies
    changes to the target's ActorState. Damage amounts are final: defense has
    already been accounted for by whoever computed them. Emits
    EVENT_HEALTH_CHANGED after every mutation and EVENT_ENTITY_DEFEATED when
    the target's hp reaches zero.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_HEALTH_DAMAGE, self.on_health_damage)
        self.event_bus.subscribe(EVENT_HEALTH_HEAL, self.on_health_heal)

    def on_health_damage(self, sender, **kwargs):
        """Apply damage to target entity and emit health changed event."""
        target_entity = kwargs.get('target_entity')
        amount = kwargs.get('amount', 0)
        reason = kwargs.get('reason', 'unknown')

        if target_entity is None or amount <= 0:
            return

        try:
            actor = self.world.component_for_entity(target_entity, ActorState)
        except KeyError:
            return

        was_dead = actor.is_dead()
        lost = actor.lose_hp(amount)
        self._emit_changed(target_entity, actor, -lost, reason, kwargs.get('source_entity'))
        if actor.is_dead() and not was_dead:
            self.event_bus.emit(EVENT_ENTITY_DEFEATED, entity=target_entity, reason=reason)

    def on_health_heal(self, sender, **kwargs):
        """Apply healing to target entity and emit health changed event."""
        target_entity = kwargs.get('target_entity')
        amount = kwargs.get('amount', 0)
        reason = kwargs.get('reason', 'unknown')

        if target_entity is None or amount <= 0:
            return

        try:
            actor = self.world.component_for_entity(target_entity, ActorState)
        except KeyError:
            return

        gained = actor.heal(amount)
        self._emit_changed(target_entity, actor, gained, reason, kwargs.get('source_entity'))

    def _emit_changed(self, entity: int, actor: ActorState, delta: int, reason: str, source_entity) -> None:
        self.event_bus.emit(
            EVENT_HEALTH_CHANGED,
            entity=entity,
            current=actor.hp,
            max_hp=actor.max_hp,
            delta=delta,
            reason=reason,
            source_entity=source_entity,
        )
