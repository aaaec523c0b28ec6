import logging

from esper import World

from orbfall.events.bus import (
    EventBus,
    EVENT_GOLD_CHANGED,
    EVENT_UPGRADE_PURCHASE_REQUEST,
    EVENT_UPGRADE_PURCHASED,
    EVENT_UPGRADE_REJECTED,
)
from orbfall.factories.upgrades import UPGRADES, can_purchase, is_maxed, purchase_upgrade, upgrade_cost
from orbfall.utils.combatants import player_components

logger = logging.getLogger(__name__)


class UpgradeSystem:
    """Handles shop purchases between stages."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_UPGRADE_PURCHASE_REQUEST, self.on_purchase_request)

    def offers(self) -> list[tuple[str, int, bool]]:
        """Return ``(slug, cost, affordable)`` for every upgrade not yet maxed."""
        player = player_components(self.world)
        if player is None:
            return []
        _, _, progress = player
        return [
            (slug, upgrade_cost(progress, upgrade), can_purchase(progress, upgrade))
            for slug, upgrade in UPGRADES.items()
            if not is_maxed(progress, upgrade)
        ]

    def on_purchase_request(self, sender, **kwargs):
        slug = kwargs.get('upgrade')
        upgrade = UPGRADES.get(slug) if slug else None
        if upgrade is None:
            self.event_bus.emit(EVENT_UPGRADE_REJECTED, upgrade=slug, reason='unknown')
            return
        player = player_components(self.world)
        if player is None:
            return
        player_entity, actor, progress = player
        if is_maxed(progress, upgrade):
            self.event_bus.emit(EVENT_UPGRADE_REJECTED, upgrade=slug, reason='max_level')
            return
        cost = upgrade_cost(progress, upgrade)
        if not purchase_upgrade(actor, progress, upgrade):
            self.event_bus.emit(EVENT_UPGRADE_REJECTED, upgrade=slug, reason='insufficient_gold')
            return
        level = progress.upgrade_level(slug)
        logger.debug("Purchased %s level %d for %d gold", slug, level, cost)
        self.event_bus.emit(EVENT_GOLD_CHANGED, entity=player_entity, gold=progress.gold, delta=-cost)
        self.event_bus.emit(EVENT_UPGRADE_PURCHASED, upgrade=slug, level=level, cost=cost)
