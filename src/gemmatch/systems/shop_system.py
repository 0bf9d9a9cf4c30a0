from __future__ import annotations

import logging
from enum import Enum
from typing import List

from esper import World

from gemmatch.components.charm import Charm
from gemmatch.constants import DEFAULT_SHOP_OFFER_COUNT
from gemmatch.events.bus import (
    EventBus,
    EVENT_CHARM_PURCHASED,
    EVENT_CHARM_SOLD,
    EVENT_CURRENCY_CHANGED,
    EVENT_SHOP_OFFER,
    EVENT_SHOP_REQUEST,
)
from gemmatch.factories.charms import CharmOffer, available_offers, offer_by_id
from gemmatch.utils.resources import get_charm_inventory, get_economy, get_rules, get_turn_state, world_rng

logger = logging.getLogger(__name__)


class PurchaseResult(Enum):
    SUCCESS = "success"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    SLOTS_FULL = "slots_full"
    ALREADY_OWNED = "already_owned"
    UNKNOWN_CHARM = "unknown_charm"
    BUSY = "busy"


class ShopSystem:
    """Sells and buys back charms against the player's currency.

    Offers are sampled from the charms the player does not own yet; at most
    one charm per (kind, color) can be held, and the inventory is capped by
    ``Rules.max_charms``. Sales refund half the price. Nothing can be bought
    or sold while a swap is still resolving.
    """

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_SHOP_REQUEST, self._on_shop_request)

    def _on_shop_request(self, sender, **payload) -> None:
        count = payload.get("count")
        try:
            count_int = int(count)
        except (TypeError, ValueError):
            return
        offers = self.get_shop_offer(count_int)
        self.event_bus.emit(EVENT_SHOP_OFFER, offers=offers, request_id=payload.get("request_id"))

    def get_shop_offer(self, count: int = DEFAULT_SHOP_OFFER_COUNT) -> List[CharmOffer]:
        if count <= 0:
            return []
        rules = get_rules(self.world)
        inventory = get_charm_inventory(self.world)
        pool = available_offers(rules, inventory.charms)
        picks = min(count, len(pool))
        return world_rng(self.world).sample(pool, picks)

    def purchase_charm(self, offer_id: str) -> PurchaseResult:
        if get_turn_state(self.world).busy:
            return PurchaseResult.BUSY
        rules = get_rules(self.world)
        offer = offer_by_id(rules, offer_id)
        if offer is None:
            return PurchaseResult.UNKNOWN_CHARM
        inventory = get_charm_inventory(self.world)
        economy = get_economy(self.world)
        if inventory.owns(offer.charm.kind, offer.charm.color):
            return PurchaseResult.ALREADY_OWNED
        if inventory.is_full():
            return PurchaseResult.SLOTS_FULL
        if not economy.can_afford(offer.price):
            return PurchaseResult.INSUFFICIENT_FUNDS
        economy.currency -= offer.price
        inventory.charms.append(offer.charm)
        logger.info("Bought charm %s for %d", offer.offer_id, offer.price)
        self.event_bus.emit(EVENT_CURRENCY_CHANGED, currency=economy.currency, delta=-offer.price, reason="charm_purchase")
        self.event_bus.emit(EVENT_CHARM_PURCHASED, charm=offer.charm, price=offer.price)
        return PurchaseResult.SUCCESS

    def sell_charm(self, index: int) -> int:
        """Remove the charm at ``index`` and return the refund.

        Returns 0 when there is no such charm or a resolution episode is running.
        """
        if get_turn_state(self.world).busy:
            return 0
        inventory = get_charm_inventory(self.world)
        if not 0 <= index < len(inventory.charms):
            return 0
        charm: Charm = inventory.charms.pop(index)
        refund = get_rules(self.world).charm_price // 2
        economy = get_economy(self.world)
        economy.currency += refund
        logger.info("Sold charm %s for %d", charm.slug, refund)
        self.event_bus.emit(EVENT_CURRENCY_CHANGED, currency=economy.currency, delta=refund, reason="charm_sale")
        self.event_bus.emit(EVENT_CHARM_SOLD, charm=charm, refund=refund)
        return refund
