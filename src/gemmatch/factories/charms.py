from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from gemmatch.components.charm import Charm, CharmKind
from gemmatch.components.rules import Rules

_KIND_LABELS: Dict[CharmKind, str] = {
    CharmKind.MULTIPLIER_PER_COLOR: "Gleam",
    CharmKind.FLAT_BONUS_PER_COLOR: "Spark",
}


@dataclass(frozen=True, slots=True)
class CharmOffer:
    """A purchasable charm as shown in the shop.

    offer_id: ``"<kind>:<color>"``, stable across offers and sessions.
    """
    offer_id: str
    name: str
    description: str
    price: int
    charm: Charm


def charm_magnitude(rules: Rules, kind: CharmKind) -> int:
    if kind is CharmKind.MULTIPLIER_PER_COLOR:
        return rules.charm_multiplier_magnitude
    return rules.charm_flat_magnitude


def create_charm(rules: Rules, kind: CharmKind | str, color: str) -> Charm:
    try:
        kind = CharmKind(kind)
    except ValueError as exc:
        raise ValueError(f"Unknown charm kind '{kind}'") from exc
    if color not in rules.colors:
        raise ValueError(f"Unknown charm color '{color}'")
    return Charm(kind=kind, color=color, magnitude=charm_magnitude(rules, kind))


def describe_charm(charm: Charm, base_cell_score: int) -> str:
    if charm.kind is CharmKind.MULTIPLIER_PER_COLOR:
        return f"+{base_cell_score * charm.magnitude} per {charm.color} cleared"
    return f"+{charm.magnitude} flat per {charm.color} cleared"


def create_offer(rules: Rules, charm: Charm) -> CharmOffer:
    return CharmOffer(
        offer_id=charm.slug,
        name=f"{charm.color.title()} {_KIND_LABELS[charm.kind]}",
        description=describe_charm(charm, rules.base_cell_score),
        price=rules.charm_price,
        charm=charm,
    )


def charm_catalog(rules: Rules) -> List[CharmOffer]:
    """Every (kind, color) charm, kinds in enumeration order then colors."""
    return [
        create_offer(rules, create_charm(rules, kind, color))
        for kind in CharmKind
        for color in rules.colors
    ]


def offer_by_id(rules: Rules, offer_id: str) -> CharmOffer | None:
    kind_value, _, color = offer_id.partition(":")
    try:
        charm = create_charm(rules, kind_value, color)
    except ValueError:
        return None
    return create_offer(rules, charm)


def available_offers(rules: Rules, owned: Sequence[Charm]) -> List[CharmOffer]:
    owned_slugs = {charm.slug for charm in owned}
    return [offer for offer in charm_catalog(rules) if offer.offer_id not in owned_slugs]
