"""
Pricing for lodges whose rates live in a room -> season -> occupancy table.

A hierarchical lodging item has no usable base price; its catalog metadata
holds the rate table and the user picks a room, season and occupancy for each
itinerary day. That pick (a LodgingConfiguration) carries the resolved unit
price and its basis, and is the only way such an item prices above zero.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ..dataclasses import (
    CatalogItem,
    CostType,
    LodgingConfiguration,
    LodgingRoom,
    OccupancyPrice,
    PriceBasis,
    ResolvedCost,
)
from .cost_types import normalize_quantity
from .utils import ZERO, amount_or_zero, fmt, safe_decimal

logger = logging.getLogger(__name__)

# first populated key wins
_BASIS_KEYS = (PriceBasis.PER_ROOM, PriceBasis.PER_PERSON, PriceBasis.PER_VILLA)

_BASIS_LABELS = {
    PriceBasis.PER_ROOM: "room",
    PriceBasis.PER_PERSON: "person",
    PriceBasis.PER_VILLA: "villa",
}


def parse_occupancy_price(raw) -> Optional[OccupancyPrice]:
    """
    Convert a raw occupancy price into an OccupancyPrice.

    A bare number means a per-person rate. An object is read for perRoom,
    perPerson then perVilla, taking the first one holding a positive amount.
    Anything else yields None (the occupancy is treated as unpriced).
    """
    if isinstance(raw, OccupancyPrice):
        return raw
    if isinstance(raw, dict):
        for basis in _BASIS_KEYS:
            amount = safe_decimal(raw.get(basis.value))
            if amount is not None and amount.is_finite() and amount > ZERO:
                return OccupancyPrice(basis=basis, amount=amount)
        return None
    amount = safe_decimal(raw)
    if amount is None or not amount.is_finite() or amount < ZERO:
        return None
    return OccupancyPrice(basis=PriceBasis.PER_PERSON, amount=amount)


def _find_room(item: CatalogItem, room_id: str) -> Optional[LodgingRoom]:
    if item.metadata is None:
        return None
    for room in item.metadata.rooms:
        if room.id == room_id:
            return room
    return None


def available_occupancies(item: CatalogItem, room_id: str, season: str) -> List[str]:
    room = _find_room(item, room_id)
    if room is None:
        return []
    return list(room.pricing.get(season, {}).keys())


def configure_lodging(
    item: CatalogItem,
    room_id: str,
    season: str,
    occupancy: str,
) -> Optional[LodgingConfiguration]:
    """Look a configuration up in the item's rate table; None when anything is missing."""
    if item.cost_type != CostType.HIERARCHICAL_LODGING:
        return None
    if item.metadata is None:
        logger.warning(f"Hierarchical lodging {item.id} has no pricing metadata")
        return None

    room = _find_room(item, room_id)
    if room is None:
        return None
    price = room.pricing.get(season, {}).get(occupancy)
    if price is None:
        logger.debug(f"No {season}/{occupancy} rate for room {room_id} of {item.id}")
        return None

    return LodgingConfiguration(
        room_type=room.id,
        season=season,
        occupancy=occupancy,
        price=price.amount,
        price_basis=price.basis,
        room_type_name=room.name,
        season_name=item.metadata.seasons.get(season),
    )


def resolve_hierarchical(
    configuration: LodgingConfiguration,
    quantity_override,
    travelers: int,
) -> ResolvedCost:
    quantity = normalize_quantity(quantity_override) or 1
    price = amount_or_zero(configuration.price)
    basis = configuration.price_basis

    room = configuration.room_type_name or configuration.room_type
    season = configuration.season_name or configuration.season
    prefix = f"{room} · {season} · {configuration.occupancy}: "

    if basis == PriceBasis.PER_PERSON:
        total = price * travelers * quantity
        explanation = f"{prefix}{fmt(price)}/person × {travelers} travelers"
    else:
        total = price * quantity
        explanation = f"{prefix}{fmt(price)}/{_BASIS_LABELS.get(basis, 'room')}"

    if quantity > 1:
        explanation += f" × {quantity}"

    return ResolvedCost(total=total, explanation=explanation, quantity=quantity)
