"""
Cost-type resolution for a single catalog item.

Every catalog item carries a cost-type tag telling how its base price scales
with the itinerary (travelers, days, nights). This module turns one item plus
those counts into a line total and a human-readable explanation.

Quantity semantics differ by category:
  - Activities: quantity is a trailing multiplier on the final total
    ("book this experience N times").
  - Everything else: quantity multiplies inline, and only for the fixed_*
    cost types ("N vehicles for the group").
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Optional

from ..dataclasses import CatalogItem, CostType, ResolvedCost
from .utils import ZERO, amount_or_zero, floor_int, fmt, safe_decimal

logger = logging.getLogger(__name__)

UNKNOWN_COST_TYPE = "Unknown cost type"
UNCONFIGURED_HIERARCHICAL = (
    "Unknown cost type (hierarchical lodging requires explicit configuration)"
)


def normalize_quantity(value) -> Optional[int]:
    """
    Floor a quantity to an integer if it is a finite positive number.

    Returns None for anything unusable (missing, non-numeric, zero, negative,
    infinite, or flooring below 1) so callers can fall back to the next source.
    """
    num = safe_decimal(value)
    if num is None or not num.is_finite() or num <= ZERO:
        return None
    qty = floor_int(num)
    return qty if qty >= 1 else None


def resolve_quantity(item: CatalogItem, quantity_overrides: Optional[Dict[str, int]] = None) -> int:
    overrides = quantity_overrides or {}
    qty = normalize_quantity(overrides.get(item.id))
    if qty is None:
        qty = normalize_quantity(item.quantity)
    return qty if qty is not None else 1


def resolve_cost(
    item: CatalogItem,
    travelers: int,
    days: int,
    nights: int,
    quantity_overrides: Optional[Dict[str, int]] = None,
) -> ResolvedCost:
    """
    Compute the total for one catalog item.

    Args:
        item: Catalog item to price
        travelers: Traveler count of the trip
        days: Day multiplier (trip days, or park nights for vehicles)
        nights: Night multiplier
        quantity_overrides: item id -> quantity chosen by the user

    Returns:
        ResolvedCost: total, explanation and the quantity in effect
    """
    quantity = resolve_quantity(item, quantity_overrides)
    is_activity = item.is_activity
    inline_qty = 1 if is_activity else quantity
    base = amount_or_zero(item.base_price)
    cost_type = item.cost_type

    if cost_type == CostType.FIXED_GROUP:
        total = base * inline_qty
        explanation = f"{fmt(base)} (fixed group)"
        if inline_qty != 1:
            explanation += f" × {inline_qty} units"
    elif cost_type == CostType.FIXED_PER_DAY:
        total = base * days * inline_qty
        explanation = f"{fmt(base)} × {days} days"
        if inline_qty != 1:
            explanation += f" × {inline_qty} units"
    elif cost_type == CostType.PER_PERSON:
        total = base * travelers
        explanation = f"{fmt(base)} × {travelers} travelers"
    elif cost_type == CostType.PER_PERSON_PER_DAY:
        total = base * travelers * days
        explanation = f"{fmt(base)} × {travelers} travelers × {days} days"
    elif cost_type == CostType.PER_NIGHT:
        total = base * nights
        explanation = f"{fmt(base)} × {nights} nights"
    elif cost_type == CostType.PER_NIGHT_PER_PERSON:
        total = base * travelers * nights
        explanation = f"{fmt(base)} × {travelers} travelers × {nights} nights"
    elif cost_type == CostType.PER_GUIDE:
        total = base
        explanation = f"{fmt(base)} (per guide)"
    elif cost_type == CostType.HIERARCHICAL_LODGING:
        # Selected but not configured yet: a valid intermediate state.
        return ResolvedCost(total=ZERO, explanation=UNCONFIGURED_HIERARCHICAL, quantity=quantity)
    else:
        logger.debug(f"Item {item.id} has unrecognized cost type '{item.cost_type_tag}'")
        return ResolvedCost(total=ZERO, explanation=UNKNOWN_COST_TYPE, quantity=quantity)

    if is_activity and quantity != 1:
        total = total * quantity
        explanation += f" × {quantity}"

    return ResolvedCost(total=Decimal(total), explanation=explanation, quantity=quantity)
