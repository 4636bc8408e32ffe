from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from ..dataclasses import (
    AVIATION,
    LOGISTICS,
    VEHICLE,
    CapacityAlternative,
    CapacityIssue,
    CapacityValidationResult,
    CatalogItem,
    CostType,
    IncreaseQuantityAction,
    ReplaceItemAction,
    TripDraft,
)
from .cost_types import normalize_quantity
from .utils import ZERO, ceil_div, safe_decimal

logger = logging.getLogger(__name__)

FIXED_COST_TYPES = {CostType.FIXED_GROUP, CostType.FIXED_PER_DAY}
PHYSICAL_CATEGORIES = {VEHICLE, AVIATION, LOGISTICS}


def _valid_capacity(raw) -> Optional[Decimal]:
    capacity = safe_decimal(raw)
    if capacity is None or not capacity.is_finite() or capacity <= ZERO:
        return None
    return capacity


def is_capacity_constrained(item: CatalogItem) -> bool:
    """A fixed-charge conveyance (vehicle, aircraft, boat) with a declared seat count."""
    return (
        item.cost_type in FIXED_COST_TYPES
        and item.category in PHYSICAL_CATEGORIES
        and item.capacity is not None
    )


def _quantity_in_effect(
    item_id: str,
    quantity_overrides: Dict[str, int],
    default_quantities: Dict[str, int],
) -> int:
    qty = normalize_quantity(quantity_overrides.get(item_id))
    if qty is None:
        qty = normalize_quantity(default_quantities.get(item_id))
    return qty if qty is not None else 1


def _alternatives(item: CatalogItem, catalog_items: List[CatalogItem], travelers: int) -> List[CapacityAlternative]:
    found = []
    for alt in catalog_items:
        if alt.id == item.id or not alt.active:
            continue
        if alt.category != item.category or alt.cost_type != item.cost_type:
            continue
        capacity = _valid_capacity(alt.capacity)
        if capacity is not None and capacity >= travelers:
            found.append(CapacityAlternative(item_id=alt.id, capacity=capacity))
    # smallest sufficient option first
    return sorted(found, key=lambda alt: alt.capacity)


def validate_capacity(
    travelers: int,
    selected_item_ids: Iterable[Optional[str]],
    catalog_items: Iterable[CatalogItem],
    quantity_overrides: Optional[Dict[str, int]] = None,
    default_quantities: Optional[Dict[str, int]] = None,
) -> CapacityValidationResult:
    """
    Check that every selected conveyance seats the whole group.

    Advisory only: findings come back as issues with remediation actions
    (raise the quantity, or swap for a larger catalog alternative) and never
    block pricing.
    """
    if travelers is None or travelers < 1:
        return CapacityValidationResult(is_valid=True, issues=[])

    overrides = quantity_overrides or {}
    defaults = default_quantities or {}
    catalog_list = list(catalog_items)
    catalog_map: Dict[str, CatalogItem] = {}
    for item in catalog_list:
        catalog_map.setdefault(item.id, item)

    issues: List[CapacityIssue] = []
    for item_id in dict.fromkeys(i for i in selected_item_ids if i):
        item = catalog_map.get(item_id)
        if item is None or not is_capacity_constrained(item):
            continue

        quantity = _quantity_in_effect(item_id, overrides, defaults)
        capacity = _valid_capacity(item.capacity)
        if capacity is None:
            logger.warning(f"Catalog item {item_id} declares an invalid capacity: {item.capacity!r}")
            issues.append(
                CapacityIssue(
                    item_id=item_id,
                    travelers=travelers,
                    capacity=ZERO,
                    quantity=quantity,
                    actions=[],
                )
            )
            continue

        if travelers > capacity * quantity:
            required = ceil_div(travelers, capacity)
            logger.info(
                f"Item {item_id} seats {capacity} x {quantity} for {travelers} travelers; needs {required}"
            )
            issues.append(
                CapacityIssue(
                    item_id=item_id,
                    travelers=travelers,
                    capacity=capacity,
                    quantity=quantity,
                    actions=[
                        IncreaseQuantityAction(item_id=item_id, required_quantity=required),
                        ReplaceItemAction(
                            item_id=item_id,
                            alternatives=_alternatives(item, catalog_list, travelers),
                        ),
                    ],
                )
            )

    return CapacityValidationResult(is_valid=not issues, issues=issues)


def collect_selected_item_ids(trip: TripDraft) -> List[str]:
    """Every catalog id the itinerary references, in slot order (excluded park fees left out)."""
    ids: List[str] = []
    for day in trip.trip_days:
        ids.extend(fee.item_id for fee in day.park_fees if not fee.excluded)
        if day.arrival:
            ids.append(day.arrival)
        if day.lodging:
            ids.append(day.lodging)
        ids.extend(day.activities)
        ids.extend(day.extras)
        if day.logistics is not None:
            if day.logistics.vehicle:
                ids.append(day.logistics.vehicle)
            ids.extend(day.logistics.internal_movements)
    return [i for i in ids if i]


def validate_trip_capacity(trip: TripDraft, catalog: Iterable[CatalogItem]) -> CapacityValidationResult:
    catalog_list = list(catalog)
    default_quantities = {
        item.id: item.quantity for item in catalog_list if item.quantity is not None
    }
    return validate_capacity(
        trip.travelers,
        collect_selected_item_ids(trip),
        catalog_list,
        trip.item_quantities,
        default_quantities,
    )
