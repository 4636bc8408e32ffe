"""
Itinerary line-item expansion.

Walks a trip draft day by day and turns every populated slot into one
breakdown line, resolving catalog references through the cost-type and
hierarchical lodging resolvers.

Per day, slots are emitted in a fixed order:
  park fees -> arrival -> lodging -> activities -> free-hand lines ->
  extras -> logistics vehicle -> logistics internal movements

Counts passed to the resolvers depend on the slot:
  - park fees: 1 day / 1 night (a fee is charged once per day it appears)
  - lodging: trip days / 1 night (each lodged day is one night)
  - logistics vehicle: park nights / park nights for the day's park
  - everything else: trip days / trip days

References to ids missing from the catalog are skipped, never raised, so
itineraries saved against an older catalog still price.
"""
from __future__ import annotations

import logging
from collections import Counter
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from ..dataclasses import (
    ACTIVITIES,
    EXTRAS,
    BreakdownLine,
    CatalogItem,
    CostType,
    PricingResult,
    PricingTotals,
    ResolvedCost,
    TripDay,
    TripDraft,
)
from .catalog import get_park_label, index_catalog
from .cost_types import resolve_cost
from .hierarchical_lodging import resolve_hierarchical
from .utils import ZERO, amount_or_zero, fmt, per_person

logger = logging.getLogger(__name__)

EXCLUDED_SUFFIX = "— Excluded by user"

SLOT_PARK_FEE = "park_fee"
SLOT_ARRIVAL = "arrival"
SLOT_LODGING = "lodging"
SLOT_ACTIVITY = "activity"
SLOT_FREE_HAND = "free_hand"
SLOT_EXTRA = "extra"
SLOT_VEHICLE = "vehicle"
SLOT_INTERNAL = "internal"


def compute_park_nights(trip: TripDraft) -> Dict[str, int]:
    """One night per trip day that has both a park and a lodging selection."""
    nights: Counter = Counter()
    for day in trip.trip_days:
        if day.park_id and day.lodging:
            nights[day.park_id] += 1
    return dict(nights)


class _DayExpander:
    """Emits the breakdown lines of one trip day."""

    def __init__(
        self,
        trip: TripDraft,
        day: TripDay,
        catalog_index: Dict[str, CatalogItem],
        park_nights: Dict[str, int],
        park_label: str,
    ):
        self.trip = trip
        self.day = day
        self.catalog_index = catalog_index
        self.park_nights = park_nights
        self.park_label = park_label
        self.lines: List[BreakdownLine] = []

    def _line_id(self, slot: str, idx: Optional[int] = None) -> str:
        line_id = f"line_{self.day.day_number}_{slot}"
        return line_id if idx is None else f"{line_id}_{idx}"

    def _emit(
        self,
        line_id: str,
        item: CatalogItem,
        resolved: ResolvedCost,
        item_name: Optional[str] = None,
    ) -> None:
        total = resolved.total
        self.lines.append(
            BreakdownLine(
                id=line_id,
                park=self.park_label,
                category=item.category,
                item_id=item.id,
                item_name=item_name or item.name,
                base_price=amount_or_zero(item.base_price),
                cost_type=item.cost_type_label,
                quantity=resolved.quantity if item.category == ACTIVITIES else None,
                calculated_total=total,
                per_person=per_person(total, self.trip.travelers),
                calculation_explanation=resolved.explanation,
            )
        )

    def _lookup(self, slot: str, item_id: Optional[str]) -> Optional[CatalogItem]:
        if not item_id:
            return None
        item = self.catalog_index.get(item_id)
        if item is None:
            logger.debug(
                f"Day {self.day.day_number}: {slot} references unknown catalog id {item_id}; skipped"
            )
        return item

    def price_slot(self, slot: str, item_id: Optional[str], days: int, nights: int, idx: Optional[int] = None) -> None:
        """Shared path for every catalog-backed slot: look up, resolve, emit."""
        item = self._lookup(slot, item_id)
        if item is None:
            return
        resolved = resolve_cost(item, self.trip.travelers, days, nights, self.trip.item_quantities)
        self._emit(self._line_id(slot, idx), item, resolved)

    def park_fees(self) -> None:
        for idx, fee in enumerate(self.day.park_fees):
            if not fee.excluded:
                self.price_slot(SLOT_PARK_FEE, fee.item_id, 1, 1, idx)
                continue
            item = self._lookup(SLOT_PARK_FEE, fee.item_id)
            if item is None:
                continue
            self._emit(
                self._line_id(SLOT_PARK_FEE, idx),
                item,
                ResolvedCost(total=ZERO, explanation="Excluded by user"),
                item_name=f"{item.name} {EXCLUDED_SUFFIX}",
            )

    def lodging(self) -> None:
        item = self._lookup(SLOT_LODGING, self.day.lodging)
        if item is None:
            return
        config = self.day.lodging_config
        if item.cost_type == CostType.HIERARCHICAL_LODGING and config is not None:
            resolved = resolve_hierarchical(
                config,
                self.trip.item_quantities.get(item.id),
                self.trip.travelers,
            )
            room_name = config.room_type_name or config.room_type
            self._emit(self._line_id(SLOT_LODGING), item, resolved, item_name=f"{item.name} ({room_name})")
            return
        resolved = resolve_cost(item, self.trip.travelers, self.trip.days, 1, self.trip.item_quantities)
        self._emit(self._line_id(SLOT_LODGING), item, resolved)

    def free_hand_lines(self) -> None:
        for idx, entry in enumerate(self.day.free_hand_lines):
            description = (entry.description or "").strip()
            amount = amount_or_zero(entry.amount)
            if not description and amount == ZERO:
                continue
            self.lines.append(
                BreakdownLine(
                    id=self._line_id(SLOT_FREE_HAND, idx),
                    park=self.park_label,
                    category=EXTRAS,
                    item_name=description,
                    base_price=amount,
                    cost_type="free_hand",
                    calculated_total=amount,
                    per_person=per_person(amount, self.trip.travelers),
                    calculation_explanation=f"{fmt(amount)} (manual entry)",
                )
            )

    def expand(self) -> List[BreakdownLine]:
        trip_days = self.trip.days
        day = self.day

        self.park_fees()
        self.price_slot(SLOT_ARRIVAL, day.arrival, trip_days, trip_days)
        self.lodging()
        for idx, item_id in enumerate(day.activities):
            self.price_slot(SLOT_ACTIVITY, item_id, trip_days, trip_days, idx)
        self.free_hand_lines()
        for idx, item_id in enumerate(day.extras):
            self.price_slot(SLOT_EXTRA, item_id, trip_days, trip_days, idx)

        if day.logistics is not None:
            nights = self.park_nights.get(day.park_id, 0) if day.park_id else 0
            self.price_slot(SLOT_VEHICLE, day.logistics.vehicle, nights, nights)
            for idx, item_id in enumerate(day.logistics.internal_movements):
                self.price_slot(SLOT_INTERNAL, item_id, trip_days, trip_days, idx)

        return self.lines


def expand_itinerary(
    trip: TripDraft,
    catalog: Iterable[CatalogItem],
    park_labels: Optional[Dict[str, str]] = None,
) -> PricingResult:
    """
    Price a trip draft against a catalog snapshot.

    Args:
        trip: Itinerary snapshot to price
        catalog: Catalog snapshot; may be empty
        park_labels: Optional park id -> display label table

    Returns:
        PricingResult: breakdown lines in slot order plus grand total and per-person share
    """
    catalog_index = index_catalog(catalog)
    park_nights = compute_park_nights(trip)

    breakdown: List[BreakdownLine] = []
    for day in trip.trip_days:
        park_label = get_park_label(day.park_id, park_labels)
        breakdown.extend(_DayExpander(trip, day, catalog_index, park_nights, park_label).expand())

    grand_total = sum((line.calculated_total for line in breakdown), ZERO)
    logger.debug(f"Expanded {len(trip.trip_days)} trip days into {len(breakdown)} lines, total {grand_total}")

    return PricingResult(
        breakdown=breakdown,
        totals=PricingTotals(
            grand_total=Decimal(grand_total),
            per_person=per_person(grand_total, trip.travelers),
        ),
    )
