"""
Builders for engine test data.

Defaults mirror a small Bwindi trip; every builder takes keyword overrides.
"""
import itertools
from decimal import Decimal

from ..dataclasses import (
    ACTIVITIES,
    APPLIES_PARK,
    EXTRAS,
    LODGING,
    VEHICLE,
    CatalogItem,
    CostType,
    LodgingMetadata,
    LodgingRoom,
    OccupancyPrice,
    PriceBasis,
    TripDay,
    TripDraft,
)

_ids = itertools.count(1)


def make_trip(**overrides) -> TripDraft:
    defaults = dict(
        name="Test Safari Trip",
        travelers=4,
        days=5,
        tier="base",
        trip_days=[],
        item_quantities={},
    )
    defaults.update(overrides)
    return TripDraft(**defaults)


def make_day(**overrides) -> TripDay:
    defaults = dict(day_number=1, park_id="BWINDI")
    defaults.update(overrides)
    return TripDay(**defaults)


def make_item(**overrides) -> CatalogItem:
    defaults = dict(
        id=f"item_{next(_ids)}",
        name="Test Activity",
        category=ACTIVITIES,
        cost_type=CostType.PER_PERSON,
        base_price=Decimal("100"),
        applies_to=APPLIES_PARK,
        park_id="BWINDI",
    )
    defaults.update(overrides)
    if "base_price" in overrides:
        defaults["base_price"] = Decimal(str(overrides["base_price"]))
    return CatalogItem(**defaults)


def _typed_item(cost_type, category, base_price, name, overrides) -> CatalogItem:
    fields = dict(cost_type=cost_type, category=category)
    fields.update(overrides)
    fields.update(name=name, base_price=base_price)
    return make_item(**fields)


def per_person_item(base_price, name, **overrides) -> CatalogItem:
    return _typed_item(CostType.PER_PERSON, ACTIVITIES, base_price, name, overrides)


def per_night_per_person_item(base_price, name, **overrides) -> CatalogItem:
    return _typed_item(CostType.PER_NIGHT_PER_PERSON, LODGING, base_price, name, overrides)


def per_night_item(base_price, name, **overrides) -> CatalogItem:
    return _typed_item(CostType.PER_NIGHT, LODGING, base_price, name, overrides)


def fixed_group_item(base_price, name, **overrides) -> CatalogItem:
    return _typed_item(CostType.FIXED_GROUP, EXTRAS, base_price, name, overrides)


def fixed_per_day_item(base_price, name, **overrides) -> CatalogItem:
    return _typed_item(CostType.FIXED_PER_DAY, VEHICLE, base_price, name, overrides)


def vehicle_item(base_price, capacity, name, **overrides) -> CatalogItem:
    return fixed_per_day_item(base_price, name, capacity=capacity, **overrides)


def hierarchical_lodging_item(name, **overrides) -> CatalogItem:
    def pp(amount):
        return OccupancyPrice(basis=PriceBasis.PER_PERSON, amount=Decimal(amount))

    metadata = LodgingMetadata(
        rooms=[
            LodgingRoom(
                id="standard",
                name="Standard Room",
                max_occupancy=2,
                pricing={
                    "high": {"single": pp("500"), "double": pp("400")},
                    "low": {"single": pp("300"), "double": pp("250")},
                },
            ),
            LodgingRoom(
                id="private_pool",
                name="Private Pool Suite",
                max_occupancy=2,
                pricing={
                    "low": {"suite": OccupancyPrice(basis=PriceBasis.PER_VILLA, amount=Decimal("1000"))},
                },
            ),
        ],
        seasons={"high": "High Season", "low": "Low Season"},
    )
    return make_item(
        name=name,
        base_price=0,
        cost_type=CostType.HIERARCHICAL_LODGING,
        category=LODGING,
        metadata=metadata,
        **overrides,
    )
