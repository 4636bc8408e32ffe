"""
Tests for the advisory capacity validator.
"""
from decimal import Decimal

import pytest

from ..dataclasses import AVIATION, LODGING, CostType, LogisticsSelection, ParkFeeSelection
from ..services.capacity import (
    collect_selected_item_ids,
    is_capacity_constrained,
    validate_capacity,
    validate_trip_capacity,
)
from .fixtures import fixed_group_item, make_day, make_item, make_trip, per_person_item, vehicle_item


class TestValidateCapacity:

    def test_insufficient_vehicle(self):
        """Test six travelers in a four-seat vehicle"""
        van = vehicle_item(200, 4, "Safari Van")

        result = validate_capacity(6, [van.id], [van])

        assert result.is_valid is False
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.item_id == van.id
        assert issue.field == "capacity"
        assert issue.message == "The selected item capacity is insufficient for the number of travelers."
        assert issue.capacity == Decimal("4")
        assert issue.quantity == 1
        increase = issue.actions[0]
        assert increase.type == "increase_quantity"
        assert increase.required_quantity == 2
        assert issue.actions[1].type == "replace_item"

    def test_sufficient_with_quantity_override(self):
        van = vehicle_item(200, 4, "Safari Van")

        result = validate_capacity(6, [van.id], [van], quantity_overrides={van.id: 2})

        assert result.is_valid is True
        assert result.issues == []

    def test_default_quantity_used_without_override(self):
        van = vehicle_item(200, 4, "Safari Van")

        result = validate_capacity(8, [van.id], [van], default_quantities={van.id: 2})

        assert result.is_valid is True

    def test_invalid_override_falls_back_to_default_quantity(self):
        van = vehicle_item(200, 4, "Safari Van")

        result = validate_capacity(8, [van.id], [van], {van.id: 0}, {van.id: 2})

        assert result.is_valid is True

    def test_exact_fit_is_valid(self):
        van = vehicle_item(200, 7, "Safari Van")
        assert validate_capacity(7, [van.id], [van]).is_valid is True

    @pytest.mark.parametrize("travelers", [0, -3, None])
    def test_no_travelers_is_valid(self, travelers):
        van = vehicle_item(200, 4, "Safari Van")
        assert validate_capacity(travelers, [van.id], [van]).is_valid is True

    def test_replacement_alternatives(self):
        """Test that alternatives match category and cost type and are sorted by capacity"""
        van = vehicle_item(200, 4, "Small Van")
        big = vehicle_item(300, 10, "Big Truck")
        medium = vehicle_item(250, 7, "Land Cruiser")
        too_small = vehicle_item(150, 5, "Minivan")
        retired = vehicle_item(260, 8, "Old Bus", active=False)
        other_type = make_item(category="Vehicle", cost_type=CostType.FIXED_GROUP, capacity=20)
        other_category = make_item(category=AVIATION, cost_type=CostType.FIXED_PER_DAY, capacity=12)
        catalog = [van, big, medium, too_small, retired, other_type, other_category]

        result = validate_capacity(6, [van.id], catalog)

        replace = result.issues[0].actions[1]
        assert [alt.item_id for alt in replace.alternatives] == [medium.id, big.id]
        assert [alt.capacity for alt in replace.alternatives] == [Decimal("7"), Decimal("10")]

    def test_required_quantity_rounds_up(self):
        plane = make_item(category=AVIATION, cost_type=CostType.FIXED_GROUP, capacity=3)

        result = validate_capacity(10, [plane.id], [plane])

        assert result.issues[0].actions[0].required_quantity == 4

    @pytest.mark.parametrize("capacity", [0, -2, "abc", float("nan"), float("inf")])
    def test_invalid_capacity_reported_without_actions(self, capacity):
        van = vehicle_item(200, capacity, "Broken Van")

        result = validate_capacity(2, [van.id], [van])

        assert result.is_valid is False
        assert result.issues[0].actions == []
        assert result.issues[0].capacity == Decimal("0")

    def test_undeclared_capacity_is_not_checked(self):
        van = vehicle_item(200, None, "Van")
        assert validate_capacity(50, [van.id], [van]).is_valid is True

    def test_non_physical_items_are_ignored(self):
        activity = per_person_item(10, "Walk", capacity=2)
        lodge = make_item(category=LODGING, cost_type=CostType.FIXED_GROUP, capacity=2)
        assert not is_capacity_constrained(activity)
        assert not is_capacity_constrained(lodge)
        assert validate_capacity(10, [activity.id, lodge.id], [activity, lodge]).is_valid is True

    def test_per_person_vehicle_is_not_constrained(self):
        seat = make_item(category="Vehicle", cost_type=CostType.PER_PERSON, capacity=2)
        assert not is_capacity_constrained(seat)

    def test_duplicates_and_unknown_ids(self):
        van = vehicle_item(200, 4, "Safari Van")

        result = validate_capacity(6, [van.id, None, "", "ghost", van.id], [van])

        assert len(result.issues) == 1


class TestTripCapacity:

    def test_collect_selected_item_ids(self):
        trip = make_trip(
            trip_days=[
                make_day(
                    park_fees=[ParkFeeSelection("fee"), ParkFeeSelection("skipped", excluded=True)],
                    arrival="flight",
                    lodging="lodge",
                    activities=["walk"],
                    extras=["dinner"],
                    logistics=LogisticsSelection(vehicle="van", internal_movements=["boat"]),
                ),
                make_day(day_number=2, activities=["walk"]),
            ],
        )

        assert collect_selected_item_ids(trip) == ["fee", "flight", "lodge", "walk", "dinner", "van", "boat", "walk"]

    def test_validate_trip_capacity_uses_trip_quantities(self):
        van = vehicle_item(200, 4, "Safari Van")
        trip = make_trip(travelers=6, trip_days=[make_day(logistics=LogisticsSelection(vehicle=van.id))])

        assert validate_trip_capacity(trip, [van]).is_valid is False

        trip.item_quantities = {van.id: 2}
        assert validate_trip_capacity(trip, [van]).is_valid is True

    def test_validate_trip_capacity_uses_catalog_quantity(self):
        boat = fixed_group_item(80, "Boat", category="Logistics", capacity=4, quantity=2)
        trip = make_trip(travelers=8, trip_days=[make_day(logistics=LogisticsSelection(internal_movements=[boat.id]))])

        assert validate_trip_capacity(trip, [boat]).is_valid is True
