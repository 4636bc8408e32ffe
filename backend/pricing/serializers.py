"""
Request/response serializers for the pricing API.

Incoming documents use the camelCase keys of the trip builder front end;
each request serializer maps them onto snake_case attributes via `source` and
offers a `to_*` helper that builds the engine dataclasses. Catalog values the
engine treats as data-quality findings (capacity, quantity, prices) are
accepted loosely here so the engine, not the API, decides how to price them.
"""
from __future__ import annotations

from typing import List

from rest_framework import serializers

from .dataclasses import (
    APPLIES_GLOBAL,
    APPLIES_PARK,
    CatalogItem,
    CostType,
    FreeHandLine,
    LodgingConfiguration,
    LodgingMetadata,
    LodgingRoom,
    LogisticsSelection,
    MarkupPercentages,
    ParkFeeSelection,
    PriceBasis,
    Scenario,
    TripDay,
    TripDraft,
)
from .services.hierarchical_lodging import parse_occupancy_price
from .services.utils import ZERO, amount_or_zero, quantize_money


class MoneyField(serializers.DecimalField):
    """Two-place money output; the precision widens with the amount instead of overflowing."""

    def __init__(self, **kwargs):
        super().__init__(max_digits=None, decimal_places=2, **kwargs)

    def quantize(self, value):
        return quantize_money(value)


class LooseDecimalField(serializers.Field):
    """Accepts any JSON scalar; unusable values become ZERO."""

    def to_internal_value(self, data):
        return amount_or_zero(data)

    def to_representation(self, value):
        return str(value)


class OccupancyPriceField(serializers.Field):
    """A bare number (per person) or an object with perRoom / perPerson / perVilla."""

    def to_internal_value(self, data):
        price = parse_occupancy_price(data)
        if price is None:
            raise serializers.ValidationError(
                "Occupancy price must be a non-negative number or an object with perRoom, perPerson or perVilla."
            )
        return price

    def to_representation(self, value):
        return {value.basis.value: str(value.amount)}


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class LodgingRoomSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField(required=False, allow_blank=True, default="")
    maxOccupancy = serializers.IntegerField(source='max_occupancy', required=False, allow_null=True, min_value=1)
    pricing = serializers.DictField(
        child=serializers.DictField(child=OccupancyPriceField()),
        required=False,
        default=dict,
    )


class LodgingMetadataSerializer(serializers.Serializer):
    rooms = LodgingRoomSerializer(many=True, required=False, default=list)
    # season key -> display name, or an object carrying a name
    seasons = serializers.DictField(child=serializers.JSONField(), required=False, default=dict)


class CatalogItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    itemName = serializers.CharField(source='name', required=False, allow_blank=True, default="")
    category = serializers.CharField()
    costType = serializers.CharField(source='cost_type_tag', required=False, allow_blank=True, default="")
    basePrice = LooseDecimalField(source='base_price', required=False, allow_null=True, default=ZERO)
    appliesTo = serializers.ChoiceField(
        source='applies_to', choices=(APPLIES_GLOBAL, APPLIES_PARK), required=False, default=APPLIES_GLOBAL
    )
    parkId = serializers.CharField(source='park_id', required=False, allow_null=True, allow_blank=True)
    capacity = serializers.JSONField(required=False, allow_null=True)
    quantity = serializers.JSONField(required=False, allow_null=True)
    active = serializers.BooleanField(required=False, default=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    metadata = LodgingMetadataSerializer(required=False, allow_null=True)

    def to_internal_value(self, data):
        # plain `name` is accepted as an alias for itemName
        if isinstance(data, dict) and "itemName" not in data and "name" in data:
            data = {**data, "itemName": data["name"]}
        return super().to_internal_value(data)

    def validate(self, attrs):
        if attrs.get('applies_to') == APPLIES_PARK and not attrs.get('park_id'):
            raise serializers.ValidationError({"parkId": "Park-scoped items require a parkId."})
        return attrs

    @staticmethod
    def to_catalog_item(data: dict) -> CatalogItem:
        metadata = data.get('metadata')
        tag = data.get('cost_type_tag') or ""
        return CatalogItem(
            id=data['id'],
            name=data.get('name') or "",
            category=data['category'],
            cost_type=CostType.from_tag(tag),
            cost_type_tag=tag,
            base_price=data.get('base_price', ZERO),
            applies_to=data.get('applies_to', APPLIES_GLOBAL),
            park_id=data.get('park_id') or None,
            capacity=data.get('capacity'),
            quantity=data.get('quantity'),
            active=data.get('active', True),
            notes=data.get('notes'),
            metadata=_to_metadata(metadata) if metadata else None,
        )


def _to_metadata(data: dict) -> LodgingMetadata:
    rooms = [
        LodgingRoom(
            id=room['id'],
            name=room.get('name') or room['id'],
            max_occupancy=room.get('max_occupancy'),
            pricing=room.get('pricing') or {},
        )
        for room in data.get('rooms', [])
    ]
    seasons = {}
    for key, value in (data.get('seasons') or {}).items():
        if isinstance(value, dict):
            value = value.get('name') or key
        seasons[key] = str(value)
    return LodgingMetadata(rooms=rooms, seasons=seasons)


def to_catalog(items: List[dict]) -> List[CatalogItem]:
    return [CatalogItemSerializer.to_catalog_item(item) for item in items]


# ---------------------------------------------------------------------------
# Trip draft
# ---------------------------------------------------------------------------

class ParkFeeSelectionSerializer(serializers.Serializer):
    itemId = serializers.CharField(source='item_id')
    excluded = serializers.BooleanField(required=False, default=False)
    source = serializers.ChoiceField(choices=("auto", "manual"), required=False, default="auto")


class LodgingConfigurationSerializer(serializers.Serializer):
    roomType = serializers.CharField(source='room_type')
    roomTypeName = serializers.CharField(source='room_type_name', required=False, allow_null=True, allow_blank=True)
    season = serializers.CharField()
    seasonName = serializers.CharField(source='season_name', required=False, allow_null=True, allow_blank=True)
    occupancy = serializers.CharField()
    price = LooseDecimalField()
    priceType = serializers.ChoiceField(
        source='price_basis',
        choices=[basis.value for basis in PriceBasis],
        required=False,
        default=PriceBasis.PER_PERSON.value,
    )


class LogisticsSelectionSerializer(serializers.Serializer):
    vehicle = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    internalMovements = serializers.ListField(
        source='internal_movements', child=serializers.CharField(), required=False, default=list
    )


class FreeHandLineSerializer(serializers.Serializer):
    id = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, default="")
    amount = LooseDecimalField(required=False, allow_null=True, default=ZERO)


class TripDaySerializer(serializers.Serializer):
    dayNumber = serializers.IntegerField(source='day_number', min_value=1)
    parkId = serializers.CharField(source='park_id', required=False, allow_null=True, allow_blank=True)
    parkFees = ParkFeeSelectionSerializer(source='park_fees', many=True, required=False, default=list)
    arrival = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    lodging = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    lodgingConfig = LodgingConfigurationSerializer(source='lodging_config', required=False, allow_null=True)
    activities = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    extras = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    logistics = LogisticsSelectionSerializer(required=False, allow_null=True)
    freeHandLines = FreeHandLineSerializer(source='free_hand_lines', many=True, required=False, default=list)


class TripDraftSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, default="")
    tier = serializers.CharField(required=False, allow_blank=True, default="base")
    travelers = serializers.IntegerField(min_value=0)
    days = serializers.IntegerField(min_value=0)
    tripDays = TripDaySerializer(source='trip_days', many=True, required=False, default=list)
    itemQuantities = serializers.DictField(
        source='item_quantities', child=serializers.JSONField(), required=False, default=dict
    )

    @staticmethod
    def to_trip(data: dict) -> TripDraft:
        return TripDraft(
            name=data.get('name', ""),
            tier=data.get('tier') or "base",
            travelers=data['travelers'],
            days=data['days'],
            trip_days=[_to_trip_day(day) for day in data.get('trip_days', [])],
            item_quantities=dict(data.get('item_quantities') or {}),
        )


def _to_trip_day(data: dict) -> TripDay:
    config = data.get('lodging_config')
    logistics = data.get('logistics')
    return TripDay(
        day_number=data['day_number'],
        park_id=data.get('park_id') or None,
        park_fees=[ParkFeeSelection(**fee) for fee in data.get('park_fees', [])],
        arrival=data.get('arrival') or None,
        lodging=data.get('lodging') or None,
        lodging_config=LodgingConfiguration(
            room_type=config['room_type'],
            season=config['season'],
            occupancy=config['occupancy'],
            price=config['price'],
            price_basis=PriceBasis(config['price_basis']),
            room_type_name=config.get('room_type_name'),
            season_name=config.get('season_name'),
        ) if config else None,
        activities=list(data.get('activities', [])),
        extras=list(data.get('extras', [])),
        logistics=LogisticsSelection(
            vehicle=logistics.get('vehicle') or None,
            internal_movements=list(logistics.get('internal_movements', [])),
        ) if logistics else None,
        free_hand_lines=[FreeHandLine(**line) for line in data.get('free_hand_lines', [])],
    )


class MarkupSerializer(serializers.Serializer):
    contingencyPct = serializers.DecimalField(source='contingency_pct', max_digits=7, decimal_places=3, min_value=0, required=False, default=ZERO)
    commissionPct = serializers.DecimalField(source='commission_pct', max_digits=7, decimal_places=3, min_value=0, required=False, default=ZERO)
    profitPct = serializers.DecimalField(source='profit_pct', max_digits=7, decimal_places=3, min_value=0, required=False, default=ZERO)

    @staticmethod
    def to_markup(data: dict) -> MarkupPercentages:
        return MarkupPercentages(**data)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class QuoteComputeRequestSerializer(serializers.Serializer):
    trip = TripDraftSerializer()
    catalog = CatalogItemSerializer(many=True)
    markup = MarkupSerializer(required=False, allow_null=True)
    useTierMarkup = serializers.BooleanField(source='use_tier_markup', required=False, default=False)


class CapacityValidateRequestSerializer(serializers.Serializer):
    trip = TripDraftSerializer()
    catalog = CatalogItemSerializer(many=True)


class ScenarioSerializer(serializers.Serializer):
    name = serializers.CharField()
    trip = TripDraftSerializer()
    markup = MarkupSerializer(required=False, allow_null=True)
    useTierMarkup = serializers.BooleanField(source='use_tier_markup', required=False, default=False)


class ScenarioCompareRequestSerializer(serializers.Serializer):
    catalog = CatalogItemSerializer(many=True)
    scenarios = ScenarioSerializer(many=True)

    def validate_scenarios(self, value: list):
        if not value:
            raise serializers.ValidationError("At least one scenario is required.")
        names = [scenario['name'] for scenario in value]
        if len(set(names)) != len(names):
            raise serializers.ValidationError("Scenario names must be unique.")
        return value

    @staticmethod
    def to_scenarios(data: list) -> List[Scenario]:
        return [
            Scenario(
                name=scenario['name'],
                trip=TripDraftSerializer.to_trip(scenario['trip']),
                markup=MarkupSerializer.to_markup(scenario['markup']) if scenario.get('markup') else None,
                use_tier_markup=scenario.get('use_tier_markup', False),
            )
            for scenario in data
        ]


class FinalPricingRequestSerializer(serializers.Serializer):
    baseTotal = serializers.DecimalField(source='base_total', max_digits=14, decimal_places=2, min_value=0)
    contingencyPct = serializers.DecimalField(source='contingency_pct', max_digits=7, decimal_places=3, min_value=0, required=False, default=ZERO)
    commissionPct = serializers.DecimalField(source='commission_pct', max_digits=7, decimal_places=3, min_value=0, required=False, default=ZERO)
    profitPct = serializers.DecimalField(source='profit_pct', max_digits=7, decimal_places=3, min_value=0, required=False, default=ZERO)
    travelers = serializers.IntegerField(min_value=0, required=False, default=0)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class BreakdownLineSerializer(serializers.Serializer):
    id = serializers.CharField()
    park = serializers.CharField()
    category = serializers.CharField()
    itemId = serializers.CharField(source='item_id', allow_null=True)
    itemName = serializers.CharField(source='item_name')
    basePrice = MoneyField(source='base_price')
    costType = serializers.CharField(source='cost_type')
    quantity = serializers.IntegerField(allow_null=True)
    calculatedTotal = MoneyField(source='calculated_total')
    perPerson = MoneyField(source='per_person')
    calculationExplanation = serializers.CharField(source='calculation_explanation')


class PricingTotalsSerializer(serializers.Serializer):
    grandTotal = MoneyField(source='grand_total')
    perPerson = MoneyField(source='per_person')


class PricingResultSerializer(serializers.Serializer):
    breakdown = BreakdownLineSerializer(many=True)
    totals = PricingTotalsSerializer()


class CapacityAlternativeSerializer(serializers.Serializer):
    itemId = serializers.CharField(source='item_id')
    capacity = LooseDecimalField()


class CapacityActionSerializer(serializers.Serializer):
    type = serializers.CharField()
    itemId = serializers.CharField(source='item_id')

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if hasattr(instance, 'required_quantity'):
            data['requiredQuantity'] = instance.required_quantity
        if hasattr(instance, 'alternatives'):
            data['alternatives'] = CapacityAlternativeSerializer(instance.alternatives, many=True).data
        return data


class CapacityIssueSerializer(serializers.Serializer):
    itemId = serializers.CharField(source='item_id')
    field = serializers.CharField()
    message = serializers.CharField()
    travelers = serializers.IntegerField()
    capacity = LooseDecimalField()
    quantity = serializers.IntegerField()
    actions = CapacityActionSerializer(many=True)


class CapacityValidationResultSerializer(serializers.Serializer):
    isValid = serializers.BooleanField(source='is_valid')
    issues = CapacityIssueSerializer(many=True)


class MarkupOutputSerializer(serializers.Serializer):
    contingencyPct = serializers.DecimalField(source='contingency_pct', max_digits=7, decimal_places=3)
    commissionPct = serializers.DecimalField(source='commission_pct', max_digits=7, decimal_places=3)
    profitPct = serializers.DecimalField(source='profit_pct', max_digits=7, decimal_places=3)


class FinalPricingSerializer(serializers.Serializer):
    baseTotal = MoneyField(source='base_total')
    contingencyAmount = MoneyField(source='contingency_amount')
    subtotalAfterContingency = MoneyField(source='subtotal_after_contingency')
    commissionAmount = MoneyField(source='commission_amount')
    subtotalAfterCommission = MoneyField(source='subtotal_after_commission')
    profitAmount = MoneyField(source='profit_amount')
    finalTotal = MoneyField(source='final_total')
    finalPerPerson = MoneyField(source='final_per_person')


class CategorySubtotalSerializer(serializers.Serializer):
    category = serializers.CharField()
    subtotal = MoneyField()
    lineCount = serializers.IntegerField(source='line_count')
    percentage = serializers.DecimalField(max_digits=7, decimal_places=2)
    cumulativePercentage = serializers.DecimalField(source='cumulative_percentage', max_digits=7, decimal_places=2)


class ScenarioResultSerializer(serializers.Serializer):
    name = serializers.CharField()
    pricing = PricingResultSerializer()
    finalPricing = FinalPricingSerializer(source='final_pricing')
    markup = MarkupOutputSerializer()
    differenceFromFirst = MoneyField(source='difference_from_first')

