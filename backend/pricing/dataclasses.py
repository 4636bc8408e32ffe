from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

from .services.utils import ZERO


ACTIVITIES = "Activities"
LODGING = "Lodging"
EXTRAS = "Extras"
VEHICLE = "Vehicle"
AVIATION = "Aviation"
LOGISTICS = "Logistics"
PARK_FEES = "Park Fees"

CATEGORIES = (
    "Parks",
    LODGING,
    ACTIVITIES,
    VEHICLE,
    AVIATION,
    PARK_FEES,
    "Permits",
    EXTRAS,
    LOGISTICS,
)

APPLIES_GLOBAL = "Global"
APPLIES_PARK = "Park"


class CostType(str, Enum):
    FIXED_GROUP = "fixed_group"
    FIXED_PER_DAY = "fixed_per_day"
    PER_PERSON = "per_person"
    PER_PERSON_PER_DAY = "per_person_per_day"
    PER_NIGHT = "per_night"
    PER_NIGHT_PER_PERSON = "per_night_per_person"
    PER_GUIDE = "per_guide"
    HIERARCHICAL_LODGING = "hierarchical_lodging"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> Optional["CostType"]:
        try:
            return cls((tag or "").strip())
        except ValueError:
            return None


class PriceBasis(str, Enum):
    PER_PERSON = "perPerson"
    PER_ROOM = "perRoom"
    PER_VILLA = "perVilla"


@dataclass(frozen=True)
class OccupancyPrice:
    basis: PriceBasis
    amount: Decimal


@dataclass
class LodgingRoom:
    id: str
    name: str
    max_occupancy: Optional[int] = None
    # season key -> occupancy key -> price
    pricing: Dict[str, Dict[str, OccupancyPrice]] = field(default_factory=dict)


@dataclass
class LodgingMetadata:
    rooms: List[LodgingRoom] = field(default_factory=list)
    seasons: Dict[str, str] = field(default_factory=dict)


@dataclass
class CatalogItem:
    id: str
    name: str
    category: str
    cost_type: Optional[CostType]
    base_price: Decimal = ZERO
    applies_to: str = APPLIES_GLOBAL
    park_id: Optional[str] = None
    # raw tag as supplied; kept for display when it is not a known CostType
    cost_type_tag: str = ""
    capacity: Optional[Union[Decimal, int, str]] = None
    quantity: Optional[int] = None
    active: bool = True
    metadata: Optional[LodgingMetadata] = None
    notes: Optional[str] = None

    def __post_init__(self):
        if not self.cost_type_tag and self.cost_type is not None:
            self.cost_type_tag = self.cost_type.value

    @property
    def is_activity(self) -> bool:
        return self.category == ACTIVITIES

    @property
    def cost_type_label(self) -> str:
        if self.cost_type is not None:
            return self.cost_type.value
        return self.cost_type_tag or "unknown"


@dataclass
class LodgingConfiguration:
    room_type: str
    season: str
    occupancy: str
    price: Decimal
    price_basis: PriceBasis
    room_type_name: Optional[str] = None
    season_name: Optional[str] = None


@dataclass
class ParkFeeSelection:
    item_id: str
    excluded: bool = False
    source: str = "auto"


@dataclass
class LogisticsSelection:
    vehicle: Optional[str] = None
    internal_movements: List[str] = field(default_factory=list)


@dataclass
class FreeHandLine:
    id: str
    description: str = ""
    amount: Decimal = ZERO


@dataclass
class TripDay:
    day_number: int
    park_id: Optional[str] = None
    park_fees: List[ParkFeeSelection] = field(default_factory=list)
    arrival: Optional[str] = None
    lodging: Optional[str] = None
    lodging_config: Optional[LodgingConfiguration] = None
    activities: List[str] = field(default_factory=list)
    extras: List[str] = field(default_factory=list)
    logistics: Optional[LogisticsSelection] = None
    free_hand_lines: List[FreeHandLine] = field(default_factory=list)


@dataclass
class TripDraft:
    travelers: int
    days: int
    name: str = ""
    tier: str = "base"  # metadata only, never priced
    trip_days: List[TripDay] = field(default_factory=list)
    item_quantities: Dict[str, int] = field(default_factory=dict)


@dataclass
class ResolvedCost:
    total: Decimal
    explanation: str
    quantity: int = 1


@dataclass
class BreakdownLine:
    id: str
    park: str
    category: str
    item_name: str
    base_price: Decimal
    cost_type: str
    calculated_total: Decimal
    per_person: Decimal
    calculation_explanation: str
    item_id: Optional[str] = None
    quantity: Optional[int] = None


@dataclass
class PricingTotals:
    grand_total: Decimal = ZERO
    per_person: Decimal = ZERO


@dataclass
class PricingResult:
    breakdown: List[BreakdownLine] = field(default_factory=list)
    totals: PricingTotals = field(default_factory=PricingTotals)


@dataclass
class CapacityAlternative:
    item_id: str
    capacity: Decimal


@dataclass
class IncreaseQuantityAction:
    item_id: str
    required_quantity: int
    type: str = "increase_quantity"


@dataclass
class ReplaceItemAction:
    item_id: str
    alternatives: List[CapacityAlternative] = field(default_factory=list)
    type: str = "replace_item"


CapacityAction = Union[IncreaseQuantityAction, ReplaceItemAction]


@dataclass
class CapacityIssue:
    item_id: str
    travelers: int
    capacity: Decimal
    quantity: int
    actions: List[CapacityAction] = field(default_factory=list)
    field: str = "capacity"
    message: str = "The selected item capacity is insufficient for the number of travelers."


@dataclass
class CapacityValidationResult:
    is_valid: bool = True
    issues: List[CapacityIssue] = field(default_factory=list)


@dataclass
class MarkupPercentages:
    contingency_pct: Decimal = ZERO
    commission_pct: Decimal = ZERO
    profit_pct: Decimal = ZERO


@dataclass
class FinalPricing:
    base_total: Decimal
    contingency_amount: Decimal
    subtotal_after_contingency: Decimal
    commission_amount: Decimal
    subtotal_after_commission: Decimal
    profit_amount: Decimal
    final_total: Decimal
    final_per_person: Decimal


@dataclass
class Scenario:
    name: str
    trip: TripDraft
    markup: Optional[MarkupPercentages] = None
    # without explicit markup: tier defaults when set, otherwise no markup
    use_tier_markup: bool = False


@dataclass
class ScenarioResult:
    name: str
    pricing: PricingResult
    final_pricing: FinalPricing
    markup: MarkupPercentages
    difference_from_first: Decimal = ZERO


@dataclass
class CategorySubtotal:
    category: str
    subtotal: Decimal
    line_count: int
    percentage: Decimal = ZERO
    cumulative_percentage: Decimal = ZERO
