"""Immutable domain models for the Quote Pricing Engine.

All models are frozen dataclasses with slots. Monetary values and rates
are normalized to Decimal on construction so that chained conversions and
summations never accumulate binary floating point error. Closed variants
(cost basis, rounding strategy, ...) are enums; free-form labels coming
from inventory records are parsed with ``from_label`` at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

from .errors import RateTableError

Number = Union[Decimal, int, float, str]

E = TypeVar("E", bound="LabelledEnum")


def to_decimal(value: Number) -> Decimal:
    """Normalize a numeric value to Decimal (floats go through str)."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class LabelledEnum(Enum):
    """Enum whose values are the labels used by inventory records."""

    @classmethod
    def from_label(cls: Type[E], label: Union[str, E]) -> E:
        """Parse a member from its label ("Per Room") or name ("PER_ROOM")."""
        if isinstance(label, cls):
            return label
        text = str(label).strip()
        normalized = text.upper().replace(" ", "_")
        for member in cls:
            if text.lower() == str(member.value).lower() or normalized == member.name:
                return member
        raise ValueError(f"Unknown {cls.__name__} label: {label!r}")


class MarkupKind(LabelledEnum):
    """How markup values of a rule are interpreted."""

    PERCENTAGE = "Percentage"
    FLAT = "Fixed"


class RoundingStrategy(LabelledEnum):
    """Client-facing rounding applied to the final price."""

    NO_ROUNDING = "None"
    NEAREST_UNIT = "Nearest 1"
    NEAREST_TEN = "Nearest 10"
    NEAREST_HUNDRED = "Nearest 100"


class CostCategory(LabelledEnum):
    HOTEL = "Hotel"
    TRANSFER = "Transfer"
    ACTIVITY = "Activity"
    VISA = "Visa"


class CostBasis(LabelledEnum):
    PER_ROOM = "Per Room"
    PER_PERSON = "Per Person"
    PER_VEHICLE = "Per Vehicle"


class HotelGrade(LabelledEnum):
    THREE_STAR = "3 Star"
    FOUR_STAR = "4 Star"
    FIVE_STAR = "5 Star"
    LUXURY = "Luxury"


class MealPlan(LabelledEnum):
    """Board basis: room only, breakfast, half board, full board, all inclusive."""

    RO = "RO"
    BB = "BB"
    HB = "HB"
    FB = "FB"
    AI = "AI"


class SightseeingIntensity(LabelledEnum):
    NONE = "None"
    STANDARD = "Standard"
    PREMIUM = "Premium"


class OccupancyRule(Enum):
    """Occupancy constraints checked against a room allocation."""

    NO_ROOMS = "no_rooms"
    MAX_ADULTS_PER_ROOM = "max_adults_per_room"
    MAX_OCCUPANTS_PER_ROOM = "max_occupants_per_room"


# ---------------------------------------------------------------------------
# Currencies
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CurrencyConfig:
    """One entry of the currency rate sheet.

    Attributes:
        code: ISO-like currency code (e.g. 'AED')
        display_symbol: Symbol shown to clients
        rate_to_base: Units of this currency per one unit of base currency
        is_base: Whether this is the pivot currency
        name: Human-readable name
        is_active: Whether the currency is offered for new quotes
    """

    code: str
    display_symbol: str
    rate_to_base: Decimal
    is_base: bool = False
    name: str = ""
    is_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", self.code.strip().upper())
        object.__setattr__(self, "rate_to_base", to_decimal(self.rate_to_base))


@dataclass(frozen=True, slots=True)
class CurrencyRateTable:
    """Immutable snapshot of the currency rate sheet.

    Exactly one currency is the base. Admin edits never mutate a snapshot;
    ``with_rate`` returns a new one, so a conversion can never observe a
    partially-updated table.
    """

    currencies: Tuple[CurrencyConfig, ...]
    _by_code: Mapping[str, CurrencyConfig] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        currencies = tuple(self.currencies)
        object.__setattr__(self, "currencies", currencies)

        by_code: Dict[str, CurrencyConfig] = {}
        for currency in currencies:
            if currency.code in by_code:
                raise RateTableError(f"Duplicate currency code: {currency.code}")
            by_code[currency.code] = currency
        object.__setattr__(self, "_by_code", MappingProxyType(by_code))

        bases = [c.code for c in currencies if c.is_base]
        if len(bases) != 1:
            raise RateTableError(
                f"Rate table must have exactly one base currency, found {len(bases)}"
                + (f" ({', '.join(bases)})" if bases else "")
            )

    @property
    def base(self) -> CurrencyConfig:
        return next(c for c in self.currencies if c.is_base)

    def get(self, code: str) -> Optional[CurrencyConfig]:
        return self._by_code.get(code.strip().upper())

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.get(code) is not None

    def __len__(self) -> int:
        return len(self.currencies)

    def codes(self) -> Tuple[str, ...]:
        return tuple(self._by_code)

    def active(self) -> Tuple[CurrencyConfig, ...]:
        """Currencies offered for new quotes."""
        return tuple(c for c in self.currencies if c.is_active)

    def symbol(self, code: str) -> str:
        """Display symbol for a code, falling back to the code itself."""
        currency = self.get(code)
        return currency.display_symbol if currency else code

    def with_rate(self, code: str, rate: Number) -> CurrencyRateTable:
        """Return a new snapshot with one rate replaced.

        The base currency rate is fixed and cannot be edited.
        """
        target = self.get(code)
        if target is None:
            raise RateTableError(f"Cannot update unknown currency: {code}")
        if target.is_base:
            raise RateTableError(f"Base currency {target.code} rate cannot be edited")

        updated = tuple(
            CurrencyConfig(
                code=c.code,
                display_symbol=c.display_symbol,
                rate_to_base=to_decimal(rate),
                is_base=c.is_base,
                name=c.name,
                is_active=c.is_active,
            )
            if c.code == target.code
            else c
            for c in self.currencies
        )
        return CurrencyRateTable(updated)


# ---------------------------------------------------------------------------
# Commercial rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MarkupRule:
    """Two-tier markup plus tax and rounding policy.

    Attributes:
        markup_kind: Percentage of the running amount, or flat per pax
        company_markup_value: Operator/company markup (first tier)
        agent_markup_value: Reseller/agent markup (second tier)
        tax_percentage: Tax applied on the subtotal, in [0, 100)
        rounding_strategy: Rounding applied to the final price
        is_active: Disabled rules must not be used for pricing
        name: Rule label
    """

    markup_kind: MarkupKind
    company_markup_value: Decimal
    agent_markup_value: Decimal
    tax_percentage: Decimal
    rounding_strategy: RoundingStrategy
    is_active: bool = True
    name: str = "default"

    def __post_init__(self) -> None:
        object.__setattr__(self, "markup_kind", MarkupKind.from_label(self.markup_kind))
        object.__setattr__(
            self, "rounding_strategy", RoundingStrategy.from_label(self.rounding_strategy)
        )
        for attr in ("company_markup_value", "agent_markup_value", "tax_percentage"):
            object.__setattr__(self, attr, to_decimal(getattr(self, attr)))

        if self.company_markup_value < 0:
            raise ValueError(
                f"Company markup must be non-negative, got {self.company_markup_value}"
            )
        if self.agent_markup_value < 0:
            raise ValueError(
                f"Agent markup must be non-negative, got {self.agent_markup_value}"
            )
        if not 0 <= self.tax_percentage < 100:
            raise ValueError(
                f"Tax percentage must be in [0, 100), got {self.tax_percentage}"
            )


# ---------------------------------------------------------------------------
# Travellers and inventory costs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TravelerCount:
    """Party composition. Infants are excluded from pax math by default."""

    adults: int
    children: int = 0
    infants: int = 0

    def __post_init__(self) -> None:
        if self.adults < 1:
            raise ValueError(f"At least one adult is required, got {self.adults}")
        if self.children < 0:
            raise ValueError(f"Children cannot be negative, got {self.children}")
        if self.infants < 0:
            raise ValueError(f"Infants cannot be negative, got {self.infants}")

    @property
    def total_pax(self) -> int:
        """Paying travellers: adults plus children."""
        return self.adults + self.children

    @property
    def headcount(self) -> int:
        """Everybody, infants included."""
        return self.adults + self.children + self.infants


@dataclass(frozen=True, slots=True)
class CostLineItem:
    """A single inventory cost in its supplier currency.

    Attributes:
        category: Hotel, transfer, activity or visa
        amount: Unit cost (adult unit cost for activities)
        source_currency: Currency the supplier quotes in
        cost_basis: Unit the amount is quoted against
        is_reference_only: Informational entry kept for the itinerary only
        child_amount: Child unit cost for activities (defaults to amount)
        nights: Nights for a hotel item, overriding the stay's nights
        vehicle_capacity: Seats per vehicle for per-vehicle items
        prices_infants: Count infants as paying heads for this item
        description: Free-form label
    """

    category: CostCategory
    amount: Decimal
    source_currency: str
    cost_basis: CostBasis
    is_reference_only: bool = False
    child_amount: Optional[Decimal] = None
    nights: Optional[int] = None
    vehicle_capacity: Optional[int] = None
    prices_infants: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", CostCategory.from_label(self.category))
        object.__setattr__(self, "cost_basis", CostBasis.from_label(self.cost_basis))
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "source_currency", self.source_currency.strip().upper())
        if self.child_amount is not None:
            object.__setattr__(self, "child_amount", to_decimal(self.child_amount))

        if self.amount < 0:
            raise ValueError(f"Line item amount cannot be negative, got {self.amount}")
        if self.child_amount is not None and self.child_amount < 0:
            raise ValueError(
                f"Child amount cannot be negative, got {self.child_amount}"
            )
        if self.nights is not None and self.nights < 0:
            raise ValueError(f"Nights cannot be negative, got {self.nights}")

    @property
    def child_unit_cost(self) -> Decimal:
        return self.amount if self.child_amount is None else self.child_amount

    @property
    def label(self) -> str:
        return self.description or f"{self.category.value} ({self.cost_basis.value})"


@dataclass(frozen=True, slots=True)
class Stay:
    """One city of an itinerary with its own room and night context."""

    city: str
    rooms: int
    nights: int
    line_items: Tuple[CostLineItem, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "line_items", tuple(self.line_items))
        if self.rooms < 0:
            raise ValueError(f"Rooms cannot be negative, got {self.rooms}")
        if self.nights < 0:
            raise ValueError(f"Nights cannot be negative, got {self.nights}")


# ---------------------------------------------------------------------------
# Aggregation and allocation results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LineCost:
    """How one line item contributed to a stay's net cost.

    Attributes:
        item: The priced line item
        units: Multiplier applied (rooms x nights, pax or vehicles)
        unit_label: What ``units`` counts
        source_amount: Cost in the item's own currency
        converted_amount: Cost in the target currency (unquantized)
    """

    item: CostLineItem
    units: int
    unit_label: str
    source_amount: Decimal
    converted_amount: Decimal


@dataclass(frozen=True, slots=True)
class StayCost:
    city: str
    rooms: int
    nights: int
    currency: str
    net_cost: Decimal
    lines: Tuple[LineCost, ...] = field(default_factory=tuple)
    skipped: Tuple[CostLineItem, ...] = field(default_factory=tuple)
    warnings: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Net cost of a whole itinerary, itemized per stay."""

    currency: str
    net_cost: Decimal
    stays: Tuple[StayCost, ...] = field(default_factory=tuple)

    @property
    def warnings(self) -> Tuple[str, ...]:
        return tuple(w for stay in self.stays for w in stay.warnings)


@dataclass(frozen=True, slots=True)
class OccupancyViolation:
    """A broken occupancy constraint. Reported, never raised."""

    rule: OccupancyRule
    message: str
    limit: int
    actual: Decimal


@dataclass(frozen=True, slots=True)
class OccupancyReport:
    adults: int
    children: int
    rooms: int
    violations: Tuple[OccupancyViolation, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.violations


# ---------------------------------------------------------------------------
# Pricing outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PricingBreakdown:
    """Every stage of the markup/tax chain, for itemized display.

    Invariant: final_price >= subtotal >= net_cost for non-negative rules.
    """

    net_cost: Decimal
    company_markup_value: Decimal
    buying_price: Decimal
    agent_markup_value: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    raw_final_price: Decimal
    final_price: Decimal
    per_person_price: Decimal
    total_pax: int
    rounding_strategy: RoundingStrategy
    currency: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "net_cost": str(self.net_cost),
            "company_markup_value": str(self.company_markup_value),
            "buying_price": str(self.buying_price),
            "agent_markup_value": str(self.agent_markup_value),
            "subtotal": str(self.subtotal),
            "tax_amount": str(self.tax_amount),
            "raw_final_price": str(self.raw_final_price),
            "final_price": str(self.final_price),
            "per_person_price": str(self.per_person_price),
            "total_pax": self.total_pax,
            "rounding_strategy": self.rounding_strategy.value,
            "currency": self.currency,
        }


@dataclass(frozen=True, slots=True)
class QuickEstimateInputs:
    """Categorical trip shape used before an itemized itinerary exists."""

    hotel_grade: HotelGrade = HotelGrade.FOUR_STAR
    meal_plan: MealPlan = MealPlan.BB
    sightseeing_intensity: SightseeingIntensity = SightseeingIntensity.STANDARD
    transfers_included: bool = True
    room_count: int = 1
    nights: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "hotel_grade", HotelGrade.from_label(self.hotel_grade))
        object.__setattr__(self, "meal_plan", MealPlan.from_label(self.meal_plan))
        object.__setattr__(
            self,
            "sightseeing_intensity",
            SightseeingIntensity.from_label(self.sightseeing_intensity),
        )
        if self.room_count < 0:
            raise ValueError(f"Room count cannot be negative, got {self.room_count}")


@dataclass(frozen=True, slots=True)
class QuickEstimate:
    total: Decimal
    per_person: Decimal
    hotel: Decimal
    transfers: Decimal
    sightseeing: Decimal
    nights: int
    currency: str
    destination: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": str(self.total),
            "per_person": str(self.per_person),
            "breakdown": {
                "hotel": str(self.hotel),
                "transfers": str(self.transfers),
                "sightseeing": str(self.sightseeing),
                "nights": self.nights,
            },
            "currency": self.currency,
            "destination": self.destination,
        }
