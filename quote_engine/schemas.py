"""Request contract for collaborators (quote builder, itinerary builder).

Payloads arrive with string-typed labels ("Per Room", "Nearest 10", ...).
They are validated here and turned into closed enums, so an invalid
strategy or cost basis string never reaches the pricing core.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .domain.models import (
    CostBasis,
    CostCategory,
    CostLineItem,
    HotelGrade,
    MarkupKind,
    MarkupRule,
    MealPlan,
    QuickEstimateInputs,
    RoundingStrategy,
    SightseeingIntensity,
    Stay,
    TravelerCount,
)
from .pricing.allocation import required_rooms
from .services.quote_pricing import QuotePricingRequest


class TravelersPayload(BaseModel):
    adults: int = Field(ge=1)
    children: int = Field(default=0, ge=0)
    infants: int = Field(default=0, ge=0)

    def to_domain(self) -> TravelerCount:
        return TravelerCount(self.adults, self.children, self.infants)


class LineItemPayload(BaseModel):
    category: CostCategory
    cost: Decimal = Field(ge=0)
    currency: str
    cost_basis: CostBasis = CostBasis.PER_PERSON
    reference_only: bool = False
    child_cost: Optional[Decimal] = Field(default=None, ge=0)
    nights: Optional[int] = Field(default=None, ge=0)
    vehicle_capacity: Optional[int] = None
    prices_infants: bool = False
    description: str = ""

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, value: Any) -> CostCategory:
        return CostCategory.from_label(value)

    @field_validator("cost_basis", mode="before")
    @classmethod
    def _parse_cost_basis(cls, value: Any) -> CostBasis:
        return CostBasis.from_label(value)

    def to_domain(self) -> CostLineItem:
        return CostLineItem(
            category=self.category,
            amount=self.cost,
            source_currency=self.currency,
            cost_basis=self.cost_basis,
            is_reference_only=self.reference_only,
            child_amount=self.child_cost,
            nights=self.nights,
            vehicle_capacity=self.vehicle_capacity,
            prices_infants=self.prices_infants,
            description=self.description,
        )


class StayPayload(BaseModel):
    city: str = ""
    rooms: Optional[int] = Field(default=None, ge=0)  # derived from party when omitted
    nights: int = Field(default=1, ge=0)
    line_items: List[LineItemPayload] = Field(default_factory=list)

    def to_domain(self, travelers: TravelerCount) -> Stay:
        rooms = (
            self.rooms
            if self.rooms is not None
            else required_rooms(travelers.adults, travelers.children)
        )
        return Stay(
            city=self.city,
            rooms=rooms,
            nights=self.nights,
            line_items=tuple(item.to_domain() for item in self.line_items),
        )


class MarkupRulePayload(BaseModel):
    name: str = "custom"
    markup_kind: MarkupKind = MarkupKind.PERCENTAGE
    company_markup: Decimal = Field(ge=0)
    agent_markup: Decimal = Field(ge=0)
    tax_percentage: Decimal = Field(ge=0, lt=100)
    rounding: RoundingStrategy = RoundingStrategy.NEAREST_TEN
    is_active: bool = True

    @field_validator("markup_kind", mode="before")
    @classmethod
    def _parse_kind(cls, value: Any) -> MarkupKind:
        return MarkupKind.from_label(value)

    @field_validator("rounding", mode="before")
    @classmethod
    def _parse_rounding(cls, value: Any) -> RoundingStrategy:
        return RoundingStrategy.from_label(value)

    def to_domain(self) -> MarkupRule:
        return MarkupRule(
            markup_kind=self.markup_kind,
            company_markup_value=self.company_markup,
            agent_markup_value=self.agent_markup,
            tax_percentage=self.tax_percentage,
            rounding_strategy=self.rounding,
            is_active=self.is_active,
            name=self.name,
        )


class PricingRequestPayload(BaseModel):
    travelers: TravelersPayload
    target_currency: str = ""
    stays: List[StayPayload] = Field(min_length=1)
    markup_rule: Optional[MarkupRulePayload] = None
    flat_agent_override: Optional[Decimal] = Field(default=None, ge=0)
    visa_enabled: Optional[bool] = None

    def to_domain(self) -> QuotePricingRequest:
        travelers = self.travelers.to_domain()
        return QuotePricingRequest(
            stays=tuple(stay.to_domain(travelers) for stay in self.stays),
            travelers=travelers,
            target_currency=self.target_currency.strip().upper(),
            markup_rule=self.markup_rule.to_domain() if self.markup_rule else None,
            flat_agent_override=self.flat_agent_override,
            visa_enabled=self.visa_enabled,
        )


class QuickEstimatePayload(BaseModel):
    destination: str = ""
    nights: int = Field(ge=0)
    travelers: TravelersPayload
    hotel_grade: HotelGrade = HotelGrade.FOUR_STAR
    meal_plan: MealPlan = MealPlan.BB
    sightseeing_intensity: SightseeingIntensity = SightseeingIntensity.STANDARD
    transfers_included: bool = True
    rooms: Optional[int] = Field(default=None, ge=0)

    @field_validator("hotel_grade", mode="before")
    @classmethod
    def _parse_grade(cls, value: Any) -> HotelGrade:
        return HotelGrade.from_label(value)

    @field_validator("meal_plan", mode="before")
    @classmethod
    def _parse_meal_plan(cls, value: Any) -> MealPlan:
        return MealPlan.from_label(value)

    @field_validator("sightseeing_intensity", mode="before")
    @classmethod
    def _parse_intensity(cls, value: Any) -> SightseeingIntensity:
        return SightseeingIntensity.from_label(value)

    def to_inputs(self) -> QuickEstimateInputs:
        travelers = self.travelers.to_domain()
        rooms = (
            self.rooms
            if self.rooms is not None
            else required_rooms(travelers.adults, travelers.children)
        )
        return QuickEstimateInputs(
            hotel_grade=self.hotel_grade,
            meal_plan=self.meal_plan,
            sightseeing_intensity=self.sightseeing_intensity,
            transfers_included=self.transfers_included,
            room_count=rooms,
            nights=self.nights,
        )
