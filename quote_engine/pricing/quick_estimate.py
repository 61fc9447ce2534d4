"""Instant lead-stage price from categorical trip inputs.

A coarse estimator used before an itemized itinerary exists. It applies
a flat uncertainty buffer instead of the markup/tax chain and does not
go through the rounding policy; it is not expected to agree with a
detailed quote for the same trip.
"""

from __future__ import annotations

import logging
from decimal import ROUND_CEILING, Decimal
from typing import Mapping, Optional

from ..config import QuickEstimateConfig
from ..domain.errors import ConfigurationError
from ..domain.models import (
    HotelGrade,
    LabelledEnum,
    MealPlan,
    QuickEstimate,
    QuickEstimateInputs,
    SightseeingIntensity,
    TravelerCount,
)
from .allocation import required_rooms

logger = logging.getLogger(__name__)

# Destination keyword -> typical trip shape
_DESTINATION_DEFAULTS = {
    "dubai": QuickEstimateInputs(
        hotel_grade=HotelGrade.FOUR_STAR,
        meal_plan=MealPlan.BB,
        sightseeing_intensity=SightseeingIntensity.STANDARD,
        transfers_included=True,
    ),
    # Resort based: seaplane/speedboat transfers always needed, no touring
    "maldives": QuickEstimateInputs(
        hotel_grade=HotelGrade.FIVE_STAR,
        meal_plan=MealPlan.AI,
        sightseeing_intensity=SightseeingIntensity.NONE,
        transfers_included=True,
    ),
}

_GENERAL_DEFAULTS = QuickEstimateInputs(
    hotel_grade=HotelGrade.FOUR_STAR,
    meal_plan=MealPlan.BB,
    sightseeing_intensity=SightseeingIntensity.STANDARD,
    transfers_included=True,
)


def _ceil(value: Decimal) -> Decimal:
    return value.to_integral_value(rounding=ROUND_CEILING)


def _lookup(sheet: Mapping[str, Decimal], key: LabelledEnum, setting: str) -> Decimal:
    try:
        return Decimal(sheet[key.value])
    except KeyError as e:
        raise ConfigurationError(
            f"Quick estimate rate sheet has no entry for '{key.value}'",
            setting_name=setting,
            cause=e,
        )


def destination_defaults(destination_hint: str) -> QuickEstimateInputs:
    """Typical categorical inputs for a destination, by keyword."""
    hint = destination_hint.lower()
    for keyword, defaults in _DESTINATION_DEFAULTS.items():
        if keyword in hint:
            return defaults
    return _GENERAL_DEFAULTS


def suggest_inputs(destination_hint: str, travelers: TravelerCount) -> QuickEstimateInputs:
    """Destination defaults with a room count derived from the party."""
    defaults = destination_defaults(destination_hint)
    return QuickEstimateInputs(
        hotel_grade=defaults.hotel_grade,
        meal_plan=defaults.meal_plan,
        sightseeing_intensity=defaults.sightseeing_intensity,
        transfers_included=defaults.transfers_included,
        room_count=required_rooms(travelers.adults, travelers.children),
    )


def estimate(
    destination_hint: str,
    nights: int,
    travelers: TravelerCount,
    inputs: QuickEstimateInputs,
    *,
    rates: Optional[QuickEstimateConfig] = None,
) -> QuickEstimate:
    """Estimate a trip total and per-person price.

    - hotel: base rate(grade) x meal multiplier x rooms x nights
    - transfers: flat round-trip rate per pax, when included
    - sightseeing: package rate x max(1, nights / 3) x pax
    - total: ceil(raw x buffer); per person: ceil(total / pax)

    Args:
        destination_hint: Free-text destination, used for labelling only.
        nights: Trip length; takes precedence over ``inputs.nights``.
        travelers: Party composition (infants are not priced).
        inputs: Categorical trip shape.
        rates: Rate sheet; defaults to a fresh QuickEstimateConfig.

    Raises:
        ConfigurationError: If the rate sheet lacks a category.
    """
    rates = rates or QuickEstimateConfig()
    if nights < 0:
        raise ValueError(f"Nights cannot be negative, got {nights}")
    pax = travelers.total_pax

    base_rate = _lookup(rates.base_rates, inputs.hotel_grade, "base_rates")
    meal_multiplier = _lookup(rates.meal_multipliers, inputs.meal_plan, "meal_multipliers")
    hotel = base_rate * meal_multiplier * inputs.room_count * nights

    transfers = (
        rates.transfer_cost_per_pax * pax if inputs.transfers_included else Decimal(0)
    )

    # max(1, nights / N) scaled without an intermediate repeating decimal
    package_rate = _lookup(
        rates.sightseeing_packages, inputs.sightseeing_intensity, "sightseeing_packages"
    )
    package_nights = rates.nights_per_package
    sightseeing = package_rate * pax * max(package_nights, nights) / package_nights

    raw_total = hotel + transfers + sightseeing
    total = _ceil(raw_total * rates.buffer)
    per_person = _ceil(total / pax) if pax > 0 else Decimal(0)

    logger.info(
        "Quick estimate computed",
        extra={
            "destination": destination_hint,
            "nights": nights,
            "pax": pax,
            "total": str(total),
        },
    )
    return QuickEstimate(
        total=total,
        per_person=per_person,
        hotel=hotel,
        transfers=transfers,
        sightseeing=sightseeing,
        nights=nights,
        currency=rates.currency,
        destination=destination_hint,
    )
