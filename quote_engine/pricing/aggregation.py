"""Net cost aggregation across cost bases and currencies.

Each line item is priced in its own supplier currency, converted to the
target currency, and only then summed. Items are never summed in mixed
currencies. Multi-city itineraries are aggregated stay by stay, each
with its own rooms and nights.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, List, Sequence, Tuple

from ..domain.errors import LineItemError
from ..domain.models import (
    AggregationResult,
    CostBasis,
    CostCategory,
    CostLineItem,
    CurrencyRateTable,
    LineCost,
    Stay,
    StayCost,
    TravelerCount,
)
from .allocation import required_vehicles
from .currency import convert, rate_of
from .rounding import quantize_money

logger = logging.getLogger(__name__)

DEFAULT_VEHICLE_CAPACITY = 4


def _paying_heads(item: CostLineItem, travelers: TravelerCount) -> int:
    heads = travelers.total_pax
    if item.prices_infants:
        heads += travelers.infants
    return heads


def _source_cost(
    item: CostLineItem,
    travelers: TravelerCount,
    rooms: int,
    nights: int,
    default_vehicle_capacity: int,
) -> Tuple[Decimal, int, str]:
    """Cost of one item in its own currency, with the units it was applied to."""
    category, basis = item.category, item.cost_basis
    heads = _paying_heads(item, travelers)

    if category is CostCategory.HOTEL:
        item_nights = nights if item.nights is None else item.nights
        if basis is CostBasis.PER_ROOM:
            units = rooms * item_nights
            return item.amount * units, units, "room-nights"
        if basis is CostBasis.PER_PERSON:
            units = heads * item_nights
            return item.amount * units, units, "pax-nights"

    elif category in (CostCategory.TRANSFER, CostCategory.ACTIVITY):
        if basis is CostBasis.PER_VEHICLE:
            capacity = (
                default_vehicle_capacity
                if item.vehicle_capacity is None
                else item.vehicle_capacity
            )
            vehicles = required_vehicles(heads, capacity)
            return item.amount * vehicles, vehicles, "vehicles"
        if basis is CostBasis.PER_PERSON:
            if category is CostCategory.ACTIVITY:
                children = heads - travelers.adults
                cost = (
                    item.amount * travelers.adults + item.child_unit_cost * children
                )
                return cost, heads, "pax"
            return item.amount * heads, heads, "pax"

    elif category is CostCategory.VISA:
        return item.amount * heads, heads, "pax"

    raise LineItemError(
        f"{category.value} items cannot be priced {basis.value.lower()}",
        category=category.value,
        cost_basis=basis.value,
    )


def line_item_cost(
    item: CostLineItem,
    travelers: TravelerCount,
    rooms: int,
    target_currency: str,
    rate_table: CurrencyRateTable,
    *,
    nights: int = 1,
    default_vehicle_capacity: int = DEFAULT_VEHICLE_CAPACITY,
) -> LineCost:
    """Price a single line item and convert it to the target currency.

    Raises:
        LineItemError: If the category/cost basis pairing is unsupported.
        InvalidCapacityError: If a per-vehicle item has no usable capacity.
        UnknownCurrencyError: If a currency is missing from the table.
        InvalidRateError: If a looked-up rate is not positive.
    """
    source_amount, units, unit_label = _source_cost(
        item, travelers, rooms, nights, default_vehicle_capacity
    )
    converted = convert(
        source_amount, item.source_currency, target_currency, rate_table
    )
    return LineCost(
        item=item,
        units=units,
        unit_label=unit_label,
        source_amount=source_amount,
        converted_amount=converted,
    )


def aggregate_stay(
    stay: Stay,
    travelers: TravelerCount,
    target_currency: str,
    rate_table: CurrencyRateTable,
    *,
    visa_enabled: bool = True,
    default_vehicle_capacity: int = DEFAULT_VEHICLE_CAPACITY,
) -> StayCost:
    """Aggregate the line items of one stay into an itemized net cost.

    Reference-only items are excluded from the sum but kept in ``skipped``;
    those carrying a non-zero amount also produce a warning, since they are
    usually mis-tagged priced items. Visa items are skipped when the quote
    has visas disabled.
    """
    # Fail on an unknown target even when every item is skipped.
    rate_of(target_currency, rate_table)

    lines: List[LineCost] = []
    skipped: List[CostLineItem] = []
    warnings: List[str] = []

    for item in stay.line_items:
        if item.is_reference_only:
            skipped.append(item)
            if item.amount > 0 or (item.child_amount or 0) > 0:
                message = (
                    f"Reference-only item '{item.label}' in {stay.city or 'stay'} "
                    f"carries a cost of {item.amount} {item.source_currency} "
                    "and was excluded from the net cost"
                )
                warnings.append(message)
                logger.warning(
                    "Priced reference-only item excluded",
                    extra={
                        "city": stay.city,
                        "item": item.label,
                        "amount": str(item.amount),
                        "currency": item.source_currency,
                    },
                )
            continue

        if item.category is CostCategory.VISA and not visa_enabled:
            skipped.append(item)
            logger.debug("Visa disabled, item skipped", extra={"item": item.label})
            continue

        lines.append(
            line_item_cost(
                item,
                travelers,
                stay.rooms,
                target_currency,
                rate_table,
                nights=stay.nights,
                default_vehicle_capacity=default_vehicle_capacity,
            )
        )

    net_cost = quantize_money(sum((line.converted_amount for line in lines), Decimal(0)))
    logger.debug(
        "Stay aggregated",
        extra={
            "city": stay.city,
            "lines": len(lines),
            "skipped": len(skipped),
            "net_cost": str(net_cost),
            "currency": target_currency,
        },
    )

    return StayCost(
        city=stay.city,
        rooms=stay.rooms,
        nights=stay.nights,
        currency=target_currency,
        net_cost=net_cost,
        lines=tuple(lines),
        skipped=tuple(skipped),
        warnings=tuple(warnings),
    )


def aggregate(
    line_items: Iterable[CostLineItem],
    travelers: TravelerCount,
    rooms: int,
    target_currency: str,
    rate_table: CurrencyRateTable,
    *,
    nights: int = 1,
    visa_enabled: bool = True,
    default_vehicle_capacity: int = DEFAULT_VEHICLE_CAPACITY,
) -> Decimal:
    """Net cost of a single stay in the target currency, 2 decimals."""
    stay = Stay(city="", rooms=rooms, nights=nights, line_items=tuple(line_items))
    return aggregate_stay(
        stay,
        travelers,
        target_currency,
        rate_table,
        visa_enabled=visa_enabled,
        default_vehicle_capacity=default_vehicle_capacity,
    ).net_cost


def aggregate_itinerary(
    stays: Sequence[Stay],
    travelers: TravelerCount,
    target_currency: str,
    rate_table: CurrencyRateTable,
    *,
    visa_enabled: bool = True,
    default_vehicle_capacity: int = DEFAULT_VEHICLE_CAPACITY,
) -> AggregationResult:
    """Aggregate every stay independently and sum them in the target currency."""
    stay_costs = tuple(
        aggregate_stay(
            stay,
            travelers,
            target_currency,
            rate_table,
            visa_enabled=visa_enabled,
            default_vehicle_capacity=default_vehicle_capacity,
        )
        for stay in stays
    )
    if not stay_costs:
        rate_of(target_currency, rate_table)

    net_cost = quantize_money(sum((s.net_cost for s in stay_costs), Decimal(0)))
    logger.info(
        "Itinerary aggregated",
        extra={
            "stays": len(stay_costs),
            "net_cost": str(net_cost),
            "currency": target_currency,
        },
    )
    return AggregationResult(
        currency=target_currency, net_cost=net_cost, stays=stay_costs
    )
