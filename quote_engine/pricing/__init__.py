"""Pricing core - pure, re-entrant functions.

- rounding: client-facing rounding strategies
- currency: conversion through the base currency of a rate snapshot
- allocation: room/vehicle counts and occupancy checks
- aggregation: net cost across cost bases, currencies and stays
- markup: company/agent markup, tax and rounding chain
- quick_estimate: categorical lead-stage estimator
"""

from .aggregation import aggregate, aggregate_itinerary, aggregate_stay, line_item_cost
from .allocation import check_occupancy, required_rooms, required_vehicles
from .currency import convert, rate_of
from .markup import ensure_active, price
from .quick_estimate import destination_defaults, estimate, suggest_inputs
from .rounding import apply_psychological_pricing, apply_rounding, quantize_money

__all__ = [
    "aggregate",
    "aggregate_itinerary",
    "aggregate_stay",
    "line_item_cost",
    "check_occupancy",
    "required_rooms",
    "required_vehicles",
    "convert",
    "rate_of",
    "ensure_active",
    "price",
    "destination_defaults",
    "estimate",
    "suggest_inputs",
    "apply_psychological_pricing",
    "apply_rounding",
    "quantize_money",
]
