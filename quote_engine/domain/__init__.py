"""Domain layer - Core pricing models and errors.

This module contains immutable value objects and typed errors used
throughout the engine. No external dependencies.
"""

from .errors import (
    ConfigurationError,
    InactiveRuleError,
    InvalidCapacityError,
    InvalidRateError,
    LineItemError,
    PricingEngineError,
    RateTableError,
    UnknownCurrencyError,
)
from .models import (
    AggregationResult,
    CostBasis,
    CostCategory,
    CostLineItem,
    CurrencyConfig,
    CurrencyRateTable,
    HotelGrade,
    LineCost,
    MarkupKind,
    MarkupRule,
    MealPlan,
    OccupancyReport,
    OccupancyRule,
    OccupancyViolation,
    PricingBreakdown,
    QuickEstimate,
    QuickEstimateInputs,
    RoundingStrategy,
    SightseeingIntensity,
    Stay,
    StayCost,
    TravelerCount,
    to_decimal,
)

__all__ = [
    # Models
    "AggregationResult",
    "CostBasis",
    "CostCategory",
    "CostLineItem",
    "CurrencyConfig",
    "CurrencyRateTable",
    "HotelGrade",
    "LineCost",
    "MarkupKind",
    "MarkupRule",
    "MealPlan",
    "OccupancyReport",
    "OccupancyRule",
    "OccupancyViolation",
    "PricingBreakdown",
    "QuickEstimate",
    "QuickEstimateInputs",
    "RoundingStrategy",
    "SightseeingIntensity",
    "Stay",
    "StayCost",
    "TravelerCount",
    "to_decimal",
    # Errors
    "PricingEngineError",
    "UnknownCurrencyError",
    "InvalidRateError",
    "RateTableError",
    "InvalidCapacityError",
    "LineItemError",
    "InactiveRuleError",
    "ConfigurationError",
]
