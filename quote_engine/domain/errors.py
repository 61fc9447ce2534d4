"""Typed domain errors for the Quote Pricing Engine.

All errors inherit from PricingEngineError and can optionally wrap a
root cause exception for debugging. Currency and rate errors carry
messages aimed at the person maintaining the rate sheet, since they are
almost always caused by incomplete configuration rather than user input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class PricingEngineError(Exception):
    """Base error for the pricing domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class UnknownCurrencyError(PricingEngineError):
    """Currency code absent from the rate table.

    Attributes:
        currency_code: The code that could not be found
    """

    currency_code: str = ""


@dataclass
class InvalidRateError(PricingEngineError):
    """A non-positive exchange rate was looked up.

    Attributes:
        currency_code: Currency whose rate is invalid
        rate: The offending rate
    """

    currency_code: str = ""
    rate: Optional[Decimal] = None


@dataclass
class RateTableError(PricingEngineError):
    """Rate table snapshot is malformed (e.g. no single base currency)."""


@dataclass
class InvalidCapacityError(PricingEngineError):
    """Vehicle capacity is zero or negative.

    Attributes:
        capacity: The capacity that was supplied
    """

    capacity: int = 0


@dataclass
class LineItemError(PricingEngineError):
    """Cost line item uses a category/cost basis pairing that cannot be priced.

    Attributes:
        category: Category name of the item
        cost_basis: Cost basis name of the item
    """

    category: str = ""
    cost_basis: str = ""


@dataclass
class InactiveRuleError(PricingEngineError):
    """Pricing was requested with a disabled markup rule.

    Attributes:
        rule_name: Name of the inactive rule
    """

    rule_name: str = ""


@dataclass
class ConfigurationError(PricingEngineError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None
