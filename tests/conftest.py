"""Shared fixtures for the pricing engine tests."""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from quote_engine.adapters.rates import DEFAULT_CURRENCIES
from quote_engine.config import reset_config
from quote_engine.domain.models import (
    CurrencyRateTable,
    MarkupKind,
    MarkupRule,
    RoundingStrategy,
    TravelerCount,
)


@pytest.fixture
def rate_table():
    """USD-based sheet: INR 83.5, AED 3.67, THB 36.5, EUR 0.92, GBP 0.79, SGD 1.35."""
    return CurrencyRateTable(DEFAULT_CURRENCIES)


@pytest.fixture
def standard_rule():
    """10% company, 10% agent, 5% tax, rounded up to the next ten."""
    return MarkupRule(
        markup_kind=MarkupKind.PERCENTAGE,
        company_markup_value=10,
        agent_markup_value=10,
        tax_percentage=5,
        rounding_strategy=RoundingStrategy.NEAREST_TEN,
        name="Standard",
    )


@pytest.fixture
def couple():
    return TravelerCount(adults=2)


@pytest.fixture
def fresh_config():
    """Drop the cached configuration before and after the test."""
    reset_config()
    yield
    reset_config()
