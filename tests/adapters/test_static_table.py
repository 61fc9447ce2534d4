from decimal import Decimal

import pytest

from quote_engine.adapters.rates import StaticRateTableProvider
from quote_engine.domain.errors import RateTableError
from quote_engine.domain.models import CurrencyConfig


def test_default_sheet():
    table = StaticRateTableProvider().snapshot()
    assert table.base.code == "USD"
    assert table.get("INR").rate_to_base == Decimal("83.5")


def test_custom_sheet():
    provider = StaticRateTableProvider(
        [CurrencyConfig("INR", "₹", "1", is_base=True), CurrencyConfig("USD", "$", "0.012")]
    )
    assert provider.snapshot().base.code == "INR"


def test_update_rate_publishes_new_snapshot():
    provider = StaticRateTableProvider()
    before = provider.snapshot()

    returned = provider.update_rate("INR", "84.1")

    assert provider.snapshot() is returned
    assert returned.get("INR").rate_to_base == Decimal("84.1")
    assert before.get("INR").rate_to_base == Decimal("83.5")


def test_update_rejects_base_currency():
    provider = StaticRateTableProvider()
    before = provider.snapshot()
    with pytest.raises(RateTableError):
        provider.update_rate("USD", "2")
    assert provider.snapshot() is before
