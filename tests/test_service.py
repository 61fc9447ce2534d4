"""Tests for QuotePricingService orchestration."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from quote_engine.adapters.rates import StaticRateTableProvider
from quote_engine.adapters.rules import InMemoryMarkupRuleStore
from quote_engine.config import AppConfig
from quote_engine.domain.errors import (
    ConfigurationError,
    InactiveRuleError,
    UnknownCurrencyError,
)
from quote_engine.domain.models import (
    CostBasis,
    CostCategory,
    CostLineItem,
    CurrencyConfig,
    MarkupKind,
    MarkupRule,
    QuickEstimateInputs,
    RoundingStrategy,
    Stay,
    TravelerCount,
)
from quote_engine.services import QuotePricingRequest, QuotePricingService


def dubai_stay(rooms=2, nights=3, *extra_items):
    return Stay(
        city="Dubai",
        rooms=rooms,
        nights=nights,
        line_items=(
            CostLineItem(CostCategory.HOTEL, 5000, "AED", CostBasis.PER_ROOM),
        )
        + tuple(extra_items),
    )


@pytest.fixture
def service(standard_rule):
    return QuotePricingService(
        rate_provider=StaticRateTableProvider(),
        rule_store=InMemoryMarkupRuleStore([standard_rule]),
        config=AppConfig(),
    )


class TestPriceQuote:
    def test_prices_itinerary_with_active_rule(self, service, couple):
        request = QuotePricingRequest(
            stays=(dubai_stay(),), travelers=couple, target_currency="USD"
        )
        result = service.price_quote(request)

        assert result.breakdown.net_cost == Decimal("8174.39")
        assert result.breakdown.final_price == Decimal("10390")
        assert result.breakdown.per_person_price == Decimal("5195.00")
        assert result.breakdown.currency == "USD"
        assert result.rule.name == "Standard"
        assert result.currency_symbol == "$"
        assert result.warnings == ()

    def test_request_rule_takes_precedence(self, service, couple):
        rule = MarkupRule(
            MarkupKind.PERCENTAGE, 0, 0, 0, RoundingStrategy.NO_ROUNDING, name="At cost"
        )
        request = QuotePricingRequest(
            stays=(dubai_stay(),),
            travelers=couple,
            target_currency="USD",
            markup_rule=rule,
        )
        result = service.price_quote(request)
        assert result.rule.name == "At cost"
        assert result.breakdown.final_price == Decimal("8175")

    def test_flat_agent_override(self, service, couple):
        request = QuotePricingRequest(
            stays=(dubai_stay(),),
            travelers=couple,
            target_currency="USD",
            flat_agent_override=Decimal("0"),
        )
        result = service.price_quote(request)
        assert result.breakdown.agent_markup_value == Decimal("0.00")

    def test_inactive_request_rule(self, service, couple):
        rule = MarkupRule(
            MarkupKind.PERCENTAGE,
            10,
            10,
            5,
            RoundingStrategy.NEAREST_TEN,
            is_active=False,
            name="Festive",
        )
        request = QuotePricingRequest(
            stays=(dubai_stay(),), travelers=couple, target_currency="USD", markup_rule=rule
        )
        with pytest.raises(InactiveRuleError):
            service.price_quote(request)

    def test_no_active_rule_in_store(self, couple):
        service = QuotePricingService(
            rate_provider=StaticRateTableProvider(),
            rule_store=InMemoryMarkupRuleStore(),
            config=AppConfig(),
        )
        request = QuotePricingRequest(
            stays=(dubai_stay(),), travelers=couple, target_currency="USD"
        )
        with pytest.raises(ConfigurationError):
            service.price_quote(request)

    def test_one_snapshot_per_call(self, rate_table, standard_rule, couple):
        provider = MagicMock()
        provider.snapshot.return_value = rate_table
        service = QuotePricingService(
            rate_provider=provider,
            rule_store=InMemoryMarkupRuleStore([standard_rule]),
            config=AppConfig(),
        )
        bangkok = Stay(
            "Bangkok",
            1,
            2,
            (CostLineItem(CostCategory.HOTEL, 3000, "THB", CostBasis.PER_ROOM),),
        )
        request = QuotePricingRequest(
            stays=(dubai_stay(), bangkok), travelers=couple, target_currency="INR"
        )

        result = service.price_quote(request)

        provider.snapshot.assert_called_once()
        assert len(result.aggregation.stays) == 2
        assert result.currency_symbol == "₹"

    def test_occupancy_violations_are_warnings(self, service):
        travelers = TravelerCount(adults=4)
        request = QuotePricingRequest(
            stays=(dubai_stay(rooms=1),), travelers=travelers, target_currency="USD"
        )
        result = service.price_quote(request)

        assert result.has_occupancy_violations
        assert any(w.startswith("Dubai:") for w in result.warnings)
        assert result.breakdown.final_price > 0

    def test_rate_edit_applies_to_next_call(self, service, couple):
        request = QuotePricingRequest(
            stays=(dubai_stay(),), travelers=couple, target_currency="USD"
        )
        before = service.price_quote(request)
        service.rate_provider.update_rate("AED", "3.5")
        after = service.price_quote(request)

        assert after.breakdown.net_cost == Decimal("8571.43")
        assert before.breakdown.net_cost == Decimal("8174.39")

    def test_repeatable(self, service, couple):
        request = QuotePricingRequest(
            stays=(dubai_stay(),), travelers=couple, target_currency="INR"
        )
        assert service.price_quote(request) == service.price_quote(request)

    def test_vehicle_capacity_from_config(self, standard_rule, couple):
        config = AppConfig()
        config.pricing.default_vehicle_capacity = 1
        service = QuotePricingService(
            rate_provider=StaticRateTableProvider(),
            rule_store=InMemoryMarkupRuleStore([standard_rule]),
            config=config,
        )
        transfer = CostLineItem(CostCategory.TRANSFER, 100, "USD", CostBasis.PER_VEHICLE)
        request = QuotePricingRequest(
            stays=(Stay("Dubai", 1, 1, (transfer,)),),
            travelers=couple,
            target_currency="USD",
        )
        assert service.price_quote(request).aggregation.net_cost == Decimal("200.00")

    def test_target_currency_and_visa_default_from_config(self, standard_rule, couple):
        config = AppConfig()
        config.pricing.visa_enabled = False
        service = QuotePricingService(
            rate_provider=StaticRateTableProvider(),
            rule_store=InMemoryMarkupRuleStore([standard_rule]),
            config=config,
        )
        items = (
            CostLineItem(CostCategory.HOTEL, 1, "USD", CostBasis.PER_ROOM),
            CostLineItem(CostCategory.VISA, 1, "USD", CostBasis.PER_PERSON),
        )
        stays = (Stay("Dubai", 1, 1, items),)

        default = service.price_quote(QuotePricingRequest(stays=stays, travelers=couple))
        with_visa = service.price_quote(
            QuotePricingRequest(stays=stays, travelers=couple, visa_enabled=True)
        )

        assert default.breakdown.currency == "INR"
        assert default.breakdown.net_cost == Decimal("83.50")
        assert with_visa.breakdown.net_cost == Decimal("250.50")


class TestPriceSafe:
    def test_success(self, service, couple):
        request = QuotePricingRequest(
            stays=(dubai_stay(),), travelers=couple, target_currency="USD"
        )
        result, error = service.price_safe(request)
        assert error is None
        assert result is not None

    def test_unknown_currency_message(self, service, couple):
        item = CostLineItem(CostCategory.HOTEL, 100, "MVR", CostBasis.PER_ROOM)
        request = QuotePricingRequest(
            stays=(Stay("Male", 1, 1, (item,)),), travelers=couple, target_currency="USD"
        )
        result, error = service.price_safe(request)
        assert result is None
        assert "MVR" in error
        assert "rate sheet" in error

    @pytest.mark.parametrize("rate", ["0", "NaN", "Infinity"])
    def test_invalid_rate_message(self, standard_rule, couple, rate):
        provider = StaticRateTableProvider(
            [
                CurrencyConfig("USD", "$", "1", is_base=True),
                CurrencyConfig("AED", "AED", rate),
            ]
        )
        service = QuotePricingService(
            provider, InMemoryMarkupRuleStore([standard_rule]), AppConfig()
        )
        request = QuotePricingRequest(
            stays=(dubai_stay(),), travelers=couple, target_currency="USD"
        )
        result, error = service.price_safe(request)
        assert result is None
        assert "AED" in error
        assert "invalid exchange rate" in error

    def test_inactive_rule_message(self, service, couple):
        rule = MarkupRule(
            "Percentage", 1, 1, 1, "None", is_active=False, name="Festive"
        )
        request = QuotePricingRequest(
            stays=(dubai_stay(),), travelers=couple, target_currency="USD", markup_rule=rule
        )
        result, error = service.price_safe(request)
        assert result is None
        assert "Festive" in error

    def test_inventory_error_message(self, service, couple):
        item = CostLineItem(
            CostCategory.TRANSFER, 100, "USD", CostBasis.PER_VEHICLE, vehicle_capacity=0
        )
        request = QuotePricingRequest(
            stays=(Stay("Dubai", 1, 1, (item,)),), travelers=couple, target_currency="USD"
        )
        result, error = service.price_safe(request)
        assert result is None
        assert error.startswith("Inventory data error")

    def test_price_quote_still_raises(self, service, couple):
        request = QuotePricingRequest(
            stays=(dubai_stay(),), travelers=couple, target_currency="JPY"
        )
        with pytest.raises(UnknownCurrencyError):
            service.price_quote(request)


class TestQuickEstimate:
    def test_uses_destination_defaults(self, service, couple):
        result = service.quick_estimate("Dubai", couple, nights=4)
        assert result.total == Decimal("49220")
        assert result.per_person == Decimal("24610")
        assert result.destination == "Dubai"

    def test_nights_from_inputs(self, service, couple):
        inputs = QuickEstimateInputs(room_count=1, nights=4)
        assert service.quick_estimate("Dubai", couple, inputs=inputs).total == Decimal(
            "49220"
        )

    def test_nights_required(self, service, couple):
        with pytest.raises(ValueError):
            service.quick_estimate("Dubai", couple)


def test_format_breakdown(service, couple):
    request = QuotePricingRequest(
        stays=(dubai_stay(rooms=1),),
        travelers=TravelerCount(adults=4),
        target_currency="USD",
    )
    text = service.format_breakdown(service.price_quote(request))

    assert "Net cost:" in text
    assert "Final price:     $" in text
    assert "(Nearest 10)" in text
    assert "x 4" in text
    assert "Warning: Dubai:" in text
