"""Quote pricing service - Main orchestrator.

Wires one rate snapshot and one markup rule per call into the pure
pricing core: aggregation per stay, occupancy checks, markup chain.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from ..config import AppConfig, get_config
from ..domain.errors import (
    ConfigurationError,
    InactiveRuleError,
    InvalidCapacityError,
    InvalidRateError,
    LineItemError,
    PricingEngineError,
    RateTableError,
    UnknownCurrencyError,
)
from ..domain.models import (
    AggregationResult,
    MarkupRule,
    OccupancyReport,
    PricingBreakdown,
    QuickEstimate,
    QuickEstimateInputs,
    Stay,
    TravelerCount,
)
from ..ports.rates import RateTableProviderPort
from ..ports.rules import MarkupRuleStorePort
from ..pricing import aggregation, allocation, markup, quick_estimate


@dataclass(frozen=True)
class QuotePricingRequest:
    """Itemized pricing request.

    Attributes:
        stays: One entry per city, each with its own rooms and nights
        travelers: Party composition
        target_currency: Currency of the client-facing price; the configured
            default target currency when empty
        markup_rule: Rule to apply; the store's active rule when omitted
        flat_agent_override: Agent-entered markup in the target currency
        visa_enabled: Whether visa line items are charged; the configured
            default when None
    """

    stays: Tuple[Stay, ...]
    travelers: TravelerCount
    target_currency: str = ""
    markup_rule: Optional[MarkupRule] = None
    flat_agent_override: Optional[Decimal] = None
    visa_enabled: Optional[bool] = None


@dataclass(frozen=True)
class QuotePricingResult:
    breakdown: PricingBreakdown
    aggregation: AggregationResult
    occupancy: Tuple[OccupancyReport, ...]
    rule: MarkupRule
    currency_symbol: str

    @property
    def warnings(self) -> Tuple[str, ...]:
        occupancy_warnings = tuple(
            f"{stay.city or 'Stay'}: {violation.message}"
            for stay, report in zip(self.aggregation.stays, self.occupancy)
            for violation in report.violations
        )
        return self.aggregation.warnings + occupancy_warnings

    @property
    def has_occupancy_violations(self) -> bool:
        return any(not report.is_valid for report in self.occupancy)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "breakdown": self.breakdown.to_dict(),
            "rule": self.rule.name,
            "currency_symbol": self.currency_symbol,
            "stays": [
                {"city": s.city, "net_cost": str(s.net_cost)}
                for s in self.aggregation.stays
            ],
            "warnings": list(self.warnings),
        }


@dataclass
class QuotePricingService:
    """Main service for pricing quotes.

    This service orchestrates a full pricing request:
    1. Rate snapshot and rule resolution
    2. Net cost aggregation per stay
    3. Occupancy validation (reported, not blocking)
    4. Markup, tax and rounding

    Attributes:
        rate_provider: Supplies the currency rate snapshot
        rule_store: Supplies markup rules
        config: Application configuration
    """

    rate_provider: RateTableProviderPort
    rule_store: MarkupRuleStorePort
    config: AppConfig = field(default_factory=get_config)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def price_quote(self, request: QuotePricingRequest) -> QuotePricingResult:
        """Price an itemized itinerary.

        Raises:
            InactiveRuleError: If the resolved rule is disabled.
            ConfigurationError: If no usable rule is configured.
            UnknownCurrencyError: If a currency is missing from the rate sheet.
            InvalidRateError: If a rate in use is not positive.
            InvalidCapacityError: If a per-vehicle item has no usable capacity.
            LineItemError: If an item's category/cost basis cannot be priced.
        """
        rule = request.markup_rule or self.rule_store.active_rule()
        markup.ensure_active(rule)

        target_currency = (
            request.target_currency or self.config.currency.default_target_currency
        ).strip().upper()
        visa_enabled = (
            self.config.pricing.visa_enabled
            if request.visa_enabled is None
            else request.visa_enabled
        )

        rate_table = self.rate_provider.snapshot()
        self._logger.info(
            "Starting quote pricing",
            extra={
                "stays": len(request.stays),
                "pax": request.travelers.total_pax,
                "target_currency": target_currency,
                "rule": rule.name,
            },
        )

        aggregated = aggregation.aggregate_itinerary(
            request.stays,
            request.travelers,
            target_currency,
            rate_table,
            visa_enabled=visa_enabled,
            default_vehicle_capacity=self.config.pricing.default_vehicle_capacity,
        )
        for message in aggregated.warnings:
            self._logger.warning("Aggregation warning", extra={"detail": message})

        occupancy = tuple(
            allocation.check_occupancy(
                request.travelers.adults, request.travelers.children, stay.rooms
            )
            for stay in request.stays
        )
        for stay, report in zip(request.stays, occupancy):
            if not report.is_valid:
                self._logger.warning(
                    "Occupancy violation",
                    extra={
                        "city": stay.city,
                        "rooms": stay.rooms,
                        "violations": [v.rule.value for v in report.violations],
                    },
                )

        breakdown = markup.price(
            aggregated.net_cost,
            rule,
            request.travelers.total_pax,
            request.flat_agent_override,
            currency=target_currency,
        )
        self._logger.info(
            "Quote priced",
            extra={
                "net_cost": str(breakdown.net_cost),
                "final_price": str(breakdown.final_price),
                "currency": target_currency,
            },
        )

        return QuotePricingResult(
            breakdown=breakdown,
            aggregation=aggregated,
            occupancy=occupancy,
            rule=rule,
            currency_symbol=rate_table.symbol(target_currency),
        )

    def price_safe(
        self, request: QuotePricingRequest
    ) -> Tuple[Optional[QuotePricingResult], Optional[str]]:
        """Price a quote, returning an actionable message instead of raising.

        Returns:
            Tuple of (result or None, error message or None).
        """
        try:
            return self.price_quote(request), None
        except UnknownCurrencyError as e:
            return None, (
                f"Currency '{e.currency_code}' has no exchange rate. "
                "Ask an administrator to add it to the currency rate sheet."
            )
        except InvalidRateError as e:
            return None, (
                f"Currency '{e.currency_code}' has an invalid exchange rate ({e.rate}). "
                "Ask an administrator to correct it in the currency rate sheet."
            )
        except RateTableError as e:
            return None, f"Currency rate sheet is misconfigured: {e.message}"
        except InactiveRuleError as e:
            return None, (
                f"Pricing rule '{e.rule_name}' is disabled. "
                "Activate a pricing rule before generating quotes."
            )
        except ConfigurationError as e:
            return None, f"Pricing configuration error: {e.message}"
        except (InvalidCapacityError, LineItemError) as e:
            return None, f"Inventory data error: {e.message}"
        except PricingEngineError as e:
            self._logger.exception("Unexpected pricing error")
            return None, f"Error: {e.message}"

    def quick_estimate(
        self,
        destination_hint: str,
        travelers: TravelerCount,
        nights: Optional[int] = None,
        inputs: Optional[QuickEstimateInputs] = None,
    ) -> QuickEstimate:
        """Lead-stage estimate; destination defaults are used without inputs.

        Raises:
            ValueError: If nights are given neither directly nor on the inputs.
        """
        inputs = inputs or quick_estimate.suggest_inputs(destination_hint, travelers)
        trip_nights = nights if nights is not None else inputs.nights
        if trip_nights is None:
            raise ValueError("Nights are required for a quick estimate")

        return quick_estimate.estimate(
            destination_hint,
            trip_nights,
            travelers,
            inputs,
            rates=self.config.estimate,
        )

    def format_breakdown(self, result: QuotePricingResult) -> str:
        """Format a priced quote as a human-readable summary."""
        b = result.breakdown
        symbol = result.currency_symbol
        lines = [
            f"Net cost:        {symbol} {b.net_cost}",
            f"Company markup:  {symbol} {b.company_markup_value}",
            f"Buying price:    {symbol} {b.buying_price}",
            f"Agent markup:    {symbol} {b.agent_markup_value}",
            f"Subtotal:        {symbol} {b.subtotal}",
            f"Tax:             {symbol} {b.tax_amount}",
            f"Final price:     {symbol} {b.final_price} ({b.rounding_strategy.value})",
            f"Per person:      {symbol} {b.per_person_price} x {b.total_pax}",
        ]
        lines.extend(f"Warning: {w}" for w in result.warnings)
        return "\n".join(lines)
