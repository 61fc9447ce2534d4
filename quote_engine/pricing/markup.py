"""Two-tier markup, tax and rounding on top of net cost.

The chain is strictly ordered: the agent markup applies to the buying
price (net cost plus company markup), not to the raw net cost.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ..domain.errors import InactiveRuleError
from ..domain.models import MarkupKind, MarkupRule, Number, PricingBreakdown, to_decimal
from .rounding import apply_rounding, quantize_money

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")


def ensure_active(rule: MarkupRule) -> MarkupRule:
    """Fail fast when a disabled rule reaches a pricing call site."""
    if not rule.is_active:
        raise InactiveRuleError(
            f"Markup rule '{rule.name}' is inactive and cannot be used for pricing",
            rule_name=rule.name,
        )
    return rule


def markup_value(
    base_amount: Decimal, value: Decimal, kind: MarkupKind, total_pax: int
) -> Decimal:
    """Percentage of the running amount, or a flat amount per pax."""
    if kind is MarkupKind.PERCENTAGE:
        return base_amount * value / _HUNDRED
    return value * total_pax


def price(
    net_cost: Number,
    rule: MarkupRule,
    total_pax: int,
    flat_agent_override: Optional[Number] = None,
    *,
    currency: str = "",
) -> PricingBreakdown:
    """Apply company markup, agent markup, tax and rounding.

    Args:
        net_cost: Aggregated net cost in the target currency.
        rule: Markup rule; the caller is responsible for its being active.
        total_pax: Paying travellers (adults plus children).
        flat_agent_override: Agent-entered markup, already in the target
            currency; replaces the rule's agent markup formula.
        currency: Target currency code, reported on the breakdown.

    Returns:
        PricingBreakdown with every intermediate value (2 decimals) and
        the rounded final price.
    """
    net = to_decimal(net_cost)

    company = markup_value(net, rule.company_markup_value, rule.markup_kind, total_pax)
    buying_price = net + company

    if flat_agent_override is not None:
        agent = to_decimal(flat_agent_override)
        if agent < 0:
            raise ValueError(f"Agent markup override cannot be negative, got {agent}")
    else:
        agent = markup_value(
            buying_price, rule.agent_markup_value, rule.markup_kind, total_pax
        )
    subtotal = buying_price + agent

    tax = subtotal * rule.tax_percentage / _HUNDRED
    raw_final = subtotal + tax
    final_price = apply_rounding(raw_final, rule.rounding_strategy)

    per_person = (
        quantize_money(final_price / total_pax) if total_pax > 0 else Decimal("0.00")
    )

    breakdown = PricingBreakdown(
        net_cost=quantize_money(net),
        company_markup_value=quantize_money(company),
        buying_price=quantize_money(buying_price),
        agent_markup_value=quantize_money(agent),
        subtotal=quantize_money(subtotal),
        tax_amount=quantize_money(tax),
        raw_final_price=quantize_money(raw_final),
        final_price=final_price,
        per_person_price=per_person,
        total_pax=total_pax,
        rounding_strategy=rule.rounding_strategy,
        currency=currency,
    )
    logger.debug(
        "Price computed",
        extra={
            "rule": rule.name,
            "net_cost": str(breakdown.net_cost),
            "final_price": str(final_price),
            "agent_override": flat_agent_override is not None,
        },
    )
    return breakdown
