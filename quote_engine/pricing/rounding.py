"""Client-facing rounding of final prices.

Every strategy rounds up to a whole currency unit or coarser, so the
pipeline never discounts, and every strategy is idempotent.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

from ..domain.models import Number, RoundingStrategy, to_decimal

_ZERO = Decimal("0")
_TEN = Decimal("10")
_HUNDRED = Decimal("100")

MONEY_PLACES = 2


def quantize_money(value: Number, places: int = MONEY_PLACES) -> Decimal:
    """Stable fixed-point representation for reported amounts (half-up)."""
    return to_decimal(value).quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


def _ceil(value: Decimal) -> Decimal:
    return value.to_integral_value(rounding=ROUND_CEILING)


def _ceil_to_multiple(value: Decimal, step: Decimal) -> Decimal:
    return _ceil(value / step) * step


def apply_rounding(price: Number, strategy: RoundingStrategy) -> Decimal:
    """Round a raw price under a named strategy.

    - NO_ROUNDING: ceil to the whole unit (no sub-unit output)
    - NEAREST_UNIT: ceil to the whole unit, same output as NO_ROUNDING
    - NEAREST_TEN: up to a multiple of ten, 452 -> 460
    - NEAREST_HUNDRED: up to a multiple of one hundred, 1450 -> 1500

    Non-positive prices map to zero.
    """
    value = to_decimal(price)
    if value <= _ZERO:
        return _ZERO

    # TODO: confirm whether NEAREST_UNIT should round half-up; it ceils for now.
    if strategy is RoundingStrategy.NO_ROUNDING:
        return _ceil(value)
    if strategy is RoundingStrategy.NEAREST_UNIT:
        return _ceil(value)
    if strategy is RoundingStrategy.NEAREST_TEN:
        return _ceil_to_multiple(value, _TEN)
    if strategy is RoundingStrategy.NEAREST_HUNDRED:
        return _ceil_to_multiple(value, _HUNDRED)

    raise ValueError(f"Unsupported rounding strategy: {strategy!r}")


def apply_psychological_pricing(price: Number) -> Decimal:
    """Push a price to the next ending in 9 (452 -> 459, 142 -> 149).

    Standalone helper, not part of the markup pipeline.
    """
    value = to_decimal(price)
    if value <= _ZERO:
        return _ZERO
    return _ceil((value + 1) / _TEN) * _TEN - 1
