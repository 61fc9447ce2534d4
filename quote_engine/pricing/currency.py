"""Currency conversion through the base currency of a rate snapshot."""

from __future__ import annotations

from decimal import Decimal

from ..domain.errors import InvalidRateError, UnknownCurrencyError
from ..domain.models import CurrencyRateTable, Number, to_decimal


def rate_of(code: str, rate_table: CurrencyRateTable) -> Decimal:
    """Look up the rate to base for a currency code.

    Raises:
        UnknownCurrencyError: If the code is not in the table.
        InvalidRateError: If the configured rate is not a positive finite number.
    """
    currency = rate_table.get(code)
    if currency is None:
        raise UnknownCurrencyError(
            f"No exchange rate configured for currency '{code}'. "
            f"Add a rate entry for {code} before pricing items quoted in it",
            currency_code=code,
        )
    if not currency.rate_to_base.is_finite() or currency.rate_to_base <= 0:
        raise InvalidRateError(
            f"Exchange rate for currency '{currency.code}' must be a positive number, "
            f"got {currency.rate_to_base}. Correct the rate entry for {currency.code}",
            currency_code=currency.code,
            rate=currency.rate_to_base,
        )
    return currency.rate_to_base


def convert(
    amount: Number,
    from_code: str,
    to_code: str,
    rate_table: CurrencyRateTable,
) -> Decimal:
    """Convert an amount between two currencies of the same snapshot.

    Rates are expressed as units of currency per one unit of base, so the
    amount is divided by the source rate and multiplied by the target rate.
    Identical codes short-circuit without touching the table and return
    the amount exactly; floats keep their binary value there.

    Args:
        amount: Amount in ``from_code``.
        from_code: Source currency code.
        to_code: Target currency code.
        rate_table: Immutable rate snapshot for this pricing call.

    Returns:
        The amount expressed in ``to_code`` (unquantized).
    """
    if from_code.strip().upper() == to_code.strip().upper():
        return Decimal(amount) if isinstance(amount, float) else to_decimal(amount)

    amount_in_base = to_decimal(amount) / rate_of(from_code, rate_table)
    return amount_in_base * rate_of(to_code, rate_table)
