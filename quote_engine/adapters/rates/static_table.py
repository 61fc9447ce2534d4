"""In-process rate table provider.

Holds the current rate sheet as an immutable snapshot. Admin edits swap
in a new snapshot atomically, so readers either see the sheet before the
edit or after it, never a mix.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ...domain.models import CurrencyConfig, CurrencyRateTable, Number

# Base: USD. Rate is units of currency per 1 USD.
DEFAULT_CURRENCIES = (
    CurrencyConfig("USD", "$", "1", is_base=True, name="US Dollar"),
    CurrencyConfig("INR", "₹", "83.5", name="Indian Rupee"),
    CurrencyConfig("AED", "AED", "3.67", name="UAE Dirham"),
    CurrencyConfig("THB", "฿", "36.5", name="Thai Baht"),
    CurrencyConfig("EUR", "€", "0.92", name="Euro"),
    CurrencyConfig("GBP", "£", "0.79", name="British Pound"),
    CurrencyConfig("SGD", "S$", "1.35", name="Singapore Dollar"),
)


@dataclass
class StaticRateTableProvider:
    """Rate table provider backed by an in-memory snapshot.

    Implements RateTableProviderPort.

    Example:
        provider = StaticRateTableProvider()
        provider.update_rate("INR", "84.1")
        table = provider.snapshot()
    """

    currencies: Optional[Iterable[CurrencyConfig]] = None

    _table: CurrencyRateTable = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        currencies = DEFAULT_CURRENCIES if self.currencies is None else self.currencies
        self._table = CurrencyRateTable(tuple(currencies))

    def snapshot(self) -> CurrencyRateTable:
        with self._lock:
            return self._table

    def update_rate(self, code: str, rate: Number) -> CurrencyRateTable:
        """Replace one rate and publish the new snapshot.

        Raises:
            RateTableError: If the code is unknown or is the base currency.
        """
        with self._lock:
            self._table = self._table.with_rate(code, rate)
            table = self._table
        self._logger.info("Exchange rate updated", extra={"code": code, "rate": str(rate)})
        return table
