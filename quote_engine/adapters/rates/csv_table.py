"""CSV rate table adapter.

Reads the currency rate sheet from a CSV file with the columns
``code,name,symbol,rate,is_base,is_active``. The file is re-read on each
snapshot so that rate edits made out-of-band are picked up by the next
pricing call; nothing is cached between calls.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List

from ...config import CurrencySettings, get_config
from ...domain.errors import RateTableError
from ...domain.models import CurrencyConfig, CurrencyRateTable

_TRUE_VALUES = {"1", "true", "yes", "y"}


def _as_bool(value: str, default: bool) -> bool:
    value = value.strip().lower()
    if not value:
        return default
    return value in _TRUE_VALUES


@dataclass
class CSVRateTableProvider:
    """Rate table provider that loads from a CSV file.

    Implements RateTableProviderPort.

    Attributes:
        config: Currency configuration (data dir, file name)
    """

    config: CurrencySettings = field(default_factory=lambda: get_config().currency)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def snapshot(self) -> CurrencyRateTable:
        """Load the rate sheet as an immutable snapshot.

        Raises:
            RateTableError: If the file cannot be read or is malformed.
        """
        path = self.config.rates_path
        self._logger.debug("Loading rate sheet", extra={"rates_path": str(path)})

        try:
            currencies = self._load_currencies()
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise RateTableError(f"Failed to read rate sheet {path}", cause=e)

        table = CurrencyRateTable(tuple(currencies))
        if table.base.code != self.config.base_currency.upper():
            self._logger.warning(
                "Rate sheet base differs from configured base currency",
                extra={
                    "sheet_base": table.base.code,
                    "configured_base": self.config.base_currency,
                },
            )
        self._logger.info(
            "Rate sheet loaded",
            extra={"currencies": len(table), "base": table.base.code},
        )
        return table

    def _load_currencies(self) -> List[CurrencyConfig]:
        currencies: List[CurrencyConfig] = []

        with self.config.rates_path.open(encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for line_no, row in enumerate(reader, start=2):
                code = (row.get("code") or "").strip()
                if not code:
                    continue

                rate_str = (row.get("rate") or "").strip()
                try:
                    rate = Decimal(rate_str)
                except InvalidOperation as e:
                    raise RateTableError(
                        f"Invalid rate {rate_str!r} for {code} on line {line_no}",
                        cause=e,
                    )
                if not rate.is_finite():
                    raise RateTableError(
                        f"Invalid rate {rate_str!r} for {code} on line {line_no}"
                    )

                currencies.append(
                    CurrencyConfig(
                        code=code,
                        display_symbol=(row.get("symbol") or "").strip() or code,
                        rate_to_base=rate,
                        is_base=_as_bool(row.get("is_base") or "", False),
                        name=(row.get("name") or "").strip(),
                        is_active=_as_bool(row.get("is_active") or "", True),
                    )
                )

        return currencies
