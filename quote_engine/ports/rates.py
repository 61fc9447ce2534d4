"""Rate table port - Source of currency rate snapshots.

Exchange rates are owned and refreshed by an external configuration
service. The engine only ever reads one immutable snapshot per pricing
call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import CurrencyRateTable


class RateTableProviderPort(Protocol):
    """Port for reading the currency rate sheet.

    Implementations:
    - adapters/rates/static_table.py (StaticRateTableProvider) - defaults / admin edits
    - adapters/rates/csv_table.py (CSVRateTableProvider) - rate sheet on disk
    """

    def snapshot(self) -> CurrencyRateTable:
        """Return a consistent, immutable snapshot of all rates.

        Returns:
            The rate table to use for a single pricing call.

        Raises:
            RateTableError: If the underlying sheet is malformed.
        """
        ...
