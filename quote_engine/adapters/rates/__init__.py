"""Rate table adapters - Implementations of the RateTableProviderPort.

Available implementations:
- StaticRateTableProvider: In-memory sheet with atomic admin edits
- CSVRateTableProvider: Sheet read from a CSV file on each snapshot
"""

from .csv_table import CSVRateTableProvider
from .static_table import DEFAULT_CURRENCIES, StaticRateTableProvider

__all__ = ["CSVRateTableProvider", "StaticRateTableProvider", "DEFAULT_CURRENCIES"]
