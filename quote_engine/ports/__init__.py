"""Ports layer - Abstract interfaces (Protocols) for the engine.

Ports define the contracts between the pricing core and the external
configuration services that own exchange rates and markup rules. They
enable dependency injection and make the engine testable.
"""

from .rates import RateTableProviderPort
from .rules import MarkupRuleStorePort

__all__ = [
    "RateTableProviderPort",
    "MarkupRuleStorePort",
]
