"""Services layer - Application orchestration.

Available services:
- QuotePricingService: Itemized quote pricing and quick estimates
"""

from .quote_pricing import QuotePricingRequest, QuotePricingResult, QuotePricingService

__all__ = ["QuotePricingService", "QuotePricingRequest", "QuotePricingResult"]
