"""Quote Pricing Engine for B2B travel quotes.

Turns hotel, transfer, activity and visa costs, each in its own supplier
currency, into a reproducible client-facing price in a target currency:
conversion, aggregation by cost basis, two-tier markup, tax and rounding.
A coarser quick estimator prices lead-stage enquiries from categorical
inputs.
"""

__version__ = "0.1.0"
