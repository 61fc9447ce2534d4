"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the engine to the configuration it reads:
- Currency rate sheets (in-memory, CSV)
- Markup rules (in-memory store)
"""
