"""Markup rule adapters - Implementations of the MarkupRuleStorePort."""

from .memory_store import InMemoryMarkupRuleStore

__all__ = ["InMemoryMarkupRuleStore"]
