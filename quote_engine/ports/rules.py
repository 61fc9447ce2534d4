"""Markup rule port - Admin-configurable pricing rules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import MarkupRule


class MarkupRuleStorePort(Protocol):
    """Port for reading markup rules.

    Implementation: adapters/rules/memory_store.py (InMemoryMarkupRuleStore)

    At most one rule is expected to be active at a time.
    """

    def active_rule(self) -> MarkupRule:
        """Return the currently active rule.

        Raises:
            ConfigurationError: If no rule, or more than one, is active.
        """
        ...

    def get(self, name: str) -> MarkupRule:
        """Return a rule by name, active or not.

        Raises:
            ConfigurationError: If no rule has that name.
        """
        ...

    def list_rules(self) -> Sequence[MarkupRule]:
        """List every configured rule."""
        ...
