"""Thread-safe in-memory markup rule store."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence

from ...domain.errors import ConfigurationError
from ...domain.models import MarkupRule


@dataclass
class InMemoryMarkupRuleStore:
    """Named markup rules with at most one active at a time.

    Implements MarkupRuleStorePort. Rules are immutable; activating a rule
    replaces the stored objects, so readers always get a consistent rule.

    Example:
        store = InMemoryMarkupRuleStore([standard, festive])
        store.activate("Festive")
        rule = store.active_rule()
    """

    rules: Optional[Iterable[MarkupRule]] = None

    _rules: Dict[str, MarkupRule] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        for rule in self.rules or ():
            self.add(rule)

    def add(self, rule: MarkupRule) -> None:
        """Add or replace a rule by name."""
        with self._lock:
            self._rules[rule.name] = rule
        self._logger.debug(
            "Markup rule stored", extra={"rule": rule.name, "active": rule.is_active}
        )

    def get(self, name: str) -> MarkupRule:
        with self._lock:
            rule = self._rules.get(name)
        if rule is None:
            raise ConfigurationError(
                f"Markup rule not found: {name}", setting_name="markup_rule"
            )
        return rule

    def list_rules(self) -> Sequence[MarkupRule]:
        with self._lock:
            return list(self._rules.values())

    def active_rule(self) -> MarkupRule:
        with self._lock:
            active: List[MarkupRule] = [r for r in self._rules.values() if r.is_active]
        if not active:
            raise ConfigurationError(
                "No active markup rule configured", setting_name="markup_rule"
            )
        if len(active) > 1:
            names = ", ".join(sorted(r.name for r in active))
            raise ConfigurationError(
                f"More than one active markup rule: {names}",
                setting_name="markup_rule",
            )
        return active[0]

    def activate(self, name: str) -> MarkupRule:
        """Make one rule the only active rule."""
        with self._lock:
            target = self.get(name)
            for rule_name, rule in list(self._rules.items()):
                should_be_active = rule_name == target.name
                if rule.is_active != should_be_active:
                    self._rules[rule_name] = replace(rule, is_active=should_be_active)
            activated = self._rules[target.name]
        self._logger.info("Markup rule activated", extra={"rule": name})
        return activated
