"""Dependency injection container for the pricing engine.

Binds the rate provider, the rule store and the pricing service once per
process. Every binding is a lazily built singleton; tests swap a binding
by registering another factory for the same port.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config


@dataclass
class Container:
    """Port -> lazily created instance.

    Usage:
        container = Container.create_default()
        service = container.resolve(QuotePricingService)

    Attributes:
        config: Application configuration shared by every binding
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _instances: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(self, port_type: type[Any], factory: Callable[[], Any]) -> None:
        """Bind a port to a factory, dropping any instance already built."""
        with self._lock:
            self._factories[port_type] = factory
            self._instances.pop(port_type, None)

    def resolve(self, port_type: type[Any]) -> Any:
        """Return the instance bound to a port, building it on first use.

        Raises:
            KeyError: If nothing is bound to the port.
        """
        with self._lock:
            if port_type not in self._instances:
                if port_type not in self._factories:
                    raise KeyError(f"Type not registered: {port_type}")
                self._instances[port_type] = self._factories[port_type]()
            return self._instances[port_type]

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_all(self) -> None:
        with self._lock:
            self._factories.clear()
            self._instances.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        The rate provider follows ``config.currency.source``; the rule store
        is seeded with the configured default rule.
        """
        from .adapters.rates import CSVRateTableProvider, StaticRateTableProvider
        from .adapters.rules import InMemoryMarkupRuleStore
        from .ports.rates import RateTableProviderPort
        from .ports.rules import MarkupRuleStorePort
        from .services import QuotePricingService

        config = config or get_config()
        container = cls(config=config)

        def create_rate_provider() -> RateTableProviderPort:
            if config.currency.source == "csv":
                return CSVRateTableProvider(config.currency)
            return StaticRateTableProvider()

        container.register(RateTableProviderPort, create_rate_provider)
        container.register(
            MarkupRuleStorePort,
            lambda: InMemoryMarkupRuleStore([config.pricing.default_rule()]),
        )

        def create_pricing_service() -> QuotePricingService:
            return QuotePricingService(
                rate_provider=container.resolve(RateTableProviderPort),
                rule_store=container.resolve(MarkupRuleStorePort),
                config=config,
            )

        container.register(QuotePricingService, create_pricing_service)

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get the default application container (creates one if needed)."""
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Reset the default container.

    Call this in tests to ensure a fresh container.
    """
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
