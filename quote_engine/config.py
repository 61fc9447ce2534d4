"""Centralized configuration using Pydantic Settings.

Single source of truth for the engine's tunables: currency sheet source,
default commercial rule, quick-estimate rate sheet and logging.

Configuration can be overridden via environment variables:
- QPE_CURRENCY_SOURCE=csv
- QPE_CURRENCY_DATA_DIR=/path/to/data
- QPE_PRICING_COMPANY_MARKUP=12.5
- QPE_ESTIMATE_BUFFER=1.2
- QPE_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import MarkupKind, MarkupRule, RoundingStrategy


class CurrencySettings(BaseSettings):
    """Currency rate sheet configuration.

    Environment variables prefixed with QPE_CURRENCY_.
    """

    model_config = SettingsConfigDict(env_prefix="QPE_CURRENCY_")

    base_currency: str = "USD"
    default_target_currency: str = "INR"
    source: Literal["static", "csv"] = "static"
    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent / "data"
    )
    rates_file: str = "currency_rates.csv"

    @property
    def rates_path(self) -> Path:
        """Full path to the currency rates CSV file."""
        return self.data_dir / self.rates_file


class PricingSettings(BaseSettings):
    """Default commercial rule and aggregation defaults.

    Environment variables prefixed with QPE_PRICING_.
    """

    model_config = SettingsConfigDict(env_prefix="QPE_PRICING_")

    rule_name: str = "Standard"
    markup_kind: Literal["Percentage", "Fixed"] = "Percentage"
    company_markup: Decimal = Field(default=Decimal("10"), ge=0)
    agent_markup: Decimal = Field(default=Decimal("10"), ge=0)
    tax_percentage: Decimal = Field(default=Decimal("5"), ge=0, lt=100)
    rounding: Literal["None", "Nearest 1", "Nearest 10", "Nearest 100"] = "Nearest 10"

    default_vehicle_capacity: int = Field(default=4, gt=0)
    visa_enabled: bool = True

    def default_rule(self) -> MarkupRule:
        """Build the configured default rule."""
        return MarkupRule(
            markup_kind=MarkupKind.from_label(self.markup_kind),
            company_markup_value=self.company_markup,
            agent_markup_value=self.agent_markup,
            tax_percentage=self.tax_percentage,
            rounding_strategy=RoundingStrategy.from_label(self.rounding),
            is_active=True,
            name=self.rule_name,
        )


_DEFAULT_BASE_RATES = {
    "3 Star": Decimal("4000"),
    "4 Star": Decimal("7000"),
    "5 Star": Decimal("15000"),
    "Luxury": Decimal("35000"),
}
_DEFAULT_MEAL_MULTIPLIERS = {
    "RO": Decimal("1.0"),
    "BB": Decimal("1.1"),
    "HB": Decimal("1.3"),
    "FB": Decimal("1.5"),
    "AI": Decimal("1.8"),
}
_DEFAULT_SIGHTSEEING_PACKAGES = {
    "None": Decimal("0"),
    "Standard": Decimal("3000"),
    "Premium": Decimal("8000"),
}


class QuickEstimateConfig(BaseSettings):
    """Rate sheet for lead-stage quick estimates (values in ``currency``).

    Environment variables prefixed with QPE_ESTIMATE_. Mapping fields
    accept JSON and are merged onto the default sheet, so
    QPE_ESTIMATE_BASE_RATES='{"4 Star": 7500}' only changes the 4 Star rate.
    """

    model_config = SettingsConfigDict(env_prefix="QPE_ESTIMATE_")

    currency: str = "INR"
    base_rates: Dict[str, Decimal] = Field(
        default_factory=lambda: dict(_DEFAULT_BASE_RATES)
    )
    meal_multipliers: Dict[str, Decimal] = Field(
        default_factory=lambda: dict(_DEFAULT_MEAL_MULTIPLIERS)
    )
    sightseeing_packages: Dict[str, Decimal] = Field(
        default_factory=lambda: dict(_DEFAULT_SIGHTSEEING_PACKAGES)
    )
    transfer_cost_per_pax: Decimal = Decimal("2000")
    buffer: Decimal = Field(default=Decimal("1.15"), ge=1)
    nights_per_package: int = Field(default=3, gt=0)

    @field_validator("base_rates")
    @classmethod
    def _merge_base_rates(cls, value: Dict[str, Decimal]) -> Dict[str, Decimal]:
        return {**_DEFAULT_BASE_RATES, **value}

    @field_validator("meal_multipliers")
    @classmethod
    def _merge_meal_multipliers(cls, value: Dict[str, Decimal]) -> Dict[str, Decimal]:
        return {**_DEFAULT_MEAL_MULTIPLIERS, **value}

    @field_validator("sightseeing_packages")
    @classmethod
    def _merge_sightseeing(cls, value: Dict[str, Decimal]) -> Dict[str, Decimal]:
        return {**_DEFAULT_SIGHTSEEING_PACKAGES, **value}



class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with QPE_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="QPE_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.pricing.default_rule())
        print(config.currency.rates_path)

    Environment variables prefixed with QPE_.
    """

    model_config = SettingsConfigDict(env_prefix="QPE_")

    currency: CurrencySettings = Field(default_factory=CurrencySettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    estimate: QuickEstimateConfig = Field(default_factory=QuickEstimateConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
