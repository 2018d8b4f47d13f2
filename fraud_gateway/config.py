"""Configuration management using Pydantic Settings"""

from typing import Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fraud_gateway.domain.rules import (
    DEFAULT_MERCHANT_WEIGHTS,
    DEFAULT_TIME_WEIGHTS,
    RuleCatalog,
    standard_catalog,
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "fraud-gateway"
    log_level: str = "INFO"

    # Session history
    history_capacity: int = 10
    max_sessions: int = 1000

    # Rule catalog tuning (JSON in env, e.g. MERCHANT_RISK_WEIGHTS='{"crypto": 0.7}')
    merchant_risk_weights: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_MERCHANT_WEIGHTS))
    time_risk_weights: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_TIME_WEIGHTS))
    enabled_rules: Optional[List[str]] = None  # None = every standard rule, in default order


def build_default_catalog(config: "Settings") -> RuleCatalog:
    """
    Build the standard catalog from operator settings.

    Raises:
        InvalidConfigurationError: if the configured tables or rule names are malformed
    """
    return standard_catalog(
        merchant_weights=config.merchant_risk_weights,
        time_weights=config.time_risk_weights,
        enabled_rules=config.enabled_rules,
    )


settings = Settings()
