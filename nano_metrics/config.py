"""
Configuration management for nano-metrics.
"""

from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MetricsConfig(BaseSettings):
    """Reporter and scrape endpoint settings read from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="NANO_METRICS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Scrape endpoint
    port: int = Field(default=9090, ge=0, le=65535)
    host: str = Field(default="0.0.0.0")

    # Constant labels
    game: str = Field(default="")
    server_type: str = Field(default="")
    const_labels: Dict[str, str] = Field(default_factory=dict)

    # Variable labels appended to every metric, with their defaults
    additional_labels: Dict[str, str] = Field(default_factory=dict)

    log_level: str = Field(default="info")


def get_config(**overrides) -> MetricsConfig:
    """Get reporter configuration, with explicit overrides taking precedence."""
    return MetricsConfig(**overrides)
