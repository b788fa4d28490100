"""
Shared configuration management for the Pokédex relay.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# 30 days, fixed for every cached upstream response.
CACHE_TTL_SECONDS = 30 * 24 * 60 * 60

DEFAULT_REDIS_URL = "redis://127.0.0.1:6379/0"
DEFAULT_CATALOG_BASE_URL = "https://pokeapi.co/api/v2/"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="POKEDEX_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Upstream catalog
    catalog_base_url: str = Field(default=DEFAULT_CATALOG_BASE_URL)
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = Field(default="pokedex-relay/1.0")

    # Cache backend
    cache_backend: Literal["redis", "memory"] = Field(default="redis")
    redis_url: str = Field(default=DEFAULT_REDIS_URL)
    cache_failure_policy: Literal["bypass", "fail"] = Field(default="bypass")

    # Presentation
    preferred_locales: str = Field(default="ja,ja-Hrkt,en")
    flavor_locales: str = Field(default="ja,ja-Hrkt")

    @property
    def preferred_locale_list(self) -> list:
        return _split_locales(self.preferred_locales)

    @property
    def flavor_locale_list(self) -> list:
        return _split_locales(self.flavor_locales)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def _split_locales(value: str) -> list:
    return [part.strip() for part in value.split(",") if part.strip()]


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
