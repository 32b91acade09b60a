"""
Shared configuration management for the Pokedex Access Layer.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="POKEDEX_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local", description="Deployment environment")
    log_level: str = Field(default="info", description="Root log level")

    # Listen address
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3030)

    # Upstream services
    pokeapi_url: str = Field(default="https://pokeapi.co/api/v2")
    translation_api_url: str = Field(default="https://api.funtranslations.com/translate")
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)

    # Circuit breakers
    circuit_failure_threshold: int = Field(default=5, ge=1)
    circuit_recovery_timeout: float = Field(default=60.0, ge=0)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str

    def __init__(self, service_name: str, **kwargs):
        super().__init__(service_name=service_name, **kwargs)


def get_config(service_name: str, port: Optional[int] = None) -> ServiceConfig:
    """Get configuration for a specific service.

    An explicit ``port`` wins over ``POKEDEX_PORT``.
    """
    if port is None:
        return ServiceConfig(service_name=service_name)
    return ServiceConfig(service_name=service_name, port=port)
