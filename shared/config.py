"""
Shared configuration management for the Entitlements API.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SUBS_HOST = "https://subscription.api.redhat.com"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias=AliasChoices("ACCESS_ENV", "env"))
    log_level: str = Field(default="info", validation_alias=AliasChoices("ACCESS_LOG_LEVEL", "log_level"))

    # Observability
    enable_metrics: bool = Field(default=True, validation_alias=AliasChoices("ACCESS_ENABLE_METRICS", "enable_metrics"))


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    # Bundle catalog
    bundle_info_yaml: str = Field(
        default="bundles/bundles.yml",
        validation_alias=AliasChoices("ENT_BUNDLE_INFO_YAML", "bundle_info_yaml"),
    )

    # Subscriptions Service
    subs_host: str = Field(default=DEFAULT_SUBS_HOST, validation_alias=AliasChoices("ENT_SUBS_HOST", "subs_host"))
    subs_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices("ENT_SUBS_TIMEOUT_SECONDS", "subs_timeout_seconds"),
    )
    subs_retry_attempts: int = Field(
        default=3,
        ge=1,
        validation_alias=AliasChoices("ENT_SUBS_RETRY_ATTEMPTS", "subs_retry_attempts"),
    )

    # Mutual TLS towards the Subscriptions Service
    cert_path: Optional[str] = Field(default=None, validation_alias=AliasChoices("ENT_CERT", "cert_path"))
    key_path: Optional[str] = Field(default=None, validation_alias=AliasChoices("ENT_KEY", "key_path"))
    ca_path: Optional[str] = Field(default=None, validation_alias=AliasChoices("ENT_CA_PATH", "ca_path"))


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
