"""
Configuration management using pydantic-settings.

Hierarchical configuration with environment variable support.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class KubernetesSettings(BaseSettings):
    """Kubernetes connection and watch settings."""

    model_config = SettingsConfigDict(env_prefix="KUBERNETES_")

    in_cluster: bool = Field(default=False)
    config_path: str | None = Field(default=None)
    namespaces: str = Field(
        default="",
        description="Comma separated namespaces to watch, one shard each (empty = all)",
    )
    watch_timeout_seconds: int = Field(default=60, ge=1)
    retry_delay_seconds: float = Field(default=5.0, ge=0.0)

    @property
    def namespace_list(self) -> list[str]:
        return _split_csv(self.namespaces)


class ServerSettings(BaseSettings):
    """HTTP server settings for the metrics endpoint."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)


class AppSettings(BaseSettings):
    """Application-level settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: Literal["development", "staging", "production"] = Field(default="development")
    debug: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")

    collectors: str = Field(
        default="poddisruptionbudget",
        description="Comma separated resource kinds to collect",
    )
    metrics_prefix: str = Field(default="ksm", description="Prefix for scrape health metrics")

    # Nested settings
    kubernetes: KubernetesSettings = Field(default_factory=KubernetesSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    @field_validator("metrics_prefix")
    @classmethod
    def validate_metrics_prefix(cls, v: str) -> str:
        if not v or not v.replace("_", "").isalnum():
            raise ValueError("metrics_prefix must be alphanumeric with underscores")
        return v

    @property
    def collector_list(self) -> list[str]:
        return _split_csv(self.collectors)


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
