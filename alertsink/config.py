"""Configuration management for alertsink."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=9097)
    log_level: str = Field(default="INFO")

    # Elasticsearch
    elasticsearch_addresses: list[str] = Field(default=["http://localhost:9200"])
    elasticsearch_username: str = Field(default="")
    elasticsearch_password: str = Field(default="")
    elasticsearch_api_key: str = Field(default="")
    elasticsearch_verify_certs: bool = Field(default=True)
    elasticsearch_index: str = Field(default="alertmanager-%y.%m")
    elasticsearch_connect_attempts: int = Field(default=5, ge=1)
    elasticsearch_connect_delay: float = Field(default=5.0, ge=0)

    # Remediation endpoints
    remediation_config: str = Field(default="remediation.yaml")
    remediation_timeout: float = Field(default=30.0)

    @property
    def remediation_config_path(self) -> Path:
        return Path(self.remediation_config)


@lru_cache
def get_settings() -> Settings:
    return Settings()
