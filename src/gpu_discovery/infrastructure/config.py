"""Configuration for GPU discovery."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gpu_discovery.domain.value_objects.gpu_identifiers import AUTOMATICALLY_DISCOVER_GPU_DEVICES


class DiscoveryConfig(BaseModel):
    """GPU discovery configuration."""

    path_to_executable: str = Field(default="")
    allowed_devices: str = Field(default=AUTOMATICALLY_DISCOVER_GPU_DEVICES)
    environment: dict[str, str] = Field(default_factory=dict)


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")
    environment: str = Field(default="development")
    otlp_endpoint: str | None = Field(default=None)


class Config(BaseSettings):
    """Main configuration."""

    model_config = SettingsConfigDict(env_prefix="GPU_DISCOVERY_", env_nested_delimiter="__")

    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    return Config()
