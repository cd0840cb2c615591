"""
network_gateway.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., model provider API key).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration, defaults safe for local dev.
    A single settings object is injected across layers.
    """

    model_config = SettingsConfigDict(env_prefix="NETGW_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "agent-network-gateway"
    log_level: str = "INFO"
    # Console rendering is easier to read locally; deployed envs ship JSON.
    log_json: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence (thread memory)
    database_url: str = "sqlite+aiosqlite:///./networks.db"

    # YAML file with network/agent definitions; no file means an empty registry.
    networks_file: Path | None = None

    # Model providers
    openai_base_url: str = "https://api.openai.com/v1"
    openai_api_key: str = Field(default="", repr=False)
    model_timeout_seconds: float = 60.0

    # Orchestration
    max_network_steps: int = Field(default=5, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Network definitions live in YAML (see `network.config`); only the path is an env var.
