"""
network_gateway.network.config

YAML network definitions.

Responsibilities:
- Validate the networks file with pydantic models.
- Build `Agent`/`AgentNetwork` objects and a `NetworkRegistry` from it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import httpx
import yaml
from pydantic import BaseModel, Field, ValidationError

from network_gateway.network.agent import Agent
from network_gateway.network.errors import NetworkConfigError
from network_gateway.network.models import build_model
from network_gateway.network.network import AgentNetwork
from network_gateway.network.registry import NetworkRegistry
from network_gateway.observability.logging import get_logger
from network_gateway.settings import Settings

log = get_logger(__name__)


class ModelDefinition(BaseModel):
    provider: Literal["mock", "openai"] = "mock"
    model_id: str | None = None
    base_url: str | None = None
    temperature: float | None = None
    mock_text: str | None = None


class AgentDefinition(BaseModel):
    name: str = Field(min_length=1)
    instructions: str
    # Falls back to the network's routing model when omitted.
    model: ModelDefinition | None = None


class NetworkDefinition(BaseModel):
    name: str = Field(min_length=1)
    instructions: str
    model: ModelDefinition = Field(default_factory=ModelDefinition)
    agents: list[AgentDefinition] = Field(default_factory=list)
    max_steps: int | None = Field(default=None, ge=1)


class NetworksFile(BaseModel):
    networks: list[NetworkDefinition] = Field(default_factory=list)

    @classmethod
    def from_yaml(cls, path: Path) -> NetworksFile:
        if not path.exists():
            raise NetworkConfigError(f"Networks file not found: {path}")

        with path.open() as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise NetworkConfigError(
                f"Invalid networks file {path}: expected a mapping at the top level"
            )
        if data.get("networks") is None:
            data["networks"] = []

        try:
            config = cls(**data)
        except ValidationError as e:
            raise NetworkConfigError(f"Invalid networks file {path}: {e}") from e
        log.info("networks_file_loaded", path=str(path), networks=len(config.networks))
        return config


def build_network(
    definition: NetworkDefinition,
    *,
    settings: Settings,
    http: httpx.AsyncClient | None = None,
) -> AgentNetwork:
    routing_model = build_model(definition.model, settings=settings, http=http)
    agents = [
        Agent(
            name=a.name,
            instructions=a.instructions,
            model=build_model(a.model, settings=settings, http=http) if a.model else routing_model,
        )
        for a in definition.agents
    ]
    return AgentNetwork(
        name=definition.name,
        instructions=definition.instructions,
        model=routing_model,
        agents=agents,
        max_steps=definition.max_steps or settings.max_network_steps,
    )


def build_registry(
    config: NetworksFile,
    *,
    settings: Settings,
    http: httpx.AsyncClient | None = None,
) -> NetworkRegistry:
    return NetworkRegistry.from_definitions(config, settings=settings, http=http)


# --- Module Notes -----------------------------------------------------------
# Provider credentials come from `Settings`, never from the YAML file.
