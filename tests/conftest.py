"""
tests.conftest

Shared fixtures: settings pointing at a throwaway SQLite file and mock-backed networks.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from network_gateway.network.agent import Agent
from network_gateway.network.models import LanguageModel, MockModel
from network_gateway.network.network import AgentNetwork
from network_gateway.network.registry import NetworkRegistry
from network_gateway.settings import Settings


def _make_agent(name: str, model: LanguageModel | None = None) -> Agent:
    return Agent(
        name=name,
        instructions="You are a helpful assistant",
        model=model or MockModel(mock_text="Hello, world!"),
    )


def _make_network(
    name: str,
    agents: list[Agent] | None = None,
    model: LanguageModel | None = None,
    **kwargs,
) -> AgentNetwork:
    return AgentNetwork(
        name=name,
        instructions="You are a helpful assistant",
        agents=agents or [],
        model=model or MockModel(mock_text="Hello, world!"),
        **kwargs,
    )


@pytest.fixture
def make_agent():
    return _make_agent


@pytest.fixture
def make_network():
    return _make_network


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def agents() -> list[Agent]:
    return [_make_agent("agent1"), _make_agent("agent2")]


@pytest.fixture
def network(agents: list[Agent]) -> AgentNetwork:
    return _make_network("test-network", agents)


@pytest.fixture
def registry(network: AgentNetwork) -> NetworkRegistry:
    return NetworkRegistry({"test-network": network})
