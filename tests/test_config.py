"""
tests.test_config

YAML network definitions and the registries built from them.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from network_gateway.network.config import NetworksFile, build_registry
from network_gateway.network.errors import NetworkConfigError
from network_gateway.network.models import MockModel
from network_gateway.network.registry import NetworkRegistry
from network_gateway.settings import Settings

YAML = """
networks:
  - name: Support Network
    instructions: Route support questions.
    max_steps: 3
    model:
      provider: mock
      mock_text: routed
    agents:
      - name: billing
        instructions: Answer billing questions.
      - name: tech
        instructions: Answer technical questions.
        model:
          provider: mock
          model_id: tech-model
  - name: Plain
    instructions: No agents here.
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "networks.yaml"
    path.write_text(text)
    return path


def test_build_registry_from_yaml(tmp_path: Path) -> None:
    config = NetworksFile.from_yaml(_write(tmp_path, YAML))
    registry = build_registry(config, settings=Settings(env="test", max_network_steps=7))

    assert [n.id for n in registry.get_networks()] == ["support-network", "plain"]

    support = registry.get_network("support-network")
    assert support is not None
    assert support.max_steps == 3
    billing, tech = support.get_agents()
    # Agents without a model share the network's routing model.
    assert billing.model is support.routing_model
    assert isinstance(tech.model, MockModel) and tech.model.model_id == "tech-model"

    plain = registry.get_network("plain")
    assert plain is not None and plain.max_steps == 7 and plain.get_agents() == []


def test_empty_file_means_no_networks(tmp_path: Path) -> None:
    assert NetworksFile.from_yaml(_write(tmp_path, "")).networks == []
    assert NetworksFile.from_yaml(_write(tmp_path, "networks:\n")).networks == []


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(NetworkConfigError, match="not found"):
        NetworksFile.from_yaml(tmp_path / "nope.yaml")


def test_invalid_definition(tmp_path: Path) -> None:
    path = _write(tmp_path, "networks:\n  - name: x\n    model: {provider: carrier-pigeon}\n")
    with pytest.raises(NetworkConfigError, match="Invalid networks file"):
        NetworksFile.from_yaml(path)


def test_duplicate_network_ids(tmp_path: Path) -> None:
    text = (
        "networks:\n"
        "  - {name: Same Name, instructions: a}\n"
        "  - {name: same   name, instructions: b}\n"
    )
    config = NetworksFile.from_yaml(_write(tmp_path, text))
    with pytest.raises(NetworkConfigError, match="Duplicate network id"):
        build_registry(config, settings=Settings(env="test"))


def test_registry_from_definitions(tmp_path: Path) -> None:
    config = NetworksFile.from_yaml(_write(tmp_path, YAML))
    registry = NetworkRegistry.from_definitions(config, settings=Settings(env="test"))

    assert isinstance(registry, NetworkRegistry)
    assert len(registry) == 2
    assert "support-network" in registry
    assert registry.get_network("Support Network") is None


@pytest.mark.parametrize("text", ["- name: x\n  instructions: y\n", "just a string\n", "42\n"])
def test_top_level_must_be_a_mapping(tmp_path: Path, text: str) -> None:
    with pytest.raises(NetworkConfigError, match="expected a mapping"):
        NetworksFile.from_yaml(_write(tmp_path, text))
