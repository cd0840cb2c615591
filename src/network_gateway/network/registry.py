"""
network_gateway.network.registry

Registry of networks served by the API.

Responsibilities:
- Hold networks keyed by their derived identifier, in registration order.
- Resolve a network by exact identifier match.
- Attach shared memory to networks that don't bring their own.
- Build a registry from validated YAML definitions.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from network_gateway.network.errors import NetworkConfigError
from network_gateway.network.network import AgentNetwork

if TYPE_CHECKING:
    import httpx

    from network_gateway.memory.base import Memory
    from network_gateway.network.config import NetworksFile
    from network_gateway.settings import Settings


class NetworkRegistry:
    def __init__(
        self, networks: Mapping[str, AgentNetwork] | Iterable[AgentNetwork] = ()
    ) -> None:
        self._networks: dict[str, AgentNetwork] = {}
        # Mapping keys are labels only; networks are always addressed by `AgentNetwork.id`.
        items = networks.values() if isinstance(networks, Mapping) else networks
        for network in items:
            self.register(network)

    @classmethod
    def from_definitions(
        cls,
        config: NetworksFile,
        *,
        settings: Settings,
        http: httpx.AsyncClient | None = None,
    ) -> NetworkRegistry:
        # Imported here: `network.config` builds registries and imports this module.
        from network_gateway.network.config import build_network

        return cls(build_network(d, settings=settings, http=http) for d in config.networks)

    def register(self, network: AgentNetwork) -> AgentNetwork:
        if network.id in self._networks:
            raise NetworkConfigError(f"Duplicate network id: {network.id}")
        self._networks[network.id] = network
        return network

    def get_networks(self) -> list[AgentNetwork]:
        return list(self._networks.values())

    def get_network(self, network_id: str | None) -> AgentNetwork | None:
        if not network_id:
            return None
        return self._networks.get(network_id)

    def attach_memory(self, memory: Memory) -> None:
        for network in self._networks.values():
            if network.memory is None:
                network.memory = memory

    def __len__(self) -> int:
        return len(self._networks)

    def __contains__(self, network_id: object) -> bool:
        return network_id in self._networks


# --- Module Notes -----------------------------------------------------------
# Registries are built once at startup and read concurrently afterwards.
