"""
network_gateway.network

Multi-agent orchestration package (LangGraph routing over named agents).

Responsibilities:
- Agents, routing networks, model providers, and the network registry.
- Runtime context passed alongside each run.
"""

from network_gateway.network.agent import Agent
from network_gateway.network.errors import ModelProviderError, NetworkConfigError, NetworkError
from network_gateway.network.messages import ChatMessage, normalize_messages
from network_gateway.network.models import LanguageModel, MockModel, OpenAIChatModel
from network_gateway.network.network import AgentNetwork, NetworkResult, NetworkStreamResult
from network_gateway.network.registry import NetworkRegistry
from network_gateway.network.runtime_context import RuntimeContext

__all__ = [
    "Agent",
    "AgentNetwork",
    "ChatMessage",
    "LanguageModel",
    "MockModel",
    "ModelProviderError",
    "NetworkConfigError",
    "NetworkError",
    "NetworkRegistry",
    "NetworkResult",
    "NetworkStreamResult",
    "OpenAIChatModel",
    "RuntimeContext",
    "normalize_messages",
]
