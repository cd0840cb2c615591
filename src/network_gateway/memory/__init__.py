"""
network_gateway.memory

Thread memory for network runs.

Responsibilities:
- `Memory` protocol consumed by `AgentNetwork`.
- In-process and SQLAlchemy-backed implementations.
"""

from network_gateway.memory.base import InMemoryMemory, Memory
from network_gateway.memory.sql import SqlMemory

__all__ = ["InMemoryMemory", "Memory", "SqlMemory"]
