"""
network_gateway.memory.base

Thread memory protocol and a process-local implementation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from network_gateway.network.messages import ChatMessage


@runtime_checkable
class Memory(Protocol):
    async def load(
        self, *, resource_id: str, thread_id: str, limit: int = 50
    ) -> list[ChatMessage]: ...

    async def save(
        self,
        *,
        resource_id: str,
        thread_id: str,
        messages: Sequence[ChatMessage],
        network_id: str | None = None,
    ) -> None: ...


class InMemoryMemory:
    """
    Process-local memory; threads vanish on restart.
    """

    def __init__(self) -> None:
        self._threads: dict[tuple[str, str], list[ChatMessage]] = {}

    async def load(self, *, resource_id: str, thread_id: str, limit: int = 50) -> list[ChatMessage]:
        history = self._threads.get((resource_id, thread_id), [])
        return list(history[-limit:]) if limit > 0 else []

    async def save(
        self,
        *,
        resource_id: str,
        thread_id: str,
        messages: Sequence[ChatMessage],
        network_id: str | None = None,
    ) -> None:
        self._threads.setdefault((resource_id, thread_id), []).extend(messages)


# --- Module Notes -----------------------------------------------------------
# Networks only consult memory when a request names both a resource and a thread.
