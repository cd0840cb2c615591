"""
network_gateway.memory.sql

SQLAlchemy-backed thread memory.

Responsibilities:
- Load a thread's recent messages for prompting.
- Append new messages in a single transaction per save.
- Serialize concurrent saves to the same thread within the process.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from network_gateway.db.repositories.threads import ThreadRepo
from network_gateway.network.messages import ChatMessage


class SqlMemory:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        # Locks are dropped once no save on that thread holds a reference.
        self._locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, resource_id: str, thread_id: str) -> asyncio.Lock:
        key = (resource_id, thread_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def load(self, *, resource_id: str, thread_id: str, limit: int = 50) -> list[ChatMessage]:
        if limit <= 0:
            return []
        async with self._session_factory() as session:
            rows = await ThreadRepo(session).list_messages(
                resource_id=resource_id, thread_id=thread_id, limit=limit
            )
        return [ChatMessage(role=r.role, content=r.content, name=r.name) for r in rows]

    async def save(
        self,
        *,
        resource_id: str,
        thread_id: str,
        messages: Sequence[ChatMessage],
        network_id: str | None = None,
    ) -> None:
        if not messages:
            return
        lock = self._lock_for(resource_id, thread_id)
        async with lock, self._session_factory() as session:
            threads = ThreadRepo(session)
            await threads.get_or_create(
                resource_id=resource_id, thread_id=thread_id, network_id=network_id
            )
            await threads.append_messages(
                resource_id=resource_id,
                thread_id=thread_id,
                messages=[(m.role, m.content, m.name) for m in messages],
            )
            await session.commit()


# --- Module Notes -----------------------------------------------------------
# Sessions are opened per call rather than per HTTP request because streaming runs
# outlive the request handler that started them. The per-thread lock covers one
# process only; workers sharing a database should pin a thread to one worker.
