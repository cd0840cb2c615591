"""
network_gateway.db.repositories.threads

Repository for `Thread` and `ThreadMessage` entities.

Responsibilities:
- Create threads lazily on first write.
- Append messages in order and read a thread's recent history.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from network_gateway.db.models import Thread, ThreadMessage


class ThreadRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, *, resource_id: str, thread_id: str) -> Thread | None:
        return await self._session.get(Thread, (resource_id, thread_id))

    async def get_or_create(
        self, *, resource_id: str, thread_id: str, network_id: str | None = None
    ) -> Thread:
        thread = await self.get(resource_id=resource_id, thread_id=thread_id)
        if thread is not None:
            return thread
        thread = Thread(resource_id=resource_id, thread_id=thread_id, network_id=network_id)
        self._session.add(thread)
        try:
            await self._session.flush()
        except IntegrityError:
            # Another writer created the same thread first; use its row.
            await self._session.rollback()
            existing = await self.get(resource_id=resource_id, thread_id=thread_id)
            if existing is None:
                raise
            return existing
        return thread

    async def append_messages(
        self,
        *,
        resource_id: str,
        thread_id: str,
        messages: Sequence[tuple[str, str, str | None]],
    ) -> int:
        """
        Append `(role, content, name)` tuples after the thread's last message.
        Returns the number of rows written.

        Sequence numbers are read then written, so callers must serialize appends
        to the same thread (see `SqlMemory`).
        """

        stmt = select(func.max(ThreadMessage.seq)).where(
            ThreadMessage.resource_id == resource_id,
            ThreadMessage.thread_id == thread_id,
        )
        last_seq = (await self._session.execute(stmt)).scalar_one_or_none()
        next_seq = 0 if last_seq is None else last_seq + 1

        for offset, (role, content, name) in enumerate(messages):
            self._session.add(
                ThreadMessage(
                    resource_id=resource_id,
                    thread_id=thread_id,
                    seq=next_seq + offset,
                    role=role,
                    content=content,
                    name=name,
                )
            )
        await self._session.flush()
        return len(messages)

    async def list_messages(
        self, *, resource_id: str, thread_id: str, limit: int = 50
    ) -> list[ThreadMessage]:
        # Fetch the newest `limit` rows, then return them oldest-first for prompting.
        stmt = (
            select(ThreadMessage)
            .where(
                ThreadMessage.resource_id == resource_id,
                ThreadMessage.thread_id == thread_id,
            )
            .order_by(desc(ThreadMessage.seq))
            .limit(limit)
        )
        rows = list((await self._session.execute(stmt)).scalars().all())
        rows.reverse()
        return rows
