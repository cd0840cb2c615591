"""
network_gateway.db.models

Persistence schema for conversation threads.

Responsibilities:
- Define ORM models backing network memory:
  - Thread: a conversation owned by a resource (user, tenant, ...)
  - ThreadMessage: append-only message log of a thread
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import ForeignKeyConstraint, Index, String, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from network_gateway.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps; SQLite has no tz-aware column type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class Thread(Base):
    __tablename__ = "threads"

    # Threads are scoped by resource: the same thread id under another resource is a different thread.
    resource_id: Mapped[str] = mapped_column(String(256), primary_key=True)
    thread_id: Mapped[str] = mapped_column(String(256), primary_key=True)

    network_id: Mapped[str | None] = mapped_column(String(256), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    messages: Mapped[list[ThreadMessage]] = relationship(
        back_populates="thread",
        cascade="all, delete-orphan",
        order_by="ThreadMessage.seq",
    )


class ThreadMessage(Base):
    __tablename__ = "thread_messages"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    resource_id: Mapped[str] = mapped_column(String(256), nullable=False)
    thread_id: Mapped[str] = mapped_column(String(256), nullable=False)

    # Monotonic position within the thread; created_at alone is not unique enough to order by.
    seq: Mapped[int] = mapped_column(nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str | None] = mapped_column(String(256), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    thread: Mapped[Thread] = relationship(back_populates="messages")

    __table_args__ = (
        ForeignKeyConstraint(
            ["resource_id", "thread_id"],
            ["threads.resource_id", "threads.thread_id"],
        ),
        Index("ix_thread_messages_thread_seq", "resource_id", "thread_id", "seq", unique=True),
    )


# --- Module Notes -----------------------------------------------------------
# Only user messages and final network answers are stored; intermediate agent
# replies live in the run result (`NetworkResult.steps`) and are not persisted.
