"""
tests.test_memory

SQLAlchemy-backed thread memory against a temporary SQLite database.
"""

from __future__ import annotations

import asyncio

import pytest

from network_gateway.db.init_db import init_db
from network_gateway.db.repositories.threads import ThreadRepo
from network_gateway.db.session import create_engine, create_sessionmaker
from network_gateway.memory.sql import SqlMemory
from network_gateway.network.messages import ChatMessage
from network_gateway.settings import Settings


def _msgs(*pairs: tuple[str, str]) -> list[ChatMessage]:
    return [ChatMessage(role=role, content=content) for role, content in pairs]


@pytest.mark.asyncio
async def test_sql_memory_save_and_load(settings: Settings) -> None:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        memory = SqlMemory(create_sessionmaker(engine))

        await memory.save(
            resource_id="user-1",
            thread_id="t-1",
            messages=_msgs(("user", "one"), ("assistant", "first")),
            network_id="net",
        )
        await memory.save(
            resource_id="user-1",
            thread_id="t-1",
            messages=[ChatMessage(role="assistant", content="named", name="agent1")],
        )

        history = await memory.load(resource_id="user-1", thread_id="t-1")
        assert [(m.role, m.content, m.name) for m in history] == [
            ("user", "one", None),
            ("assistant", "first", None),
            ("assistant", "named", "agent1"),
        ]

        # Limit keeps the newest messages, still oldest-first.
        recent = await memory.load(resource_id="user-1", thread_id="t-1", limit=2)
        assert [m.content for m in recent] == ["first", "named"]
        assert await memory.load(resource_id="user-1", thread_id="t-1", limit=0) == []
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_sql_memory_threads_are_scoped_by_resource(settings: Settings) -> None:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        memory = SqlMemory(create_sessionmaker(engine))
        await memory.save(resource_id="a", thread_id="shared", messages=_msgs(("user", "from a")))
        await memory.save(resource_id="b", thread_id="shared", messages=_msgs(("user", "from b")))
        await memory.save(resource_id="a", thread_id="shared", messages=[])

        assert [m.content for m in await memory.load(resource_id="a", thread_id="shared")] == [
            "from a"
        ]
        assert [m.content for m in await memory.load(resource_id="b", thread_id="shared")] == [
            "from b"
        ]
        assert await memory.load(resource_id="c", thread_id="shared") == []
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_sql_memory_concurrent_saves_to_one_thread(settings: Settings) -> None:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        memory = SqlMemory(create_sessionmaker(engine))

        results = await asyncio.gather(
            *[
                memory.save(
                    resource_id="r",
                    thread_id="t",
                    messages=_msgs(("user", f"q{i}"), ("assistant", f"a{i}")),
                    network_id="net",
                )
                for i in range(5)
            ],
            return_exceptions=True,
        )

        assert [type(r).__name__ for r in results] == ["NoneType"] * 5
        history = await memory.load(resource_id="r", thread_id="t")
        assert len(history) == 10
        # Each save lands as one contiguous user/assistant pair.
        for user, assistant in zip(history[::2], history[1::2]):
            assert (user.role, assistant.role) == ("user", "assistant")
            assert user.content[1:] == assistant.content[1:]
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_thread_get_or_create_tolerates_existing_row(settings: Settings) -> None:
    engine = create_engine(settings)
    await init_db(engine)
    sessions = create_sessionmaker(engine)
    try:
        async with sessions() as first, sessions() as second:
            # Both sessions start before either thread row exists.
            assert await ThreadRepo(first).get(resource_id="r", thread_id="t") is None
            assert await ThreadRepo(second).get(resource_id="r", thread_id="t") is None

            await ThreadRepo(first).get_or_create(resource_id="r", thread_id="t", network_id="a")
            await first.commit()

            thread = await ThreadRepo(second).get_or_create(
                resource_id="r", thread_id="t", network_id="b"
            )
            assert (thread.resource_id, thread.thread_id, thread.network_id) == ("r", "t", "a")
    finally:
        await engine.dispose()
