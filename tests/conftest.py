from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import fakeredis.aioredis
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from remind_service.api import deps
from remind_service.db.base import Base
from remind_service.main import app
from remind_service.models import *  # noqa: F401,F403


TEST_DB_URL = os.getenv("TEST_DATABASE_URL")


@pytest.fixture()
async def engine(tmp_path):
    url = TEST_DB_URL or f"sqlite+aiosqlite:///{tmp_path / 'reminds.db'}"
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture()
async def redis_client():
    redis = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis
    await redis.flushall()
    await redis.aclose()


@pytest.fixture()
async def app_client(session_maker, redis_client):
    async def override_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    async def override_redis():
        return redis_client

    app.dependency_overrides[deps.get_db_session] = override_db
    app.dependency_overrides[deps.get_redis_client] = override_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
