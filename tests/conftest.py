"""Shared fixtures: temporary database and seeded users."""

from __future__ import annotations

import os
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from tests.helpers import OTHER_TOKEN, OWNER_TOKEN, make_engine  # noqa: E402
from wardrobe_api.db import models  # noqa: E402
from wardrobe_api.db.session import init_db  # noqa: E402
from wardrobe_api.services.users import UserService  # noqa: E402


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncEngine:
    engine = make_engine(tmp_path)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def owner(session: AsyncSession) -> models.User:
    user, _ = await UserService().create_user(session, email="owner@example.com", token=OWNER_TOKEN)
    return user


@pytest_asyncio.fixture
async def other_user(session: AsyncSession) -> models.User:
    user, _ = await UserService().create_user(session, email="other@example.com", token=OTHER_TOKEN)
    return user
