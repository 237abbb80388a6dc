"""Test fixtures for the intranet backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from intranet.core.config import get_settings
from intranet.core.security import get_password_hash
from intranet.db.base import Base
from intranet.db.session import dispose_engine, get_sessionmaker
from intranet.main import app
from intranet.models import Apartment, User, UserRole, UserStatus


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: None, db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client plus a seeded admin, two members and an apartment."""
    sessionmaker = get_sessionmaker(db_url)
    admin_password = "Styrelse1!"
    member_password = "Medlem123!"

    async with sessionmaker() as session:
        admin = User(
            email="styrelsen@example.com",
            hashed_password=get_password_hash(admin_password),
            full_name="Styrelsen",
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        member = User(
            email="anna@example.com",
            hashed_password=get_password_hash(member_password),
            full_name="Anna Andersson",
            apartment="1101",
            role=UserRole.MEMBER,
            status=UserStatus.ACTIVE,
        )
        neighbour = User(
            email="bertil@example.com",
            hashed_password=get_password_hash(member_password),
            full_name="Bertil Berg",
            apartment="1204",
            role=UserRole.MEMBER,
            status=UserStatus.ACTIVE,
        )
        apartment = Apartment(
            name="Gästlägenheten",
            description="Två bäddar, kök och dusch",
            price_per_night=400,
            max_guests=4,
        )
        session.add_all([admin, member, neighbour, apartment])
        await session.commit()

        context: dict[str, object] = {
            "admin_id": admin.id,
            "admin_email": admin.email,
            "admin_password": admin_password,
            "member_id": member.id,
            "member_email": member.email,
            "member_password": member_password,
            "neighbour_id": neighbour.id,
            "neighbour_email": neighbour.email,
            "apartment_id": apartment.id,
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context

