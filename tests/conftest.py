# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Pytest fixtures for StayLedger tests."""

import os
from collections.abc import AsyncGenerator, Generator
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


# Set environment variables BEFORE any src imports
# This must happen at module load time
def _setup_env() -> None:
    """Set up test environment variables at module load."""
    if "DATABASE_URL" not in os.environ:
        os.environ["DATABASE_URL"] = "sqlite:///./test.db"
    if "STANDALONE_MODE" not in os.environ:
        os.environ["STANDALONE_MODE"] = "true"
    if "LOG_LEVEL" not in os.environ:
        os.environ["LOG_LEVEL"] = "DEBUG"
    os.environ["MAIL_ENDPOINT_URL"] = ""


_setup_env()

# Now safe to import from src
import src.models  # noqa: E402, F401
from fastapi import FastAPI  # noqa: E402
from src.api.bookings import get_booking_notifier  # noqa: E402
from src.config import Settings  # noqa: E402
from src.database import Base, get_db  # noqa: E402
from src.models.property import Property  # noqa: E402
from src.services.notification_service import LoggingNotifier  # noqa: E402


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables."""
    # Already set by _setup_env(), just yield and cleanup
    yield
    # Cleanup
    test_db_path = Path("test.db")
    if test_db_path.exists():
        test_db_path.unlink()


def _enable_foreign_keys(engine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, _connection_record):
        """Enable SQLite FK constraints on each connection."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


@pytest.fixture
async def async_engine():
    """Create an async test database engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    _enable_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession]:
    """Create an async test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at noon UTC on 2025-06-01."""
    return FakeClock(datetime(2025, 6, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def settings() -> Settings:
    """Settings with the production defaults and no mail relay."""
    return Settings(
        _env_file=None,
        hold_ttl_hours=72,
        min_stay_nights=2,
        mail_endpoint_url="",
    )


@pytest.fixture
async def rental(async_session) -> Property:
    """A committed property: 140/night, 110 cleaning fee, 4 guests."""
    prop = Property(
        name="Ferienhaus Seeblick",
        slug="seeblick",
        currency="EUR",
        default_nightly_rate=Decimal("140.00"),
        cleaning_fee=Decimal("110.00"),
        max_guests=4,
    )
    async_session.add(prop)
    await async_session.commit()
    return prop


@pytest.fixture
def contact_data() -> dict[str, Any]:
    """Guest contact payload."""
    return {
        "name": "Erika Mustermann",
        "email": "erika@example.com",
        "phone": "+49 170 1234567",
        "address": {"street": "Hauptstr. 1", "zip": "18439", "city": "Stralsund"},
    }


@pytest.fixture
def app(session_factory) -> Generator[FastAPI]:
    """Create a test FastAPI application bound to the test engine."""
    from src.main import create_app

    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_booking_notifier] = LoggingNotifier
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
