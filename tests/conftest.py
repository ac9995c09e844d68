"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production ORM models use only portable column
types, so the same metadata is created here.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from dispatch.domain.entities import Location, Order, Vehicle
from dispatch.domain.enums import Priority
from dispatch.infrastructure import models  # noqa: F401  (registers tables)
from dispatch.infrastructure.database import Base


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite://"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


# ── Domain builders ───────────────────────────────────────────────────


def make_order(
    order_id: str,
    lat: float = 28.6,
    lng: float = 77.2,
    weight: int = 1000,
    priority: Priority = Priority.MEDIUM,
) -> Order:
    return Order(
        order_id=order_id,
        location=Location(lat, lng),
        package_weight=weight,
        priority=priority,
        address=f"Address for {order_id}",
    )


def make_vehicle(
    vehicle_id: str,
    capacity: int = 10_000,
    lat: float = 28.6,
    lng: float = 77.2,
) -> Vehicle:
    return Vehicle(vehicle_id=vehicle_id, capacity=capacity, location=Location(lat, lng))


@pytest.fixture
def order_factory():
    return make_order


@pytest.fixture
def vehicle_factory():
    return make_vehicle


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, then drop everything."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
