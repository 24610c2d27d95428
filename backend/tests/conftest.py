"""
Main pytest configuration for all backend tests.

Every test runs against an in-memory SQLite database and the in-process
cache backend driven by a controllable clock.
"""

import os

import pytest
from sqlalchemy import event

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["USE_REDIS"] = "false"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["LOG_JSON"] = "false"

from petsocial.core.config import Settings  # noqa: E402
from petsocial.core.database import DatabaseManager  # noqa: E402
from petsocial.db.interceptor import (  # noqa: E402
    LookupCacheInvalidationInterceptor,
    uninstall_change_tracking,
)
from petsocial.infrastructure.cache.memory_backend import (  # noqa: E402
    MemoryCacheBackend,
)
from petsocial.models import (  # noqa: E402
    PetBreed,
    PetColor,
    PetFood,
    PetType,
    UserType,
)


class FakeClock:
    """Monotonic clock stand-in that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class QueryCounter:
    """Counts SELECT statements that read a given table."""

    def __init__(self):
        self.statements = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            self.statements.append(statement)

    def count(self, table: str) -> int:
        return sum(1 for s in self.statements if f"FROM {table}" in s)

    def reset(self) -> None:
        self.statements.clear()


@pytest.fixture
def test_settings():
    """Settings read from the test environment."""
    return Settings()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_cache(clock):
    """In-process cache whose TTLs follow the fake clock."""
    return MemoryCacheBackend(clock=clock)


@pytest.fixture
async def database(test_settings, memory_cache):
    """Fresh in-memory database wired to invalidate ``memory_cache``."""
    manager = DatabaseManager(test_settings)
    await manager.initialize(LookupCacheInvalidationInterceptor(memory_cache))
    await manager.create_schema()
    try:
        yield manager
    finally:
        await manager.close()
        uninstall_change_tracking()


@pytest.fixture
def query_counter(database):
    """Record SELECTs issued by the engine for the duration of a test."""
    counter = QueryCounter()
    event.listen(database.engine.sync_engine, "before_cursor_execute", counter)
    yield counter
    event.remove(database.engine.sync_engine, "before_cursor_execute", counter)


@pytest.fixture
async def seeded_database(database):
    """
    Lookup rows used across tests.

    Pet types: Dog(1), Cat(2), Other(3). Dog breeds are inserted out of
    display order so ordering is exercised.
    """
    async with database.session_factory() as session:
        session.add_all(
            [
                PetType(id=1, name="Dog", sort_order=1, image_path="/img/dog.png"),
                PetType(id=2, name="Cat", sort_order=2, image_path="/img/cat.png"),
                PetType(id=3, name="Other", sort_order=99),
            ]
        )
        await session.flush()
        session.add_all(
            [
                PetBreed(id=1, pet_type_id=1, name="Labrador", sort_order=2),
                PetBreed(id=2, pet_type_id=1, name="Beagle", sort_order=1),
                PetBreed(id=3, pet_type_id=1, name="Mix Breed", sort_order=100),
                PetBreed(id=4, pet_type_id=2, name="Siamese", sort_order=1),
                PetColor(id=1, name="Black", sort_order=2),
                PetColor(id=2, name="White", sort_order=1),
                PetColor(id=3, name="Mix Color", sort_order=100),
                PetFood(id=1, name="Dry", sort_order=1),
                PetFood(id=2, name="Wet", sort_order=2),
                UserType(id=1, name="Pet Owner", description="Owns pets"),
                UserType(id=2, name="Shelter", description="Rehomes pets"),
            ]
        )
        await session.commit()
    return database
