"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable, Generator
from decimal import Decimal
from pathlib import Path

import pytest

from partsledger.api.dependencies import get_app_settings
from partsledger.application.services import reset_services
from partsledger.config import reset_settings
from partsledger.core.entities import LedgerEntry, MovementKind, Part
from partsledger.core.interfaces import UnitOfWorkFactory
from partsledger.core.services import (
    AggregateProjector,
    Catalog,
    FIFOCostResolver,
    JobCostAllocator,
    Ledger,
    LocationGraph,
)
from partsledger.infrastructure.storage.sqlite import ConnectionPool, sqlite_uow_factory
from partsledger.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep settings and service singletons per test, with data under tmp_path."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    get_app_settings.cache_clear()
    reset_services()
    yield
    reset_services()
    reset_settings()
    get_app_settings.cache_clear()


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    await initialize_database(temp_db_path)
    return temp_db_path


@pytest.fixture
async def pool(migrated_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    pool = ConnectionPool(migrated_db, pool_size=2, busy_timeout=2000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def uow_factory(pool: ConnectionPool) -> UnitOfWorkFactory:
    return sqlite_uow_factory(pool)


@pytest.fixture
def ledger(uow_factory: UnitOfWorkFactory) -> Ledger:
    return Ledger(uow_factory, AggregateProjector())


@pytest.fixture
def catalog(uow_factory: UnitOfWorkFactory) -> Catalog:
    return Catalog(uow_factory, AggregateProjector())


@pytest.fixture
def resolver(uow_factory: UnitOfWorkFactory) -> FIFOCostResolver:
    return FIFOCostResolver(uow_factory)


@pytest.fixture
def location_graph(uow_factory: UnitOfWorkFactory, ledger: Ledger) -> LocationGraph:
    return LocationGraph(uow_factory, ledger)


@pytest.fixture
def allocator(
    uow_factory: UnitOfWorkFactory, ledger: Ledger, resolver: FIFOCostResolver
) -> JobCostAllocator:
    return JobCostAllocator(uow_factory, ledger, resolver)


@pytest.fixture
def purchase(ledger: Ledger) -> Callable:
    """Record a purchase: ``await purchase("W100", 10, "5.00")``."""

    async def _purchase(part_code: str, quantity: int, unit_cost: str) -> LedgerEntry:
        return await ledger.append(
            LedgerEntry(
                part_code=part_code,
                quantity=quantity,
                kind=MovementKind.PURCHASE,
                unit_cost=Decimal(unit_cost),
                reference="PO-TEST",
            )
        )

    return _purchase


@pytest.fixture
async def w100(catalog: Catalog) -> Part:
    return await catalog.create("W100", "Wiper blade 20in", category="wipers")
