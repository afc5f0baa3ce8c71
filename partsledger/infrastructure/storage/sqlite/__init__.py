"""SQLite storage implementations."""

from partsledger.infrastructure.storage.sqlite.allocation_store import SQLiteAllocationStore
from partsledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from partsledger.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from partsledger.infrastructure.storage.sqlite.location_store import SQLiteLocationStore
from partsledger.infrastructure.storage.sqlite.part_store import SQLitePartStore
from partsledger.infrastructure.storage.sqlite.unit_of_work import (
    SQLiteUnitOfWork,
    sqlite_uow_factory,
)

__all__ = [
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "SQLitePartStore",
    "SQLiteLedgerStore",
    "SQLiteLocationStore",
    "SQLiteAllocationStore",
    "SQLiteUnitOfWork",
    "sqlite_uow_factory",
]
