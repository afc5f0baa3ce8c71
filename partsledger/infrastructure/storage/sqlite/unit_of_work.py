"""SQLite unit of work: every store bound to one pooled connection."""

from contextlib import AbstractAsyncContextManager
from types import TracebackType
from typing import Self

import aiosqlite

from partsledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory
from partsledger.infrastructure.storage.sqlite.allocation_store import SQLiteAllocationStore
from partsledger.infrastructure.storage.sqlite.connection import ConnectionPool
from partsledger.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from partsledger.infrastructure.storage.sqlite.location_store import SQLiteLocationStore
from partsledger.infrastructure.storage.sqlite.part_store import SQLitePartStore


class SQLiteUnitOfWork(IUnitOfWork):
    """
    One transaction over all stores.

    Writers open with ``BEGIN IMMEDIATE`` so the validate-then-append
    sequence runs under SQLite's single write lock.
    """

    def __init__(self, pool: ConnectionPool, read_only: bool = False):
        self._pool = pool
        self._read_only = read_only
        self._transaction: AbstractAsyncContextManager[aiosqlite.Connection] | None = None

    async def __aenter__(self) -> Self:
        self._transaction = self._pool.transaction(immediate=not self._read_only)
        conn = await self._transaction.__aenter__()
        self.parts = SQLitePartStore(conn)
        self.ledger = SQLiteLedgerStore(conn)
        self.locations = SQLiteLocationStore(conn)
        self.allocations = SQLiteAllocationStore(conn)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        assert self._transaction is not None
        transaction, self._transaction = self._transaction, None
        await transaction.__aexit__(exc_type, exc, tb)


def sqlite_uow_factory(pool: ConnectionPool) -> UnitOfWorkFactory:
    """Bind a pool; call the result as ``factory()`` or ``factory(read_only=True)``."""

    def factory(read_only: bool = False) -> SQLiteUnitOfWork:
        return SQLiteUnitOfWork(pool, read_only=read_only)

    return factory
