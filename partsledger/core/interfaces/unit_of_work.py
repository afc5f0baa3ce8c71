"""Abstract transactional unit of work."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from types import TracebackType
from typing import Self

from partsledger.core.interfaces.allocation_store import IAllocationStore
from partsledger.core.interfaces.ledger_store import ILedgerStore
from partsledger.core.interfaces.location_store import ILocationStore
from partsledger.core.interfaces.part_store import IPartStore


class IUnitOfWork(ABC):
    """
    One atomic unit over all stores.

    Usage:
        async with uow_factory() as uow:
            await uow.ledger.append(...)

    Commits when the block exits normally, rolls back on any exception.
    """

    parts: IPartStore
    ledger: ILedgerStore
    locations: ILocationStore
    allocations: IAllocationStore

    @abstractmethod
    async def __aenter__(self) -> Self:
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        pass


# Called as factory() for writes, factory(read_only=True) for reads.
UnitOfWorkFactory = Callable[..., IUnitOfWork]
