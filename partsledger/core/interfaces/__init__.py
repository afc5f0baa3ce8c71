"""Abstract interfaces for storage and external collaborators."""

from partsledger.core.interfaces.allocation_store import IAllocationStore
from partsledger.core.interfaces.job_directory import IJobDirectory
from partsledger.core.interfaces.ledger_store import ILedgerStore
from partsledger.core.interfaces.location_store import ILocationStore
from partsledger.core.interfaces.part_store import IPartStore
from partsledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory

__all__ = [
    "IPartStore",
    "ILedgerStore",
    "ILocationStore",
    "IAllocationStore",
    "IUnitOfWork",
    "UnitOfWorkFactory",
    "IJobDirectory",
]
