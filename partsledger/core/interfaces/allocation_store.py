"""Abstract interface for job part allocation storage."""

from abc import ABC, abstractmethod

from partsledger.core.entities.allocation import JobPartAllocation


class IAllocationStore(ABC):
    """Interface for job part allocation persistence."""

    @abstractmethod
    async def create(self, allocation: JobPartAllocation) -> JobPartAllocation:
        """Insert an allocation and return it with its id."""
        pass

    @abstractmethod
    async def get(self, allocation_id: int) -> JobPartAllocation | None:
        """Get allocation by id."""
        pass

    @abstractmethod
    async def delete(self, allocation_id: int) -> bool:
        """Delete an allocation. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def list_for_job(self, job_id: str) -> list[JobPartAllocation]:
        """Allocations for a job in creation order."""
        pass

    @abstractmethod
    async def count_for_part(self, part_code: str) -> int:
        """Number of allocations referencing a part."""
        pass
