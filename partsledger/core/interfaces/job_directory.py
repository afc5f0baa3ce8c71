"""Hook into the host application's job records."""

from abc import ABC, abstractmethod


class IJobDirectory(ABC):
    """Answers whether a job id exists. Job CRUD lives outside the ledger."""

    @abstractmethod
    async def exists(self, job_id: str) -> bool:
        pass
