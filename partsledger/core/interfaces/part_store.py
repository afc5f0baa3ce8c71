"""Abstract interface for catalog part storage."""

from abc import ABC, abstractmethod
from datetime import datetime

from partsledger.core.entities.ledger import PartProjection
from partsledger.core.entities.part import Part


class IPartStore(ABC):
    """Interface for catalog part persistence."""

    @abstractmethod
    async def create(self, part: Part) -> Part:
        """Insert a new part. Raises DuplicatePartError if the code exists."""
        pass

    @abstractmethod
    async def get(self, part_code: str) -> Part | None:
        """Get part by code."""
        pass

    @abstractmethod
    async def update_descriptive(self, part: Part) -> Part:
        """Persist catalog-administration fields (never cached aggregates)."""
        pass

    @abstractmethod
    async def apply_projection(self, part_code: str, projection: PartProjection) -> None:
        """Write the projector's cached aggregates back to the part."""
        pass

    @abstractmethod
    async def record_usage(self, part_code: str, used_at: datetime) -> None:
        """Increment times_used and stamp first/last used."""
        pass

    @abstractmethod
    async def delete(self, part_code: str) -> bool:
        """Delete a part row. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def list_parts(
        self, category: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[Part]:
        """List parts ordered by code."""
        pass

    @abstractmethod
    async def list_with_threshold(self) -> list[Part]:
        """Parts that have a reorder threshold configured."""
        pass

    @abstractmethod
    async def search(self, query: str, limit: int = 50) -> list[Part]:
        """Case-insensitive substring match on code, description or brand."""
        pass
