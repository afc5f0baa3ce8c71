"""Abstract interface for storage location persistence."""

from abc import ABC, abstractmethod

from partsledger.core.entities.location import StorageLocation


class ILocationStore(ABC):
    """Interface for storage location persistence."""

    @abstractmethod
    async def create(self, location: StorageLocation) -> StorageLocation:
        """Insert a location. Raises DuplicateLocationError if the code exists."""
        pass

    @abstractmethod
    async def get(self, code: str) -> StorageLocation | None:
        """Get location by code."""
        pass

    @abstractmethod
    async def set_parent(self, code: str, parent_code: str | None) -> None:
        """Re-parent a location."""
        pass

    @abstractmethod
    async def set_active(self, code: str, active: bool) -> None:
        """Activate or deactivate a location."""
        pass

    @abstractmethod
    async def list_locations(self, active_only: bool = True) -> list[StorageLocation]:
        """List locations ordered by name."""
        pass

    @abstractmethod
    async def children(self, code: str) -> list[StorageLocation]:
        """Direct children of a location."""
        pass

    @abstractmethod
    async def last_generated_code(self, prefix: str) -> str | None:
        """Highest code of the form ``{prefix}-NNN``."""
        pass
