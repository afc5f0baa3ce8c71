"""Abstract interface for the append-only ledger."""

from abc import ABC, abstractmethod

from partsledger.core.entities.ledger import LedgerEntry


class ILedgerStore(ABC):
    """Append-only movement log. There is deliberately no update or delete."""

    @abstractmethod
    async def append(self, entry: LedgerEntry) -> LedgerEntry:
        """Insert an entry and return it with its sequence id."""
        pass

    @abstractmethod
    async def get(self, entry_id: int) -> LedgerEntry | None:
        """Get a single entry by id."""
        pass

    @abstractmethod
    async def history(self, part_code: str, limit: int | None = None) -> list[LedgerEntry]:
        """Entries for a part in sequence order, oldest first."""
        pass

    @abstractmethod
    async def count_for_part(self, part_code: str) -> int:
        """Number of entries referencing a part."""
        pass
