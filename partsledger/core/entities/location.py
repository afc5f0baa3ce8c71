"""Storage location entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class LocationKind(str, Enum):
    """Types of storage locations."""

    VEHICLE = "vehicle"
    BUILDING = "building"
    CONTAINER = "container"


class StorageLocation(BaseModel):
    """A node in the storage location tree (truck bin, shop shelf, crate)."""

    code: str
    name: str
    kind: LocationKind
    parent_code: str | None = None
    description: str | None = None
    label_number: str | None = None
    active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_root(self) -> bool:
        return self.parent_code is None


def normalize_location_code(code: str) -> str:
    """Location codes compare case-insensitively; stored uppercase."""
    return code.strip().upper()
