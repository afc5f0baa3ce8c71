"""Core domain entities."""

from partsledger.core.entities.allocation import (
    AllocationSource,
    JobCostSummary,
    JobPartAllocation,
)
from partsledger.core.entities.ledger import (
    ConsumptionPrice,
    FIFOLot,
    LedgerEntry,
    MovementKind,
    PartProjection,
)
from partsledger.core.entities.location import (
    LocationKind,
    StorageLocation,
    normalize_location_code,
)
from partsledger.core.entities.part import (
    MinStockRecommendation,
    Part,
    RecommendationConfidence,
    normalize_part_code,
)

__all__ = [
    # Part
    "Part",
    "normalize_part_code",
    "MinStockRecommendation",
    "RecommendationConfidence",
    # Ledger
    "LedgerEntry",
    "MovementKind",
    "FIFOLot",
    "ConsumptionPrice",
    "PartProjection",
    # Location
    "StorageLocation",
    "LocationKind",
    "normalize_location_code",
    # Allocation
    "JobPartAllocation",
    "AllocationSource",
    "JobCostSummary",
]
