"""Data transfer objects for the HTTP API."""

from partsledger.application.dto.requests import (
    AllocatePartRequest,
    CreateLocationRequest,
    CreatePartRequest,
    LedgerEntryRequest,
    MinStockOverrideRequest,
    MoveLocationRequest,
    SetLocationActiveRequest,
    TransferPartRequest,
    UpdatePartRequest,
)
from partsledger.application.dto.responses import (
    AllocationResponse,
    ConsumptionPriceResponse,
    ErrorResponse,
    FIFOLotResponse,
    HealthResponse,
    JobCostsResponse,
    JobPartsResponse,
    LedgerEntryResponse,
    LocationPathResponse,
    LocationResponse,
    MinStockRecommendationResponse,
    PartHistoryResponse,
    PartListResponse,
    PartResponse,
)

__all__ = [
    # Requests
    "CreatePartRequest",
    "UpdatePartRequest",
    "LedgerEntryRequest",
    "AllocatePartRequest",
    "CreateLocationRequest",
    "MoveLocationRequest",
    "SetLocationActiveRequest",
    "TransferPartRequest",
    "MinStockOverrideRequest",
    # Responses
    "PartResponse",
    "PartListResponse",
    "LedgerEntryResponse",
    "PartHistoryResponse",
    "MinStockRecommendationResponse",
    "FIFOLotResponse",
    "ConsumptionPriceResponse",
    "AllocationResponse",
    "JobPartsResponse",
    "JobCostsResponse",
    "LocationResponse",
    "LocationPathResponse",
    "HealthResponse",
    "ErrorResponse",
]
