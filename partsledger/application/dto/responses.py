"""Response DTOs for API endpoints.

Pydantic v2 models for API responses. Money is serialized as decimal
strings so no precision is lost on the wire.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from partsledger.core.entities import (
    AllocationSource,
    LocationKind,
    MovementKind,
    RecommendationConfidence,
)


class PartResponse(BaseModel):
    """Catalog part with its cached aggregates."""

    model_config = ConfigDict(from_attributes=True)

    part_code: str
    description: str
    category: str | None = None
    brand: str | None = None
    markup_percent: Decimal
    in_stock: int
    avg_cost: Decimal | None = None
    sell_price: Decimal | None = None
    stock_value: Decimal | None = None
    min_stock: int | None = None
    min_stock_override: int | None = None
    min_stock_override_reason: str | None = None
    reorder_threshold: int | None = None
    is_low_stock: bool = False
    times_used: int = 0
    first_used_at: datetime | None = None
    last_used_at: datetime | None = None
    location_code: str | None = None
    location_notes: str | None = None
    created_at: datetime
    updated_at: datetime


class PartListResponse(BaseModel):
    parts: list[PartResponse]
    total: int


class LedgerEntryResponse(BaseModel):
    """A stored ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    part_code: str
    quantity: int
    kind: MovementKind
    unit_cost: Decimal | None = None
    total_cost: Decimal | None = None
    from_location_code: str | None = None
    to_location_code: str | None = None
    job_id: str | None = None
    reference: str | None = None
    notes: str | None = None
    actor: str | None = None
    recorded_at: datetime


class MinStockRecommendationResponse(BaseModel):
    """Suggested reorder threshold and the figures behind it."""

    model_config = ConfigDict(from_attributes=True)

    part_code: str
    value: int
    confidence: RecommendationConfidence
    usage_rate_per_month: Decimal
    lead_time_days: int
    order_cycle_days: int
    window_days: int
    data_points: int


class PartHistoryResponse(BaseModel):
    part_code: str
    entries: list[LedgerEntryResponse]
    total: int


class FIFOLotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entry_id: int
    recorded_at: datetime
    quantity: int
    unit_cost: Decimal
    subtotal: Decimal


class ConsumptionPriceResponse(BaseModel):
    """FIFO pricing preview for a consumption."""

    model_config = ConfigDict(from_attributes=True)

    part_code: str
    requested: int
    priced_quantity: int
    shortfall: int
    is_fully_priced: bool
    total_cost: Decimal
    average_unit_cost: Decimal | None = None
    lots: list[FIFOLotResponse]


class AllocationResponse(BaseModel):
    """A part charged to a job."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: str
    part_code: str
    description: str | None = None
    quantity: int
    unit_cost: Decimal
    total_cost: Decimal
    markup_percent: Decimal
    sell_price: Decimal
    margin: Decimal
    source: AllocationSource
    ledger_entry_id: int | None = None
    notes: str | None = None
    created_at: datetime


class JobPartsResponse(BaseModel):
    job_id: str
    allocations: list[AllocationResponse]
    total: int


class JobCostsResponse(BaseModel):
    """Totals over a job's live allocations."""

    model_config = ConfigDict(from_attributes=True)

    job_id: str
    allocation_count: int
    parts_cost: Decimal
    parts_total: Decimal


class LocationResponse(BaseModel):
    """A storage location."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    name: str
    kind: LocationKind
    parent_code: str | None = None
    description: str | None = None
    label_number: str | None = None
    active: bool
    is_root: bool
    created_at: datetime


class LocationPathResponse(BaseModel):
    """Ancestry from the root down to the requested location."""

    code: str
    path: list[LocationResponse]
    display: str = Field(..., examples=["Shop > Shelf A > Crate 3"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="healthy, degraded or unhealthy")
    version: str
    uptime_seconds: float | None = None
    database: dict | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. PART_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict | None = Field(default=None, description="Structured error context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
