"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between the API and the core services.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from partsledger.core.entities import AllocationSource, LocationKind, MovementKind


class CreatePartRequest(BaseModel):
    """Request to add a part to the catalog."""

    part_code: str = Field(..., min_length=1, max_length=50, examples=["W100"])
    description: str = Field(..., min_length=1, examples=["Wiper blade 20in"])
    category: str | None = None
    brand: str | None = None
    markup_percent: Decimal | None = Field(
        default=None, ge=0, description="Defaults to the configured markup"
    )
    min_stock: int | None = Field(default=None, ge=0)
    min_stock_override: int | None = Field(default=None, ge=0)
    min_stock_override_reason: str | None = None
    location_code: str | None = Field(default=None, description="Initial placement")
    location_notes: str | None = None


class UpdatePartRequest(BaseModel):
    """Partial update of catalog fields. Only fields sent are changed."""

    description: str | None = None
    category: str | None = None
    brand: str | None = None
    markup_percent: Decimal | None = Field(default=None, ge=0)
    min_stock: int | None = Field(default=None, ge=0)
    min_stock_override: int | None = Field(default=None, ge=0)
    min_stock_override_reason: str | None = None
    location_notes: str | None = None


class LedgerEntryRequest(BaseModel):
    """Request to append a movement to the ledger."""

    part_code: str
    quantity: int = Field(..., description="Signed delta; sign depends on kind")
    kind: MovementKind
    unit_cost: Decimal | None = Field(default=None, ge=0)
    from_location_code: str | None = None
    to_location_code: str | None = None
    job_id: str | None = None
    reference: str | None = Field(default=None, description="PO or supplier invoice")
    notes: str | None = None
    actor: str | None = None


class AllocatePartRequest(BaseModel):
    """Request to charge a part to a job."""

    part_code: str
    quantity: int = Field(..., gt=0)
    source: AllocationSource = AllocationSource.STOCK
    unit_cost: Decimal | None = Field(
        default=None, ge=0, description="Required for direct orders"
    )
    markup_percent: Decimal | None = Field(
        default=None, ge=0, description="Defaults to the part's markup"
    )
    notes: str | None = None
    actor: str | None = None


class CreateLocationRequest(BaseModel):
    """Request to create a storage location."""

    name: str = Field(..., min_length=1)
    kind: LocationKind
    code: str | None = Field(default=None, description="Generated when omitted")
    parent_code: str | None = None
    description: str | None = None
    label_number: str | None = None


class MoveLocationRequest(BaseModel):
    """Re-parent a location; null makes it a root."""

    parent_code: str | None = None


class SetLocationActiveRequest(BaseModel):
    active: bool


class TransferPartRequest(BaseModel):
    """Request to move a part between storage locations."""

    part_code: str
    from_location_code: str
    to_location_code: str
    reason: str | None = None
    actor: str | None = None


class MinStockOverrideRequest(BaseModel):
    """Pin a part's reorder threshold."""

    min_stock: int = Field(..., ge=0)
    reason: str | None = Field(default=None, description='Defaults to "Manually set"')
