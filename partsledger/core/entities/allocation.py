"""Job cost allocation entities."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class AllocationSource(str, Enum):
    """Where an allocated part came from."""

    STOCK = "stock"
    DIRECT_ORDER = "direct_order"


class JobPartAllocation(BaseModel):
    """A quantity of a part charged to a job at a locked-in cost."""

    id: int | None = None
    job_id: str
    part_code: str
    description: str | None = None
    quantity: int = Field(..., gt=0)
    unit_cost: Decimal
    total_cost: Decimal
    markup_percent: Decimal
    sell_price: Decimal  # for the whole quantity
    source: AllocationSource
    ledger_entry_id: int | None = None  # stock source only
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def margin(self) -> Decimal:
        return self.sell_price - self.total_cost


class JobCostSummary(BaseModel):
    """Totals over a job's live allocations."""

    job_id: str
    allocation_count: int = 0
    parts_cost: Decimal = Decimal("0.00")
    parts_total: Decimal = Decimal("0.00")
