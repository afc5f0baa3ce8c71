"""Ledger entities: movements, FIFO lots and projections."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MovementKind(str, Enum):
    """Closed set of inventory movement kinds."""

    PURCHASE = "purchase"
    CONSUMPTION = "consumption"
    DIRECT_ORDER = "direct_order"
    RETURN_TO_SUPPLIER = "return_to_supplier"
    CUSTOMER_RETURN = "customer_return"
    LOSS = "loss"
    TRANSFER = "transfer"
    ADJUSTMENT = "adjustment"

    @property
    def draws_from_stock(self) -> bool:
        """Outflows that may never take stock below zero."""
        return self in (
            MovementKind.CONSUMPTION,
            MovementKind.RETURN_TO_SUPPLIER,
            MovementKind.LOSS,
        )


class LedgerEntry(BaseModel):
    """One immutable inventory movement. ``id`` is the sequence number."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    part_code: str
    quantity: int  # signed delta
    kind: MovementKind
    unit_cost: Decimal | None = None
    from_location_code: str | None = None
    to_location_code: str | None = None
    job_id: str | None = None
    reference: str | None = None  # PO or supplier invoice number
    notes: str | None = None
    actor: str | None = None
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def total_cost(self) -> Decimal | None:
        if self.unit_cost is None:
            return None
        return self.unit_cost * self.quantity


class FIFOLot(BaseModel):
    """Quantity drawn from one purchase entry."""

    model_config = ConfigDict(frozen=True)

    entry_id: int
    recorded_at: datetime
    quantity: int
    unit_cost: Decimal
    subtotal: Decimal


class ConsumptionPrice(BaseModel):
    """Result of pricing a consumption against the purchase lots."""

    model_config = ConfigDict(frozen=True)

    part_code: str
    requested: int
    lots: tuple[FIFOLot, ...] = ()
    total_cost: Decimal = Decimal("0.00")
    average_unit_cost: Decimal | None = None

    @property
    def priced_quantity(self) -> int:
        return sum(lot.quantity for lot in self.lots)

    @property
    def shortfall(self) -> int:
        return max(0, self.requested - self.priced_quantity)

    @property
    def is_fully_priced(self) -> bool:
        return self.shortfall == 0


class PartProjection(BaseModel):
    """Aggregates derived from a part's full ledger history."""

    model_config = ConfigDict(frozen=True)

    in_stock: int
    avg_cost: Decimal | None
    sell_price: Decimal | None
    location_code: str | None
