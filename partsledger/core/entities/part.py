"""Catalog part entity."""

import re
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from partsledger.core.exceptions import ValidationError

PART_CODE_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9._-]{0,49}$")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def normalize_part_code(part_code: str) -> str:
    """Uppercase and validate a caller-assigned part code."""
    code = (part_code or "").strip().upper()
    if not PART_CODE_PATTERN.match(code):
        raise ValidationError(
            "part_code",
            "must be 1-50 alphanumeric characters (plus '-', '_', '.')",
            part_code,
        )
    return code


class Part(BaseModel):
    """
    Current-state view of a stocked item.

    ``in_stock``, ``avg_cost`` and ``sell_price`` are cached projections of
    the ledger; only the aggregate projector writes them.
    """

    part_code: str
    description: str
    category: str | None = None
    brand: str | None = None
    markup_percent: Decimal = Decimal("20")

    # Cached aggregates
    in_stock: int = 0
    avg_cost: Decimal | None = None
    sell_price: Decimal | None = None

    # Replenishment
    min_stock: int | None = None
    min_stock_override: int | None = None
    min_stock_override_reason: str | None = None

    # Usage counters
    times_used: int = 0
    first_used_at: datetime | None = None
    last_used_at: datetime | None = None

    location_code: str | None = None  # lookup key, not ownership
    location_notes: str | None = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("part_code", mode="before")
    @classmethod
    def uppercase_code(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v

    @property
    def reorder_threshold(self) -> int | None:
        """Override wins over the base minimum."""
        if self.min_stock_override is not None:
            return self.min_stock_override
        return self.min_stock

    @property
    def is_low_stock(self) -> bool:
        threshold = self.reorder_threshold
        return threshold is not None and self.in_stock < threshold

    @property
    def stock_value(self) -> Decimal | None:
        if self.avg_cost is None:
            return None
        return self.avg_cost * self.in_stock


class RecommendationConfidence(str, Enum):
    """How much usage history backs a min-stock recommendation."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MinStockRecommendation(BaseModel):
    """Suggested reorder threshold derived from recent consumption."""

    part_code: str
    value: int
    confidence: RecommendationConfidence
    usage_rate_per_month: Decimal
    lead_time_days: int
    order_cycle_days: int
    window_days: int
    data_points: int
