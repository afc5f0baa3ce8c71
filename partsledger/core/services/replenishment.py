"""
Min-stock recommendation from recent consumption.

A part is expected to be used at its recent rate for one lead time plus
one order cycle; the threshold covers that with a safety margin:

    value = max(ceil(uses / window_days * (lead_time + order_cycle) * safety), 1)

``uses`` counts consumption entries inside the window, less the
allocation reversals recorded there.
"""

from datetime import UTC, datetime, timedelta
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

from partsledger.core.entities.ledger import LedgerEntry, MovementKind
from partsledger.core.entities.part import MinStockRecommendation, RecommendationConfidence

DEFAULT_LEAD_TIME_DAYS = 3
DEFAULT_ORDER_CYCLE_DAYS = 7
DEFAULT_WINDOW_DAYS = 90
DEFAULT_SAFETY_FACTOR = Decimal("1.2")

REVERSAL_REFERENCE_PREFIX = "ALLOC-"


def count_uses(history: list[LedgerEntry], since: datetime) -> int:
    uses = 0
    for entry in history:
        if entry.recorded_at < since:
            continue
        if entry.kind is MovementKind.CONSUMPTION:
            uses += 1
        elif entry.kind is MovementKind.ADJUSTMENT and (entry.reference or "").startswith(
            REVERSAL_REFERENCE_PREFIX
        ):
            uses -= 1
    return max(uses, 0)


def confidence_for(uses: int) -> RecommendationConfidence:
    if uses > 10:
        return RecommendationConfidence.HIGH
    if uses > 3:
        return RecommendationConfidence.MEDIUM
    return RecommendationConfidence.LOW


def recommend_min_stock(
    part_code: str,
    history: list[LedgerEntry],
    now: datetime | None = None,
    lead_time_days: int = DEFAULT_LEAD_TIME_DAYS,
    order_cycle_days: int = DEFAULT_ORDER_CYCLE_DAYS,
    window_days: int = DEFAULT_WINDOW_DAYS,
    safety_factor: Decimal = DEFAULT_SAFETY_FACTOR,
) -> MinStockRecommendation:
    """Recommend a reorder threshold for ``part_code`` from its ledger history."""
    now = now or datetime.now(UTC)
    uses = count_uses(history, now - timedelta(days=window_days))

    daily_rate = Decimal(uses) / window_days
    expected = daily_rate * (lead_time_days + order_cycle_days) * safety_factor
    value = max(int(expected.to_integral_value(rounding=ROUND_CEILING)), 1)

    return MinStockRecommendation(
        part_code=part_code,
        value=value,
        confidence=confidence_for(uses),
        usage_rate_per_month=(daily_rate * 30).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
        lead_time_days=lead_time_days,
        order_cycle_days=order_cycle_days,
        window_days=window_days,
        data_points=uses,
    )
