"""Unit tests for min-stock recommendations."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from partsledger.core.entities import LedgerEntry, MovementKind, RecommendationConfidence
from partsledger.core.services.replenishment import (
    confidence_for,
    count_uses,
    recommend_min_stock,
)

NOW = datetime(2024, 6, 1, tzinfo=UTC)


def used(days_ago: int, quantity: int = 1) -> LedgerEntry:
    return LedgerEntry(
        part_code="W100",
        quantity=-quantity,
        kind=MovementKind.CONSUMPTION,
        unit_cost=Decimal("5.00"),
        job_id="J-1",
        recorded_at=NOW - timedelta(days=days_ago),
    )


def reversal(days_ago: int) -> LedgerEntry:
    return LedgerEntry(
        part_code="W100",
        quantity=1,
        kind=MovementKind.ADJUSTMENT,
        unit_cost=Decimal("5.00"),
        reference="ALLOC-7",
        recorded_at=NOW - timedelta(days=days_ago),
    )


class TestCountUses:
    def test_only_consumption_inside_window(self):
        history = [
            LedgerEntry(
                part_code="W100",
                quantity=10,
                kind=MovementKind.PURCHASE,
                unit_cost=Decimal("5.00"),
                recorded_at=NOW - timedelta(days=100),
            ),
            used(95),
            used(30, quantity=4),
            used(1),
            LedgerEntry(
                part_code="W100",
                quantity=-1,
                kind=MovementKind.LOSS,
                recorded_at=NOW - timedelta(days=2),
            ),
        ]

        assert count_uses(history, NOW - timedelta(days=90)) == 2

    def test_reversals_cancel_uses(self):
        assert count_uses([used(5), reversal(4)], NOW - timedelta(days=90)) == 0

    def test_never_negative(self):
        assert count_uses([reversal(4)], NOW - timedelta(days=90)) == 0


class TestConfidence:
    @pytest.mark.parametrize(
        ("uses", "expected"),
        [
            (0, RecommendationConfidence.LOW),
            (3, RecommendationConfidence.LOW),
            (4, RecommendationConfidence.MEDIUM),
            (10, RecommendationConfidence.MEDIUM),
            (11, RecommendationConfidence.HIGH),
        ],
    )
    def test_thresholds(self, uses: int, expected: RecommendationConfidence):
        assert confidence_for(uses) is expected


class TestRecommendMinStock:
    def test_no_usage_still_recommends_one(self):
        recommendation = recommend_min_stock("W100", [], now=NOW)

        assert recommendation.value == 1
        assert recommendation.confidence is RecommendationConfidence.LOW
        assert recommendation.usage_rate_per_month == Decimal("0.0")
        assert recommendation.lead_time_days == 3
        assert recommendation.order_cycle_days == 7
        assert recommendation.data_points == 0

    def test_steady_usage(self):
        # 27 uses in 90 days: 0.3/day over a 10-day cycle, x1.2 -> 3.6
        history = [used(days_ago) for days_ago in range(1, 28)]

        recommendation = recommend_min_stock("W100", history, now=NOW)

        assert recommendation.value == 4
        assert recommendation.confidence is RecommendationConfidence.HIGH
        assert recommendation.usage_rate_per_month == Decimal("9.0")
        assert recommendation.data_points == 27

    def test_longer_lead_time_raises_threshold(self):
        history = [used(days_ago) for days_ago in range(1, 28)]

        recommendation = recommend_min_stock("W100", history, now=NOW, lead_time_days=13)

        # 0.3/day over 20 days, x1.2 -> 7.2
        assert recommendation.value == 8
        assert recommendation.lead_time_days == 13
