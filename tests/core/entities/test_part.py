"""Unit tests for the Part entity."""

from decimal import Decimal

import pytest

from partsledger.core.entities import Part, normalize_part_code
from partsledger.core.exceptions import ValidationError


class TestPart:
    def test_defaults(self):
        part = Part(part_code="w100", description="Wiper blade")
        assert part.part_code == "W100"
        assert part.in_stock == 0
        assert part.markup_percent == Decimal("20")
        assert part.avg_cost is None
        assert part.times_used == 0

    def test_override_wins_over_min_stock(self):
        part = Part(part_code="W100", description="x", min_stock=5, min_stock_override=2)
        assert part.reorder_threshold == 2

    def test_low_stock(self):
        part = Part(part_code="W100", description="x", in_stock=1, min_stock=2)
        assert part.is_low_stock

    def test_no_threshold_never_low(self):
        assert not Part(part_code="W100", description="x", in_stock=-4).is_low_stock

    def test_stock_value(self):
        part = Part(part_code="W100", description="x", in_stock=8, avg_cost=Decimal("6.00"))
        assert part.stock_value == Decimal("48.00")


class TestNormalizePartCode:
    def test_uppercases_and_strips(self):
        assert normalize_part_code("  oil-5w30 ") == "OIL-5W30"

    @pytest.mark.parametrize("code", ["", "   ", "-LEADING", "has space", "x" * 51])
    def test_rejects_invalid(self, code: str):
        with pytest.raises(ValidationError):
            normalize_part_code(code)
