"""
Parts catalog.

Holds the descriptive side of each part. Cached aggregates (stock, average
cost, sell price) are owned by the projector; the catalog only triggers a
re-projection when it changes an input to them (the markup). Reorder
thresholds can be pinned by hand or suggested from recent consumption.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from partsledger.config import get_logger
from partsledger.core.entities.location import normalize_location_code
from partsledger.core.entities.part import MinStockRecommendation, Part, normalize_part_code
from partsledger.core.exceptions import (
    DuplicatePartError,
    InvalidLocationError,
    PartInUseError,
    PartNotFoundError,
    ValidationError,
)
from partsledger.core.interfaces.unit_of_work import UnitOfWorkFactory
from partsledger.core.money import to_decimal
from partsledger.core.services.projector import AggregateProjector
from partsledger.core.services.replenishment import (
    DEFAULT_LEAD_TIME_DAYS,
    DEFAULT_ORDER_CYCLE_DAYS,
    DEFAULT_WINDOW_DAYS,
    recommend_min_stock,
)

logger = get_logger(__name__)

DEFAULT_OVERRIDE_REASON = "Manually set"

# Catalog administration may change these; everything else is derived or immutable.
UPDATABLE_FIELDS = frozenset(
    {
        "description",
        "category",
        "brand",
        "markup_percent",
        "min_stock",
        "min_stock_override",
        "min_stock_override_reason",
        "location_notes",
    }
)


def _check_thresholds(min_stock: int | None, min_stock_override: int | None) -> None:
    for field, value in (("min_stock", min_stock), ("min_stock_override", min_stock_override)):
        if value is not None and value < 0:
            raise ValidationError(field, "must not be negative", value)


class Catalog:
    """Catalog administration and lookups."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        projector: AggregateProjector | None = None,
        default_markup_percent: Decimal = Decimal("20"),
        lead_time_days: int = DEFAULT_LEAD_TIME_DAYS,
        order_cycle_days: int = DEFAULT_ORDER_CYCLE_DAYS,
        usage_window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        self._uow_factory = uow_factory
        self._projector = projector or AggregateProjector()
        self._default_markup = default_markup_percent
        self._lead_time_days = lead_time_days
        self._order_cycle_days = order_cycle_days
        self._usage_window_days = usage_window_days

    async def get(self, part_code: str) -> Part:
        code = normalize_part_code(part_code)
        async with self._uow_factory(read_only=True) as uow:
            part = await uow.parts.get(code)
        if part is None:
            raise PartNotFoundError(code)
        return part

    async def create(
        self,
        part_code: str,
        description: str,
        category: str | None = None,
        brand: str | None = None,
        markup_percent: Decimal | int | str | None = None,
        min_stock: int | None = None,
        min_stock_override: int | None = None,
        min_stock_override_reason: str | None = None,
        location_code: str | None = None,
        location_notes: str | None = None,
    ) -> Part:
        """Add a part with zero stock. ``location_code`` is its initial placement."""
        code = normalize_part_code(part_code)
        description = (description or "").strip()
        if not description:
            raise ValidationError("description", "must not be empty")

        markup = (
            self._default_markup
            if markup_percent is None
            else to_decimal(markup_percent, "markup_percent")
        )
        if markup < 0:
            raise ValidationError("markup_percent", "must not be negative", markup)
        _check_thresholds(min_stock, min_stock_override)

        async with self._uow_factory() as uow:
            if await uow.parts.get(code) is not None:
                raise DuplicatePartError(code)

            if location_code is not None:
                location_code = normalize_location_code(location_code)
                location = await uow.locations.get(location_code)
                if location is None:
                    raise InvalidLocationError(location_code, "location does not exist")
                if not location.active:
                    raise InvalidLocationError(location_code, "location is inactive")

            part = await uow.parts.create(
                Part(
                    part_code=code,
                    description=description,
                    category=category,
                    brand=brand,
                    markup_percent=markup,
                    min_stock=min_stock,
                    min_stock_override=min_stock_override,
                    min_stock_override_reason=min_stock_override_reason,
                    location_code=location_code,
                    location_notes=location_notes,
                )
            )

        logger.info("part_created", part_code=code, category=category)
        return part

    async def update(self, part_code: str, **changes: Any) -> Part:
        """Change descriptive fields. A markup change re-prices the part."""
        code = normalize_part_code(part_code)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                ", ".join(sorted(unknown)), "not editable through the catalog"
            )
        if "description" in changes and not (changes["description"] or "").strip():
            raise ValidationError("description", "must not be empty")
        if changes.get("markup_percent") is not None:
            changes["markup_percent"] = to_decimal(changes["markup_percent"], "markup_percent")
            if changes["markup_percent"] < 0:
                raise ValidationError(
                    "markup_percent", "must not be negative", changes["markup_percent"]
                )
        elif "markup_percent" in changes:
            raise ValidationError("markup_percent", "must not be null")

        async with self._uow_factory() as uow:
            part = await uow.parts.get(code)
            if part is None:
                raise PartNotFoundError(code)

            updated = part.model_copy(update=changes)
            _check_thresholds(updated.min_stock, updated.min_stock_override)
            updated = await uow.parts.update_descriptive(updated)

            if updated.markup_percent != part.markup_percent:
                updated = await self._projector.recompute(uow, code)

        logger.info("part_updated", part_code=code, fields=sorted(changes))
        return updated

    async def delete(self, part_code: str) -> None:
        """Delete a part nothing references. Referenced parts are rejected."""
        code = normalize_part_code(part_code)
        async with self._uow_factory() as uow:
            if await uow.parts.get(code) is None:
                raise PartNotFoundError(code)

            entry_count = await uow.ledger.count_for_part(code)
            allocation_count = await uow.allocations.count_for_part(code)
            if entry_count or allocation_count:
                raise PartInUseError(code, entry_count, allocation_count)

            await uow.parts.delete(code)

        logger.info("part_deleted", part_code=code)

    async def list_parts(
        self, category: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[Part]:
        async with self._uow_factory(read_only=True) as uow:
            return await uow.parts.list_parts(category=category, limit=limit, offset=offset)

    async def low_stock(self) -> list[Part]:
        """Parts below their reorder threshold, emptiest first."""
        async with self._uow_factory(read_only=True) as uow:
            candidates = await uow.parts.list_with_threshold()
        return sorted(
            (p for p in candidates if p.is_low_stock),
            key=lambda p: (p.in_stock, p.part_code),
        )

    async def search(self, query: str, limit: int = 50) -> list[Part]:
        """Parts whose code, description or brand contains ``query``, by code."""
        if limit < 1:
            raise ValidationError("limit", "must be at least 1", limit)
        async with self._uow_factory(read_only=True) as uow:
            return await uow.parts.search((query or "").strip(), limit=limit)

    async def recommend_min_stock(
        self, part_code: str, now: datetime | None = None
    ) -> MinStockRecommendation:
        """Suggest a reorder threshold from the part's recent consumption."""
        code = normalize_part_code(part_code)
        async with self._uow_factory(read_only=True) as uow:
            if await uow.parts.get(code) is None:
                raise PartNotFoundError(code)
            history = await uow.ledger.history(code)

        return recommend_min_stock(
            code,
            history,
            now=now,
            lead_time_days=self._lead_time_days,
            order_cycle_days=self._order_cycle_days,
            window_days=self._usage_window_days,
        )

    async def override_min_stock(
        self, part_code: str, min_stock: int, reason: str | None = None
    ) -> Part:
        """Pin the reorder threshold, recording why."""
        part = await self.update(
            part_code,
            min_stock_override=min_stock,
            min_stock_override_reason=reason or DEFAULT_OVERRIDE_REASON,
        )
        logger.info(
            "min_stock_overridden",
            part_code=part.part_code,
            min_stock=min_stock,
            reason=part.min_stock_override_reason,
        )
        return part
