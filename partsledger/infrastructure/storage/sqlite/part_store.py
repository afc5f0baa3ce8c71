"""SQLite implementation of catalog part storage."""

import re
from datetime import UTC, datetime

import aiosqlite

from partsledger.config import get_logger
from partsledger.core.entities.ledger import PartProjection
from partsledger.core.entities.part import Part
from partsledger.core.exceptions import DuplicatePartError
from partsledger.core.interfaces.part_store import IPartStore
from partsledger.infrastructure.storage.sqlite.columns import dec_in, dec_out, dt_in, dt_out

logger = get_logger(__name__)


class SQLitePartStore(IPartStore):
    """Catalog rows on a connection owned by the unit of work."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def create(self, part: Part) -> Part:
        now = datetime.now(UTC)
        part = part.model_copy(update={"created_at": now, "updated_at": now})
        try:
            await self._conn.execute(
                """
                INSERT INTO parts (
                    part_code, description, category, brand, markup_percent,
                    in_stock, avg_cost, sell_price,
                    min_stock, min_stock_override, min_stock_override_reason,
                    times_used, first_used_at, last_used_at,
                    location_code, location_notes, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    part.part_code,
                    part.description,
                    part.category,
                    part.brand,
                    dec_out(part.markup_percent),
                    part.in_stock,
                    dec_out(part.avg_cost),
                    dec_out(part.sell_price),
                    part.min_stock,
                    part.min_stock_override,
                    part.min_stock_override_reason,
                    part.times_used,
                    dt_out(part.first_used_at),
                    dt_out(part.last_used_at),
                    part.location_code,
                    part.location_notes,
                    dt_out(part.created_at),
                    dt_out(part.updated_at),
                ),
            )
        except aiosqlite.IntegrityError as e:
            if "UNIQUE" in str(e) or "PRIMARY KEY" in str(e):
                raise DuplicatePartError(part.part_code) from e
            raise
        logger.debug("part_row_inserted", part_code=part.part_code)
        return part

    async def get(self, part_code: str) -> Part | None:
        cursor = await self._conn.execute(
            "SELECT * FROM parts WHERE part_code = ?", (part_code,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_part(row)

    async def update_descriptive(self, part: Part) -> Part:
        part = part.model_copy(update={"updated_at": datetime.now(UTC)})
        await self._conn.execute(
            """
            UPDATE parts SET
                description = ?,
                category = ?,
                brand = ?,
                markup_percent = ?,
                min_stock = ?,
                min_stock_override = ?,
                min_stock_override_reason = ?,
                location_notes = ?,
                updated_at = ?
            WHERE part_code = ?
            """,
            (
                part.description,
                part.category,
                part.brand,
                dec_out(part.markup_percent),
                part.min_stock,
                part.min_stock_override,
                part.min_stock_override_reason,
                part.location_notes,
                dt_out(part.updated_at),
                part.part_code,
            ),
        )
        return part

    async def apply_projection(self, part_code: str, projection: PartProjection) -> None:
        await self._conn.execute(
            """
            UPDATE parts SET
                in_stock = ?,
                avg_cost = ?,
                sell_price = ?,
                location_code = ?,
                updated_at = ?
            WHERE part_code = ?
            """,
            (
                projection.in_stock,
                dec_out(projection.avg_cost),
                dec_out(projection.sell_price),
                projection.location_code,
                dt_out(datetime.now(UTC)),
                part_code,
            ),
        )

    async def record_usage(self, part_code: str, used_at: datetime) -> None:
        stamp = dt_out(used_at)
        await self._conn.execute(
            """
            UPDATE parts SET
                times_used = times_used + 1,
                first_used_at = COALESCE(first_used_at, ?),
                last_used_at = ?
            WHERE part_code = ?
            """,
            (stamp, stamp, part_code),
        )

    async def delete(self, part_code: str) -> bool:
        cursor = await self._conn.execute(
            "DELETE FROM parts WHERE part_code = ?", (part_code,)
        )
        return cursor.rowcount > 0

    async def list_parts(
        self, category: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[Part]:
        if category is not None:
            cursor = await self._conn.execute(
                """
                SELECT * FROM parts WHERE category = ?
                ORDER BY part_code LIMIT ? OFFSET ?
                """,
                (category, limit, offset),
            )
        else:
            cursor = await self._conn.execute(
                "SELECT * FROM parts ORDER BY part_code LIMIT ? OFFSET ?",
                (limit, offset),
            )
        rows = await cursor.fetchall()
        return [self._row_to_part(row) for row in rows]

    async def search(self, query: str, limit: int = 50) -> list[Part]:
        pattern = "%" + re.sub(r"([\\%_])", r"\\\1", query) + "%"
        cursor = await self._conn.execute(
            """
            SELECT * FROM parts
            WHERE part_code LIKE ? ESCAPE '\\'
               OR description LIKE ? ESCAPE '\\'
               OR COALESCE(brand, '') LIKE ? ESCAPE '\\'
            ORDER BY part_code LIMIT ?
            """,
            (pattern, pattern, pattern, limit),
        )
        rows = await cursor.fetchall()
        return [self._row_to_part(row) for row in rows]

    async def list_with_threshold(self) -> list[Part]:
        cursor = await self._conn.execute(
            """
            SELECT * FROM parts
            WHERE min_stock IS NOT NULL OR min_stock_override IS NOT NULL
            ORDER BY part_code
            """
        )
        rows = await cursor.fetchall()
        return [self._row_to_part(row) for row in rows]

    def _row_to_part(self, row: aiosqlite.Row) -> Part:
        return Part(
            part_code=row["part_code"],
            description=row["description"],
            category=row["category"],
            brand=row["brand"],
            markup_percent=dec_in(row["markup_percent"]),
            in_stock=row["in_stock"],
            avg_cost=dec_in(row["avg_cost"]),
            sell_price=dec_in(row["sell_price"]),
            min_stock=row["min_stock"],
            min_stock_override=row["min_stock_override"],
            min_stock_override_reason=row["min_stock_override_reason"],
            times_used=row["times_used"],
            first_used_at=dt_in(row["first_used_at"]),
            last_used_at=dt_in(row["last_used_at"]),
            location_code=row["location_code"],
            location_notes=row["location_notes"],
            created_at=dt_in(row["created_at"]),
            updated_at=dt_in(row["updated_at"]),
        )
