"""Column conversions shared by the SQLite stores."""

from datetime import UTC, datetime
from decimal import Decimal


def dec_out(value: Decimal | None) -> str | None:
    """Decimals are stored as exact strings, never REAL."""
    return str(value) if value is not None else None


def dec_in(value: str | None) -> Decimal | None:
    return Decimal(value) if value is not None else None


def dt_out(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat()


def dt_in(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
