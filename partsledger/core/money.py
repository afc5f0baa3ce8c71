"""
Fixed-point money helpers.

Costs are carried as ``Decimal`` end to end. Lot subtotals stay exact;
rounding is applied once, to the final figure.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from partsledger.core.exceptions import ValidationError

CENT = Decimal("0.01")
UNIT_COST_QUANTUM = Decimal("0.0001")
HUNDRED = Decimal("100")


def to_decimal(value: Decimal | int | float | str, field: str = "amount") -> Decimal:
    """Convert to Decimal without going through binary float repr.

    Raises:
        ValidationError: the value is not a finite number
    """
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(field, "must be a number", value) from None
    if not result.is_finite():
        raise ValidationError(field, "must be a finite number", value)
    return result


def round_money(value: Decimal) -> Decimal:
    """Round a monetary total to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_unit_cost(value: Decimal) -> Decimal:
    """Round a per-unit cost to four places."""
    return value.quantize(UNIT_COST_QUANTUM, rounding=ROUND_HALF_UP)


def markup_factor(markup_percent: Decimal) -> Decimal:
    """20 -> 1.20"""
    return Decimal(1) + markup_percent / HUNDRED


def apply_markup(cost: Decimal, markup_percent: Decimal, quantity: int = 1) -> Decimal:
    """Sell price for ``quantity`` units at ``cost`` each, rounded to cents."""
    return round_money(cost * markup_factor(markup_percent) * quantity)
