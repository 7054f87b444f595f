"""Utilidades de formato para mensajes al usuario."""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: Decimal | float) -> int:
    """
    Redondea al entero más cercano con .5 hacia arriba.

    `round()` de Python usa redondeo bancario; los cálculos de meses
    necesitan el redondeo aritmético habitual.
    """
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_amount(amount: Decimal | float, symbol: str = "$") -> str:
    """
    Formatea un monto para mensajes.

    Example:
        >>> format_amount(Decimal("1234.5"))
        '$1,234.50'
    """
    return f"{symbol}{Decimal(str(amount)):,.2f}"


def to_cents(amount: Decimal | float) -> Decimal:
    """Redondea un monto a centavos (2 decimales, .5 hacia arriba)."""
    return Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
