# qrmenu/utils/money.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Zaokragla kwote do groszy (ROUND_HALF_UP). Floaty ida przez str()."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_lines(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Suma (cena * ilosc) po liniach, liczona dokladnie i zaokraglana raz na koncu."""
    total = sum((Decimal(price) * quantity for price, quantity in lines), Decimal("0"))
    return to_money(total)
