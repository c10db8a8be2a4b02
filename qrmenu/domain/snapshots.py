# qrmenu/domain/snapshots.py
from dataclasses import dataclass
from decimal import Decimal
from typing import NamedTuple, Optional


@dataclass(frozen=True)
class ProductSnapshot:
    """
    Stan produktu z katalogu w chwili odczytu.
    Kopiowany do pozycji koszyka / linii zamowienia, nigdy nie odswiezany.
    """

    product_id: int
    name: str
    unit_price: Decimal
    image: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None


class OrderLineKey(NamedTuple):
    order_id: int
    product_id: int
