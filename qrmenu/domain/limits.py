# qrmenu/domain/limits.py
from decimal import Decimal

from qrmenu.domain.errors import InvalidQuantity
from qrmenu.utils.settings import MAX_ITEM_QUANTITY

# najwieksza kwota mieszczaca sie w kolumnie Numeric(10, 2)
MAX_AMOUNT = Decimal("99999999.99")


def check_quantity(quantity: int) -> int:
    if quantity is None or quantity < 1:
        raise InvalidQuantity(quantity)
    if quantity > MAX_ITEM_QUANTITY:
        raise InvalidQuantity(
            quantity, f"Quantity must not exceed {MAX_ITEM_QUANTITY}, got {quantity}"
        )
    return quantity


def check_amount(amount: Decimal) -> Decimal:
    if amount > MAX_AMOUNT:
        raise InvalidQuantity(None, f"Total {amount} exceeds the maximum amount {MAX_AMOUNT}")
    return amount
