# qrmenu/domain/errors.py


class OrderingError(Exception):
    """
    Bazowy blad domeny koszyka/zamowien.
    Na zewnatrz wychodzi tylko para (kind, message).
    """

    kind = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class NotFoundError(OrderingError):
    kind = "NotFound"


class AccountNotFound(NotFoundError):
    def __init__(self, account_id: int):
        super().__init__(f"Account not found with ID: {account_id}")
        self.account_id = account_id


class RestaurantNotFound(NotFoundError):
    def __init__(self, restaurant_id: int):
        super().__init__(f"Restaurant not found with ID: {restaurant_id}")
        self.restaurant_id = restaurant_id


class ProductNotFound(NotFoundError):
    def __init__(self, product_id: int):
        super().__init__(f"Product not found with ID: {product_id}")
        self.product_id = product_id


class OrderNotFound(NotFoundError):
    def __init__(self, order_id: int):
        super().__init__(f"Order not found with ID: {order_id}")
        self.order_id = order_id


class ItemNotFound(NotFoundError):
    def __init__(self, product_id: int):
        super().__init__(f"Item not found in cart: product {product_id}")
        self.product_id = product_id


class InvalidQuantity(OrderingError):
    kind = "InvalidQuantity"

    def __init__(self, quantity, message: str | None = None):
        super().__init__(message or f"Quantity must be at least 1, got {quantity}")
        self.quantity = quantity


class InvalidTransition(OrderingError):
    kind = "InvalidTransition"

    def __init__(self, current, target):
        super().__init__(f"Cannot change order status from {current.value} to {target.value}")
        self.current = current
        self.target = target


class ConflictError(OrderingError):
    """Wykryta rownolegla modyfikacja (optimistic locking) - mozna powtorzyc."""

    kind = "Conflict"


class InconsistentError(OrderingError):
    """Suma nie zgadza sie z liniami. To jest bug, nie blad uzytkownika."""

    kind = "Inconsistent"


class StorageUnavailable(OrderingError):
    kind = "Unavailable"
