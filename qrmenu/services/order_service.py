# qrmenu/services/order_service.py
import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from qrmenu.data.models.order import OrderModel
from qrmenu.data.models.order_line import OrderLineModel
from qrmenu.domain.errors import InconsistentError, OrderNotFound
from qrmenu.domain.limits import check_amount, check_quantity
from qrmenu.domain.status import INITIAL_STATUS
from qrmenu.repos.cart_repo import CartRepo
from qrmenu.repos.order_repo import OrderRepo
from qrmenu.services.identity_service import IdentityService
from qrmenu.utils.money import sum_lines, to_money
from qrmenu.utils.logging import get_logger

logger = get_logger(__name__)

CUSTOMER_FIELDS = ("customer_name", "customer_email", "customer_phone", "special_requests")


def order_to_view(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "account_id": order.account_id,
        "restaurant_id": order.restaurant_id,
        "status": order.status,
        "total": to_money(order.total),
        "created_at": order.created_at,
        "lines": [
            {
                "product_id": line.product_id,
                "product_name": line.product_name,
                "quantity": line.quantity,
                "price_at_order": to_money(line.price_at_order),
            }
            for line in order.lines
        ],
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "customer_phone": order.customer_phone,
        "special_requests": order.special_requests,
    }


def merge_lines(lines: Iterable[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """
    Waliduje ilosci i skleja powtorzone produkty (klucz linii to order+product).
    Kolejnosc pierwszego wystapienia zostaje zachowana.
    """
    merged: Dict[int, int] = {}
    for product_id, quantity in lines:
        check_quantity(quantity)
        merged[product_id] = check_quantity(merged.get(product_id, 0) + quantity)
    return list(merged.items())


class OrderService:
    """
    Order Factory: koszyk albo lista (product_id, quantity) -> zamowienie.
    Ceny zawsze czytane z katalogu w chwili skladania zamowienia.
    """

    def __init__(self, db: Session, catalog):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.identity = IdentityService(db)
        self.catalog = catalog

    def place_order(
        self,
        account_id: int,
        restaurant_id: int,
        lines: Iterable[Tuple[int, int]],
        customer: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Use Case: Tworzenie zamówienia.

        1. Weryfikuje konto i restauracje
        2. Pobiera kazdy produkt z katalogu (brak -> ProductNotFound, nic nie zapisujemy)
        3. Kopiuje cene do linii (snapshot)
        4. Liczy total (ROUND_HALF_UP)
        5. Zapisuje zamowienie i linie w jednej transakcji
        """
        self.identity.resolve_account(account_id)
        self.identity.resolve_restaurant(restaurant_id)

        requested = merge_lines(lines)

        # najpierw wszystkie produkty, dopiero potem jakikolwiek zapis
        snapshots = [(self.catalog.resolve_product(pid), qty) for pid, qty in requested]

        total = check_amount(sum_lines((s.unit_price, qty) for s, qty in snapshots))

        order = OrderModel(
            account_id=account_id,
            restaurant_id=restaurant_id,
            status=INITIAL_STATUS,
            total=total,
            version=1,
            created_at=datetime.now(timezone.utc),
            **{k: v for k, v in (customer or {}).items() if k in CUSTOMER_FIELDS},
        )
        for snapshot, quantity in snapshots:
            order.lines.append(
                OrderLineModel(
                    product_id=snapshot.product_id,
                    product_name=snapshot.name,
                    quantity=quantity,
                    price_at_order=snapshot.unit_price,
                )
            )

        try:
            created = self.repo.add_order(order)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error creating order for account {account_id}: {e}")
            raise

        logger.info(
            f"Order {created.id} created for account {account_id} at restaurant "
            f"{restaurant_id}: {len(snapshots)} lines, total {total}"
        )

        return order_to_view(created)

    def place_order_from_cart(
        self,
        account_id: int,
        restaurant_id: int,
        customer: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Use Case: Zamówienie z aktualnego koszyka.
        Koszyk nie jest czyszczony - klient robi to osobno (ClearCart).
        """
        self.identity.resolve_account(account_id)

        cart = self.cart_repo.get_cart_by_account(account_id)
        lines = [(i.product_id, i.quantity) for i in cart.items] if cart else []

        return self.place_order(account_id, restaurant_id, lines, customer)

    def get_order(self, order_id: int) -> Dict[str, Any]:
        """
        Use Case: Pobranie zamówienia (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise OrderNotFound(order_id)

        expected = sum_lines((line.price_at_order, line.quantity) for line in order.lines)
        if to_money(order.total) != expected:
            logger.error(f"Order {order_id} total {order.total} does not match lines ({expected})")
            raise InconsistentError(f"Order {order_id} total does not match its lines")

        return order_to_view(order)

    def list_orders(
        self,
        account_id: Optional[int] = None,
        restaurant_id: Optional[int] = None,
        page: int = 0,
        size: int = 10,
    ) -> Dict[str, Any]:
        """
        Use Case: Historia zamówień (konto i/lub restauracja), stronicowana.
        Najnowsze pierwsze; strony liczone od 0.
        """
        self._resolve_filters(account_id, restaurant_id)
        page = max(page, 0)
        size = max(size, 1)

        orders = self.repo.find_orders(account_id, restaurant_id, limit=size, offset=page * size)
        total = self.repo.count_orders(account_id, restaurant_id)

        return {
            "items": [order_to_view(o) for o in orders],
            "total": total,
            "page": page,
            "size": size,
            "total_pages": math.ceil(total / size),
        }

    def count_orders(self, account_id: Optional[int] = None, restaurant_id: Optional[int] = None) -> int:
        self._resolve_filters(account_id, restaurant_id)
        return self.repo.count_orders(account_id, restaurant_id)

    def _resolve_filters(self, account_id: Optional[int], restaurant_id: Optional[int]):
        if account_id is not None:
            self.identity.resolve_account(account_id)
        if restaurant_id is not None:
            self.identity.resolve_restaurant(restaurant_id)
