from typing import Any, Dict

from sqlalchemy.orm import Session

from qrmenu.domain.errors import ConflictError, InvalidTransition, OrderNotFound
from qrmenu.domain.status import OrderStatus, can_transition
from qrmenu.repos.order_repo import OrderRepo
from qrmenu.services.order_service import order_to_view
from qrmenu.utils.retry import conflict_retry
from qrmenu.utils.logging import get_logger

logger = get_logger(__name__)


class OrderLifecycleManager:
    """
    Zmiany statusu zamowienia wg tabeli ALLOWED_TRANSITIONS.
    Walidacja zawsze na swiezo przeczytanym stanie, zapis warunkowy (version + status).
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def set_status(self, order_id: int, new_status: OrderStatus) -> Dict[str, Any]:
        new_status = OrderStatus(new_status)

        @conflict_retry()
        def attempt():
            return self._apply(order_id, new_status)

        return attempt()

    def _apply(self, order_id: int, new_status: OrderStatus) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)

        current = order.status
        if not can_transition(current, new_status):
            logger.info(f"Order {order_id}: rejected transition {current.value} -> {new_status.value}")
            raise InvalidTransition(current, new_status)

        rowcount = self.repo.update_order_status(
            order_id=order_id,
            expected_version=order.version,
            expected_status=current,
            status=new_status,
        )

        if rowcount == 0:
            self.repo.rollback()
            logger.warning(f"Konflikt wspolbieznosci na zamowieniu {order_id} (version {order.version})")
            raise ConflictError(f"Order {order_id} was modified by another operation")

        self.repo.commit()

        logger.info(f"Order {order_id} status updated {current.value} -> {new_status.value}")

        return order_to_view(self.repo.get_order(order_id))
