# qrmenu/repos/order_repo.py
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from qrmenu.data.models.order import OrderModel
from qrmenu.domain.status import OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # zamowienie + linie w jednej transakcji (cascade na relacji lines)
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .options(selectinload(OrderModel.lines))
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def update_order_status(
        self,
        order_id: int,
        expected_version: int,
        expected_status: OrderStatus,
        status: OrderStatus,
    ) -> int:
        """Warunkowy update statusu; 0 wierszy = ktos nas wyprzedzil."""
        result = self.db.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.version == expected_version,
                OrderModel.status == expected_status,
            )
            .values(status=status, version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def list_orders(self, restaurant_id: Optional[int] = None) -> List[OrderModel]:
        query = (
            select(OrderModel)
            .options(selectinload(OrderModel.lines))
            .execution_options(populate_existing=True)
        )
        query = self._filtered(query, None, restaurant_id)
        return list(self.db.execute(query.order_by(OrderModel.id)).scalars().all())

    @staticmethod
    def _filtered(query, account_id: Optional[int], restaurant_id: Optional[int]):
        if account_id is not None:
            query = query.where(OrderModel.account_id == account_id)
        if restaurant_id is not None:
            query = query.where(OrderModel.restaurant_id == restaurant_id)
        return query

    def find_orders(
        self,
        account_id: Optional[int] = None,
        restaurant_id: Optional[int] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[OrderModel]:
        """Strona historii zamowien, najnowsze pierwsze."""
        query = (
            select(OrderModel)
            .options(selectinload(OrderModel.lines))
            .execution_options(populate_existing=True)
        )
        query = self._filtered(query, account_id, restaurant_id)
        query = query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc()).limit(limit).offset(offset)
        return list(self.db.execute(query).scalars().all())

    def count_orders(self, account_id: Optional[int] = None, restaurant_id: Optional[int] = None) -> int:
        query = self._filtered(select(func.count(OrderModel.id)), account_id, restaurant_id)
        return self.db.execute(query).scalar_one()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
