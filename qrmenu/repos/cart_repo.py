# qrmenu/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from qrmenu.data.models.cart import CartModel
from qrmenu.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_account(self, account_id: int) -> CartModel | None:
        # populate_existing - zawsze swiezy stan z bazy, nie z identity map
        return self.db.execute(
            select(CartModel)
            .where(CartModel.account_id == account_id)
            .options(selectinload(CartModel.items))
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_item(self, cart: CartModel, product_id: int) -> CartItemModel | None:
        for item in cart.items:
            if item.product_id == product_id:
                return item
        return None

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        """UPDATE carts SET ... WHERE id = :id AND version = :old_version; zwraca rowcount."""
        new_data.setdefault("updated_at", datetime.now(timezone.utc))
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
