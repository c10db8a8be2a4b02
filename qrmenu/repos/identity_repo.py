from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from qrmenu.data.models.account import AccountModel
from qrmenu.data.models.restaurant import RestaurantModel


class IdentityRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_account(self, account_id: int) -> AccountModel | None:
        return self.db.get(AccountModel, account_id)

    def get_restaurant(self, restaurant_id: int) -> RestaurantModel | None:
        return self.db.get(RestaurantModel, restaurant_id)

    def list_restaurants(self):
        return list(self.db.execute(select(RestaurantModel).order_by(RestaurantModel.id)).scalars().all())

    def account_names(self, ids: Iterable[int]) -> Dict[int, str]:
        ids = set(ids)
        if not ids:
            return {}
        rows = self.db.execute(select(AccountModel).where(AccountModel.id.in_(ids))).scalars()
        return {a.id: a.display_name for a in rows}

    def restaurant_names(self, ids: Iterable[int]) -> Dict[int, str]:
        ids = set(ids)
        if not ids:
            return {}
        rows = self.db.execute(select(RestaurantModel).where(RestaurantModel.id.in_(ids))).scalars()
        return {r.id: r.name for r in rows}
