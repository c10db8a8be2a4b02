from sqlalchemy.orm import Session

from qrmenu.data.models.account import AccountModel
from qrmenu.data.models.restaurant import RestaurantModel
from qrmenu.domain.errors import AccountNotFound, RestaurantNotFound
from qrmenu.repos.identity_repo import IdentityRepo


class IdentityService:
    """Identity Provider: istnienie kont i restauracji."""

    def __init__(self, db: Session):
        self.repo = IdentityRepo(db)

    def resolve_account(self, account_id: int) -> AccountModel:
        account = self.repo.get_account(account_id)
        if not account:
            raise AccountNotFound(account_id)
        return account

    def resolve_restaurant(self, restaurant_id: int) -> RestaurantModel:
        restaurant = self.repo.get_restaurant(restaurant_id)
        if not restaurant:
            raise RestaurantNotFound(restaurant_id)
        return restaurant
