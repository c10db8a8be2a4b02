# qrmenu/data/seed.py
from decimal import Decimal

from qrmenu.data.database import SessionLocal, init_db
from qrmenu.data.models import AccountModel, CategoryModel, ProductModel, RestaurantModel
from qrmenu.utils.logging import get_logger

logger = get_logger(__name__)


def seed(db=None):
    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(AccountModel).first():
            return

        db.add(AccountModel(id=1, account_name="demo", first_name="Demo", last_name="Customer"))
        db.add(RestaurantModel(id=7, name="Demo Bistro", address="Main Street 1"))
        db.add(CategoryModel(id=1, name="Mains"))
        db.add(CategoryModel(id=2, name="Drinks"))
        db.flush()

        db.add_all([
            ProductModel(id=10, restaurant_id=7, category_id=1, name="Burger", price=Decimal("5.00"), image="/uploads/burger.png"),
            ProductModel(id=11, restaurant_id=7, category_id=1, name="Pizza", price=Decimal("8.50"), image="/uploads/pizza.png"),
            ProductModel(id=12, restaurant_id=7, category_id=2, name="Lemonade", price=Decimal("2.25"), image=None),
        ])
        db.commit()
        logger.info("Seeded demo account, restaurant and products")
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    init_db()
    seed()
