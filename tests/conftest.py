"""
Shared fixtures: in-memory SQLite database seeded with one account (1),
one restaurant (7) and products 10 ($5.00), 11 ($8.50), 12 ($2.25).
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CART_LOCK_ENABLED"] = "false"
os.environ["CATALOG_BACKEND"] = "db"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from qrmenu.data.database import init_db
from qrmenu.data.models import AccountModel, RestaurantModel
from qrmenu.data.seed import seed
from qrmenu.services.analytics_service import AnalyticsService
from qrmenu.services.cart_service import CartService
from qrmenu.services.catalog import DbCatalogProvider
from qrmenu.services.lock_service import LockService
from qrmenu.services.order_lifecycle import OrderLifecycleManager
from qrmenu.services.order_service import OrderService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    seed(session)
    session.add(AccountModel(id=2, account_name="second", first_name="Ann", last_name="Other"))
    session.add(RestaurantModel(id=8, name="Second Kitchen"))
    session.commit()
    yield session
    session.close()


@pytest.fixture
def lock_service():
    return LockService(enabled=False)


@pytest.fixture
def catalog(db):
    return DbCatalogProvider(db)


@pytest.fixture
def cart_service(db, catalog, lock_service):
    return CartService(db=db, catalog=catalog, lock_service=lock_service)


@pytest.fixture
def order_service(db, catalog):
    return OrderService(db, catalog)


@pytest.fixture
def lifecycle(db):
    return OrderLifecycleManager(db)


@pytest.fixture
def analytics(db):
    return AnalyticsService(db)
