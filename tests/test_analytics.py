from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from qrmenu.data.models import OrderModel, ProductModel
from qrmenu.domain.errors import StorageUnavailable
from qrmenu.domain.status import OrderStatus

# sroda
NOW = datetime(2026, 10, 14, 15, 30, tzinfo=timezone.utc)


def set_created_at(db, order_id, when):
    db.execute(update(OrderModel).where(OrderModel.id == order_id).values(created_at=when))
    db.commit()


@pytest.fixture
def orders(db, order_service, lifecycle):
    first = order_service.place_order(1, 7, [(10, 2), (12, 1)])  # 12.25
    second = order_service.place_order(2, 7, [(11, 3)])  # 25.50
    third = order_service.place_order(1, 8, [(10, 1)])  # 5.00
    lifecycle.set_status(second["id"], OrderStatus.ACCEPTED)
    lifecycle.set_status(third["id"], OrderStatus.CANCELLED)

    set_created_at(db, first["id"], NOW - timedelta(hours=2))
    set_created_at(db, second["id"], NOW - timedelta(days=2))  # poniedzialek
    set_created_at(db, third["id"], NOW - timedelta(days=10))  # ten miesiac, inny tydzien
    return first["id"], second["id"], third["id"]


def test_platform_wide_totals(analytics, orders):
    stats = analytics.get_statistics(now=NOW)

    assert stats["restaurant_id"] is None
    assert stats["total_orders"] == 3
    assert stats["total_revenue"] == Decimal("42.75")
    assert stats["status_counts"]["PENDING"] == 1
    assert stats["status_counts"]["ACCEPTED"] == 1
    assert stats["status_counts"]["CANCELLED"] == 1
    assert stats["status_counts"]["FINISHED"] == 0
    assert set(stats["status_counts"]) == {s.value for s in OrderStatus}


def test_restaurant_scope(analytics, orders):
    stats = analytics.get_statistics(restaurant_id=7, now=NOW)

    assert stats["total_orders"] == 2
    assert stats["total_revenue"] == Decimal("37.75")
    assert stats["restaurant_stats"] == []


def test_popular_products_by_count_and_revenue(analytics, orders):
    stats = analytics.get_statistics(now=NOW)

    popular = [(p["product_id"], p["order_count"], p["revenue"]) for p in stats["popular_products"]]
    # przy rownej liczbie decyduje przychod
    assert popular == [
        (11, 3, Decimal("25.50")),
        (10, 3, Decimal("15.00")),
        (12, 1, Decimal("2.25")),
    ]

    by_revenue = [p["product_id"] for p in stats["top_revenue_products"]]
    assert by_revenue == [11, 10, 12]
    assert stats["popular_products"][0]["restaurant_name"] == "Demo Bistro"


def test_top_n_limits_lists(analytics, orders):
    stats = analytics.get_statistics(top_n=1, recent_n=2, now=NOW)

    assert len(stats["popular_products"]) == 1
    assert len(stats["top_revenue_products"]) == 1
    assert len(stats["recent_orders"]) == 2


def test_recent_orders_newest_first(analytics, orders):
    first, second, third = orders
    stats = analytics.get_statistics(now=NOW)

    recent = stats["recent_orders"]
    assert [o["id"] for o in recent] == [first, second, third]
    assert recent[0]["customer_name"] == "Demo Customer"
    assert recent[1]["customer_name"] == "Ann Other"
    assert recent[2]["restaurant_name"] == "Second Kitchen"
    assert recent[2]["status"] == OrderStatus.CANCELLED


def test_time_buckets(analytics, orders):
    stats = analytics.get_statistics(now=NOW)
    time_stats = stats["time_stats"]

    assert time_stats["today"] == {"orders": 1, "revenue": Decimal("12.25")}
    assert time_stats["this_week"] == {"orders": 2, "revenue": Decimal("37.75")}
    assert time_stats["this_month"] == {"orders": 3, "revenue": Decimal("42.75")}


def test_restaurant_breakdown(analytics, orders):
    stats = analytics.get_statistics(now=NOW)

    by_id = {r["id"]: r for r in stats["restaurant_stats"]}
    assert by_id[7]["total_orders"] == 2
    assert by_id[7]["total_revenue"] == Decimal("37.75")
    assert by_id[7]["average_order_value"] == Decimal("18.88")
    assert by_id[8]["average_order_value"] == Decimal("5.00")


def test_deleted_product_lines_are_skipped(db, analytics, orders):
    db.delete(db.get(ProductModel, 12))
    db.commit()

    stats = analytics.get_statistics(now=NOW)

    assert 12 not in [p["product_id"] for p in stats["popular_products"]]
    # przychod liczony z totali zamowien, nie z linii
    assert stats["total_revenue"] == Decimal("42.75")


def test_empty_database_gives_empty_results(analytics):
    stats = analytics.get_statistics(now=NOW)

    assert stats["total_orders"] == 0
    assert stats["total_revenue"] == Decimal("0.00")
    assert stats["popular_products"] == []
    assert stats["recent_orders"] == []
    assert stats["time_stats"]["today"] == {"orders": 0, "revenue": Decimal("0.00")}


def test_unknown_restaurant_gives_empty_results(analytics, orders):
    stats = analytics.get_statistics(restaurant_id=999, now=NOW)
    assert stats["total_orders"] == 0
    assert stats["popular_products"] == []


def test_statistics_do_not_mutate_orders(db, analytics, orders):
    before = [(o.id, o.status, o.total, o.version) for o in db.query(OrderModel).order_by(OrderModel.id)]
    analytics.get_statistics(now=NOW)
    after = [(o.id, o.status, o.total, o.version) for o in db.query(OrderModel).order_by(OrderModel.id)]
    assert before == after


def test_storage_failure_is_surfaced(analytics):
    with patch.object(
        analytics.orders, "list_orders", side_effect=OperationalError("SELECT", {}, Exception("down"))
    ):
        with pytest.raises(StorageUnavailable) as exc:
            analytics.get_statistics()
    assert exc.value.kind == "Unavailable"
