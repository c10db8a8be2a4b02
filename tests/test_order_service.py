from decimal import Decimal

import pytest

from qrmenu.data.models import OrderLineModel, OrderModel, ProductModel
from qrmenu.domain.errors import (
    AccountNotFound,
    InconsistentError,
    InvalidQuantity,
    OrderNotFound,
    ProductNotFound,
    RestaurantNotFound,
)
from qrmenu.domain.snapshots import OrderLineKey
from qrmenu.domain.status import OrderStatus
from qrmenu.services.order_service import merge_lines
from qrmenu.utils.settings import MAX_ITEM_QUANTITY


def test_scenario_d_place_order(order_service):
    order = order_service.place_order(1, 7, [(10, 2)])

    assert order["total"] == Decimal("10.00")
    assert order["status"] == OrderStatus.PENDING
    assert order["account_id"] == 1
    assert order["restaurant_id"] == 7
    assert order["created_at"] is not None
    assert order["lines"] == [
        {"product_id": 10, "product_name": "Burger", "quantity": 2, "price_at_order": Decimal("5.00")}
    ]


def test_total_sums_all_lines(order_service):
    order = order_service.place_order(1, 7, [(10, 1), (11, 2), (12, 3)])
    assert order["total"] == Decimal("28.75")


def test_empty_order_is_allowed(order_service):
    order = order_service.place_order(1, 7, [])
    assert order["total"] == Decimal("0.00")
    assert order["lines"] == []
    assert order["status"] == OrderStatus.PENDING


def test_unknown_account(order_service):
    with pytest.raises(AccountNotFound):
        order_service.place_order(999, 7, [(10, 1)])


def test_unknown_restaurant(order_service):
    with pytest.raises(RestaurantNotFound) as exc:
        order_service.place_order(1, 999, [(10, 1)])
    assert exc.value.kind == "NotFound"


def test_missing_product_persists_nothing(order_service, db):
    with pytest.raises(ProductNotFound) as exc:
        order_service.place_order(1, 7, [(10, 1), (404, 1), (11, 1)])

    assert "404" in exc.value.message
    assert db.query(OrderModel).count() == 0
    assert db.query(OrderLineModel).count() == 0


def test_non_positive_line_quantity(order_service, db):
    with pytest.raises(InvalidQuantity):
        order_service.place_order(1, 7, [(10, 1), (11, 0)])
    assert db.query(OrderModel).count() == 0


def test_duplicate_products_are_merged(order_service):
    order = order_service.place_order(1, 7, [(10, 1), (11, 1), (10, 2)])

    assert [(l["product_id"], l["quantity"]) for l in order["lines"]] == [(10, 3), (11, 1)]
    assert order["total"] == Decimal("23.50")


def test_merge_lines_keeps_first_occurrence_order():
    assert merge_lines([(12, 1), (10, 1), (12, 4)]) == [(12, 5), (10, 1)]


def test_price_snapshot_is_not_affected_by_catalog_changes(order_service, db):
    placed = order_service.place_order(1, 7, [(10, 2)])

    db.get(ProductModel, 10).price = Decimal("7.00")
    db.commit()

    order = order_service.get_order(placed["id"])
    assert order["total"] == Decimal("10.00")
    assert order["lines"][0]["price_at_order"] == Decimal("5.00")

    # nowe zamowienie bierze juz nowa cene
    newer = order_service.place_order(1, 7, [(10, 2)])
    assert newer["total"] == Decimal("14.00")


def test_deleted_product_does_not_affect_existing_order(order_service, db):
    placed = order_service.place_order(1, 7, [(12, 4)])

    db.delete(db.get(ProductModel, 12))
    db.commit()

    order = order_service.get_order(placed["id"])
    assert order["total"] == Decimal("9.00")
    assert order["lines"][0]["product_name"] == "Lemonade"


def test_line_price_is_write_once(order_service, db):
    placed = order_service.place_order(1, 7, [(10, 1)])
    line = db.get(OrderLineModel, (placed["id"], 10))

    assert line.key == OrderLineKey(placed["id"], 10)
    with pytest.raises(AttributeError):
        line.price_at_order = Decimal("1.00")
    with pytest.raises(AttributeError):
        line.quantity = 5


def test_place_order_from_cart(order_service, cart_service, db):
    cart_service.add_item(1, 10, 2)
    cart_service.add_item(1, 12, 1)

    # cena w katalogu zmienia sie po dodaniu do koszyka
    db.get(ProductModel, 10).price = Decimal("6.00")
    db.commit()

    order = order_service.place_order_from_cart(1, 7, customer={"customer_name": "Table 4"})

    assert order["total"] == Decimal("14.25")
    assert order["customer_name"] == "Table 4"
    # koszyk i zamowienie sa niezalezne - koszyk zostaje
    cart = cart_service.get_cart(1)
    assert len(cart["items"]) == 2
    assert cart["total"] == Decimal("12.25")


def test_place_order_from_missing_cart_is_empty_order(order_service):
    order = order_service.place_order_from_cart(2, 8)
    assert order["lines"] == []
    assert order["total"] == Decimal("0.00")


def test_customer_fields_are_stored(order_service):
    order = order_service.place_order(
        1,
        7,
        [(11, 1)],
        customer={
            "customer_name": "Jan",
            "customer_email": "jan@example.com",
            "customer_phone": "123",
            "special_requests": "no onions",
            "ignored": "x",
        },
    )
    fetched = order_service.get_order(order["id"])
    assert fetched["customer_email"] == "jan@example.com"
    assert fetched["special_requests"] == "no onions"


def test_get_unknown_order(order_service):
    with pytest.raises(OrderNotFound):
        order_service.get_order(12345)


def test_inconsistent_order_total_detected(order_service, db):
    placed = order_service.place_order(1, 7, [(10, 1)])

    order = db.get(OrderModel, placed["id"])
    order.total = Decimal("99.00")
    db.commit()

    with pytest.raises(InconsistentError):
        order_service.get_order(placed["id"])


def test_line_quantity_above_limit(order_service, db):
    with pytest.raises(InvalidQuantity):
        order_service.place_order(1, 7, [(10, 2**63)])
    assert db.query(OrderModel).count() == 0


def test_merged_quantity_above_limit():
    half = MAX_ITEM_QUANTITY // 2 + 1
    with pytest.raises(InvalidQuantity):
        merge_lines([(10, half), (10, half)])


def test_order_total_must_fit_money_column(order_service, db):
    db.get(ProductModel, 11).price = Decimal("99999.99")
    db.commit()

    with pytest.raises(InvalidQuantity):
        order_service.place_order(1, 7, [(11, MAX_ITEM_QUANTITY)])
    assert db.query(OrderModel).count() == 0


@pytest.fixture
def history(order_service):
    ids = [
        order_service.place_order(1, 7, [(10, 1)])["id"],
        order_service.place_order(2, 7, [(11, 1)])["id"],
        order_service.place_order(1, 7, [(12, 2)])["id"],
        order_service.place_order(1, 8, [(10, 3)])["id"],
    ]
    return ids


def test_list_orders_by_account_is_paginated(order_service, history):
    first_page = order_service.list_orders(account_id=1, size=2)

    assert first_page["total"] == 3
    assert first_page["total_pages"] == 2
    # najnowsze pierwsze
    assert [o["id"] for o in first_page["items"]] == [history[3], history[2]]

    second_page = order_service.list_orders(account_id=1, page=1, size=2)
    assert [o["id"] for o in second_page["items"]] == [history[0]]
    assert second_page["items"][0]["lines"][0]["product_id"] == 10


def test_list_orders_by_restaurant(order_service, history):
    page = order_service.list_orders(restaurant_id=7)
    assert page["total"] == 3
    assert {o["restaurant_id"] for o in page["items"]} == {7}

    both = order_service.list_orders(account_id=1, restaurant_id=7)
    assert [o["id"] for o in both["items"]] == [history[2], history[0]]


def test_list_orders_past_last_page(order_service, history):
    page = order_service.list_orders(account_id=2, page=5)
    assert page["items"] == []
    assert page["total"] == 1


def test_count_orders(order_service, history):
    assert order_service.count_orders(account_id=1) == 3
    assert order_service.count_orders(restaurant_id=8) == 1
    assert order_service.count_orders() == 4


def test_list_orders_unknown_account(order_service):
    with pytest.raises(AccountNotFound):
        order_service.list_orders(account_id=999)
    with pytest.raises(RestaurantNotFound):
        order_service.count_orders(restaurant_id=999)
