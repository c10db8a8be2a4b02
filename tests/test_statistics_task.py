from unittest.mock import patch

from qrmenu.tasks.statistics import compute_statistics_task


def test_task_returns_json_report(db, order_service, session_factory):
    order_service.place_order(1, 7, [(10, 1), (11, 1)])

    with patch("qrmenu.tasks.statistics.SessionLocal", session_factory):
        result = compute_statistics_task(7, top_n=1)

    assert result["restaurant_id"] == 7
    assert result["total_orders"] == 1
    assert result["total_revenue"] == "13.50"
    assert [p["product_id"] for p in result["popular_products"]] == [11]
    assert result["status_counts"]["PENDING"] == 1
