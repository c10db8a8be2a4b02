# qrmenu/services/analytics_service.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from qrmenu.data.models.order import OrderModel
from qrmenu.domain.errors import StorageUnavailable
from qrmenu.domain.status import OrderStatus
from qrmenu.repos.identity_repo import IdentityRepo
from qrmenu.repos.order_repo import OrderRepo
from qrmenu.repos.product_repo import ProductRepo
from qrmenu.utils.money import CENT, ZERO, to_money
from qrmenu.utils.settings import STATS_TOP_N, STATS_RECENT_N
from qrmenu.utils.logging import get_logger

logger = get_logger(__name__)

UNKNOWN = "Unknown"


def _as_utc(ts: datetime) -> datetime:
    # sqlite gubi strefe; zapisujemy zawsze w UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _revenue(orders: List[OrderModel]) -> Decimal:
    return sum((to_money(o.total) for o in orders), ZERO)


class AnalyticsService:
    """
    Statystyki zamowien: tylko odczyt, bez lockow koszyka/zamowien.
    Brakujacy produkt w historycznej linii -> linia pomijana, reszta liczona dalej.
    """

    def __init__(self, db: Session):
        self.orders = OrderRepo(db)
        self.products = ProductRepo(db)
        self.identity = IdentityRepo(db)

    def get_statistics(
        self,
        restaurant_id: Optional[int] = None,
        top_n: Optional[int] = None,
        recent_n: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        top_n = top_n if top_n and top_n > 0 else STATS_TOP_N
        recent_n = recent_n if recent_n and recent_n > 0 else STATS_RECENT_N
        now = _as_utc(now or datetime.now(timezone.utc))

        try:
            orders = self.orders.list_orders(restaurant_id)
            product_ids = {line.product_id for o in orders for line in o.lines}
            products = self.products.existing_ids(product_ids)
            restaurant_ids = {o.restaurant_id for o in orders} | {
                p.restaurant_id for p in products.values() if p.restaurant_id
            }
            restaurant_names = self.identity.restaurant_names(restaurant_ids)
            account_names = self.identity.account_names(o.account_id for o in orders)
            restaurants = self.identity.list_restaurants() if restaurant_id is None else []
        except SQLAlchemyError as e:
            logger.error(f"Statistics query failed: {e}")
            raise StorageUnavailable("Order storage is not available")

        logger.info(
            f"Computing statistics for {'restaurant ' + str(restaurant_id) if restaurant_id else 'platform'}: "
            f"{len(orders)} orders"
        )

        popular, by_revenue = self._product_stats(orders, products, restaurant_names, top_n)

        return {
            "restaurant_id": restaurant_id,
            "total_revenue": _revenue(orders),
            "total_orders": len(orders),
            "status_counts": self._status_counts(orders),
            "popular_products": popular,
            "top_revenue_products": by_revenue,
            "recent_orders": self._recent_orders(orders, account_names, restaurant_names, recent_n),
            "time_stats": self._time_stats(orders, now),
            "restaurant_stats": self._restaurant_stats(orders, restaurants),
        }

    @staticmethod
    def _status_counts(orders: List[OrderModel]) -> Dict[str, int]:
        counts = {s.value: 0 for s in OrderStatus}
        for o in orders:
            counts[OrderStatus(o.status).value] += 1
        return counts

    @staticmethod
    def _product_stats(orders, products, restaurant_names, top_n):
        stats: Dict[int, Dict[str, Any]] = {}
        skipped = 0

        for order in orders:
            for line in order.lines:
                product = products.get(line.product_id)
                if product is None:
                    skipped += 1
                    logger.warning(
                        f"Skipping line of order {order.id}: product {line.product_id} no longer exists"
                    )
                    continue

                entry = stats.get(product.id)
                if entry is None:
                    owner = product.restaurant_id or order.restaurant_id
                    entry = stats[product.id] = {
                        "product_id": product.id,
                        "name": product.name,
                        "restaurant_name": restaurant_names.get(owner, UNKNOWN),
                        "order_count": 0,
                        "revenue": ZERO,
                    }
                entry["order_count"] += line.quantity
                entry["revenue"] = to_money(entry["revenue"] + line.price_at_order * line.quantity)

        if skipped:
            logger.info(f"Skipped {skipped} order lines with missing products")

        rows = list(stats.values())
        popular = sorted(rows, key=lambda r: (-r["order_count"], -r["revenue"], r["product_id"]))
        by_revenue = sorted(rows, key=lambda r: (-r["revenue"], -r["order_count"], r["product_id"]))
        return popular[:top_n], by_revenue[:top_n]

    @staticmethod
    def _recent_orders(orders, account_names, restaurant_names, recent_n):
        recent = sorted(orders, key=lambda o: (_as_utc(o.created_at), o.id), reverse=True)[:recent_n]
        return [
            {
                "id": o.id,
                "created_at": o.created_at,
                "total": to_money(o.total),
                "status": o.status,
                "customer_name": o.customer_name or account_names.get(o.account_id, UNKNOWN),
                "restaurant_name": restaurant_names.get(o.restaurant_id, UNKNOWN),
            }
            for o in recent
        ]

    @staticmethod
    def _time_stats(orders, now: datetime) -> Dict[str, Dict[str, Any]]:
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        end = today + timedelta(days=1)
        # tydzien od poniedzialku
        periods = {
            "today": today,
            "this_week": today - timedelta(days=today.weekday()),
            "this_month": today.replace(day=1),
        }

        result = {}
        for name, start in periods.items():
            bucket = [o for o in orders if start <= _as_utc(o.created_at) < end]
            result[name] = {"orders": len(bucket), "revenue": _revenue(bucket)}
        return result

    @staticmethod
    def _restaurant_stats(orders, restaurants) -> List[Dict[str, Any]]:
        result = []
        for restaurant in restaurants:
            own = [o for o in orders if o.restaurant_id == restaurant.id]
            revenue = _revenue(own)
            average = (revenue / len(own)).quantize(CENT, rounding=ROUND_HALF_UP) if own else ZERO
            result.append(
                {
                    "id": restaurant.id,
                    "name": restaurant.name,
                    "total_orders": len(own),
                    "total_revenue": revenue,
                    "average_order_value": average,
                }
            )
        return result
