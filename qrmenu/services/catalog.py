# qrmenu/services/catalog.py
from decimal import Decimal

import requests
from sqlalchemy.orm import Session

from qrmenu.domain.errors import ProductNotFound, StorageUnavailable
from qrmenu.domain.snapshots import ProductSnapshot
from qrmenu.repos.product_repo import ProductRepo
from qrmenu.utils.money import to_money
from qrmenu.utils.retry import http_retry
from qrmenu.utils.settings import CATALOG_BACKEND, CATALOG_SERVICE_URL, CATALOG_TIMEOUT_SECONDS
from qrmenu.utils.logging import get_logger

logger = get_logger(__name__)


class DbCatalogProvider:
    """Catalog Provider czytajacy tabele products (ta sama baza)."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def resolve_product(self, product_id: int) -> ProductSnapshot:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFound(product_id)

        return ProductSnapshot(
            product_id=product.id,
            name=product.name,
            unit_price=to_money(product.price),
            image=product.image,
            category_id=product.category_id,
            category_name=product.category.name if product.category else None,
        )


class HttpCatalogProvider:
    """Catalog Provider pytajacy catalog-service po HTTP."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout or CATALOG_TIMEOUT_SECONDS

    @http_retry()
    def _fetch(self, product_id: int) -> dict | None:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"CatalogClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    def resolve_product(self, product_id: int) -> ProductSnapshot:
        try:
            pdata = self._fetch(product_id)
        except requests.RequestException as e:
            # http_retry juz sie poddal
            logger.error(f"Catalog service unavailable for product {product_id}: {e}")
            raise StorageUnavailable("Catalog service is not available")

        if pdata is None:
            raise ProductNotFound(product_id)

        return ProductSnapshot(
            product_id=int(pdata.get("id", product_id)),
            name=pdata["name"],
            unit_price=to_money(Decimal(str(pdata["price"]))),
            image=pdata.get("image"),
            category_id=pdata.get("category_id"),
            category_name=pdata.get("category_name"),
        )


def get_catalog(db: Session):
    if CATALOG_BACKEND == "http":
        return HttpCatalogProvider()
    return DbCatalogProvider(db)
