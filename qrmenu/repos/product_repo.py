from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from qrmenu.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .options(joinedload(ProductModel.category))
        ).scalar_one_or_none()

    def existing_ids(self, ids: Iterable[int]) -> Dict[int, ProductModel]:
        ids = set(ids)
        if not ids:
            return {}
        rows = self.db.execute(select(ProductModel).where(ProductModel.id.in_(ids))).scalars()
        return {p.id: p for p in rows}
