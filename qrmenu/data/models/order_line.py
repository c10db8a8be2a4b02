from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship, validates

from qrmenu.data.database import Base
from qrmenu.domain.snapshots import OrderLineKey


class OrderLineModel(Base):
    """
    Linia zamowienia, klucz zlozony (order_id, product_id).
    product_id to tylko referencja - produkt moze potem zniknac z katalogu.
    """

    __tablename__ = "order_lines"

    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), primary_key=True)
    product_id = Column(Integer, primary_key=True)

    quantity = Column(Integer, nullable=False)
    price_at_order = Column(Numeric(10, 2), nullable=False)
    product_name = Column(String(255), nullable=False)

    order = relationship("OrderModel", back_populates="lines")

    @validates("price_at_order", "quantity")
    def _write_once(self, key, value):
        # cena i ilosc ustawiane tylko przy tworzeniu linii
        if getattr(self, key) is not None:
            raise AttributeError(f"OrderLine.{key} is immutable once set")
        return value

    @property
    def key(self) -> OrderLineKey:
        return OrderLineKey(self.order_id, self.product_id)
