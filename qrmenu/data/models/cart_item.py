from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from qrmenu.data.database import Base
from qrmenu.domain.snapshots import ProductSnapshot


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)

    # snapshot produktu z chwili dodania do koszyka
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(500), nullable=True)
    category_id = Column(Integer, nullable=True)
    category_name = Column(String(100), nullable=True)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (UniqueConstraint("cart_id", "product_id", name="u_cart_product"),)

    @classmethod
    def from_snapshot(cls, snapshot: ProductSnapshot, quantity: int) -> "CartItemModel":
        return cls(
            product_id=snapshot.product_id,
            quantity=quantity,
            name=snapshot.name,
            price=snapshot.unit_price,
            image=snapshot.image,
            category_id=snapshot.category_id,
            category_name=snapshot.category_name,
        )
