# qrmenu/data/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from qrmenu.data.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)


class ProductModel(Base):
    """Produkt z menu. Dla rdzenia tylko do odczytu (Catalog Provider)."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(500), nullable=True)

    category = relationship("CategoryModel")
