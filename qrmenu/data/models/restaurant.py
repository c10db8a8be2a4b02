from sqlalchemy import Column, Integer, String

from qrmenu.data.database import Base


class RestaurantModel(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    address = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
