#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from qrmenu.data.models.account import AccountModel
from qrmenu.data.models.restaurant import RestaurantModel
from qrmenu.data.models.product import CategoryModel, ProductModel
from qrmenu.data.models.cart import CartModel
from qrmenu.data.models.cart_item import CartItemModel
from qrmenu.data.models.order import OrderModel
from qrmenu.data.models.order_line import OrderLineModel

__all__ = [
    "AccountModel",
    "RestaurantModel",
    "CategoryModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderLineModel",
]
