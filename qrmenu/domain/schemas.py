# qrmenu/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, List, Optional
from decimal import Decimal
from datetime import datetime

from qrmenu.domain.status import OrderStatus
from qrmenu.utils.settings import MAX_ITEM_QUANTITY


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    # dolna granica sprawdzana w CartService (InvalidQuantity -> 400)
    quantity: int = Field(1, le=MAX_ITEM_QUANTITY, description="Ilość produktu")


class ItemQuantityIn(BaseModel):
    """Schema dla zmiany ilości; 0 lub mniej usuwa pozycję."""

    quantity: int = Field(..., le=MAX_ITEM_QUANTITY)


class CartItemOut(BaseModel):
    product_id: int
    name: str
    price: Decimal
    quantity: int
    image: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_id: int
    account_id: int
    items: List[CartItemOut]
    total: Decimal
    item_count: int

    model_config = ConfigDict(from_attributes=True)


class OrderLineIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., le=MAX_ITEM_QUANTITY)


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia z listy produktów."""

    account_id: int = Field(..., gt=0, description="ID konta (musi być > 0)")
    restaurant_id: int = Field(..., gt=0, description="ID restauracji (musi być > 0)")
    products: List[OrderLineIn] = Field(default_factory=list)
    customer_name: Optional[str] = Field(None, max_length=255)
    customer_email: Optional[str] = Field(None, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=50)
    special_requests: Optional[str] = None


class CheckoutIn(BaseModel):
    """Schema dla zamówienia z aktualnego koszyka."""

    restaurant_id: int = Field(..., gt=0)
    customer_name: Optional[str] = Field(None, max_length=255)
    customer_email: Optional[str] = Field(None, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=50)
    special_requests: Optional[str] = None


class OrderLineOut(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price_at_order: Decimal


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    account_id: int
    restaurant_id: int
    status: OrderStatus
    total: Decimal
    created_at: datetime
    lines: List[OrderLineOut]
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    special_requests: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StatusUpdateIn(BaseModel):
    status: OrderStatus


class OrderPageOut(BaseModel):
    """Strona historii zamówień (strony od 0)."""

    items: List[OrderOut]
    total: int
    page: int
    size: int
    total_pages: int


class OrderCountOut(BaseModel):
    count: int


class ProductStatOut(BaseModel):
    product_id: int
    name: str
    restaurant_name: str
    order_count: int
    revenue: Decimal


class RecentOrderOut(BaseModel):
    id: int
    created_at: datetime
    total: Decimal
    status: OrderStatus
    customer_name: str
    restaurant_name: str


class PeriodStatOut(BaseModel):
    orders: int
    revenue: Decimal


class RestaurantStatOut(BaseModel):
    id: int
    name: str
    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal


class StatisticsOut(BaseModel):
    """Schema dla statystyk (restauracja albo cała platforma)."""

    restaurant_id: Optional[int] = None
    total_revenue: Decimal
    total_orders: int
    status_counts: Dict[str, int]
    popular_products: List[ProductStatOut]
    top_revenue_products: List[ProductStatOut]
    recent_orders: List[RecentOrderOut]
    time_stats: Dict[str, PeriodStatOut]
    restaurant_stats: List[RestaurantStatOut] = Field(default_factory=list)


class StatisticsJobOut(BaseModel):
    task_id: str
    state: str
    result: Optional[StatisticsOut] = None
