# qrmenu/api/routers/orders.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from qrmenu.api.dependencies import get_catalog_provider, http_error
from qrmenu.data.database import get_db
from qrmenu.domain.errors import OrderingError
from qrmenu.domain.schemas import OrderCountOut, OrderCreate, OrderOut, OrderPageOut, StatusUpdateIn
from qrmenu.services.order_lifecycle import OrderLifecycleManager
from qrmenu.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session = Depends(get_db), catalog=Depends(get_catalog_provider)) -> OrderService:
    return OrderService(db, catalog)


def get_lifecycle(db: Session = Depends(get_db)) -> OrderLifecycleManager:
    return OrderLifecycleManager(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, svc: OrderService = Depends(get_service)):
    """
    Tworzy zamówienie z listy produktów; status PENDING.
    """
    try:
        return svc.place_order(
            payload.account_id,
            payload.restaurant_id,
            [(p.product_id, p.quantity) for p in payload.products],
            customer=payload.model_dump(exclude={"account_id", "restaurant_id", "products"}),
        )
    except OrderingError as e:
        raise http_error(e)


@router.get("", response_model=OrderPageOut)
def list_orders(
    account_id: Optional[int] = Query(None, gt=0),
    restaurant_id: Optional[int] = Query(None, gt=0),
    page: int = Query(0, ge=0),
    size: int = Query(10, gt=0, le=100),
    svc: OrderService = Depends(get_service),
):
    """
    Historia zamówień konta i/lub restauracji, najnowsze pierwsze.
    """
    try:
        return svc.list_orders(account_id, restaurant_id, page=page, size=size)
    except OrderingError as e:
        raise http_error(e)


# przed /{order_id}, inaczej "count" lapie sie jako id
@router.get("/count", response_model=OrderCountOut)
def count_orders(
    account_id: Optional[int] = Query(None, gt=0),
    restaurant_id: Optional[int] = Query(None, gt=0),
    svc: OrderService = Depends(get_service),
):
    try:
        return {"count": svc.count_orders(account_id, restaurant_id)}
    except OrderingError as e:
        raise http_error(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, svc: OrderService = Depends(get_service)):
    try:
        return svc.get_order(order_id)
    except OrderingError as e:
        raise http_error(e)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: StatusUpdateIn,
    lifecycle: OrderLifecycleManager = Depends(get_lifecycle),
):
    try:
        return lifecycle.set_status(order_id, payload.status)
    except OrderingError as e:
        raise http_error(e)
