#qrmenu/api/routers/carts.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from qrmenu.api.dependencies import get_catalog_provider, get_lock_service, http_error
from qrmenu.data.database import get_db
from qrmenu.domain.errors import OrderingError
from qrmenu.domain.schemas import (
    CartOut,
    CheckoutIn,
    ItemIn,
    ItemQuantityIn,
    OrderOut,
)
from qrmenu.services.cart_service import CartService
from qrmenu.services.lock_service import LockService
from qrmenu.services.order_service import OrderService

router = APIRouter(prefix="/accounts/{account_id}/cart", tags=["carts"])


def get_service(
    db: Session = Depends(get_db),
    catalog=Depends(get_catalog_provider),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, catalog=catalog, lock_service=lock_service)


@router.get("", response_model=CartOut)
def get_cart(account_id: int, svc: CartService = Depends(get_service)):
    try:
        return svc.get_cart(account_id)
    except OrderingError as e:
        raise http_error(e)


@router.post("/items", response_model=CartOut)
def add_item(account_id: int, payload: ItemIn, svc: CartService = Depends(get_service)):
    try:
        return svc.add_item(account_id, payload.product_id, payload.quantity)
    except OrderingError as e:
        raise http_error(e)


@router.put("/items/{product_id}", response_model=CartOut)
def update_item(
    account_id: int,
    product_id: int,
    payload: ItemQuantityIn,
    svc: CartService = Depends(get_service),
):
    try:
        return svc.update_item(account_id, product_id, payload.quantity)
    except OrderingError as e:
        raise http_error(e)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(account_id: int, product_id: int, svc: CartService = Depends(get_service)):
    try:
        return svc.remove_item(account_id, product_id)
    except OrderingError as e:
        raise http_error(e)


@router.delete("", status_code=204)
def clear_cart(account_id: int, svc: CartService = Depends(get_service)):
    try:
        svc.clear(account_id)
    except OrderingError as e:
        raise http_error(e)
    return Response(status_code=204)


@router.post("/checkout", response_model=OrderOut, status_code=201)
def checkout(
    account_id: int,
    payload: CheckoutIn,
    db: Session = Depends(get_db),
    catalog=Depends(get_catalog_provider),
):
    """
    Tworzy zamówienie z aktualnego koszyka (ceny z katalogu).
    Koszyk zostaje bez zmian.
    """
    svc = OrderService(db, catalog)
    try:
        return svc.place_order_from_cart(
            account_id,
            payload.restaurant_id,
            customer=payload.model_dump(exclude={"restaurant_id"}),
        )
    except OrderingError as e:
        raise http_error(e)
