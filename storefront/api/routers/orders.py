# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import error_response, get_order_service, get_token
from storefront.domain.errors import ShopError
from storefront.domain.schemas import MessageOut, OrderOut, OrderPlacedOut, OrderSubmitIn
from storefront.services.order_service import OrderService

router = APIRouter(tags=["orders"])

ERRORS = {400: {"model": MessageOut}, 401: {"model": MessageOut}, 500: {"model": MessageOut}}


@router.post("/api/orders/bulk", response_model=OrderPlacedOut, responses=ERRORS)
def submit_order(
    payload: OrderSubmitIn,
    token: str | None = Depends(get_token),
    svc: OrderService = Depends(get_order_service),
):
    """
    Records a checkout: the order header plus one line per cart item.
    Requires `Authorization: Bearer <token>`.
    """
    try:
        return svc.place_order(payload, token)
    except ShopError as e:
        return error_response(e)


@router.get("/orders/track", response_model=OrderOut, responses={404: {"model": MessageOut}})
def track_order(
    query: str = Query("", alias="input", max_length=64, description="Order id or checkout phone number"),
    svc: OrderService = Depends(get_order_service),
):
    """
    Public tracking: no sign-in, only the order id or the phone number
    used at checkout.
    """
    try:
        return svc.track_order(query)
    except ShopError as e:
        return error_response(e)


@router.get("/account/orders", response_model=List[OrderOut], responses={401: {"model": MessageOut}})
def my_orders(
    token: str | None = Depends(get_token),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.list_user_orders(token)
    except ShopError as e:
        return error_response(e)
