# storefront/api/routers/carts.py
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from storefront.api.deps import error_response, get_cart_service, get_token
from storefront.domain.errors import ShopError
from storefront.domain.schemas import (
    CartItemIn,
    CartOut,
    CartQuantityIn,
    CheckoutIn,
    MessageOut,
    OrderPlacedOut,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])

SessionId = Annotated[str, Path(min_length=8, max_length=128, pattern=r"^[A-Za-z0-9_-]+$")]


@router.get("/{session_id}", response_model=CartOut)
def get_cart(session_id: SessionId, svc: CartService = Depends(get_cart_service)):
    try:
        return svc.get_cart(session_id)
    except ShopError as e:
        return error_response(e)


@router.delete("/{session_id}", response_model=CartOut)
def clear_cart(session_id: SessionId, svc: CartService = Depends(get_cart_service)):
    try:
        return svc.clear(session_id)
    except ShopError as e:
        return error_response(e)


@router.post("/{session_id}/items", response_model=CartOut, responses={400: {"model": MessageOut}})
def add_item(
    session_id: SessionId,
    payload: CartItemIn,
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.add_product(session_id, payload.product_id, payload.quantity)
    except ShopError as e:
        return error_response(e)


@router.patch("/{session_id}/items/{product_id}", response_model=CartOut)
def update_item(
    session_id: SessionId,
    product_id: int,
    payload: CartQuantityIn,
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.update_quantity(session_id, product_id, payload.quantity)
    except ShopError as e:
        return error_response(e)


@router.delete("/{session_id}/items/{product_id}", response_model=CartOut)
def remove_item(
    session_id: SessionId,
    product_id: int,
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.remove_product(session_id, product_id)
    except ShopError as e:
        return error_response(e)


@router.post(
    "/{session_id}/checkout",
    response_model=OrderPlacedOut,
    responses={400: {"model": MessageOut}, 401: {"model": MessageOut}, 500: {"model": MessageOut}},
)
def checkout(
    session_id: SessionId,
    payload: CheckoutIn,
    token: str | None = Depends(get_token),
    svc: CartService = Depends(get_cart_service),
):
    """Places an order from the session cart and empties the cart on success."""
    try:
        return svc.checkout(session_id, payload, token)
    except ShopError as e:
        return error_response(e)
