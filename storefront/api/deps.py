# storefront/api/deps.py
from fastapi import Depends, Header
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import ShopError
from storefront.repos.cart_repo import CartSessionRepo
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.identity_client import IdentityClient, bearer_token
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.review_service import ReviewService


def error_response(e: ShopError) -> JSONResponse:
    return JSONResponse(status_code=e.status_code, content={"message": e.message, "detail": e.detail})


def get_token(authorization: str | None = Header(default=None)) -> str | None:
    return bearer_token(authorization)


def get_identity_client() -> IdentityClient:
    return IdentityClient()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_cart_repo() -> CartSessionRepo:
    return CartSessionRepo()


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_order_service(
    db: Session = Depends(get_db),
    identity_client: IdentityClient = Depends(get_identity_client),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(
        db=db,
        identity_client=identity_client,
        notification_service=notification_service,
    )


def get_cart_service(
    repo: CartSessionRepo = Depends(get_cart_repo),
    catalog: CatalogService = Depends(get_catalog_service),
    orders: OrderService = Depends(get_order_service),
) -> CartService:
    return CartService(repo=repo, catalog=catalog, orders=orders)


def get_review_service(
    db: Session = Depends(get_db),
    orders: OrderService = Depends(get_order_service),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ReviewService:
    return ReviewService(db=db, orders=orders, catalog=catalog)
