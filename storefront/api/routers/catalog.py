# storefront/api/routers/catalog.py
from typing import Literal

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import error_response, get_catalog_service
from storefront.domain.errors import ShopError
from storefront.domain.schemas import (
    CategoryDetailOut,
    CategoryListOut,
    HomeOut,
    MessageOut,
    ProductListOut,
    ProductOut,
    SlideListOut,
)
from storefront.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


@router.get("/home", response_model=HomeOut)
def home(svc: CatalogService = Depends(get_catalog_service)):
    return svc.home()


@router.get("/products", response_model=ProductListOut)
def list_products(
    category: str | None = Query(None, description="Category slug"),
    brand: int | None = Query(None, description="Brand id"),
    q: str | None = Query(None, description="Case-insensitive name search"),
    sort: Literal["default", "asc", "desc"] = Query("default", description="Order by price"),
    svc: CatalogService = Depends(get_catalog_service),
):
    return svc.list_products(category=category, brand=brand, term=q, sort=sort)


@router.get("/products/{product_id}", response_model=ProductOut, responses={404: {"model": MessageOut}})
def get_product(product_id: int, svc: CatalogService = Depends(get_catalog_service)):
    try:
        return svc.get_product(product_id)
    except ShopError as e:
        return error_response(e)


@router.get("/categories", response_model=CategoryListOut)
def list_categories(svc: CatalogService = Depends(get_catalog_service)):
    return svc.list_categories()


@router.get("/categories/{category_id}", response_model=CategoryDetailOut, responses={404: {"model": MessageOut}})
def get_category(category_id: int, svc: CatalogService = Depends(get_catalog_service)):
    try:
        return svc.get_category(category_id)
    except ShopError as e:
        return error_response(e)


@router.get("/brands/{brand_id}/products", response_model=ProductListOut)
def brand_products(brand_id: int, svc: CatalogService = Depends(get_catalog_service)):
    return svc.list_brand_products(brand_id)


@router.get("/slides", response_model=SlideListOut)
def list_slides(svc: CatalogService = Depends(get_catalog_service)):
    return svc.list_slides()
