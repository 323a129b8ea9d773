# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, computed_field
from typing import List
from decimal import Decimal
from datetime import datetime

from storefront.domain.pricing import discounted_unit_price, display_amount


# =====================================================
# CATALOG
# =====================================================
class ProductOut(BaseModel):
    """Validated product row; also used as the cart's product snapshot."""

    id: int
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    image_url: str = ""
    discount_percentage: int | None = Field(None, ge=0, le=100)
    description: str | None = None
    category: str | None = None
    category_slug: str | None = None
    inventory: int | None = Field(None, ge=0)
    brand: str | None = None
    brand_id: int | None = None
    features: List[str] | None = None
    is_featured: bool = False
    is_popular: bool = False

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def final_price(self) -> int:
        return display_amount(discounted_unit_price(self.price, self.discount_percentage))


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    image_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class SlideOut(BaseModel):
    id: int
    image_url: str
    title: str | None = None
    caption: str | None = None
    link: str | None = None
    position: int = 0

    model_config = ConfigDict(from_attributes=True)


class ProductListOut(BaseModel):
    items: List[ProductOut]
    error: str | None = None


class CategoryListOut(BaseModel):
    items: List[CategoryOut]
    error: str | None = None


class SlideListOut(BaseModel):
    items: List[SlideOut]
    error: str | None = None


class CategoryDetailOut(BaseModel):
    category: CategoryOut
    products: List[ProductOut]
    error: str | None = None


class HomeOut(BaseModel):
    featured: List[ProductOut]
    popular: List[ProductOut]
    discounted: List[ProductOut]
    categories: List[CategoryOut]
    error: str | None = None


# =====================================================
# CART
# =====================================================
class CartItemIn(BaseModel):
    product_id: int = Field(..., gt=0, description="Product id (> 0)")
    quantity: int = Field(1, gt=0, description="Units to add (> 0)")


class CartQuantityIn(BaseModel):
    # values below 1 are clamped to 1 by the cart, not rejected
    quantity: int


class CartLineOut(BaseModel):
    product: ProductOut
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class CartOut(BaseModel):
    session_id: str
    items: List[CartLineOut]
    item_count: int
    total_price: Decimal
    total_display: int


class CheckoutIn(BaseModel):
    """Shipping details for checking out a session cart."""

    phone: str | None = None
    postal_code: str | None = Field(None, alias="postalCode")
    address: str | None = None

    model_config = ConfigDict(populate_by_name=True)


# =====================================================
# ORDERS
# =====================================================
class OrderItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0, description="Unit price after discount")


class OrderSubmitIn(BaseModel):
    """
    Body of the bulk order endpoint.

    Every field is optional at the schema level so that an incomplete form
    reaches the service and is answered with a 400 and a readable message.
    """

    phone: str | None = None
    postal_code: str | None = Field(None, alias="postalCode")
    address: str | None = None
    items: List[OrderItemIn] | None = None

    model_config = ConfigDict(populate_by_name=True)


class OrderPlacedOut(BaseModel):
    message: str
    order_id: int
    total_price: Decimal


class MessageOut(BaseModel):
    message: str
    detail: str | None = None


class OrderLineOut(BaseModel):
    id: int
    product_id: int
    product_name: str | None = None
    quantity: int
    price: Decimal
    line_total: Decimal


class OrderOut(BaseModel):
    id: int
    phone: str
    postal_code: str
    address: str
    status: str
    shipped: bool
    total_price: Decimal
    created_at: datetime
    items: List[OrderLineOut]


# =====================================================
# REVIEWS / IDENTITY
# =====================================================
class ReviewIn(BaseModel):
    rating: int
    comment: str = Field("", max_length=2000)


class ReviewOut(BaseModel):
    id: int
    product_id: int
    rating: int
    comment: str
    is_approved: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Identity(BaseModel):
    """User resolved from a bearer token by the Identity Gateway."""

    id: str = Field(..., min_length=1)
    email: str | None = None
