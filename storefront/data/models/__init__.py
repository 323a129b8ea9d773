# import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.brand import BrandModel
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.slide import SlideModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.review import ReviewModel

__all__ = [
    "BrandModel",
    "CategoryModel",
    "ProductModel",
    "SlideModel",
    "OrderModel",
    "OrderItemModel",
    "ReviewModel",
]
