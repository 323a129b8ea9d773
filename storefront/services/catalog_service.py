# storefront/services/catalog_service.py
from pydantic import BaseModel, ValidationError as SchemaError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.errors import BackendError, NotFoundError, ValidationError
from storefront.domain.schemas import ProductOut, CategoryOut, SlideOut
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SORT_ORDERS = ("default", "asc", "desc")
CATALOG_ERROR = "خطا در دریافت اطلاعات فروشگاه"


def validate_rows(schema: type[BaseModel], rows) -> list:
    """Converts store rows to DTOs; rows that fail validation are logged and skipped."""
    out = []
    for row in rows:
        try:
            out.append(schema.model_validate(row))
        except SchemaError as e:
            logger.warning(f"Skipping malformed {schema.__name__} row id={getattr(row, 'id', None)}: {e}")
    return out


class CatalogService:
    """
    Read side of the shop: products, categories and hero slides.

    List queries never fail the page: a store error yields an empty list and
    an `error` message next to it.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)

    def _read_failed(self, what: str, e: SQLAlchemyError):
        self.db.rollback()
        logger.error(f"Catalog read failed ({what}): {e}")

    # =====================================================
    # FILTER / SORT (over an already-fetched collection)
    # =====================================================
    @staticmethod
    def search(products: list[ProductOut], term: str | None) -> list[ProductOut]:
        if not term or not term.strip():
            return list(products)
        needle = term.strip().casefold()
        return [p for p in products if needle in p.name.casefold()]

    @staticmethod
    def sort(products: list[ProductOut], order: str = "default") -> list[ProductOut]:
        if order not in SORT_ORDERS:
            raise ValidationError(f"ترتیب نامعتبر: {order}")
        if order == "default":
            return list(products)
        # sorted() is stable, also with reverse=True
        return sorted(products, key=lambda p: p.price, reverse=(order == "desc"))

    # =====================================================
    # QUERIES
    # =====================================================
    def list_products(
        self,
        category: str | None = None,
        brand: int | None = None,
        term: str | None = None,
        sort: str = "default",
    ) -> dict:
        try:
            rows = self.repo.list_products(category_slug=category, brand_id=brand)
        except SQLAlchemyError as e:
            self._read_failed("products", e)
            return {"items": [], "error": CATALOG_ERROR}

        products = validate_rows(ProductOut, rows)
        products = self.sort(self.search(products, term), sort)
        return {"items": products, "error": None}

    def list_brand_products(self, brand_id: int) -> dict:
        return self.list_products(brand=brand_id)

    def get_product(self, product_id: int) -> ProductOut:
        try:
            row = self.repo.get_product(product_id)
        except SQLAlchemyError as e:
            self._read_failed(f"product {product_id}", e)
            raise BackendError(CATALOG_ERROR, detail=str(e)) from e

        if not row:
            raise NotFoundError("محصول مورد نظر یافت نشد")

        products = validate_rows(ProductOut, [row])
        if not products:
            raise NotFoundError("محصول مورد نظر یافت نشد")
        return products[0]

    def list_categories(self) -> dict:
        try:
            rows = self.repo.list_categories()
        except SQLAlchemyError as e:
            self._read_failed("categories", e)
            return {"items": [], "error": CATALOG_ERROR}
        return {"items": validate_rows(CategoryOut, rows), "error": None}

    def get_category(self, category_id: int) -> dict:
        """Category header plus its products (matched on the category slug)."""
        try:
            row = self.repo.get_category(category_id)
        except SQLAlchemyError as e:
            self._read_failed(f"category {category_id}", e)
            raise BackendError(CATALOG_ERROR, detail=str(e)) from e

        if not row:
            raise NotFoundError("دسته‌بندی مورد نظر یافت نشد")

        category = CategoryOut.model_validate(row)
        products = self.list_products(category=category.slug)
        return {"category": category, "products": products["items"], "error": products["error"]}

    def list_slides(self) -> dict:
        try:
            rows = self.repo.list_slides()
        except SQLAlchemyError as e:
            self._read_failed("slides", e)
            return {"items": [], "error": CATALOG_ERROR}
        return {"items": validate_rows(SlideOut, rows), "error": None}

    def home(self) -> dict:
        """Landing page sections: featured, popular, discounted products and categories."""
        products = self.list_products()
        categories = self.list_categories()
        items = products["items"]
        return {
            "featured": [p for p in items if p.is_featured],
            "popular": [p for p in items if p.is_popular],
            "discounted": [p for p in items if (p.discount_percentage or 0) > 0],
            "categories": categories["items"],
            "error": products["error"] or categories["error"],
        }
