# storefront/repos/product_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.category import CategoryModel
from storefront.data.models.slide import SlideModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self, category_slug: str | None = None, brand_id: int | None = None) -> list[ProductModel]:
        stmt = select(ProductModel)
        if category_slug is not None:
            stmt = stmt.where(ProductModel.category_slug == category_slug)
        if brand_id is not None:
            stmt = stmt.where(ProductModel.brand_id == brand_id)
        return list(self.db.execute(stmt.order_by(ProductModel.id)).scalars().all())

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids: list[int]) -> dict[int, ProductModel]:
        if not product_ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(product_ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def list_categories(self) -> list[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.id)).scalars().all())

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def list_slides(self) -> list[SlideModel]:
        return list(
            self.db.execute(
                select(SlideModel).order_by(SlideModel.position, SlideModel.id)
            ).scalars().all()
        )
