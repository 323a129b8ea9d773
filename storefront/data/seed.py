# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import BrandModel, CategoryModel, ProductModel, SlideModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def seed() -> bool:
    """Demo catalog for local runs. Returns False when the catalog is not empty."""
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return False

        brands = [
            BrandModel(id=1, name="سینره", logo_url="/brands/cinere.png"),
            BrandModel(id=2, name="لافارر", logo_url="/brands/lafarrerr.png"),
        ]
        categories = [
            CategoryModel(id=1, name="مراقبت پوست", slug="skin-care", image_url="/categories/skin.png"),
            CategoryModel(id=2, name="آرایش صورت", slug="makeup", image_url="/categories/makeup.png"),
        ]
        products = [
            ProductModel(
                id=1,
                name="کرم آبرسان",
                price=Decimal("450000"),
                image_url="/products/hydrating-cream.jpg",
                discount_percentage=15,
                category="مراقبت پوست",
                category_slug="skin-care",
                inventory=20,
                brand="سینره",
                brand_id=1,
                features=["مناسب پوست خشک", "فاقد پارابن"],
                is_featured=True,
            ),
            ProductModel(
                id=2,
                name="ضد آفتاب SPF50",
                price=Decimal("380000"),
                image_url="/products/sunscreen.jpg",
                category="مراقبت پوست",
                category_slug="skin-care",
                inventory=35,
                brand="لافارر",
                brand_id=2,
                is_popular=True,
            ),
            ProductModel(
                id=3,
                name="رژ لب مات",
                price=Decimal("210000"),
                image_url="/products/matte-lipstick.jpg",
                discount_percentage=10,
                category="آرایش صورت",
                category_slug="makeup",
                inventory=0,
                brand="سینره",
                brand_id=1,
                is_popular=True,
            ),
        ]
        slides = [
            SlideModel(id=1, image_url="/slides/summer.jpg", title="حراج تابستانه", position=1),
            SlideModel(id=2, image_url="/slides/new.jpg", title="محصولات جدید", position=2),
        ]

        db.add_all(brands + categories)
        db.flush()
        db.add_all(products + slides)
        db.commit()
        logger.info(f"Seeded {len(products)} products, {len(categories)} categories")
        return True
    finally:
        db.close()


if __name__ == "__main__":
    seed()
