# storefront/data/models/product.py
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, JSON, ForeignKey

from storefront.data.database import Base


class ProductModel(Base):
    """Read-only from the storefront's side; rows are maintained by the admin panel."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    image_url = Column(String, nullable=False, default="")

    discount_percentage = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    category_slug = Column(String, nullable=True, index=True)
    inventory = Column(Integer, nullable=True)
    brand = Column(String, nullable=True)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=True, index=True)
    features = Column(JSON, nullable=True)

    is_featured = Column(Boolean, nullable=False, default=False)
    is_popular = Column(Boolean, nullable=False, default=False)
