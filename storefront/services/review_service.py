# storefront/services/review_service.py
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel
from storefront.domain.errors import BackendError, ValidationError
from storefront.domain.schemas import ReviewIn, ReviewOut
from storefront.repos.review_repo import ReviewRepo
from storefront.services.catalog_service import CatalogService, validate_rows
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ReviewService:
    """Product reviews: created unapproved, shown only after moderation."""

    def __init__(self, db: Session, orders: OrderService, catalog: CatalogService | None = None):
        self.db = db
        self.repo = ReviewRepo(db)
        self.orders = orders
        self.catalog = catalog or CatalogService(db)

    def submit_review(self, product_id: int, payload: ReviewIn, token: str | None) -> ReviewOut:
        identity = self.orders.authenticate(token)

        if not 1 <= payload.rating <= 5:
            raise ValidationError("امتیاز باید بین ۱ تا ۵ باشد")

        self.catalog.get_product(product_id)

        try:
            review = self.repo.create_review(
                ReviewModel(
                    product_id=product_id,
                    user_id=identity.id,
                    rating=payload.rating,
                    comment=payload.comment.strip(),
                    is_approved=False,
                )
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Review insert failed for product {product_id}: {e}")
            raise BackendError("خطا در ثبت نظر", detail=str(e)) from e

        logger.info(f"Review {review.id} for product {product_id} awaiting approval")
        return ReviewOut.model_validate(review)

    def list_reviews(self, product_id: int) -> list[ReviewOut]:
        try:
            rows = self.repo.list_approved(product_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Review read failed for product {product_id}: {e}")
            return []
        return validate_rows(ReviewOut, rows)
