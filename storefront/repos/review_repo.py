# storefront/repos/review_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_review(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def list_approved(self, product_id: int) -> list[ReviewModel]:
        return list(
            self.db.execute(
                select(ReviewModel)
                .where(ReviewModel.product_id == product_id, ReviewModel.is_approved.is_(True))
                .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
            ).scalars().all()
        )
