# storefront/api/routers/reviews.py
from typing import List

from fastapi import APIRouter, Depends

from storefront.api.deps import error_response, get_review_service, get_token
from storefront.domain.errors import ShopError
from storefront.domain.schemas import MessageOut, ReviewIn, ReviewOut
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/products/{product_id}/reviews", tags=["reviews"])


@router.get("", response_model=List[ReviewOut])
def list_reviews(product_id: int, svc: ReviewService = Depends(get_review_service)):
    """Approved reviews only, newest first."""
    return svc.list_reviews(product_id)


@router.post(
    "",
    response_model=ReviewOut,
    status_code=201,
    responses={400: {"model": MessageOut}, 401: {"model": MessageOut}, 404: {"model": MessageOut}},
)
def submit_review(
    product_id: int,
    payload: ReviewIn,
    token: str | None = Depends(get_token),
    svc: ReviewService = Depends(get_review_service),
):
    """Stores the review unapproved; it becomes visible after moderation."""
    try:
        return svc.submit_review(product_id, payload, token)
    except ShopError as e:
        return error_response(e)
