from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ....application.services.review_service import ReviewService
from ....core.dependencies import get_review_service
from ....domain.models import PageRequest, User
from ..dependencies import page_params, require_user
from ..schemas.feedback import ReviewCreatePayload
from ..serializers import envelope, serialize_page, serialize_review

router = APIRouter(prefix="/user/reviews", tags=["user-reviews"])


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreatePayload,
    user: User = Depends(require_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    review = review_service.create_review(
        user,
        payload.product_id,
        payload.rating,
        payload.comment,
        title=payload.title,
    )
    return envelope(
        "Review submitted successfully and pending approval",
        review=serialize_review(review),
    )


@router.get("/me")
def my_reviews(
    page: PageRequest = Depends(page_params()),
    user: User = Depends(require_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    result = review_service.user_reviews(user, page)
    return envelope("Reviews retrieved successfully", **serialize_page(result, "reviews", serialize_review))


@router.get("/product/{product_id}")
def product_reviews(
    product_id: str,
    page: PageRequest = Depends(page_params()),
    review_service: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    result = review_service.product_reviews(product_id, page)
    return envelope("Reviews retrieved successfully", **serialize_page(result, "reviews", serialize_review))


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    user: User = Depends(require_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    review_service.delete_review(user, review_id)
    return envelope("Review deleted successfully")
