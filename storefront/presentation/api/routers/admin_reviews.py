from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....application.services.review_service import ReviewService
from ....core.dependencies import get_review_service
from ....domain.models import PageRequest, User
from ..dependencies import page_params, require_admin_user
from ..serializers import envelope, serialize_page, serialize_review

router = APIRouter(prefix="/admin/reviews", tags=["admin-reviews"])


@router.get("/pending")
def pending_reviews(
    page: PageRequest = Depends(page_params()),
    _: User = Depends(require_admin_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    result = review_service.pending_reviews(page)
    return envelope("Pending reviews retrieved successfully", **serialize_page(result, "reviews", serialize_review))


@router.patch("/{review_id}/approve")
def approve_review(
    review_id: str,
    _: User = Depends(require_admin_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    review, changed = review_service.approve_review(review_id)
    message = "Review approved successfully" if changed else "Review is already approved"
    return envelope(message, review=serialize_review(review))


@router.delete("/{review_id}/reject")
def reject_review(
    review_id: str,
    _: User = Depends(require_admin_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    review_service.reject_review(review_id)
    return envelope("Review rejected and deleted successfully")


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    admin: User = Depends(require_admin_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Dict[str, Any]:
    review_service.delete_review(admin, review_id)
    return envelope("Review deleted successfully")
