from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....application.services.comment_service import CommentService
from ....core.dependencies import get_comment_service
from ....domain.models import PageRequest, User
from ..dependencies import page_params, require_admin_user
from ..serializers import envelope, serialize_comment, serialize_page

router = APIRouter(prefix="/admin/comments", tags=["admin-comments"])


@router.get("/pending")
def pending_comments(
    page: PageRequest = Depends(page_params()),
    _: User = Depends(require_admin_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    result = comment_service.pending_comments(page)
    return envelope(
        "Pending comments retrieved successfully", **serialize_page(result, "comments", serialize_comment)
    )


@router.patch("/{comment_id}/approve")
def approve_comment(
    comment_id: str,
    _: User = Depends(require_admin_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    comment, changed = comment_service.approve_comment(comment_id)
    message = "Comment approved successfully" if changed else "Comment is already approved"
    return envelope(message, comment=serialize_comment(comment))


@router.delete("/{comment_id}/reject")
def reject_comment(
    comment_id: str,
    _: User = Depends(require_admin_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    comment_service.reject_comment(comment_id)
    return envelope("Comment rejected and deleted successfully")


@router.delete("/{comment_id}")
def delete_comment(
    comment_id: str,
    admin: User = Depends(require_admin_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    comment_service.delete_comment(admin, comment_id)
    return envelope("Comment deleted successfully")
