from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ....application.services.comment_service import CommentService
from ....core.dependencies import get_comment_service
from ....domain.models import PageRequest, User
from ..dependencies import page_params, require_user
from ..schemas.feedback import CommentCreatePayload, CommentReplyPayload
from ..serializers import envelope, serialize_comment, serialize_page

router = APIRouter(prefix="/user/comments", tags=["user-comments"])


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: CommentCreatePayload,
    user: User = Depends(require_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    comment = comment_service.create_comment(user, payload.product_id, payload.content)
    return envelope(
        "Comment submitted successfully and pending approval",
        comment=serialize_comment(comment),
    )


@router.post("/reply", status_code=status.HTTP_201_CREATED)
def reply_to_comment(
    payload: CommentReplyPayload,
    user: User = Depends(require_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    reply = comment_service.reply_to_comment(user, payload.parent_id, payload.content)
    return envelope(
        "Reply submitted successfully and pending approval",
        comment=serialize_comment(reply),
    )


@router.get("/me")
def my_comments(
    page: PageRequest = Depends(page_params()),
    user: User = Depends(require_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    result = comment_service.user_comments(user, page)
    return envelope("Comments retrieved successfully", **serialize_page(result, "comments", serialize_comment))


@router.get("/product/{product_id}")
def product_comments(
    product_id: str,
    page: PageRequest = Depends(page_params()),
    comment_service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    product, result = comment_service.product_comments(product_id, page)
    return envelope(
        "Comments retrieved successfully",
        product={"id": product.id, "name": product.name, "slug": product.slug},
        **serialize_page(result, "comments", serialize_comment),
    )


@router.delete("/{comment_id}")
def delete_comment(
    comment_id: str,
    user: User = Depends(require_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Dict[str, Any]:
    comment_service.delete_comment(user, comment_id)
    return envelope("Comment deleted successfully")
