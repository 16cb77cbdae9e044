from __future__ import annotations

import logging
from typing import Tuple

from ...domain.errors import ForbiddenError, NotFoundError, ValidationError
from ...domain.models import Comment, Page, PageRequest, Product, User
from ...domain.ports.persistence import CommentRepository, ProductRepository, TransactionManager

logger = logging.getLogger(__name__)


class CommentService:
    """Product discussions: one level of replies, every post moderated."""

    def __init__(
        self,
        database: TransactionManager,
        comments: CommentRepository,
        products: ProductRepository,
    ) -> None:
        self._db = database
        self._comments = comments
        self._products = products

    def create_comment(self, author: User, product_id: str, content: str) -> Comment:
        text = (content or "").strip()
        if not text:
            raise ValidationError("Comment content cannot be empty")
        with self._db.transaction():
            product = self._products.get_product_by_id(product_id)
            if not product:
                raise NotFoundError("Product not found")
            if not product.is_active:
                raise ValidationError("Cannot comment on an inactive product")
            comment = self._comments.create_comment(product.id, author.id, text)
        logger.info("User %s commented on product %s", author.id, product.id)
        return comment

    def reply_to_comment(self, author: User, parent_id: str, content: str) -> Comment:
        text = (content or "").strip()
        if not text:
            raise ValidationError("Reply content cannot be empty")
        with self._db.transaction():
            parent = self._comments.get_comment(parent_id)
            if not parent:
                raise NotFoundError("Parent comment not found")
            if not parent.is_approved:
                raise ValidationError("Cannot reply to an unapproved comment")
            if parent.is_reply:
                raise ValidationError("Nested replies are not allowed")
            return self._comments.create_comment(parent.product_id, author.id, text, parent_id=parent.id)

    def product_comments(self, product_id: str, page: PageRequest) -> Tuple[Product, Page[Comment]]:
        product = self._products.get_product_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if not product.is_active:
            raise NotFoundError("Product is not active")
        return product, self._comments.list_product_comments(product.id, page)

    def user_comments(self, author: User, page: PageRequest) -> Page[Comment]:
        return self._comments.list_user_comments(author.id, page)

    def pending_comments(self, page: PageRequest) -> Page[Comment]:
        return self._comments.list_pending_comments(page)

    def approve_comment(self, comment_id: str) -> Tuple[Comment, bool]:
        """Approve a comment. The flag is False when it was already approved."""
        with self._db.transaction():
            comment = self._require(comment_id)
            if comment.is_approved:
                return comment, False
            return self._comments.approve_comment(comment_id), True

    def reject_comment(self, comment_id: str) -> None:
        with self._db.transaction():
            self._require(comment_id)
            self._comments.delete_comment(comment_id)
        logger.info("Rejected comment %s", comment_id)

    def delete_comment(self, actor: User, comment_id: str) -> None:
        with self._db.transaction():
            comment = self._require(comment_id)
            if not actor.is_admin and comment.user_id != actor.id:
                raise ForbiddenError("You can only delete your own comments")
            self._comments.delete_comment(comment_id)

    def _require(self, comment_id: str) -> Comment:
        comment = self._comments.get_comment(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        return comment
