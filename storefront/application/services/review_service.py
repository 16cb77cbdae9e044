from __future__ import annotations

import logging
from typing import Optional, Tuple

from ...domain.errors import ForbiddenError, NotFoundError, ValidationError
from ...domain.models import Page, PageRequest, Review, User
from ...domain.ports.persistence import ProductRepository, ReviewRepository, TransactionManager

logger = logging.getLogger(__name__)


class ReviewService:
    """Star ratings; only approved reviews count towards a product's average."""

    def __init__(
        self,
        database: TransactionManager,
        reviews: ReviewRepository,
        products: ProductRepository,
    ) -> None:
        self._db = database
        self._reviews = reviews
        self._products = products

    def create_review(
        self,
        author: User,
        product_id: str,
        rating: int,
        comment: str,
        title: Optional[str] = None,
    ) -> Review:
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")
        text = (comment or "").strip()
        if not text:
            raise ValidationError("Review comment cannot be empty")
        with self._db.transaction():
            product = self._products.get_product_by_id(product_id)
            if not product:
                raise NotFoundError("Product not found")
            if not product.is_active:
                raise ValidationError("Cannot review an inactive product")
            if self._reviews.get_user_review_for_product(author.id, product.id):
                raise ValidationError("You have already reviewed this product")
            review = self._reviews.create_review(product.id, author.id, rating, title, text)
        logger.info("User %s reviewed product %s", author.id, product.id)
        return review

    def product_reviews(self, product_id: str, page: PageRequest) -> Page[Review]:
        product = self._products.get_product_by_id(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        return self._reviews.list_product_reviews(product.id, page)

    def user_reviews(self, author: User, page: PageRequest) -> Page[Review]:
        return self._reviews.list_user_reviews(author.id, page)

    def pending_reviews(self, page: PageRequest) -> Page[Review]:
        return self._reviews.list_pending_reviews(page)

    def approve_review(self, review_id: str) -> Tuple[Review, bool]:
        with self._db.transaction():
            review = self._require(review_id)
            if review.is_approved:
                return review, False
            approved = self._reviews.approve_review(review_id)
            self._refresh_rating(review.product_id)
            return approved, True

    def reject_review(self, review_id: str) -> None:
        with self._db.transaction():
            review = self._require(review_id)
            self._reviews.delete_review(review_id)
            self._refresh_rating(review.product_id)

    def delete_review(self, actor: User, review_id: str) -> None:
        with self._db.transaction():
            review = self._require(review_id)
            if not actor.is_admin and review.user_id != actor.id:
                raise ForbiddenError("You can only delete your own reviews")
            self._reviews.delete_review(review_id)
            self._refresh_rating(review.product_id)

    def _refresh_rating(self, product_id: str) -> None:
        average, count = self._reviews.approved_rating_summary(product_id)
        self._products.set_product_rating(product_id, average, count)

    def _require(self, review_id: str) -> Review:
        review = self._reviews.get_review(review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review
