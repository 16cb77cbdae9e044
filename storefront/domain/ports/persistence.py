from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from ..models import Category, Comment, Otp, Page, PageRequest, Product, RefreshToken, Review, Role, User


class UnitOfWork(Protocol):
    def on_commit(self, callback: Callable[[], Any]) -> None:
        ...


class TransactionManager(Protocol):
    """Opens a transaction shared by every repository bound to the same database."""

    def transaction(self) -> AbstractContextManager[UnitOfWork]:
        ...


class UserRepository(Protocol):
    """Persistence functions related to customer and admin accounts."""

    def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role,
        is_active: bool,
        phone: Optional[str] = None,
    ) -> User:
        ...

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    def set_user_active(self, user_id: str, is_active: bool) -> User:
        ...

    def update_user_password(self, user_id: str, password_hash: str) -> User:
        ...

    def update_user_details(
        self,
        user_id: str,
        *,
        username: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        ...


class RefreshTokenRepository(Protocol):
    """Persistence functions related to opaque refresh tokens."""

    def create_refresh_token(self, user_id: str, token: str, expires_at: datetime) -> RefreshToken:
        ...

    def get_refresh_token(self, token: str) -> Optional[RefreshToken]:
        ...

    def revoke_refresh_token(self, token: str, user_id: Optional[str] = None) -> bool:
        ...

    def revoke_all_for_user(self, user_id: str) -> int:
        ...

    def delete_stale_refresh_tokens(self, now: datetime) -> int:
        ...


class OtpRepository(Protocol):
    """Persistence functions related to one-time passwords."""

    def create_otp(self, user_id: str, code: str, expires_at: datetime) -> Otp:
        ...

    def get_latest_unused_otp(self, user_id: str) -> Optional[Otp]:
        ...

    def mark_otp_used(self, otp_id: int) -> None:
        ...

    def mark_all_otps_used(self, user_id: str) -> int:
        ...


@dataclass(slots=True)
class CategoryFilter:
    name: Optional[str] = None
    is_active: Optional[bool] = None


@dataclass(slots=True)
class ProductFilter:
    name: Optional[str] = None
    category_id: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    featured: Optional[bool] = None
    is_active: Optional[bool] = None
    category_active: Optional[bool] = None


class CategoryRepository(Protocol):
    def create_category(
        self,
        user_id: str,
        name: str,
        slug: str,
        title: Optional[str],
        description: Optional[str],
        image: Optional[str],
        is_active: bool,
    ) -> Category:
        ...

    def update_category(self, category_id: str, changes: Dict[str, Any]) -> Category:
        ...

    def delete_category(self, category_id: str) -> None:
        ...

    def get_category_by_id(self, category_id: str) -> Optional[Category]:
        ...

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        ...

    def list_categories(self, filters: CategoryFilter, page: PageRequest) -> Page[Category]:
        ...

    def count_products_in_category(self, category_id: str) -> int:
        ...


class ProductRepository(Protocol):
    def create_product(self, user_id: str, values: Dict[str, Any]) -> Product:
        ...

    def update_product(self, product_id: str, changes: Dict[str, Any]) -> Product:
        ...

    def delete_product(self, product_id: str) -> None:
        ...

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        ...

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        ...

    def list_products(self, filters: ProductFilter, page: PageRequest) -> Page[Product]:
        ...

    def set_product_rating(self, product_id: str, avg_rating: float, review_count: int) -> None:
        ...


class CommentRepository(Protocol):
    def create_comment(
        self,
        product_id: str,
        user_id: str,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Comment:
        ...

    def get_comment(self, comment_id: str) -> Optional[Comment]:
        ...

    def list_product_comments(self, product_id: str, page: PageRequest) -> Page[Comment]:
        ...

    def list_user_comments(self, user_id: str, page: PageRequest) -> Page[Comment]:
        ...

    def list_pending_comments(self, page: PageRequest) -> Page[Comment]:
        ...

    def approve_comment(self, comment_id: str) -> Comment:
        ...

    def delete_comment(self, comment_id: str) -> None:
        ...


class ReviewRepository(Protocol):
    def create_review(
        self,
        product_id: str,
        user_id: str,
        rating: int,
        title: Optional[str],
        comment: str,
    ) -> Review:
        ...

    def get_review(self, review_id: str) -> Optional[Review]:
        ...

    def get_user_review_for_product(self, user_id: str, product_id: str) -> Optional[Review]:
        ...

    def list_product_reviews(self, product_id: str, page: PageRequest) -> Page[Review]:
        ...

    def list_user_reviews(self, user_id: str, page: PageRequest) -> Page[Review]:
        ...

    def list_pending_reviews(self, page: PageRequest) -> Page[Review]:
        ...

    def approve_review(self, review_id: str) -> Review:
        ...

    def delete_review(self, review_id: str) -> None:
        ...

    def approved_rating_summary(self, product_id: str) -> Tuple[float, int]:
        ...


__all__: List[str] = [
    "CategoryFilter",
    "CategoryRepository",
    "CommentRepository",
    "OtpRepository",
    "ProductFilter",
    "ProductRepository",
    "RefreshTokenRepository",
    "ReviewRepository",
    "TransactionManager",
    "UnitOfWork",
    "UserRepository",
]
