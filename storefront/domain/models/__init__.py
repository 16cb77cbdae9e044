"""Domain models for the storefront application."""

from .catalog import MAX_PRODUCT_IMAGES, Category, CategorySummary, Product, slugify
from .credentials import Otp, RefreshToken
from .feedback import Comment, Review
from .pagination import Page, PageRequest
from .user import Role, User

__all__ = [
    "MAX_PRODUCT_IMAGES",
    "Category",
    "CategorySummary",
    "Comment",
    "Otp",
    "Page",
    "PageRequest",
    "Product",
    "RefreshToken",
    "Review",
    "Role",
    "User",
    "slugify",
]
