"""Dict renderers for API responses (camelCase keys, ISO timestamps)."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, TypeVar

from ...application.services.base_auth_service import AuthSession
from ...domain.models import Category, Comment, Page, Product, Review, User
from ...services.token_service import TokenPair

T = TypeVar("T")


def envelope(message: str, **payload: Any) -> Dict[str, Any]:
    return {"error": False, "message": message, **payload}


def serialize_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "phone": user.phone,
        "role": user.role.value,
        "isActive": user.is_active,
        "createdAt": user.created_at.isoformat(),
        "updatedAt": user.updated_at.isoformat(),
    }


def serialize_tokens(tokens: TokenPair) -> Dict[str, Any]:
    return {"accessToken": tokens.access_token, "refreshToken": tokens.refresh_token}


def serialize_session(session: AuthSession) -> Dict[str, Any]:
    payload = {**serialize_tokens(session.tokens), "user": serialize_user(session.user)}
    if session.require_verification:
        payload["requireVerification"] = True
    return payload


def serialize_category(category: Category) -> Dict[str, Any]:
    return {
        "id": category.id,
        "userId": category.user_id,
        "name": category.name,
        "slug": category.slug,
        "title": category.title,
        "description": category.description,
        "image": category.image,
        "isActive": category.is_active,
        "createdAt": category.created_at.isoformat(),
        "updatedAt": category.updated_at.isoformat(),
    }


def serialize_product(product: Product) -> Dict[str, Any]:
    category: Optional[Dict[str, Any]] = None
    if product.category is not None:
        category = {
            "id": product.category.id,
            "name": product.category.name,
            "slug": product.category.slug,
        }
    return {
        "id": product.id,
        "userId": product.user_id,
        "categoryId": product.category_id,
        "category": category,
        "name": product.name,
        "slug": product.slug,
        "title": product.title,
        "description": product.description,
        "shortDescription": product.short_description,
        "price": product.price,
        "discountPrice": product.discount_price,
        "quantity": product.quantity,
        "images": list(product.images),
        "featuredImage": product.featured_image,
        "featured": product.featured,
        "isActive": product.is_active,
        "avgRating": product.avg_rating,
        "reviewCount": product.review_count,
        "createdAt": product.created_at.isoformat(),
        "updatedAt": product.updated_at.isoformat(),
    }


def serialize_comment(comment: Comment) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": comment.id,
        "productId": comment.product_id,
        "userId": comment.user_id,
        "parentId": comment.parent_id,
        "content": comment.content,
        "isApproved": comment.is_approved,
        "createdAt": comment.created_at.isoformat(),
        "updatedAt": comment.updated_at.isoformat(),
        "user": {"id": comment.user_id, "username": comment.author_username},
    }
    if comment.product_name is not None:
        payload["product"] = {
            "id": comment.product_id,
            "name": comment.product_name,
            "slug": comment.product_slug,
        }
    if comment.parent_id is not None:
        payload["parent"] = {"id": comment.parent_id, "content": comment.parent_content}
    else:
        payload["replies"] = [serialize_comment(reply) for reply in comment.replies]
    return payload


def serialize_review(review: Review) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": review.id,
        "productId": review.product_id,
        "userId": review.user_id,
        "rating": review.rating,
        "title": review.title,
        "comment": review.comment,
        "isApproved": review.is_approved,
        "createdAt": review.created_at.isoformat(),
        "updatedAt": review.updated_at.isoformat(),
        "user": {"id": review.user_id, "username": review.author_username},
    }
    if review.product_name is not None:
        payload["product"] = {
            "id": review.product_id,
            "name": review.product_name,
            "slug": review.product_slug,
        }
    return payload


def serialize_page(page: Page[T], key: str, serializer: Callable[[T], Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "totalItems": page.total_items,
        key: [serializer(item) for item in page.items],
        "currentPage": page.current_page,
        "totalPages": page.total_pages,
    }
