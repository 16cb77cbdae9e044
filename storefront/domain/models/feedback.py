"""Moderated customer feedback attached to products."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(slots=True)
class Comment:
    """
    Product comment or a one-level reply to another comment.

    Attributes:
        id: Unique identifier
        product_id: Product the discussion belongs to
        user_id: Author
        parent_id: Root comment this reply answers, None for root comments
        content: Comment text
        is_approved: Hidden from the public until an admin approves it
        author_username: Author handle joined from the users table
        product_name: Joined product name, used by moderation listings
        product_slug: Joined product slug
        parent_content: Text of the comment a reply answers
        replies: Approved replies, filled only for public product listings
    """

    id: str
    product_id: str
    user_id: str
    parent_id: Optional[str]
    content: str
    is_approved: bool
    created_at: datetime
    updated_at: datetime
    author_username: Optional[str] = None
    product_name: Optional[str] = None
    product_slug: Optional[str] = None
    parent_content: Optional[str] = None
    replies: List["Comment"] = field(default_factory=list)

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None


@dataclass(slots=True)
class Review:
    id: str
    product_id: str
    user_id: str
    rating: int
    title: Optional[str]
    comment: str
    is_approved: bool
    created_at: datetime
    updated_at: datetime
    author_username: Optional[str] = None
    product_name: Optional[str] = None
    product_slug: Optional[str] = None
