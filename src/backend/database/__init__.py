"""Database package for the news CMS category service."""

from .models import (
    Base,
    Category,
    Post,
    PostStatusEnum,
)

__all__ = [
    "Base",
    "Category",
    "Post",
    "PostStatusEnum",
]
