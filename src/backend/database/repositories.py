"""
Repository pattern for database operations.

Provides clean abstraction over SQLAlchemy for the post queries the
category service needs.
"""

from typing import List
from sqlalchemy import select, distinct
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Category, Post


class PostRepository:
    """Repository for Post category operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_needing_category_id(self) -> List[Post]:
        """Get posts that only carry a legacy category string."""
        result = await self.session.execute(
            select(Post)
            .where(Post.category.is_not(None))
            .where(Post.category != "")
            .where(Post.category_id.is_(None))
            .order_by(Post.id)
        )
        return list(result.scalars().all())

    async def get_unique_categories(self) -> List[str]:
        """Get list of unique legacy category strings across all posts."""
        result = await self.session.execute(
            select(distinct(Post.category))
            .where(Post.category.is_not(None))
            .order_by(Post.category)
        )
        return [c for c in result.scalars().all() if c]

    async def get_unique_category_ids(self) -> List[int]:
        """Get list of unique category ids across all posts."""
        result = await self.session.execute(
            select(distinct(Post.category_id))
            .where(Post.category_id.is_not(None))
            .order_by(Post.category_id)
        )
        return list(result.scalars().all())


class CategoryRepository:
    """Repository for the categories table mirror."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> List[Category]:
        """Get all category rows ordered by level, then id."""
        result = await self.session.execute(
            select(Category).order_by(Category.level, Category.id)
        )
        return list(result.scalars().all())

    async def upsert(self, category: Category) -> Category:
        """Insert or update a category row by primary key."""
        merged = await self.session.merge(category)
        await self.session.flush()
        return merged
