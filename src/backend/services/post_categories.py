"""
Post category service.

Reads the category stored on post records (of any schema revision) through
the resolver and upgrades legacy category strings to numeric category ids.
The resolver itself never persists anything; this is the only place that
writes normalized ids back to the posts table.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Post
from database.repositories import PostRepository
from taxonomy.resolver import Breadcrumb, CategoryResolver, StorageFormat, get_resolver

logger = logging.getLogger(__name__)


class PostCategoryServiceError(Exception):
    """Raised when post categories cannot be read or written."""
    pass


@dataclass
class BackfillReport:
    """Outcome of a category id backfill run."""
    dry_run: bool = False
    total: int = 0
    updated: int = 0
    unresolved: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "total": self.total,
            "updated": self.updated,
            "unresolved": list(self.unresolved),
        }


class PostCategoryService:
    """
    Service for category values stored on posts.

    Provides:
    1. Resolving the category of a single post (id first, then legacy string)
    2. Backfilling category_id for posts that only have a legacy string
    3. Describing the categories currently used by posts (post list filter)
    """

    def __init__(self, db_session: AsyncSession, resolver: Optional[CategoryResolver] = None):
        """Initialize service with database session and category resolver."""
        self.db_session = db_session
        self.post_repo = PostRepository(db_session)
        self.resolver = resolver or get_resolver()

    def resolve_post_category(self, post: Post) -> Optional[Breadcrumb]:
        """
        Resolve the category of a post.

        A known category_id wins. Otherwise the legacy category string is
        read as a hierarchical name, then as a display name.

        Returns:
            Breadcrumb, or None if the post has no resolvable category
        """
        if post.category_id is not None:
            breadcrumb = self.resolver.resolve_by_id(post.category_id)
            if breadcrumb is not None:
                return breadcrumb
            logger.warning(
                "Post %s has unknown category_id %s", post.id, post.category_id
            )
        return self.resolver.normalize_stored_value(post.category)

    async def backfill_category_ids(self, dry_run: bool = False) -> BackfillReport:
        """
        Set category_id on posts that only carry a legacy category string.

        The legacy string is left untouched for readers that still use it.
        All updates are committed together.

        Args:
            dry_run: Report what would change without writing

        Returns:
            BackfillReport with counts and the values that could not be resolved

        Raises:
            PostCategoryServiceError: If posts cannot be loaded or saved
        """
        try:
            posts = await self.post_repo.get_needing_category_id()
        except SQLAlchemyError as e:
            raise PostCategoryServiceError(f"Failed to load posts: {str(e)}") from e

        report = BackfillReport(dry_run=dry_run, total=len(posts))

        for post in posts:
            breadcrumb = self.resolver.normalize_stored_value(post.category)
            if breadcrumb is None:
                logger.warning("Post %s: unresolved category %r", post.id, post.category)
                report.unresolved.append({"post_id": post.id, "category": post.category})
                continue

            if not dry_run:
                post.category_id = self.resolver.serialize_for_storage(
                    breadcrumb, StorageFormat.ID
                )
                self.db_session.add(post)
            report.updated += 1

        if not dry_run and report.updated:
            try:
                await self.db_session.commit()
            except SQLAlchemyError as e:
                await self.db_session.rollback()
                raise PostCategoryServiceError(f"Failed to save category ids: {str(e)}") from e

        logger.info(
            "Category backfill: %d posts, %d updated, %d unresolved (dry_run=%s)",
            report.total, report.updated, len(report.unresolved), dry_run,
        )
        return report

    async def describe_categories_in_use(self) -> List[Dict[str, Any]]:
        """
        Describe every category stored on posts, one entry per category.

        Stored ids come first, then legacy strings. Values that resolve to
        the same category are merged into that category's entry; each
        unresolved value gets an entry of its own.

        Returns:
            List of dicts with category_id, display_name, hierarchical_name
            (None when unresolved) and the raw stored values that map to it
        """
        try:
            category_ids = await self.post_repo.get_unique_category_ids()
            legacy_values = await self.post_repo.get_unique_categories()
        except SQLAlchemyError as e:
            raise PostCategoryServiceError(f"Failed to load categories: {str(e)}") from e

        stored = [(cid, self.resolver.resolve_by_id(cid)) for cid in category_ids]
        stored += [(v, self.resolver.normalize_stored_value(v)) for v in legacy_values]

        described: List[Dict[str, Any]] = []
        by_category_id: Dict[int, Dict[str, Any]] = {}
        for value, breadcrumb in stored:
            if breadcrumb is not None and breadcrumb.id in by_category_id:
                by_category_id[breadcrumb.id]["values"].append(value)
                continue
            entry = self._describe(value, breadcrumb)
            if breadcrumb is not None:
                by_category_id[breadcrumb.id] = entry
            described.append(entry)
        return described

    @staticmethod
    def _describe(value, breadcrumb: Optional[Breadcrumb]) -> Dict[str, Any]:
        return {
            "category_id": breadcrumb.id if breadcrumb else None,
            "display_name": breadcrumb.display_name if breadcrumb else None,
            "hierarchical_name": breadcrumb.hierarchical_name if breadcrumb else None,
            "values": [value],
        }
