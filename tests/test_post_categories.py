"""
Tests for the post category service.

Database access is mocked; the resolver runs against the published taxonomy.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Post
from services.post_categories import PostCategoryService, PostCategoryServiceError


def _post(post_id, category=None, category_id=None):
    post = MagicMock(spec=Post)
    post.id = post_id
    post.category = category
    post.category_id = category_id
    return post


@pytest.fixture
def mock_db_session():
    """Mock database session."""
    session = AsyncMock(spec=AsyncSession)
    return session


@pytest.fixture
def legacy_posts():
    """Posts written by older editor revisions."""
    return [
        _post(1, "News > Local"),
        _post(2, "Opinion"),
        _post(3, "Wine Match"),
        _post(4, "Breaking News"),
    ]


class TestResolvePostCategory:
    """Test resolve_post_category."""

    def test_category_id_wins(self, mock_db_session):
        """A valid category_id is used even if the legacy string differs."""
        service = PostCategoryService(mock_db_session)
        breadcrumb = service.resolve_post_category(_post(1, "News > Local", category_id=321))
        assert breadcrumb.id == 321

    def test_unknown_id_falls_back_to_legacy_string(self, mock_db_session):
        """An id outside the taxonomy falls back to the stored string."""
        service = PostCategoryService(mock_db_session)
        breadcrumb = service.resolve_post_category(_post(1, "News > World", category_id=9999))
        assert breadcrumb.id == 13

    def test_post_without_category(self, mock_db_session):
        """A post with no category resolves to None."""
        service = PostCategoryService(mock_db_session)
        assert service.resolve_post_category(_post(1)) is None


class TestBackfillCategoryIds:
    """Test backfill_category_ids."""

    @pytest.mark.asyncio
    async def test_backfill_assigns_ids(self, mock_db_session, legacy_posts):
        """Resolvable legacy strings get a numeric category_id."""
        with patch('services.post_categories.PostRepository') as mock_repo_class:
            mock_repo = AsyncMock()
            mock_repo.get_needing_category_id.return_value = legacy_posts
            mock_repo_class.return_value = mock_repo

            service = PostCategoryService(mock_db_session)
            report = await service.backfill_category_ids()

            assert report.total == 4
            assert report.updated == 3
            assert report.unresolved == [{"post_id": 4, "category": "Breaking News"}]

            assert [p.category_id for p in legacy_posts] == [11, 4, 212, None]
            # Legacy strings are kept
            assert legacy_posts[0].category == "News > Local"

            assert mock_db_session.add.call_count == 3
            mock_db_session.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_dry_run_writes_nothing(self, mock_db_session, legacy_posts):
        """A dry run reports but does not modify posts or commit."""
        with patch('services.post_categories.PostRepository') as mock_repo_class:
            mock_repo = AsyncMock()
            mock_repo.get_needing_category_id.return_value = legacy_posts
            mock_repo_class.return_value = mock_repo

            service = PostCategoryService(mock_db_session)
            report = await service.backfill_category_ids(dry_run=True)

            assert report.dry_run is True
            assert report.updated == 3
            assert all(p.category_id is None for p in legacy_posts)
            mock_db_session.add.assert_not_called()
            mock_db_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_nothing_to_backfill(self, mock_db_session):
        """No posts means no commit."""
        with patch('services.post_categories.PostRepository') as mock_repo_class:
            mock_repo = AsyncMock()
            mock_repo.get_needing_category_id.return_value = []
            mock_repo_class.return_value = mock_repo

            service = PostCategoryService(mock_db_session)
            report = await service.backfill_category_ids()

            assert report.to_dict() == {"dry_run": False, "total": 0, "updated": 0, "unresolved": []}
            mock_db_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_load_failure_raises_service_error(self, mock_db_session):
        """Database errors while loading posts surface as PostCategoryServiceError."""
        with patch('services.post_categories.PostRepository') as mock_repo_class:
            mock_repo = AsyncMock()
            mock_repo.get_needing_category_id.side_effect = SQLAlchemyError("connection lost")
            mock_repo_class.return_value = mock_repo

            service = PostCategoryService(mock_db_session)
            with pytest.raises(PostCategoryServiceError, match="Failed to load posts"):
                await service.backfill_category_ids()

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, mock_db_session, legacy_posts):
        """A failed commit is rolled back and reported."""
        mock_db_session.commit.side_effect = SQLAlchemyError("constraint violated")
        with patch('services.post_categories.PostRepository') as mock_repo_class:
            mock_repo = AsyncMock()
            mock_repo.get_needing_category_id.return_value = legacy_posts
            mock_repo_class.return_value = mock_repo

            service = PostCategoryService(mock_db_session)
            with pytest.raises(PostCategoryServiceError, match="Failed to save category ids"):
                await service.backfill_category_ids()

            mock_db_session.rollback.assert_called_once()


class TestDescribeCategoriesInUse:
    """Test describe_categories_in_use."""

    @pytest.mark.asyncio
    async def test_describes_ids_and_legacy_values(self, mock_db_session):
        """Stored ids and strings are described; unknown values keep null names."""
        with patch('services.post_categories.PostRepository') as mock_repo_class:
            mock_repo = AsyncMock()
            mock_repo.get_unique_category_ids.return_value = [11, 9999]
            mock_repo.get_unique_categories.return_value = ["Lifestyle > Travel", "Breaking News"]
            mock_repo_class.return_value = mock_repo

            service = PostCategoryService(mock_db_session)
            described = await service.describe_categories_in_use()

            assert described == [
                {"category_id": 11, "display_name": "Local", "hierarchical_name": "News > Local",
                 "values": [11]},
                {"category_id": None, "display_name": None, "hierarchical_name": None,
                 "values": [9999]},
                {"category_id": 23, "display_name": "Travel", "hierarchical_name": "Lifestyle > Travel",
                 "values": ["Lifestyle > Travel"]},
                {"category_id": None, "display_name": None, "hierarchical_name": None,
                 "values": ["Breaking News"]},
            ]

    @pytest.mark.asyncio
    async def test_values_for_one_category_are_merged(self, mock_db_session):
        """An id, a hierarchical name and a display name for Local give a single entry."""
        with patch('services.post_categories.PostRepository') as mock_repo_class:
            mock_repo = AsyncMock()
            mock_repo.get_unique_category_ids.return_value = [11]
            mock_repo.get_unique_categories.return_value = ["News > Local", "Local"]
            mock_repo_class.return_value = mock_repo

            service = PostCategoryService(mock_db_session)
            described = await service.describe_categories_in_use()

            assert described == [
                {"category_id": 11, "display_name": "Local", "hierarchical_name": "News > Local",
                 "values": [11, "News > Local", "Local"]},
            ]

    @pytest.mark.asyncio
    async def test_database_error(self, mock_db_session):
        """Database errors surface as PostCategoryServiceError."""
        with patch('services.post_categories.PostRepository') as mock_repo_class:
            mock_repo = AsyncMock()
            mock_repo.get_unique_category_ids.side_effect = SQLAlchemyError("timeout")
            mock_repo_class.return_value = mock_repo

            service = PostCategoryService(mock_db_session)
            with pytest.raises(PostCategoryServiceError):
                await service.describe_categories_in_use()
