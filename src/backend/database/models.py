"""
SQLAlchemy models for the posts table of the hosted store.

Only the columns the category service reads or writes are mapped; the rest
of the post record belongs to the CMS front end.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import DeclarativeBase
import enum


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class PostStatusEnum(str, enum.Enum):
    """Publication status of a post."""
    PUBLISH = "publish"
    DRAFT = "draft"
    PRIVATE = "private"
    SCHEDULED = "scheduled"


class Post(Base):
    """
    A news article.

    Category is stored two ways depending on which editor revision wrote it:
    the legacy free-text `category` column ("News > Local", "Opinion") and the
    numeric `category_id` used for all new writes.
    """
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(Text, nullable=False)
    status = Column(String(20), default=PostStatusEnum.DRAFT.value, nullable=False)

    # Category
    category = Column(String(500), nullable=True)  # Legacy field for backward compatibility
    category_id = Column(Integer, nullable=True)  # Taxonomy id (see taxonomy.definitions)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('ix_posts_category_id', 'category_id'),
        Index('ix_posts_created_at', 'created_at'),
    )


class Category(Base):
    """
    Mirror of the static taxonomy for consumers that read categories from
    the database.

    Rows are written only by the category seed; taxonomy.definitions stays
    the source of truth.
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=False)

    name = Column(String(200), nullable=False)
    display_name = Column(String(200), nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    level = Column(Integer, nullable=False)  # 1, 2 or 3
    url_path = Column(String(500), nullable=False, unique=True)
    hierarchical_name = Column(String(1000), nullable=False)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('ix_categories_parent_id', 'parent_id'),
    )
