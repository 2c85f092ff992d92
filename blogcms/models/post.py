"""Post database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, Relationship, SQLModel, String

from blogcms.configs import MAX_META_DESCRIPTION_LENGTH, MAX_TITLE_LENGTH
from blogcms.models.category import CategoryDB, JSONVariant
from blogcms.utils.helpers import utc_now


class PostDB(SQLModel, table=True):
    """
    Post database model.

    ``category_id`` references a category row; ``sub_category_id`` holds the id
    of one of the subcategory records embedded in that category.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_category_sub_category", "category_id", "sub_category_id"),
        Index("ix_posts_author_created", "author_id", "created_at"),
    )

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Post ID",
    )
    author_id: UUID = Field(
        sa_column=Column(Uuid, nullable=False, index=True),
        description="ID of the admin who wrote the post",
    )

    title: str = Field(
        sa_column=Column(String(MAX_TITLE_LENGTH), nullable=False),
        description="Post title",
    )
    meta_description: str | None = Field(
        default=None,
        sa_column=Column(String(MAX_META_DESCRIPTION_LENGTH)),
        description="SEO meta description",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Post content",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONVariant, nullable=False),
        description="Ordered post tags",
    )
    thumbnail: dict[str, str] | None = Field(
        default=None,
        sa_column=Column(JSONVariant),
        description="Thumbnail reference: {'url': ..., 'fileId': ...}",
    )

    category_id: UUID | None = Field(
        default=None,
        sa_column=Column(Uuid, ForeignKey("categories.id", ondelete="SET NULL"), index=True),
        description="Category ID (foreign key to categories.id)",
    )
    sub_category_id: str | None = Field(
        default=None,
        sa_column=Column(String(36)),
        description="ID of a subcategory embedded in the category",
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    # Only loaded on demand (selectinload) for reference population
    category: CategoryDB | None = Relationship(sa_relationship_kwargs={"lazy": "raise"})

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Async SQLAlchemy in Practice",
                "meta_description": "Patterns for async database access",
                "content": "SQLAlchemy 2.0 ships a first-class asyncio extension...",
                "tags": ["python", "sqlalchemy"],
                "thumbnail": {"url": "https://cdn.example.com/t.jpg", "fileId": "blog-thumbnails/t"},
                "category_id": "550e8400-e29b-41d4-a716-446655440001",
                "sub_category_id": "9b2f6c1e-7d1a-4c55-9b7e-3f0f7c1b2a10",
            },
        },
    )
