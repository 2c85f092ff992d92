"""
Post schemas for the blogcms application.

This module defines the request and response models for blog posts,
the paginated listing envelope and the projected (subcategory-resolved)
representation used by category browsing.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StringConstraints, field_validator

from blogcms.configs import MAX_META_DESCRIPTION_LENGTH, MAX_TAGS_COUNT, MAX_TITLE_LENGTH
from blogcms.schemas.category import CategorySummary

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_TITLE_LENGTH)]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
MetaDescription = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=MAX_META_DESCRIPTION_LENGTH),
]


def _clean_tags(tags: list[str]) -> list[str]:
    cleaned = [tag.strip() for tag in tags]
    if any(not tag for tag in cleaned):
        mssg = "Tags must be non-empty strings"
        raise ValueError(mssg)
    return cleaned


class Thumbnail(BaseModel):
    """Reference to a stored thumbnail image."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: str = Field(..., description="Public URL of the stored image")
    file_id: str = Field(..., alias="fileId", description="Handle used to delete the image")


class PostCreate(BaseModel):
    """Post creation model (excludes generated fields and the thumbnail file)."""

    model_config = ConfigDict(populate_by_name=True)

    title: Title = Field(..., examples=["Async SQLAlchemy in Practice"])
    meta_description: MetaDescription | None = Field(default=None, alias="metaDescription")
    content: Content = Field(...)
    tags: list[str] = Field(
        ...,
        min_length=1,
        max_length=MAX_TAGS_COUNT,
        examples=[["python", "sqlalchemy"]],
    )
    category_id: UUID | None = Field(default=None, alias="category")
    sub_category_id: str | None = Field(default=None, alias="subCategory")

    @field_validator("tags", mode="after")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Strip tags and reject blank ones, keeping order."""
        return _clean_tags(v)


class PostUpdate(BaseModel):
    """Post update model (all fields optional)."""

    model_config = ConfigDict(populate_by_name=True)

    title: Title | None = None
    meta_description: MetaDescription | None = Field(default=None, alias="metaDescription")
    content: Content | None = None
    tags: list[str] | None = Field(default=None, min_length=1, max_length=MAX_TAGS_COUNT)
    category_id: UUID | None = Field(default=None, alias="category")
    sub_category_id: str | None = Field(default=None, alias="subCategory")

    @field_validator("tags", mode="after")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        """Strip tags and reject blank ones, keeping order."""
        if v is None:
            return v
        return _clean_tags(v)


class PostResponse(BaseModel):
    """Post response model."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    author_id: UUID = Field(alias="authorId")
    title: str
    meta_description: str | None = Field(default=None, alias="metaDescription")
    content: str
    tags: list[str]
    thumbnail: Thumbnail | None = None
    # Read from the column, never from the ``category`` relationship
    category_id: UUID | None = Field(
        default=None,
        validation_alias=AliasChoices("category_id", "category"),
        serialization_alias="category",
    )
    sub_category_id: str | None = Field(default=None, alias="subCategory")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class PostPage(BaseModel):
    """One page of a post listing with its counts."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[PostResponse]
    page_size: int = Field(alias="pageSize")
    current_page: int = Field(alias="currentPage")
    filtered_count: int = Field(alias="filteredCount")
    total_count: int = Field(alias="totalCount")
    total_pages: int = Field(alias="totalPages")


class ProjectedPostResponse(BaseModel):
    """Post with its subcategory id resolved to a name and the category flattened."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    author_id: UUID = Field(alias="authorId")
    title: str
    meta_description: str | None = Field(default=None, alias="metaDescription")
    content: str
    tags: list[str]
    thumbnail: Thumbnail | None = None
    category: CategorySummary | None = None
    sub_category: str | None = Field(default=None, alias="subCategory")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
