"""Category database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from blogcms.configs import MAX_CATEGORY_NAME_LENGTH
from blogcms.utils.helpers import utc_now

# JSONB on PostgreSQL, plain JSON elsewhere
JSONVariant = JSON().with_variant(JSONB(), "postgresql")


class CategoryDB(SQLModel, table=True):
    """
    Category database model.

    A category owns an ordered list of embedded subcategory records
    (``{"id": ..., "name": ...}``). Subcategories have no table of their own,
    so they cannot outlive the category that holds them.
    """

    __tablename__ = cast("declared_attr[str]", "categories")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Category ID",
    )
    name: str = Field(
        sa_column=Column(String(MAX_CATEGORY_NAME_LENGTH), unique=True, nullable=False, index=True),
        description="Category name (unique, trimmed)",
    )
    sub_categories: list[dict[str, str]] = Field(
        default_factory=list,
        sa_column=Column("sub_category", JSONVariant, nullable=False),
        description="Embedded subcategory records in insertion order",
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "name": "Technology",
                "sub_categories": [
                    {"id": "9b2f6c1e-7d1a-4c55-9b7e-3f0f7c1b2a10", "name": "Python"},
                ],
            },
        },
    )
