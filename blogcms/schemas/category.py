"""Category and subcategory schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from blogcms.configs import MAX_CATEGORY_NAME_LENGTH

CategoryName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_CATEGORY_NAME_LENGTH),
]


class SubCategory(BaseModel):
    """Subcategory value embedded in a category; its id is unique only within that category."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="Subcategory ID")
    name: str = Field(..., description="Subcategory name")


class CategoryCreate(BaseModel):
    """Category creation payload."""

    name: CategoryName = Field(
        ...,
        description="Category name (unique)",
        examples=["Technology"],
    )


class SubCategoryCreate(BaseModel):
    """Subcategory creation payload."""

    name: CategoryName = Field(
        ...,
        description="Subcategory name (unique within its category, case-insensitive)",
        examples=["Python"],
    )


class CategoryResponse(BaseModel):
    """Category response including its subcategories."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    name: str
    sub_categories: list[SubCategory] = Field(default_factory=list, alias="subCategory")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class CategorySummary(BaseModel):
    """Category reference as exposed on projected posts (no subcategory list)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
