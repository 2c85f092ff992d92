# blogcms/routes/category.py

"""
Category Routes.

Manages categories and the subcategories embedded in them.

Summary
-------
Endpoints include:
  - Create category
  - List categories
  - Get category by id
  - Delete category
  - Add subcategory
  - Delete subcategory (refused while posts reference it)

Dependencies
------------
  - `CategoryRepoDep`: Category repository bound to the request session.
  - `AdminDep`: Authenticated admin identity (mutating endpoints only).
"""

from uuid import UUID

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from blogcms.dependencies import AdminDep, CategoryRepoDep
from blogcms.monitoring import get_logger
from blogcms.schemas import CategoryCreate, CategoryResponse, SubCategoryCreate

router = APIRouter(prefix="/categories", tags=["🗂️ Categories"])

logger = get_logger(__name__)

CATEGORY_EXAMPLE = {
    "id": "550e8400-e29b-41d4-a716-446655440001",
    "name": "Technology",
    "subCategory": [
        {"id": "9b2f6c1e-7d1a-4c55-9b7e-3f0f7c1b2a10", "name": "Python"},
        {"id": "0c7e2a44-2b8d-4e8e-9d55-1a3f7f2d9e01", "name": "Databases"},
    ],
    "createdAt": "2026-01-01T00:00:00Z",
    "updatedAt": None,
}

UNAUTHORIZED_RESPONSE = {
    "description": "Missing or invalid admin token",
    "content": {"application/json": {"example": {"detail": "Could not validate credentials"}}},
}

CATEGORY_NOT_FOUND_RESPONSE = {
    "description": "Not found",
    "content": {"application/json": {"example": {"detail": "Category with ID <uuid> not found"}}},
}


@router.post(
    "/create",
    response_class=ORJSONResponse,
    response_model=CategoryResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a category",
    description="Create a category with an empty subcategory list.",
    responses={
        201: {"content": {"application/json": {"example": {**CATEGORY_EXAMPLE, "subCategory": []}}}},
        401: UNAUTHORIZED_RESPONSE,
        409: {
            "description": "Duplicate name",
            "content": {
                "application/json": {"example": {"detail": "Category 'Technology' already exists"}},
            },
        },
    },
    operation_id="categories_create",
)
async def create_category(
    payload: CategoryCreate,
    repo: CategoryRepoDep,
    admin: AdminDep,
) -> CategoryResponse:
    """
    Create a category.

    Parameters
    ----------
    payload : CategoryCreate
        Category name.
    repo : CategoryRepository
        Repository dependency.
    admin : AdminIdentity
        Authenticated admin.

    Returns
    -------
    CategoryResponse
        Created category.
    """
    category = await repo.create_category(payload.name)
    return CategoryResponse.model_validate(category)


@router.get(
    "/all",
    response_class=ORJSONResponse,
    response_model=list[CategoryResponse],
    summary="List categories",
    description="List all categories with their subcategories.",
    responses={200: {"content": {"application/json": {"example": [CATEGORY_EXAMPLE]}}}},
    operation_id="categories_list",
)
async def list_categories(repo: CategoryRepoDep) -> list[CategoryResponse]:
    """
    List categories.

    Parameters
    ----------
    repo : CategoryRepository
        Repository dependency.

    Returns
    -------
    list[CategoryResponse]
        Every category, ordered by name.
    """
    categories = await repo.get_all()
    return [CategoryResponse.model_validate(category) for category in categories]


@router.get(
    "/by-id/{category_id}",
    response_class=ORJSONResponse,
    response_model=CategoryResponse,
    summary="Get category by ID",
    description="Retrieve a category and its subcategories.",
    responses={
        200: {"content": {"application/json": {"example": CATEGORY_EXAMPLE}}},
        404: CATEGORY_NOT_FOUND_RESPONSE,
    },
    operation_id="categories_get_by_id",
)
async def get_category(category_id: UUID, repo: CategoryRepoDep) -> CategoryResponse:
    """
    Get category by ID.

    Parameters
    ----------
    category_id : UUID
        Category identifier.
    repo : CategoryRepository
        Repository dependency.

    Returns
    -------
    CategoryResponse
        Category data.
    """
    category = await repo.get_or_raise(category_id)
    return CategoryResponse.model_validate(category)


@router.delete(
    "/delete/{category_id}",
    response_class=Response,
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete a category",
    description="Delete a category. Posts filed under it are kept and lose their category.",
    responses={401: UNAUTHORIZED_RESPONSE, 404: CATEGORY_NOT_FOUND_RESPONSE},
    operation_id="categories_delete",
)
async def delete_category(category_id: UUID, repo: CategoryRepoDep, admin: AdminDep) -> Response:
    """
    Delete a category.

    Parameters
    ----------
    category_id : UUID
        Category identifier.
    repo : CategoryRepository
        Repository dependency.
    admin : AdminIdentity
        Authenticated admin.

    Returns
    -------
    Response
        Empty 204 response.
    """
    await repo.delete_category(category_id)
    logger.info(f"Category {category_id} deleted by {admin.id}")
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.post(
    "/{category_id}/sub-categories",
    response_class=ORJSONResponse,
    response_model=CategoryResponse,
    status_code=HTTP_201_CREATED,
    summary="Add a subcategory",
    description="Append a subcategory to a category. Names are unique per category, ignoring case.",
    responses={
        201: {"content": {"application/json": {"example": CATEGORY_EXAMPLE}}},
        401: UNAUTHORIZED_RESPONSE,
        404: CATEGORY_NOT_FOUND_RESPONSE,
        409: {
            "description": "Duplicate subcategory name",
            "content": {
                "application/json": {
                    "example": {"detail": "Subcategory 'Python' already exists in category 'Technology'"},
                },
            },
        },
    },
    operation_id="categories_add_sub_category",
)
async def add_sub_category(
    category_id: UUID,
    payload: SubCategoryCreate,
    repo: CategoryRepoDep,
    admin: AdminDep,
) -> CategoryResponse:
    """
    Add a subcategory.

    Parameters
    ----------
    category_id : UUID
        Owning category.
    payload : SubCategoryCreate
        Subcategory name.
    repo : CategoryRepository
        Repository dependency.
    admin : AdminIdentity
        Authenticated admin.

    Returns
    -------
    CategoryResponse
        Updated category.
    """
    category = await repo.add_sub_category(category_id, payload.name)
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}/sub-categories/{sub_category_id}",
    response_class=ORJSONResponse,
    response_model=CategoryResponse,
    summary="Delete a subcategory",
    description="Remove a subcategory from its category unless posts still reference it.",
    responses={
        200: {"content": {"application/json": {"example": CATEGORY_EXAMPLE}}},
        401: UNAUTHORIZED_RESPONSE,
        404: {
            "description": "Category or subcategory not found",
            "content": {
                "application/json": {
                    "example": {"detail": "Subcategory with ID <id> not found in category 'Technology'"},
                },
            },
        },
        409: {
            "description": "Subcategory still referenced",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Cannot delete subcategory: 3 post(s) still reference it",
                        "reference_count": 3,
                    },
                },
            },
        },
    },
    operation_id="categories_delete_sub_category",
)
async def delete_sub_category(
    category_id: UUID,
    sub_category_id: str,
    repo: CategoryRepoDep,
    admin: AdminDep,
) -> CategoryResponse:
    """
    Delete a subcategory.

    Parameters
    ----------
    category_id : UUID
        Owning category.
    sub_category_id : str
        Embedded subcategory id.
    repo : CategoryRepository
        Repository dependency.
    admin : AdminIdentity
        Authenticated admin.

    Returns
    -------
    CategoryResponse
        Category with the remaining subcategories, order preserved.
    """
    category = await repo.delete_sub_category(category_id, sub_category_id)
    return CategoryResponse.model_validate(category)
