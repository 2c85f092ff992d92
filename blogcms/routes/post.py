# blogcms/routes/post.py

"""
Post Routes.

Provides listing, lookup and authoring endpoints for blog posts.

Summary
-------
Endpoints include:
  - Create post (multipart, with thumbnail)
  - List posts (keyword search, field filters, pagination)
  - Get post by id
  - Update post (multipart, optional thumbnail replacement)
  - Delete post
  - List posts of a subcategory, addressed by category and subcategory names

Dependencies
------------
  - `PostServiceDep`: Post service bound to the request session.
  - `AdminDep`: Authenticated admin identity (authoring endpoints only).

Listing parameters
------------------
``GET /posts/all`` accepts ``keyword``, ``page``, ``sort`` and any post field
as a filter, e.g. ``?keyword=async&category=<uuid>&createdAt[gte]=2026-01-01``.
"""

from dataclasses import dataclass
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from blogcms.dependencies import AdminDep, PostServiceDep, QueryParamsDep
from blogcms.schemas import PostCreate, PostPage, PostResponse, PostUpdate, ProjectedPostResponse
from blogcms.utils.forms import parse_tags, validate_form

router = APIRouter(prefix="/posts", tags=["📝 Posts"])

POST_EXAMPLE = {
    "id": "550e8400-e29b-41d4-a716-446655440000",
    "authorId": "123e4567-e89b-12d3-a456-426614174000",
    "title": "Async SQLAlchemy in Practice",
    "metaDescription": "Patterns for async database access",
    "content": "SQLAlchemy 2.0 ships a first-class asyncio extension...",
    "tags": ["python", "sqlalchemy"],
    "thumbnail": {"url": "https://cdn.example.com/t.jpg", "fileId": "blog-thumbnails/t"},
    "category": "550e8400-e29b-41d4-a716-446655440001",
    "subCategory": "9b2f6c1e-7d1a-4c55-9b7e-3f0f7c1b2a10",
    "createdAt": "2026-01-01T00:00:00Z",
    "updatedAt": None,
}

UNAUTHORIZED_RESPONSE = {
    "description": "Missing or invalid admin token",
    "content": {"application/json": {"example": {"detail": "Could not validate credentials"}}},
}


@dataclass(frozen=True)
class PostFormFields:
    """
    Raw multipart fields shared by create and update.

    Parameters
    ----------
    title, content, meta_description : str | None
        Text fields as sent.
    tags : list[str] | None
        Repeated ``tags`` fields, or a single JSON array string.
    category, sub_category : str | None
        Category id and embedded subcategory id.
    """

    title: str | None = None
    content: str | None = None
    meta_description: str | None = None
    tags: list[str] | None = None
    category: str | None = None
    sub_category: str | None = None

    def payload(self) -> dict[str, Any]:
        """Alias-keyed values that were actually sent (blank strings dropped)."""
        values = {
            "title": self.title,
            "content": self.content,
            "metaDescription": self.meta_description,
            "tags": parse_tags(self.tags),
            "category": self.category,
            "subCategory": self.sub_category,
        }
        return {key: value for key, value in values.items() if value not in (None, "")}


def get_post_form(
    title: Annotated[str | None, Form()] = None,
    content: Annotated[str | None, Form()] = None,
    meta_description: Annotated[str | None, Form(alias="metaDescription")] = None,
    tags: Annotated[list[str] | None, Form(description="Repeated fields or a JSON array")] = None,
    category: Annotated[str | None, Form(description="Category ID")] = None,
    sub_category: Annotated[str | None, Form(alias="subCategory", description="Subcategory ID")] = None,
) -> PostFormFields:
    """
    Dependency to collect post form fields.

    Returns
    -------
    PostFormFields
        Aggregated form values.
    """
    return PostFormFields(
        title=title,
        content=content,
        meta_description=meta_description,
        tags=tags,
        category=category,
        sub_category=sub_category,
    )


PostFormDep = Annotated[PostFormFields, Depends(get_post_form)]
ThumbnailFile = Annotated[UploadFile | None, File(description="Thumbnail image (JPEG, PNG or WebP)")]


@router.post(
    "/create",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a new post",
    description="Create a blog post from multipart form fields and a thumbnail image.",
    responses={
        201: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        400: {
            "description": "Missing thumbnail or invalid fields",
            "content": {"application/json": {"example": {"detail": "Please upload a thumbnail"}}},
        },
        401: UNAUTHORIZED_RESPONSE,
        404: {
            "description": "Category or subcategory not found",
            "content": {
                "application/json": {"example": {"detail": "Category with ID <uuid> not found"}},
            },
        },
        502: {
            "description": "Image storage failure",
            "content": {"application/json": {"example": {"detail": "Failed to upload thumbnail"}}},
        },
    },
    operation_id="posts_create",
)
async def create_post(
    form: PostFormDep,
    thumbnail: ThumbnailFile,
    service: PostServiceDep,
    admin: AdminDep,
) -> PostResponse:
    """
    Create a new post.

    Parameters
    ----------
    form : PostFormFields
        Post fields from the multipart body.
    thumbnail : UploadFile | None
        Thumbnail image; required.
    service : PostService
        Post service dependency.
    admin : AdminIdentity
        Authenticated admin, recorded as author.

    Returns
    -------
    PostResponse
        Created post.
    """
    data = validate_form(PostCreate, form.payload())
    return await service.create_post(data, thumbnail, admin)


@router.get(
    "/all",
    response_class=ORJSONResponse,
    response_model=PostPage,
    summary="List posts",
    description=(
        "Search by title keyword, filter by any post field (``field=value`` or "
        "``field[gt|gte|lt|lte]=value``) and page through results."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "items": [POST_EXAMPLE],
                        "pageSize": 15,
                        "currentPage": 1,
                        "filteredCount": 1,
                        "totalCount": 37,
                        "totalPages": 1,
                    },
                },
            },
        },
        400: {
            "description": "Invalid filter",
            "content": {"application/json": {"example": {"detail": "Unknown field 'colour'"}}},
        },
    },
    operation_id="posts_list",
)
async def list_posts(params: QueryParamsDep, service: PostServiceDep) -> PostPage:
    """
    List posts with search, filters and pagination.

    Parameters
    ----------
    params : dict[str, str | list[str]]
        Raw query parameters.
    service : PostService
        Post service dependency.

    Returns
    -------
    PostPage
        One page of posts with filtered and total counts.

    Examples
    --------
    Request
        GET /posts/all?keyword=python&page=2
    Response
        200 OK
        {"items": [...], "pageSize": 15, "currentPage": 2, "filteredCount": 20, "totalCount": 37, "totalPages": 2}
    """
    return await service.list_posts(params)


@router.get(
    "/by-id/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get post by ID",
    description="Retrieve a post by its UUID.",
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        404: {
            "description": "Not found",
            "content": {"application/json": {"example": {"detail": "Post with ID <uuid> not found"}}},
        },
    },
    operation_id="posts_get_by_id",
)
async def get_post(post_id: UUID, service: PostServiceDep) -> PostResponse:
    """
    Get post by ID.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    service : PostService
        Post service dependency.

    Returns
    -------
    PostResponse
        Post data.
    """
    return await service.get_post(post_id)


@router.put(
    "/update/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Update a post",
    description="Update post fields and optionally replace the thumbnail. Author only.",
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        400: {
            "description": "No fields provided",
            "content": {"application/json": {"example": {"detail": "No fields provided for update"}}},
        },
        401: UNAUTHORIZED_RESPONSE,
        403: {
            "description": "Not the author",
            "content": {
                "application/json": {"example": {"detail": "You are not authorized to update this post"}},
            },
        },
        404: {
            "description": "Not found",
            "content": {"application/json": {"example": {"detail": "Post with ID <uuid> not found"}}},
        },
        502: {
            "description": "Image storage failure (the update itself is kept)",
            "content": {"application/json": {"example": {"detail": "Failed to delete thumbnail"}}},
        },
    },
    operation_id="posts_update",
)
async def update_post(
    post_id: UUID,
    form: PostFormDep,
    thumbnail: ThumbnailFile,
    service: PostServiceDep,
    admin: AdminDep,
) -> PostResponse:
    """
    Update a post.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    form : PostFormFields
        Fields to change; omitted fields stay as they are.
    thumbnail : UploadFile | None
        Replacement thumbnail, if any.
    service : PostService
        Post service dependency.
    admin : AdminIdentity
        Authenticated admin; must be the post author.

    Returns
    -------
    PostResponse
        Updated post.
    """
    changes = validate_form(PostUpdate, form.payload())
    return await service.update_post(post_id, changes, thumbnail, admin)


@router.delete(
    "/delete/{post_id}",
    response_class=Response,
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete a post",
    description="Delete a post and release its thumbnail. Author only.",
    responses={
        401: UNAUTHORIZED_RESPONSE,
        403: {
            "description": "Not the author",
            "content": {
                "application/json": {"example": {"detail": "You are not authorized to delete this post"}},
            },
        },
        404: {
            "description": "Not found",
            "content": {"application/json": {"example": {"detail": "Post with ID <uuid> not found"}}},
        },
        502: {
            "description": "Image storage failure (the post is still deleted)",
            "content": {"application/json": {"example": {"detail": "Failed to delete thumbnail"}}},
        },
    },
    operation_id="posts_delete",
)
async def delete_post(post_id: UUID, service: PostServiceDep, admin: AdminDep) -> Response:
    """
    Delete a post.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    service : PostService
        Post service dependency.
    admin : AdminIdentity
        Authenticated admin; must be the post author.

    Returns
    -------
    Response
        Empty 204 response.
    """
    await service.delete_post(post_id, admin)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get(
    "/by-sub-category/{category}/{sub_category}",
    response_class=ORJSONResponse,
    response_model=list[ProjectedPostResponse],
    summary="List posts of a subcategory",
    description=(
        "Resolve a category name and a subcategory name (case-insensitive) and list "
        "the posts filed under them, with the subcategory name in place of its id."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": [
                        {
                            **POST_EXAMPLE,
                            "category": {
                                "id": "550e8400-e29b-41d4-a716-446655440001",
                                "name": "Technology",
                            },
                            "subCategory": "Python",
                        },
                    ],
                },
            },
        },
        404: {
            "description": "Unknown category/subcategory, or no posts filed under it",
            "content": {
                "application/json": {"example": {"detail": "No posts found for this subcategory"}},
            },
        },
    },
    operation_id="posts_by_sub_category",
)
async def list_posts_by_sub_category(
    category: str,
    sub_category: str,
    service: PostServiceDep,
) -> list[ProjectedPostResponse]:
    """
    List posts of a subcategory addressed by names.

    Parameters
    ----------
    category : str
        Exact category name.
    sub_category : str
        Subcategory name, matched ignoring case.
    service : PostService
        Post service dependency.

    Returns
    -------
    list[ProjectedPostResponse]
        Posts with the subcategory resolved to its name.
    """
    return await service.get_posts_by_sub_category_name(category, sub_category)
