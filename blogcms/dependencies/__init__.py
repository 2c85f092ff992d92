# blogcms/dependencies/__init__.py

from blogcms.dependencies.dependencies import (
    AdminDep,
    CategoryRepoDep,
    MediaServiceDep,
    PostServiceDep,
    QueryParamsDep,
    SessionDep,
    get_category_repository,
    get_current_admin,
    get_media_service,
    get_post_service,
    get_query_params,
)

__all__ = [
    "AdminDep",
    "CategoryRepoDep",
    "MediaServiceDep",
    "PostServiceDep",
    "QueryParamsDep",
    "SessionDep",
    "get_category_repository",
    "get_current_admin",
    "get_media_service",
    "get_post_service",
    "get_query_params",
]
