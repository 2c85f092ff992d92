from blogcms.schemas.auth import AdminIdentity, TokenData
from blogcms.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategorySummary,
    SubCategory,
    SubCategoryCreate,
)
from blogcms.schemas.health import HealthCheckResponse
from blogcms.schemas.post import (
    PostCreate,
    PostPage,
    PostResponse,
    PostUpdate,
    ProjectedPostResponse,
    Thumbnail,
)

__all__ = [
    "AdminIdentity",
    "CategoryCreate",
    "CategoryResponse",
    "CategorySummary",
    "HealthCheckResponse",
    "PostCreate",
    "PostPage",
    "PostResponse",
    "PostUpdate",
    "ProjectedPostResponse",
    "SubCategory",
    "SubCategoryCreate",
    "Thumbnail",
    "TokenData",
]
