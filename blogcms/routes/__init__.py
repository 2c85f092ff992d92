from blogcms.routes.category import router as category_router
from blogcms.routes.post import router as post_router

__all__ = [
    "category_router",
    "post_router",
]
