"""Projection of posts with their subcategory reference resolved to a name."""

from collections.abc import Iterable

from blogcms.models.post import PostDB
from blogcms.monitoring import get_logger
from blogcms.schemas.category import CategorySummary
from blogcms.schemas.post import ProjectedPostResponse

logger = get_logger(__name__)


def _sub_category_name(post: PostDB) -> str | None:
    if post.sub_category_id is None or post.category is None:
        return None
    for entry in post.category.sub_categories:
        if entry.get("id") == post.sub_category_id:
            return entry.get("name")
    return None


def project_sub_categories(posts: Iterable[PostDB]) -> list[ProjectedPostResponse]:
    """
    Project posts with their ``category`` relationship loaded.

    Each output carries the subcategory *name* in place of the id and a
    category summary without the subcategory list. A subcategory id that is
    no longer present in its category projects to ``None``.

    Args:
        posts: Posts whose ``category`` attribute is populated

    Returns:
        list[ProjectedPostResponse]: One record per post, input order kept
    """
    projected = []
    for post in posts:
        name = _sub_category_name(post)
        if name is None and post.sub_category_id is not None:
            logger.warning(
                f"Post {post.id} references unknown subcategory {post.sub_category_id} "
                f"in category {post.category_id}",
            )

        category = post.category
        projected.append(
            ProjectedPostResponse(
                id=post.id,
                author_id=post.author_id,
                title=post.title,
                meta_description=post.meta_description,
                content=post.content,
                tags=list(post.tags),
                thumbnail=post.thumbnail,
                category=CategorySummary(id=category.id, name=category.name) if category else None,
                sub_category=name,
                created_at=post.created_at,
                updated_at=post.updated_at,
            ),
        )
    return projected
