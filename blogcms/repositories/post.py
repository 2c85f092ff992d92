"""Post repository for database operations."""

from typing import Any
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.orm import selectinload

from blogcms.models.post import PostDB
from blogcms.repositories.base import BaseRepository
from blogcms.schemas.post import PostCreate, Thumbnail
from blogcms.utils.helpers import utc_now
from blogcms.utils.query_features import QueryFeatures, QueryParams

# Public parameter names that differ from the column name
POST_FIELD_ALIASES = {
    "category": "category_id",
    "subCategory": "sub_category_id",
    "author": "author_id",
}


class PostRepository(BaseRepository[PostDB]):
    """
    Repository for Post database operations.

    Listing goes through ``features``, which hands back a query pipeline
    bound to the post table; the caller decides which stages to apply.
    """

    model = PostDB

    def features(self, params: QueryParams) -> QueryFeatures[PostDB]:
        """
        Start a search/filter/sort/paginate pipeline over posts.

        Args:
            params: Raw request parameters

        Returns:
            QueryFeatures[PostDB]: Unstaged pipeline searching on ``title``
        """
        return QueryFeatures(
            PostDB,
            params,
            search_field="title",
            aliases=POST_FIELD_ALIASES,
        )

    async def create(self, post: PostCreate, author_id: UUID, thumbnail: Thumbnail) -> PostDB:
        """
        Create a new post in the database.

        Args:
            post: Validated post data
            author_id: UUID of the acting admin
            thumbnail: Already stored thumbnail image

        Returns:
            PostDB: Created post database model

        Raises:
            DatabaseError: For integrity errors (e.g. unknown category id)
        """
        db_post = PostDB(
            author_id=author_id,
            title=post.title,
            meta_description=post.meta_description,
            content=post.content,
            tags=post.tags,
            thumbnail=thumbnail.model_dump(by_alias=True),
            category_id=post.category_id,
            sub_category_id=post.sub_category_id,
            created_at=utc_now(),
        )
        return await self._add_and_refresh(db_post)

    async def update(self, post: PostDB, changes: dict[str, Any]) -> PostDB:
        """
        Apply field changes to a post.

        Args:
            post: Post to modify
            changes: Column values keyed by attribute name

        Returns:
            PostDB: Updated post
        """
        for key, value in changes.items():
            setattr(post, key, value)
        post.updated_at = utc_now()
        return await self._add_and_refresh(post)

    async def delete(self, post: PostDB) -> None:
        """Delete a post."""
        await self._delete(post)

    async def find_by_category_and_sub_category(
        self,
        category_id: UUID,
        sub_category_id: str,
    ) -> list[PostDB]:
        """
        Get posts filed under a subcategory with their category loaded.

        Args:
            category_id: Category UUID
            sub_category_id: Embedded subcategory id

        Returns:
            list[PostDB]: Newest first, ``category`` populated
        """
        statement = (
            select(PostDB)
            .options(selectinload(PostDB.category))  # pyrefly: ignore [bad-argument-type]
            .where(
                PostDB.category_id == category_id,  # pyrefly: ignore [bad-argument-type]
                PostDB.sub_category_id == sub_category_id,  # pyrefly: ignore [bad-argument-type]
            )
            .order_by(desc(PostDB.created_at), PostDB.id)  # pyrefly: ignore [bad-argument-type]
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
