"""
Post service.

Coordinates the post and category repositories with thumbnail storage:
listing through the query pipeline, authoring rules, and the ordering of
database writes against storage calls.
"""

from math import ceil
from typing import Any
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.configs.settings import settings
from blogcms.errors.auth import NotAuthorError
from blogcms.errors.database import RecordNotFoundError
from blogcms.errors.upload import MissingThumbnailError, StorageError
from blogcms.errors.validation import ValidationError
from blogcms.models.post import PostDB
from blogcms.monitoring import get_logger
from blogcms.repositories.category import CategoryRepository
from blogcms.repositories.post import PostRepository
from blogcms.schemas.auth import AdminIdentity
from blogcms.schemas.post import (
    PostCreate,
    PostPage,
    PostResponse,
    PostUpdate,
    ProjectedPostResponse,
    Thumbnail,
)
from blogcms.services.media import MediaService
from blogcms.services.projection import project_sub_categories
from blogcms.utils.query_features import QueryParams

logger = get_logger(__name__)

DEFAULT_POST_SORT = "-createdAt"


def _stored_thumbnail(post: PostDB) -> Thumbnail | None:
    return Thumbnail.model_validate(post.thumbnail) if post.thumbnail else None


class PostService:
    """
    Service for blog post operations.

    Storage calls are ordered around the database writes: a thumbnail is
    uploaded before its post is inserted, and an old thumbnail is released
    only after the change that dropped it has been committed.
    """

    def __init__(self, session: AsyncSession, media: MediaService) -> None:
        """
        Initialize the post service.

        Args:
            session: Request-scoped database session
            media: Thumbnail service
        """
        self.session = session
        self.posts = PostRepository(session)
        self.categories = CategoryRepository(session)
        self.media = media

    @staticmethod
    def _ensure_author(post: PostDB, actor: AdminIdentity, action: str) -> None:
        if post.author_id != actor.id:
            logger.warning(f"Admin {actor.id} attempted to {action} post {post.id} of {post.author_id}")
            raise NotAuthorError(action=action, resource="post")

    async def _ensure_classification(
        self,
        category_id: UUID | None,
        sub_category_id: str | None,
    ) -> None:
        """Check that a category/subcategory pair names existing records."""
        if category_id is None:
            if sub_category_id is not None:
                raise ValidationError(detail="A subcategory requires a category")
            return

        category = await self.categories.get_or_raise(category_id)
        if sub_category_id is None:
            return

        if all(entry["id"] != sub_category_id for entry in category.sub_categories):
            mssg = f"Subcategory with ID {sub_category_id} not found in category '{category.name}'"
            raise RecordNotFoundError(detail=mssg)

    async def list_posts(self, params: QueryParams) -> PostPage:
        """
        Get one page of posts matching the search and filter parameters.

        Args:
            params: Raw request parameters (``keyword``, ``page``, ``sort``, filters)

        Returns:
            PostPage: Items plus page size, current page, filtered and total counts
        """
        page_size = settings.POSTS_PER_PAGE
        matching = self.posts.features(params).search().filter()

        filtered_count = await matching.count(self.session)
        total_count = await self.posts.count()

        page = matching.sort(DEFAULT_POST_SORT).paginate(page_size)
        posts = await page.execute(self.session)

        return PostPage(
            items=[PostResponse.model_validate(post) for post in posts],
            page_size=page_size,
            current_page=page.page,
            filtered_count=filtered_count,
            total_count=total_count,
            total_pages=ceil(filtered_count / page_size),
        )

    async def get_post(self, post_id: UUID) -> PostResponse:
        """
        Get a post by ID.

        Raises:
            RecordNotFoundError: If the post does not exist
        """
        post = await self.posts.get_or_raise(post_id)
        return PostResponse.model_validate(post)

    async def create_post(
        self,
        data: PostCreate,
        thumbnail_file: UploadFile | None,
        actor: AdminIdentity,
    ) -> PostResponse:
        """
        Create a post with its thumbnail.

        Nothing is written to the database unless the thumbnail upload
        succeeds.

        Args:
            data: Validated post fields
            thumbnail_file: Uploaded thumbnail image
            actor: Authenticated admin, recorded as author

        Returns:
            PostResponse: The created post

        Raises:
            MissingThumbnailError: If no thumbnail file was sent
            ValidationError: If a subcategory is given without a category
            RecordNotFoundError: If the category or subcategory does not exist
            StorageError: If the thumbnail upload fails
        """
        if thumbnail_file is None:
            raise MissingThumbnailError

        await self._ensure_classification(data.category_id, data.sub_category_id)

        thumbnail = await self.media.upload_thumbnail(thumbnail_file)
        try:
            post = await self.posts.create(data, actor.id, thumbnail)
        except Exception:
            await self._discard_orphan(thumbnail)
            raise

        logger.info(f"Post created: {post.id} by {actor.id}")
        return PostResponse.model_validate(post)

    async def _discard_orphan(self, thumbnail: Thumbnail) -> None:
        """Release a thumbnail whose post could not be saved."""
        try:
            await self.media.release_thumbnail(thumbnail)
        except StorageError:
            logger.exception(f"Orphaned thumbnail left in storage: {thumbnail.file_id}")

    async def update_post(
        self,
        post_id: UUID,
        changes: PostUpdate,
        thumbnail_file: UploadFile | None,
        actor: AdminIdentity,
    ) -> PostResponse:
        """
        Update a post, optionally replacing its thumbnail.

        The replacement is uploaded first and released again if the update
        fails; the previous image is released after the update is committed,
        so a release failure leaves the update in place and is reported as
        ``StorageError``. Moving a post to another category without naming a
        subcategory clears its subcategory.

        Raises:
            RecordNotFoundError: If the post, category or subcategory does not exist
            NotAuthorError: If the actor did not write the post
            ValidationError: If no fields were provided
            StorageError: If uploading or releasing a thumbnail fails
        """
        post = await self.posts.get_or_raise(post_id)
        self._ensure_author(post, actor, "update")

        values: dict[str, Any] = changes.model_dump(exclude_unset=True, exclude_none=True)
        if not values and thumbnail_file is None:
            raise ValidationError(detail="No fields provided for update")

        # A subcategory belongs to its category; moving without naming one drops it
        moved = values.get("category_id", post.category_id) != post.category_id
        if moved and "sub_category_id" not in values:
            values["sub_category_id"] = None

        if "category_id" in values or "sub_category_id" in values:
            await self._ensure_classification(
                values.get("category_id", post.category_id),
                values.get("sub_category_id", post.sub_category_id),
            )

        previous = replacement = None
        if thumbnail_file is not None:
            previous = _stored_thumbnail(post)
            replacement = await self.media.upload_thumbnail(thumbnail_file)
            values["thumbnail"] = replacement.model_dump(by_alias=True)

        try:
            post = await self.posts.update(post, values)
            await self.session.commit()
        except Exception:
            if replacement is not None:
                await self._discard_orphan(replacement)
            raise

        logger.info(f"Post updated: {post.id} fields={sorted(values)}")

        await self.media.release_thumbnail(previous)
        return PostResponse.model_validate(post)

    async def delete_post(self, post_id: UUID, actor: AdminIdentity) -> None:
        """
        Delete a post and release its thumbnail.

        Raises:
            RecordNotFoundError: If the post does not exist
            NotAuthorError: If the actor did not write the post
            StorageError: If releasing the thumbnail fails (the post stays deleted)
        """
        post = await self.posts.get_or_raise(post_id)
        self._ensure_author(post, actor, "delete")

        thumbnail = _stored_thumbnail(post)
        await self.posts.delete(post)
        await self.session.commit()
        logger.info(f"Post deleted: {post_id} by {actor.id}")

        await self.media.release_thumbnail(thumbnail)

    async def get_posts_by_sub_category_name(
        self,
        category_name: str,
        sub_category_name: str,
    ) -> list[ProjectedPostResponse]:
        """
        Get posts filed under a subcategory, addressed by names.

        Returns:
            list[ProjectedPostResponse]: Posts with the subcategory name resolved

        Raises:
            RecordNotFoundError: If the category or subcategory does not resolve,
                or no post is filed under it
        """
        category, sub_category = await self.categories.resolve_sub_category_by_name(
            category_name,
            sub_category_name,
        )
        posts = await self.posts.find_by_category_and_sub_category(category.id, sub_category.id)
        if not posts:
            raise RecordNotFoundError(detail="No posts found for this subcategory")

        return project_sub_categories(posts)
