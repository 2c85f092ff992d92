"""Category repository: categories and their embedded subcategories."""

from uuid import UUID

from sqlalchemy import func, select, update

from blogcms.errors.database import (
    DuplicateEntryError,
    RecordNotFoundError,
    ReferentialIntegrityError,
)
from blogcms.errors.validation import ValidationError
from blogcms.models.category import CategoryDB
from blogcms.models.post import PostDB
from blogcms.monitoring import get_logger
from blogcms.repositories.base import BaseRepository
from blogcms.schemas.category import SubCategory
from blogcms.utils.helpers import utc_now

logger = get_logger(__name__)


class CategoryRepository(BaseRepository[CategoryDB]):
    """
    Repository for the category hierarchy.

    Subcategories live inside their category row as an ordered list of
    ``{"id", "name"}`` records, so every change to them is a write of the
    whole category. The list is always replaced, never mutated in place,
    so the JSON column is picked up as dirty by the unit of work.
    """

    model = CategoryDB

    async def get_all(self) -> list[CategoryDB]:
        """
        Get all categories ordered by name.

        Returns:
            list[CategoryDB]: Every category with its subcategories
        """
        # pyrefly: ignore [bad-argument-type]
        statement = select(CategoryDB).order_by(CategoryDB.name, CategoryDB.id)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> CategoryDB:
        """
        Get a category by its exact name.

        Raises:
            RecordNotFoundError: If no category has that name
        """
        category = await self.get_by_field("name", name)
        if category is None:
            raise RecordNotFoundError(detail=f"Category '{name}' not found")
        return category

    async def create_category(self, name: str) -> CategoryDB:
        """
        Create a category with an empty subcategory list.

        Args:
            name: Category name; surrounding whitespace is removed

        Returns:
            CategoryDB: The persisted category

        Raises:
            ValidationError: If the name is blank
            DuplicateEntryError: If a category with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError(detail="Category name is required")

        if await self._check_exists_by_field("name", name):
            raise DuplicateEntryError(detail=f"Category '{name}' already exists")

        category = await self._add_and_refresh(CategoryDB(name=name, sub_categories=[]))
        logger.info(f"Category created: {category.id} ({category.name})")
        return category

    async def delete_category(self, category_id: UUID) -> None:
        """
        Delete a category.

        Posts filed under the category are kept and become uncategorized:
        their ``sub_category_id`` is cleared here and the foreign key clears
        their ``category_id``.

        Raises:
            RecordNotFoundError: If the category does not exist
        """
        category = await self.get_or_raise(category_id)
        await self.session.execute(
            update(PostDB)
            .where(PostDB.category_id == category_id)  # pyrefly: ignore [bad-argument-type]
            .values(sub_category_id=None),
        )
        await self._delete(category)
        logger.info(f"Category deleted: {category_id}")

    async def add_sub_category(self, category_id: UUID, name: str) -> CategoryDB:
        """
        Append a subcategory with a freshly generated id.

        Args:
            category_id: Owning category
            name: Subcategory name, unique within the category ignoring case

        Returns:
            CategoryDB: The updated category

        Raises:
            ValidationError: If the name is blank
            RecordNotFoundError: If the category does not exist
            DuplicateEntryError: If the category already has that subcategory name
        """
        name = name.strip()
        if not name:
            raise ValidationError(detail="Subcategory name is required")

        category = await self.get_or_raise(category_id)
        if any(entry["name"].casefold() == name.casefold() for entry in category.sub_categories):
            mssg = f"Subcategory '{name}' already exists in category '{category.name}'"
            raise DuplicateEntryError(detail=mssg)

        sub_category = SubCategory(name=name)
        category.sub_categories = [*category.sub_categories, sub_category.model_dump()]
        category.updated_at = utc_now()

        category = await self._add_and_refresh(category)
        logger.info(f"Subcategory {sub_category.id} ({name}) added to category {category_id}")
        return category

    async def count_post_references(self, category_id: UUID, sub_category_id: str) -> int:
        """Count posts filed under ``(category_id, sub_category_id)``."""
        statement = (
            select(func.count())
            .select_from(PostDB)
            .where(
                PostDB.category_id == category_id,  # pyrefly: ignore [bad-argument-type]
                PostDB.sub_category_id == sub_category_id,  # pyrefly: ignore [bad-argument-type]
            )
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def delete_sub_category(self, category_id: UUID, sub_category_id: str) -> CategoryDB:
        """
        Remove a subcategory that no post references.

        The reference check and the write are two separate statements; a post
        created in between can still end up pointing at the removed entry.

        Args:
            category_id: Owning category
            sub_category_id: Id of the embedded subcategory

        Returns:
            CategoryDB: The updated category, remaining subcategories in order

        Raises:
            RecordNotFoundError: If the category or the subcategory is absent
            ReferentialIntegrityError: If posts still reference the subcategory
        """
        category = await self.get_or_raise(category_id)

        remaining = [entry for entry in category.sub_categories if entry["id"] != sub_category_id]
        if len(remaining) == len(category.sub_categories):
            mssg = f"Subcategory with ID {sub_category_id} not found in category '{category.name}'"
            raise RecordNotFoundError(detail=mssg)

        references = await self.count_post_references(category_id, sub_category_id)
        if references:
            mssg = f"Cannot delete subcategory: {references} post(s) still reference it"
            raise ReferentialIntegrityError(detail=mssg, reference_count=references)

        category.sub_categories = remaining
        category.updated_at = utc_now()

        category = await self._add_and_refresh(category)
        logger.info(f"Subcategory {sub_category_id} removed from category {category_id}")
        return category

    async def resolve_sub_category_by_name(
        self,
        category_name: str,
        sub_category_name: str,
    ) -> tuple[CategoryDB, SubCategory]:
        """
        Resolve a ``(category name, subcategory name)`` pair to records.

        The category name must match exactly; the subcategory name is
        matched ignoring case.

        Raises:
            RecordNotFoundError: If either level does not match
        """
        category = await self.get_by_name(category_name)

        wanted = sub_category_name.casefold()
        for entry in category.sub_categories:
            if entry["name"].casefold() == wanted:
                return category, SubCategory.model_validate(entry)

        mssg = f"Subcategory '{sub_category_name}' not found in category '{category_name}'"
        raise RecordNotFoundError(detail=mssg)
