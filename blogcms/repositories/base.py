"""Base repository for database operations."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from blogcms.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    RecordNotFoundError,
)

type FilterValue = str | int | float | bool | UUID | datetime | None


class BaseRepository[ModelT: SQLModel]:
    """
    Base repository implementing common lookup and persistence operations.

    This class provides a generic implementation of database operations
    that can be extended by specific entity repositories.

    Attributes:
        model: The SQLModel database model type.
        id_field: The name of the primary key field (default: "id").
    """

    model: type[ModelT]
    id_field: str = "id"

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    @property
    def _label(self) -> str:
        return self.model.__name__.removesuffix("DB")

    async def get_by_id(self, record_id: UUID) -> ModelT | None:
        """
        Get a record by its ID.

        Args:
            record_id: Record UUID

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        id_column = getattr(self.model, self.id_field)
        statement = select(self.model).where(id_column == record_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_field(
        self,
        field_name: str,
        value: FilterValue,
    ) -> ModelT | None:
        """
        Get a record by a specific field value.

        Args:
            field_name: Name of the field to search
            value: Value to search for

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        field = getattr(self.model, field_name)
        statement = select(self.model).where(field == value)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_or_raise(self, record_id: UUID) -> ModelT:
        """
        Get a record by ID or raise an exception if not found.

        Args:
            record_id: Record UUID

        Returns:
            ModelT: Record if found

        Raises:
            RecordNotFoundError: If record is not found
        """
        record = await self.get_by_id(record_id)
        if not record:
            raise RecordNotFoundError(detail=f"{self._label} with ID {record_id} not found")
        return record

    async def count(self) -> int:
        """
        Count total records.

        Returns:
            int: Total number of records
        """
        statement = select(func.count()).select_from(self.model)
        result = await self.session.execute(statement)
        count = result.scalar()
        return count if count is not None else 0

    async def _delete(self, record: ModelT) -> None:
        await self.session.delete(record)
        await self.session.flush()

    async def _add_and_refresh(self, record: ModelT) -> ModelT:
        """
        Add a record and refresh it from the database with error handling.

        Args:
            record: Record to add

        Returns:
            ModelT: Refreshed record

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            DatabaseError: For other integrity errors
            DatabaseConnectionError: For any other database failure
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
            return record
        except IntegrityError as e:
            await self.session.rollback()
            error_msg = str(e.orig) if e.orig else str(e)
            if "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
                raise DuplicateEntryError(detail=f"{self._label} already exists") from e
            raise DatabaseError(detail=f"Database integrity error: {error_msg}") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseConnectionError(detail=f"Failed to save record: {e}") from e

    async def _check_exists_by_field(
        self,
        field_name: str,
        value: FilterValue,
        exclude_id: UUID | None = None,
    ) -> bool:
        """
        Check if a record exists with a specific field value.

        Args:
            field_name: Name of the field to check
            value: Value to check for
            exclude_id: Optional ID to exclude from check (for updates)

        Returns:
            bool: True if record exists, False otherwise
        """
        field = getattr(self.model, field_name)
        statement = select(1).where(field == value)

        if exclude_id is not None:
            id_column = getattr(self.model, self.id_field)
            statement = statement.where(id_column != exclude_id)

        statement = statement.limit(1)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none() is not None
