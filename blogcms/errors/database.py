from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from blogcms.errors.base import BaseAppError, create_exception_handler
from blogcms.monitoring import get_logger

logger = get_logger(__name__)


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(DatabaseError):
    """Exception raised when database connection fails."""

    def __init__(
        self,
        detail: str = "Failed to connect to the database",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class DuplicateEntryError(DatabaseError):
    """Exception raised when attempting to create a duplicate entry."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
    ) -> None:
        super().__init__(detail, HTTP_409_CONFLICT)


class RecordNotFoundError(DatabaseError):
    """Exception raised when a record is not found."""

    def __init__(
        self,
        detail: str = "Record not found",
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class ReferentialIntegrityError(DatabaseError):
    """Exception raised when a deletion is blocked by records that still reference the target."""

    def __init__(
        self,
        detail: str = "Record is still referenced by other records",
        reference_count: int | None = None,
    ) -> None:
        super().__init__(detail, HTTP_409_CONFLICT)
        if reference_count is not None:
            self.reference_count = reference_count


database_exception_handler = create_exception_handler(logger)
