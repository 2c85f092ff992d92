from blogcms.errors.auth import AdminAuthenticationError, NotAuthorError, auth_exception_handler
from blogcms.errors.base import BaseAppError, create_exception_handler
from blogcms.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    RecordNotFoundError,
    ReferentialIntegrityError,
    database_exception_handler,
)
from blogcms.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    MissingThumbnailError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from blogcms.errors.validation import (
    ValidationError,
    app_validation_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "AdminAuthenticationError",
    "BaseAppError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DuplicateEntryError",
    "ImageTooLargeError",
    "InvalidImageError",
    "MissingThumbnailError",
    "NotAuthorError",
    "RecordNotFoundError",
    "ReferentialIntegrityError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "ValidationError",
    "app_validation_exception_handler",
    "auth_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "upload_exception_handler",
    "validation_exception_handler",
]
