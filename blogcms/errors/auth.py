"""Authentication and authorization errors."""

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from blogcms.errors.base import BaseAppError, create_exception_handler
from blogcms.monitoring import get_logger

logger = get_logger(__name__)


class AdminAuthenticationError(BaseAppError):
    """Raised when the request does not carry valid admin credentials."""

    def __init__(
        self,
        detail: str = "Could not validate credentials",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)


class NotAuthorError(BaseAppError):
    """Raised when the acting admin is not the author of the resource."""

    def __init__(self, action: str = "modify", resource: str = "post") -> None:
        super().__init__(f"You are not authorized to {action} this {resource}", HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)
