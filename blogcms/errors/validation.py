"""Custom validation error handling for FastAPI."""

from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from blogcms.errors.base import BaseAppError, create_exception_handler
from blogcms.monitoring import get_logger
from blogcms.utils.helpers import host

logger = get_logger(__name__)

UNPROCESSABLE_CONTENT = 422


class ValidationError(BaseAppError):
    """Raised when a required field is missing or a parameter is malformed."""

    def __init__(
        self,
        detail: str = "Validation Error",
        errors: list[dict] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.errors = errors or []


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle request validation errors with cleaner response format.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    exec_error = cast("RequestValidationError", exc)

    formatted_errors = []
    for error in exec_error.errors():
        formatted_error = {
            "field": ".".join(str(loc) for loc in error.get("loc", [])[1:]),  # Skip 'body'
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "validation_error"),
        }
        # Convert non-serializable context values (like ValueError) to strings
        if "ctx" in error:
            formatted_error["context"] = {
                key: str(value) if isinstance(value, Exception) else value
                for key, value in error["ctx"].items()
            }
        formatted_errors.append(formatted_error)

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {formatted_errors}",
    )

    return ORJSONResponse(
        status_code=UNPROCESSABLE_CONTENT,
        content={
            "detail": "Validation failed",
            "errors": formatted_errors,
        },
    )


app_validation_exception_handler = create_exception_handler(logger)
