# tests/errors/test_errors.py
"""Tests for blogcms/errors package."""

from unittest.mock import MagicMock

import orjson
import pytest
from fastapi.exceptions import RequestValidationError

from blogcms.errors import (
    AdminAuthenticationError,
    BaseAppError,
    DuplicateEntryError,
    NotAuthorError,
    RecordNotFoundError,
    ReferentialIntegrityError,
    StorageError,
    ValidationError,
    create_exception_handler,
    validation_exception_handler,
)


def mock_request() -> MagicMock:
    request = MagicMock()
    request.client.host = "192.168.1.1"
    request.url.path = "/api/test"
    return request


class TestErrorDefaults:
    """Status codes and default messages."""

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (BaseAppError(), 500),
            (RecordNotFoundError(), 404),
            (DuplicateEntryError(), 409),
            (ReferentialIntegrityError(), 409),
            (ValidationError(), 400),
            (AdminAuthenticationError(), 401),
            (NotAuthorError(), 403),
            (StorageError(), 502),
        ],
    )
    def test_status_codes(self, error: BaseAppError, status_code: int) -> None:
        assert error.status_code == status_code

    def test_str_is_detail(self) -> None:
        assert str(RecordNotFoundError(detail="Post with ID 1 not found")) == "Post with ID 1 not found"

    def test_not_author_message(self) -> None:
        error = NotAuthorError(action="delete", resource="post")
        assert error.detail == "You are not authorized to delete this post"

    def test_admin_authentication_default(self) -> None:
        assert AdminAuthenticationError().detail == "Could not validate credentials"


class TestCreateExceptionHandler:
    """Tests for the shared exception handler."""

    @pytest.mark.asyncio
    async def test_payload_and_logging(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(mock_request(), RecordNotFoundError(detail="Missing"))

        assert response.status_code == 404
        assert orjson.loads(response.body) == {"detail": "Missing"}
        logger.warning.assert_called_once_with("Missing for ip: 192.168.1.1 for endpoint /api/test")

    @pytest.mark.asyncio
    async def test_reference_count_is_exposed(self) -> None:
        handler = create_exception_handler(MagicMock())
        error = ReferentialIntegrityError(
            detail="Cannot delete subcategory: 2 post(s) still reference it",
            reference_count=2,
        )

        response = await handler(mock_request(), error)

        assert response.status_code == 409
        assert orjson.loads(response.body) == {
            "detail": "Cannot delete subcategory: 2 post(s) still reference it",
            "reference_count": 2,
        }

    @pytest.mark.asyncio
    async def test_validation_errors_are_exposed(self) -> None:
        handler = create_exception_handler(MagicMock())
        errors = [{"field": "title", "message": "Field required", "type": "missing"}]

        response = await handler(mock_request(), ValidationError(detail="Invalid post data", errors=errors))

        assert response.status_code == 400
        assert orjson.loads(response.body) == {"detail": "Invalid post data", "errors": errors}

    @pytest.mark.asyncio
    async def test_unknown_exception(self) -> None:
        handler = create_exception_handler(MagicMock())

        response = await handler(mock_request(), RuntimeError("boom"))

        assert response.status_code == 500
        assert orjson.loads(response.body) == {"detail": "Internal Server Error"}


class TestValidationExceptionHandler:
    """Tests for the request validation formatter."""

    @pytest.mark.asyncio
    async def test_formats_errors(self) -> None:
        exc = RequestValidationError(
            [
                {
                    "loc": ("body", "name"),
                    "msg": "String should have at least 1 character",
                    "type": "string_too_short",
                    "ctx": {"min_length": 1},
                },
            ],
        )

        response = await validation_exception_handler(mock_request(), exc)

        assert response.status_code == 422
        body = orjson.loads(response.body)
        assert body["detail"] == "Validation failed"
        assert body["errors"] == [
            {
                "field": "name",
                "message": "String should have at least 1 character",
                "type": "string_too_short",
                "context": {"min_length": 1},
            },
        ]
