# tests/routes/conftest.py
"""Fixtures for route tests: an HTTP client bound to the test database."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.db import get_session
from blogcms.dependencies import get_media_service
from blogcms.main import app
from blogcms.managers import create_access_token
from blogcms.schemas import Thumbnail

UPLOADED_THUMBNAIL = Thumbnail(
    url="/uploads/blog-thumbnails/uploaded.jpg",
    file_id="blog-thumbnails/uploaded.jpg",
)


@pytest.fixture
def mock_media() -> MagicMock:
    media = MagicMock()
    media.upload_thumbnail = AsyncMock(return_value=UPLOADED_THUMBNAIL)
    media.release_thumbnail = AsyncMock(return_value=None)
    return media


@pytest.fixture
async def client(session: AsyncSession, mock_media: MagicMock) -> AsyncGenerator[AsyncClient]:
    """Client whose requests share the test session and a mocked media service."""

    async def override_session() -> AsyncGenerator[AsyncSession]:
        yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_media_service] = lambda: mock_media

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(author_id: UUID) -> dict[str, str]:
    token = create_access_token(author_id, "editor")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_admin_headers() -> dict[str, str]:
    token = create_access_token(uuid4(), "another-editor")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def reader_headers() -> dict[str, str]:
    token = create_access_token(uuid4(), "reader", role="reader")
    return {"Authorization": f"Bearer {token}"}
