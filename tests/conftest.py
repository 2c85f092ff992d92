# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from io import BytesIO
from typing import Any
from uuid import UUID, uuid4

# Must happen before blogcms is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORAGE_PROVIDER"] = "local"
os.environ["ENVIRONMENT"] = "development"

import pytest
from PIL import Image
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from blogcms.models import CategoryDB, PostDB

BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite engine with foreign keys enforced."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Database session bound to the in-memory engine."""
    maker = async_sessionmaker(engine, class_=SQLModelAsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session


@pytest.fixture
def author_id() -> UUID:
    return uuid4()


@pytest.fixture
def make_post(author_id: UUID) -> Callable[..., PostDB]:
    """Factory for unsaved posts with sensible defaults."""

    def _make(index: int = 0, **overrides: Any) -> PostDB:
        values: dict[str, Any] = {
            "author_id": author_id,
            "title": f"Post {index:02d}",
            "content": f"Content of post {index}",
            "tags": ["python"],
            "thumbnail": {"url": f"/uploads/t/{index}.jpg", "fileId": f"t/{index}.jpg"},
            "created_at": BASE_TIME + timedelta(minutes=index),
        }
        values.update(overrides)
        return PostDB(**values)

    return _make


@pytest.fixture
def other_author_id() -> UUID:
    return uuid4()


@pytest.fixture
async def seeded_posts(
    session: AsyncSession,
    make_post: Callable[..., PostDB],
    other_author_id: UUID,
) -> list[PostDB]:
    """37 posts titled ``Post 00`` .. ``Post 36``, one minute apart; odd ones by another author."""
    posts = [
        make_post(i, author_id=other_author_id) if i % 2 else make_post(i) for i in range(37)
    ]
    session.add_all(posts)
    await session.commit()
    return posts


@pytest.fixture
async def technology(session: AsyncSession) -> CategoryDB:
    """A category with three subcategories."""
    category = CategoryDB(
        name="Technology",
        sub_categories=[
            {"id": "sub-python", "name": "Python"},
            {"id": "sub-databases", "name": "Databases"},
            {"id": "sub-cloud", "name": "Cloud"},
        ],
    )
    session.add(category)
    await session.commit()
    return category


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    img = Image.new("RGB", (200, 200), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    img = Image.new("RGBA", (200, 200), color="blue")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
