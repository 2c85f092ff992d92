# tests/routes/test_post_routes.py
"""Tests for the /posts endpoints and the health check."""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.errors import StorageError
from blogcms.models import CategoryDB, PostDB


def thumbnail_upload(data: bytes) -> dict:
    return {"thumbnail": ("thumb.jpg", data, "image/jpeg")}


@pytest.fixture
async def stored_post(session: AsyncSession, make_post: Callable[..., PostDB]) -> PostDB:
    post = make_post(0)
    session.add(post)
    await session.commit()
    return post


class TestCreatePost:
    """Tests for POST /posts/create."""

    @pytest.mark.asyncio
    async def test_create_with_json_tags(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        mock_media: MagicMock,
        technology: CategoryDB,
        valid_jpeg_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/posts/create",
            data={
                "title": "Hello",
                "content": "Body",
                "metaDescription": "Short",
                "tags": '["python", "fastapi"]',
                "category": str(technology.id),
                "subCategory": "sub-python",
            },
            files=thumbnail_upload(valid_jpeg_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Hello"
        assert body["metaDescription"] == "Short"
        assert body["tags"] == ["python", "fastapi"]
        assert body["category"] == str(technology.id)
        assert body["subCategory"] == "sub-python"
        assert body["thumbnail"] == {
            "url": "/uploads/blog-thumbnails/uploaded.jpg",
            "fileId": "blog-thumbnails/uploaded.jpg",
        }
        mock_media.upload_thumbnail.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_with_repeated_tags(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        valid_jpeg_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/posts/create",
            data={"title": "Hello", "content": "Body", "tags": ["one", "two"]},
            files=thumbnail_upload(valid_jpeg_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["tags"] == ["one", "two"]
        assert response.json()["category"] is None

    @pytest.mark.asyncio
    async def test_missing_thumbnail(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        mock_media: MagicMock,
    ) -> None:
        response = await client.post(
            "/posts/create",
            data={"title": "Hello", "content": "Body", "tags": "python"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Please upload a thumbnail"
        mock_media.upload_thumbnail.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_tags(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        valid_jpeg_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/posts/create",
            data={"title": "Hello", "content": "Body", "tags": "[not json"},
            files=thumbnail_upload(valid_jpeg_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid tags format"

    @pytest.mark.asyncio
    async def test_missing_title(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        valid_jpeg_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/posts/create",
            data={"content": "Body", "tags": "python"},
            files=thumbnail_upload(valid_jpeg_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Invalid post data"
        assert [error["field"] for error in body["errors"]] == ["title"]

    @pytest.mark.asyncio
    async def test_storage_failure(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        mock_media: MagicMock,
        valid_jpeg_bytes: bytes,
    ) -> None:
        mock_media.upload_thumbnail.side_effect = StorageError(detail="Failed to upload thumbnail")

        response = await client.post(
            "/posts/create",
            data={"title": "Hello", "content": "Body", "tags": "python"},
            files=thumbnail_upload(valid_jpeg_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 502
        assert (await client.get("/posts/all")).json()["totalCount"] == 0

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient, valid_jpeg_bytes: bytes) -> None:
        response = await client.post(
            "/posts/create",
            data={"title": "Hello", "content": "Body", "tags": "python"},
            files=thumbnail_upload(valid_jpeg_bytes),
        )
        assert response.status_code == 401


class TestListPosts:
    """Tests for GET /posts/all."""

    @pytest.mark.asyncio
    async def test_page_envelope(self, client: AsyncClient, seeded_posts: list[PostDB]) -> None:
        response = await client.get("/posts/all", params={"page": 2})

        assert response.status_code == 200
        body = response.json()
        assert len(body["items"]) == 15
        assert body["pageSize"] == 15
        assert body["currentPage"] == 2
        assert body["filteredCount"] == 37
        assert body["totalCount"] == 37
        assert body["totalPages"] == 3
        assert body["items"][0]["title"] == "Post 21"

    @pytest.mark.asyncio
    async def test_keyword_and_filter(
        self,
        client: AsyncClient,
        seeded_posts: list[PostDB],
        other_author_id: UUID,
    ) -> None:
        response = await client.get(
            "/posts/all",
            params={"keyword": "post 1", "author": str(other_author_id)},
        )

        body = response.json()
        assert body["filteredCount"] == 5
        assert {item["authorId"] for item in body["items"]} == {str(other_author_id)}

    @pytest.mark.asyncio
    async def test_huge_page_is_empty(self, client: AsyncClient, seeded_posts: list[PostDB]) -> None:
        response = await client.get("/posts/all", params={"page": "99999999999999999999"})

        assert response.status_code == 200
        body = response.json()
        assert body["items"] == []
        assert body["filteredCount"] == 37

    @pytest.mark.asyncio
    async def test_invalid_filter(self, client: AsyncClient) -> None:
        response = await client.get("/posts/all", params={"colour": "red"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Unknown field 'colour'"


class TestGetPost:
    """Tests for GET /posts/by-id/{id}."""

    @pytest.mark.asyncio
    async def test_found(self, client: AsyncClient, stored_post: PostDB) -> None:
        response = await client.get(f"/posts/by-id/{stored_post.id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Post 00"

    @pytest.mark.asyncio
    async def test_not_found(self, client: AsyncClient) -> None:
        response = await client.get(f"/posts/by-id/{uuid4()}")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]


class TestUpdatePost:
    """Tests for PUT /posts/update/{id}."""

    @pytest.mark.asyncio
    async def test_update_fields(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        stored_post: PostDB,
    ) -> None:
        response = await client.put(
            f"/posts/update/{stored_post.id}",
            data={"title": "Renamed", "content": ""},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["content"] == "Content of post 0"

    @pytest.mark.asyncio
    async def test_replace_thumbnail(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        mock_media: MagicMock,
        stored_post: PostDB,
        valid_jpeg_bytes: bytes,
    ) -> None:
        response = await client.put(
            f"/posts/update/{stored_post.id}",
            files=thumbnail_upload(valid_jpeg_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["thumbnail"]["fileId"] == "blog-thumbnails/uploaded.jpg"
        released = mock_media.release_thumbnail.call_args[0][0]
        assert released.file_id == "t/0.jpg"

    @pytest.mark.asyncio
    async def test_nothing_to_update(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        stored_post: PostDB,
    ) -> None:
        response = await client.put(
            f"/posts/update/{stored_post.id}",
            data={"title": ""},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "No fields provided for update"

    @pytest.mark.asyncio
    async def test_not_the_author(
        self,
        client: AsyncClient,
        other_admin_headers: dict[str, str],
        stored_post: PostDB,
    ) -> None:
        response = await client.put(
            f"/posts/update/{stored_post.id}",
            data={"title": "Hijacked"},
            headers=other_admin_headers,
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "You are not authorized to update this post"


class TestDeletePost:
    """Tests for DELETE /posts/delete/{id}."""

    @pytest.mark.asyncio
    async def test_delete(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        mock_media: MagicMock,
        stored_post: PostDB,
    ) -> None:
        response = await client.delete(f"/posts/delete/{stored_post.id}", headers=admin_headers)

        assert response.status_code == 204
        assert response.content == b""
        mock_media.release_thumbnail.assert_awaited_once()
        assert (await client.get(f"/posts/by-id/{stored_post.id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_not_the_author(
        self,
        client: AsyncClient,
        other_admin_headers: dict[str, str],
        stored_post: PostDB,
    ) -> None:
        response = await client.delete(f"/posts/delete/{stored_post.id}", headers=other_admin_headers)
        assert response.status_code == 403


class TestPostsBySubCategory:
    """Tests for GET /posts/by-sub-category/{category}/{sub_category}."""

    @pytest.mark.asyncio
    async def test_projection(
        self,
        session: AsyncSession,
        client: AsyncClient,
        technology: CategoryDB,
        make_post: Callable[..., PostDB],
    ) -> None:
        session.add(make_post(1, category_id=technology.id, sub_category_id="sub-cloud"))
        await session.commit()
        session.expunge_all()

        response = await client.get("/posts/by-sub-category/Technology/cloud")

        assert response.status_code == 200
        [post] = response.json()
        assert post["subCategory"] == "Cloud"
        assert post["category"] == {"id": str(technology.id), "name": "Technology"}

    @pytest.mark.asyncio
    async def test_empty_is_not_found(self, client: AsyncClient, technology: CategoryDB) -> None:
        response = await client.get("/posts/by-sub-category/Technology/Python")

        assert response.status_code == 404
        assert response.json()["detail"] == "No posts found for this subcategory"


class TestHealthAndHeaders:
    """Tests for /health and the request id header."""

    @pytest.mark.asyncio
    async def test_health_ok(self, client: AsyncClient) -> None:
        with patch("blogcms.main.ping_db", AsyncMock(return_value=True)):
            response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"] == "connected"
        assert body["storage"] == "local"

    @pytest.mark.asyncio
    async def test_health_degraded(self, client: AsyncClient) -> None:
        failure = OperationalError("SELECT 1", {}, Exception("connection refused"))
        with patch("blogcms.main.ping_db", AsyncMock(side_effect=failure)):
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unavailable"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client: AsyncClient) -> None:
        with patch("blogcms.main.ping_db", AsyncMock(return_value=True)):
            response = await client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client: AsyncClient) -> None:
        with patch("blogcms.main.ping_db", AsyncMock(return_value=True)):
            response = await client.get("/health")

        assert response.headers["X-Request-ID"]
