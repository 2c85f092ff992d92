# tests/managers/test_token_manager.py
"""Tests for blogcms/managers/token_manager.py module."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import jwt

from blogcms.configs import settings
from blogcms.managers import create_access_token, decode_access_token


class TestCreateAccessToken:
    """Tests for create_access_token."""

    def test_roundtrip(self) -> None:
        user_id = uuid4()
        token = create_access_token(user_id, "editor")

        data = decode_access_token(token)

        assert data is not None
        assert data.user_id == user_id
        assert data.username == "editor"
        assert data.role == settings.ADMIN_ROLE
        assert data.token_type == "access"

    def test_custom_role(self) -> None:
        data = decode_access_token(create_access_token(uuid4(), "reader", role="viewer"))
        assert data is not None
        assert data.role == "viewer"

    def test_unique_jti(self) -> None:
        user_id = uuid4()
        first = decode_access_token(create_access_token(user_id, "editor"))
        second = decode_access_token(create_access_token(user_id, "editor"))
        assert first is not None
        assert second is not None
        assert first.jti != second.jti


class TestDecodeAccessToken:
    """Tests for decode_access_token rejections."""

    def test_expired(self) -> None:
        token = create_access_token(uuid4(), "editor", expires_delta=timedelta(seconds=-1))
        assert decode_access_token(token) is None

    def test_tampered(self) -> None:
        token = create_access_token(uuid4(), "editor")
        assert decode_access_token(token[:-2] + ("AA" if token[-2:] != "AA" else "BB")) is None

    def test_garbage(self) -> None:
        assert decode_access_token("not-a-jwt") is None

    def test_wrong_audience(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "editor",
                "user_id": str(uuid4()),
                "role": settings.ADMIN_ROLE,
                "jti": "x",
                "iat": now,
                "exp": now + timedelta(minutes=5),
                "iss": settings.JWT_ISSUER,
                "aud": "someone-else",
                "type": "access",
            },
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )
        assert decode_access_token(token) is None

    def test_missing_user_id(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "editor",
                "role": settings.ADMIN_ROLE,
                "jti": "x",
                "exp": now + timedelta(minutes=5),
                "iss": settings.JWT_ISSUER,
                "aud": settings.JWT_AUDIENCE,
                "type": "access",
            },
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )
        assert decode_access_token(token) is None
