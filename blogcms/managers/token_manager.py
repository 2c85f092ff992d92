"""Token manager for issuing and validating admin JWT access tokens."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import JWTError, jwt

from blogcms.configs import settings
from blogcms.schemas.auth import TokenData


def create_access_token(
    user_id: UUID,
    username: str,
    role: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a new access token with issuer, audience and role claims.

    Args:
        user_id: Admin's UUID
        username: Admin's username
        role: Role claim (default: ``settings.ADMIN_ROLE``)
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT access token
    """
    now = datetime.now(UTC)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": username,
        "user_id": str(user_id),
        "role": role or settings.ADMIN_ROLE,
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": "access",
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )


def decode_access_token(token: str) -> TokenData | None:
    """
    Decode and validate an access token.

    Args:
        token: JWT token string

    Returns:
        TokenData | None: Decoded token data or None if invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        return None

    username: str | None = payload.get("sub")
    user_id: str | None = payload.get("user_id")
    role: str | None = payload.get("role")
    jti: str | None = payload.get("jti")
    token_type: str | None = payload.get("type")

    if not username or not user_id or not role or not jti or token_type != "access":
        return None

    try:
        parsed_id = UUID(user_id)
    except ValueError:
        return None

    return TokenData(
        username=username,
        user_id=parsed_id,
        role=role,
        jti=jti,
        token_type=token_type,
    )
