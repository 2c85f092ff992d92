from uuid import UUID

from pydantic import BaseModel


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    username: str
    user_id: UUID
    role: str
    jti: str
    token_type: str = "access"


class AdminIdentity(BaseModel):
    """The authenticated admin acting on a request."""

    id: UUID
    username: str
