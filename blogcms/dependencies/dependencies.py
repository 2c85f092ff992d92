# blogcms/dependencies/dependencies.py

"""Application dependencies: sessions, repositories, services and admin identity."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.configs import settings
from blogcms.db import get_session
from blogcms.errors.auth import AdminAuthenticationError
from blogcms.managers.token_manager import decode_access_token
from blogcms.monitoring import get_logger
from blogcms.repositories import CategoryRepository
from blogcms.schemas.auth import AdminIdentity
from blogcms.services import MediaService, PostService
from blogcms.utils.query_features import ParamValue, collect_params

logger = get_logger(__name__)

# Tokens are issued by the external admin auth service
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_current_admin(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> AdminIdentity:
    """
    Resolve the acting admin from the bearer token.

    Parameters
    ----------
    token : str | None
        Bearer token, if the request carried one.

    Returns
    -------
    AdminIdentity
        Id and username of the authenticated admin.

    Raises
    ------
    AdminAuthenticationError
        If the token is missing, invalid, expired or not an admin token.
    """
    if not token:
        raise AdminAuthenticationError(detail="Not authenticated")

    token_data = decode_access_token(token)
    if not token_data:
        raise AdminAuthenticationError

    if token_data.role != settings.ADMIN_ROLE:
        logger.warning(f"Rejected token with role '{token_data.role}' for {token_data.user_id}")
        raise AdminAuthenticationError(detail="Admin privileges required")

    return AdminIdentity(id=token_data.user_id, username=token_data.username)


AdminDep = Annotated[AdminIdentity, Depends(get_current_admin)]


def get_category_repository(session: SessionDep) -> CategoryRepository:
    """
    Resolve the `CategoryRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    CategoryRepository
        Repository instance bound to the session.
    """
    return CategoryRepository(session)


CategoryRepoDep = Annotated[CategoryRepository, Depends(get_category_repository)]


def get_media_service() -> MediaService:
    """
    Resolve the `MediaService` dependency.

    Returns
    -------
    MediaService
        Thumbnail service backed by the configured storage provider.
    """
    return MediaService()


MediaServiceDep = Annotated[MediaService, Depends(get_media_service)]


def get_post_service(session: SessionDep, media: MediaServiceDep) -> PostService:
    """
    Resolve the `PostService` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.
    media : MediaService
        Thumbnail service.

    Returns
    -------
    PostService
        Service bound to the request session.
    """
    return PostService(session, media)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]


def get_query_params(request: Request) -> dict[str, ParamValue]:
    """Collect raw query parameters, keeping repeated keys as lists."""
    return collect_params(request.query_params.multi_items())


QueryParamsDep = Annotated[dict[str, ParamValue], Depends(get_query_params)]
