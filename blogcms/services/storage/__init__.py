"""
Storage services package.

This package provides image storage backends for thumbnails,
with support for local filesystem and Cloudinary.
"""

from blogcms.configs.settings import settings
from blogcms.services.storage.base import ImageStorage
from blogcms.services.storage.cloudinary_storage import CloudinaryStorage
from blogcms.services.storage.local import LocalStorage


def get_storage_service() -> ImageStorage:
    """
    Get the configured storage service.

    Returns the appropriate storage implementation based on
    the STORAGE_PROVIDER setting.

    Returns:
        ImageStorage: Configured storage service instance
    """
    if settings.STORAGE_PROVIDER == "cloudinary":
        return CloudinaryStorage()
    return LocalStorage()


__all__ = [
    "CloudinaryStorage",
    "ImageStorage",
    "LocalStorage",
    "get_storage_service",
]
