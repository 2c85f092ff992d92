"""
Cloudinary storage implementation.

This module provides a Cloudinary-based storage backend for production
use. Offers automatic image optimization and CDN delivery.
"""

import asyncio
from functools import partial

import cloudinary
import cloudinary.uploader

from blogcms.configs.settings import settings
from blogcms.schemas.post import Thumbnail


class CloudinaryStorage:
    """
    Cloudinary storage implementation.

    The Cloudinary SDK is synchronous, so every call runs in the default
    thread pool executor.
    """

    def __init__(self) -> None:
        """Initialize Cloudinary with configured credentials."""
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET.get_secret_value(),
            secure=True,
        )

    async def upload(self, data: bytes, name: str, folder: str) -> Thumbnail:
        """
        Upload an image to Cloudinary.

        Args:
            data: Raw image bytes
            name: Public id inside ``folder``
            folder: Cloudinary folder

        Returns:
            Thumbnail: Secure URL and Cloudinary public id
        """
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None,
            partial(
                cloudinary.uploader.upload,
                data,
                public_id=name,
                folder=folder,
                overwrite=False,
                resource_type="image",
                transformation=[{"quality": "auto:good", "fetch_format": "auto"}],
            ),
        )

        return Thumbnail(url=result["secure_url"], file_id=result["public_id"])

    async def delete(self, file_id: str) -> bool:
        """
        Delete an image from Cloudinary.

        Args:
            file_id: Cloudinary public id

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None,
            partial(cloudinary.uploader.destroy, file_id, resource_type="image"),
        )

        return result.get("result") == "ok"
