"""
Base storage protocol for image storage operations.

This module defines the interface for storage backends, allowing for
different implementations (local filesystem, Cloudinary, ...).
"""

from abc import abstractmethod
from typing import Protocol

from blogcms.schemas.post import Thumbnail


class ImageStorage(Protocol):
    """
    Protocol defining the interface for image storage services.

    All storage implementations must implement these methods
    to ensure consistent behavior across different backends.
    """

    @abstractmethod
    async def upload(self, data: bytes, name: str, folder: str) -> Thumbnail:
        """
        Store an image.

        Args:
            data: Raw (already normalized) image bytes
            name: File name without extension, unique within the folder
            folder: Storage folder (e.g. "blog-thumbnails")

        Returns:
            Thumbnail: Public URL and the handle needed to delete the image
        """
        ...

    @abstractmethod
    async def delete(self, file_id: str) -> bool:
        """
        Delete a stored image.

        Args:
            file_id: Handle returned by ``upload``

        Returns:
            bool: True if an image was deleted, False if none was found
        """
        ...
