"""
Local filesystem storage implementation.

This module provides a local storage backend for development
and testing purposes. Files are stored in the local filesystem.
"""

from pathlib import Path

import aiofiles
import aiofiles.os

from blogcms.configs.settings import settings
from blogcms.schemas.post import Thumbnail


class LocalStorage:
    """
    Local filesystem storage implementation.

    Stores images under the uploads directory; the ``file_id`` is the path
    relative to that directory and the URL is served from ``/uploads``.
    """

    def __init__(self, uploads_dir: Path | None = None) -> None:
        """
        Initialize local storage.

        Args:
            uploads_dir: Root directory for stored files (default: ``settings.UPLOADS_DIR``)
        """
        self.uploads_dir = uploads_dir or settings.UPLOADS_DIR
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, file_id: str) -> Path | None:
        """Map a file id to a path, refusing anything outside the uploads directory."""
        root = self.uploads_dir.resolve()
        path = (root / file_id).resolve()
        return path if path.is_relative_to(root) and path != root else None

    async def upload(self, data: bytes, name: str, folder: str) -> Thumbnail:
        """
        Write an image to the local filesystem.

        Args:
            data: Raw JPEG bytes
            name: File name without extension
            folder: Sub-directory of the uploads directory

        Returns:
            Thumbnail: URL path and relative file id of the stored image
        """
        target_dir = self.uploads_dir / folder
        target_dir.mkdir(parents=True, exist_ok=True)

        file_id = f"{folder}/{name}.jpg"
        async with aiofiles.open(self.uploads_dir / file_id, "wb") as f:
            await f.write(data)

        return Thumbnail(url=f"/uploads/{file_id}", file_id=file_id)

    async def delete(self, file_id: str) -> bool:
        """
        Delete an image from the local filesystem.

        Args:
            file_id: Path relative to the uploads directory

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        path = self._resolve(file_id)
        if path is None or not await aiofiles.os.path.isfile(path):
            return False

        await aiofiles.os.remove(path)
        return True
