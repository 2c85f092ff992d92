"""
Thumbnail upload service.

This module validates uploaded thumbnail images, normalizes them to JPEG
and hands them to the configured storage backend.
"""

from io import BytesIO
from uuid import uuid4

from fastapi import UploadFile
from PIL import Image

from blogcms.configs.settings import settings
from blogcms.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
)
from blogcms.monitoring import get_logger
from blogcms.schemas.post import Thumbnail
from blogcms.services.storage import ImageStorage, get_storage_service

logger = get_logger(__name__)


class MediaService:
    """
    Service for managing post thumbnails.

    Handles image validation, processing, and storage operations. Any failure
    of the storage backend surfaces as ``StorageError``.
    """

    def __init__(self, storage: ImageStorage | None = None) -> None:
        """
        Initialize the media service.

        Args:
            storage: Optional storage service instance. If not provided,
                    the default storage service will be used.
        """
        self.storage = storage or get_storage_service()
        self.max_size_bytes = settings.THUMBNAIL_MAX_SIZE_MB * 1024 * 1024
        self.allowed_types = settings.THUMBNAIL_ALLOWED_TYPES
        self.folder = settings.THUMBNAIL_FOLDER

    def _validate_image_type(self, content_type: str | None) -> None:
        """Validate image content type."""
        if not content_type or content_type not in self.allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.allowed_types,
            )

    def _validate_image_size(self, file_data: bytes) -> None:
        """Validate image file size."""
        actual_size = len(file_data)
        if actual_size > self.max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.THUMBNAIL_MAX_SIZE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    def _validate_image_content(self, file_data: bytes) -> Image.Image:
        """Validate that the file is a valid image."""
        try:
            img = Image.open(BytesIO(file_data))
            img.verify()
            # verify() leaves the image unusable, reopen for processing
            return Image.open(BytesIO(file_data))
        except Exception as e:
            mssg = f"Invalid or corrupted image file: {e!s}"
            raise InvalidImageError(mssg) from e

    def _process_image(self, img: Image.Image) -> bytes:
        """Convert the image to an optimized JPEG."""
        try:
            if img.mode != "RGB":
                img = img.convert("RGB")

            buffer = BytesIO()
            img.save(buffer, format="JPEG", quality=85, optimize=True)
            return buffer.getvalue()
        except Exception as e:
            mssg = f"Failed to process image: {e!s}"
            raise InvalidImageError(mssg) from e

    async def upload_thumbnail(self, file: UploadFile) -> Thumbnail:
        """
        Validate, normalize and store a thumbnail.

        Args:
            file: Uploaded image file

        Returns:
            Thumbnail: URL and file id of the stored image

        Raises:
            UnsupportedImageTypeError: If the content type is not allowed
            ImageTooLargeError: If the file exceeds the size limit
            InvalidImageError: If the bytes are not a readable image
            StorageError: If the storage backend fails
        """
        self._validate_image_type(file.content_type)
        file_data = await file.read()
        self._validate_image_size(file_data)
        img = self._validate_image_content(file_data)
        processed_data = self._process_image(img)

        try:
            thumbnail = await self.storage.upload(processed_data, str(uuid4()), self.folder)
        except Exception as e:
            logger.exception(f"Thumbnail upload failed for {file.filename}")
            raise StorageError(detail="Failed to upload thumbnail") from e

        logger.info(f"Thumbnail stored: {thumbnail.file_id}")
        return thumbnail

    async def release_thumbnail(self, thumbnail: Thumbnail | None) -> None:
        """
        Delete a stored thumbnail.

        A thumbnail that is already gone is logged and otherwise ignored.

        Raises:
            StorageError: If the storage backend fails
        """
        if thumbnail is None:
            return

        try:
            deleted = await self.storage.delete(thumbnail.file_id)
        except Exception as e:
            logger.exception(f"Thumbnail release failed for {thumbnail.file_id}")
            raise StorageError(detail="Failed to delete thumbnail") from e

        if not deleted:
            logger.warning(f"Thumbnail {thumbnail.file_id} was not found in storage")
