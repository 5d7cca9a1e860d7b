"""
Pixeloria Backend — Upload Storage Service
============================================

What:  Validates and stores images uploaded from the admin dashboard
       (portfolio shots, blog covers, testimonial avatars).
Why:   Centralizes all file system writes behind one set of checks.
How:   Extension, size and content-type checks, then an async write to a
       date-organized directory under UPLOAD_DIR with a UUID filename. The
       stored file is served by the /uploads static mount.

Security Model:
    1. Extension check:   rejects obviously wrong files before reading on
    2. Size check:        MAX_UPLOAD_SIZE, on the reported and actual size
    3. MIME check:        libmagic inspects the file header; the detected
                          type must be the one the extension claims
                          (a renamed executable fails here)
    4. UUID filename:     no user input reaches the file system path

Directory Structure:
    uploads/
    └── images/
        └── 2024/
            └── 01/
                └── 15/
                    ├── a1b2c3d4-....jpg
                    └── e5f6g7h8-....png
"""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
import magic

from app.config import settings
from app.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"
IMAGE_SUBDIR = "images"

# Extension → MIME type libmagic must report for it
EXTENSION_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

ALLOWED_EXTENSIONS = frozenset(EXTENSION_MIME_TYPES)

# libmagic only needs the header
MIME_SNIFF_BYTES = 2048


class FileService:
    """
    Manages upload validation and storage.

    Args:
        upload_dir: Override the storage root (used in tests).
        max_size:   Override the per-file limit in bytes.
    """

    def __init__(self, upload_dir: Optional[str] = None, max_size: Optional[int] = None):
        self.upload_root = Path(upload_dir or settings.upload_dir).resolve()
        self.max_size = max_size or settings.max_upload_size

    def validate_extension(self, filename: str) -> str:
        """Normalized extension (lowercase with dot) or ValidationError."""
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or 'none'}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="file",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Check the reported size first, then the bytes actually received.

        Raises:
            ValidationError with a human-readable limit
        """
        max_mb = self.max_size / (1024 * 1024)

        if content_length and content_length > self.max_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image.",
                field="file",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size == 0:
            raise ValidationError(message="Uploaded file is empty", field="file")

        if actual_size > self.max_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_mime_type(self, content: bytes, extension: str) -> str:
        """
        Detect the real type with libmagic and cross-check the extension.

        Returns:
            The detected MIME type, reported as the stored file's content type.

        Raises:
            ValidationError if the content is not the image its name claims
        """
        expected = EXTENSION_MIME_TYPES[extension]
        detected = magic.from_buffer(content[:MIME_SNIFF_BYTES], mime=True)

        if detected != expected:
            raise ValidationError(
                message=f"File content does not match its '{extension}' extension. The file must be a valid image.",
                field="file",
                context={"extension": extension, "expected": expected, "detected": detected},
            )
        return detected

    def _generate_storage_path(self, extension: str) -> Tuple[Path, str]:
        """(absolute path, path relative to the upload root) for a new file."""
        date_dir = datetime.now(timezone.utc).strftime("%Y/%m/%d")
        relative_path = f"{IMAGE_SUBDIR}/{date_dir}/{uuid.uuid4()}{extension}"
        return self.upload_root / relative_path, relative_path

    async def store_file(self, content: bytes, extension: str) -> str:
        """
        Write validated content to disk.

        Returns:
            Path relative to the upload root.

        Raises:
            FileStorageError if the directory or file cannot be written.
        """
        absolute_path, relative_path = self._generate_storage_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, e)
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            ) from e

        logger.info("File stored: %s (%d bytes)", relative_path, len(content))
        return relative_path

    async def save_image(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> Tuple[str, str]:
        """
        Full pipeline: extension → size → MIME type → write.

        Returns:
            (public URL under /uploads, content type)
        """
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        content_type = self.validate_mime_type(content, ext)
        relative_path = await self.store_file(content, ext)
        return f"{UPLOAD_URL_PREFIX}/{relative_path}", content_type

