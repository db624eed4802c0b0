"""
MindScribe Backend — Audio Upload File Service
================================================

What:  Validates audio uploads, writes them to a per-request temporary file,
       derives their MIME type, and deletes the temporary file afterwards.
How:   Extension/content-type and size checks run before anything touches
       disk or the AI provider. Files are written under `upload_dir` with a
       UUID name using aiofiles.
Who:   Used by the POST /api/transcribe route.

Temporary file lifecycle:
    1. Route receives multipart `audio` field
    2. validate_upload()  → ValidationError on bad type/size/empty
    3. store_temp_file()  → <upload_dir>/<uuid>.<ext>
    4. read_file()        → bytes handed to the AI client
    5. cleanup_file()     → always runs in the route's `finally`, never raises
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from app.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
# Extension → MIME type sent to Gemini. Unknown extensions fall back to audio/mpeg.
EXTENSION_MIME_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".webm": "audio/webm",
}
DEFAULT_MIME_TYPE = "audio/mpeg"

# Declared content types accepted even when the filename has no audio extension.
ALLOWED_CONTENT_TYPES = {
    "audio/mpeg",
    "audio/wav",
    "audio/mp3",
    "audio/m4a",
    "audio/ogg",
    "audio/webm",
}

INVALID_TYPE_MESSAGE = (
    "Invalid file type. Only audio files (mp3, wav, m4a, ogg, webm) are allowed."
)


def get_mime_type(filename: str) -> str:
    """Map a filename's extension to an audio MIME type (default audio/mpeg)."""
    return EXTENSION_MIME_TYPES.get(Path(filename).suffix.lower(), DEFAULT_MIME_TYPE)


class FileService:
    """
    Manages validation and the temporary on-disk copy of uploaded audio.

    Directory Structure:
        uploads/
        ├── 3f2b9c1e-....webm
        └── 9a8d7e6f-....mp3

    Files here live only for the duration of one request.
    """

    def __init__(self, upload_dir: str, max_upload_size: int):
        """
        Args:
            upload_dir:      Directory for temporary files (created if missing).
            max_upload_size: Largest accepted upload in bytes.
        """
        self.upload_dir = Path(upload_dir).resolve()
        self.max_upload_size = max_upload_size
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with upload_dir=%s", self.upload_dir)

    def validate_type(self, filename: str, content_type: Optional[str]) -> None:
        """
        Accept the upload when either the declared content type or the
        filename extension is an allowed audio type.

        Raises:
            ValidationError with the list of supported formats.
        """
        ext = Path(filename).suffix.lower()
        if (content_type or "").lower() in ALLOWED_CONTENT_TYPES:
            return
        if ext in EXTENSION_MIME_TYPES:
            return
        raise ValidationError(
            message=INVALID_TYPE_MESSAGE,
            field="audio",
            context={"extension": ext, "content_type": content_type},
        )

    def validate_size(self, reported_size: Optional[int], actual_size: int) -> None:
        """
        Reject empty files and anything above `max_upload_size`.

        Args:
            reported_size: Size from the multipart part headers (may be None)
            actual_size:   Byte count actually read
        """
        max_mb = self.max_upload_size / (1024 * 1024)

        if reported_size and reported_size > self.max_upload_size:
            raise ValidationError(
                message=f"File too large. Maximum size is {max_mb:.0f}MB.",
                field="audio",
                context={"max_size": self.max_upload_size, "reported_size": reported_size},
            )

        if actual_size > self.max_upload_size:
            raise ValidationError(
                message=f"File too large. Maximum size is {max_mb:.0f}MB.",
                field="audio",
                context={"max_size": self.max_upload_size, "actual_size": actual_size},
            )

        if actual_size == 0:
            raise ValidationError(message="Uploaded audio file is empty", field="audio")

    def validate_upload(
        self,
        filename: str,
        content_type: Optional[str],
        content: bytes,
        reported_size: Optional[int] = None,
    ) -> None:
        """Type check first (cheap), then size."""
        self.validate_type(filename, content_type)
        self.validate_size(reported_size, len(content))

    async def store_temp_file(self, content: bytes, filename: str) -> str:
        """
        Write upload bytes to `<upload_dir>/<uuid><ext>`.

        Returns:
            Absolute path of the written file.

        Raises:
            FileStorageError if the write fails.
        """
        ext = Path(filename).suffix.lower()
        if ext not in EXTENSION_MIME_TYPES:
            ext = ""
        path = self.upload_dir / f"{uuid.uuid4()}{ext}"

        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded audio. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            ) from e

        logger.info("Temporary upload stored: %s (%d bytes)", path.name, len(content))
        return str(path)

    async def read_file(self, file_path: str) -> bytes:
        try:
            async with aiofiles.open(file_path, "rb") as f:
                return await f.read()
        except OSError as e:
            logger.error("Failed to read upload %s: %s", file_path, str(e))
            raise FileStorageError(
                message="Failed to read uploaded audio. Please try again.",
                context={"path": file_path, "os_error": str(e)},
            ) from e

    async def cleanup_file(self, file_path: str) -> None:
        """
        Delete a temporary upload. Best-effort: failures are logged, not raised,
        so a cleanup problem never replaces the request's real outcome.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up temporary file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except Exception as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))
