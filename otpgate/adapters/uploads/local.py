"""
Local profile image store - Implements ProfileImageStore protocol.

Validates uploads against an image allow-list and a size ceiling and
writes accepted files to a directory on local disk. Rejected uploads
leave nothing behind.
"""

import logging
import secrets
import time
from pathlib import Path
from typing import BinaryIO

from otpgate.domain.exceptions import UploadRejected
from otpgate.domain.models import FileReference

logger = logging.getLogger(__name__)

ALLOWED_TYPES = frozenset({"jpeg", "jpg", "png"})
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
FIELD_NAME = "profilePic"

_CHUNK_SIZE = 64 * 1024


class LocalProfileImageStore:
    """
    Stores profile images under ``upload_dir``.

    Both the file extension and the declared content type must name an
    allowed image type.
    """

    def __init__(
        self,
        upload_dir: str | Path,
        max_bytes: int = DEFAULT_MAX_BYTES,
        allowed_types: frozenset[str] = ALLOWED_TYPES,
    ) -> None:
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.allowed_types = allowed_types
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save(self, stream: BinaryIO, original_filename: str, content_type: str | None) -> FileReference:
        """
        Validate and store an uploaded image.

        Args:
            stream: Readable binary stream of the upload
            original_filename: Client-supplied file name
            content_type: Client-declared MIME type

        Returns:
            FileReference to the stored file

        Raises:
            UploadRejected: Disallowed type or file larger than max_bytes
        """
        ext = Path(original_filename).suffix.lower()
        if not self._is_allowed(ext, content_type):
            raise UploadRejected("Only JPEG, JPG, and PNG files are allowed!")

        filename = f"{FIELD_NAME}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"
        path = self.upload_dir / filename

        written = 0
        with open(path, "wb") as buffer:
            while True:
                chunk = stream.read(_CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > self.max_bytes:
                    break
                buffer.write(chunk)

        if written > self.max_bytes:
            path.unlink(missing_ok=True)
            limit_mib = self.max_bytes / (1024 * 1024)
            raise UploadRejected(f"File too large! Maximum size is {limit_mib:g}MB.")

        logger.info("Stored upload %s as %s (%d bytes)", original_filename, filename, written)
        return FileReference(
            filename=filename,
            original_filename=original_filename,
            path=str(path.resolve()),
        )

    def _is_allowed(self, ext: str, content_type: str | None) -> bool:
        ext_type = ext.lstrip(".")
        if ext_type not in self.allowed_types:
            return False
        if not content_type or not content_type.startswith("image/"):
            return False
        return content_type.split("/", 1)[1].split(";", 1)[0].strip().lower() in self.allowed_types
