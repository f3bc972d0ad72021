"""
Local disk storage for uploaded medical files.

Blobs are stored flat under one directory as ``<epoch-ms>-<original name>``.
Metadata lives in the medical_files table; this module only moves bytes.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from zoocare.core.config import settings

logger = logging.getLogger(__name__)


ALLOWED_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/bmp",
    "application/pdf",
    "text/plain",
    "text/csv",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})


@dataclass
class StoredFile:
    """A blob written to the upload directory."""
    storage_filename: str
    file_path: str
    size_bytes: int


class MedicalFileStorage:
    """Save, locate and delete medical file blobs on local disk."""

    def __init__(self, upload_dir: str | Path | None = None):
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR)

    def build_storage_filename(self, original_filename: str) -> str:
        """Timestamped name that keeps the original stem and extension."""
        name = Path(original_filename or "upload").name
        timestamp = int(time.time() * 1000)
        return f"{timestamp}-{name}"

    def save(self, original_filename: str, data: bytes) -> StoredFile:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        storage_filename = self.build_storage_filename(original_filename)
        path = self.upload_dir / storage_filename
        # Same-millisecond uploads of one name must not overwrite each other
        counter = 1
        while path.exists():
            stem, suffix = Path(storage_filename).stem, Path(storage_filename).suffix
            path = self.upload_dir / f"{stem}-{counter}{suffix}"
            counter += 1
        path.write_bytes(data)
        logger.info("Stored medical file %s (%d bytes)", path.name, len(data))
        return StoredFile(
            storage_filename=path.name,
            file_path=f"{self.upload_dir.as_posix()}/{path.name}",
            size_bytes=len(data),
        )

    def path_for(self, storage_filename: str) -> Path:
        return self.upload_dir / Path(storage_filename).name

    def exists(self, storage_filename: str) -> bool:
        return self.path_for(storage_filename).is_file()

    def delete(self, storage_filename: str) -> None:
        """Remove a blob; a missing blob is logged, not raised."""
        try:
            self.path_for(storage_filename).unlink()
        except FileNotFoundError:
            logger.warning("Medical file %s already removed", storage_filename)


def get_file_storage() -> MedicalFileStorage:
    """FastAPI dependency returning the configured file storage."""
    return MedicalFileStorage()
