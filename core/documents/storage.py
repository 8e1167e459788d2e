"""
File-system document store for requisition and resume uploads.

Paths handed out by the store are relative to its root and are what the
database keeps (``requisitions/<uuid>.pdf``).
"""
import io
import logging
import uuid
from pathlib import Path, PurePath
from typing import BinaryIO, Optional

from core.exceptions import DocumentNotFoundError, DocumentStorageError

logger = logging.getLogger(__name__)


class FileSystemDocumentStore:
    """Stores documents under a root directory with generated unique names."""

    def __init__(self, root: str):
        self.root = Path(root)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DocumentStorageError(f"Could not initialize storage location {root}: {e}") from e

    def _resolve(self, relative_path: str) -> Path:
        if not relative_path or '..' in PurePath(relative_path).parts:
            raise DocumentNotFoundError(f"Invalid document path: {relative_path!r}")
        return self.root / relative_path

    def store(self, data: bytes, filename: str, subfolder: str) -> str:
        """Write ``data`` under ``subfolder`` and return the relative path.

        Raises:
            DocumentStorageError: for empty data, a suspicious filename, or I/O failure
        """
        if not data:
            raise DocumentStorageError(f"Failed to store empty file {filename!r}")
        if not filename or '..' in filename or '..' in subfolder:
            raise DocumentStorageError(f"Invalid path sequence in {filename!r}")

        extension = PurePath(filename).suffix.lower()
        unique_filename = f"{uuid.uuid4()}{extension}"

        destination_folder = self.root / subfolder
        try:
            destination_folder.mkdir(parents=True, exist_ok=True)
            (destination_folder / unique_filename).write_bytes(data)
        except OSError as e:
            raise DocumentStorageError(f"Failed to store file {filename!r}: {e}") from e

        relative_path = str(PurePath(subfolder, unique_filename))
        logger.info(f"Stored document {filename!r} at {relative_path}")
        return relative_path

    def load(self, relative_path: str) -> BinaryIO:
        """Return the document contents as a binary stream.

        Raises:
            DocumentNotFoundError: if the file does not exist or cannot be read
        """
        path = self._resolve(relative_path)
        try:
            return io.BytesIO(path.read_bytes())
        except OSError as e:
            raise DocumentNotFoundError(f"Could not read file: {relative_path}") from e

    def delete(self, relative_path: Optional[str]) -> None:
        """Remove a stored document. Failures are logged, never raised."""
        if not relative_path:
            return
        try:
            self._resolve(relative_path).unlink(missing_ok=True)
            logger.info(f"Deleted document {relative_path}")
        except (OSError, DocumentNotFoundError) as e:
            logger.warning(f"Failed to delete file {relative_path}: {e}")
