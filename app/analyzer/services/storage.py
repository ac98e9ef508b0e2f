"""
File storage for uploaded documents.

Uploads are written below a root directory, one sub-directory per user.
"""

import logging
import uuid
from pathlib import Path

from fastapi import Depends

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class DocumentStorage:
    """Stores and removes uploaded files on the local file system."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def save(self, owner_id: uuid.UUID, filename: str, content: bytes) -> Path:
        """
        Write an upload to disk.

        Args:
            owner_id: ID of the owning user; files are grouped per user.
            filename: Original filename. Any directory part is dropped.
            content: Raw file bytes.

        Returns:
            Path of the stored file.
        """
        directory = self.root / str(owner_id)
        directory.mkdir(parents=True, exist_ok=True)

        path = directory / f"{uuid.uuid4()}_{Path(filename).name}"
        path.write_bytes(content)

        logger.info("Stored upload %s (%d bytes)", path, len(content))
        return path

    def delete(self, path: Path | str) -> bool:
        """Remove a stored file. Returns False if it was already gone."""
        file_path = Path(path)
        if not file_path.exists():
            logger.warning("Stored file %s already missing", file_path)
            return False
        file_path.unlink()
        logger.info("Deleted stored file %s", file_path)
        return True


def get_document_storage(settings: Settings = Depends(get_settings)) -> DocumentStorage:
    """Dependency providing storage rooted at the configured upload directory."""
    return DocumentStorage(settings.upload_dir)
