"""Local filesystem storage for submitted files."""

import logging
import secrets
import time
from pathlib import Path
from typing import Iterable, List, Optional

from config import (
    ALLOWED_SUBMISSION_CONTENT_TYPES,
    MAX_SUBMISSION_SIZE,
    UPLOADS_DIR,
    UPLOADS_URL_PREFIX,
)
from core.exceptions import InvalidUploadError

logger = logging.getLogger(__name__)


def validate_pdf_upload(
    content: Optional[bytes],
    content_type: Optional[str],
    max_size: int = MAX_SUBMISSION_SIZE,
) -> None:
    """Check an upload before anything is written to disk.

    Raises:
        InvalidUploadError: If the file is missing, too large or not a PDF.
    """
    if not content:
        raise InvalidUploadError("Please upload a PDF file")
    if content_type not in ALLOWED_SUBMISSION_CONTENT_TYPES:
        raise InvalidUploadError("Only PDF files are allowed!")
    if len(content) > max_size:
        raise InvalidUploadError(
            f"File too large (max {max_size // (1024 * 1024)}MB)"
        )
    # Content type is client-supplied; the magic header is not
    if not content.startswith(b"%PDF"):
        raise InvalidUploadError("Only PDF files are allowed!")


class UploadStorage:
    """Stores submission files under one directory with randomized names."""

    def __init__(self, root: Path = UPLOADS_DIR, url_prefix: str = UPLOADS_URL_PREFIX):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def build_file_name(original_name: Optional[str]) -> str:
        """``submission-<unix ms>-<random>`` plus the original extension."""
        suffix = Path(original_name or "").suffix.lower() or ".pdf"
        return f"submission-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"

    def path_for(self, file_name: str) -> Path:
        # Stored names never contain separators; strip any that slip in
        return self.root / Path(file_name).name

    def url_for(self, file_name: str) -> str:
        return f"{self.url_prefix}/{file_name}"

    def save(self, content: bytes, original_name: Optional[str]) -> str:
        """Write ``content`` to a fresh file.

        Returns:
            The stored file name.
        """
        file_name = self.build_file_name(original_name)
        self.path_for(file_name).write_bytes(content)
        logger.info("Stored upload %s (%d bytes)", file_name, len(content))
        return file_name

    def delete(self, file_name: Optional[str]) -> bool:
        """Remove a stored file; returns False when it was already gone."""
        if not file_name:
            return False
        path = self.path_for(file_name)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Upload %s already removed", file_name)
            return False
        logger.info("Deleted upload %s", file_name)
        return True

    def list_files(self) -> List[str]:
        return sorted(p.name for p in self.root.iterdir() if p.is_file())

    def sweep(self, referenced: Iterable[str]) -> List[str]:
        """Delete every stored file not in ``referenced``.

        Returns:
            Names of the removed files.
        """
        keep = set(referenced)
        removed = []
        for file_name in self.list_files():
            if file_name not in keep and self.delete(file_name):
                removed.append(file_name)
        if removed:
            logger.warning("Swept %d orphaned upload(s)", len(removed))
        return removed
