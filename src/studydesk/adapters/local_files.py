"""Local directory file store adapter."""

import logging
from pathlib import Path

from studydesk.core.errors import CollaboratorError

logger = logging.getLogger(__name__)


class LocalFileStore:
    """
    Attachment storage in a local directory.

    Implements FileStore protocol. Paths are relative to the root and
    URLs are file:// URIs.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root).expanduser().resolve()

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root):
            raise CollaboratorError(f"Path escapes storage root: {path}")
        return target

    def upload(self, path: str, data: bytes) -> str:
        """Store bytes at a path. Returns a file:// URL."""
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error(f"Upload to {target} failed: {e}")
            raise CollaboratorError(f"Upload failed: {e}") from e
        logger.info(f"Stored {len(data)} bytes at {path}")
        return target.as_uri()

    def delete(self, path: str) -> None:
        """Delete the file stored at a path. A file that is already gone counts as deleted."""
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError:
            logger.warning(f"Attachment {path} already missing, nothing to delete")
            return
        except OSError as e:
            logger.error(f"Delete of {target} failed: {e}")
            raise CollaboratorError(f"Delete failed: {e}") from e
        logger.info(f"Deleted {path}")
