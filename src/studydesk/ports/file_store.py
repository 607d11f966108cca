"""Binary file storage interface."""

from typing import Protocol


class FileStore(Protocol):
    """Interface for storing note attachments."""

    def upload(self, path: str, data: bytes) -> str:
        """Store bytes at a path. Returns a URL the file can be fetched from."""
        ...

    def delete(self, path: str) -> None:
        """Delete the file stored at a path."""
        ...
