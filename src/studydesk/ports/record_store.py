"""Record persistence interface."""

from typing import Protocol


class RecordStore(Protocol):
    """
    Interface for a document store holding each user's records.

    Records are plain field maps; ``list`` returns them with their ``id``
    included. No transactional guarantees across calls.
    """

    def list(self, collection: str, owner_id: str) -> list[dict]:
        """List all records in a collection belonging to an owner."""
        ...

    def create(self, collection: str, fields: dict) -> str:
        """Create a record and return its new id."""
        ...

    def update(self, collection: str, record_id: str, fields: dict) -> None:
        """Merge fields into an existing record."""
        ...

    def delete(self, collection: str, record_id: str) -> None:
        """Delete a record."""
        ...
