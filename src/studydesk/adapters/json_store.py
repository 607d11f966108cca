"""File-based record store adapter."""

import json
import logging
import uuid
from pathlib import Path

from studydesk.core.errors import CollaboratorError
from studydesk.core.records import OWNER_FIELD

logger = logging.getLogger(__name__)


class JsonRecordStore:
    """
    JSON file record store.

    Implements RecordStore protocol. Each collection is one JSON file
    mapping record id to its fields.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, collection: str) -> Path:
        """Get the file path for a collection."""
        return self.data_dir / f"{collection}.json"

    def _load(self, collection: str) -> dict[str, dict]:
        path = self._path_for(collection)
        if not path.exists():
            return {}
        try:
            return json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise CollaboratorError(f"Failed to read {collection}: {e}") from e

    def _save(self, collection: str, records: dict[str, dict]) -> None:
        path = self._path_for(collection)
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(json.dumps(records, indent=2, default=str))
            tmp.replace(path)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise CollaboratorError(f"Failed to write {collection}: {e}") from e

    def list(self, collection: str, owner_id: str) -> list[dict]:
        """List all records in a collection belonging to an owner."""
        records = self._load(collection)
        return [
            {"id": record_id, **fields}
            for record_id, fields in records.items()
            if fields.get(OWNER_FIELD) == owner_id
        ]

    def create(self, collection: str, fields: dict) -> str:
        """Create a record and return its new id."""
        records = self._load(collection)
        record_id = uuid.uuid4().hex
        records[record_id] = {k: v for k, v in fields.items() if k != "id"}
        self._save(collection, records)
        logger.debug(f"Created {collection}/{record_id}")
        return record_id

    def update(self, collection: str, record_id: str, fields: dict) -> None:
        """Merge fields into an existing record."""
        records = self._load(collection)
        if record_id not in records:
            raise CollaboratorError(f"No such record: {collection}/{record_id}")
        records[record_id].update({k: v for k, v in fields.items() if k != "id"})
        self._save(collection, records)
        logger.debug(f"Updated {collection}/{record_id}")

    def delete(self, collection: str, record_id: str) -> None:
        """Delete a record."""
        records = self._load(collection)
        if records.pop(record_id, None) is None:
            raise CollaboratorError(f"No such record: {collection}/{record_id}")
        self._save(collection, records)
        logger.debug(f"Deleted {collection}/{record_id}")
