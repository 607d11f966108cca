"""Pure note search logic - no I/O dependencies."""

import re
from datetime import datetime

from .records import Note, validate_note

SEARCH_FIELDS = ("title", "subject", "content")


def matches(note: Note, term: str) -> bool:
    """Case-insensitive substring match on title, subject or content."""
    needle = term.casefold()
    return any(needle in getattr(note, field).casefold() for field in SEARCH_FIELDS)


def search(notes: list[Note], term: str) -> list[Note]:
    """Filter notes by a search term, keeping input order. Empty term returns everything."""
    if not term:
        return list(notes)
    return [n for n in notes if matches(n, term)]


def sort_newest_first(notes: list[Note]) -> list[Note]:
    """Most recently created first; notes without a timestamp go last."""
    return sorted(
        notes,
        key=lambda n: (n.created_at is not None, n.created_at.timestamp() if n.created_at else 0),
        reverse=True,
    )


def attachment_path(owner_id: str, filename: str, now: datetime) -> str:
    """Object-store path for a note attachment: notes/<owner>/<millis>_<name>."""
    safe_name = re.sub(r"[^\w.\-]+", "_", filename.rsplit("/", 1)[-1]) or "attachment"
    return f"notes/{owner_id}/{int(now.timestamp() * 1000)}_{safe_name}"


def new_note(
    id: str,
    title: str,
    subject: str,
    content: str,
    owner_id: str,
    created_at: datetime,
    file_url: str = "",
    file_path: str = "",
) -> Note:
    """Build a validated note."""
    note = Note(
        id=id,
        title=title.strip(),
        subject=subject.strip(),
        content=content.strip(),
        file_url=file_url,
        file_path=file_path,
        created_at=created_at,
        owner_id=owner_id,
    )
    validate_note(note)
    return note
