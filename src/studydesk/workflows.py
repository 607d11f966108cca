"""Shared workflow layer between the CLI and the record store.

Each function loads or takes a snapshot of one user's records, asks the
core for the new derived state, writes the mutation through the store and
returns a new snapshot. Snapshots passed in are never modified, so a
collaborator failure leaves the caller's state as it was.
"""

import logging
import random
from dataclasses import dataclass, replace
from datetime import date, datetime

from .core import attendance, expenses as exp, notes as nts, quotes as qts, tasks as tsk
from .core.errors import CollaboratorError, DuplicateFavoriteError, ValidationError
from .core.records import (
    EXPENSES,
    FAVORITE_QUOTES,
    NOTES,
    SUBJECTS,
    TASKS,
    Expense,
    FavoriteQuote,
    Note,
    Quote,
    Subject,
    Task,
)
from .ports import FileStore, QuoteSource, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class Attachment:
    """A file picked by the user, to be stored alongside a note."""

    filename: str
    data: bytes


@dataclass
class DashboardStats:
    notes: int
    tasks: int
    pending_tasks: int
    subjects: int
    expenses: int


def _find(items: list, item_id: str, kind: str):
    for item in items:
        if item.id == item_id:
            return item
    raise ValidationError("id", f"No {kind} with id {item_id}")


def _replace_item(items: list, updated) -> list:
    return [updated if item.id == updated.id else item for item in items]


def _without(items: list, item_id: str) -> list:
    return [item for item in items if item.id != item_id]


# ============== Attendance ==============


def load_subjects(store: RecordStore, owner_id: str) -> list[Subject]:
    """Fetch a user's subjects in alphabetical order."""
    records = store.list(SUBJECTS, owner_id)
    return attendance.sort_subjects([Subject.from_record(r) for r in records])


def add_subject(
    store: RecordStore,
    owner_id: str,
    subjects: list[Subject],
    name: str,
    instructor: str = "",
    schedule: str = "",
    min_attendance: int | None = None,
) -> tuple[Subject, list[Subject]]:
    subject = attendance.new_subject("", name, owner_id, instructor, schedule, min_attendance)
    subject = replace(subject, id=store.create(SUBJECTS, subject.to_fields()))
    logger.info(f"Added subject {subject.id} ({subject.name})")
    return subject, attendance.sort_subjects([*subjects, subject])


def update_subject(
    store: RecordStore,
    subjects: list[Subject],
    subject_id: str,
    name: str | None = None,
    instructor: str | None = None,
    schedule: str | None = None,
    min_attendance: int | None = None,
) -> list[Subject]:
    subject = _find(subjects, subject_id, "subject")
    updated = attendance.edit_subject(subject, name, instructor, schedule, min_attendance)
    store.update(SUBJECTS, subject_id, updated.to_fields())
    logger.info(f"Updated subject {subject_id}")
    return attendance.sort_subjects(_replace_item(subjects, updated))


def _save_counts(store: RecordStore, subjects: list[Subject], updated: Subject) -> list[Subject]:
    store.update(SUBJECTS, updated.id, {"attended": updated.attended, "total": updated.total})
    logger.info(f"Attendance for {updated.id} is now {updated.attended}/{updated.total}")
    return _replace_item(subjects, updated)


def mark_attended(store: RecordStore, subjects: list[Subject], subject_id: str) -> list[Subject]:
    subject = _find(subjects, subject_id, "subject")
    return _save_counts(store, subjects, attendance.record_attend(subject))


def mark_missed(store: RecordStore, subjects: list[Subject], subject_id: str) -> list[Subject]:
    subject = _find(subjects, subject_id, "subject")
    return _save_counts(store, subjects, attendance.record_miss(subject))


def set_attendance(
    store: RecordStore,
    subjects: list[Subject],
    subject_id: str,
    attended: int,
    total: int,
) -> list[Subject]:
    subject = _find(subjects, subject_id, "subject")
    return _save_counts(store, subjects, attendance.set_counts(subject, attended, total))


def remove_subject(store: RecordStore, subjects: list[Subject], subject_id: str) -> list[Subject]:
    """Delete a subject together with its attendance history."""
    _find(subjects, subject_id, "subject")
    store.delete(SUBJECTS, subject_id)
    logger.info(f"Deleted subject {subject_id}")
    return _without(subjects, subject_id)


# ============== Tasks ==============


def load_tasks(store: RecordStore, owner_id: str) -> list[Task]:
    """Fetch a user's tasks, pending first and by due date."""
    records = store.list(TASKS, owner_id)
    return tsk.reorder_after_mutation([Task.from_record(r) for r in records])


def add_task(
    store: RecordStore,
    owner_id: str,
    tasks: list[Task],
    title: str,
    subject: str = "",
    due_date: date | None = None,
    reminder_time: str | None = None,
) -> tuple[Task, list[Task]]:
    task = tsk.new_task("", title, owner_id, subject, due_date, reminder_time)
    task = replace(task, id=store.create(TASKS, task.to_fields()))
    logger.info(f"Added task {task.id} ({task.title})")
    return task, tsk.insert(tasks, task)


def toggle_task(store: RecordStore, tasks: list[Task], task_id: str, now: datetime) -> list[Task]:
    task = _find(tasks, task_id, "task")
    updated = tsk.toggle_completed(task, now)
    store.update(
        TASKS,
        task_id,
        {"completed": updated.completed, "completedAt": updated.completed_at.isoformat() if updated.completed_at else None},
    )
    logger.info(f"Task {task_id} marked {'completed' if updated.completed else 'pending'}")
    return tsk.reorder_after_mutation(_replace_item(tasks, updated))


def update_task(
    store: RecordStore,
    tasks: list[Task],
    task_id: str,
    title: str,
    subject: str,
    due_date: date | None,
    reminder_time: str | None,
) -> list[Task]:
    task = _find(tasks, task_id, "task")
    updated = tsk.edit_task(task, title, subject, due_date, reminder_time)
    store.update(TASKS, task_id, updated.to_fields())
    logger.info(f"Updated task {task_id}")
    return tsk.reorder_after_mutation(_replace_item(tasks, updated))


def remove_task(store: RecordStore, tasks: list[Task], task_id: str) -> list[Task]:
    _find(tasks, task_id, "task")
    store.delete(TASKS, task_id)
    logger.info(f"Deleted task {task_id}")
    return _without(tasks, task_id)


# ============== Expenses ==============


def load_expenses(store: RecordStore, owner_id: str) -> list[Expense]:
    """Fetch a user's expenses, newest first. Malformed records are skipped."""
    expenses = []
    for record in store.list(EXPENSES, owner_id):
        try:
            expenses.append(Expense.from_record(record))
        except (ValidationError, ValueError) as e:
            logger.warning(f"Skipping malformed expense {record.get('id')}: {e}")
    return exp.sort_newest_first(expenses)


def add_expense(
    store: RecordStore,
    owner_id: str,
    expenses: list[Expense],
    description: str,
    amount,
    category: str,
    expense_date: date,
    today: date,
) -> tuple[Expense, list[Expense]]:
    expense = exp.new_expense("", description, amount, category, expense_date, owner_id, today)
    expense = replace(expense, id=store.create(EXPENSES, expense.to_fields()))
    logger.info(f"Added expense {expense.id} ({expense.amount} {expense.category})")
    return expense, exp.sort_newest_first([expense, *expenses])


def update_expense(
    store: RecordStore,
    expenses: list[Expense],
    expense_id: str,
    description: str,
    amount,
    category: str,
    expense_date: date,
    today: date,
) -> list[Expense]:
    expense = _find(expenses, expense_id, "expense")
    updated = exp.edit_expense(expense, description, amount, category, expense_date, today)
    store.update(EXPENSES, expense_id, updated.to_fields())
    logger.info(f"Updated expense {expense_id}")
    return exp.sort_newest_first(_replace_item(expenses, updated))


def remove_expense(store: RecordStore, expenses: list[Expense], expense_id: str) -> list[Expense]:
    _find(expenses, expense_id, "expense")
    store.delete(EXPENSES, expense_id)
    logger.info(f"Deleted expense {expense_id}")
    return _without(expenses, expense_id)


# ============== Notes ==============


def load_notes(store: RecordStore, owner_id: str) -> list[Note]:
    """Fetch a user's notes, newest first."""
    records = store.list(NOTES, owner_id)
    return nts.sort_newest_first([Note.from_record(r) for r in records])


def _upload(files: FileStore, owner_id: str, attachment: Attachment, now: datetime) -> tuple[str, str]:
    path = nts.attachment_path(owner_id, attachment.filename, now)
    url = files.upload(path, attachment.data)
    return url, path


def _discard(files: FileStore, path: str) -> None:
    """Remove a file no record points at. Failures are logged, not raised."""
    try:
        files.delete(path)
    except CollaboratorError as e:
        logger.error(f"Could not clean up attachment {path}: {e}")


def add_note(
    store: RecordStore,
    files: FileStore,
    owner_id: str,
    notes: list[Note],
    title: str,
    subject: str,
    content: str,
    now: datetime,
    attachment: Attachment | None = None,
) -> tuple[Note, list[Note]]:
    """Create a note, uploading its attachment first when there is one."""
    note = nts.new_note("", title, subject, content, owner_id, now)
    if attachment:
        file_url, file_path = _upload(files, owner_id, attachment, now)
        note = replace(note, file_url=file_url, file_path=file_path)
    try:
        note = replace(note, id=store.create(NOTES, note.to_fields()))
    except CollaboratorError:
        if note.has_attachment:
            _discard(files, note.file_path)
        raise
    logger.info(f"Added note {note.id} ({note.title})")
    return note, [note, *notes]


def update_note(
    store: RecordStore,
    files: FileStore,
    notes: list[Note],
    note_id: str,
    title: str,
    subject: str,
    content: str,
    now: datetime,
    attachment: Attachment | None = None,
) -> list[Note]:
    """
    Edit a note. A new attachment is uploaded and saved on the record
    before the old file is deleted.
    """
    note = _find(notes, note_id, "note")
    updated = nts.new_note(
        note.id, title, subject, content, note.owner_id, note.created_at, note.file_url, note.file_path
    )
    if attachment:
        file_url, file_path = _upload(files, note.owner_id, attachment, now)
        updated = replace(updated, file_url=file_url, file_path=file_path)
    try:
        store.update(NOTES, note_id, updated.to_fields())
    except CollaboratorError:
        if attachment and updated.file_path != note.file_path:
            _discard(files, updated.file_path)
        raise
    if attachment and note.has_attachment and note.file_path != updated.file_path:
        _discard(files, note.file_path)
    logger.info(f"Updated note {note_id}")
    return _replace_item(notes, updated)


def remove_note(store: RecordStore, files: FileStore, notes: list[Note], note_id: str) -> list[Note]:
    """Delete a note record, then its attachment."""
    note = _find(notes, note_id, "note")
    store.delete(NOTES, note_id)
    if note.has_attachment:
        files.delete(note.file_path)
    logger.info(f"Deleted note {note_id}")
    return _without(notes, note_id)


# ============== Quotes ==============


def quote_of_the_day(
    source: QuoteSource,
    pool: list[Quote] | None = None,
    rng: random.Random | None = None,
    tags: tuple[str, ...] = qts.DEFAULT_TAGS,
) -> qts.QuoteOutcome:
    """Fetch a quote, falling back to the local pool. Never raises on source failure."""
    outcome = qts.select_quote(source.fetch_random, pool, rng, tags)
    if outcome.is_fallback:
        logger.warning(f"Quote source unavailable, using local quote: {outcome.error}")
    return outcome


def load_favorites(store: RecordStore, owner_id: str) -> list[FavoriteQuote]:
    records = store.list(FAVORITE_QUOTES, owner_id)
    return [FavoriteQuote.from_record(r) for r in records]


def save_favorite(
    store: RecordStore,
    owner_id: str,
    favorites: list[FavoriteQuote],
    quote: Quote,
    now: datetime,
) -> tuple[FavoriteQuote, list[FavoriteQuote]]:
    """Save a quote to favorites. Raises DuplicateFavoriteError if already saved."""
    if qts.is_duplicate_favorite(favorites, quote):
        raise DuplicateFavoriteError()
    favorite = qts.new_favorite("", quote, owner_id, now)
    favorite = replace(favorite, id=store.create(FAVORITE_QUOTES, favorite.to_fields()))
    logger.info(f"Saved favorite quote {favorite.id}")
    return favorite, [*favorites, favorite]


def unsave_favorite(store: RecordStore, favorites: list[FavoriteQuote], favorite_id: str) -> list[FavoriteQuote]:
    _find(favorites, favorite_id, "favorite")
    store.delete(FAVORITE_QUOTES, favorite_id)
    logger.info(f"Removed favorite quote {favorite_id}")
    return qts.remove_favorite(favorites, favorite_id)


# ============== Dashboard ==============


def dashboard_stats(store: RecordStore, owner_id: str) -> DashboardStats:
    """Record counts shown on the dashboard."""
    tasks = load_tasks(store, owner_id)
    return DashboardStats(
        notes=len(store.list(NOTES, owner_id)),
        tasks=len(tasks),
        pending_tasks=tsk.pending_count(tasks),
        subjects=len(store.list(SUBJECTS, owner_id)),
        expenses=len(store.list(EXPENSES, owner_id)),
    )
