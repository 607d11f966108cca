"""Record model - plain data shapes and validation predicates, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from .errors import ValidationError

# Persistence collection names
SUBJECTS = "attendance"
TASKS = "tasks"
EXPENSES = "expenses"
NOTES = "notes"
FAVORITE_QUOTES = "favoriteQuotes"

# Field holding the owner identifier on every persisted record
OWNER_FIELD = "userId"

DEFAULT_MIN_ATTENDANCE = 75


def parse_date(value) -> date | None:
    """Parse a stored date value (date, datetime or ISO string) to a calendar date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split("T")[0])


def parse_datetime(value) -> datetime | None:
    """Parse a stored timestamp (datetime or ISO string, trailing Z allowed)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def parse_amount(value) -> Decimal:
    """Parse a money amount without going through binary floating point."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError("amount", f"Not a number: {value!r}")


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class Subject:
    """A class whose attendance is tracked."""

    id: str
    name: str
    attended: int = 0
    total: int = 0
    min_attendance: int = DEFAULT_MIN_ATTENDANCE
    instructor: str = ""
    schedule: str = ""
    owner_id: str = ""

    @classmethod
    def from_record(cls, record: dict) -> "Subject":
        minimum = record.get("minAttendance")
        return cls(
            id=record["id"],
            name=record.get("name", ""),
            attended=int(record.get("attended", 0) or 0),
            total=int(record.get("total", 0) or 0),
            min_attendance=DEFAULT_MIN_ATTENDANCE if minimum in (None, "") else int(minimum),
            instructor=record.get("instructor") or "",
            schedule=record.get("schedule") or "",
            owner_id=record.get(OWNER_FIELD, ""),
        )

    def to_fields(self) -> dict:
        return {
            "name": self.name,
            "instructor": self.instructor,
            "schedule": self.schedule,
            "minAttendance": self.min_attendance,
            "attended": self.attended,
            "total": self.total,
            OWNER_FIELD: self.owner_id,
        }


@dataclass
class Task:
    """A to-do item, optionally tied to a subject and a due date."""

    id: str
    title: str
    subject: str = ""
    due_date: date | None = None
    reminder_time: str | None = None
    completed: bool = False
    completed_at: datetime | None = None
    owner_id: str = ""

    @classmethod
    def from_record(cls, record: dict) -> "Task":
        completed = bool(record.get("completed", False))
        return cls(
            id=record["id"],
            title=record.get("title", ""),
            subject=record.get("subject") or "",
            due_date=parse_date(record.get("dueDate")),
            reminder_time=record.get("reminderTime") or None,
            completed=completed,
            completed_at=parse_datetime(record.get("completedAt")) if completed else None,
            owner_id=record.get(OWNER_FIELD, ""),
        )

    def to_fields(self) -> dict:
        return {
            "title": self.title,
            "subject": self.subject,
            "dueDate": _iso(self.due_date),
            "reminderTime": self.reminder_time,
            "completed": self.completed,
            "completedAt": _iso(self.completed_at),
            OWNER_FIELD: self.owner_id,
        }


@dataclass
class Expense:
    """A single spending entry."""

    id: str
    description: str
    amount: Decimal
    category: str
    date: date
    owner_id: str = ""

    @classmethod
    def from_record(cls, record: dict) -> "Expense":
        expense_date = parse_date(record.get("date"))
        if expense_date is None:
            raise ValidationError("date", "Date is required")
        return cls(
            id=record["id"],
            description=record.get("description", ""),
            amount=parse_amount(record.get("amount", "0")),
            category=record.get("category", ""),
            date=expense_date,
            owner_id=record.get(OWNER_FIELD, ""),
        )

    def to_fields(self) -> dict:
        return {
            "description": self.description,
            "amount": str(self.amount),
            "category": self.category,
            "date": _iso(self.date),
            OWNER_FIELD: self.owner_id,
        }


@dataclass
class Note:
    """A study note with an optional file attachment."""

    id: str
    title: str
    subject: str
    content: str
    file_url: str = ""
    file_path: str = ""
    created_at: datetime | None = None
    owner_id: str = ""

    @property
    def has_attachment(self) -> bool:
        return bool(self.file_path)

    @classmethod
    def from_record(cls, record: dict) -> "Note":
        return cls(
            id=record["id"],
            title=record.get("title", ""),
            subject=record.get("subject", ""),
            content=record.get("content", ""),
            file_url=record.get("fileUrl") or "",
            file_path=record.get("filePath") or "",
            created_at=parse_datetime(record.get("createdAt")),
            owner_id=record.get(OWNER_FIELD, ""),
        )

    def to_fields(self) -> dict:
        return {
            "title": self.title,
            "subject": self.subject,
            "content": self.content,
            "fileUrl": self.file_url,
            "filePath": self.file_path,
            "createdAt": _iso(self.created_at),
            OWNER_FIELD: self.owner_id,
        }


@dataclass(frozen=True)
class Quote:
    """A quote as shown to the user."""

    text: str
    author: str


@dataclass
class FavoriteQuote:
    """A quote the user saved."""

    id: str
    text: str
    author: str
    saved_at: datetime | None = None
    owner_id: str = ""

    @property
    def quote(self) -> Quote:
        return Quote(self.text, self.author)

    @classmethod
    def from_record(cls, record: dict) -> "FavoriteQuote":
        return cls(
            id=record["id"],
            text=record.get("text", ""),
            author=record.get("author", ""),
            saved_at=parse_datetime(record.get("savedAt")),
            owner_id=record.get(OWNER_FIELD, ""),
        )

    def to_fields(self) -> dict:
        return {
            "text": self.text,
            "author": self.author,
            "savedAt": _iso(self.saved_at),
            OWNER_FIELD: self.owner_id,
        }


# ============== Validation ==============


def _require(field: str, value: str | None, label: str) -> None:
    if not value or not value.strip():
        raise ValidationError(field, f"{label} is required")


def validate_counts(attended: int, total: int) -> None:
    """Attendance counts must be non-negative with attended <= total."""
    if attended < 0:
        raise ValidationError("attended", "Attended classes cannot be negative")
    if total < 0:
        raise ValidationError("total", "Total classes cannot be negative")
    if attended > total:
        raise ValidationError("attended", "Attended classes cannot exceed total classes")


def validate_subject(subject: Subject) -> None:
    _require("name", subject.name, "Subject name")
    if not 0 <= subject.min_attendance <= 100:
        raise ValidationError("minAttendance", "Minimum attendance must be between 0 and 100")
    validate_counts(subject.attended, subject.total)


def validate_task(task: Task) -> None:
    _require("title", task.title, "Title")
    if task.completed != (task.completed_at is not None):
        raise ValidationError("completedAt", "Completion time must be set exactly when completed")


def validate_expense(expense: Expense, today: date) -> None:
    _require("description", expense.description, "Description")
    if expense.amount is None or expense.amount <= 0:
        raise ValidationError("amount", "Amount must be greater than 0")
    _require("category", expense.category, "Category")
    if expense.date is None:
        raise ValidationError("date", "Date is required")
    if expense.date > today:
        raise ValidationError("date", "Date cannot be in the future")


def validate_note(note: Note) -> None:
    _require("title", note.title, "Title")
    _require("subject", note.subject, "Subject")
    _require("content", note.content, "Content")
