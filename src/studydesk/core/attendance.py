"""Pure attendance logic - no I/O dependencies.

Percentages are always derived from the raw ``attended``/``total`` counters
and never stored.
"""

from dataclasses import dataclass, replace

from .records import DEFAULT_MIN_ATTENDANCE, Subject, validate_counts, validate_subject

GOOD_LEVEL = 75
WARNING_LEVEL = 60


def percent(part: int, whole: int) -> int:
    """
    Integer percentage rounded half away from zero.

    Returns 0 when ``whole`` is 0. Integer arithmetic only, so 1/8 -> 13
    and 5/8 -> 63 exactly.
    """
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def ratio(subject: Subject) -> int:
    """Attendance percentage for one subject (0-100)."""
    return percent(subject.attended, subject.total)


def is_below_threshold(subject: Subject) -> bool:
    """True when the subject's attendance is under its configured minimum."""
    return ratio(subject) < subject.min_attendance


def record_attend(subject: Subject) -> Subject:
    return replace(subject, attended=subject.attended + 1, total=subject.total + 1)


def record_miss(subject: Subject) -> Subject:
    return replace(subject, total=subject.total + 1)


def set_counts(subject: Subject, attended: int, total: int) -> Subject:
    """
    Replace both counters.

    Raises ValidationError for negative counts or attended > total; the
    original subject is never modified.
    """
    validate_counts(attended, total)
    return replace(subject, attended=attended, total=total)


def overall_ratio(subjects: list[Subject]) -> int:
    """
    Overall percentage over the summed counters of all subjects.

    This weights subjects by how many classes they have had, which differs
    from averaging per-subject percentages when totals are uneven.
    """
    attended = sum(s.attended for s in subjects)
    total = sum(s.total for s in subjects)
    return percent(attended, total)


def attendance_level(value: int) -> str:
    """Colour band for a percentage: good, warning or low."""
    if value >= GOOD_LEVEL:
        return "good"
    if value >= WARNING_LEVEL:
        return "warning"
    return "low"


def new_subject(
    id: str,
    name: str,
    owner_id: str,
    instructor: str = "",
    schedule: str = "",
    min_attendance: int | None = None,
) -> Subject:
    """Build a validated subject with empty attendance history."""
    subject = Subject(
        id=id,
        name=name.strip(),
        instructor=instructor.strip(),
        schedule=schedule.strip(),
        min_attendance=DEFAULT_MIN_ATTENDANCE if min_attendance is None else min_attendance,
        owner_id=owner_id,
    )
    validate_subject(subject)
    return subject


def edit_subject(
    subject: Subject,
    name: str | None = None,
    instructor: str | None = None,
    schedule: str | None = None,
    min_attendance: int | None = None,
) -> Subject:
    """Change descriptive fields; counters are left as they are."""
    updated = replace(
        subject,
        name=subject.name if name is None else name.strip(),
        instructor=subject.instructor if instructor is None else instructor.strip(),
        schedule=subject.schedule if schedule is None else schedule.strip(),
        min_attendance=subject.min_attendance if min_attendance is None else min_attendance,
    )
    validate_subject(updated)
    return updated


def sort_subjects(subjects: list[Subject]) -> list[Subject]:
    """Alphabetical by name, case-insensitive."""
    return sorted(subjects, key=lambda s: s.name.casefold())


@dataclass
class SubjectStatus:
    """A subject with its derived percentage."""

    subject: Subject
    ratio: int
    below_threshold: bool


@dataclass
class AttendanceReport:
    """Assembled attendance view data."""

    subjects: list[SubjectStatus]
    overall: int
    level: str

    @property
    def below_threshold(self) -> list[Subject]:
        return [s.subject for s in self.subjects if s.below_threshold]


def build_report(subjects: list[Subject]) -> AttendanceReport:
    """Derive per-subject and overall percentages, subjects in alphabetical order."""
    ordered = sort_subjects(subjects)
    overall = overall_ratio(ordered)
    return AttendanceReport(
        subjects=[SubjectStatus(s, ratio(s), is_below_threshold(s)) for s in ordered],
        overall=overall,
        level=attendance_level(overall),
    )
