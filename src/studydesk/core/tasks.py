"""Pure task ordering logic - no I/O dependencies."""

from bisect import bisect_right
from dataclasses import replace
from datetime import date, datetime, timedelta

from .records import Task, validate_task

STATUSES = ("all", "pending", "completed")


def sort_key(task: Task) -> tuple[bool, bool, date]:
    """
    Ordering key: pending before completed, then by due date ascending,
    tasks without a due date last within their completion group.
    """
    return (task.completed, task.due_date is None, task.due_date or date.min)


def insert(sorted_tasks: list[Task], new_task: Task) -> list[Task]:
    """
    Insert a task into an already ordered list without re-sorting it.

    The new task goes after any tasks it ties with. Returns a new list.
    """
    index = bisect_right(sorted_tasks, sort_key(new_task), key=sort_key)
    return [*sorted_tasks[:index], new_task, *sorted_tasks[index:]]


def reorder_after_mutation(tasks: list[Task]) -> list[Task]:
    """Full stable re-sort, used after an edit or a completion toggle."""
    return sorted(tasks, key=sort_key)


def is_overdue(task: Task, today: date) -> bool:
    """Pending task whose due date is before today."""
    if task.completed or not task.due_date:
        return False
    return task.due_date < today


def format_relative_due_label(task: Task, today: date) -> str:
    """Today, Tomorrow, the locale date, or 'No due date'."""
    if not task.due_date:
        return "No due date"
    if task.due_date == today:
        return "Today"
    if task.due_date == today + timedelta(days=1):
        return "Tomorrow"
    return task.due_date.strftime("%x")


def toggle_completed(task: Task, now: datetime) -> Task:
    """Flip completion; completed_at is set exactly when the task is completed."""
    if task.completed:
        return replace(task, completed=False, completed_at=None)
    return replace(task, completed=True, completed_at=now)


def filter_by_status(tasks: list[Task], status: str) -> list[Task]:
    """Filter to all, pending or completed tasks, keeping order."""
    match status:
        case "all":
            return list(tasks)
        case "pending":
            return [t for t in tasks if not t.completed]
        case "completed":
            return [t for t in tasks if t.completed]
    raise ValueError(f"Unknown task status filter: {status!r}")


def pending_count(tasks: list[Task]) -> int:
    return sum(1 for t in tasks if not t.completed)


def new_task(
    id: str,
    title: str,
    owner_id: str,
    subject: str = "",
    due_date: date | None = None,
    reminder_time: str | None = None,
) -> Task:
    """Build a validated pending task."""
    task = Task(
        id=id,
        title=title.strip(),
        subject=subject.strip(),
        due_date=due_date,
        reminder_time=reminder_time or None,
        owner_id=owner_id,
    )
    validate_task(task)
    return task


def edit_task(
    task: Task,
    title: str,
    subject: str,
    due_date: date | None,
    reminder_time: str | None,
) -> Task:
    """Apply an edit form; id and completion state are kept."""
    updated = replace(
        task,
        title=title.strip(),
        subject=subject.strip(),
        due_date=due_date,
        reminder_time=reminder_time or None,
    )
    validate_task(updated)
    return updated
