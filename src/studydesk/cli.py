"""Studydesk CLI - student productivity tracker."""

import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

import click

from . import workflows as wf
from .adapters import ConfigIdentityProvider, JsonRecordStore, LocalFileStore, QuotableAdapter
from .config import Config, load_config
from .core import attendance, expenses as exp, notes as nts, quotes as qts, tasks as tsk
from .core.errors import CollaboratorError, DuplicateFavoriteError, ValidationError
from .core.records import Quote


class Session:
    """Collaborators wired from configuration for one CLI invocation."""

    def __init__(self, config: Config):
        self.config = config
        self.store = JsonRecordStore(config.data_path)
        self.files = LocalFileStore(config.attachments_path)
        self.quotes = QuotableAdapter(config.quote_api_url, timeout=config.quote_timeout)
        self.identity = ConfigIdentityProvider(config)

    @property
    def owner_id(self) -> str:
        return self.identity.current_owner()


def _session(ctx: click.Context) -> Session:
    if ctx.obj is None:
        ctx.obj = Session(load_config())
    return ctx.obj


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid date {value!r}, expected YYYY-MM-DD")


@click.group()
@click.version_option(package_name="studydesk")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """Studydesk - notes, tasks, attendance, quotes and expenses."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def dashboard(ctx, as_json: bool):
    """Show record counts."""
    s = _session(ctx)
    try:
        stats = wf.dashboard_stats(s.store, s.owner_id)
    except CollaboratorError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(stats.__dict__, indent=2))
        return

    click.echo(f"Notes:         {stats.notes}")
    click.echo(f"Pending tasks: {stats.pending_tasks} of {stats.tasks}")
    click.echo(f"Subjects:      {stats.subjects}")
    click.echo(f"Expenses:      {stats.expenses}")


# ============== Attendance ==============


@main.group("attendance", invoke_without_command=True)
@click.pass_context
def attendance_cmd(ctx):
    """Track class attendance."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(attendance_list)


@attendance_cmd.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def attendance_list(ctx, as_json: bool = False):
    """Show attendance per subject and overall."""
    s = _session(ctx)
    try:
        report = attendance.build_report(wf.load_subjects(s.store, s.owner_id))
    except CollaboratorError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "overall": report.overall,
                    "level": report.level,
                    "subjects": [
                        {
                            "id": row.subject.id,
                            "name": row.subject.name,
                            "attended": row.subject.attended,
                            "total": row.subject.total,
                            "ratio": row.ratio,
                            "min_attendance": row.subject.min_attendance,
                            "below_threshold": row.below_threshold,
                        }
                        for row in report.subjects
                    ],
                },
                indent=2,
            )
        )
        return

    if not report.subjects:
        click.echo("No subjects yet.")
        return

    click.echo(f"Overall attendance: {report.overall}%")
    if report.level != "good":
        click.echo(f"Your overall attendance is below {attendance.GOOD_LEVEL}%. Try to attend more classes.")
    click.echo()
    for row in report.subjects:
        warn = " !" if row.below_threshold else ""
        click.echo(
            f"  {row.ratio:3d}%  {row.subject.name} ({row.subject.attended}/{row.subject.total}, "
            f"min {row.subject.min_attendance}%){warn}  [{row.subject.id}]"
        )


@attendance_cmd.command("add")
@click.argument("name")
@click.option("--instructor", default="")
@click.option("--schedule", default="")
@click.option("--min", "min_attendance", type=int, default=None, help="Minimum attendance percentage")
@click.pass_context
def attendance_add(ctx, name: str, instructor: str, schedule: str, min_attendance: int | None):
    """Add a subject."""
    s = _session(ctx)
    if min_attendance is None:
        min_attendance = s.config.default_min_attendance
    try:
        subjects = wf.load_subjects(s.store, s.owner_id)
        subject, _ = wf.add_subject(s.store, s.owner_id, subjects, name, instructor, schedule, min_attendance)
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo(f"Added {subject.name} [{subject.id}]")


@attendance_cmd.command("attend")
@click.argument("subject_id")
@click.pass_context
def attendance_attend(ctx, subject_id: str):
    """Record an attended class."""
    _update_counts(ctx, subject_id, wf.mark_attended)


@attendance_cmd.command("miss")
@click.argument("subject_id")
@click.pass_context
def attendance_miss(ctx, subject_id: str):
    """Record a missed class."""
    _update_counts(ctx, subject_id, wf.mark_missed)


@attendance_cmd.command("set")
@click.argument("subject_id")
@click.argument("attended", type=int)
@click.argument("total", type=int)
@click.pass_context
def attendance_set(ctx, subject_id: str, attended: int, total: int):
    """Set attended and total classes directly."""
    _update_counts(ctx, subject_id, lambda store, subjects, sid: wf.set_attendance(store, subjects, sid, attended, total))


def _update_counts(ctx, subject_id: str, action) -> None:
    s = _session(ctx)
    try:
        subjects = action(s.store, wf.load_subjects(s.store, s.owner_id), subject_id)
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    subject = next(x for x in subjects if x.id == subject_id)
    click.echo(f"{subject.name}: {subject.attended}/{subject.total} ({attendance.ratio(subject)}%)")


@attendance_cmd.command("edit")
@click.argument("subject_id")
@click.option("--name", default=None)
@click.option("--instructor", default=None)
@click.option("--schedule", default=None)
@click.option("--min", "min_attendance", type=int, default=None)
@click.pass_context
def attendance_edit(ctx, subject_id: str, name, instructor, schedule, min_attendance):
    """Edit a subject's details."""
    s = _session(ctx)
    try:
        subjects = wf.load_subjects(s.store, s.owner_id)
        wf.update_subject(s.store, subjects, subject_id, name, instructor, schedule, min_attendance)
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Subject updated.")


@attendance_cmd.command("delete")
@click.argument("subject_id")
@click.confirmation_option(prompt="Delete this subject? All attendance data will be lost.")
@click.pass_context
def attendance_delete(ctx, subject_id: str):
    """Delete a subject and its attendance history."""
    s = _session(ctx)
    try:
        wf.remove_subject(s.store, wf.load_subjects(s.store, s.owner_id), subject_id)
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Subject deleted.")


# ============== Tasks ==============


@main.group(invoke_without_command=True)
@click.pass_context
def tasks(ctx):
    """Manage the task list."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(tasks_list)


@tasks.command("list")
@click.option("--status", type=click.Choice(tsk.STATUSES), default="all")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tasks_list(ctx, status: str = "all", as_json: bool = False):
    """List tasks, pending first."""
    s = _session(ctx)
    try:
        shown = tsk.filter_by_status(wf.load_tasks(s.store, s.owner_id), status)
    except CollaboratorError as e:
        _fail(e)
    today = date.today()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": t.id,
                        "title": t.title,
                        "subject": t.subject,
                        "due_date": t.due_date.isoformat() if t.due_date else None,
                        "reminder_time": t.reminder_time,
                        "completed": t.completed,
                        "overdue": tsk.is_overdue(t, today),
                    }
                    for t in shown
                ],
                indent=2,
            )
        )
        return

    if not shown:
        click.echo("No tasks.")
        return

    for t in shown:
        mark = "x" if t.completed else " "
        overdue = " OVERDUE" if tsk.is_overdue(t, today) else ""
        subject = f" ({t.subject})" if t.subject else ""
        click.echo(f"[{mark}] {t.title}{subject} - {tsk.format_relative_due_label(t, today)}{overdue}  [{t.id}]")


@tasks.command("add")
@click.argument("title")
@click.option("--subject", default="")
@click.option("--due", default=None, help="Due date (YYYY-MM-DD)")
@click.option("--reminder", default=None, help="Reminder time (HH:MM)")
@click.pass_context
def tasks_add(ctx, title: str, subject: str, due: str | None, reminder: str | None):
    """Add a task."""
    s = _session(ctx)
    try:
        current = wf.load_tasks(s.store, s.owner_id)
        task, _ = wf.add_task(s.store, s.owner_id, current, title, subject, _parse_date(due), reminder)
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo(f"Added task {task.title} [{task.id}]")


@tasks.command("toggle")
@click.argument("task_id")
@click.pass_context
def tasks_toggle(ctx, task_id: str):
    """Mark a task completed, or pending again."""
    s = _session(ctx)
    try:
        updated = wf.toggle_task(s.store, wf.load_tasks(s.store, s.owner_id), task_id, datetime.now())
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    task = next(t for t in updated if t.id == task_id)
    click.echo(f"{task.title}: {'completed' if task.completed else 'pending'}")


@tasks.command("edit")
@click.argument("task_id")
@click.option("--title", default=None)
@click.option("--subject", default=None)
@click.option("--due", default=None, help="Due date (YYYY-MM-DD), or 'none' to clear")
@click.option("--reminder", default=None)
@click.pass_context
def tasks_edit(ctx, task_id: str, title, subject, due, reminder):
    """Edit a task."""
    s = _session(ctx)
    try:
        current = wf.load_tasks(s.store, s.owner_id)
        task = next((t for t in current if t.id == task_id), None)
        if task is None:
            raise ValidationError("id", f"No task with id {task_id}")
        due_date = task.due_date if due is None else (None if due == "none" else _parse_date(due))
        wf.update_task(
            s.store,
            current,
            task_id,
            task.title if title is None else title,
            task.subject if subject is None else subject,
            due_date,
            task.reminder_time if reminder is None else reminder,
        )
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Task updated.")


@tasks.command("delete")
@click.argument("task_id")
@click.confirmation_option(prompt="Delete this task?")
@click.pass_context
def tasks_delete(ctx, task_id: str):
    """Delete a task."""
    s = _session(ctx)
    try:
        wf.remove_task(s.store, wf.load_tasks(s.store, s.owner_id), task_id)
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Task deleted.")


# ============== Expenses ==============


@main.group(invoke_without_command=True)
@click.pass_context
def expenses(ctx):
    """Track expenses."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(expenses_list)


@expenses.command("list")
@click.option("--window", type=click.Choice(exp.WINDOWS), default="all")
@click.option("--category", default=exp.ALL)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def expenses_list(ctx, window: str = "all", category: str = exp.ALL, as_json: bool = False):
    """List expenses with totals per category."""
    s = _session(ctx)
    try:
        summary = exp.summarize(wf.load_expenses(s.store, s.owner_id), window, category, date.today())
    except CollaboratorError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "window": summary.window,
                    "category": summary.category,
                    "total": str(summary.total),
                    "category_totals": {k: str(v) for k, v in summary.category_totals.items()},
                    "categories": summary.categories,
                    "expenses": [
                        {
                            "id": e.id,
                            "description": e.description,
                            "amount": str(e.amount),
                            "category": e.category,
                            "date": e.date.isoformat(),
                        }
                        for e in summary.expenses
                    ],
                },
                indent=2,
            )
        )
        return

    if not summary.expenses:
        click.echo("No expenses.")
        return

    for e in summary.expenses:
        click.echo(f"  {e.date.isoformat()}  {e.amount:>10}  {e.category:<14} {e.description}  [{e.id}]")
    click.echo()
    click.echo(f"Total: {summary.total}")
    for name, amount in summary.category_totals.items():
        click.echo(f"  {name}: {amount}")


@expenses.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--category", default=exp.DEFAULT_CATEGORY)
@click.option("--date", "on", default=None, help="Date (YYYY-MM-DD), defaults to today")
@click.pass_context
def expenses_add(ctx, description: str, amount: str, category: str, on: str | None):
    """Add an expense."""
    s = _session(ctx)
    today = date.today()
    if category not in s.config.expense_categories:
        click.echo(f"Note: {category!r} is not one of {', '.join(s.config.expense_categories)}")
    try:
        current = wf.load_expenses(s.store, s.owner_id)
        expense, _ = wf.add_expense(
            s.store, s.owner_id, current, description, amount, category, _parse_date(on) or today, today
        )
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo(f"Added expense {expense.amount} ({expense.category}) [{expense.id}]")


@expenses.command("edit")
@click.argument("expense_id")
@click.option("--description", default=None)
@click.option("--amount", default=None)
@click.option("--category", default=None)
@click.option("--date", "on", default=None)
@click.pass_context
def expenses_edit(ctx, expense_id: str, description, amount, category, on):
    """Edit an expense."""
    s = _session(ctx)
    try:
        current = wf.load_expenses(s.store, s.owner_id)
        expense = next((e for e in current if e.id == expense_id), None)
        if expense is None:
            raise ValidationError("id", f"No expense with id {expense_id}")
        wf.update_expense(
            s.store,
            current,
            expense_id,
            expense.description if description is None else description,
            expense.amount if amount is None else amount,
            expense.category if category is None else category,
            _parse_date(on) or expense.date,
            date.today(),
        )
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Expense updated.")


@expenses.command("delete")
@click.argument("expense_id")
@click.confirmation_option(prompt="Delete this expense?")
@click.pass_context
def expenses_delete(ctx, expense_id: str):
    """Delete an expense."""
    s = _session(ctx)
    try:
        wf.remove_expense(s.store, wf.load_expenses(s.store, s.owner_id), expense_id)
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Expense deleted.")


# ============== Notes ==============


@main.group(invoke_without_command=True)
@click.pass_context
def notes(ctx):
    """Manage study notes."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(notes_list)


@notes.command("list")
@click.option("--search", "term", default="", help="Filter by title, subject or content")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def notes_list(ctx, term: str = "", as_json: bool = False):
    """List notes, newest first."""
    s = _session(ctx)
    try:
        shown = nts.search(wf.load_notes(s.store, s.owner_id), term)
    except CollaboratorError as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": n.id,
                        "title": n.title,
                        "subject": n.subject,
                        "content": n.content,
                        "file_url": n.file_url or None,
                        "created_at": n.created_at.isoformat() if n.created_at else None,
                    }
                    for n in shown
                ],
                indent=2,
            )
        )
        return

    if not shown:
        click.echo("No notes match your search." if term else "No notes yet.")
        return

    for n in shown:
        attached = f"\n    attachment: {n.file_url}" if n.file_url else ""
        click.echo(f"### {n.title} ({n.subject})  [{n.id}]\n    {n.content}{attached}")


@notes.command("add")
@click.argument("title")
@click.option("--subject", required=True)
@click.option("--content", required=True)
@click.option("--attach", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None)
@click.pass_context
def notes_add(ctx, title: str, subject: str, content: str, attach: Path | None):
    """Add a note, optionally with a file attachment."""
    s = _session(ctx)
    attachment = wf.Attachment(attach.name, attach.read_bytes()) if attach else None
    try:
        current = wf.load_notes(s.store, s.owner_id)
        note, _ = wf.add_note(
            s.store, s.files, s.owner_id, current, title, subject, content, datetime.now(), attachment
        )
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo(f"Added note {note.title} [{note.id}]")


@notes.command("edit")
@click.argument("note_id")
@click.option("--title", default=None)
@click.option("--subject", default=None)
@click.option("--content", default=None)
@click.option("--attach", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None)
@click.pass_context
def notes_edit(ctx, note_id: str, title, subject, content, attach: Path | None):
    """Edit a note. A new attachment replaces the old one."""
    s = _session(ctx)
    attachment = wf.Attachment(attach.name, attach.read_bytes()) if attach else None
    try:
        current = wf.load_notes(s.store, s.owner_id)
        note = next((n for n in current if n.id == note_id), None)
        if note is None:
            raise ValidationError("id", f"No note with id {note_id}")
        wf.update_note(
            s.store,
            s.files,
            current,
            note_id,
            note.title if title is None else title,
            note.subject if subject is None else subject,
            note.content if content is None else content,
            datetime.now(),
            attachment,
        )
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Note updated.")


@notes.command("delete")
@click.argument("note_id")
@click.confirmation_option(prompt="Delete this note?")
@click.pass_context
def notes_delete(ctx, note_id: str):
    """Delete a note and its attachment."""
    s = _session(ctx)
    try:
        wf.remove_note(s.store, s.files, wf.load_notes(s.store, s.owner_id), note_id)
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Note deleted.")


# ============== Quotes ==============


@main.group(invoke_without_command=True)
@click.pass_context
def quote(ctx):
    """Quote of the day and favorites."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(quote_today)


@quote.command("today")
@click.option("--save", is_flag=True, help="Save the quote to favorites")
@click.pass_context
def quote_today(ctx, save: bool = False):
    """Show a motivational quote."""
    s = _session(ctx)
    outcome = wf.quote_of_the_day(s.quotes, tags=tuple(s.config.quote_tags))
    click.echo(qts.share_text(outcome.quote))
    if save:
        _save_quote(s, outcome.quote)


@quote.command("save")
@click.argument("text")
@click.argument("author")
@click.pass_context
def quote_save(ctx, text: str, author: str):
    """Save a quote to favorites."""
    _save_quote(_session(ctx), Quote(text, author))


def _save_quote(s: Session, q: Quote) -> None:
    try:
        favorites = wf.load_favorites(s.store, s.owner_id)
        wf.save_favorite(s.store, s.owner_id, favorites, q, datetime.now())
    except DuplicateFavoriteError:
        click.echo("This quote is already in your favorites!")
        return
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Quote added to favorites!")


@quote.command("favorites")
@click.pass_context
def quote_favorites(ctx):
    """List favorite quotes."""
    s = _session(ctx)
    try:
        favorites = wf.load_favorites(s.store, s.owner_id)
    except CollaboratorError as e:
        _fail(e)

    if not favorites:
        click.echo("You haven't saved any favorite quotes yet.")
        return
    for f in favorites:
        click.echo(f"{qts.share_text(f.quote)}  [{f.id}]")


@quote.command("remove")
@click.argument("favorite_id")
@click.pass_context
def quote_remove(ctx, favorite_id: str):
    """Remove a favorite quote."""
    s = _session(ctx)
    try:
        wf.unsave_favorite(s.store, wf.load_favorites(s.store, s.owner_id), favorite_id)
    except (ValidationError, CollaboratorError) as e:
        _fail(e)
    click.echo("Quote removed from favorites.")


if __name__ == "__main__":
    main()
