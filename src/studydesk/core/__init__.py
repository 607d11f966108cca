"""Functional core - pure business logic with no I/O."""

from .errors import CollaboratorError, DuplicateFavoriteError, ValidationError
from .records import Expense, FavoriteQuote, Note, Quote, Subject, Task
from .attendance import ratio, is_below_threshold, record_attend, record_miss, set_counts, overall_ratio
from .tasks import insert, reorder_after_mutation, is_overdue, format_relative_due_label
from .expenses import ExpenseSummary, filter_by_window, filter_by_category, category_totals, summarize
from .notes import search
from .quotes import QuoteOutcome, QuoteSelector, QuoteState, is_duplicate_favorite, select_quote

__all__ = [
    # Errors
    "ValidationError",
    "DuplicateFavoriteError",
    "CollaboratorError",
    # Records
    "Subject",
    "Task",
    "Expense",
    "Note",
    "Quote",
    "FavoriteQuote",
    # Attendance
    "ratio",
    "is_below_threshold",
    "record_attend",
    "record_miss",
    "set_counts",
    "overall_ratio",
    # Tasks
    "insert",
    "reorder_after_mutation",
    "is_overdue",
    "format_relative_due_label",
    # Expenses
    "ExpenseSummary",
    "filter_by_window",
    "filter_by_category",
    "category_totals",
    "summarize",
    # Notes
    "search",
    # Quotes
    "QuoteOutcome",
    "QuoteSelector",
    "QuoteState",
    "is_duplicate_favorite",
    "select_quote",
]
