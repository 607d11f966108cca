"""Pure expense aggregation logic - no I/O dependencies."""

from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from .records import Expense, parse_amount, validate_expense

EXPENSE_CATEGORIES = ["Food", "Transport", "Books", "Entertainment", "Utilities", "Others"]
DEFAULT_CATEGORY = "Food"
ALL = "all"
WINDOWS = ("all", "week", "month")

CENTS = Decimal("0.01")


@dataclass
class ExpenseSummary:
    """Filtered expenses with their derived totals, ready for display."""

    window: str
    category: str
    expenses: list[Expense]
    total: Decimal
    category_totals: dict[str, Decimal]
    categories: list[str]


def window_start(window: str, reference_date: date) -> date | None:
    """
    First day included by a time window, or None for all-time.

    Weeks start on Sunday.
    """
    match window:
        case "all":
            return None
        case "week":
            # date.weekday(): Monday=0 ... Sunday=6
            return reference_date - timedelta(days=(reference_date.weekday() + 1) % 7)
        case "month":
            return reference_date.replace(day=1)
    raise ValueError(f"Unknown expense window: {window!r}")


def window_end(window: str, reference_date: date) -> date | None:
    """First day after a time window's calendar period, or None for all-time."""
    start = window_start(window, reference_date)
    if start is None:
        return None
    if window == "week":
        return start + timedelta(days=7)
    if start.month == 12:
        return date(start.year + 1, 1, 1)
    return date(start.year, start.month + 1, 1)


def filter_by_window(expenses: list[Expense], window: str, reference_date: date) -> list[Expense]:
    """Expenses dated within the current week (from Sunday) or month of the reference date."""
    start = window_start(window, reference_date)
    if start is None:
        return list(expenses)
    end = window_end(window, reference_date)
    return [e for e in expenses if start <= e.date < end]


def filter_by_category(expenses: list[Expense], category: str) -> list[Expense]:
    if category == ALL:
        return list(expenses)
    return [e for e in expenses if e.category == category]


def total(expenses: list[Expense]) -> Decimal:
    """Sum of amounts, accumulated exactly and rounded to cents."""
    return sum((e.amount for e in expenses), Decimal("0")).quantize(CENTS, rounding=ROUND_HALF_UP)


def category_totals(expenses: list[Expense]) -> dict[str, Decimal]:
    """Per-category sums; keys are only the categories present, in first-seen order."""
    totals: dict[str, Decimal] = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, Decimal("0")) + e.amount
    return totals


def distinct_categories(expenses: list[Expense]) -> list[str]:
    """'all' followed by each category in first-seen order."""
    categories = [ALL]
    for e in expenses:
        if e.category not in categories:
            categories.append(e.category)
    return categories


def sort_newest_first(expenses: list[Expense]) -> list[Expense]:
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def summarize(
    expenses: list[Expense],
    window: str = ALL,
    category: str = ALL,
    reference_date: date | None = None,
) -> ExpenseSummary:
    """
    Apply the window filter, then the category filter, then aggregate.

    Category totals therefore reflect the currently filtered set; the
    category choices are taken from the full history.
    """
    reference_date = reference_date or date.today()
    filtered = filter_by_category(filter_by_window(expenses, window, reference_date), category)
    return ExpenseSummary(
        window=window,
        category=category,
        expenses=filtered,
        total=total(filtered),
        category_totals=category_totals(filtered),
        categories=distinct_categories(expenses),
    )


def new_expense(
    id: str,
    description: str,
    amount,
    category: str,
    expense_date: date,
    owner_id: str,
    today: date,
) -> Expense:
    """Build a validated expense. ``amount`` may be a str, int or Decimal."""
    expense = Expense(
        id=id,
        description=description.strip(),
        amount=parse_amount(amount),
        category=category.strip(),
        date=expense_date,
        owner_id=owner_id,
    )
    validate_expense(expense, today)
    return expense


def edit_expense(
    expense: Expense,
    description: str,
    amount,
    category: str,
    expense_date: date,
    today: date,
) -> Expense:
    updated = replace(
        expense,
        description=description.strip(),
        amount=parse_amount(amount),
        category=category.strip(),
        date=expense_date,
    )
    validate_expense(updated, today)
    return updated
