"""Console interface for the expense tracker."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from expense_core.analytics import total_amount
from expense_core.config import load_settings
from expense_core.exceptions import StorageError, ValidationError
from expense_core.logging_setup import configure_logging
from expense_core.models import Category, Expense
from expense_core.services import DashboardView, ExpenseTracker
from expense_core.storage import JSONStorage
from expense_core.validators import THEME_MODES, parse_year_month


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if not amount.is_finite() or amount < 0:
        raise argparse.ArgumentTypeError("Amount must be a non-negative number")
    return value


def _parse_limit(value: str) -> int:
    try:
        limit = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Limit must be an integer") from exc
    if limit < 0:
        raise argparse.ArgumentTypeError("Limit cannot be negative")
    return limit


def _parse_month(value: str) -> date:
    try:
        year, month = parse_year_month(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return date(year, month, 1)


def _load_tracker(data_dir: Path) -> ExpenseTracker:
    return ExpenseTracker.from_storage(JSONStorage(data_dir))


def _format_expense(expense: Expense) -> str:
    return (
        f"[{expense.id}] {expense.date} {expense.category} ${expense.amount:.2f}\n"
        f"  Notes: {expense.notes or '-'}\n"
    )


def _format_dashboard(view: DashboardView) -> str:
    lines = [
        f"Total expenses: ${view.total:.2f} ({view.count} transactions)",
        f"This month:     ${view.month_total:.2f} ({view.month_count} transactions)",
    ]
    if view.category_breakdown:
        lines.append("Categories:")
        for share in view.category_breakdown:
            lines.append(
                f"  {share.category:<10} ${share.total:>10.2f}  {share.percentage:>5.1f}%  {share.color}"
            )
    else:
        lines.append("No expenses recorded yet.")
    if view.recent:
        lines.append("Recent:")
        for expense in view.recent:
            lines.append(f"  {expense.date} {expense.category:<10} ${expense.amount:.2f}")
    return "\n".join(lines)


def handle_expense(args: argparse.Namespace, tracker: ExpenseTracker) -> None:
    if args.command == "add":
        payload = {
            "amount": args.amount,
            "category": args.category,
            "date": args.date,
            "notes": args.notes,
        }
        expense = tracker.add_expense(payload)
        print("Expense added:\n" + _format_expense(expense))
    elif args.command == "list":
        expenses = tracker.all_expenses_sorted()
        if not expenses:
            print("No expenses found.")
            return
        shown = expenses if args.limit is None else expenses[: args.limit]
        total = total_amount(expenses)
        print(f"Found {len(expenses)} expenses (total {total:.2f}):")
        for expense in shown:
            print(_format_expense(expense))


def handle_dashboard(args: argparse.Namespace, tracker: ExpenseTracker) -> None:
    view = tracker.dashboard(reference=args.month, mode=args.theme)
    print(_format_dashboard(view))


def handle_theme(args: argparse.Namespace, tracker: ExpenseTracker) -> None:
    if args.command == "show":
        print(f"Theme: {tracker.theme.resolve()}")
    elif args.command == "set":
        print(f"Theme set to {tracker.theme.set(args.mode)}")
    elif args.command == "toggle":
        print(f"Theme set to {tracker.theme.toggle()}")


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default=settings.data_dir,
        type=Path,
        help="Directory to store JSON data (default: $EXPENSE_TRACKER_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (default: $EXPENSE_TRACKER_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="entity", required=True)

    expense_parser = subparsers.add_parser("expense", help="Record and list expenses")
    expense_sub = expense_parser.add_subparsers(dest="command", required=True)

    expense_add = expense_sub.add_parser("add", help="Add a new expense")
    expense_add.add_argument("amount", type=_parse_amount)
    expense_add.add_argument("category", choices=Category.names())
    expense_add.add_argument("--date", help="Calendar date, YYYY-MM-DD (default: today)")
    expense_add.add_argument("--notes", default="")

    expense_list = expense_sub.add_parser("list", help="List expenses, newest first")
    expense_list.add_argument("--limit", type=_parse_limit)

    dashboard_parser = subparsers.add_parser("dashboard", help="Show totals and category breakdown")
    dashboard_parser.add_argument("--month", type=_parse_month, help="Month to total, YYYY-MM (default: current)")
    dashboard_parser.add_argument("--theme", choices=sorted(THEME_MODES))

    theme_parser = subparsers.add_parser("theme", help="Show or change the theme preference")
    theme_sub = theme_parser.add_subparsers(dest="command", required=True)
    theme_sub.add_parser("show", help="Show the current theme")
    theme_set = theme_sub.add_parser("set", help="Save a theme")
    theme_set.add_argument("mode", choices=sorted(THEME_MODES))
    theme_sub.add_parser("toggle", help="Switch between dark and light")

    subparsers.add_parser("reset", help="Remove every recorded expense")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        tracker = _load_tracker(args.data_dir)
        if args.entity == "expense":
            handle_expense(args, tracker)
        elif args.entity == "dashboard":
            handle_dashboard(args, tracker)
        elif args.entity == "theme":
            handle_theme(args, tracker)
        elif args.entity == "reset":
            tracker.expenses.clear()
            print("All expenses removed.")
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except StorageError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
