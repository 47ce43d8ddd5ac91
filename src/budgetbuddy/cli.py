#!/usr/bin/env python3
"""Command-line interface for budgetbuddy."""

import argparse
import getpass
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

from budgetbuddy import aggregation
from budgetbuddy.app import BudgetBuddy
from budgetbuddy.config import (
    config_exists,
    create_default_config,
    find_config_file,
    get_config_path,
    load_config,
    load_settings,
    save_json_config,
)
from budgetbuddy.dashboard import insight_widget, load_dashboard
from budgetbuddy.errors import BudgetBuddyError, UnauthenticatedError
from budgetbuddy.notifications import Level, Notification, Notifier


class ConsoleNotifier(Notifier):
    """Print notifications to stderr as they happen."""

    def _emit(self, notification: Notification) -> None:
        super()._emit(notification)
        prefix = "Error" if notification.level is Level.ERROR else "OK"
        print(f"{prefix}: {notification.message}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="budgetbuddy",
        description="Personal finance tracking against the BudgetBuddy backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  budgetbuddy login me@example.com
  budgetbuddy summary
  budgetbuddy bills --upcoming 14
  budgetbuddy add-transaction --type expense --amount 12.50 \\
      --category-id 3 --account-id 1
  budgetbuddy --base-url http://localhost:5000/api init-config
  budgetbuddy show-config
        """,
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.json file",
    )
    parser.add_argument(
        "--base-url",
        help="Backend API base URL (overrides config and environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    login = commands.add_parser("login", help="Sign in and store the session")
    login.add_argument("email")

    register = commands.add_parser("register", help="Create an account and sign in")
    register.add_argument("name")
    register.add_argument("email")

    commands.add_parser("logout", help="Forget the stored session")
    commands.add_parser("whoami", help="Show the signed-in user")
    commands.add_parser("summary", help="Income, expenses, balance and budget status")
    commands.add_parser("budgets", help="List budgets and how much of each is used")
    commands.add_parser("goals", help="List savings goals and their progress")

    bills = commands.add_parser("bills", help="List bill reminders")
    bills.add_argument(
        "--upcoming",
        type=int,
        metavar="DAYS",
        help="Only bills due within DAYS days",
    )

    commands.add_parser("insights", help="Show the top ML insights")

    add_tx = commands.add_parser("add-transaction", help="Record a transaction")
    add_tx.add_argument(
        "--type",
        required=True,
        choices=["income", "expense", "savings", "bill"],
        help="Transaction type",
    )
    add_tx.add_argument("--amount", required=True, help="Amount (positive)")
    add_tx.add_argument(
        "--date",
        default=None,
        help="Date as YYYY-MM-DD (default: today)",
    )
    add_tx.add_argument("--category-id", help="Category id")
    add_tx.add_argument("--account-id", help="Account id")
    add_tx.add_argument("--note", help="Free-text note")

    commands.add_parser("init-config", help="Write a default config file")
    commands.add_parser("show-config", help="Show current configuration")
    return parser


def show_config(config_path: Path | None, base_url: str | None) -> None:
    """Display the resolved configuration."""
    config = load_config(config_path)
    settings = load_settings(config_path, base_url)

    print("\n" + "=" * 50)
    print("CURRENT CONFIGURATION")
    print("=" * 50)
    if config is None:
        print(f"\nNo config file found (defaults in use; expected at {get_config_path()})")
    print(f"\nAPI base URL: {settings.api_base_url}")
    print(f"API timeout:  {settings.api_timeout:g}s")
    print(f"Session file: {settings.session_path}")


def init_config(base_url: str | None) -> int:
    """Write a default config file unless one already exists."""
    if config_exists():
        print(f"Config already exists: {find_config_file()}", file=sys.stderr)
        return 1

    config = create_default_config()
    if base_url:
        config["api"]["base_url"] = base_url.rstrip("/")
    saved_path = save_json_config(config, get_config_path())

    print("\n" + "=" * 50)
    print("SETUP COMPLETE")
    print("=" * 50)
    print(f"\nConfiguration saved to: {saved_path}")
    return 0


def print_summary(app: BudgetBuddy) -> int:
    data = load_dashboard(app)
    summary = data.summary

    print(f"Income:   {summary.income:>12,.2f}")
    print(f"Expenses: {summary.expenses:>12,.2f}")
    print(f"Balance:  {summary.balance:>12,.2f}")

    if data.expense_breakdown:
        print("\nTop expense categories:")
        for name, total in data.expense_breakdown:
            print(f"  {name:<24} {total:>12,.2f}")

    if data.budgets:
        print("\nBudgets:")
        for view in data.budgets:
            print(f"  {view.budget.category:<24} {view.percent_used:>3}%  {view.status.value}")

    for name, error in data.errors.items():
        print(f"Warning: could not load {name}: {error}", file=sys.stderr)
    return 1 if data.errors else 0


def print_budgets(app: BudgetBuddy) -> int:
    budgets = app.budgets()
    if not budgets:
        print("No budgets.")
        return 0
    for budget in budgets:
        percent = aggregation.budget_percent_used(budget.spent, budget.limit)
        status = aggregation.budget_status(budget.spent, budget.limit)
        print(
            f"{budget.category:<24} {budget.spent:>10,.2f} / {budget.limit:>10,.2f}"
            f"  {percent:>3}%  {status.value}"
        )
    return 0


def print_goals(app: BudgetBuddy) -> int:
    goals = app.goals()
    if not goals:
        print("No goals.")
        return 0
    for goal in goals:
        percent = aggregation.goal_progress_percent(goal.current_amount, goal.target_amount)
        due = f"  due {goal.target_date}" if goal.target_date else ""
        print(
            f"{goal.name:<24} {goal.current_amount:>10,.2f} / {goal.target_amount:>10,.2f}"
            f"  {percent:>3}%{due}"
        )
    return 0


def print_bills(app: BudgetBuddy, upcoming: int | None) -> int:
    bills = app.upcoming_bills(upcoming) if upcoming is not None else app.bills()
    if not bills:
        print("No bills.")
        return 0
    for bill in sorted(bills, key=lambda b: b.due_date):
        paid = "paid" if bill.is_paid else "due"
        print(f"{bill.due_date}  {bill.title:<24} {bill.amount:>10,.2f}  {paid}")
    return 0


def print_insights(app: BudgetBuddy) -> int:
    result = insight_widget(app)
    if result.is_error or result.data is None or not result.data.items:
        print("No insights yet. Add more transactions to get personalized insights.")
        return 0
    for insight in result.data.items:
        print(f"[{insight.priority.value}] {insight.title}")
        print(f"    {insight.description}")
    if result.data.has_more:
        print(f"... and {result.data.hidden_count} more")
    return 0


def add_transaction(app: BudgetBuddy, args: argparse.Namespace) -> int:
    data: dict[str, Any] = {
        "type": args.type,
        "amount": args.amount,
        "date": args.date or date.today().isoformat(),
        "category_id": args.category_id,
        "account_id": args.account_id,
    }
    if args.note:
        data["note"] = args.note
    tx = app.create_transaction(data)
    print(f"{tx.date}  {tx.kind.value:<8} {tx.amount:>10,.2f}  id={tx.id}")
    return 0


def run_command(app: BudgetBuddy, args: argparse.Namespace) -> int:
    if args.command == "login":
        password = getpass.getpass("Password: ")
        auth = app.login(args.email, password)
        print(f"Signed in as {auth.user.name} <{auth.user.email}>")
        return 0

    if args.command == "register":
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        auth = app.register(args.name, args.email, password, confirm)
        print(f"Welcome, {auth.user.name}!")
        return 0

    if args.command == "logout":
        app.logout()
        print("Signed out.")
        return 0

    if args.command == "whoami":
        user = app.session.user
        if user is None:
            print("Not signed in. Run 'budgetbuddy login EMAIL'.")
            return 1
        print(f"{user.name} <{user.email}> (id {user.id})")
        return 0

    if not app.session.is_authenticated:
        raise UnauthenticatedError("Not signed in. Run 'budgetbuddy login EMAIL' first.")

    if args.command == "summary":
        return print_summary(app)
    if args.command == "budgets":
        return print_budgets(app)
    if args.command == "goals":
        return print_goals(app)
    if args.command == "bills":
        return print_bills(app, args.upcoming)
    if args.command == "insights":
        return print_insights(app)
    if args.command == "add-transaction":
        return add_transaction(app, args)

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "show-config":
        show_config(args.config, args.base_url)
        return 0

    if args.command == "init-config":
        return init_config(args.base_url)

    app = BudgetBuddy.from_config(args.config, args.base_url, notifier=ConsoleNotifier())
    try:
        return run_command(app, args)
    except BudgetBuddyError as e:
        # Backend failures were already reported through the notifier
        if not app.notifier.history:
            print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
