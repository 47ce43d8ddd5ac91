"""Dashboard aggregates derived from fetched resource lists.

Everything here is a pure function of its arguments: the same snapshot
always yields the same result, and nothing is cached or mutated.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Generic, TypeVar

from budgetbuddy.models import (
    Account,
    Category,
    MonthlySummary,
    Priority,
    Transaction,
    TransactionKind,
    normalize_priority,
)
from budgetbuddy.utils import to_decimal

T = TypeVar("T")

UNCATEGORIZED = "Uncategorized"
TOP_CATEGORIES = 5
INSIGHT_DISPLAY_LIMIT = 3
NUDGE_DISPLAY_LIMIT = 5
APPROACHING_LIMIT_PERCENT = Decimal("90")
MAX_PERCENT = Decimal("100")

Number = Decimal | int | float | str


class BudgetStatus(str, Enum):
    NO_LIMIT = "no_limit"
    OK = "ok"
    APPROACHING = "approaching"
    EXCEEDED = "exceeded"


@dataclass(frozen=True)
class DisplayList(Generic[T]):
    """The visible head of a list plus what is left behind the 'more' link."""

    items: list[T]
    total: int

    @property
    def has_more(self) -> bool:
        return self.total > len(self.items)

    @property
    def hidden_count(self) -> int:
        return self.total - len(self.items)


def _round_percent(value: Decimal) -> int:
    # Half-up, as the web client rounded
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _sum_kind(transactions: Iterable[Transaction], kind: TransactionKind) -> Decimal:
    return sum((tx.amount for tx in transactions if tx.kind is kind), Decimal("0"))


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of income amounts. Savings and bill movements are not income."""
    return _sum_kind(transactions, TransactionKind.INCOME)


def total_expenses(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of expense amounts."""
    return _sum_kind(transactions, TransactionKind.EXPENSE)


def total_balance(accounts: Iterable[Account]) -> Decimal:
    """Sum of account balances."""
    return sum((account.balance for account in accounts), Decimal("0"))


def monthly_summary(
    transactions: Sequence[Transaction],
    accounts: Iterable[Account],
) -> MonthlySummary:
    """Income, expenses and balance from live data."""
    return MonthlySummary(
        income=total_income(transactions),
        expenses=total_expenses(transactions),
        balance=total_balance(accounts),
    )


def category_lookup(categories: Iterable[Category]) -> dict[str, str]:
    """Map category id to name."""
    return {category.id: category.name for category in categories}


def resolve_category_name(tx: Transaction, lookup: dict[str, str]) -> str:
    """Name a transaction's category.

    Tries the id against the lookup first, then the name joined onto the
    transaction, then gives up with "Uncategorized".
    """
    if tx.category_id is not None and tx.category_id in lookup:
        return lookup[tx.category_id]
    if tx.category:
        return tx.category
    return UNCATEGORIZED


def expense_breakdown(
    transactions: Iterable[Transaction],
    categories: Iterable[Category] = (),
    top_n: int = TOP_CATEGORIES,
) -> list[tuple[str, Decimal]]:
    """Expense totals per category, largest first.

    Ties keep the order in which categories were first seen.

    Args:
        transactions: Transactions of any kind; only expenses count
        categories: Categories used to resolve category ids
        top_n: Maximum number of groups returned

    Returns:
        (category name, total) pairs
    """
    lookup = category_lookup(categories)
    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if tx.kind is not TransactionKind.EXPENSE:
            continue
        name = resolve_category_name(tx, lookup)
        totals[name] = totals.get(name, Decimal("0")) + tx.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[: max(top_n, 0)]


def budget_usage_ratio(spent: Number, limit: Number) -> Decimal:
    """Spent as a percentage of the limit, not clamped. 0 without a limit."""
    limit_value = to_decimal(limit)
    if limit_value <= 0:
        return Decimal("0")
    return to_decimal(spent) / limit_value * 100


def budget_percent_used(spent: Number, limit: Number) -> int:
    """Rounded percentage used, clamped to [0, 100] for bar widths."""
    ratio = budget_usage_ratio(spent, limit)
    return _round_percent(min(MAX_PERCENT, max(Decimal("0"), ratio)))


def budget_status(spent: Number, limit: Number) -> BudgetStatus:
    """Classify a budget for the exceeded / approaching-limit banners."""
    if to_decimal(limit) <= 0:
        return BudgetStatus.NO_LIMIT
    ratio = budget_usage_ratio(spent, limit)
    if ratio > MAX_PERCENT:
        return BudgetStatus.EXCEEDED
    if ratio >= APPROACHING_LIMIT_PERCENT:
        return BudgetStatus.APPROACHING
    return BudgetStatus.OK


def goal_progress_ratio(current: Number, target: Number) -> Decimal:
    """current / target, not clamped. 0 without a target."""
    target_value = to_decimal(target)
    if target_value <= 0:
        return Decimal("0")
    return to_decimal(current) / target_value


def goal_progress_percent(current: Number, target: Number) -> int:
    """Rounded progress percentage; may exceed 100 once a goal is passed."""
    return _round_percent(goal_progress_ratio(current, target) * 100)


def progress_bar_width(percent: Number) -> int:
    """Clamp a percentage to [0, 100] for rendering."""
    value = to_decimal(percent)
    return _round_percent(min(MAX_PERCENT, max(Decimal("0"), value)))


def sort_by_priority(
    items: Iterable[T],
    key: Callable[[T], Any] = lambda item: item.priority,  # type: ignore[attr-defined]
) -> list[T]:
    """Order items high, medium, low. Equal priorities keep their order.

    Unknown priority values sort with low.
    """
    return sorted(items, key=lambda item: normalize_priority(key(item), Priority.LOW).rank)


def truncate_for_display(items: Sequence[T], limit: int) -> DisplayList[T]:
    return DisplayList(items=list(items[: max(limit, 0)]), total=len(items))
