"""Data models for BudgetBuddy resources."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from budgetbuddy.errors import ParseError


class TransactionKind(str, Enum):
    """Canonical transaction classification."""

    INCOME = "income"
    EXPENSE = "expense"
    SAVINGS = "savings"
    BILL = "bill"


class CategoryKind(str, Enum):
    """Whether a category collects income or expenses."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class AccountCategory(str, Enum):
    """Kind of money holder an account represents."""

    CASH = "Cash"
    BANK = "Bank"
    CARD = "Card"
    OTHER = "Other"


class Priority(str, Enum):
    """Urgency of an insight or nudge. Lower rank sorts first."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


def normalize_kind(value: Any) -> TransactionKind:
    """Map any spelling of a transaction kind onto TransactionKind.

    The backend has sent "income", "INCOME" and "Income" at various times;
    this is the only place those spellings are reconciled.

    Raises:
        ParseError: If the value is not a known kind
    """
    if isinstance(value, TransactionKind):
        return value
    if isinstance(value, str):
        try:
            return TransactionKind(value.strip().lower())
        except ValueError:
            pass
    raise ParseError(f"Unknown transaction kind: {value!r}")


def normalize_category_kind(value: Any) -> CategoryKind:
    """Map any spelling of a category kind onto CategoryKind."""
    if isinstance(value, CategoryKind):
        return value
    if isinstance(value, str):
        try:
            return CategoryKind(value.strip().upper())
        except ValueError:
            pass
    raise ParseError(f"Unknown category kind: {value!r}")


def normalize_account_category(value: Any) -> AccountCategory:
    """Map an account type string onto AccountCategory, defaulting to OTHER."""
    if isinstance(value, AccountCategory):
        return value
    if isinstance(value, str):
        for member in AccountCategory:
            if member.value.lower() == value.strip().lower():
                return member
    return AccountCategory.OTHER


def normalize_priority(value: Any, default: Priority = Priority.LOW) -> Priority:
    """Map a priority/urgency string onto Priority."""
    if isinstance(value, Priority):
        return value
    if isinstance(value, str):
        try:
            return Priority(value.strip().lower())
        except ValueError:
            pass
    return default


@dataclass(frozen=True)
class User:
    """Authenticated user profile."""

    id: str
    name: str
    email: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class AuthResponse:
    """Token and profile returned by login and register."""

    token: str
    user: User


@dataclass(frozen=True)
class Transaction:
    """A single income, expense, savings or bill movement."""

    id: str
    date: date
    amount: Decimal
    kind: TransactionKind
    category_id: str | None = None
    category: str | None = None
    account_id: str | None = None
    account: str | None = None
    note: str | None = None

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionKind.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind is TransactionKind.EXPENSE

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by kind (expenses negative)."""
        if self.kind is TransactionKind.INCOME:
            return self.amount
        if self.kind is TransactionKind.EXPENSE:
            return -self.amount
        return Decimal("0")


@dataclass(frozen=True)
class Account:
    """A money holder with a backend-computed balance."""

    id: str
    name: str
    category: AccountCategory
    balance: Decimal


@dataclass(frozen=True)
class Budget:
    """A spending limit for one category over a date range."""

    id: str
    category: str
    limit: Decimal
    spent: Decimal
    start_date: date
    end_date: date

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.limit

    @property
    def remaining(self) -> Decimal:
        """Amount left before the limit, never negative."""
        return max(Decimal("0"), self.limit - self.spent)


@dataclass(frozen=True)
class Goal:
    """A savings target."""

    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: date | None = None
    monthly_contribution: Decimal = Decimal("0")


@dataclass(frozen=True)
class Category:
    """A transaction category. Categories without a user are global."""

    id: str
    name: str
    kind: CategoryKind
    user_id: str | None = None

    @property
    def is_global(self) -> bool:
        return self.user_id is None


@dataclass(frozen=True)
class Bill:
    """A bill reminder."""

    id: str
    title: str
    due_date: date
    amount: Decimal
    is_paid: bool = False
    category: str | None = None
    send_email: bool | None = None  # legacy reminders only


@dataclass(frozen=True)
class Insight:
    """An ML-generated insight shown in list widgets."""

    title: str
    description: str
    priority: Priority
    id: str | None = None
    kind: str | None = None  # warning, suggestion, achievement
    category: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Nudge:
    """A behavioural nudge ranked by urgency."""

    message: str
    urgency: Priority
    kind: str | None = None  # positive, warning, reminder
    action: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def priority(self) -> Priority:
        return self.urgency


@dataclass(frozen=True)
class MonthlySummary:
    """Income, expenses and balance shown on the dashboard header."""

    income: Decimal
    expenses: Decimal
    balance: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses
