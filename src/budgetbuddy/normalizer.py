"""Map backend payload variants onto the canonical models."""

from collections.abc import Callable
from datetime import date
from typing import Any, TypeVar

from budgetbuddy.errors import ParseError
from budgetbuddy.models import (
    Account,
    AuthResponse,
    Bill,
    Budget,
    Category,
    Goal,
    Insight,
    Nudge,
    Priority,
    Transaction,
    User,
    normalize_account_category,
    normalize_category_kind,
    normalize_kind,
    normalize_priority,
)
from budgetbuddy.utils import parse_amount, parse_date, to_decimal

T = TypeVar("T")


def _require_mapping(row: Any, resource: str) -> dict[str, Any]:
    if not isinstance(row, dict):
        raise ParseError(f"Expected {resource} object, got {type(row).__name__}")
    return row


def _first(row: dict[str, Any], *keys: str) -> Any:
    """Return the first present, non-None value among alias keys."""
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _require_id(row: dict[str, Any], resource: str) -> str:
    value = _first(row, "id", "_id")
    if value is None:
        raise ParseError(f"{resource} payload has no id")
    return str(value)


def _require_date(value: Any, resource: str, field_name: str) -> date:
    parsed = parse_date(value)
    if parsed is None:
        raise ParseError(f"{resource} has invalid {field_name}: {value!r}")
    return parsed


def normalize_list(
    payload: Any,
    item: Callable[[Any], T],
    resource: str,
) -> list[T]:
    """Normalize a collection payload.

    A null payload is an empty collection. Anything other than a list is
    rejected rather than guessed at.
    """
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ParseError(f"Expected {resource} list, got {type(payload).__name__}")
    return [item(row) for row in payload]


def normalize_transaction(row: Any) -> Transaction:
    """Normalize one transaction payload.

    The backend joins category and account names onto some responses and
    only sends ids on others; both are kept.
    """
    row = _require_mapping(row, "transaction")
    amount = parse_amount(row.get("amount"))
    if amount is None:
        raise ParseError(f"transaction has invalid amount: {row.get('amount')!r}")

    return Transaction(
        id=_require_id(row, "transaction"),
        date=_require_date(row.get("date"), "transaction", "date"),
        amount=abs(amount),
        kind=normalize_kind(_first(row, "type", "kind")),
        category_id=_optional_str(_first(row, "category_id", "categoryId")),
        category=_optional_str(row.get("category")),
        account_id=_optional_str(_first(row, "account_id", "accountId")),
        account=_optional_str(row.get("account")),
        note=_optional_str(row.get("note")),
    )


def normalize_account(row: Any) -> Account:
    """Normalize one account payload. Balances arrive as strings."""
    row = _require_mapping(row, "account")
    balance = parse_amount(row.get("balance"))
    if balance is None:
        raise ParseError(f"account has invalid balance: {row.get('balance')!r}")

    category = normalize_account_category(_first(row, "type", "account_type"))
    return Account(
        id=_require_id(row, "account"),
        name=_optional_str(row.get("name")) or category.value,
        category=category,
        balance=balance,
    )


def normalize_budget(row: Any, today: date | None = None) -> Budget:
    """Normalize one budget payload.

    Accepts the field aliases the budget endpoints have used
    (amount/limit, current/spent, start_date/startDate, end_date/endDate)
    and fills zero amounts and today's date where they are missing.
    """
    row = _require_mapping(row, "budget")
    today = today or date.today()

    budget_id = _first(row, "id", "_id", "budget_id", "budgetId")
    return Budget(
        id="" if budget_id is None else str(budget_id),
        category=_optional_str(row.get("category")) or "Overall",
        limit=to_decimal(_first(row, "limit", "amount")),
        spent=to_decimal(_first(row, "spent", "current")),
        start_date=parse_date(_first(row, "startDate", "start_date")) or today,
        end_date=parse_date(_first(row, "endDate", "end_date")) or today,
    )


def normalize_budgets(payload: Any, today: date | None = None) -> list[Budget]:
    """Normalize a budget payload that may be null, one object or a list."""
    if payload is None:
        return []
    if isinstance(payload, dict):
        return [normalize_budget(payload, today)]
    if isinstance(payload, list):
        return [normalize_budget(row, today) for row in payload]
    raise ParseError(f"Expected budget object or list, got {type(payload).__name__}")


def normalize_goal(row: Any) -> Goal:
    row = _require_mapping(row, "goal")
    return Goal(
        id=_require_id(row, "goal"),
        name=str(row.get("name") or ""),
        target_amount=to_decimal(_first(row, "targetAmount", "target_amount")),
        current_amount=to_decimal(_first(row, "currentAmount", "current_amount")),
        target_date=parse_date(_first(row, "targetDate", "target_date")),
        monthly_contribution=to_decimal(
            _first(row, "monthlyContribution", "monthly_contribution")
        ),
    )


def normalize_category(row: Any) -> Category:
    row = _require_mapping(row, "category")
    return Category(
        id=_require_id(row, "category"),
        name=str(row.get("name") or ""),
        kind=normalize_category_kind(_first(row, "type", "kind")),
        user_id=_optional_str(_first(row, "userId", "user_id")),
    )


def normalize_bill(row: Any) -> Bill:
    """Normalize a bill, or a legacy reminder carrying sendEmail."""
    row = _require_mapping(row, "bill")
    send_email = _first(row, "sendEmail", "send_email")
    return Bill(
        id=_require_id(row, "bill"),
        title=str(row.get("title") or ""),
        due_date=_require_date(_first(row, "dueDate", "due_date"), "bill", "dueDate"),
        amount=to_decimal(row.get("amount")),
        is_paid=bool(_first(row, "isPaid", "is_paid")),
        category=_optional_str(row.get("category")),
        send_email=None if send_email is None else bool(send_email),
    )


def normalize_user(row: Any) -> User:
    row = _require_mapping(row, "user")
    return User(
        id=_require_id(row, "user"),
        name=str(row.get("name") or ""),
        email=str(row.get("email") or ""),
    )


def normalize_auth_response(payload: Any) -> AuthResponse:
    payload = _require_mapping(payload, "auth response")
    token = payload.get("token")
    if not token:
        raise ParseError("auth response has no token")
    return AuthResponse(token=str(token), user=normalize_user(payload.get("user")))


def normalize_insights(payload: Any) -> list[Insight]:
    """Normalize an insights response ({"insights": [...]} or a bare list)."""
    rows = payload.get("insights") if isinstance(payload, dict) else payload

    def item(row: Any) -> Insight:
        row = _require_mapping(row, "insight")
        return Insight(
            id=_optional_str(row.get("id")),
            title=str(row.get("title") or ""),
            description=str(row.get("description") or ""),
            priority=normalize_priority(row.get("priority"), Priority.LOW),
            kind=_optional_str(row.get("type")),
            category=_optional_str(row.get("category")),
            raw_data=row,
        )

    return normalize_list(rows, item, "insight")


def normalize_nudges(payload: Any) -> list[Nudge]:
    """Normalize a nudges response ({"nudges": [...]} or a bare list)."""
    rows = payload.get("nudges") if isinstance(payload, dict) else payload

    def item(row: Any) -> Nudge:
        row = _require_mapping(row, "nudge")
        return Nudge(
            message=str(row.get("message") or ""),
            urgency=normalize_priority(row.get("urgency"), Priority.LOW),
            kind=_optional_str(row.get("type")),
            action=_optional_str(row.get("action_required")),
            raw_data=row,
        )

    return normalize_list(rows, item, "nudge")

