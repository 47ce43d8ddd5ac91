"""Client-side validation of form input.

Each validator raises ValidationError before any request is built, so a
rejected form never reaches a resource client.
"""

from typing import Any

from budgetbuddy.errors import ParseError, ValidationError
from budgetbuddy.models import normalize_category_kind, normalize_kind
from budgetbuddy.utils import parse_amount, parse_date

MIN_PASSWORD_LENGTH = 6


def _require(data: dict[str, Any], *fields: str) -> None:
    for name in fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{name} is required", field=name)


def _require_positive(data: dict[str, Any], name: str) -> None:
    amount = parse_amount(data.get(name))
    if amount is None:
        raise ValidationError(f"{name} must be a number", field=name)
    if amount <= 0:
        raise ValidationError(f"{name} must be greater than zero", field=name)


def _require_date(data: dict[str, Any], name: str) -> None:
    if parse_date(data.get(name)) is None:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)", field=name)


def validate_login(email: str, password: str) -> None:
    _require({"email": email, "password": password}, "email", "password")


def validate_registration(
    name: str,
    email: str,
    password: str,
    confirm_password: str,
) -> None:
    """Check a sign-up form: all fields present, passwords match and are long enough."""
    _require(
        {"name": name, "email": email, "password": password, "confirm_password": confirm_password},
        "name",
        "email",
        "password",
        "confirm_password",
    )
    if password != confirm_password:
        raise ValidationError("Passwords don't match", field="confirm_password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            field="password",
        )


def validate_transaction(data: dict[str, Any]) -> None:
    _require(data, "date", "amount", "type")
    _require_date(data, "date")
    _require_positive(data, "amount")
    try:
        normalize_kind(data["type"])
    except ParseError as e:
        raise ValidationError(str(e), field="type") from e
    if data.get("category_id") is None and not data.get("category"):
        raise ValidationError("category is required", field="category_id")
    if data.get("account_id") is None and not data.get("account"):
        raise ValidationError("account is required", field="account_id")


def validate_account(data: dict[str, Any]) -> None:
    _require(data, "name", "type", "balance")
    if parse_amount(data["balance"]) is None:
        raise ValidationError("balance must be a number", field="balance")


def validate_budget(data: dict[str, Any]) -> None:
    _require(data, "category", "limit", "startDate", "endDate")
    _require_positive(data, "limit")
    _require_date(data, "startDate")
    _require_date(data, "endDate")
    if parse_date(data["startDate"]) > parse_date(data["endDate"]):  # type: ignore[operator]
        raise ValidationError("endDate must not be before startDate", field="endDate")


def validate_goal(data: dict[str, Any]) -> None:
    _require(data, "name", "targetAmount", "targetDate")
    _require_positive(data, "targetAmount")
    _require_date(data, "targetDate")
    current = parse_amount(data.get("currentAmount", 0))
    if current is None or current < 0:
        raise ValidationError("currentAmount must not be negative", field="currentAmount")


def validate_bill(data: dict[str, Any]) -> None:
    _require(data, "title", "dueDate", "amount")
    _require_date(data, "dueDate")
    _require_positive(data, "amount")


def validate_category(data: dict[str, Any]) -> None:
    _require(data, "name", "type")
    try:
        normalize_category_kind(data["type"])
    except ParseError as e:
        raise ValidationError(str(e), field="type") from e
