"""Tests for form validation."""

from typing import Any

import pytest

from budgetbuddy.errors import ValidationError
from budgetbuddy.validation import (
    validate_account,
    validate_bill,
    validate_budget,
    validate_category,
    validate_goal,
    validate_login,
    validate_registration,
    validate_transaction,
)

VALID_TX = {
    "date": "2025-03-02",
    "amount": "400",
    "type": "expense",
    "category_id": "1",
    "account_id": "2",
}


class TestAuthForms:
    """Tests for login and registration forms."""

    def test_login_requires_fields(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_login("", "secret")
        assert exc_info.value.field == "email"

    def test_passwords_must_match(self) -> None:
        with pytest.raises(ValidationError, match="Passwords don't match"):
            validate_registration("Ann", "a@b.c", "secret1", "secret2")

    def test_minimum_password_length(self) -> None:
        with pytest.raises(ValidationError, match="at least 6 characters"):
            validate_registration("Ann", "a@b.c", "abc", "abc")

    def test_valid_registration(self) -> None:
        validate_registration("Ann", "a@b.c", "secret", "secret")


class TestTransactionForm:
    """Tests for the transaction form."""

    def test_valid(self) -> None:
        validate_transaction(VALID_TX)

    def test_inline_names_accepted(self) -> None:
        data = {**VALID_TX, "category_id": None, "account_id": None,
                "category": "Food", "account": "Wallet"}
        validate_transaction(data)

    @pytest.mark.parametrize(
        ("changes", "field"),
        [
            ({"amount": ""}, "amount"),
            ({"amount": "0"}, "amount"),
            ({"amount": "abc"}, "amount"),
            ({"date": "yesterday"}, "date"),
            ({"type": "transfer"}, "type"),
            ({"category_id": None}, "category_id"),
            ({"account_id": None}, "account_id"),
        ],
    )
    def test_invalid(self, changes: dict[str, Any], field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_transaction({**VALID_TX, **changes})
        assert exc_info.value.field == field


class TestOtherForms:
    """Tests for account, budget, goal, bill and category forms."""

    def test_account(self) -> None:
        validate_account({"name": "Wallet", "type": "Cash", "balance": "0"})
        with pytest.raises(ValidationError):
            validate_account({"name": "Wallet", "type": "Cash", "balance": "lots"})

    def test_budget_dates_ordered(self) -> None:
        data = {"category": "Food", "limit": 1000, "startDate": "2025-03-31", "endDate": "2025-03-01"}
        with pytest.raises(ValidationError) as exc_info:
            validate_budget(data)
        assert exc_info.value.field == "endDate"

    def test_budget_valid(self) -> None:
        validate_budget(
            {"category": "Food", "limit": 1000, "startDate": "2025-03-01", "endDate": "2025-03-31"}
        )

    def test_goal_negative_current(self) -> None:
        with pytest.raises(ValidationError):
            validate_goal({
                "name": "Laptop", "targetAmount": 1000, "targetDate": "2025-12-31",
                "currentAmount": -5,
            })

    def test_bill(self) -> None:
        validate_bill({"title": "Rent", "dueDate": "2025-03-20", "amount": 900})
        with pytest.raises(ValidationError):
            validate_bill({"title": "Rent", "dueDate": "2025-03-20", "amount": -1})

    def test_category_kind(self) -> None:
        validate_category({"name": "Food", "type": "expense"})
    def test_category_kind_any_case(self) -> None:
        validate_category({"name": "Salary", "type": "Income"})
        with pytest.raises(ValidationError) as exc_info:
            validate_category({"name": "Food", "type": "savings"})
        assert exc_info.value.field == "type"
