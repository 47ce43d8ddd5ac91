"""Tests for payload normalization."""

from datetime import date
from decimal import Decimal

import pytest

from budgetbuddy.errors import ParseError
from budgetbuddy.models import AccountCategory, CategoryKind, Priority, TransactionKind
from budgetbuddy.normalizer import (
    normalize_account,
    normalize_auth_response,
    normalize_bill,
    normalize_budget,
    normalize_budgets,
    normalize_category,
    normalize_goal,
    normalize_insights,
    normalize_list,
    normalize_nudges,
    normalize_transaction,
)

TODAY = date(2025, 3, 16)


class TestNormalizeTransaction:
    """Tests for transaction payloads."""

    def test_joined_names(self) -> None:
        """Test a payload with category/account names joined in."""
        tx = normalize_transaction({
            "id": 5,
            "date": "2025-03-02T00:00:00.000Z",
            "amount": "400.00",
            "type": "EXPENSE",
            "category": "Food",
            "account": "Wallet",
            "note": "groceries",
        })
        assert tx.id == "5"
        assert tx.date == date(2025, 3, 2)
        assert tx.amount == Decimal("400.00")
        assert tx.kind is TransactionKind.EXPENSE
        assert tx.category == "Food"
        assert tx.category_id is None
        assert tx.note == "groceries"

    def test_id_references(self) -> None:
        """Test a payload carrying only category and account ids."""
        tx = normalize_transaction({
            "_id": "abc",
            "date": "2025-03-02",
            "amount": 1000,
            "kind": "Income",
            "categoryId": 3,
            "account_id": 1,
        })
        assert tx.id == "abc"
        assert tx.kind is TransactionKind.INCOME
        assert tx.category_id == "3"
        assert tx.account_id == "1"

    def test_amount_is_absolute(self) -> None:
        tx = normalize_transaction(
            {"id": 1, "date": "2025-03-02", "amount": -20, "type": "expense"}
        )
        assert tx.amount == Decimal("20")

    def test_rejects_unknown_kind(self) -> None:
        with pytest.raises(ParseError):
            normalize_transaction(
                {"id": 1, "date": "2025-03-02", "amount": 5, "type": "transfer"}
            )

    def test_rejects_missing_date(self) -> None:
        with pytest.raises(ParseError):
            normalize_transaction({"id": 1, "amount": 5, "type": "expense"})

    def test_rejects_non_object(self) -> None:
        with pytest.raises(ParseError):
            normalize_transaction(["not", "an", "object"])


class TestNormalizeList:
    """Tests for collection payloads."""

    def test_null_is_empty(self) -> None:
        assert normalize_list(None, normalize_category, "category") == []

    def test_rejects_object(self) -> None:
        """Test that a non-list collection is rejected rather than guessed at."""
        with pytest.raises(ParseError):
            normalize_list({"id": 1}, normalize_category, "category")


class TestNormalizeBudget:
    """Tests for the budget payload variants."""

    def test_canonical_fields(self) -> None:
        budget = normalize_budget({
            "id": 1,
            "category": "Food",
            "limit": "1000",
            "spent": "250.50",
            "startDate": "2025-03-01",
            "endDate": "2025-03-31",
        }, TODAY)
        assert budget.limit == Decimal("1000")
        assert budget.spent == Decimal("250.50")
        assert budget.start_date == date(2025, 3, 1)
        assert budget.end_date == date(2025, 3, 31)

    def test_alias_fields(self) -> None:
        """Test amount/current and snake_case date aliases."""
        budget = normalize_budget({
            "budgetId": 9,
            "category": "Rent",
            "amount": 1500,
            "current": 1500,
            "start_date": "2025-03-01",
            "end_date": "2025-03-31",
        }, TODAY)
        assert budget.id == "9"
        assert budget.limit == Decimal("1500")
        assert budget.spent == Decimal("1500")
        assert budget.start_date == date(2025, 3, 1)

    def test_defaults(self) -> None:
        """Test missing amounts and dates are filled in."""
        budget = normalize_budget({}, TODAY)
        assert budget.id == ""
        assert budget.category == "Overall"
        assert budget.limit == Decimal("0")
        assert budget.spent == Decimal("0")
        assert budget.start_date == TODAY
        assert budget.end_date == TODAY

    def test_single_object_payload(self) -> None:
        budgets = normalize_budgets({"id": 1, "amount": 100}, TODAY)
        assert len(budgets) == 1
        assert budgets[0].limit == Decimal("100")

    def test_list_and_null_payloads(self) -> None:
        assert normalize_budgets(None, TODAY) == []
        assert len(normalize_budgets([{"id": 1}, {"id": 2}], TODAY)) == 2

    def test_rejects_other_shapes(self) -> None:
        with pytest.raises(ParseError):
            normalize_budgets("1000", TODAY)


class TestNormalizeOthers:
    """Tests for the remaining resources."""

    def test_account_string_balance(self) -> None:
        account = normalize_account({"id": 1, "name": "Wallet", "type": "cash", "balance": "5000.00"})
        assert account.balance == Decimal("5000.00")
        assert account.category is AccountCategory.CASH

    def test_account_name_defaults_to_type(self) -> None:
        account = normalize_account({"id": 1, "account_type": "Bank", "balance": 0})
        assert account.name == "Bank"

    def test_account_rejects_bad_balance(self) -> None:
        with pytest.raises(ParseError):
            normalize_account({"id": 1, "type": "Bank", "balance": "lots"})

    def test_category(self) -> None:
        category = normalize_category({"id": 2, "name": "Food", "type": "expense", "userId": 42})
        assert category.kind is CategoryKind.EXPENSE
        assert category.user_id == "42"

    def test_goal(self) -> None:
        goal = normalize_goal({
            "id": 3,
            "name": "Laptop",
            "targetAmount": "80000",
            "currentAmount": 20000,
            "targetDate": "2025-12-31",
        })
        assert goal.target_amount == Decimal("80000")
        assert goal.current_amount == Decimal("20000")
        assert goal.target_date == date(2025, 12, 31)
        assert goal.monthly_contribution == Decimal("0")

    def test_legacy_reminder_bill(self) -> None:
        bill = normalize_bill({
            "id": 4,
            "title": "Electricity",
            "dueDate": "2025-03-20",
            "amount": "1200",
            "sendEmail": 1,
        })
        assert bill.send_email is True
        assert bill.is_paid is False

    def test_bill_requires_due_date(self) -> None:
        with pytest.raises(ParseError):
            normalize_bill({"id": 4, "title": "Water", "amount": 10})

    def test_auth_response(self) -> None:
        auth = normalize_auth_response(
            {"token": "t0k", "user": {"id": 1, "name": "Ann", "email": "a@b.c"}}
        )
        assert auth.token == "t0k"
        assert auth.user.id == "1"

    def test_auth_response_requires_token(self) -> None:
        with pytest.raises(ParseError):
            normalize_auth_response({"user": {"id": 1}})


class TestNormalizeInsights:
    """Tests for ML insight and nudge payloads."""

    def test_wrapped_insights(self) -> None:
        insights = normalize_insights({"insights": [
            {"title": "Dining up", "description": "20% more", "priority": "HIGH", "type": "warning"},
            {"title": "Nice", "description": "Saved"},
        ]})
        assert [i.priority for i in insights] == [Priority.HIGH, Priority.LOW]
        assert insights[0].kind == "warning"

    def test_bare_list_and_missing(self) -> None:
        assert len(normalize_insights([{"title": "x"}])) == 1
        assert normalize_insights({}) == []

    def test_nudges(self) -> None:
        nudges = normalize_nudges({"nudges": [
            {"message": "Skip takeout", "urgency": "medium", "action_required": "Cook at home"},
        ]})
        assert nudges[0].urgency is Priority.MEDIUM
        assert nudges[0].action == "Cook at home"
