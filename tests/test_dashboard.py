"""Tests for dashboard loading."""

from decimal import Decimal

from budgetbuddy import queries
from budgetbuddy.aggregation import BudgetStatus
from budgetbuddy.app import BudgetBuddy
from budgetbuddy.dashboard import insight_widget, load_dashboard, nudge_widget

from conftest import FakeBackend


def seed(backend: FakeBackend) -> None:
    backend.add("GET", "transactions/42", payload=[
        {"id": 1, "date": "2025-03-01", "amount": 1000, "type": "INCOME"},
        {"id": 2, "date": "2025-03-05", "amount": 400, "type": "expense", "categoryId": 1},
        {"id": 3, "date": "2025-03-03", "amount": 50, "type": "Expense", "category": "Travel"},
    ])
    backend.add("GET", "accounts/42", payload=[{"id": 1, "type": "Bank", "balance": "5000"}])
    backend.add("GET", "categories/42", payload=[{"id": 1, "name": "Food", "type": "EXPENSE"}])
    backend.add("GET", "budgets", payload=[
        {"id": 1, "category": "Food", "limit": 1000, "spent": 1200},
        {"id": 2, "category": "Travel", "limit": 100, "spent": 95},
        {"id": 3, "category": "Misc", "limit": 0, "spent": 10},
    ])


class TestLoadDashboard:
    """Tests for the overview page."""

    def test_aggregates_live_data(self, app: BudgetBuddy, backend: FakeBackend) -> None:
        seed(backend)

        data = load_dashboard(app)

        assert data.summary.income == Decimal("1000")
        assert data.summary.expenses == Decimal("450")
        assert data.summary.balance == Decimal("5000")
        assert data.expense_breakdown == [("Food", Decimal("400")), ("Travel", Decimal("50"))]
        assert [tx.id for tx in data.recent_transactions] == ["2", "3", "1"]
        assert data.errors == {}

    def test_budget_banners(self, app: BudgetBuddy, backend: FakeBackend) -> None:
        seed(backend)

        data = load_dashboard(app)

        statuses = {view.budget.category: view.status for view in data.budgets}
        assert statuses == {
            "Food": BudgetStatus.EXCEEDED,
            "Travel": BudgetStatus.APPROACHING,
            "Misc": BudgetStatus.NO_LIMIT,
        }
        assert [view.percent_used for view in data.budgets] == [100, 95, 0]
        assert [v.budget.category for v in data.exceeded_budgets] == ["Food"]
        assert [v.budget.category for v in data.approaching_budgets] == ["Travel"]

    def test_partial_failure(self, app: BudgetBuddy, backend: FakeBackend) -> None:
        """Test one failed resource leaves the other widgets usable."""
        seed(backend)
        backend.routes.pop(("GET", "categories/42"))

        data = load_dashboard(app)

        assert set(data.errors) == {queries.CATEGORIES}
        assert data.results[queries.TRANSACTIONS].is_success
        # Without categories the id-only expense falls back
        assert ("Uncategorized", Decimal("400")) in data.expense_breakdown


class TestMLWidgets:
    """Tests for the insight and nudge widgets."""

    def test_missing_insights_show_empty_state(self, app: BudgetBuddy, backend: FakeBackend) -> None:
        """Test a 404 from the insights endpoint shows no notification."""
        result = insight_widget(app)

        assert result.is_error
        assert result.data is None
        assert app.notifier.history == []

    def test_insights_sorted_and_truncated(self, app: BudgetBuddy, backend: FakeBackend) -> None:
        backend.add("GET", "ml/insights", payload={"insights": [
            {"title": "a", "priority": "low"},
            {"title": "b", "priority": "high"},
            {"title": "c", "priority": "medium"},
            {"title": "d", "priority": "high"},
        ]})

        result = insight_widget(app)

        assert result.data is not None
        assert [i.title for i in result.data.items] == ["b", "d", "c"]
        assert result.data.hidden_count == 1

    def test_nudges(self, app: BudgetBuddy, backend: FakeBackend) -> None:
        backend.add("GET", "ml/recommendations/nudges/me", payload={"nudges": [
            {"message": "m1", "urgency": "low"},
            {"message": "m2", "urgency": "high"},
        ]})

        result = nudge_widget(app)

        assert result.data is not None
        assert [n.message for n in result.data.items] == ["m2", "m1"]
        assert not result.data.has_more
