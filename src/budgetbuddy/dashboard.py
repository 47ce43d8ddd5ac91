"""Dashboard loading: concurrent resource reads folded into widget data."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from budgetbuddy import aggregation, queries
from budgetbuddy.aggregation import BudgetStatus, DisplayList
from budgetbuddy.models import Budget, Insight, MonthlySummary, Nudge, Transaction
from budgetbuddy.query import QueryResult

if TYPE_CHECKING:
    from budgetbuddy.app import BudgetBuddy

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 5


@dataclass(frozen=True)
class BudgetView:
    budget: Budget
    percent_used: int
    status: BudgetStatus

    @classmethod
    def from_budget(cls, budget: Budget) -> "BudgetView":
        return cls(
            budget=budget,
            percent_used=aggregation.budget_percent_used(budget.spent, budget.limit),
            status=aggregation.budget_status(budget.spent, budget.limit),
        )


@dataclass(frozen=True)
class DashboardData:
    """Everything the overview page renders.

    Failed reads fall back to empty lists; their errors stay in
    ``results`` so each widget can show its own state.
    """

    summary: MonthlySummary
    expense_breakdown: list[tuple[str, Decimal]]
    budgets: list[BudgetView]
    recent_transactions: list[Transaction]
    results: dict[str, QueryResult[Any]] = field(default_factory=dict)

    @property
    def errors(self) -> dict[str, BaseException]:
        return {
            name: result.error
            for name, result in self.results.items()
            if result.error is not None
        }

    @property
    def exceeded_budgets(self) -> list[BudgetView]:
        return [view for view in self.budgets if view.status is BudgetStatus.EXCEEDED]

    @property
    def approaching_budgets(self) -> list[BudgetView]:
        return [view for view in self.budgets if view.status is BudgetStatus.APPROACHING]


def _data_or_empty(result: QueryResult[Any] | None) -> list[Any]:
    if result is None or result.data is None:
        return []
    return list(result.data)


def recent_transactions(
    transactions: list[Transaction],
    limit: int = RECENT_TRANSACTIONS,
) -> list[Transaction]:
    """Newest first; same-day entries keep backend order."""
    return sorted(transactions, key=lambda tx: tx.date, reverse=True)[: max(limit, 0)]


def build_dashboard(results: dict[str, QueryResult[Any]]) -> DashboardData:
    transactions = _data_or_empty(results.get(queries.TRANSACTIONS))
    accounts = _data_or_empty(results.get(queries.ACCOUNTS))
    categories = _data_or_empty(results.get(queries.CATEGORIES))
    budgets = _data_or_empty(results.get(queries.BUDGETS))

    return DashboardData(
        summary=aggregation.monthly_summary(transactions, accounts),
        expense_breakdown=aggregation.expense_breakdown(transactions, categories),
        budgets=[BudgetView.from_budget(budget) for budget in budgets],
        recent_transactions=recent_transactions(transactions),
        results=results,
    )


def load_dashboard(app: "BudgetBuddy") -> DashboardData:
    """Fetch the four dashboard resources in parallel and aggregate them."""
    services = app.services
    requests = {
        queries.TRANSACTIONS: app.request((queries.TRANSACTIONS,), services.transactions.get_all),
        queries.ACCOUNTS: app.request((queries.ACCOUNTS,), services.accounts.get_all),
        queries.CATEGORIES: app.request((queries.CATEGORIES,), services.categories.get_all),
        queries.BUDGETS: app.request((queries.BUDGETS,), services.budgets.get_all),
    }
    results = app.queries.fetch_many(requests)
    for name, result in results.items():
        if result.is_error:
            logger.warning("dashboard %s failed to load: %s", name, result.error)
    return build_dashboard(results)


def insight_widget(app: "BudgetBuddy") -> QueryResult[DisplayList[Insight]]:
    """Top insights by priority. A failure is shown as an empty state."""
    result = app.queries.query(
        (queries.ML_INSIGHTS,),
        app.services.ml.get_user_insights,
        queries.options_for((queries.ML_INSIGHTS,)),
    )
    if not result.is_success:
        return QueryResult(result.key, result.status, error=result.error)
    ranked = aggregation.sort_by_priority(result.data or [])
    return QueryResult(
        result.key,
        result.status,
        data=aggregation.truncate_for_display(ranked, aggregation.INSIGHT_DISPLAY_LIMIT),
    )


def nudge_widget(app: "BudgetBuddy") -> QueryResult[DisplayList[Nudge]]:
    """Behaviour nudges, most urgent first."""
    result = app.queries.query(
        (queries.ML_BEHAVIOR_NUDGES,),
        app.services.ml.get_behavior_nudges,
        queries.options_for((queries.ML_BEHAVIOR_NUDGES,)),
    )
    if not result.is_success:
        return QueryResult(result.key, result.status, error=result.error)
    ranked = aggregation.sort_by_priority(result.data or [])
    return QueryResult(
        result.key,
        result.status,
        data=aggregation.truncate_for_display(ranked, aggregation.NUDGE_DISPLAY_LIMIT),
    )
