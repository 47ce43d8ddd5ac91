"""Budgets resource client."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from budgetbuddy.models import Budget
from budgetbuddy.normalizer import normalize_budget, normalize_budgets
from budgetbuddy.services.base import ResourceService
from budgetbuddy.utils import month_bounds, to_decimal


@dataclass(frozen=True)
class BudgetSpending:
    """Spending against one budget as reported by the backend."""

    budget_id: str
    category: str
    limit: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: Decimal


class BudgetService(ResourceService[Budget]):
    """Budgets, with tolerance for the shapes the budget endpoints return.

    Budget endpoints have answered with a single object, a list, or null,
    and with either amount/limit and current/spent field names.
    """

    resource = "budgets"

    def normalize(self, payload: Any) -> Budget:
        return normalize_budget(payload)

    def normalize_many(self, payload: Any) -> list[Budget]:
        return normalize_budgets(payload)

    def get_all(self) -> list[Budget]:
        """Get the signed-in user's budgets.

        The path carries no user id, but the list is still private to the
        session, so an anonymous call fails before any request.
        """
        self.user_id()
        return super().get_all()

    def get_current_month(self, today: date | None = None) -> list[Budget]:
        """Get budgets for the calendar month containing today."""
        self.user_id()
        start, end = month_bounds(today)
        params = {"startDate": start.isoformat(), "endDate": end.isoformat()}
        return self.normalize_many(self.api.get(self.resource, params=params))

    def get_overall(self) -> list[Budget]:
        """Get the user's overall budget summary."""
        return self.normalize_many(self.api.get(f"{self.resource}/overall/{self.user_id()}"))

    def get_spending(self, budget_id: str) -> BudgetSpending:
        payload = self.api.get(f"{self.resource}/{budget_id}/spending")
        if not isinstance(payload, dict):
            payload = {}
        return BudgetSpending(
            budget_id=str(payload.get("budgetId") or budget_id),
            category=str(payload.get("category") or ""),
            limit=to_decimal(payload.get("limit")),
            spent=to_decimal(payload.get("spent")),
            remaining=to_decimal(payload.get("remaining")),
            percentage=to_decimal(payload.get("percentage")),
        )
