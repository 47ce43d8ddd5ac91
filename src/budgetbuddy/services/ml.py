"""Client for the ML analytics namespace.

The analytics are opaque remote computations. Many of them answer 400 or
404 until enough history exists; those errors reach the caller without a
notification (see ApiClient) so widgets can show their empty state.
"""

from decimal import Decimal
from typing import Any

from budgetbuddy.api import ApiClient
from budgetbuddy.models import Insight, Nudge
from budgetbuddy.normalizer import normalize_insights, normalize_nudges
from budgetbuddy.services.base import to_payload

# Path segment the backend resolves to the authenticated user
CURRENT_USER = "me"


class MLService:
    """Calls under /ml. Payloads are returned as decoded JSON unless noted."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def check_health(self) -> dict[str, Any]:
        return self.api.get("ml/health")  # type: ignore[no-any-return]

    def train_model(self) -> dict[str, Any]:
        return self.api.post("ml/train")  # type: ignore[no-any-return]

    def get_predictions(self, months: int = 6) -> dict[str, Any]:
        return self.api.get("ml/predictions", params={"months": months})  # type: ignore[no-any-return]

    def get_user_insights(self) -> list[Insight]:
        return normalize_insights(self.api.get("ml/insights"))

    def get_insights_summary(self) -> dict[str, Any]:
        return self.api.get("ml/insights/summary")  # type: ignore[no-any-return]

    def calculate_goal_timeline(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.api.post("ml/goals/timeline", data)  # type: ignore[no-any-return]

    def reverse_plan_goal(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.api.post("ml/goals/reverse-plan", data)  # type: ignore[no-any-return]

    def get_spending_patterns(self) -> Any:
        return self.api.get("ml/patterns/spending")

    def get_anomalies(self) -> Any:
        return self.api.get("ml/anomalies")

    def get_advanced_expense_forecast(self, months: int = 12) -> dict[str, Any]:
        """Expense forecast for the next 6 to 24 months."""
        return self.api.post("ml/predictions/expense/advanced", {"months": months})  # type: ignore[no-any-return]

    def get_health_score(self) -> dict[str, Any]:
        """Financial health score (0-100, graded A-F)."""
        return self.api.get("ml/insights/health-score")  # type: ignore[no-any-return]

    def get_health_trends(self) -> dict[str, Any]:
        return self.api.get(f"ml/insights/trends/{CURRENT_USER}")  # type: ignore[no-any-return]

    def get_benchmark(self) -> dict[str, Any]:
        """Comparison against peer averages and percentiles."""
        return self.api.get(f"ml/insights/benchmark/{CURRENT_USER}")  # type: ignore[no-any-return]

    def get_budget_recommendations(self, total_budget: Decimal | float) -> dict[str, Any]:
        """Budget split suggestions (50/30/20 rule) for a total budget."""
        payload = to_payload({"total_budget": total_budget})
        return self.api.post("ml/budget/recommend", payload)  # type: ignore[no-any-return]

    def get_budget_alerts(self) -> dict[str, Any]:
        return self.api.post("ml/budget/alerts", {})  # type: ignore[no-any-return]

    def optimize_budget(self) -> dict[str, Any]:
        return self.api.post("ml/budget/optimize", {})  # type: ignore[no-any-return]

    def get_spending_habits(self) -> dict[str, Any]:
        return self.api.get(f"ml/recommendations/habits/{CURRENT_USER}")  # type: ignore[no-any-return]

    def get_savings_opportunities(self) -> dict[str, Any]:
        return self.api.get(f"ml/recommendations/opportunities/{CURRENT_USER}")  # type: ignore[no-any-return]

    def get_behavior_nudges(self) -> list[Nudge]:
        return normalize_nudges(self.api.get(f"ml/recommendations/nudges/{CURRENT_USER}"))

    def get_model_performance(self) -> dict[str, Any]:
        return self.api.get(f"ml/models/performance/{CURRENT_USER}")  # type: ignore[no-any-return]
