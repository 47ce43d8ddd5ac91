"""Savings goals resource client."""

from decimal import Decimal
from typing import Any

from budgetbuddy.models import Goal
from budgetbuddy.normalizer import normalize_goal
from budgetbuddy.services.base import ResourceService, to_payload


class GoalService(ResourceService[Goal]):
    resource = "goals"

    def normalize(self, payload: Any) -> Goal:
        return normalize_goal(payload)

    def update_progress(self, goal_id: str, amount: Decimal) -> Goal:
        """Record a contribution towards a goal."""
        payload = to_payload({"amount": amount})
        return self.normalize(self.api.patch(f"{self.resource}/{goal_id}/progress", payload))
