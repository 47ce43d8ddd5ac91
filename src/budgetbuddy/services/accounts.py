"""Accounts resource client."""

from decimal import Decimal
from typing import Any

from budgetbuddy.aggregation import total_balance
from budgetbuddy.models import Account
from budgetbuddy.normalizer import normalize_account
from budgetbuddy.services.base import ResourceService, to_payload


class AccountService(ResourceService[Account]):
    """Cash, bank and card accounts of the signed-in user.

    Balances are computed by the backend. Creating a transaction never
    changes a balance locally; callers refetch accounts instead.
    """

    resource = "accounts"
    user_scoped = True

    def normalize(self, payload: Any) -> Account:
        return normalize_account(payload)

    def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        prepared = dict(data)
        prepared["user_id"] = self.user_id()
        return prepared

    def update(self, item_id: str, data: dict[str, Any]) -> Account:
        # Balance-only updates have their own endpoint
        if set(data) == {"balance"}:
            payload = to_payload({"account_id": item_id, "new_balance": data["balance"]})
            return self.normalize(self.api.put(f"{self.resource}/balance", payload))
        return super().update(item_id, data)

    def get_total_balance(self) -> Decimal:
        """Sum of all account balances."""
        return total_balance(self.get_all())
