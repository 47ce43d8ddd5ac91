"""Transactions resource client."""

from datetime import date
from typing import Any

from budgetbuddy.models import Transaction, TransactionKind, normalize_kind
from budgetbuddy.normalizer import normalize_transaction
from budgetbuddy.services.base import ResourceService


class TransactionService(ResourceService[Transaction]):
    """Income and expense transactions of the signed-in user."""

    resource = "transactions"
    user_scoped = True

    def normalize(self, payload: Any) -> Transaction:
        return normalize_transaction(payload)

    def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Stamp the owner and send the canonical kind spelling."""
        prepared = dict(data)
        prepared["user_id"] = self.user_id()
        if "type" in prepared:
            prepared["type"] = normalize_kind(prepared["type"]).value
        return prepared

    def update(self, item_id: str, data: dict[str, Any]) -> Transaction:
        prepared = dict(data)
        if "type" in prepared:
            prepared["type"] = normalize_kind(prepared["type"]).value
        return super().update(item_id, prepared)

    def get_by_date_range(self, start_date: date, end_date: date) -> list[Transaction]:
        """Get transactions dated within [start_date, end_date]."""
        params = {"startDate": start_date.isoformat(), "endDate": end_date.isoformat()}
        return self.normalize_many(self.api.get(self.collection_path(), params=params))

    def get_by_kind(self, kind: TransactionKind | str) -> list[Transaction]:
        """Get transactions of one kind (the backend filters on INCOME/EXPENSE)."""
        params = {"type": normalize_kind(kind).value.upper()}
        return self.normalize_many(self.api.get(self.collection_path(), params=params))
