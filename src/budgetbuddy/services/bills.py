"""Bill reminders resource client."""

from typing import Any

from budgetbuddy.models import Bill
from budgetbuddy.normalizer import normalize_bill
from budgetbuddy.services.base import ResourceService


class BillService(ResourceService[Bill]):
    resource = "bills"

    def normalize(self, payload: Any) -> Bill:
        return normalize_bill(payload)

    def mark_as_paid(self, bill_id: str) -> Bill:
        return self.normalize(self.api.patch(f"{self.resource}/{bill_id}/pay"))

    def get_upcoming(self, days: int = 30) -> list[Bill]:
        """Get unpaid bills due within the next ``days`` days."""
        payload = self.api.get(f"{self.resource}/upcoming", params={"days": days})
        return self.normalize_many(payload)

    def get_overdue(self) -> list[Bill]:
        return self.normalize_many(self.api.get(f"{self.resource}/overdue"))
