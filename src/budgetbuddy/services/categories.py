"""Categories resource client."""

from typing import Any

from budgetbuddy.models import Category, CategoryKind, normalize_category_kind
from budgetbuddy.normalizer import normalize_category
from budgetbuddy.services.base import ResourceService


class CategoryService(ResourceService[Category]):
    """The user's categories plus the global ones shared by everybody."""

    resource = "categories"
    user_scoped = True

    def normalize(self, payload: Any) -> Category:
        return normalize_category(payload)

    def get_by_kind(self, kind: CategoryKind | str) -> list[Category]:
        params = {"type": normalize_category_kind(kind).value}
        return self.normalize_many(self.api.get(self.collection_path(), params=params))
