"""Base class for resource clients."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar

from budgetbuddy.api import ApiClient
from budgetbuddy.errors import UnauthenticatedError
from budgetbuddy.normalizer import normalize_list
from budgetbuddy.session import SessionStore

T = TypeVar("T")


def to_payload(data: dict[str, Any]) -> dict[str, Any]:
    """Convert a request body to JSON-safe values.

    Decimals become floats and dates ISO strings, matching what the
    backend accepts.
    """
    payload: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Decimal):
            payload[key] = float(value)
        elif isinstance(value, date):
            payload[key] = value.isoformat()
        elif isinstance(value, Enum):
            payload[key] = value.value
        else:
            payload[key] = value
    return payload


class ResourceService(ABC, Generic[T]):
    """CRUD client for one backend resource.

    Subclasses set ``resource`` (the URL segment, also the cache key) and
    implement ``normalize``. User-scoped resources list through
    ``/<resource>/<userId>`` and need a signed-in session.
    """

    resource: ClassVar[str] = ""
    user_scoped: ClassVar[bool] = False

    def __init__(self, api: ApiClient, session: SessionStore | None = None) -> None:
        self.api = api
        self.session = session if session is not None else api.session_store

    @abstractmethod
    def normalize(self, payload: Any) -> T:
        """Convert one backend object to its model."""

    def normalize_many(self, payload: Any) -> list[T]:
        return normalize_list(payload, self.normalize, self.resource)

    def user_id(self) -> str:
        """Resolve the signed-in user's id before any request is made.

        Raises:
            UnauthenticatedError: If there is no session
        """
        if self.session is None:
            raise UnauthenticatedError("User not authenticated")
        return self.session.user_id()

    def collection_path(self) -> str:
        if self.user_scoped:
            return f"{self.resource}/{self.user_id()}"
        return self.resource

    def get_all(self) -> list[T]:
        return self.normalize_many(self.api.get(self.collection_path()))

    def get_by_id(self, item_id: str) -> T:
        return self.normalize(self.api.get(f"{self.resource}/{item_id}"))

    def create(self, data: dict[str, Any]) -> T:
        payload = to_payload(self.prepare_create(data))
        return self.normalize(self.api.post(self.resource, payload))

    def update(self, item_id: str, data: dict[str, Any]) -> T:
        return self.normalize(self.api.put(f"{self.resource}/{item_id}", to_payload(data)))

    def delete(self, item_id: str) -> None:
        self.api.delete(f"{self.resource}/{item_id}")

    def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Hook for subclasses that add fields to a create request."""
        return dict(data)
