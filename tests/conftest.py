"""Pytest configuration and fixtures."""

import json
from collections.abc import Callable, Iterator
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from budgetbuddy.api import ApiClient
from budgetbuddy.app import BudgetBuddy
from budgetbuddy.config import Settings
from budgetbuddy.models import (
    Account,
    AccountCategory,
    Category,
    CategoryKind,
    Transaction,
    TransactionKind,
)
from budgetbuddy.notifications import Notifier
from budgetbuddy.query import QueryClient
from budgetbuddy.session import TOKEN_KEY, USER_KEY, MemoryStorage, SessionStore

BASE_URL = "http://test.local/api"
TEST_USER = {"id": "42", "name": "Test User", "email": "test@example.com"}


def make_response(status: int = 200, payload: Any = None) -> MagicMock:
    """Build a mock requests.Response."""
    response = MagicMock()
    response.status_code = status
    if payload is None:
        response.content = b""
        response.json.side_effect = ValueError("No JSON body")
    else:
        response.content = json.dumps(payload).encode()
        response.json.return_value = payload
    return response


class FakeBackend:
    """Route mocked requests.Session.request calls by method and path."""

    def __init__(self, base_url: str = BASE_URL) -> None:
        self.base_url = base_url
        self.routes: dict[tuple[str, str], list[MagicMock]] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def add(self, method: str, path: str, status: int = 200, payload: Any = None) -> None:
        """Queue a response. The last queued response for a route repeats."""
        self.routes.setdefault((method, path), []).append(make_response(status, payload))

    def count(self, method: str, path: str) -> int:
        return sum(1 for m, p, _ in self.calls if (m, p) == (method, path))

    def __call__(self, method: str, url: str, **kwargs: Any) -> MagicMock:
        path = url[len(self.base_url) + 1:]
        self.calls.append((method, path, kwargs))
        queued = self.routes.get((method, path))
        if not queued:
            return make_response(404, {"message": f"No route for {method} {path}"})
        return queued.pop(0) if len(queued) > 1 else queued[0]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from the real config directory and environment."""
    xdg = tmp_path / "xdg_config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    monkeypatch.delenv("BUDGETBUDDY_API_BASE_URL", raising=False)
    monkeypatch.delenv("BUDGETBUDDY_API_TIMEOUT", raising=False)
    monkeypatch.chdir(tmp_path)
    return xdg


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def storage() -> MemoryStorage:
    """Storage holding a signed-in session."""
    return MemoryStorage({TOKEN_KEY: "test-token", USER_KEY: json.dumps(TEST_USER)})


@pytest.fixture
def session(storage: MemoryStorage, notifier: Notifier) -> SessionStore:
    return SessionStore(storage, notifier)


@pytest.fixture
def http() -> Iterator[MagicMock]:
    """Mocked requests.Session used by ApiClient."""
    with patch("budgetbuddy.api.requests.Session") as session_class:
        mock_session = MagicMock()
        session_class.return_value = mock_session
        yield mock_session


@pytest.fixture
def backend(http: MagicMock) -> FakeBackend:
    fake = FakeBackend()
    http.request.side_effect = fake
    return fake


@pytest.fixture
def api(http: MagicMock, session: SessionStore, notifier: Notifier) -> ApiClient:
    return ApiClient(BASE_URL, timeout=5.0, session_store=session, notifier=notifier)


@pytest.fixture
def query_client(notifier: Notifier) -> QueryClient:
    """Query client that retries without sleeping."""
    return QueryClient(notifier, retry_delay=lambda attempt: 0.0)


@pytest.fixture
def app(
    backend: FakeBackend,
    storage: MemoryStorage,
    notifier: Notifier,
    query_client: QueryClient,
) -> BudgetBuddy:
    return BudgetBuddy(
        settings=Settings(api_base_url=BASE_URL, api_timeout=5.0),
        storage=storage,
        notifier=notifier,
        query_client=query_client,
    )


@pytest.fixture
def tx_factory() -> Callable[..., Transaction]:
    counter = iter(range(1, 10_000))

    def build(
        amount: str,
        kind: TransactionKind = TransactionKind.EXPENSE,
        category: str | None = None,
        category_id: str | None = None,
        day: int = 1,
    ) -> Transaction:
        return Transaction(
            id=str(next(counter)),
            date=date(2025, 3, day),
            amount=Decimal(amount),
            kind=kind,
            category=category,
            category_id=category_id,
        )

    return build


@pytest.fixture
def sample_accounts() -> list[Account]:
    return [
        Account(id="1", name="Wallet", category=AccountCategory.CASH, balance=Decimal("1500.50")),
        Account(id="2", name="Savings", category=AccountCategory.BANK, balance=Decimal("3499.50")),
    ]


@pytest.fixture
def sample_categories() -> list[Category]:
    return [
        Category(id="1", name="Food", kind=CategoryKind.EXPENSE),
        Category(id="2", name="Rent", kind=CategoryKind.EXPENSE),
        Category(id="3", name="Salary", kind=CategoryKind.INCOME, user_id="42"),
    ]
