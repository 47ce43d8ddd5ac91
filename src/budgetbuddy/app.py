"""Application facade: cached reads and invalidating writes."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from functools import partial
from pathlib import Path
from typing import Any, TypeVar

from budgetbuddy import queries
from budgetbuddy.api import ApiClient
from budgetbuddy.config import Settings, load_settings
from budgetbuddy.models import (
    Account,
    AuthResponse,
    Bill,
    Budget,
    Category,
    Goal,
    Insight,
    Nudge,
    Transaction,
    User,
)
from budgetbuddy.notifications import Notifier
from budgetbuddy.queries import MUTATION_MESSAGES, INVALIDATIONS, MutationKind, options_for
from budgetbuddy.query import QueryClient, QueryKey, QueryRequest
from budgetbuddy.services import (
    AccountService,
    AuthService,
    BillService,
    BudgetService,
    BudgetSpending,
    CategoryService,
    GoalService,
    MLService,
    TransactionService,
)
from budgetbuddy.session import JsonFileStorage, MemoryStorage, SessionStore, Storage
from budgetbuddy.validation import (
    validate_account,
    validate_bill,
    validate_budget,
    validate_category,
    validate_goal,
    validate_login,
    validate_registration,
    validate_transaction,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Services:
    """One client per backend resource, sharing an ApiClient."""

    auth: AuthService
    transactions: TransactionService
    accounts: AccountService
    budgets: BudgetService
    categories: CategoryService
    goals: GoalService
    bills: BillService
    ml: MLService

    @classmethod
    def create(cls, api: ApiClient) -> "Services":
        return cls(
            auth=AuthService(api),
            transactions=TransactionService(api),
            accounts=AccountService(api),
            budgets=BudgetService(api),
            categories=CategoryService(api),
            goals=GoalService(api),
            bills=BillService(api),
            ml=MLService(api),
        )


class BudgetBuddy:
    """
    Entry point tying the session, HTTP client, resource clients and
    query cache together.

    Usage:
        app = BudgetBuddy.from_config()
        app.login("me@example.com", "secret")
        app.create_transaction({...})   # invalidates transactions, accounts, budgets
        app.transactions()              # refetched
    """

    def __init__(
        self,
        settings: Settings | None = None,
        storage: Storage | None = None,
        notifier: Notifier | None = None,
        query_client: QueryClient | None = None,
        on_session_expired: Callable[[], None] | None = None,
    ) -> None:
        settings = settings or Settings()
        if storage is None:
            storage = (
                JsonFileStorage(settings.session_path)
                if settings.session_path is not None
                else MemoryStorage()
            )

        self.settings = settings
        self.notifier = notifier or Notifier()
        self.session = SessionStore(storage, self.notifier, on_expired=on_session_expired)
        self.api = ApiClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout,
            session_store=self.session,
            notifier=self.notifier,
        )
        self.services = Services.create(self.api)
        self.session.authenticator = self.services.auth
        self.queries = query_client or QueryClient(self.notifier)

    @classmethod
    def from_config(
        cls,
        config_path: Path | None = None,
        base_url: str | None = None,
        **kwargs: Any,
    ) -> "BudgetBuddy":
        return cls(settings=load_settings(config_path, base_url), **kwargs)

    # Session

    def login(self, email: str, password: str) -> AuthResponse:
        validate_login(email, password)
        auth = self.session.login(email, password)
        self.queries.clear()
        return auth

    def register(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> AuthResponse:
        validate_registration(name, email, password, confirm_password)
        auth = self.session.register(name, email, password)
        self.queries.clear()
        return auth

    def logout(self) -> None:
        self.session.logout()
        self.queries.clear()

    # Reads

    def request(self, key: QueryKey, fetcher: Callable[[], Any]) -> QueryRequest:
        """Bundle a key with its fetcher and its cache policy."""
        return QueryRequest(key=key, fetcher=fetcher, options=options_for(key))

    def _read(self, key: QueryKey, fetcher: Callable[[], T]) -> T:
        return self.queries.fetch(key, fetcher, options_for(key))

    def profile(self) -> User:
        return self._read((queries.USER_PROFILE,), self.services.auth.get_profile)

    def transactions(self) -> list[Transaction]:
        return self._read((queries.TRANSACTIONS,), self.services.transactions.get_all)

    def transaction(self, transaction_id: str) -> Transaction:
        return self._read(
            (queries.TRANSACTIONS, transaction_id),
            partial(self.services.transactions.get_by_id, transaction_id),
        )

    def accounts(self) -> list[Account]:
        return self._read((queries.ACCOUNTS,), self.services.accounts.get_all)

    def account(self, account_id: str) -> Account:
        return self._read(
            (queries.ACCOUNTS, account_id),
            partial(self.services.accounts.get_by_id, account_id),
        )

    def categories(self) -> list[Category]:
        return self._read((queries.CATEGORIES,), self.services.categories.get_all)

    def budgets(self) -> list[Budget]:
        return self._read((queries.BUDGETS,), self.services.budgets.get_all)

    def budget(self, budget_id: str) -> Budget:
        return self._read(
            (queries.BUDGETS, budget_id),
            partial(self.services.budgets.get_by_id, budget_id),
        )

    def budget_spending(self, budget_id: str) -> BudgetSpending:
        return self._read(
            (queries.BUDGETS, budget_id, "spending"),
            partial(self.services.budgets.get_spending, budget_id),
        )

    def overall_budget(self) -> list[Budget]:
        return self._read((queries.BUDGETS, "overall"), self.services.budgets.get_overall)

    def goals(self) -> list[Goal]:
        return self._read((queries.GOALS,), self.services.goals.get_all)

    def goal(self, goal_id: str) -> Goal:
        return self._read(
            (queries.GOALS, goal_id),
            partial(self.services.goals.get_by_id, goal_id),
        )

    def bills(self) -> list[Bill]:
        return self._read((queries.BILLS,), self.services.bills.get_all)

    def upcoming_bills(self, days: int = 30) -> list[Bill]:
        return self._read(
            (queries.BILLS, "upcoming", days),
            partial(self.services.bills.get_upcoming, days),
        )

    def overdue_bills(self) -> list[Bill]:
        return self._read((queries.BILLS, "overdue"), self.services.bills.get_overdue)

    def ml_health(self) -> dict[str, Any]:
        return self._read((queries.ML_HEALTH,), self.services.ml.check_health)

    def ml_predictions(self, months: int = 6) -> dict[str, Any]:
        return self._read(
            (queries.ML_PREDICTIONS, months),
            partial(self.services.ml.get_predictions, months),
        )

    def insights(self) -> list[Insight]:
        return self._read((queries.ML_INSIGHTS,), self.services.ml.get_user_insights)

    def insights_summary(self) -> dict[str, Any]:
        return self._read((queries.ML_INSIGHTS_SUMMARY,), self.services.ml.get_insights_summary)

    def expense_forecast(self, months: int = 12) -> dict[str, Any]:
        return self._read(
            (queries.ML_ADVANCED_FORECAST, months),
            partial(self.services.ml.get_advanced_expense_forecast, months),
        )

    def health_score(self) -> dict[str, Any]:
        return self._read((queries.ML_HEALTH_SCORE,), self.services.ml.get_health_score)

    def health_trends(self) -> dict[str, Any]:
        return self._read((queries.ML_HEALTH_TRENDS,), self.services.ml.get_health_trends)

    def benchmark(self) -> dict[str, Any]:
        return self._read((queries.ML_BENCHMARK,), self.services.ml.get_benchmark)

    def budget_recommendations(self, total_budget: Decimal) -> dict[str, Any]:
        return self._read(
            (queries.ML_BUDGET_RECOMMENDATIONS, str(total_budget)),
            partial(self.services.ml.get_budget_recommendations, total_budget),
        )

    def budget_alerts(self) -> dict[str, Any]:
        return self._read((queries.ML_BUDGET_ALERTS,), self.services.ml.get_budget_alerts)

    def spending_habits(self) -> dict[str, Any]:
        return self._read((queries.ML_SPENDING_HABITS,), self.services.ml.get_spending_habits)

    def savings_opportunities(self) -> dict[str, Any]:
        return self._read(
            (queries.ML_SAVINGS_OPPORTUNITIES,),
            self.services.ml.get_savings_opportunities,
        )

    def behavior_nudges(self) -> list[Nudge]:
        return self._read((queries.ML_BEHAVIOR_NUDGES,), self.services.ml.get_behavior_nudges)

    def model_performance(self) -> dict[str, Any]:
        return self._read((queries.ML_MODEL_PERFORMANCE,), self.services.ml.get_model_performance)

    # Writes

    def mutate(self, kind: MutationKind, call: Callable[[], T]) -> T:
        """Run a write and apply its invalidations and notifications."""
        success, failure = MUTATION_MESSAGES[kind]
        logger.debug("mutation %s", kind.value)
        return self.queries.mutate(call, INVALIDATIONS[kind], success, failure)

    def create_transaction(self, data: dict[str, Any]) -> Transaction:
        validate_transaction(data)
        return self.mutate(
            MutationKind.CREATE_TRANSACTION,
            partial(self.services.transactions.create, data),
        )

    def update_transaction(self, transaction_id: str, data: dict[str, Any]) -> Transaction:
        return self.mutate(
            MutationKind.UPDATE_TRANSACTION,
            partial(self.services.transactions.update, transaction_id, data),
        )

    def delete_transaction(self, transaction_id: str) -> None:
        self.mutate(
            MutationKind.DELETE_TRANSACTION,
            partial(self.services.transactions.delete, transaction_id),
        )

    def create_account(self, data: dict[str, Any]) -> Account:
        validate_account(data)
        return self.mutate(MutationKind.CREATE_ACCOUNT, partial(self.services.accounts.create, data))

    def update_account(self, account_id: str, data: dict[str, Any]) -> Account:
        return self.mutate(
            MutationKind.UPDATE_ACCOUNT,
            partial(self.services.accounts.update, account_id, data),
        )

    def delete_account(self, account_id: str) -> None:
        self.mutate(MutationKind.DELETE_ACCOUNT, partial(self.services.accounts.delete, account_id))

    def create_budget(self, data: dict[str, Any]) -> Budget:
        validate_budget(data)
        return self.mutate(MutationKind.CREATE_BUDGET, partial(self.services.budgets.create, data))

    def update_budget(self, budget_id: str, data: dict[str, Any]) -> Budget:
        return self.mutate(
            MutationKind.UPDATE_BUDGET,
            partial(self.services.budgets.update, budget_id, data),
        )

    def delete_budget(self, budget_id: str) -> None:
        self.mutate(MutationKind.DELETE_BUDGET, partial(self.services.budgets.delete, budget_id))

    def create_goal(self, data: dict[str, Any]) -> Goal:
        validate_goal(data)
        return self.mutate(MutationKind.CREATE_GOAL, partial(self.services.goals.create, data))

    def update_goal(self, goal_id: str, data: dict[str, Any]) -> Goal:
        return self.mutate(
            MutationKind.UPDATE_GOAL,
            partial(self.services.goals.update, goal_id, data),
        )

    def delete_goal(self, goal_id: str) -> None:
        self.mutate(MutationKind.DELETE_GOAL, partial(self.services.goals.delete, goal_id))

    def update_goal_progress(self, goal_id: str, amount: Decimal) -> Goal:
        return self.mutate(
            MutationKind.UPDATE_GOAL_PROGRESS,
            partial(self.services.goals.update_progress, goal_id, amount),
        )

    def create_bill(self, data: dict[str, Any]) -> Bill:
        validate_bill(data)
        return self.mutate(MutationKind.CREATE_BILL, partial(self.services.bills.create, data))

    def update_bill(self, bill_id: str, data: dict[str, Any]) -> Bill:
        return self.mutate(
            MutationKind.UPDATE_BILL,
            partial(self.services.bills.update, bill_id, data),
        )

    def delete_bill(self, bill_id: str) -> None:
        self.mutate(MutationKind.DELETE_BILL, partial(self.services.bills.delete, bill_id))

    def pay_bill(self, bill_id: str) -> Bill:
        return self.mutate(MutationKind.PAY_BILL, partial(self.services.bills.mark_as_paid, bill_id))

    def create_category(self, data: dict[str, Any]) -> Category:
        validate_category(data)
        return self.mutate(
            MutationKind.CREATE_CATEGORY,
            partial(self.services.categories.create, data),
        )

    def update_category(self, category_id: str, data: dict[str, Any]) -> Category:
        return self.mutate(
            MutationKind.UPDATE_CATEGORY,
            partial(self.services.categories.update, category_id, data),
        )

    def delete_category(self, category_id: str) -> None:
        self.mutate(
            MutationKind.DELETE_CATEGORY,
            partial(self.services.categories.delete, category_id),
        )

    def train_model(self) -> dict[str, Any]:
        return self.mutate(MutationKind.TRAIN_MODEL, self.services.ml.train_model)

    def optimize_budget(self) -> dict[str, Any]:
        return self.mutate(MutationKind.OPTIMIZE_BUDGET, self.services.ml.optimize_budget)

    def calculate_goal_timeline(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.mutate(
            MutationKind.CALCULATE_GOAL_TIMELINE,
            partial(self.services.ml.calculate_goal_timeline, data),
        )

    def reverse_plan_goal(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.mutate(
            MutationKind.REVERSE_PLAN_GOAL,
            partial(self.services.ml.reverse_plan_goal, data),
        )

    def transactions_between(self, start: date, end: date) -> list[Transaction]:
        """Uncached range query used by reports."""
        return self.services.transactions.get_by_date_range(start, end)
