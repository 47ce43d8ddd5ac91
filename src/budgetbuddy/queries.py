"""Query keys, cache policies, and what each mutation invalidates."""

from enum import Enum

from budgetbuddy.query import QueryKey, QueryOptions

MINUTE = 60.0
HOUR = 60 * MINUTE
DAY = 24 * HOUR

# Resource keys
TRANSACTIONS = "transactions"
ACCOUNTS = "accounts"
BUDGETS = "budgets"
GOALS = "goals"
BILLS = "bills"
CATEGORIES = "categories"
USER_PROFILE = "user-profile"

ML_HEALTH = "ml-health"
ML_PREDICTIONS = "ml-predictions"
ML_INSIGHTS = "ml-insights"
ML_INSIGHTS_SUMMARY = "ml-insights-summary"
ML_ADVANCED_FORECAST = "ml-advanced-forecast"
ML_HEALTH_SCORE = "ml-health-score"
ML_HEALTH_TRENDS = "ml-health-trends"
ML_BENCHMARK = "ml-benchmark"
ML_BUDGET_RECOMMENDATIONS = "ml-budget-recommendations"
ML_BUDGET_ALERTS = "ml-budget-alerts"
ML_SPENDING_HABITS = "ml-spending-habits"
ML_SAVINGS_OPPORTUNITIES = "ml-savings-opportunities"
ML_BEHAVIOR_NUDGES = "ml-behavior-nudges"
ML_MODEL_PERFORMANCE = "ml-model-performance"

# Everything a retrained model can change
ML_PREDICTION_KEYS = (
    ML_PREDICTIONS,
    ML_INSIGHTS,
    ML_INSIGHTS_SUMMARY,
    ML_ADVANCED_FORECAST,
    ML_HEALTH_SCORE,
    ML_HEALTH_TRENDS,
    ML_BENCHMARK,
    ML_BUDGET_RECOMMENDATIONS,
    ML_BUDGET_ALERTS,
    ML_SPENDING_HABITS,
    ML_SAVINGS_OPPORTUNITIES,
    ML_BEHAVIOR_NUDGES,
    ML_MODEL_PERFORMANCE,
)

_NO_RETRY = 0

# Analytics that 400/404 until enough history exists never retry.
QUERY_OPTIONS: dict[str, QueryOptions] = {
    TRANSACTIONS: QueryOptions(stale_time=0),
    BUDGETS: QueryOptions(stale_time=0),
    GOALS: QueryOptions(stale_time=0),
    ACCOUNTS: QueryOptions(stale_time=0, retry=_NO_RETRY),
    CATEGORIES: QueryOptions(stale_time=0, retry=_NO_RETRY),
    BILLS: QueryOptions(stale_time=0, retry=_NO_RETRY),
    USER_PROFILE: QueryOptions(stale_time=5 * MINUTE),
    ML_HEALTH: QueryOptions(stale_time=5 * MINUTE, retry=1),
    ML_PREDICTIONS: QueryOptions(stale_time=10 * MINUTE),
    ML_INSIGHTS: QueryOptions(stale_time=5 * MINUTE, retry=_NO_RETRY),
    ML_INSIGHTS_SUMMARY: QueryOptions(stale_time=5 * MINUTE),
    ML_ADVANCED_FORECAST: QueryOptions(stale_time=30 * MINUTE, retry=_NO_RETRY),
    ML_HEALTH_SCORE: QueryOptions(stale_time=DAY, retry=_NO_RETRY),
    ML_HEALTH_TRENDS: QueryOptions(stale_time=DAY, retry=_NO_RETRY),
    ML_BENCHMARK: QueryOptions(stale_time=7 * DAY, retry=_NO_RETRY),
    ML_BUDGET_RECOMMENDATIONS: QueryOptions(stale_time=HOUR, retry=_NO_RETRY),
    ML_BUDGET_ALERTS: QueryOptions(stale_time=15 * MINUTE, retry=_NO_RETRY),
    ML_SPENDING_HABITS: QueryOptions(stale_time=DAY, retry=_NO_RETRY),
    ML_SAVINGS_OPPORTUNITIES: QueryOptions(stale_time=DAY, retry=_NO_RETRY),
    ML_BEHAVIOR_NUDGES: QueryOptions(stale_time=HOUR, retry=_NO_RETRY),
    ML_MODEL_PERFORMANCE: QueryOptions(stale_time=DAY, retry=_NO_RETRY),
}


def options_for(key: QueryKey) -> QueryOptions:
    """Cache policy for a key, looked up by its resource name."""
    return QUERY_OPTIONS.get(str(key[0]), QueryOptions()) if key else QueryOptions()


class MutationKind(str, Enum):
    CREATE_TRANSACTION = "create_transaction"
    UPDATE_TRANSACTION = "update_transaction"
    DELETE_TRANSACTION = "delete_transaction"
    CREATE_ACCOUNT = "create_account"
    UPDATE_ACCOUNT = "update_account"
    DELETE_ACCOUNT = "delete_account"
    CREATE_BUDGET = "create_budget"
    UPDATE_BUDGET = "update_budget"
    DELETE_BUDGET = "delete_budget"
    CREATE_GOAL = "create_goal"
    UPDATE_GOAL = "update_goal"
    DELETE_GOAL = "delete_goal"
    UPDATE_GOAL_PROGRESS = "update_goal_progress"
    CREATE_BILL = "create_bill"
    UPDATE_BILL = "update_bill"
    DELETE_BILL = "delete_bill"
    PAY_BILL = "pay_bill"
    CREATE_CATEGORY = "create_category"
    UPDATE_CATEGORY = "update_category"
    DELETE_CATEGORY = "delete_category"
    TRAIN_MODEL = "train_model"
    OPTIMIZE_BUDGET = "optimize_budget"
    CALCULATE_GOAL_TIMELINE = "calculate_goal_timeline"
    REVERSE_PLAN_GOAL = "reverse_plan_goal"


def _keys(*names: str) -> frozenset[QueryKey]:
    return frozenset((name,) for name in names)


_TRANSACTION_WRITES = _keys(TRANSACTIONS, ACCOUNTS, BUDGETS)

INVALIDATIONS: dict[MutationKind, frozenset[QueryKey]] = {
    MutationKind.CREATE_TRANSACTION: _TRANSACTION_WRITES,
    MutationKind.UPDATE_TRANSACTION: _TRANSACTION_WRITES,
    MutationKind.DELETE_TRANSACTION: _TRANSACTION_WRITES,
    MutationKind.CREATE_ACCOUNT: _keys(ACCOUNTS),
    MutationKind.UPDATE_ACCOUNT: _keys(ACCOUNTS),
    MutationKind.DELETE_ACCOUNT: _keys(ACCOUNTS),
    MutationKind.CREATE_BUDGET: _keys(BUDGETS),
    MutationKind.UPDATE_BUDGET: _keys(BUDGETS),
    MutationKind.DELETE_BUDGET: _keys(BUDGETS),
    MutationKind.CREATE_GOAL: _keys(GOALS),
    MutationKind.UPDATE_GOAL: _keys(GOALS),
    MutationKind.DELETE_GOAL: _keys(GOALS),
    MutationKind.UPDATE_GOAL_PROGRESS: _keys(GOALS),
    MutationKind.CREATE_BILL: _keys(BILLS),
    MutationKind.UPDATE_BILL: _keys(BILLS),
    MutationKind.DELETE_BILL: _keys(BILLS),
    MutationKind.PAY_BILL: _keys(BILLS),
    MutationKind.CREATE_CATEGORY: _keys(CATEGORIES),
    MutationKind.UPDATE_CATEGORY: _keys(CATEGORIES),
    MutationKind.DELETE_CATEGORY: _keys(CATEGORIES),
    MutationKind.TRAIN_MODEL: _keys(*ML_PREDICTION_KEYS),
    MutationKind.OPTIMIZE_BUDGET: _keys(ML_BUDGET_RECOMMENDATIONS),
    MutationKind.CALCULATE_GOAL_TIMELINE: frozenset(),
    MutationKind.REVERSE_PLAN_GOAL: frozenset(),
}

# (success, failure) notifications
MUTATION_MESSAGES: dict[MutationKind, tuple[str | None, str]] = {
    MutationKind.CREATE_TRANSACTION: ("Transaction created successfully", "Failed to create transaction"),
    MutationKind.UPDATE_TRANSACTION: ("Transaction updated successfully", "Failed to update transaction"),
    MutationKind.DELETE_TRANSACTION: ("Transaction deleted successfully", "Failed to delete transaction"),
    MutationKind.CREATE_ACCOUNT: ("Account created successfully", "Failed to create account"),
    MutationKind.UPDATE_ACCOUNT: ("Account updated successfully", "Failed to update account"),
    MutationKind.DELETE_ACCOUNT: ("Account deleted successfully", "Failed to delete account"),
    MutationKind.CREATE_BUDGET: ("Budget created successfully", "Failed to create budget"),
    MutationKind.UPDATE_BUDGET: ("Budget updated successfully", "Failed to update budget"),
    MutationKind.DELETE_BUDGET: ("Budget deleted successfully", "Failed to delete budget"),
    MutationKind.CREATE_GOAL: ("Goal created successfully", "Failed to create goal"),
    MutationKind.UPDATE_GOAL: ("Goal updated successfully", "Failed to update goal"),
    MutationKind.DELETE_GOAL: ("Goal deleted successfully", "Failed to delete goal"),
    MutationKind.UPDATE_GOAL_PROGRESS: (
        "Goal progress updated successfully",
        "Failed to update goal progress",
    ),
    MutationKind.CREATE_BILL: ("Bill reminder created successfully", "Failed to create bill reminder"),
    MutationKind.UPDATE_BILL: ("Bill updated successfully", "Failed to update bill"),
    MutationKind.DELETE_BILL: ("Bill deleted successfully", "Failed to delete bill"),
    MutationKind.PAY_BILL: ("Bill marked as paid", "Failed to mark bill as paid"),
    MutationKind.CREATE_CATEGORY: ("Category created successfully", "Failed to create category"),
    MutationKind.UPDATE_CATEGORY: ("Category updated successfully", "Failed to update category"),
    MutationKind.DELETE_CATEGORY: ("Category deleted successfully", "Failed to delete category"),
    MutationKind.TRAIN_MODEL: ("ML model trained successfully", "Failed to train ML model"),
    MutationKind.OPTIMIZE_BUDGET: ("Budget optimization completed", "Failed to optimize budget"),
    MutationKind.CALCULATE_GOAL_TIMELINE: (None, "Failed to calculate goal timeline"),
    MutationKind.REVERSE_PLAN_GOAL: (None, "Failed to create reverse plan"),
}
