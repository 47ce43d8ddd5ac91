"""BudgetBuddy - Client for personal finance tracking."""

from budgetbuddy.app import BudgetBuddy
from budgetbuddy.errors import ApiError, BudgetBuddyError
from budgetbuddy.models import Account, Bill, Budget, Category, Goal, Transaction

__version__ = "0.1.0"
__all__ = [
    "Account",
    "ApiError",
    "Bill",
    "Budget",
    "BudgetBuddy",
    "BudgetBuddyError",
    "Category",
    "Goal",
    "Transaction",
]
