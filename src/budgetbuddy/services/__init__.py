"""Resource clients for the BudgetBuddy backend."""

from budgetbuddy.services.accounts import AccountService
from budgetbuddy.services.auth import AuthService
from budgetbuddy.services.base import ResourceService
from budgetbuddy.services.bills import BillService
from budgetbuddy.services.budgets import BudgetService, BudgetSpending
from budgetbuddy.services.categories import CategoryService
from budgetbuddy.services.goals import GoalService
from budgetbuddy.services.ml import MLService
from budgetbuddy.services.transactions import TransactionService

__all__ = [
    "ResourceService",
    "AccountService",
    "AuthService",
    "BillService",
    "BudgetService",
    "BudgetSpending",
    "CategoryService",
    "GoalService",
    "MLService",
    "TransactionService",
]
