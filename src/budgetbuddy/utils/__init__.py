"""Utility functions for budgetbuddy."""

from budgetbuddy.utils.parsing import (
    month_bounds,
    parse_amount,
    parse_date,
    to_decimal,
)

__all__ = ["parse_date", "parse_amount", "to_decimal", "month_bounds"]
