"""Lenient parsing of values received from the backend."""

import calendar
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any


def parse_date(value: Any) -> date | None:
    """
    Parse the date formats the backend has been seen to send.

    Supported formats:
    - YYYY-MM-DD (2025-03-16)
    - ISO timestamps (2025-03-16T00:00:00.000Z)
    - DD/MM/YYYY (16/03/2025)
    - DD MMM YYYY (16 Mar 2025)

    Args:
        value: Date string, date or datetime

    Returns:
        date object if successful, None otherwise
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    value = value.strip().strip('"').strip()
    if not value:
        return None

    # Timestamps: keep the calendar date the backend wrote
    if len(value) > 10 and value[10] == "T":
        value = value[:10]

    formats = [
        "%Y-%m-%d",  # 2025-03-16
        "%d/%m/%Y",  # 16/03/2025
        "%d %b %Y",  # 16 Mar 2025
        "%d %B %Y",  # 16 March 2025
    ]

    for fmt in formats:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    return None


def parse_amount(value: Any) -> Decimal | None:
    """
    Parse an amount to Decimal.

    Handles:
    - ints, floats and Decimals
    - Numeric strings (account balances arrive as strings)
    - Currency prefixes (Rs., $) and thousands separators
    - Negative values (both -123 and (123))

    Args:
        value: Amount to parse

    Returns:
        Decimal if successful, None otherwise
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        # str() avoids binary float artefacts (0.1 -> 0.1000000000000000055...)
        return Decimal(str(value))
    if not isinstance(value, str):
        return None

    amount_str = value.strip().strip('"').strip()
    if not amount_str:
        return None

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Currency symbols and whitespace
    amount_str = re.sub(r"^(Rs\.?|INR|\$)", "", amount_str.strip())
    amount_str = re.sub(r"\s", "", amount_str)
    amount_str = amount_str.replace(",", "")

    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:]

    try:
        parsed = Decimal(amount_str)
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return -parsed if is_negative else parsed


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Parse an amount, falling back to default when it cannot be read."""
    parsed = parse_amount(value)
    return default if parsed is None else parsed


def month_bounds(today: date | None = None) -> tuple[date, date]:
    """Return the first and last day of the month containing today."""
    today = today or date.today()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)
