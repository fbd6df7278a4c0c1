"""Income/expense aggregation for the dashboard charts.

Works on anything carrying ``amount``, ``category`` and ``transaction_type``
attributes (pydantic records, ORM rows). Filtering by user, type and date
happens before this is called.
"""
import math
from collections import defaultdict
from typing import Iterable

from common.enum import CATEGORIES, TransactionTypeEnum
from schemas import AnalyticsReport, CategoryBreakdown


def _value(field) -> str:
    return getattr(field, "value", field)


def parse_amount(amount) -> float:
    """Amount as a float; anything unparsable counts as 0"""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def percentage(part: float, total: float) -> float:
    return round(part / total * 100, 2) if total > 0 else 0.0


def summarize(transactions: Iterable) -> AnalyticsReport:
    transactions = list(transactions)
    total = len(transactions)

    income_count = 0
    expense_count = 0
    total_income = 0.0
    total_expense = 0.0
    income_by_cat = defaultdict(float)
    expense_by_cat = defaultdict(float)

    for t in transactions:
        amount = parse_amount(getattr(t, "amount", None))
        kind = _value(getattr(t, "transaction_type", None))
        category = _value(getattr(t, "category", None))

        if kind == TransactionTypeEnum.CREDIT.value:
            income_count += 1
            total_income += amount
            income_by_cat[category] += amount
        elif kind == TransactionTypeEnum.EXPENSE.value:
            expense_count += 1
            total_expense += amount
            expense_by_cat[category] += amount

    total_turnover = total_income + total_expense

    categories = [
        CategoryBreakdown(
            category=name,
            income=income_by_cat[name],
            expense=expense_by_cat[name],
            income_percent=percentage(income_by_cat[name], total_income),
            expense_percent=percentage(expense_by_cat[name], total_expense),
        )
        for name in CATEGORIES
    ]

    return AnalyticsReport(
        total_transactions=total,
        income_count=income_count,
        expense_count=expense_count,
        income_count_percent=percentage(income_count, total),
        expense_count_percent=percentage(expense_count, total),
        total_income=total_income,
        total_expense=total_expense,
        total_turnover=total_turnover,
        income_turnover_percent=percentage(total_income, total_turnover),
        expense_turnover_percent=percentage(total_expense, total_turnover),
        categories=categories,
        # zero-amount categories are left out of the display lists
        income_by_category=[c for c in categories if c.income > 0],
        expense_by_category=[c for c in categories if c.expense > 0],
    )
