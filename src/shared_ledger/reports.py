"""Income/expense aggregation over one user's owned transactions."""

from collections.abc import Iterable
from datetime import date

from .models import AnnualSummary, Month, PeriodTotals, Transaction


def compute_period_totals(
    transactions: Iterable[Transaction], user_id: str, start: date, end: date
) -> PeriodTotals:
    """Sum raw income and expense for the user's transactions dated in [start, end]."""
    totals = PeriodTotals(start=start, end=end)
    for tx in transactions:
        if tx.user_id != user_id:
            continue
        if not start <= tx.date <= end:
            continue
        if tx.type == "income":
            totals.income += tx.amount
        else:
            totals.expense += tx.amount
        totals.transaction_count += 1
    return totals


def compute_monthly_breakdown(
    transactions: Iterable[Transaction], user_id: str, year: int
) -> list[PeriodTotals]:
    """Totals for each of the twelve months of a year."""
    transactions = list(transactions)
    breakdown = []
    for number in range(1, 13):
        month = Month(year=year, month=number)
        breakdown.append(
            compute_period_totals(transactions, user_id, month.start, month.end)
        )
    return breakdown


def compute_annual_summary(
    transactions: Iterable[Transaction],
    user_id: str,
    year: int,
    through_month: int = 12,
) -> AnnualSummary:
    """
    Totals of a user's owned transactions for a year with monthly averages.

    Averages divide by the number of months considered (``through_month``),
    so a summary taken in June averages over six months.
    """
    if not 1 <= through_month <= 12:
        raise ValueError(f"through_month must be between 1 and 12, got {through_month}")

    totals = compute_period_totals(
        transactions, user_id, date(year, 1, 1), date(year, 12, 31)
    )

    return AnnualSummary(
        user_id=user_id,
        year=year,
        income=totals.income,
        expense=totals.expense,
        balance=totals.balance,
        months_elapsed=through_month,
        avg_monthly_income=totals.income / through_month,
        avg_monthly_expense=totals.expense / through_month,
    )
