"""Tests for owned-transaction reports."""

from datetime import date
from decimal import Decimal

import pytest

from shared_ledger.models import Transaction
from shared_ledger.reports import (
    compute_annual_summary,
    compute_monthly_breakdown,
    compute_period_totals,
)


def make_tx(
    id: str, amount: str, type: str, on: date, user_id: str = "u1"
) -> Transaction:
    """Create an unshared transaction for testing."""
    return Transaction(
        id=id, description=id, amount=Decimal(amount), type=type, user_id=user_id, date=on
    )


@pytest.fixture
def transactions():
    return [
        make_tx("salary-jan", "3000", "income", date(2024, 1, 5)),
        make_tx("rent-jan", "1200", "expense", date(2024, 1, 31)),
        make_tx("salary-jun", "3000", "income", date(2024, 6, 5)),
        make_tx("food-jun", "450.75", "expense", date(2024, 6, 12)),
        make_tx("last-year", "999", "expense", date(2023, 12, 31)),
    ]


class TestPeriodTotals:
    def test_sums_within_range(self, transactions):
        totals = compute_period_totals(transactions, "u1", date(2024, 1, 1), date(2024, 1, 31))

        assert totals.income == Decimal("3000")
        assert totals.expense == Decimal("1200")
        assert totals.balance == Decimal("1800")
        assert totals.transaction_count == 2

    def test_empty_range(self, transactions):
        totals = compute_period_totals(transactions, "u1", date(2024, 3, 1), date(2024, 3, 31))

        assert totals.transaction_count == 0
        assert totals.balance == Decimal("0")

    def test_other_owners_excluded(self, transactions):
        transactions.append(
            make_tx("bob-salary", "5000", "income", date(2024, 1, 10), user_id="u2")
        )

        mine = compute_period_totals(transactions, "u1", date(2024, 1, 1), date(2024, 1, 31))
        theirs = compute_period_totals(transactions, "u2", date(2024, 1, 1), date(2024, 1, 31))

        assert mine.income == Decimal("3000")
        assert mine.transaction_count == 2
        assert theirs.income == Decimal("5000")
        assert theirs.expense == Decimal("0")
        assert theirs.transaction_count == 1


class TestMonthlyBreakdown:
    def test_twelve_months(self, transactions):
        breakdown = compute_monthly_breakdown(transactions, "u1", 2024)

        assert len(breakdown) == 12
        assert breakdown[0].start == date(2024, 1, 1)
        assert breakdown[5].expense == Decimal("450.75")
        assert breakdown[11].transaction_count == 0


class TestAnnualSummary:
    def test_totals_and_averages(self, transactions):
        summary = compute_annual_summary(transactions, "u1", 2024, through_month=6)

        assert summary.income == Decimal("6000")
        assert summary.expense == Decimal("1650.75")
        assert summary.balance == Decimal("4349.25")
        assert summary.months_elapsed == 6
        assert summary.avg_monthly_income == Decimal("1000")
        assert summary.avg_monthly_expense == Decimal("275.125")

    def test_invalid_month_count(self, transactions):
        with pytest.raises(ValueError, match="through_month"):
            compute_annual_summary(transactions, "u1", 2024, through_month=0)

    def test_only_counts_owned_transactions(self):
        rent = Transaction(
            id="t1",
            description="Rent",
            amount=Decimal("100"),
            type="expense",
            user_id="u1",
            date=date(2024, 3, 1),
            transaction_shares=[
                {
                    "id": "s1",
                    "transaction_id": "t1",
                    "shared_with_user_id": "u2",
                    "share_type": "equal",
                }
            ],
        )
        salary = make_tx("t2", "5000", "income", date(2024, 3, 25), user_id="u2")

        alice = compute_annual_summary([rent, salary], "u1", 2024)
        bob = compute_annual_summary([rent, salary], "u2", 2024)

        assert alice.user_id == "u1"
        assert alice.income == Decimal("0")
        assert alice.expense == Decimal("100")
        assert bob.income == Decimal("5000")
        assert bob.expense == Decimal("0")
