"""Service layer that composes loading, settlement and reporting.

The engine functions are pure and take their options explicitly; this module
binds them to the configured settings.
"""

import logging
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from ..config import Settings
from ..exceptions import UnknownUserError
from ..models import (
    AnnualSummary,
    Month,
    MonthlySplitResult,
    PeriodTotals,
    SharedSummary,
    Transaction,
)
from ..reports import compute_annual_summary, compute_monthly_breakdown
from .engine import compute_monthly_shared_summary_for_user, compute_monthly_split_totals
from .loader import load_transactions

logger = logging.getLogger(__name__)


class LedgerService:
    """Service for computing settlements from a transaction snapshot."""

    def __init__(self, settings: Settings):
        """Initialize the ledger service."""
        self.settings = settings

    def load(self, path: Path | None = None) -> list[Transaction]:
        """
        Load transactions from a JSON export.

        Falls back to the configured transactions_path when no path is given.
        """
        path = path or self.settings.transactions_path
        if path is None:
            raise ValueError(
                "No transactions file given and SHARED_LEDGER_TRANSACTIONS_PATH is not set"
            )
        return load_transactions(path, percentage_scale=self.settings.percentage_scale)

    def monthly_splits(
        self, transactions: Iterable[Transaction], month: Month | date
    ) -> MonthlySplitResult:
        """Per-user totals and net settlements for the month."""
        result = compute_monthly_split_totals(
            transactions,
            month,
            counted_statuses=self.settings.counted_statuses,
            quantum=self.settings.money_quantum,
        )
        logger.info(
            f"Computed {len(result.settlements)} settlements "
            f"across {len(result.user_totals)} users for {result.month}"
        )
        return result

    def shared_summary(
        self, transactions: Iterable[Transaction], user_id: str, month: Month | date
    ) -> list[SharedSummary]:
        """
        Per-counterpart summary relative to a user.

        Raises:
            UnknownUserError: If the user appears in none of the transactions
        """
        transactions = list(transactions)
        if user_id not in self.known_users(transactions):
            raise UnknownUserError(user_id)

        summaries = compute_monthly_shared_summary_for_user(
            transactions,
            user_id,
            month,
            counted_statuses=self.settings.counted_statuses,
            quantum=self.settings.money_quantum,
            unknown_user_name=self.settings.unknown_user_name,
        )
        logger.info(f"Computed shared summary for {user_id}: {len(summaries)} counterparts")
        return summaries

    def annual_summary(
        self,
        transactions: Iterable[Transaction],
        user_id: str,
        year: int,
        through_month: int = 12,
    ) -> AnnualSummary:
        """
        Yearly totals of a user's owned transactions with monthly averages.

        Raises:
            UnknownUserError: If the user appears in none of the transactions
        """
        transactions = list(transactions)
        if user_id not in self.known_users(transactions):
            raise UnknownUserError(user_id)
        return compute_annual_summary(transactions, user_id, year, through_month)

    def monthly_breakdown(
        self, transactions: Iterable[Transaction], user_id: str, year: int
    ) -> list[PeriodTotals]:
        """Twelve monthly totals of a user's owned transactions."""
        return compute_monthly_breakdown(transactions, user_id, year)

    def known_users(self, transactions: Iterable[Transaction]) -> dict[str, str]:
        """
        Map every owner and participant to a display name.

        Profile data is taken from the first record that has it.

        Returns:
            Display names keyed by user ID, sorted by user ID
        """
        fallback = self.settings.unknown_user_name
        names: dict[str, str] = {}

        def remember(user_id: str, profile) -> None:
            if profile is not None and names.get(user_id, fallback) == fallback:
                names[user_id] = profile.display_name(fallback)
            else:
                names.setdefault(user_id, fallback)

        for tx in transactions:
            remember(tx.user_id, tx.owner_profile)
            for share in tx.transaction_shares:
                remember(share.shared_with_user_id, share.profiles)

        return dict(sorted(names.items()))
