"""Shared Ledger - Split shared transactions and settle monthly balances."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .models import (
    Month,
    MonthlySplitResult,
    Settlement,
    SharedSummary,
    Transaction,
    TransactionShare,
    UserTotals,
)
from .settlement.engine import (
    compute_monthly_shared_summary_for_user,
    compute_monthly_split_totals,
    derive_participant_amounts,
)
from .settlement.service import LedgerService

__all__ = [
    "Settings",
    "load_settings",
    "Month",
    "MonthlySplitResult",
    "Settlement",
    "SharedSummary",
    "Transaction",
    "TransactionShare",
    "UserTotals",
    "compute_monthly_shared_summary_for_user",
    "compute_monthly_split_totals",
    "derive_participant_amounts",
    "LedgerService",
]
