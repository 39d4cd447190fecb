"""Core settlement logic for shared transactions.

Every function here is pure: transactions go in, new result models come out.
Participant amounts are derived once per transaction by
``derive_participant_amounts`` and both the global pairwise view and the
per-user view are built from them.
"""

import logging
from collections import defaultdict
from collections.abc import Collection, Iterable
from datetime import date
from decimal import Decimal

from ..models import (
    Month,
    MonthlySplitResult,
    ParticipantAmount,
    Settlement,
    SharedSummary,
    Transaction,
    TransactionShare,
    UserTotals,
)
from .rounding import settle_residual

logger = logging.getLogger(__name__)

DEFAULT_COUNTED_STATUSES: frozenset[str] = frozenset({"accepted"})


def as_month(month: Month | date) -> Month:
    """Accept either a Month or any date inside the month."""
    if isinstance(month, Month):
        return month
    return Month.containing(month)


def month_bounds(month: Month | date) -> tuple[date, date]:
    """Inclusive first and last calendar day of the month."""
    ref = as_month(month)
    return ref.start, ref.end


def transactions_in_month(
    transactions: Iterable[Transaction], month: Month | date
) -> list[Transaction]:
    """Transactions dated within the month, boundaries included."""
    ref = as_month(month)
    return [tx for tx in transactions if tx.date in ref]


def counted_shares(
    transaction: Transaction,
    counted_statuses: Collection[str] = DEFAULT_COUNTED_STATUSES,
) -> list[TransactionShare]:
    """Shares whose status takes part in the money math."""
    return [s for s in transaction.transaction_shares if s.status in counted_statuses]


def compute_share_amount(
    transaction: Transaction, share: TransactionShare, share_count: int
) -> Decimal:
    """
    Derive one participant's portion of a transaction.

    Args:
        transaction: The parent transaction
        share: The participant's share
        share_count: Number of counted shares on the transaction

    Returns:
        The participant's amount (not rounded)
    """
    value = share.share_value if share.share_value is not None else Decimal("0")

    if share.share_type == "equal":
        # +1 for the owner's own slice
        return transaction.amount / (share_count + 1)
    if share.share_type == "percentage":
        return value / 100 * transaction.amount
    return value


def derive_participant_amounts(
    transaction: Transaction,
    *,
    counted_statuses: Collection[str] = DEFAULT_COUNTED_STATUSES,
    quantum: Decimal | None = None,
) -> list[ParticipantAmount]:
    """
    Split a transaction into per-participant amounts.

    Returns the counted participants in share order followed by the owner,
    whose amount is the residual. The amounts always sum to the transaction
    amount.
    """
    shares = counted_shares(transaction, counted_statuses)
    participants = [
        ParticipantAmount(
            user_id=share.shared_with_user_id,
            amount=compute_share_amount(transaction, share, len(shares)),
        )
        for share in shares
    ]
    return settle_residual(transaction.amount, participants, transaction.user_id, quantum)


def compute_monthly_split_totals(
    transactions: Iterable[Transaction],
    month: Month | date,
    *,
    counted_statuses: Collection[str] = DEFAULT_COUNTED_STATUSES,
    quantum: Decimal | None = None,
) -> MonthlySplitResult:
    """
    Compute per-user totals and net pairwise settlements for a month.

    Steps:
    1. Keep transactions dated within the month
    2. Attribute every participant's amount (owner included) to their
       income or expense total
    3. Accumulate directed debts: on an expense the participant owes the
       owner; on an income the owner owes the participant
    4. Net each pair and emit one settlement per pair with a positive balance

    Args:
        transactions: Transactions with their shares
        month: Target month, or any date inside it
        counted_statuses: Share statuses that take part
        quantum: Optional rounding step for participant shares

    Returns:
        Totals keyed by user ID and settlements sorted by (from_user, to_user)
    """
    ref = as_month(month)
    totals: dict[str, UserTotals] = {}
    owed: defaultdict[str, defaultdict[str, Decimal]] = defaultdict(
        lambda: defaultdict(Decimal)
    )

    included = transactions_in_month(transactions, ref)
    for tx in included:
        parts = derive_participant_amounts(
            tx, counted_statuses=counted_statuses, quantum=quantum
        )

        for part in parts:
            user_totals = totals.setdefault(part.user_id, UserTotals())
            if tx.type == "income":
                user_totals.income += part.amount
            else:
                user_totals.expense += part.amount

        for part in parts:
            if part.is_owner:
                continue
            if tx.type == "expense":
                owed[part.user_id][tx.user_id] += part.amount
            else:
                owed[tx.user_id][part.user_id] += part.amount

    settlements = []
    for debtor, creditors in owed.items():
        for creditor, amount in creditors.items():
            net = amount - owed.get(creditor, {}).get(debtor, Decimal("0"))
            if net > 0:
                settlements.append(
                    Settlement(from_user=debtor, to_user=creditor, amount=net)
                )
    settlements.sort(key=lambda s: (s.from_user, s.to_user))

    logger.debug(
        f"{ref}: {len(included)} transactions, {len(totals)} users, "
        f"{len(settlements)} settlements"
    )

    return MonthlySplitResult(month=ref, user_totals=totals, settlements=settlements)


def compute_monthly_shared_summary_for_user(
    transactions: Iterable[Transaction],
    current_user_id: str,
    month: Month | date,
    *,
    counted_statuses: Collection[str] = DEFAULT_COUNTED_STATUSES,
    quantum: Decimal | None = None,
    unknown_user_name: str = "User",
) -> list[SharedSummary]:
    """
    Summarise the current user's shared activity per counterpart.

    Only (owner, participant) pairs that include the current user count.
    The counterpart's share amount goes into their income or expense total,
    and the balance moves by that amount:

    - current user owns an expense: counterpart owes them (+)
    - current user owns an income: they owe the counterpart (-)
    - current user shares an expense: they owe the owner (-)
    - current user shares an income: the owner owes them (+)

    Args:
        transactions: Transactions with their shares
        current_user_id: The user the balances are relative to
        month: Target month, or any date inside it
        counted_statuses: Share statuses that take part
        quantum: Optional rounding step for participant shares
        unknown_user_name: Name used when no profile data is available

    Returns:
        One summary per counterpart, sorted by user ID
    """
    summaries: dict[str, SharedSummary] = {}

    for tx in transactions_in_month(transactions, month):
        is_owner = tx.user_id == current_user_id
        profiles = {s.shared_with_user_id: s.profiles for s in tx.transaction_shares}

        for part in derive_participant_amounts(
            tx, counted_statuses=counted_statuses, quantum=quantum
        ):
            if part.is_owner:
                continue
            if is_owner:
                other_id = part.user_id
                profile = profiles.get(other_id)
                sign = 1 if tx.type == "expense" else -1
            elif part.user_id == current_user_id:
                other_id = tx.user_id
                profile = tx.owner_profile
                sign = 1 if tx.type == "income" else -1
            else:
                continue

            summary = summaries.get(other_id)
            if summary is None:
                name = (
                    profile.display_name(unknown_user_name)
                    if profile
                    else unknown_user_name
                )
                summary = summaries[other_id] = SharedSummary(
                    user_id=other_id, user_name=name
                )

            if tx.type == "income":
                summary.total_income += part.amount
            else:
                summary.total_expense += part.amount
            summary.balance += sign * part.amount

    return [summaries[uid] for uid in sorted(summaries)]
