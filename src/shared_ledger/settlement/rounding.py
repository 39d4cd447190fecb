"""Money quantisation helpers for participant amounts."""

import logging
from decimal import ROUND_HALF_UP, Decimal

from ..models import ParticipantAmount

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def quantize_money(amount: Decimal, quantum: Decimal = CENT) -> Decimal:
    """
    Round an amount to the given quantum.
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Amount as Decimal
        quantum: Smallest currency step, e.g. Decimal("0.01")

    Returns:
        Rounded amount
    """
    return amount.quantize(quantum, rounding=ROUND_HALF_UP)


def settle_residual(
    total: Decimal,
    participants: list[ParticipantAmount],
    owner_id: str,
    quantum: Decimal | None = None,
) -> list[ParticipantAmount]:
    """
    Round participant shares and give the owner whatever is left.

    Steps:
    1. Round each participant's share independently (when a quantum is set)
    2. Sum the rounded shares
    3. Owner residual = total - sum, so the parts always add up to the total

    The residual is not clamped: shares that exceed the total leave the owner
    with a negative amount.

    Args:
        total: The transaction amount
        participants: Non-owner shares in order
        owner_id: Owner's user ID
        quantum: Optional rounding step

    Returns:
        Participants followed by the owner
    """
    if quantum is not None:
        participants = [
            part.model_copy(update={"amount": quantize_money(part.amount, quantum)})
            for part in participants
        ]

    shared_total = sum((part.amount for part in participants), Decimal("0"))
    residual = total - shared_total

    if residual < 0:
        logger.debug(
            f"Shares total {shared_total} exceed amount {total}; "
            f"owner {owner_id} keeps {residual}"
        )

    return [*participants, ParticipantAmount(user_id=owner_id, amount=residual, is_owner=True)]
