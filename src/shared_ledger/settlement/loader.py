"""Load transaction exports into validated models."""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Literal

from pydantic import TypeAdapter, ValidationError

from ..exceptions import ConfigurationError, TransactionLoadError
from ..models import Transaction

logger = logging.getLogger(__name__)

PercentageScale = Literal["percent", "fraction"]

_transactions_adapter = TypeAdapter(list[Transaction])


def normalize_percentage_scale(
    transactions: Iterable[Transaction], scale: str
) -> list[Transaction]:
    """
    Convert percentage share values to the canonical 0-100 scale.

    Exports that store percentages as 0-1 fractions are multiplied by 100.
    The input transactions are left untouched.

    Args:
        transactions: Validated transactions
        scale: "percent" (already 0-100) or "fraction" (0-1)

    Returns:
        Transactions with 0-100 percentage values
    """
    if scale == "percent":
        return list(transactions)
    if scale != "fraction":
        raise ConfigurationError(
            f"Unknown percentage scale '{scale}' (expected 'percent' or 'fraction')"
        )

    converted = []
    for tx in transactions:
        shares = [
            share.model_copy(update={"share_value": share.share_value * 100})
            if share.share_type == "percentage" and share.share_value is not None
            else share
            for share in tx.transaction_shares
        ]
        converted.append(tx.model_copy(update={"transaction_shares": shares}))
    return converted


def parse_transactions(
    data: Any, *, percentage_scale: PercentageScale = "percent", source: str = "<data>"
) -> list[Transaction]:
    """
    Validate raw transaction records.

    Accepts either a list of records or an object with a "transactions" key.

    Raises:
        TransactionLoadError: If the records don't match the transaction shape
    """
    if isinstance(data, dict) and "transactions" in data:
        data = data["transactions"]

    try:
        transactions = _transactions_adapter.validate_python(data)
    except ValidationError as e:
        raise TransactionLoadError(
            source, f"Invalid transaction data in {source}:\n{e}"
        ) from e

    return normalize_percentage_scale(transactions, percentage_scale)


def load_transactions(
    path: Path, *, percentage_scale: PercentageScale = "percent"
) -> list[Transaction]:
    """
    Read a JSON transaction export.

    Args:
        path: JSON file with transactions and their nested transaction_shares
        percentage_scale: Scale of stored percentage share values

    Returns:
        Validated transactions

    Raises:
        TransactionLoadError: If the file is missing, not JSON, or malformed
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TransactionLoadError(str(path), f"Cannot read {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise TransactionLoadError(str(path), f"{path} is not valid JSON: {e}") from e

    transactions = parse_transactions(
        data, percentage_scale=percentage_scale, source=str(path)
    )
    logger.info(f"Loaded {len(transactions)} transactions from {path}")
    return transactions
