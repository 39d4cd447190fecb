"""MCP server for Shared Ledger: exposes monthly settlements as tools."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import load_settings
from .exceptions import SharedLedgerError
from .models import Month, Transaction
from .settlement.service import LedgerService

logger = logging.getLogger(__name__)

mcp_app = FastMCP("shared-ledger")

# ---------------------------------------------------------------------------
# Session state: one MCP server process per conversation
# ---------------------------------------------------------------------------

WORKFLOW_INSTRUCTIONS = """\
You are helping users settle shared expenses. Follow this workflow:

1. LOAD: Call load_transactions with the path of the JSON export.
   Tell the user how many transactions and users were found.

2. SPLITS: Call monthly_splits with the month (YYYY-MM) the user asks about.
   Report each user's totals and the settlements ("A must pay B").

3. SUMMARY: If the user asks about one person's balances, call
   shared_summary with their user ID and the month.

4. ANNUAL: For yearly questions call annual_summary with the user ID
   whose own income and expenses should be totalled.

Positive balances are owed to the user the summary is for; negative \
balances are owed by them.\
"""


@dataclass
class SessionState:
    """Holds state between MCP tool calls within a single conversation."""

    service: LedgerService | None = None
    transactions: list[Transaction] = field(default_factory=list)
    users: dict[str, str] = field(default_factory=dict)


_state = SessionState()


def _ensure_service() -> LedgerService:
    """Lazily initialize the LedgerService (loads .env config)."""
    if _state.service is None:
        _state.service = LedgerService(load_settings())
    return _state.service


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_amount(amount) -> str:
    """Format an amount as an accounting-style string in the configured currency."""
    symbol = _ensure_service().settings.currency_symbol
    if amount < 0:
        return f"({symbol}{abs(amount):,.2f})"
    return f"{symbol}{amount:,.2f}"


def _name(user_id: str) -> str:
    return f"{_state.users.get(user_id, 'User')} ({user_id})"


# ---------------------------------------------------------------------------
# MCP Tools
# ---------------------------------------------------------------------------


@mcp_app.tool()
def load_transactions(path: str) -> str:
    """Load a JSON transaction export for the following tool calls.

    Args:
        path: Path to the JSON file.
    """
    try:
        service = _ensure_service()
        _state.transactions = service.load(Path(path))
        _state.users = service.known_users(_state.transactions)

        lines = [
            f"Loaded {len(_state.transactions)} transactions "
            f"involving {len(_state.users)} users:"
        ]
        lines.extend(f"  - {_name(uid)}" for uid in _state.users)
        return "\n".join(lines)
    except SharedLedgerError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to load transactions: {e}"


@mcp_app.tool()
def monthly_splits(month: str) -> str:
    """Per-user totals and net settlements for a month.

    Args:
        month: Month as YYYY-MM.
    """
    try:
        service = _ensure_service()

        if not _state.transactions:
            return "Error: No transactions loaded. Call load_transactions first."

        result = service.monthly_splits(_state.transactions, Month.parse(month))

        if not result.user_totals:
            return f"No transactions in {result.month}."

        lines = [f"Totals for {result.month}:"]
        for uid, totals in result.user_totals.items():
            lines.append(
                f"  - {_name(uid)} | income {_format_amount(totals.income)} "
                f"| expense {_format_amount(totals.expense)}"
            )

        lines.append("")
        if not result.settlements:
            lines.append("No settlements needed.")
        else:
            lines.append("Settlements:")
            for s in result.settlements:
                lines.append(
                    f"  - {_name(s.from_user)} must pay "
                    f"{_format_amount(s.amount)} to {_name(s.to_user)}"
                )

        return "\n".join(lines)
    except SharedLedgerError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to compute splits: {e}"


@mcp_app.tool()
def shared_summary(user_id: str, month: str) -> str:
    """A user's balances with each person they share transactions with.

    Args:
        user_id: The user the balances are relative to.
        month: Month as YYYY-MM.
    """
    try:
        service = _ensure_service()

        if not _state.transactions:
            return "Error: No transactions loaded. Call load_transactions first."

        target = Month.parse(month)
        summaries = service.shared_summary(_state.transactions, user_id, target)

        if not summaries:
            return f"No shared transactions for {_name(user_id)} in {target}."

        lines = [f"Shared with {_name(user_id)} in {target}:"]
        for s in summaries:
            lines.append(
                f"  - {s.user_name} ({s.user_id}) | income {_format_amount(s.total_income)} "
                f"| expense {_format_amount(s.total_expense)} "
                f"| balance {_format_amount(s.balance)}"
            )
        return "\n".join(lines)
    except SharedLedgerError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to compute summary: {e}"


@mcp_app.tool()
def annual_summary(user_id: str, year: int, through_month: int = 12) -> str:
    """Yearly income and expense totals of a user's own transactions.

    Args:
        user_id: The user whose owned transactions are totalled.
        year: Year to summarise.
        through_month: Number of months to average over (1-12).
    """
    try:
        service = _ensure_service()

        if not _state.transactions:
            return "Error: No transactions loaded. Call load_transactions first."

        summary = service.annual_summary(
            _state.transactions, user_id, year, through_month
        )
        return "\n".join(
            [
                f"Annual results {summary.year} for {_name(user_id)}:",
                f"  Income: {_format_amount(summary.income)}",
                f"  Expense: {_format_amount(summary.expense)}",
                f"  Balance: {_format_amount(summary.balance)}",
                f"  Average monthly income: {_format_amount(summary.avg_monthly_income)}",
                f"  Average monthly expense: {_format_amount(summary.avg_monthly_expense)}",
            ]
        )
    except SharedLedgerError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to compute annual summary: {e}"


# ---------------------------------------------------------------------------
# MCP Prompt
# ---------------------------------------------------------------------------


@mcp_app.prompt()
def settlement_workflow() -> str:
    """Orchestration instructions for settling shared expenses."""
    return WORKFLOW_INSTRUCTIONS


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_server():
    """Start the MCP server (stdio transport)."""
    mcp_app.run(transport="stdio")
