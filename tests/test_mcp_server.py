"""Tests for the MCP tool functions."""

import json

import pytest

from shared_ledger import mcp_server
from shared_ledger.config import Settings
from shared_ledger.settlement.service import LedgerService


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    """Give every test its own session state with default settings."""
    state = mcp_server.SessionState(service=LedgerService(Settings()))
    monkeypatch.setattr(mcp_server, "_state", state)
    return state


@pytest.fixture
def export_path(tmp_path):
    records = [
        {
            "id": "t1",
            "description": "Groceries",
            "amount": 80,
            "type": "income",
            "date": "2024-06-03",
            "user_id": "u2",
            "owner_profile": {"full_name": "Bob"},
            "transaction_shares": [
                {
                    "id": "s1",
                    "transaction_id": "t1",
                    "shared_with_user_id": "u1",
                    "share_type": "equal",
                    "profiles": {"full_name": "Alice"},
                }
            ],
        }
    ]
    path = tmp_path / "export.json"
    path.write_text(json.dumps(records))
    return path


def test_tools_require_loaded_transactions():
    assert mcp_server.monthly_splits("2024-06").startswith("Error: No transactions")


def test_load_and_split(export_path):
    loaded = mcp_server.load_transactions(str(export_path))
    assert "Loaded 1 transactions involving 2 users" in loaded

    output = mcp_server.monthly_splits("2024-06")

    assert "Bob (u2) must pay $40.00 to Alice (u1)" in output


def test_shared_summary(export_path):
    mcp_server.load_transactions(str(export_path))

    output = mcp_server.shared_summary("u1", "2024-06")

    assert "Bob (u2)" in output
    assert "balance $40.00" in output


def test_load_error_reported(tmp_path):
    output = mcp_server.load_transactions(str(tmp_path / "missing.json"))

    assert output.startswith("Error:")


def test_annual_summary_for_owner(export_path):
    mcp_server.load_transactions(str(export_path))

    bob = mcp_server.annual_summary("u2", 2024)
    alice = mcp_server.annual_summary("u1", 2024)

    assert "Annual results 2024 for Bob (u2)" in bob
    assert "Income: $80.00" in bob
    assert "Income: $0.00" in alice


def test_amounts_use_configured_currency(export_path, monkeypatch):
    state = mcp_server.SessionState(service=LedgerService(Settings(currency_symbol="€")))
    monkeypatch.setattr(mcp_server, "_state", state)
    mcp_server.load_transactions(str(export_path))

    output = mcp_server.monthly_splits("2024-06")

    assert "must pay €40.00 to Alice (u1)" in output
    assert "$" not in output
