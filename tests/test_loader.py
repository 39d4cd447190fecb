"""Tests for loading transaction exports."""

import json
from decimal import Decimal

import pytest

from shared_ledger.exceptions import ConfigurationError, TransactionLoadError
from shared_ledger.settlement.loader import (
    load_transactions,
    normalize_percentage_scale,
    parse_transactions,
)


@pytest.fixture
def records():
    """Transaction records as exported by the backend."""
    return [
        {
            "id": "t1",
            "description": "Groceries",
            "amount": 100,
            "type": "expense",
            "category_id": "c1",
            "date": "2024-06-10",
            "user_id": "u1",
            "transaction_shares": [
                {
                    "id": "s1",
                    "transaction_id": "t1",
                    "shared_with_user_id": "u2",
                    "share_type": "percentage",
                    "share_value": 0.25,
                    "status": "accepted",
                    "profiles": {"full_name": "Bob", "email": "bob@x.com"},
                }
            ],
        },
        {
            "id": "t2",
            "description": "Salary",
            "amount": 2500.5,
            "type": "income",
            "category_id": None,
            "date": "2024-06-28",
            "user_id": "u2",
        },
    ]


class TestParseTransactions:
    """Tests for parse_transactions."""

    def test_parses_list_of_records(self, records):
        transactions = parse_transactions(records)

        assert [tx.id for tx in transactions] == ["t1", "t2"]
        assert transactions[1].transaction_shares == []
        assert transactions[0].transaction_shares[0].profiles.full_name == "Bob"

    def test_parses_wrapped_records(self, records):
        transactions = parse_transactions({"transactions": records})

        assert len(transactions) == 2

    def test_fraction_scale_converted_to_percent(self, records):
        transactions = parse_transactions(records, percentage_scale="fraction")

        assert transactions[0].transaction_shares[0].share_value == Decimal("25")

    def test_percent_scale_left_alone(self, records):
        transactions = parse_transactions(records)

        assert transactions[0].transaction_shares[0].share_value == Decimal("0.25")

    def test_invalid_shape_raises_load_error(self, records):
        records[0]["type"] = "transfer"

        with pytest.raises(TransactionLoadError, match="Invalid transaction data"):
            parse_transactions(records, source="export.json")

    def test_self_share_raises_load_error(self, records):
        records[0]["transaction_shares"][0]["shared_with_user_id"] = "u1"

        with pytest.raises(TransactionLoadError):
            parse_transactions(records)


class TestNormalizePercentageScale:
    """Tests for normalize_percentage_scale."""

    def test_does_not_mutate_input(self, records):
        transactions = parse_transactions(records)

        converted = normalize_percentage_scale(transactions, "fraction")

        assert transactions[0].transaction_shares[0].share_value == Decimal("0.25")
        assert converted[0].transaction_shares[0].share_value == Decimal("25")

    def test_unknown_scale_rejected(self, records):
        with pytest.raises(ConfigurationError, match="Unknown percentage scale"):
            normalize_percentage_scale(parse_transactions(records), "basis_points")


class TestLoadTransactions:
    """Tests for reading export files."""

    def test_reads_json_file(self, tmp_path, records):
        path = tmp_path / "export.json"
        path.write_text(json.dumps(records))

        transactions = load_transactions(path)

        assert transactions[1].amount == Decimal("2500.5")

    def test_missing_file(self, tmp_path):
        path = tmp_path / "missing.json"

        with pytest.raises(TransactionLoadError, match="Cannot read") as exc_info:
            load_transactions(path)

        assert exc_info.value.source == str(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(TransactionLoadError, match="not valid JSON"):
            load_transactions(path)
