"""Tests for the interactive user picker."""

from prompt_toolkit.document import Document

from shared_ledger.settlement.ui import UserCompleter, fuzzy_match, user_label


def test_fuzzy_match_in_order():
    assert fuzzy_match("alc", "alice (u1)")
    assert not fuzzy_match("cla", "alice (u1)")


def test_completions_filter_by_query():
    completer = UserCompleter({"u1": "Alice", "u2": "Bob"})

    completions = list(completer.get_completions(Document("bo"), None))

    assert [c.text for c in completions] == ["Bob (u2)"]


def test_completions_list_everyone_without_query():
    completer = UserCompleter({"u1": "Alice", "u2": "Bob"})

    completions = list(completer.get_completions(Document(""), None))

    assert [c.text for c in completions] == ["Alice (u1)", "Bob (u2)"]


def test_resolve_accepts_label_or_id():
    completer = UserCompleter({"u1": "Alice"})

    assert completer.resolve(user_label("u1", "Alice")) == "u1"
    assert completer.resolve(" u1 ") == "u1"
    assert completer.resolve("Bob") is None
