"""Interactive UI components for picking a user."""

import logging
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

logger = logging.getLogger(__name__)


def user_label(user_id: str, name: str) -> str:
    """Label shown in the picker, e.g. 'Alice (u1)'."""
    return f"{name} ({user_id})"


class UserCompleter(Completer):
    """Fuzzy search completer for known users."""

    def __init__(self, users: dict[str, str]):
        """Initialize the completer with user IDs mapped to display names."""
        self.label_to_id = {
            user_label(user_id, name): user_id for user_id, name in users.items()
        }

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        query = document.text.lower()

        for label in self.label_to_id:
            if not query or fuzzy_match(query, label.lower()):
                yield Completion(
                    text=label,
                    start_position=-len(document.text),
                    display=label,
                )

    def resolve(self, text: str) -> str | None:
        """Map a label or a raw user ID back to the user ID."""
        text = text.strip()
        if text in self.label_to_id:
            return self.label_to_id[text]
        if text in self.label_to_id.values():
            return text
        return None


def fuzzy_match(query: str, text: str) -> bool:
    """
    Fuzzy match: all characters in query must appear in order in text.

    Example:
        query="alc" matches "alice (u1)"
    """
    query_idx = 0
    for char in text:
        if query_idx < len(query) and char == query[query_idx]:
            query_idx += 1
    return query_idx == len(query)


def select_user_interactive(users: dict[str, str]) -> str | None:
    """
    Interactive user selection with fuzzy search.

    Args:
        users: Display names keyed by user ID

    Returns:
        Selected user ID, or None to cancel
    """
    if not users:
        print("\n⚠️  No users found")
        return None

    print("\n👥 Whose balances should be shown?")
    print("   Type to search, press Enter to confirm, Ctrl+C to cancel\n")

    completer = UserCompleter(users)
    session: PromptSession[str] = PromptSession(completer=completer)

    try:
        while True:
            result = session.prompt("User: ", complete_while_typing=True)

            if not result:
                return None

            user_id = completer.resolve(result)
            if user_id:
                logger.info(f"User selected: {user_id}")
                return user_id

            print("❌ Unknown user. Please select from the list or press Tab to complete.")

    except KeyboardInterrupt:
        print("\n⏭️  Cancelled")
        return None
    except EOFError:
        return None
