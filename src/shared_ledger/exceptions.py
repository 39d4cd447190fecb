"""Custom exceptions for Shared Ledger."""


class SharedLedgerError(Exception):
    """Base exception for all Shared Ledger errors."""

    pass


class ConfigurationError(SharedLedgerError):
    """Raised when configuration is invalid or missing."""

    pass


class TransactionLoadError(SharedLedgerError):
    """Raised when a transaction export cannot be read or validated."""

    def __init__(self, source: str, message: str | None = None):
        self.source = source
        super().__init__(message or f"Failed to load transactions from {source}")


class UnknownUserError(SharedLedgerError):
    """Raised when a requested user does not appear in any transaction."""

    def __init__(self, user_id: str, message: str | None = None):
        self.user_id = user_id
        super().__init__(
            message or f"User {user_id} does not appear in any loaded transaction"
        )
