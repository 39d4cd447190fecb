"""Configuration management for Shared Ledger."""

from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SHARED_LEDGER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Share statuses that take part in totals and settlements
    counted_share_statuses: list[Literal["pending", "accepted", "declined"]] = [
        "accepted"
    ]

    # Scale of stored percentage share values: 0-100 or 0-1
    percentage_scale: Literal["percent", "fraction"] = "percent"

    # Participant shares are rounded to this quantum; None keeps full precision
    money_quantum: Decimal | None = Decimal("0.01")

    # Display
    currency_symbol: str = "$"
    unknown_user_name: str = "User"

    # Default export used when the CLI is called without a file
    transactions_path: Path | None = None

    @property
    def counted_statuses(self) -> frozenset[str]:
        """Counted share statuses as a frozenset for the engine."""
        return frozenset(self.counted_share_statuses)


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ValueError(
            f"Failed to load settings. Check the SHARED_LEDGER_* variables in "
            f"your environment or .env file. See .env.example for reference.\n"
            f"Error: {e}"
        ) from e
