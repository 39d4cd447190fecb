"""Pydantic domain models for Shared Ledger."""

import calendar
from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

TransactionType = Literal["income", "expense"]
ShareType = Literal["equal", "percentage", "fixed_amount"]
ShareStatus = Literal["pending", "accepted", "declined"]

# ============================================================================
# Input Models
# ============================================================================


class ParticipantProfile(BaseModel):
    """Denormalized display data for a user."""

    full_name: str | None = None
    email: str | None = None

    def display_name(self, fallback: str = "User") -> str:
        """Full name, else the local part of the email, else the fallback."""
        if self.full_name:
            return self.full_name
        if self.email:
            return self.email.split("@")[0]
        return fallback


class TransactionShare(BaseModel):
    """One participant's stake in a transaction."""

    id: str
    transaction_id: str
    shared_with_user_id: str
    share_type: ShareType
    share_value: Decimal | None = None  # percentage in 0-100, or a fixed amount
    status: ShareStatus = "accepted"
    profiles: ParticipantProfile | None = None


class Transaction(BaseModel):
    """An income or expense recorded by its owner, optionally shared."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    amount: Decimal = Field(gt=0)
    type: TransactionType
    user_id: str
    date: date
    category_id: str | None = None
    transaction_shares: list[TransactionShare] = Field(default_factory=list)
    owner_profile: ParticipantProfile | None = None

    @model_validator(mode="after")
    def _check_participants(self) -> "Transaction":
        seen: set[str] = set()
        for share in self.transaction_shares:
            participant = share.shared_with_user_id
            if participant == self.user_id:
                raise ValueError(
                    f"Transaction {self.id} is shared with its own owner {participant}"
                )
            if participant in seen:
                raise ValueError(
                    f"Transaction {self.id} has more than one share for {participant}"
                )
            seen.add(participant)
        return self


class Month(BaseModel):
    """A calendar month reference."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)

    @classmethod
    def parse(cls, value: str) -> "Month":
        """Parse a ``YYYY-MM`` string."""
        try:
            year, month = value.strip().split("-")
            return cls(year=int(year), month=int(month))
        except ValueError as e:
            raise ValueError(f"Invalid month '{value}', expected YYYY-MM") from e

    @classmethod
    def containing(cls, day: date) -> "Month":
        """The month that contains the given date."""
        return cls(year=day.year, month=day.month)

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


# ============================================================================
# Result Models
# ============================================================================


class ParticipantAmount(BaseModel):
    """A participant's derived portion of a single transaction."""

    user_id: str
    amount: Decimal
    is_owner: bool = False


class UserTotals(BaseModel):
    """Income and expense attributed to one user."""

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")


class Settlement(BaseModel):
    """A net debt: from_user owes to_user the amount."""

    from_user: str
    to_user: str
    amount: Decimal = Field(gt=0)


class MonthlySplitResult(BaseModel):
    """Per-user totals and net settlements for one month."""

    month: Month
    user_totals: dict[str, UserTotals] = Field(default_factory=dict)
    settlements: list[Settlement] = Field(default_factory=list)


class SharedSummary(BaseModel):
    """A counterpart's totals relative to the current user.

    A positive balance means the counterpart owes the current user; a negative
    balance means the current user owes the counterpart.
    """

    user_id: str
    user_name: str
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class PeriodTotals(BaseModel):
    """Raw income/expense totals over a date range."""

    start: date
    end: date
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    transaction_count: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


class AnnualSummary(BaseModel):
    """Yearly totals with monthly averages."""

    user_id: str
    year: int
    income: Decimal
    expense: Decimal
    balance: Decimal
    months_elapsed: int
    avg_monthly_income: Decimal
    avg_monthly_expense: Decimal
