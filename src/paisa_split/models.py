"""Pydantic domain models for paisa-split."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .money import Money


def new_record_id() -> str:
    """Random, collision-resistant identifier for new ledger records."""
    return uuid.uuid4().hex


# ============================================================================
# Split Models
# ============================================================================


class SplitMethod(str, Enum):
    """How an expense total is divided between participants."""

    EQUAL = "equal"
    PERCENTAGE = "percentage"
    EXACT = "exact"

    @property
    def display_name(self) -> str:
        return {
            SplitMethod.EQUAL: "Equally",
            SplitMethod.PERCENTAGE: "By Percentage",
            SplitMethod.EXACT: "Exact Amounts",
        }[self]


class SplitResult(BaseModel):
    """Allocation of one expense total across participants."""

    model_config = ConfigDict(frozen=True)

    method: SplitMethod
    total: Money
    shares: dict[str, Money]

    @property
    def is_valid(self) -> bool:
        """True when the shares add up to the total exactly."""
        return Money.total(self.shares.values()) == self.total

    @property
    def participant_ids(self) -> list[str]:
        return list(self.shares)

    @property
    def participant_count(self) -> int:
        return len(self.shares)

    def share_for(self, participant_id: str) -> Money:
        """Share of a participant, zero if they aren't part of the split."""
        return self.shares.get(participant_id, Money.ZERO)

    def has_participant(self, participant_id: str) -> bool:
        return participant_id in self.shares


# ============================================================================
# Ledger Models
# ============================================================================


class ExpenseShare(BaseModel):
    """`payer_id` is owed `amount` by `member_id` for one expense line."""

    model_config = ConfigDict(frozen=True)

    payer_id: str
    member_id: str
    amount: Money
    expense_id: str | None = None


class SettlementRecord(BaseModel):
    """A recorded payment reducing `from_id`'s debt to `to_id`."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_record_id)
    from_id: str
    to_id: str
    amount: Money
    created_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def _check_payment(self) -> "SettlementRecord":
        if self.from_id == self.to_id:
            raise ValueError("A settlement needs two different members")
        if not self.amount.is_positive:
            raise ValueError(f"Settlement amount must be positive, got {self.amount}")
        return self


class Transfer(BaseModel):
    """A suggested payment of `amount` from `from_id` to `to_id`."""

    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    amount: Money

    @model_validator(mode="after")
    def _check_transfer(self) -> "Transfer":
        if self.from_id == self.to_id:
            raise ValueError("A transfer needs two different members")
        if not self.amount.is_positive:
            raise ValueError(f"Transfer amount must be positive, got {self.amount}")
        return self

    def to_settlement(self) -> SettlementRecord:
        """Turn an accepted suggestion into a settlement record."""
        return SettlementRecord(
            from_id=self.from_id, to_id=self.to_id, amount=self.amount
        )

    def __str__(self) -> str:
        return f"{self.from_id} → {self.to_id}: {self.amount}"


class Expense(BaseModel):
    """A shared expense paid by one member and split across participants.

    Editing an expense replaces its split (and therefore its shares) with a
    fresh allocation; shares are never adjusted in place.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_record_id)
    description: str
    payer_id: str
    split: SplitResult
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def total(self) -> Money:
        return self.split.total

    def shares(self) -> list[ExpenseShare]:
        """One ExpenseShare per participant, in participant order."""
        return [
            ExpenseShare(
                payer_id=self.payer_id,
                member_id=member_id,
                amount=amount,
                expense_id=self.id,
            )
            for member_id, amount in self.split.shares.items()
        ]


class Ledger(BaseModel):
    """Every expense and settlement of a group."""

    expenses: list[Expense] = Field(default_factory=list)
    settlements: list[SettlementRecord] = Field(default_factory=list)


# ============================================================================
# Balance Models
# ============================================================================


class GroupBalanceSummary(BaseModel):
    """Who is owed and who owes within a group."""

    model_config = ConfigDict(frozen=True)

    creditors: dict[str, Money]  # amounts they are owed
    debtors: dict[str, Money]  # magnitudes of what they owe
    total_to_receive: Money
    total_owed: Money

    @property
    def is_settled(self) -> bool:
        return self.total_owed.is_zero and self.total_to_receive.is_zero

    def net_balance_for(self, member_id: str) -> Money:
        """Signed net balance: positive for creditors, negative for debtors."""
        if member_id in self.creditors:
            return self.creditors[member_id]
        if member_id in self.debtors:
            return -self.debtors[member_id]
        return Money.ZERO
