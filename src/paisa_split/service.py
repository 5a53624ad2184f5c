"""Service layer that keeps a group ledger and drives the split engine.

The allocator, aggregator and netter are pure functions; this module owns the
mutable part: recording expenses and settlements, superseding an expense when
it is edited, and turning accepted transfer suggestions into settlements.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from .allocator import allocate
from .balances import compute_net_balances, summarize_balances
from .config import Settings
from .exceptions import InvalidArgumentError, RecordNotFoundError
from .models import (
    Expense,
    ExpenseShare,
    GroupBalanceSummary,
    Ledger,
    SettlementRecord,
    SplitMethod,
    Transfer,
)
from .money import Money
from .netting import suggest_transfers, validate_transfers

logger = logging.getLogger(__name__)


def load_ledger(path: Path) -> Ledger:
    """
    Read a ledger from a JSON file.

    Args:
        path: Ledger file location

    Returns:
        The stored ledger, or an empty one if the file doesn't exist yet
    """
    if not path.exists():
        logger.debug(f"No ledger at {path}, starting empty")
        return Ledger()
    return Ledger.model_validate_json(path.read_text(encoding="utf-8"))


def save_ledger(ledger: Ledger, path: Path) -> None:
    """Write a ledger as JSON; money is stored as integer paise."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(ledger.model_dump_json(indent=2), encoding="utf-8")


class LedgerService:
    """Records a group's expenses and settlements and works out who owes whom."""

    def __init__(self, settings: Settings, ledger: Ledger | None = None):
        """Initialize the service around an existing or empty ledger."""
        self.settings = settings
        self.ledger = ledger if ledger is not None else Ledger()

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def _build_expense(
        self,
        description: str,
        payer_id: str,
        total: Money,
        method: SplitMethod | str,
        participant_ids: Iterable[str] | None,
        percentages: Mapping[str, float] | None,
        amounts: Mapping[str, Money] | None,
        expense_id: str | None = None,
    ) -> Expense:
        split = allocate(
            method,
            total,
            participant_ids=participant_ids,
            percentages=percentages,
            amounts=amounts,
            percentage_tolerance=self.settings.percentage_tolerance,
        )
        fields = {"id": expense_id} if expense_id else {}
        return Expense(
            description=description, payer_id=payer_id, split=split, **fields
        )

    def add_expense(
        self,
        description: str,
        payer_id: str,
        total: Money,
        method: SplitMethod | str = SplitMethod.EQUAL,
        *,
        participant_ids: Iterable[str] | None = None,
        percentages: Mapping[str, float] | None = None,
        amounts: Mapping[str, Money] | None = None,
    ) -> Expense:
        """
        Split an expense and record it.

        Nothing is recorded if the split fails.

        Args:
            description: What the expense was for
            payer_id: Member who paid the full total
            total: Amount paid
            method: equal, percentage or exact
            participant_ids: Members sharing an equal split
            percentages: Member -> percentage for a percentage split
            amounts: Member -> amount for an exact split

        Returns:
            The recorded expense

        Raises:
            InvalidArgumentError: If the split input is invalid
        """
        expense = self._build_expense(
            description, payer_id, total, method, participant_ids, percentages, amounts
        )
        self.ledger.expenses.append(expense)

        logger.info(
            f"Recorded expense {expense.id} '{description}': {total} paid by "
            f"{payer_id}, split {expense.split.method.value} across "
            f"{expense.split.participant_count} members"
        )
        return expense

    def edit_expense(
        self,
        expense_id: str,
        description: str,
        payer_id: str,
        total: Money,
        method: SplitMethod | str = SplitMethod.EQUAL,
        *,
        participant_ids: Iterable[str] | None = None,
        percentages: Mapping[str, float] | None = None,
        amounts: Mapping[str, Money] | None = None,
    ) -> Expense:
        """
        Supersede an expense with a freshly allocated version under the same id.

        Raises:
            RecordNotFoundError: If the expense isn't in the ledger
            InvalidArgumentError: If the new split input is invalid
        """
        index = self._expense_index(expense_id)
        replacement = self._build_expense(
            description,
            payer_id,
            total,
            method,
            participant_ids,
            percentages,
            amounts,
            expense_id=expense_id,
        )
        self.ledger.expenses[index] = replacement

        logger.info(f"Replaced expense {expense_id} with a new {total} split")
        return replacement

    def delete_expense(self, expense_id: str) -> Expense:
        """Remove an expense (and with it, its shares)."""
        expense = self.ledger.expenses.pop(self._expense_index(expense_id))
        logger.info(f"Deleted expense {expense_id}")
        return expense

    def _expense_index(self, expense_id: str) -> int:
        for index, expense in enumerate(self.ledger.expenses):
            if expense.id == expense_id:
                return index
        raise RecordNotFoundError("expense", expense_id)

    def expense_shares(self) -> list[ExpenseShare]:
        """Shares of every recorded expense."""
        return [share for expense in self.ledger.expenses for share in expense.shares()]

    # ------------------------------------------------------------------
    # Settlements
    # ------------------------------------------------------------------

    def record_settlement(
        self, from_id: str, to_id: str, amount: Money
    ) -> SettlementRecord:
        """
        Record a payment from one member to another.

        Raises:
            InvalidArgumentError: If both ids are the same or amount isn't positive
        """
        if from_id == to_id:
            raise InvalidArgumentError("A settlement needs two different members")
        if not amount.is_positive:
            raise InvalidArgumentError(
                f"Settlement amount must be positive, got {amount}"
            )

        settlement = SettlementRecord(from_id=from_id, to_id=to_id, amount=amount)
        self.ledger.settlements.append(settlement)

        logger.info(
            f"Recorded settlement {settlement.id}: {from_id} paid {to_id} {amount}"
        )
        return settlement

    def delete_settlement(self, settlement_id: str) -> SettlementRecord:
        """Remove a recorded settlement."""
        for index, settlement in enumerate(self.ledger.settlements):
            if settlement.id == settlement_id:
                logger.info(f"Deleted settlement {settlement_id}")
                return self.ledger.settlements.pop(index)
        raise RecordNotFoundError("settlement", settlement_id)

    # ------------------------------------------------------------------
    # Balances and settling up
    # ------------------------------------------------------------------

    def net_balances(self) -> dict[str, Money]:
        """Net balance per member, zero balances left out."""
        return compute_net_balances(self.expense_shares(), self.ledger.settlements)

    def summary(self) -> GroupBalanceSummary:
        return summarize_balances(self.net_balances())

    def suggest_settlements(self) -> list[Transfer]:
        """Transfers that would settle the whole group."""
        transfers = suggest_transfers(
            self.net_balances(),
            tolerance_minor=self.settings.settlement_tolerance_minor,
        )
        logger.info(f"Suggested {len(transfers)} transfers to settle the group")
        return transfers

    def accept_transfers(self, transfers: list[Transfer]) -> list[SettlementRecord]:
        """
        Record accepted transfer suggestions as settlements.

        Either every transfer is recorded or none is.

        Raises:
            InvalidArgumentError: If the transfers don't settle the current balances
        """
        if not validate_transfers(
            self.net_balances(),
            transfers,
            tolerance_minor=self.settings.settlement_tolerance_minor,
        ):
            raise InvalidArgumentError(
                "Transfers don't settle the current balances; recompute suggestions"
            )

        records = [transfer.to_settlement() for transfer in transfers]
        self.ledger.settlements.extend(records)

        logger.info(f"Recorded {len(records)} settlements from accepted transfers")
        return records
