"""Reduce net balances to a short list of transfers that settle everyone up.

Uses greedy largest-creditor-vs-largest-debtor matching. It isn't guaranteed
to find the fewest transfers for every topology, but it never needs more than
(#creditors + #debtors - 1) and always zeroes every balance. Ties on amount go
to the lexicographically smallest member id so the output is reproducible.
"""

import logging
from collections.abc import Iterable, Mapping

from .exceptions import UnbalancedLedgerError
from .models import Transfer
from .money import Money

logger = logging.getLogger(__name__)

SETTLEMENT_TOLERANCE_MINOR = 1


def _largest(remaining: dict[str, int]) -> str:
    """Id with the largest remaining amount, smallest id on ties."""
    return min(remaining, key=lambda member_id: (-remaining[member_id], member_id))


def suggest_transfers(
    balances: Mapping[str, Money],
    tolerance_minor: int = SETTLEMENT_TOLERANCE_MINOR,
) -> list[Transfer]:
    """
    Suggest who should pay whom so that every balance reaches zero.

    Args:
        balances: Net balance per member (positive = owed, negative = owes)
        tolerance_minor: Rounding slack allowed in the balance sum

    Returns:
        Transfers from debtors to creditors, in the order they were matched

    Raises:
        UnbalancedLedgerError: If the balances don't sum to zero within tolerance
    """
    observed = Money.total(balances.values())
    if abs(observed.minor) > tolerance_minor:
        raise UnbalancedLedgerError(observed, tolerance_minor)

    creditors = {m: b.minor for m, b in balances.items() if b.is_positive}
    debtors = {m: -b.minor for m, b in balances.items() if b.is_negative}

    transfers: list[Transfer] = []
    while creditors and debtors:
        creditor = _largest(creditors)
        debtor = _largest(debtors)
        amount = min(creditors[creditor], debtors[debtor])

        transfers.append(
            Transfer(from_id=debtor, to_id=creditor, amount=Money(amount))
        )
        logger.debug(f"Matched {debtor} -> {creditor} for {amount} minor units")

        creditors[creditor] -= amount
        debtors[debtor] -= amount
        if creditors[creditor] == 0:
            del creditors[creditor]
        if debtors[debtor] == 0:
            del debtors[debtor]

    return transfers


def apply_transfers(
    balances: Mapping[str, Money], transfers: Iterable[Transfer]
) -> dict[str, Money]:
    """Balances after every transfer has been paid."""
    remaining = {member_id: amount.minor for member_id, amount in balances.items()}

    for transfer in transfers:
        remaining[transfer.from_id] = (
            remaining.get(transfer.from_id, 0) + transfer.amount.minor
        )
        remaining[transfer.to_id] = (
            remaining.get(transfer.to_id, 0) - transfer.amount.minor
        )

    return {member_id: Money(remaining[member_id]) for member_id in sorted(remaining)}


def validate_transfers(
    original_balances: Mapping[str, Money],
    transfers: Iterable[Transfer],
    tolerance_minor: int = SETTLEMENT_TOLERANCE_MINOR,
) -> bool:
    """Check that paying `transfers` brings every balance within tolerance of zero."""
    after = apply_transfers(original_balances, transfers)
    return all(abs(amount.minor) <= tolerance_minor for amount in after.values())
