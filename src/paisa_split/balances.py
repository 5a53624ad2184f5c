"""Fold expense shares and settlements into per-member net balances."""

from collections import defaultdict
from collections.abc import Iterable, Mapping

from .models import ExpenseShare, GroupBalanceSummary, SettlementRecord
from .money import Money


def compute_net_balances(
    expense_shares: Iterable[ExpenseShare],
    settlements: Iterable[SettlementRecord] = (),
    drop_zero: bool = True,
) -> dict[str, Money]:
    """
    Compute one signed net balance per member.

    Positive = the member is owed money (creditor),
    negative = the member owes money (debtor).

    Args:
        expense_shares: Shares of every expense in the group
        settlements: Payments already made between members
        drop_zero: Leave members whose balance is exactly zero out of the result

    Returns:
        Mapping of member id to net balance, keyed in sorted id order
    """
    balances: defaultdict[str, int] = defaultdict(int)

    for share in expense_shares:
        # payer is owed what the member consumed
        balances[share.payer_id] += share.amount.minor
        balances[share.member_id] -= share.amount.minor

    for settlement in settlements:
        # payer's debt shrinks, receiver is owed less
        balances[settlement.from_id] += settlement.amount.minor
        balances[settlement.to_id] -= settlement.amount.minor

    return {
        member_id: Money(balances[member_id])
        for member_id in sorted(balances)
        if not (drop_zero and balances[member_id] == 0)
    }


def summarize_balances(balances: Mapping[str, Money]) -> GroupBalanceSummary:
    """Split net balances into creditors and debtors with their totals."""
    creditors = {
        member_id: amount
        for member_id, amount in sorted(balances.items())
        if amount.is_positive
    }
    debtors = {
        member_id: abs(amount)
        for member_id, amount in sorted(balances.items())
        if amount.is_negative
    }

    return GroupBalanceSummary(
        creditors=creditors,
        debtors=debtors,
        total_to_receive=Money.total(creditors.values()),
        total_owed=Money.total(debtors.values()),
    )
