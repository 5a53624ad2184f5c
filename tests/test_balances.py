"""Tests for net balance aggregation."""

import pytest

from paisa_split.balances import compute_net_balances, summarize_balances
from paisa_split.models import ExpenseShare, SettlementRecord
from paisa_split.money import Money


def share(payer: str, member: str, minor: int) -> ExpenseShare:
    return ExpenseShare(payer_id=payer, member_id=member, amount=Money(minor))


def payment(from_id: str, to_id: str, minor: int) -> SettlementRecord:
    return SettlementRecord(from_id=from_id, to_id=to_id, amount=Money(minor))


@pytest.fixture
def dinner_shares():
    """Alice paid ₹300 for dinner split equally three ways."""
    return [
        share("alice", "alice", 10000),
        share("alice", "bob", 10000),
        share("alice", "charlie", 10000),
    ]


class TestComputeNetBalances:
    """Folding shares and settlements."""

    def test_empty_ledger(self):
        assert compute_net_balances([], []) == {}

    def test_payer_credited_members_debited(self, dinner_shares):
        """The payer's own share nets to zero."""
        balances = compute_net_balances(dinner_shares, [])

        assert balances == {
            "alice": Money(20000),
            "bob": Money(-10000),
            "charlie": Money(-10000),
        }

    def test_settlement_reduces_debt(self, dinner_shares):
        """Bob paying alice back clears bob and reduces what alice is owed."""
        balances = compute_net_balances(dinner_shares, [payment("bob", "alice", 10000)])

        assert balances == {"alice": Money(10000), "charlie": Money(-10000)}

    def test_keep_zero_balances(self, dinner_shares):
        balances = compute_net_balances(
            dinner_shares, [payment("bob", "alice", 10000)], drop_zero=False
        )
        assert balances["bob"] == Money.ZERO

    def test_self_share_only(self):
        """Someone paying only for themselves has no balance."""
        assert compute_net_balances([share("alice", "alice", 5000)]) == {}

    def test_balances_sum_to_zero(self, dinner_shares):
        shares = dinner_shares + [share("bob", "alice", 2501), share("charlie", "bob", 77)]
        balances = compute_net_balances(shares, [payment("charlie", "alice", 3000)])

        assert Money.total(balances.values()) == Money.ZERO

    def test_order_independent(self, dinner_shares):
        shares = dinner_shares + [share("bob", "charlie", 1234)]
        forward = compute_net_balances(shares, [])
        backward = compute_net_balances(list(reversed(shares)), [])

        assert list(forward.items()) == list(backward.items())

    def test_keys_sorted(self):
        balances = compute_net_balances(
            [share("zoe", "yan", 100), share("bea", "ali", 100)]
        )
        assert list(balances) == ["ali", "bea", "yan", "zoe"]


class TestSummarizeBalances:
    """Group summary."""

    def test_summary(self, dinner_shares):
        summary = summarize_balances(compute_net_balances(dinner_shares))

        assert summary.creditors == {"alice": Money(20000)}
        assert summary.debtors == {"bob": Money(10000), "charlie": Money(10000)}
        assert summary.total_to_receive == Money(20000)
        assert summary.total_owed == Money(20000)
        assert not summary.is_settled

    def test_net_balance_for(self, dinner_shares):
        summary = summarize_balances(compute_net_balances(dinner_shares))

        assert summary.net_balance_for("alice") == Money(20000)
        assert summary.net_balance_for("bob") == Money(-10000)
        assert summary.net_balance_for("nobody") == Money.ZERO

    def test_settled_group(self):
        summary = summarize_balances({})
        assert summary.is_settled
        assert summary.total_owed == Money.ZERO
