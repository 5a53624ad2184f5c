"""Tests for equal, percentage and exact splits."""

from itertools import permutations

import pytest

from paisa_split.allocator import (
    allocate,
    split_equal,
    split_exact,
    split_percentage,
    validate_split,
)
from paisa_split.exceptions import (
    EmptyParticipantsError,
    ExactSplitMismatchError,
    InvalidArgumentError,
    PercentageSumError,
)
from paisa_split.models import SplitMethod, SplitResult
from paisa_split.money import Money


def total_of(shares: dict[str, Money]) -> Money:
    return Money.total(shares.values())


class TestEqualSplit:
    """Equal split with deterministic remainder distribution."""

    def test_remainder_goes_to_sorted_first(self):
        """Extra paise go to the lexicographically first members."""
        shares = split_equal(Money(10001), ["charlie", "alice", "bob"])

        assert shares == {
            "alice": Money(3334),
            "bob": Money(3334),
            "charlie": Money(3333),
        }
        assert list(shares) == ["alice", "bob", "charlie"]

    def test_order_independent(self):
        """Every input order yields the identical result."""
        ids = ["dev", "alice", "charlie", "bob"]
        expected = list(split_equal(Money(1003), ids).items())

        for order in permutations(ids):
            assert list(split_equal(Money(1003), order).items()) == expected

    def test_accepts_a_set(self):
        shares = split_equal(Money(100), {"x", "y", "z"})
        assert shares == {"x": Money(34), "y": Money(33), "z": Money(33)}

    def test_single_participant_gets_everything(self):
        assert split_equal(Money(12345), ["only"]) == {"only": Money(12345)}

    def test_even_split_has_no_remainder(self):
        shares = split_equal(Money(30000), ["a", "b", "c"])
        assert set(shares.values()) == {Money(10000)}

    def test_negative_total(self):
        """Floor division keeps the remainder non-negative for refunds."""
        shares = split_equal(Money(-10001), ["charlie", "alice", "bob"])

        assert shares == {
            "alice": Money(-3333),
            "bob": Money(-3334),
            "charlie": Money(-3334),
        }
        assert total_of(shares) == Money(-10001)

    def test_zero_total(self):
        assert split_equal(Money.ZERO, ["a", "b"]) == {"a": Money(0), "b": Money(0)}

    def test_sum_invariant(self):
        """Shares always add up to the total."""
        for n in range(1, 8):
            ids = [f"member{i}" for i in range(n)]
            for minor in (0, 1, 7, 99, 100, 10001, 123457, -5, -10001):
                assert total_of(split_equal(Money(minor), ids)) == Money(minor)

    def test_empty_participants(self):
        """An empty member list is an error, never an empty mapping."""
        with pytest.raises(EmptyParticipantsError):
            split_equal(Money(100), [])

    def test_empty_participants_is_invalid_argument(self):
        with pytest.raises(InvalidArgumentError):
            split_equal(Money(100), set())
        with pytest.raises(ValueError):
            split_equal(Money(100), [])

    def test_duplicate_participants(self):
        with pytest.raises(InvalidArgumentError, match="Duplicate"):
            split_equal(Money(100), ["alice", "alice", "bob"])


class TestPercentageSplit:
    """Percentage split with floor + remainder distribution."""

    def test_exact_percentages(self):
        shares = split_percentage(
            Money.from_major("1000.00"), {"alice": 40, "bob": 35, "charlie": 25}
        )

        assert shares == {
            "alice": Money.from_major("400.00"),
            "bob": Money.from_major("350.00"),
            "charlie": Money.from_major("250.00"),
        }
        assert total_of(shares) == Money.from_major("1000.00")

    def test_three_way_thirds(self):
        """33.33/33.33/33.34 is accepted and splits exactly."""
        shares = split_percentage(
            Money(10000), {"alice": 33.33, "bob": 33.33, "charlie": 33.34}
        )
        assert shares == {"alice": Money(3333), "bob": Money(3333), "charlie": Money(3334)}

    def test_remainder_goes_to_sorted_first(self):
        shares = split_percentage(
            Money(10001), {"charlie": 33.34, "bob": 33.33, "alice": 33.33}
        )

        assert shares == {"alice": Money(3334), "bob": Money(3333), "charlie": Money(3334)}
        assert list(shares) == ["alice", "bob", "charlie"]

    def test_half_paisa_each(self):
        shares = split_percentage(Money(101), {"b": 50, "a": 50})
        assert shares == {"a": Money(51), "b": Money(50)}

    def test_order_independent(self):
        pcts = {"dev": 12.5, "alice": 37.5, "charlie": 20, "bob": 30}
        expected = list(split_percentage(Money(99999), pcts).items())

        for order in permutations(pcts):
            reordered = {pid: pcts[pid] for pid in order}
            assert list(split_percentage(Money(99999), reordered).items()) == expected

    def test_sum_invariant(self):
        pcts = {"a": 33.33, "b": 33.33, "c": 33.34}
        for minor in (0, 1, 2, 3, 100, 10001, 999999, 123456789):
            assert total_of(split_percentage(Money(minor), pcts)) == Money(minor)

    def test_percentages_under_100_within_tolerance(self):
        """A large total under a 99.995% sum still splits exactly."""
        total = Money(10**9)
        shares = split_percentage(total, {"a": 49.995, "b": 50})

        assert total_of(shares) == total
        assert shares["a"] == Money(499_950_000 + 25_000)
        assert shares["b"] == Money(500_000_000 + 25_000)

    def test_percentages_over_100_within_tolerance(self):
        total = Money(10**9)
        shares = split_percentage(total, {"a": 50.005, "b": 50})

        assert total_of(shares) == total
        assert shares["a"] == Money(500_050_000 - 25_000)
        assert shares["b"] == Money(500_000_000 - 25_000)

    def test_percentages_not_summing_to_100(self):
        with pytest.raises(PercentageSumError) as exc_info:
            split_percentage(Money(10000), {"alice": 50, "bob": 40})

        assert exc_info.value.actual == pytest.approx(90)
        assert exc_info.value.expected == 100

    def test_just_outside_tolerance(self):
        with pytest.raises(PercentageSumError):
            split_percentage(Money(10000), {"alice": 50, "bob": 50.02})

    def test_negative_percentage(self):
        with pytest.raises(InvalidArgumentError, match="negative"):
            split_percentage(Money(10000), {"alice": 110, "bob": -10})

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_percentage(self, bad):
        with pytest.raises(InvalidArgumentError, match="finite"):
            split_percentage(Money(10000), {"a": bad, "b": 100.0})

    def test_zero_percent_participant_pays_nothing(self):
        """Overshoot is taken back from paying participants only."""
        shares = split_percentage(Money(100000), {"a": 0, "b": 100.005})

        assert shares == {"a": Money(0), "b": Money(100000)}

    def test_zero_percent_participant_in_refund(self):
        shares = split_percentage(Money(-100000), {"a": 0, "b": 99.995})

        assert shares == {"a": Money(0), "b": Money(-100000)}

    def test_large_remainder_wraps_in_one_pass(self):
        """A remainder far larger than the group is spread without looping per unit."""
        shares = split_percentage(Money(10**15), {"a": 49.995, "b": 50})

        assert shares == {
            "a": Money(499_950_000_000_000 + 25_000_000_000),
            "b": Money(500_000_000_000_000 + 25_000_000_000),
        }

    def test_empty_percentages(self):
        with pytest.raises(EmptyParticipantsError):
            split_percentage(Money(10000), {})


class TestExactSplit:
    """Exact split only validates."""

    def test_matching_amounts_returned(self):
        amounts = {"bob": Money(4000), "alice": Money(6000)}
        shares = split_exact(Money(10000), amounts)

        assert shares == amounts
        assert list(shares) == ["alice", "bob"]

    def test_mismatch_reports_difference(self):
        with pytest.raises(ExactSplitMismatchError) as exc_info:
            split_exact(Money(10000), {"alice": Money(6000), "bob": Money(3000)})

        error = exc_info.value
        assert error.expected == Money(10000)
        assert error.actual == Money(9000)
        assert error.mismatch == Money(-1000)
        assert "₹90.00" in str(error)

    def test_off_by_one_paisa(self):
        with pytest.raises(ExactSplitMismatchError):
            split_exact(Money(10000), {"alice": Money(5000), "bob": Money(5001)})

    def test_empty_amounts(self):
        with pytest.raises(EmptyParticipantsError):
            split_exact(Money(10000), {})


class TestAllocate:
    """Method dispatch."""

    def test_equal(self):
        result = allocate(SplitMethod.EQUAL, Money(10001), participant_ids=["b", "a"])

        assert isinstance(result, SplitResult)
        assert result.method is SplitMethod.EQUAL
        assert result.total == Money(10001)
        assert result.is_valid
        assert result.participant_ids == ["a", "b"]

    def test_method_by_name(self):
        result = allocate("percentage", Money(10000), percentages={"a": 60, "b": 40})
        assert result.method is SplitMethod.PERCENTAGE
        assert result.share_for("a") == Money(6000)

    def test_exact(self):
        result = allocate(
            SplitMethod.EXACT, Money(500), amounts={"a": Money(200), "b": Money(300)}
        )
        assert result.shares == {"a": Money(200), "b": Money(300)}

    def test_unknown_method(self):
        with pytest.raises(InvalidArgumentError, match="Unknown split method"):
            allocate("weighted", Money(100), participant_ids=["a"])

    def test_missing_input(self):
        with pytest.raises(InvalidArgumentError):
            allocate(SplitMethod.PERCENTAGE, Money(100), participant_ids=["a"])

    def test_split_result_helpers(self):
        result = allocate(SplitMethod.EQUAL, Money(300), participant_ids=["a", "b", "c"])

        assert result.participant_count == 3
        assert result.has_participant("b")
        assert not result.has_participant("z")
        assert result.share_for("z") == Money.ZERO

    def test_validate_split(self):
        assert validate_split(Money(300), {"a": Money(100), "b": Money(200)})
        assert not validate_split(Money(300), {"a": Money(100), "b": Money(199)})
