"""Deterministic allocation of an expense total across participants.

Every split floors each participant's share, then hands out the leftover
minor units to participants in lexicographic id order. Sorting
the ids is the only source of ordering, so the result never depends on how
the caller's collection happens to iterate, and the shares always add up to
the total exactly.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from decimal import ROUND_FLOOR, Decimal

from .exceptions import (
    EmptyParticipantsError,
    ExactSplitMismatchError,
    InvalidArgumentError,
    PercentageSumError,
)
from .models import SplitMethod, SplitResult
from .money import Money

logger = logging.getLogger(__name__)

PERCENTAGE_TOLERANCE = 0.01


def _sorted_unique(participant_ids: Iterable[str]) -> list[str]:
    ids = list(participant_ids)
    if not ids:
        raise EmptyParticipantsError()

    unique = sorted(set(ids))
    if len(unique) != len(ids):
        raise InvalidArgumentError(f"Duplicate participant ids in split: {ids}")
    return unique


def _distribute_remainder(
    base: dict[str, int],
    sorted_ids: list[str],
    remainder: int,
    takers: list[str] | None = None,
) -> dict[str, Money]:
    """
    Hand `remainder` minor units out in sorted id order.

    A remainder of n or more wraps around the list, so every participant gets
    `remainder // n` and the first `remainder % n` get one more. A negative
    remainder is taken back from `takers` (all participants by default) in the
    same order. When the total is non-negative, units are only taken from
    positive shares and no share drops below zero.
    """
    shares = dict(base)

    if remainder >= 0:
        whole, extra = divmod(remainder, len(sorted_ids))
        for i, pid in enumerate(sorted_ids):
            shares[pid] += whole + (1 if i < extra else 0)
    else:
        total = sum(shares.values()) + remainder
        _take_back(shares, takers or sorted_ids, -remainder, capped=total >= 0)

    if remainder:
        logger.debug(
            f"Distributed {remainder} leftover minor units across "
            f"{min(abs(remainder), len(sorted_ids))} participants"
        )

    return {pid: Money(shares[pid]) for pid in sorted_ids}


def _take_back(
    shares: dict[str, int], takers: list[str], units: int, capped: bool
) -> None:
    pool = list(takers)
    while units:
        if capped:
            pool = [pid for pid in pool if shares[pid] > 0]
            if not pool:
                raise InvalidArgumentError(
                    f"Cannot take back {units} minor units from zero shares"
                )
        whole, extra = divmod(units, len(pool))

        if capped:
            # each round either finishes or empties the smallest share
            cap = min(shares[pid] for pid in pool)
            if whole > cap or (whole == cap and extra):
                for pid in pool:
                    shares[pid] -= cap
                units -= cap * len(pool)
                continue

        for i, pid in enumerate(pool):
            shares[pid] -= whole + (1 if i < extra else 0)
        units = 0


def split_equal(total: Money, participant_ids: Iterable[str]) -> dict[str, Money]:
    """
    Split a total equally.

    Example: 100.01 among ["charlie", "alice", "bob"] gives
    alice=33.34, bob=33.34, charlie=33.33.

    Args:
        total: Amount to split
        participant_ids: Ids of everyone sharing the expense

    Returns:
        Mapping of participant id to share, keyed in sorted id order

    Raises:
        EmptyParticipantsError: If there are no participants
        InvalidArgumentError: If an id appears more than once
    """
    sorted_ids = _sorted_unique(participant_ids)

    # floor division keeps 0 <= remainder < n for negative totals too
    base, remainder = divmod(total.minor, len(sorted_ids))

    return _distribute_remainder(
        {pid: base for pid in sorted_ids}, sorted_ids, remainder
    )


def split_percentage(
    total: Money,
    percentages: Mapping[str, float],
    tolerance: float = PERCENTAGE_TOLERANCE,
) -> dict[str, Money]:
    """
    Split a total by percentage.

    Percentages may be off 100 by up to `tolerance` so that inputs such as
    33.33/33.33/33.34 are accepted.

    Args:
        total: Amount to split
        percentages: Mapping of participant id to percentage (0-100)
        tolerance: Allowed distance of the percentage sum from 100

    Returns:
        Mapping of participant id to share, keyed in sorted id order

    Raises:
        EmptyParticipantsError: If no percentages are given
        InvalidArgumentError: If a percentage is negative or not finite
        PercentageSumError: If the percentages don't sum to 100 within tolerance
    """
    if not percentages:
        raise EmptyParticipantsError("Cannot split with no percentages specified")

    for pid, pct in percentages.items():
        if not math.isfinite(pct):
            raise InvalidArgumentError(
                f"Percentage for {pid!r} must be a finite number, got {pct}"
            )
        if pct < 0:
            raise InvalidArgumentError(
                f"Percentage for {pid!r} cannot be negative, got {pct}"
            )

    total_percentage = sum(percentages.values())
    if abs(total_percentage - 100.0) > tolerance:
        raise PercentageSumError(total_percentage, tolerance=tolerance)

    sorted_ids = sorted(percentages)
    hundred = Decimal(100)

    base: dict[str, int] = {}
    for pid in sorted_ids:
        exact = Decimal(total.minor) * Decimal(str(percentages[pid])) / hundred
        base[pid] = int(exact.to_integral_value(rounding=ROUND_FLOOR))

    remainder = total.minor - sum(base.values())
    takers = [pid for pid in sorted_ids if percentages[pid] > 0]
    return _distribute_remainder(base, sorted_ids, remainder, takers)


def split_exact(total: Money, amounts: Mapping[str, Money]) -> dict[str, Money]:
    """
    Validate caller-supplied amounts against the total.

    Returns:
        The same amounts, keyed in sorted id order

    Raises:
        EmptyParticipantsError: If no amounts are given
        ExactSplitMismatchError: If the amounts don't sum to the total
    """
    if not amounts:
        raise EmptyParticipantsError("Cannot split with no shares specified")

    actual = Money.total(amounts.values())
    if actual != total:
        raise ExactSplitMismatchError(expected=total, actual=actual)

    return {pid: amounts[pid] for pid in sorted(amounts)}


def allocate(
    method: SplitMethod | str,
    total: Money,
    *,
    participant_ids: Iterable[str] | None = None,
    percentages: Mapping[str, float] | None = None,
    amounts: Mapping[str, Money] | None = None,
    percentage_tolerance: float = PERCENTAGE_TOLERANCE,
) -> SplitResult:
    """
    Run the split for `method` and wrap it in a SplitResult.

    Raises:
        InvalidArgumentError: If the method is unknown or its input is missing,
            or any error of the underlying split
    """
    try:
        method = SplitMethod(method)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown split method: {method}") from e

    if method is SplitMethod.EQUAL:
        if participant_ids is None:
            raise InvalidArgumentError("Equal split needs participant ids")
        shares = split_equal(total, participant_ids)
    elif method is SplitMethod.PERCENTAGE:
        if percentages is None:
            raise InvalidArgumentError("Percentage split needs percentages")
        shares = split_percentage(total, percentages, tolerance=percentage_tolerance)
    else:
        if amounts is None:
            raise InvalidArgumentError("Exact split needs amounts")
        shares = split_exact(total, amounts)

    return SplitResult(method=method, total=total, shares=shares)


def validate_split(total: Money, shares: Mapping[str, Money]) -> bool:
    """Check that shares add up to the total exactly."""
    return Money.total(shares.values()) == total
