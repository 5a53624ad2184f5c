"""Fixed-point money stored as an integer count of minor units (paise).

All arithmetic stays integral. Anything that scales by a fractional factor goes
through Decimal and rounds half-up (ties away from zero) to the nearest minor
unit, so no binary floating point value ever holds an amount.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import (
    ROUND_CEILING,
    ROUND_FLOOR,
    ROUND_HALF_UP,
    Decimal,
    InvalidOperation,
)
from typing import Any, ClassVar, Literal

from pydantic_core import core_schema

from .exceptions import MoneyParseError

MINOR_PER_MAJOR = 100
DEFAULT_SYMBOL = "₹"

Grouping = Literal["indian", "western"]

# Lakh and crore tiers for compact display, largest first
_COMPACT_TIERS = ((10**7, "Cr"), (10**5, "L"), (10**3, "K"))

_SYMBOL = r"(?:₹|\$|inr|rs\.?)"
_SYMBOL_RE = re.compile(_SYMBOL, re.IGNORECASE)

# Optional sign and currency symbol in front, or a symbol at the end
_AMOUNT_RE = re.compile(
    rf"(?P<lead>[+-]?)\s*(?P<prefix>{_SYMBOL})?\s*(?P<sign>[+-]?)\s*"
    rf"(?P<number>\d+(?:\.\d*)?|\.\d+)\s*(?P<suffix>{_SYMBOL})?",
    re.IGNORECASE,
)


def _to_decimal(value: Any) -> Decimal:
    """Convert an int/float/str/Decimal to Decimal without binary float noise."""
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric amount")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    return Decimal(str(value))


def _round(value: Decimal, rounding: str = ROUND_HALF_UP) -> int:
    return int(value.quantize(Decimal("1"), rounding=rounding))


def _group_digits(digits: str, grouping: Grouping) -> str:
    """
    Insert thousands separators into a string of digits.

    Indian grouping keeps the last three digits together and groups the rest
    in pairs (12,34,567); western grouping uses threes throughout (1,234,567).
    """
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    size = 2 if grouping == "indian" else 3
    groups = []
    while head:
        groups.insert(0, head[-size:])
        head = head[:-size]
    return ",".join(groups + [tail])


@dataclass(frozen=True, order=True)
class Money:
    """An immutable amount of money in minor units (1 rupee = 100 paise)."""

    minor: int

    ZERO: ClassVar["Money"]

    def __post_init__(self):
        if isinstance(self.minor, bool) or not isinstance(self.minor, int):
            raise TypeError(
                f"Money must be built from integer minor units, got {self.minor!r}"
            )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_minor(cls, minor: int) -> "Money":
        """Create Money from minor units (paise)."""
        return cls(minor)

    @classmethod
    def from_major(cls, value: int | float | str | Decimal) -> "Money":
        """
        Create Money from a major-unit amount (rupees).

        Rounds half-up to the nearest minor unit.

        Args:
            value: Amount in major units, e.g. 123.45 or "123.45"

        Returns:
            Money holding the rounded minor-unit count

        Raises:
            MoneyParseError: If value isn't a finite number
        """
        try:
            amount = _to_decimal(value)
        except InvalidOperation as e:
            raise MoneyParseError(str(value), "not a number") from e

        if not amount.is_finite():
            raise MoneyParseError(str(value), "not a finite number")

        return cls(_round(amount * MINOR_PER_MAJOR))

    @classmethod
    def parse(cls, text: str) -> "Money":
        """
        Parse free-form user input such as "₹1,23,456.78" or " -45.5 ".

        Accepts surrounding whitespace, an optional sign, a currency symbol
        (₹, Rs, Rs., INR, $) and comma grouping separators.

        Raises:
            MoneyParseError: On empty input, multiple decimal points or any
                other non-numeric content
        """
        if text is None or not text.strip():
            raise MoneyParseError(text or "", "empty input")

        cleaned = text.replace(",", "").strip()

        if _SYMBOL_RE.sub("", cleaned).count(".") > 1:
            raise MoneyParseError(text, "multiple decimal points")

        match = _AMOUNT_RE.fullmatch(cleaned)
        if match is None:
            raise MoneyParseError(text, "not a number")
        if match["lead"] and match["sign"]:
            raise MoneyParseError(text, "more than one sign")
        if match["prefix"] and match["suffix"]:
            raise MoneyParseError(text, "more than one currency symbol")

        sign = match["lead"] or match["sign"]
        return cls.from_major(f"{sign}{match['number']}")

    @classmethod
    def try_parse(cls, text: str) -> "Money | None":
        """Parse user input, returning None instead of raising."""
        try:
            return cls.parse(text)
        except MoneyParseError:
            return None

    @staticmethod
    def total(amounts: Iterable["Money"]) -> "Money":
        """Sum a collection of amounts; an empty collection sums to zero."""
        return sum(amounts, Money.ZERO)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def major(self) -> Decimal:
        """Exact amount in major units."""
        return Decimal(self.minor).scaleb(-2)

    @property
    def is_zero(self) -> bool:
        return self.minor == 0

    @property
    def is_positive(self) -> bool:
        return self.minor > 0

    @property
    def is_negative(self) -> bool:
        return self.minor < 0

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.minor + other.minor)

    def __radd__(self, other: Any) -> "Money":
        # lets the builtin sum() start from 0
        if isinstance(other, int) and not isinstance(other, bool) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.minor - other.minor)

    def __neg__(self) -> "Money":
        return Money(-self.minor)

    def __abs__(self) -> "Money":
        return Money(abs(self.minor))

    def __mul__(self, factor: int | float | Decimal) -> "Money":
        if isinstance(factor, Money):
            return NotImplemented
        return Money(_round(Decimal(self.minor) * _to_decimal(factor)))

    __rmul__ = __mul__

    def __truediv__(self, factor: int | float | Decimal) -> "Money":
        if isinstance(factor, Money):
            return NotImplemented
        return Money(_round(Decimal(self.minor) / _to_decimal(factor)))

    def round_to_major(self, rounding: str = ROUND_HALF_UP) -> "Money":
        """Round to a whole number of major units (half-up by default)."""
        whole = _round(Decimal(self.minor) / MINOR_PER_MAJOR, rounding)
        return Money(whole * MINOR_PER_MAJOR)

    def ceil_to_major(self) -> "Money":
        return self.round_to_major(ROUND_CEILING)

    def floor_to_major(self) -> "Money":
        return self.round_to_major(ROUND_FLOOR)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def format(
        self,
        show_symbol: bool = True,
        show_decimals: bool = True,
        symbol: str = DEFAULT_SYMBOL,
        grouping: Grouping = "indian",
    ) -> str:
        """
        Format with locale digit grouping, e.g. "₹12,34,567.89".

        Args:
            show_symbol: Prefix the currency symbol
            show_decimals: Show paise; when False the amount is rounded
                half-up to whole rupees
            symbol: Currency symbol to use
            grouping: "indian" (lakh/crore) or "western" digit grouping

        Returns:
            Formatted amount with the sign ahead of the symbol
        """
        amount = self if show_decimals else self.round_to_major()
        whole, fraction = divmod(abs(amount.minor), MINOR_PER_MAJOR)

        body = _group_digits(str(whole), grouping)
        if show_decimals:
            body = f"{body}.{fraction:02d}"

        sign = "-" if amount.is_negative else ""
        prefix = symbol if show_symbol else ""
        return f"{sign}{prefix}{body}"

    def format_compact(
        self, show_symbol: bool = True, symbol: str = DEFAULT_SYMBOL
    ) -> str:
        """Format large magnitudes with K/L/Cr suffixes, e.g. "₹15L" or "₹1.2K"."""
        magnitude = abs(self.major)
        one_place = Decimal("0.1")

        scaled = magnitude.quantize(one_place, rounding=ROUND_HALF_UP)
        suffix = ""
        for threshold, tier_suffix in _COMPACT_TIERS:
            candidate = (magnitude / threshold).quantize(
                one_place, rounding=ROUND_HALF_UP
            )
            if candidate >= 1:
                scaled, suffix = candidate, tier_suffix
                break

        text = f"{scaled:f}".removesuffix(".0")
        sign = "-" if self.is_negative and scaled else ""
        prefix = symbol if show_symbol else ""
        return f"{sign}{prefix}{text}{suffix}"

    def format_display(
        self,
        show_symbol: bool = True,
        symbol: str = DEFAULT_SYMBOL,
        grouping: Grouping = "indian",
    ) -> str:
        """Format for lists: decimals only when there are paise to show."""
        return self.format(
            show_symbol=show_symbol,
            show_decimals=self.minor % MINOR_PER_MAJOR != 0,
            symbol=symbol,
            grouping=grouping,
        )

    def to_plain_string(self) -> str:
        """Locale-free number for input fields: "1234" or "1234.50"."""
        whole, fraction = divmod(abs(self.minor), MINOR_PER_MAJOR)
        sign = "-" if self.is_negative else ""
        if fraction == 0:
            return f"{sign}{whole}"
        return f"{sign}{whole}.{fraction:02d}"

    def __str__(self) -> str:
        return self.format()

    # ------------------------------------------------------------------
    # Pydantic integration
    # ------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: Any
    ) -> core_schema.CoreSchema:
        """Validate from Money/int minor units/money text; serialize as int."""
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.minor
            ),
        )

    @classmethod
    def _validate(cls, value: Any) -> "Money":
        if isinstance(value, Money):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise ValueError(
            f"Cannot interpret {value!r} as money; expected integer minor units"
        )


Money.ZERO = Money(0)
