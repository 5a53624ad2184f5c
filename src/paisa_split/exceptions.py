"""Custom exceptions for paisa-split."""


class PaisaSplitError(Exception):
    """Base exception for all paisa-split errors."""

    pass


class ConfigurationError(PaisaSplitError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidArgumentError(PaisaSplitError, ValueError):
    """Raised when an engine operation receives input it cannot process."""

    pass


class EmptyParticipantsError(InvalidArgumentError):
    """Raised when a split is requested over zero participants."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "Cannot split among zero participants")


class PercentageSumError(InvalidArgumentError):
    """Raised when split percentages don't add up to 100."""

    def __init__(self, actual: float, expected: float = 100.0, tolerance: float = 0.01):
        self.actual = actual
        self.expected = expected
        self.tolerance = tolerance
        super().__init__(
            f"Percentages must sum to {expected:g}% (±{tolerance:g}), got {actual:g}%"
        )


class ExactSplitMismatchError(InvalidArgumentError):
    """Raised when exact split amounts don't add up to the expense total."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        self.mismatch = actual - expected
        super().__init__(
            f"Exact split amounts ({actual}) do not equal total amount ({expected}), "
            f"off by {self.mismatch}"
        )


class MoneyParseError(InvalidArgumentError):
    """Raised when text can't be read as a money amount."""

    def __init__(self, text: str, reason: str | None = None):
        self.text = text
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Invalid money format {text!r}{detail}")


class UnbalancedLedgerError(InvalidArgumentError):
    """Raised when net balances don't sum to zero within tolerance."""

    def __init__(self, observed_sum, tolerance_minor: int = 1):
        self.observed_sum = observed_sum
        self.tolerance_minor = tolerance_minor
        super().__init__(f"Net balances must sum to zero, got {observed_sum}")


class RecordNotFoundError(PaisaSplitError):
    """Raised when an expense or settlement id is not in the ledger."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"No {kind} with id {record_id!r} in the ledger")
