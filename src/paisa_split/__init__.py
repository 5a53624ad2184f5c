"""paisa-split - Exact expense splitting and debt settlement for groups."""

__version__ = "0.1.0"

from .allocator import allocate, split_equal, split_exact, split_percentage
from .balances import compute_net_balances, summarize_balances
from .config import Settings, load_settings
from .models import (
    Expense,
    ExpenseShare,
    GroupBalanceSummary,
    Ledger,
    SettlementRecord,
    SplitMethod,
    SplitResult,
    Transfer,
)
from .money import Money
from .netting import suggest_transfers, validate_transfers
from .service import LedgerService

__all__ = [
    "Settings",
    "load_settings",
    "Money",
    "Expense",
    "ExpenseShare",
    "GroupBalanceSummary",
    "Ledger",
    "SettlementRecord",
    "SplitMethod",
    "SplitResult",
    "Transfer",
    "allocate",
    "split_equal",
    "split_exact",
    "split_percentage",
    "compute_net_balances",
    "summarize_balances",
    "suggest_transfers",
    "validate_transfers",
    "LedgerService",
]
