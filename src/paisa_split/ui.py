"""Rich console output for allocations, balances and transfers."""

from rich.console import Console
from rich.table import Table

from .config import Settings
from .models import GroupBalanceSummary, SplitResult, Transfer
from .money import Money

console = Console()


def format_amount(amount: Money, settings: Settings) -> str:
    """Format with the configured symbol and digit grouping."""
    return amount.format(
        symbol=settings.currency_symbol, grouping=settings.digit_grouping
    )


def format_money(amount: Money, settings: Settings, use_color: bool = True) -> str:
    """
    Format money for a table cell.

    Negative amounts use parentheses: (₹85.02)
    Positive amounts have spaces:      ₹85.02
    The spaces keep the amounts lined up in right-justified columns.
    """
    text = format_amount(abs(amount), settings)
    if amount.is_negative:
        return f"([red]{text}[/red])" if use_color else f"({text})"
    if use_color and amount.is_positive:
        return f" [green]{text}[/green] "
    return f" {text} "


def display_split(result: SplitResult, settings: Settings):
    """Show how a total was divided."""
    table = Table(
        title=f"Split {result.method.display_name}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Member", style="cyan")
    table.add_column("Share", justify="right")

    for member_id, share in result.shares.items():
        table.add_row(member_id, format_money(share, settings, use_color=False))

    console.print(table)
    console.print(f"  Total: {format_money(result.total, settings, use_color=False)}")

    if result.is_valid:
        console.print("  [green]✓ Shares add up to the total[/green]")
    else:
        console.print("  [red]✗ Shares don't add up to the total[/red]")


def display_balances(summary: GroupBalanceSummary, settings: Settings):
    """Show each member's net position."""
    if summary.is_settled:
        console.print("[green]Everyone is settled up.[/green]")
        return

    table = Table(title="Net Balances", show_header=True, header_style="bold magenta")
    table.add_column("Member", style="cyan")
    table.add_column("Balance", justify="right")
    table.add_column("Status", style="dim")

    for member_id, amount in summary.creditors.items():
        table.add_row(member_id, format_money(amount, settings), "is owed")
    for member_id, amount in summary.debtors.items():
        table.add_row(member_id, format_money(-amount, settings), "owes")

    console.print(table)
    console.print(f"  Owed in total: {format_amount(summary.total_owed, settings)}")


def display_transfers(transfers: list[Transfer], settings: Settings):
    """Show the suggested payments."""
    if not transfers:
        console.print("[green]Nothing to settle.[/green]")
        return

    table = Table(
        title="Suggested Transfers", show_header=True, header_style="bold magenta"
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Amount", justify="right")

    for idx, transfer in enumerate(transfers, start=1):
        table.add_row(
            str(idx),
            transfer.from_id,
            transfer.to_id,
            format_money(transfer.amount, settings, use_color=False),
        )

    console.print(table)
    total = Money.total(t.amount for t in transfers)
    console.print(
        f"  {len(transfers)} transfers moving "
        f"{total.format_compact(symbol=settings.currency_symbol)} in total"
    )
