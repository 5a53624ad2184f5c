"""CLI for paisa-split using Typer."""

import logging
import sys
from pathlib import Path

import typer
from rich.markup import escape

from .allocator import allocate
from .config import load_settings
from .models import SplitMethod
from .money import Money
from .service import LedgerService, load_ledger, save_ledger
from .ui import (
    console,
    display_balances,
    display_split,
    display_transfers,
    format_amount,
)

app = typer.Typer(
    name="paisa-split",
    help="Split shared expenses exactly and work out who pays whom",
)

LEDGER_OPTION = typer.Option(
    None, "--ledger", "-l", help="Ledger file (defaults to LEDGER_PATH setting)"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Verbose output")


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _report_error(e: Exception, verbose: bool):
    console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
    if verbose:
        raise e
    sys.exit(1)


def _parse_shares(values: list[str]) -> dict[str, str]:
    """Turn ["alice=40", "bob=60"] into {"alice": "40", "bob": "60"}."""
    shares = {}
    for value in values:
        member_id, sep, amount = value.partition("=")
        if not sep or not member_id.strip() or not amount.strip():
            raise typer.BadParameter(
                f"Expected MEMBER=VALUE, got {value!r}", param_hint="--share"
            )
        shares[member_id.strip()] = amount.strip()
    return shares


def _split_inputs(
    method: SplitMethod, members: list[str], shares: list[str]
) -> dict:
    """Build the allocator keyword arguments for a split method."""
    if method is SplitMethod.EQUAL:
        return {"participant_ids": members}

    parsed = _parse_shares(shares)
    if method is SplitMethod.PERCENTAGE:
        try:
            return {"percentages": {m: float(p) for m, p in parsed.items()}}
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--share") from e

    return {"amounts": {m: Money.parse(a) for m, a in parsed.items()}}


def _open_service(ledger: Path | None) -> tuple[LedgerService, Path]:
    settings = load_settings()
    path = ledger or settings.ledger_path
    return LedgerService(settings, load_ledger(path)), path


@app.command()
def split(
    total: str = typer.Argument(..., help="Amount to split, e.g. 1,250.50"),
    method: SplitMethod = typer.Option(
        SplitMethod.EQUAL, "--method", "-m", help="How to split the total"
    ),
    member: list[str] = typer.Option(
        [], "--member", help="Member sharing an equal split (repeatable)"
    ),
    share: list[str] = typer.Option(
        [], "--share", "-s", help="MEMBER=VALUE for percentage/exact splits"
    ),
    verbose: bool = VERBOSE_OPTION,
):
    """
    Preview how a total would be split, without recording anything.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        result = allocate(
            method,
            Money.parse(total),
            percentage_tolerance=settings.percentage_tolerance,
            **_split_inputs(method, member, share),
        )
        display_split(result, settings)
    except typer.BadParameter:
        raise
    except Exception as e:
        _report_error(e, verbose)


@app.command("add-expense")
def add_expense(
    description: str = typer.Argument(..., help="What the expense was for"),
    total: str = typer.Argument(..., help="Amount paid"),
    payer: str = typer.Option(..., "--payer", "-p", help="Member who paid"),
    method: SplitMethod = typer.Option(
        SplitMethod.EQUAL, "--method", "-m", help="How to split the total"
    ),
    member: list[str] = typer.Option(
        [], "--member", help="Member sharing an equal split (repeatable)"
    ),
    share: list[str] = typer.Option(
        [], "--share", "-s", help="MEMBER=VALUE for percentage/exact splits"
    ),
    ledger: Path | None = LEDGER_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Split an expense and record it in the ledger.
    """
    setup_logging(verbose)

    try:
        service, path = _open_service(ledger)
        expense = service.add_expense(
            description,
            payer,
            Money.parse(total),
            method,
            **_split_inputs(method, member, share),
        )
        save_ledger(service.ledger, path)

        display_split(expense.split, service.settings)
        console.print(f"\n[bold green]✓ Recorded expense {expense.id}[/bold green]")
    except typer.BadParameter:
        raise
    except Exception as e:
        _report_error(e, verbose)


@app.command()
def pay(
    from_id: str = typer.Argument(..., help="Member who paid"),
    to_id: str = typer.Argument(..., help="Member who received the money"),
    amount: str = typer.Argument(..., help="Amount paid"),
    ledger: Path | None = LEDGER_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Record a settlement payment between two members.
    """
    setup_logging(verbose)

    try:
        service, path = _open_service(ledger)
        settlement = service.record_settlement(from_id, to_id, Money.parse(amount))
        save_ledger(service.ledger, path)

        console.print(
            f"[bold green]✓ Recorded {from_id} → {to_id}: "
            f"{format_amount(settlement.amount, service.settings)}[/bold green]"
        )
    except Exception as e:
        _report_error(e, verbose)


@app.command()
def balances(
    ledger: Path | None = LEDGER_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Show every member's net balance.
    """
    setup_logging(verbose)

    try:
        service, _ = _open_service(ledger)
        display_balances(service.summary(), service.settings)
    except Exception as e:
        _report_error(e, verbose)


@app.command()
def settle(
    apply: bool = typer.Option(
        False, "--apply", help="Record the suggested transfers as settlements"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    ledger: Path | None = LEDGER_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    Suggest the transfers that settle the group (dry-run unless --apply).
    """
    setup_logging(verbose)

    try:
        service, path = _open_service(ledger)
        transfers = service.suggest_settlements()
        display_transfers(transfers, service.settings)

        if not apply or not transfers:
            return

        if not yes and not typer.confirm("\nRecord these transfers as settlements?"):
            console.print("[yellow]Nothing recorded.[/yellow]")
            return

        records = service.accept_transfers(transfers)
        save_ledger(service.ledger, path)
        console.print(
            f"\n[bold green]✓ Recorded {len(records)} settlements[/bold green]"
        )
    except Exception as e:
        _report_error(e, verbose)


if __name__ == "__main__":
    app()
