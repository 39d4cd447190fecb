"""CLI commands for monthly settlements."""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import Settings, load_settings
from ..models import Month, MonthlySplitResult, SharedSummary
from .service import LedgerService
from .ui import select_user_interactive

app = typer.Typer(
    name="settle",
    help="Split shared transactions and work out who owes whom",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def parse_month(value: str) -> Month:
    """Typer parser for --month."""
    try:
        return Month.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def build_settings(include_pending: bool) -> Settings:
    """Load settings, optionally counting pending shares too."""
    settings = load_settings()
    if include_pending and "pending" not in settings.counted_share_statuses:
        settings = settings.model_copy(
            update={
                "counted_share_statuses": [*settings.counted_share_statuses, "pending"]
            }
        )
    return settings


def format_money(amount, symbol: str = "$", use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    The spaces ensure decimal points align in tables.
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            return f"({symbol}[red]{abs_amount:,.2f}[/red])"
        return f"({symbol}{abs_amount:,.2f})"
    if use_color:
        return f" [green]{symbol}{abs_amount:,.2f}[/green] "
    return f" {symbol}{abs_amount:,.2f} "


def display_splits(result: MonthlySplitResult, names: dict[str, str], symbol: str):
    """Display per-user totals and settlements."""
    console.print(f"\n[bold]Shared Summary for {result.month}:[/bold]\n")

    table = Table(title="User Totals", show_header=True, header_style="bold magenta")
    table.add_column("User", style="cyan")
    table.add_column("Income", justify="right", width=14)
    table.add_column("Expenses", justify="right", width=14)

    for user_id, totals in result.user_totals.items():
        table.add_row(
            names.get(user_id, user_id),
            format_money(totals.income, symbol),
            format_money(totals.expense, symbol),
        )

    console.print(table)
    console.print()

    if not result.settlements:
        console.print("[dim]No settlements needed.[/dim]")
        return

    console.print("[bold]Settlements:[/bold]")
    for settlement in result.settlements:
        console.print(
            f"  {names.get(settlement.from_user, settlement.from_user)} must pay "
            f"{format_money(settlement.amount, symbol).strip()} to "
            f"{names.get(settlement.to_user, settlement.to_user)}"
        )


def display_summary(summaries: list[SharedSummary], user_name: str, month: Month, symbol: str):
    """Display the per-counterpart summary for a user."""
    if not summaries:
        console.print(
            f"\n[yellow]No shared transactions for {user_name} in {month}.[/yellow]"
        )
        return

    table = Table(
        title=f"Shared with {user_name} in {month}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("User", style="cyan")
    table.add_column("Income", justify="right", width=14)
    table.add_column("Expenses", justify="right", width=14)
    table.add_column("Balance", justify="right", width=14)

    for summary in summaries:
        table.add_row(
            f"{summary.user_name} [dim]({summary.user_id})[/dim]",
            format_money(summary.total_income, symbol),
            format_money(summary.total_expense, symbol),
            format_money(summary.balance, symbol),
        )

    console.print()
    console.print(table)
    console.print("[dim]Positive balance: they owe you. Negative: you owe them.[/dim]")


@app.command()
def splits(
    path: Optional[Path] = typer.Argument(None, help="JSON transaction export"),
    month: str = typer.Option(..., "--month", "-m", help="Month as YYYY-MM"),
    include_pending: bool = typer.Option(
        False, "--include-pending", help="Count pending shares as well as accepted"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show per-user totals and net settlements for a month.
    """
    setup_logging(verbose)

    try:
        target = parse_month(month)
        settings = build_settings(include_pending)
        service = LedgerService(settings)

        transactions = service.load(path)
        result = service.monthly_splits(transactions, target)

        display_splits(result, service.known_users(transactions), settings.currency_symbol)

    except typer.BadParameter:
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def summary(
    path: Optional[Path] = typer.Argument(None, help="JSON transaction export"),
    month: str = typer.Option(..., "--month", "-m", help="Month as YYYY-MM"),
    user: Optional[str] = typer.Option(
        None, "--user", "-u", help="User ID to show balances for (prompts if omitted)"
    ),
    include_pending: bool = typer.Option(
        False, "--include-pending", help="Count pending shares as well as accepted"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show a user's balances with everyone they share transactions with.
    """
    setup_logging(verbose)

    try:
        target = parse_month(month)
        settings = build_settings(include_pending)
        service = LedgerService(settings)

        transactions = service.load(path)
        users = service.known_users(transactions)

        user_id = user or select_user_interactive(users)
        if user_id is None:
            console.print("[yellow]No user selected.[/yellow]")
            return

        summaries = service.shared_summary(transactions, user_id, target)
        display_summary(
            summaries, users.get(user_id, user_id), target, settings.currency_symbol
        )

    except typer.BadParameter:
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)
