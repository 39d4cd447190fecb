"""CLI for Shared Ledger."""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from .config import load_settings
from .mcp_server import run_server
from .settlement.cli import app as settle_app
from .settlement.cli import console, format_money, setup_logging
from .settlement.service import LedgerService
from .settlement.ui import select_user_interactive

app = typer.Typer(
    name="shared-ledger",
    help="Shared expense tracking: monthly splits, settlements and summaries",
)

app.add_typer(settle_app, name="settle", help="Monthly splits and settlements")


@app.command()
def annual(
    path: Optional[Path] = typer.Argument(None, help="JSON transaction export"),
    year: int = typer.Option(..., "--year", "-y", help="Year to summarise"),
    user: Optional[str] = typer.Option(
        None, "--user", "-u", help="User ID whose transactions to total (prompts if omitted)"
    ),
    through_month: int = typer.Option(
        12, "--through-month", min=1, max=12, help="Months to average over"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show a user's annual income and expense totals with a monthly breakdown.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = LedgerService(settings)
        symbol = settings.currency_symbol

        transactions = service.load(path)
        users = service.known_users(transactions)

        user_id = user or select_user_interactive(users)
        if user_id is None:
            console.print("[yellow]No user selected.[/yellow]")
            return

        summary = service.annual_summary(transactions, user_id, year, through_month)
        breakdown = service.monthly_breakdown(transactions, user_id, year)

        console.print(
            f"\n[bold]Annual Results {summary.year} for "
            f"{users.get(user_id, user_id)}:[/bold]"
        )
        console.print(f"  Income:  {format_money(summary.income, symbol)}")
        console.print(f"  Expense: {format_money(summary.expense, symbol)}")
        console.print(f"  Balance: {format_money(summary.balance, symbol)}")
        console.print(
            f"  Monthly average over {summary.months_elapsed} months: "
            f"{format_money(summary.avg_monthly_income, symbol).strip()} in, "
            f"{format_money(summary.avg_monthly_expense, symbol).strip()} out"
        )
        console.print()

        table = Table(title="By Month", show_header=True, header_style="bold magenta")
        table.add_column("Month", style="cyan")
        table.add_column("Income", justify="right", width=14)
        table.add_column("Expenses", justify="right", width=14)
        table.add_column("Balance", justify="right", width=14)

        for totals in breakdown:
            if not totals.transaction_count:
                continue
            table.add_row(
                totals.start.strftime("%Y-%m"),
                format_money(totals.income, symbol),
                format_money(totals.expense, symbol),
                format_money(totals.balance, symbol),
            )

        console.print(table)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def mcp():
    """Start the MCP server exposing the ledger as tools."""
    run_server()


if __name__ == "__main__":
    app()
