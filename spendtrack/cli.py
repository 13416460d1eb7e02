"""Command-line interface for spendtrack."""
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import get_bank_config_loader
from .config.settings import ALL_CATEGORIES_LABEL, PARSE_TIMEOUT_SECONDS
from .ledger import TransactionLedger
from .models import ALL_CATEGORIES
from .parsers import get_default_registry
from .pipeline import StatementImporter
from .utils import format_currency, setup_logger
from .worker import ParseWorker

console = Console()
logger = setup_logger()

DATE_FORMATS = ['%Y-%m-%d']


@click.group()
@click.version_option(version=__version__)
def cli():
    """Spendtrack - Categorize spending from bank and card statements."""
    pass


@cli.command(name='import')
@click.argument('files', nargs=-1, required=True, type=click.Path(dir_okay=False, path_type=Path))
@click.option('--start', 'start_date', type=click.DateTime(formats=DATE_FORMATS), help='First day to show (YYYY-MM-DD)')
@click.option('--end', 'end_date', type=click.DateTime(formats=DATE_FORMATS), help='Last day to show (YYYY-MM-DD)')
@click.option('--category', '-c', default=ALL_CATEGORIES_LABEL, show_default=True, help='Only show this category')
@click.option('--timeout', type=float, default=PARSE_TIMEOUT_SECONDS, show_default=True, help='Seconds allowed per file')
def import_statements(files, start_date, end_date, category, timeout):
    """
    Import statements and show categorized spending.

    FILES: One or more CSV or PDF statements
    """
    console.print("\n[bold blue]Spendtrack[/bold blue]\n")

    start_day = start_date.date() if start_date else None
    end_day = end_date.date() if end_date else None

    ledger = TransactionLedger()

    with ParseWorker() as worker:
        importer = StatementImporter(ledger, worker=worker, timeout=timeout)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            progress.add_task(f"Parsing {len(files)} file(s)...", total=None)
            summary = importer.import_paths(files)

    for error in summary.errors:
        console.print(f"[red]✗ {error.filename}:[/red] {error.message}")

    if summary.imported_file_count == 0:
        console.print("\n[red]No files could be imported[/red]")
        sys.exit(1)

    console.print(f"[green]✓ {summary.message}[/green]\n")

    _print_transactions(ledger, start_day, end_day, category)
    _print_summary(ledger, start_day, end_day)


def _print_transactions(ledger: TransactionLedger, start_day, end_day, category: str) -> None:
    rows = ledger.get_filtered_transactions(start_day, end_day, category)

    table = Table(title="Transactions", show_header=True, header_style="bold magenta")
    table.add_column("Date", style="cyan")
    table.add_column("Description")
    table.add_column("Category", style="green")
    table.add_column("Source", style="dim")
    table.add_column("Amount", justify="right")

    for transaction in rows:
        amount = format_currency(transaction.amount, transaction.currency)
        if transaction.is_credit:
            amount = f"[green]-{amount}[/green]"
        table.add_row(
            transaction.timestamp.strftime('%Y-%m-%d'),
            transaction.display_title,
            transaction.category,
            transaction.source,
            amount,
        )

    console.print(table)
    if not rows:
        console.print("[yellow]No transactions match the current filters[/yellow]")


def _print_summary(ledger: TransactionLedger, start_day, end_day) -> None:
    summary = ledger.get_summary(start_day, end_day)

    table = Table(title="Spending by Category", show_header=True, header_style="bold magenta")
    table.add_column("Category", style="green")
    table.add_column("Count", justify="right")
    table.add_column("Total", justify="right")

    for entry in summary.categories:
        table.add_row(entry.category, str(entry.count), format_currency(entry.total))

    console.print(table)
    console.print(f"\n[cyan]Charges:[/cyan] {format_currency(summary.total_charges)}")
    console.print(f"[cyan]Credits:[/cyan] {format_currency(summary.total_credits)}")
    console.print(f"[bold cyan]Net spending:[/bold cyan] {format_currency(summary.net_spending)}")


@cli.command()
def banks():
    """List supported banks and card issuers."""
    console.print("\n[bold blue]Supported Banks[/bold blue]\n")

    loader = get_bank_config_loader()

    if loader.supported_banks_count == 0:
        console.print("[yellow]No bank configurations found[/yellow]")
        console.print(f"[yellow]Add YAML files to: {loader.config_dir}[/yellow]")
        return

    pdf_sources = set(get_default_registry(loader).supported_sources)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Issuer", style="cyan")
    table.add_column("Region")
    table.add_column("PDF", justify="center")
    table.add_column("CSV", justify="center")

    for config in loader.configs_by_priority():
        table.add_row(
            config.display_name,
            config.region or "-",
            "✓" if config.display_name in pdf_sources else "-",
            "✓",
        )

    console.print(table)
    console.print(f"\n[cyan]Total supported banks:[/cyan] {loader.supported_banks_count}")
    console.print("[dim]CSV files from other issuers import with source 'Unknown'[/dim]")


@cli.command()
def categories():
    """List spending categories."""
    console.print("\n[bold blue]Categories[/bold blue]\n")
    for name in ALL_CATEGORIES:
        console.print(f"  • {name}")


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
