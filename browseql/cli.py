from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .db import Gateway, GatewayError, connect
from .logging import setup_logging
from .settings import load_settings
from .tui.formatter import format_table

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    help="browseql: browse a SQLite database from the terminal",
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(code=1)


def _print_tables(gateway: Gateway) -> None:
    tables = gateway.list_tables()
    if not tables:
        console.print("[yellow]No tables found in this database.[/yellow]")
        return

    t = Table(title="[bold]Tables[/bold]", show_header=False)
    t.add_column("Name", style="cyan", no_wrap=True)
    for name in tables:
        t.add_row(name)
    console.print(t)


def _print_result(gateway: Gateway, statement: str, max_width: int) -> None:
    headers, rows = gateway.execute(statement)
    # The grid is already box-drawn; keep rich from interpreting brackets.
    console.print(format_table(headers, rows, max_width), markup=False, highlight=False)
    console.print(f"[dim]{len(rows)} row{'s' if len(rows) != 1 else ''}[/dim]")


@app.command()
def main(
    database: Path = typer.Argument(..., help="SQLite database file to open", show_default=False),
    read_only: bool = typer.Option(False, "--read-only", help="Open the database read-only"),
    create: bool = typer.Option(False, "--create", help="Create the database file if it does not exist"),
    execute: Optional[str] = typer.Option(
        None, "--execute", "-e", help="Run one statement, print the result and exit"
    ),
    list_tables: bool = typer.Option(False, "--list", "-l", help="Print table names and exit"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", min=1, help="Rows loaded per table [default: BROWSEQL_ROW_LIMIT]"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Diagnostic log level"),
):
    """
    [bold]browseql[/bold]: list tables, page through their rows and run ad-hoc SQL.

    [bold]Examples:[/bold]
      browseql mydb.db                         # Interactive browser
      browseql mydb.db --list                  # Print table names
      browseql mydb.db -e "SELECT * FROM users"
    """
    s = load_settings()
    if log_level:
        s.BROWSEQL_LOG_LEVEL = log_level
    row_limit = limit or s.BROWSEQL_ROW_LIMIT

    try:
        setup_logging(s)
    except OSError as e:
        err_console.print(f"[yellow]Logging disabled:[/yellow] {escape(str(e))}")

    try:
        conn = connect(database, read_only=read_only, create=create)
    except GatewayError as e:
        logger.error("Startup failed: %s", e)
        raise _fail(f"failed to connect to database: {e}")

    gateway = Gateway(conn)
    try:
        if list_tables:
            _print_tables(gateway)
        elif execute is not None:
            _print_result(gateway, execute, s.BROWSEQL_MAX_COLUMN_WIDTH)
        else:
            from .tui.app import run

            run(
                gateway,
                row_limit=row_limit,
                max_column_width=s.BROWSEQL_MAX_COLUMN_WIDTH,
                title=database.name,
            )
    except GatewayError as e:
        raise _fail(str(e))
    finally:
        gateway.close()


def run_cli():
    app()
