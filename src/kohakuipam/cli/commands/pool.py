"""Pool commands: apply a pool spec, show allocations, report usage."""

from typing import Annotated

import typer

from kohakuipam.cli.formatters import (
    format_allocation_table,
    format_new_allocations,
    format_usage_table,
)
from kohakuipam.cli.output import console, print_data, print_error, print_success
from kohakuipam.config import config
from kohakuipam.exceptions import IPAMError
from kohakuipam.models.enums import OutputFormat
from kohakuipam.services.reconcile import ReconcileService
from kohakuipam.storage.documents import table_to_document

TableOption = Annotated[
    str | None,
    typer.Option(
        "--table",
        "-t",
        help="Allocation table document (default: TABLE_FILE config)",
    ),
]


def _service(table: str | None) -> ReconcileService:
    return ReconcileService(table or config.TABLE_FILE, backup=config.BACKUP_ON_WRITE)


def apply_pool(
    pool_file: Annotated[str, typer.Argument(help="Pool spec document")],
    table: TableOption = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Show new allocations, save nothing"),
    ] = False,
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Write the updated table here instead"),
    ] = None,
):
    """Apply a pool spec to every cluster still lacking an allocation."""
    try:
        result = _service(table).apply_pool_file(
            pool_file, dry_run=dry_run, output_path=output
        )
    except IPAMError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if config.OUTPUT_FORMAT != OutputFormat.TABLE:
        print_data(
            {
                "pool": result.pool_name,
                "dryRun": result.dry_run,
                "savedTo": result.saved_to,
                "allocations": [a.to_document() for a in result.allocations],
            },
            config.OUTPUT_FORMAT,
        )
        return

    if not result.changed:
        console.print(f"[dim]Pool '{result.pool_name}' is already up to date.[/dim]")
        return

    title = "Planned Allocations" if result.dry_run else "New Allocations"
    console.print(format_new_allocations(result.allocations, title=title))
    if result.saved_to:
        print_success(f"Allocation table saved to {result.saved_to}")


def show_allocations(
    table: TableOption = None,
    datacenter: Annotated[
        str | None,
        typer.Option("--datacenter", "-d", help="Only this datacenter"),
    ] = None,
    pool: Annotated[
        str | None, typer.Option("--pool", "-p", help="Only this pool name")
    ] = None,
):
    """Show the allocation table."""
    try:
        allocations = _service(table).load_table()
    except IPAMError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if datacenter and datacenter not in allocations:
        print_error(f"Datacenter '{datacenter}' not found.")
        raise typer.Exit(1)

    if config.OUTPUT_FORMAT != OutputFormat.TABLE:
        if datacenter:
            allocations = {datacenter: allocations[datacenter]}
        print_data(table_to_document(allocations), config.OUTPUT_FORMAT)
        return

    if not allocations:
        console.print("[yellow]No datacenters found.[/yellow]")
        return

    console.print(format_allocation_table(allocations, datacenter, pool))


def pool_usage(
    pool_file: Annotated[str, typer.Argument(help="Pool spec document")],
    table: TableOption = None,
):
    """Show how much of each datacenter's pool CIDR is allocated."""
    try:
        usages = _service(table).usage_for_pool_file(pool_file)
    except IPAMError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if config.OUTPUT_FORMAT != OutputFormat.TABLE:
        print_data([u.to_dict() for u in usages], config.OUTPUT_FORMAT)
        return

    console.print(format_usage_table(usages))
