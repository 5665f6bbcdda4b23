"""Config management commands."""

from dataclasses import asdict

import typer
from rich.table import Table

from kohakuipam.cli.output import console, print_data
from kohakuipam.config import config
from kohakuipam.models.enums import OutputFormat

app = typer.Typer(help="Configuration commands")


@app.command("show")
def show_config():
    """Show current configuration."""
    values = {
        name: value.value if hasattr(value, "value") else value
        for name, value in asdict(config).items()
    }

    if config.OUTPUT_FORMAT != OutputFormat.TABLE:
        print_data(values, config.OUTPUT_FORMAT)
        return

    sources = config.sources()
    table = Table(title="Current Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source")

    for name, value in values.items():
        table.add_row(name, str(value), sources[name])

    console.print(table)
