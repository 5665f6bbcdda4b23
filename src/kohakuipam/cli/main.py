"""
KohakuIPAM CLI entry point.

Usage:
    kohakuipam [OPTIONS] COMMAND [ARGS]...

Commands:
    apply     Apply a pool spec to the allocation table
    show      Show the allocation table
    usage     Show pool usage per datacenter
    config    Configuration
    version   Show version information
"""

from typing import Annotated

import typer

from kohakuipam.cli.commands import config_cmd, pool
from kohakuipam.cli.output import console, print_error
from kohakuipam.config import config
from kohakuipam.models.enums import LogLevel, OutputFormat
from kohakuipam.utils.logger import configure_logging

app = typer.Typer(
    name="kohakuipam",
    help="KohakuIPAM pool reconciliation CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command("apply")(pool.apply_pool)
app.command("show")(pool.show_allocations)
app.command("usage")(pool.pool_usage)
app.add_typer(config_cmd.app, name="config", help="Configuration")


@app.callback()
def main(
    log_level: Annotated[
        LogLevel | None,
        typer.Option("--log-level", "-l", help="Logging verbosity"),
    ] = None,
    output_format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|yaml"),
    ] = None,
):
    """
    KohakuIPAM pool reconciliation CLI.

    Allocate address ranges and subnets to clusters from named pools.
    """
    try:
        config.load_env()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(2)

    if log_level:
        config.LOG_LEVEL = log_level
    if output_format:
        config.OUTPUT_FORMAT = output_format

    configure_logging(config.LOG_LEVEL, config.LOG_FILE)


@app.command("version")
def version():
    """Show version information."""
    from kohakuipam import __version__

    console.print(f"KohakuIPAM v{__version__}")


def run():
    app()


if __name__ == "__main__":
    run()
