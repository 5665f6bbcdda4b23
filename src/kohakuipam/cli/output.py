"""Console output helpers shared by CLI commands."""

from rich.console import Console

from kohakuipam.models.enums import OutputFormat
from kohakuipam.storage.documents import dumps

console = Console()


def print_error(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def print_data(data, fmt: OutputFormat) -> None:
    """Print plain data as JSON or YAML, without markup or wrapping."""
    console.out(dumps(data, fmt.value).rstrip("\n"), highlight=False)
