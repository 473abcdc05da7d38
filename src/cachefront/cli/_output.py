import json

from rich.console import Console

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def print_value(value: object) -> None:
    """Print a cached value: strings verbatim, everything else as JSON when possible."""
    if isinstance(value, str):
        console.print(value, markup=False)
        return
    try:
        console.print(json.dumps(value, indent=2, sort_keys=True), markup=False)
    except (TypeError, ValueError):
        console.print(repr(value), markup=False)


def print_stored(namespace: str, key: str, ttl: int) -> None:
    expiry = f"expires in {ttl}s" if ttl > 0 else "no expiry"
    console.print(f"[bold green]Stored[/bold green] [bold]{key}[/bold] in '{namespace}' ({expiry})")


def print_cleared(namespace: str, key: str) -> None:
    console.print(f"[bold green]Cleared[/bold green] [bold]{key}[/bold] from '{namespace}'")


def print_flushed(namespace: str | None) -> None:
    if namespace is None:
        console.print("[bold green]Flushed[/bold green] the whole store")
    else:
        console.print(f"[bold green]Flushed[/bold green] namespace '{namespace}'")
