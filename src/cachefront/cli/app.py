import json
from dataclasses import dataclass
from typing import Annotated

import typer

from cachefront.cache import Cache
from cachefront.cli._logging import configure_logging
from cachefront.cli._output import console, print_cleared, print_error, print_flushed, print_stored, print_value
from cachefront.config import create_config
from cachefront.exceptions import StoreConfigurationError
from cachefront.factory import create_registry
from cachefront.registry import CacheRegistry
from cachefront.store.protocol import MISSING

app = typer.Typer(name="cachefront", help="cachefront: inspect and manage cached entries")


@dataclass
class _State:
    registry: CacheRegistry


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_path: Annotated[str, typer.Option("--config", help="Path to the YAML config file")] = "cachefront.yaml",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
) -> None:
    """cachefront: inspect and manage cached entries."""
    configure_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()
    try:
        registry = create_registry(create_config(yaml_path=config_path))
    except StoreConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e
    ctx.obj = _State(registry=registry)


_NamespaceArg = Annotated[str, typer.Argument(help="Cache namespace")]
_KeyArg = Annotated[str, typer.Argument(help="Cache key")]
_AgeOpt = Annotated[int, typer.Option("--age", help="Maximum entry age in seconds (0 = rely on TTL)")]


def _cache(ctx: typer.Context, namespace: str) -> Cache:
    state: _State = ctx.obj
    try:
        return state.registry.provide(namespace)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e


@app.command()
def get(ctx: typer.Context, namespace: _NamespaceArg, key: _KeyArg, age: _AgeOpt = 0) -> None:
    """Print a cached value; exits with code 1 on a miss."""
    value = _cache(ctx, namespace).get(key, age)
    if value is MISSING:
        print_error(f"'{key}' is not cached in '{namespace}'")
        raise typer.Exit(code=1)
    print_value(value)


@app.command(name="set")
def set_(
    ctx: typer.Context,
    namespace: _NamespaceArg,
    key: _KeyArg,
    value: Annotated[str, typer.Argument(help="Value to cache")],
    ttl: Annotated[int, typer.Option("--ttl", help="Time to live in seconds (0 = no expiry)")] = 0,
    as_json: Annotated[bool, typer.Option("--json", help="Parse VALUE as JSON before caching")] = False,
) -> None:
    """Cache a value."""
    payload: object = value
    if as_json:
        try:
            payload = json.loads(value)
        except json.JSONDecodeError as e:
            print_error(f"VALUE is not valid JSON: {e}")
            raise typer.Exit(code=2) from e
    _cache(ctx, namespace).set(key, payload, ttl)
    print_stored(namespace, key, ttl)


@app.command()
def has(ctx: typer.Context, namespace: _NamespaceArg, key: _KeyArg, age: _AgeOpt = 0) -> None:
    """Report whether a fresh value is cached; exits with code 1 when not."""
    if _cache(ctx, namespace).has(key, age):
        console.print("yes")
        return
    console.print("no")
    raise typer.Exit(code=1)


@app.command()
def clear(ctx: typer.Context, namespace: _NamespaceArg, key: _KeyArg) -> None:
    """Remove a single cached value."""
    _cache(ctx, namespace).clear(key)
    print_cleared(namespace, key)


@app.command()
def flush(
    ctx: typer.Context,
    namespace: Annotated[str | None, typer.Argument(help="Namespace to flush; omit to flush everything")] = None,
) -> None:
    """Remove every cached value in a namespace, or in the whole store."""
    if not namespace:
        state: _State = ctx.obj
        state.registry.get_store().remove_all("")
    else:
        _cache(ctx, namespace).flush()
    print_flushed(namespace or None)
