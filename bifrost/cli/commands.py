"""CLI commands for bifrost.

``serve`` is what a client spawns; ``call`` is a one-shot bridged call for
trying a library from the shell.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from bifrost import __logo__, __version__
from bifrost.client.proxy import Proxy
from bifrost.client.session import open_bridge
from bifrost.config.loader import load_config
from bifrost.core.protocol import REF_KEY
from bifrost.server.stdio import run_stdio_server
from bifrost.utils.exceptions import BifrostError
from bifrost.utils.logging import configure_logging

app = typer.Typer(
    name="bifrost",
    help=f"{__logo__} bifrost - call into a Python library in another process",
    no_args_is_help=True,
)

console = Console()


def _parse_arg(raw: str) -> Any:
    """JSON when it parses, otherwise the literal text."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _printable(value: Any) -> Any:
    if isinstance(value, Proxy):
        return {REF_KEY: value.oid}
    if isinstance(value, list):
        return [_printable(item) for item in value]
    if isinstance(value, dict):
        return {key: _printable(item) for key, item in value.items()}
    return value


@app.command()
def serve(
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Path to config.json"),
) -> None:
    """Serve bridge requests on stdin/stdout until stdin closes."""
    config = load_config(config_path)
    configure_logging(config.logging.level, config.logging.file or None)
    run_stdio_server(config)


@app.command()
def call(
    module: str = typer.Argument(..., help="Module to import on the server"),
    function: str = typer.Argument(..., help="Function (or attribute) of the module"),
    args: list[str] | None = typer.Argument(None, help="Arguments; each parsed as JSON when possible"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Path to config.json"),
    timeout: float | None = typer.Option(None, "--timeout", "-t", help="Seconds to wait for each response"),
) -> None:
    """Import MODULE in a fresh server process and call FUNCTION(*ARGS)."""
    config = load_config(config_path)
    configure_logging(config.logging.level, config.logging.file or None)
    if timeout is not None:
        config.client.call_timeout_seconds = timeout
    params = [_parse_arg(raw) for raw in (args or [])]
    try:
        with open_bridge(config) as gateway:
            handle = gateway.import_module(module)
            if not isinstance(handle, Proxy):
                raise typer.BadParameter(f"{module} did not resolve to an object")
            result = gateway.call(handle.oid, function, params)
            console.print_json(data=_printable(result))
    except BifrostError as exc:
        console.print(f"[red]{exc.code}[/red]: {exc.message}")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"{__logo__} bifrost v{__version__}")


if __name__ == "__main__":
    app()
