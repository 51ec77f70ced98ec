"""errorlens CLI: classify upstream error payloads from files or stdin.

Usage:
    errorlens classify payload.json          Classify a JSON payload
    errorlens classify - --hint SAP          Read from stdin with a hint
    errorlens shapes                         List shapes in priority order
    errorlens config show                    Show resolved configuration
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from errorlens.classification.handle import from_value
from errorlens.classification.registry import DEFAULT_REGISTRY
from errorlens.cli.output import format_config, format_report, format_shapes
from errorlens.config import ErrorLensConfig, load_config_or_default
from errorlens.logs import configure_logging

_log = logging.getLogger(__name__)

app = typer.Typer(
    name="errorlens",
    help="Classify heterogeneous upstream error payloads",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Configuration management")
app.add_typer(config_app, name="config")

console = Console()

# --- Global state ---
_config_path: str | None = None


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to errorlens.yaml config file"
    ),
):
    """errorlens: structural error classification."""
    global _config_path
    _config_path = config


def _load_settings() -> ErrorLensConfig:
    try:
        cfg = load_config_or_default(_config_path)
    # pydantic.ValidationError is a ValueError
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(cfg.logging)
    return cfg


def _read_payload(source: str) -> Any:
    """Read a payload; non-JSON text is returned as a plain string."""
    path = None if source == "-" else Path(source)
    if path is not None and not path.is_file():
        console.print(f"[red]File not found:[/red] {escape(source)}")
        raise typer.Exit(1)
    try:
        text = sys.stdin.read() if path is None else path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        console.print(f"[red]Payload is not valid UTF-8:[/red] {escape(source)}")
        raise typer.Exit(1)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        _log.debug("Input is not JSON, classifying as plain text")
        return text.strip()


@app.command()
def version():
    """Show errorlens version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        v = pkg_version("errorlens")
    except PackageNotFoundError:
        v = "unknown"
    console.print(f"[bold]errorlens[/bold] v{v}")


@app.command()
def classify(
    source: str = typer.Argument("-", help="Payload file, or - for stdin"),
    hint: Optional[str] = typer.Option(None, "--hint", help="Shape id to try first"),
    correlation_id: Optional[str] = typer.Option(
        None, "--correlation-id", help="Correlation id stamped on the report"
    ),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Classify an error payload and print its report."""
    cfg = _load_settings()
    payload = _read_payload(source)

    handle = from_value(payload, correlation_id, retry_settings=cfg.retry).of_type(
        hint or cfg.classification.default_hint
    )
    typer.echo(format_report(handle.info(), handle.retry_config(), as_json=as_json))


@app.command()
def shapes(
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List recognized error shapes in priority order."""
    ordered = [*DEFAULT_REGISTRY.shapes_in_priority_order(), DEFAULT_REGISTRY.generic]
    typer.echo(format_shapes(ordered, as_json=as_json))


@config_app.command("show")
def config_show(
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Display resolved configuration."""
    cfg = _load_settings()
    typer.echo(format_config(cfg, as_json=as_json))


if __name__ == "__main__":
    app()
