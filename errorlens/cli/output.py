"""CLI output formatters for Rich tables and JSON.

Human-readable Rich output is the default; ``--json`` switches every
command to machine-parseable JSON.
"""

import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from errorlens.classification.registry import ErrorShape
from errorlens.classification.report import ClassificationReport, RetryPolicy
from errorlens.config import ErrorLensConfig

console = Console()

TYPE_COLORS = {
    "RAML_ERROR": "magenta",
    "SAP_ERROR": "blue",
    "SF_ERROR": "cyan",
    "GATEWAY_ERROR": "yellow",
    "UNKNOWN_ERROR": "red",
}


def _render(renderable: object) -> str:
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def format_report(
    report: ClassificationReport,
    policy: RetryPolicy,
    as_json: bool = False,
) -> str:
    """Format a classification report as a Rich table or JSON.

    Args:
        report: Report to display.
        policy: Retry policy derived for the report's type.
        as_json: If True, return JSON string instead of Rich table.

    Returns:
        Formatted string output.
    """
    if as_json:
        return json.dumps({**report.to_dict(), "retry": policy.to_dict()}, indent=2)

    color = TYPE_COLORS.get(report.type, "white")
    table = Table(title="Classified Error", show_header=False, show_lines=True)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Type", f"[{color}]{report.type}[/{color}]")
    table.add_row("Message", escape(report.message))
    table.add_row("Code", escape(report.code))
    table.add_row("Details", escape(report.details))
    table.add_row("Source", escape(report.source))
    table.add_row("HTTP status", str(report.http_status))
    retry = (
        f"yes ({policy.max_retries}x, {policy.backoff_millis} ms, {policy.strategy})"
        if policy.should_retry
        else "no"
    )
    table.add_row("Retryable", retry)
    table.add_row("Correlation ID", escape(report.correlation_id))
    table.add_row("Timestamp", report.timestamp)
    return _render(table)


def format_shapes(shapes: list[ErrorShape], as_json: bool = False) -> str:
    """Format registered shapes in priority order."""
    if as_json:
        return json.dumps(
            [
                {
                    "priority": i,
                    "id": shape.id,
                    "error_type": shape.error_type.value,
                    "source": shape.source_label,
                }
                for i, shape in enumerate(shapes, 1)
            ],
            indent=2,
        )

    table = Table(title="Error Shapes (priority order)")
    table.add_column("#", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Source")
    for i, shape in enumerate(shapes, 1):
        color = TYPE_COLORS.get(shape.error_type.value, "white")
        table.add_row(
            str(i),
            shape.id,
            f"[{color}]{shape.error_type.value}[/{color}]",
            shape.source_label,
        )
    return _render(table)


def format_config(cfg: ErrorLensConfig, as_json: bool = False) -> str:
    if as_json:
        return cfg.model_dump_json(indent=2)
    lines = []
    for section, values in cfg.model_dump().items():
        lines.append(f"[bold]{section}:[/bold]")
        lines.extend(f"  {key}: {escape(str(value))}" for key, value in values.items())
    return _render("\n".join(lines))
