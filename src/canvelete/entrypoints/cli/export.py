"""``canvelete export`` and ``canvelete export-all``."""

from __future__ import annotations

from pathlib import Path

import click

from canvelete.bootstrap import AppContainer
from canvelete.domain.errors import ValidationError
from canvelete.domain.value_objects import RenderFormat
from canvelete.files import write_atomic
from canvelete.service_layer.batch import BatchItemResult, export_formats, parse_formats

from .helpers import call_api, detail, error, json_option, pass_app, success, translate_errors
from .helpers.output import format_kb, print_json


@click.command("export")
@click.argument("design_id")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(RenderFormat.values(), case_sensitive=False),
    default="png",
    show_default=True,
    help="Output format.",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path.")
@click.option(
    "--quality", "-q", type=click.IntRange(1, 100), default=100, show_default=True, help="Quality."
)
@click.option("--open", "open_after", is_flag=True, help="Open the file after export.")
@json_option
@pass_app
def export(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer,
    design_id: str,
    fmt: str,
    output: str | None,
    quality: int,
    open_after: bool,
    as_json: bool,
) -> None:
    """Export a design to a file."""
    fmt = fmt.lower()
    data = call_api(app, lambda client: client.export_design(design_id, fmt, quality))

    path = Path(output or f"{design_id[:8]}_export.{fmt}")
    try:
        write_atomic(path, data)
    except OSError as e:
        raise click.ClickException(f"Could not write {path}: {e}") from e

    if as_json:
        print_json({"output": str(path), "size": len(data), "format": fmt})
    else:
        success("Exported successfully!")
        detail(f"Output: {path}")
        detail(f"Size: {format_kb(len(data))}")
        detail(f"Format: {fmt.upper()}")

    if open_after:
        click.launch(str(path))


def _report(result: BatchItemResult) -> None:
    if result.ok:
        success(f"{result.label} -> {result.output}")
    else:
        error(f"{result.label}: {result.error}")


@click.command("export-all")
@click.argument("design_id")
@click.option(
    "--output-dir", "-o", type=click.Path(file_okay=False), default=".", show_default=True,
    help="Output directory.",
)
@click.option(
    "--formats", default="png,pdf", show_default=True, help="Comma-separated list of formats."
)
@json_option
@pass_app
def export_all(
    app: AppContainer, design_id: str, output_dir: str, formats: str, as_json: bool
) -> None:
    """Export a design to several formats.

    Each format is written to ``<output-dir>/<id[:8]>.<format>`` at quality
    100. A failed format is reported and the remaining formats still run.
    """
    format_list = parse_formats(formats)
    if not format_list:
        with translate_errors():
            raise ValidationError("No formats given")

    if not as_json:
        click.secho(f"Exporting to {len(format_list)} formats...", bold=True, err=True)

    summary = call_api(
        app,
        lambda client: export_formats(
            client, design_id, format_list, output_dir, on_result=None if as_json else _report
        ),
    )

    if as_json:
        print_json(
            {
                "succeeded": summary.succeeded,
                "failed": summary.failed,
                "results": [
                    {
                        "format": r.label.lower(),
                        "output": str(r.output) if r.output else None,
                        "size": r.size,
                        "error": r.error,
                    }
                    for r in summary.results
                ],
            }
        )
    else:
        click.secho(
            f"Export complete: {summary.succeeded} succeeded, {summary.failed} failed",
            bold=True,
            err=True,
        )
    if summary.failed:
        raise SystemExit(1)
