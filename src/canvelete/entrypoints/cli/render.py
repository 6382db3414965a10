"""Render commands: ``render``, ``renders list/status`` and ``batch-render``."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from canvelete.bootstrap import AppContainer
from canvelete.domain.value_objects import RenderFormat, RenderJob, RenderRequest
from canvelete.files import write_atomic
from canvelete.service_layer.batch import EXAMPLE_BATCH, BatchEngine, BatchItemResult, load_batch_file
from canvelete.service_layer.render import (
    DEFAULT_POLL_INTERVAL_MS,
    RenderOrchestrator,
)
from canvelete.service_layer.watch import epoch_ms

from .designs import limit_option, page_option
from .helpers import call_api, detail, error, info, json_option, pass_app, success, translate_errors
from .helpers.output import (
    format_bytes,
    format_date,
    format_kb,
    items_of,
    print_fields,
    print_json,
    print_table,
    short_id,
)
from .helpers.runtime import load_json_option

logger = logging.getLogger(__name__)

format_option = click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(RenderFormat.values(), case_sensitive=False),
    help="Output format [default: from config, png].",
)
quality_option = click.option(
    "--quality",
    "-q",
    type=int,
    help="Quality 1-100 [default: from config, 90].",
)
target_options = [
    click.option("--design", "-d", "design_id", help="Design ID to render."),
    click.option("--template", "-t", "template_id", help="Template ID to render."),
]


def with_target(func):
    """Attach the ``--design``/``--template`` pair to a command."""
    for option in reversed(target_options):
        func = option(func)
    return func


def build_request(  # pylint: disable=too-many-arguments
    app: AppContainer,
    *,
    design_id: str | None,
    template_id: str | None,
    fmt: str | None,
    quality: int | None,
    width: int | None = None,
    height: int | None = None,
    dynamic_data: object = None,
) -> RenderRequest:
    """Request with format/quality falling back to the configured defaults.

    Validated here, before any network call.
    """
    request = RenderRequest(
        design_id=design_id,
        template_id=template_id,
        format=(fmt or app.config_store.get("default_format")).lower(),
        quality=quality if quality is not None else app.config_store.get("default_quality"),
        width=width,
        height=height,
        dynamic_data=dynamic_data,
    )
    with translate_errors():
        request.validate()
    return request


# ============================================================================
#                                   render
# ============================================================================


@click.command("render")
@with_target
@format_option
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path.")
@quality_option
@click.option("--width", "-w", type=click.IntRange(min=1), help="Custom width.")
@click.option("--height", "-H", type=click.IntRange(min=1), help="Custom height.")
@click.option("--data", help="Dynamic data as a JSON string.")
@click.option(
    "--data-file", type=click.Path(exists=True, dir_okay=False), help="Dynamic data from a JSON file."
)
@click.option("--async", "use_async", is_flag=True, help="Start an async render and print the job ID.")
@click.option("--stdout", "to_stdout", is_flag=True, help="Write the binary result to stdout.")
@json_option
@pass_app
def render(  # pylint: disable=too-many-arguments,too-many-positional-arguments,too-many-locals
    app: AppContainer,
    design_id: str | None,
    template_id: str | None,
    fmt: str | None,
    output: str | None,
    quality: int | None,
    width: int | None,
    height: int | None,
    data: str | None,
    data_file: str | None,
    use_async: bool,
    to_stdout: bool,
    as_json: bool,
) -> None:
    """Render a design or template to an image or PDF."""
    request = build_request(
        app,
        design_id=design_id,
        template_id=template_id,
        fmt=fmt,
        quality=quality,
        width=width,
        height=height,
        dynamic_data=load_json_option(data, data_file),
    )

    if use_async:
        ticket = call_api(app, lambda client: RenderOrchestrator(client).render_async(request))
        if as_json:
            print_json(
                {
                    "jobId": ticket.job_id,
                    "status": ticket.status.value,
                    "estimatedTime": ticket.estimated_time,
                }
            )
            return
        success("Render job started")
        click.echo(ticket.job_id)
        detail(f"Status: {ticket.status.value}")
        if ticket.estimated_time:
            detail(f"Estimated time: {ticket.estimated_time}s")
        detail(f"Check status with: canvelete renders status {ticket.job_id}")
        return

    image = call_api(app, lambda client: RenderOrchestrator(client).render_sync(request))

    if to_stdout:
        click.get_binary_stream("stdout").write(image)
        return

    path = Path(output or f"{request.target_id[:8]}_{epoch_ms()}.{request.format}")
    try:
        write_atomic(path, image)
    except OSError as e:
        raise click.ClickException(f"Could not write {path}: {e}") from e

    if as_json:
        print_json({"output": str(path), "size": len(image), "format": request.format})
        return
    success("Rendered successfully!")
    detail(f"Output: {path}")
    detail(f"Size: {format_kb(len(image))}")


# ============================================================================
#                               renders group
# ============================================================================


@click.group()
def renders() -> None:
    """Manage render jobs."""


@renders.command("list")
@limit_option
@page_option
@json_option
@pass_app
def list_renders(app: AppContainer, limit: int, page: int, as_json: bool) -> None:
    """List render history."""
    result = call_api(app, lambda client: client.list_renders(page=page, limit=limit))
    if as_json:
        print_json(result)
        return
    items = items_of(result)
    if not items:
        info("No render history found.")
        return
    print_table(
        ["ID", "Design", "Format", "Status", "Size", "Created"],
        [
            [
                short_id(r.get("id")),
                short_id(r.get("designId")),
                str(r.get("format") or "-").upper(),
                r.get("status"),
                format_bytes(r.get("fileSize")),
                format_date(r.get("createdAt")),
            ]
            for r in items
        ],
    )


def _print_job(job: RenderJob) -> None:
    print_fields(
        "Render Job Status",
        [
            ("Job ID", job.job_id),
            ("Status", job.status.value),
            ("Format", job.format),
            ("Output", job.output_url),
            ("Error", job.error),
        ],
    )


def _log_poll(job: RenderJob) -> None:
    logger.info("Waiting for render... (%s)", job.status.value)


@renders.command("status")
@click.argument("job_id")
@click.option("--wait", is_flag=True, help="Wait until the job completes or fails.")
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=300,
    show_default=True,
    help="Seconds to wait with --wait.",
)
@click.option(
    "--interval",
    type=click.IntRange(min=1),
    default=DEFAULT_POLL_INTERVAL_MS,
    hidden=True,
    help="Milliseconds between status polls with --wait.",
)
@json_option
@pass_app
def render_status(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer, job_id: str, wait: bool, timeout: int, interval: int, as_json: bool
) -> None:
    """Check the status of an async render job."""
    if not wait:
        job = call_api(app, lambda client: RenderOrchestrator(client).poll_status(job_id))
        if as_json:
            print_json(job.to_dict())
        else:
            _print_job(job)
        return

    job = call_api(
        app,
        lambda client: RenderOrchestrator(client).wait_for_completion(
            job_id, timeout_ms=timeout * 1000, poll_interval_ms=interval, on_poll=_log_poll
        ),
    )
    if as_json:
        print_json(job.to_dict())
    if job.status.value == "failed":
        raise click.ClickException(f"Render failed: {job.error or 'Unknown error'}")
    if not as_json:
        success("Render completed!")
        if job.output_url:
            detail(f"Output URL: {job.output_url}")


# ============================================================================
#                                batch-render
# ============================================================================


def _report_item(result: BatchItemResult) -> None:
    if result.ok:
        success(f"{result.label} ({format_kb(result.size)})")
    else:
        error(f"{result.label}: {result.error}")


@click.command("batch-render")
@click.option(
    "--file", "-f", "batch_file", type=click.Path(dir_okay=False), help="JSON file with render configurations."
)
@click.option(
    "--parallel", type=click.IntRange(min=1), default=3, show_default=True,
    help="Requested number of parallel renders (items are rendered in order).",
)
@click.option(
    "--output-dir", "-o", type=click.Path(file_okay=False), default=".", show_default=True,
    help="Output directory.",
)
@json_option
@pass_app
def batch_render(
    app: AppContainer, batch_file: str | None, parallel: int, output_dir: str, as_json: bool
) -> None:
    """Render every entry of a batch file.

    The file is a JSON array of objects with designId or templateId and
    optional format, quality, width, height, data and output. Failed items
    are reported and the run continues; the exit status is 1 if any item
    failed.
    """
    if not batch_file:
        raise click.UsageError(
            "--file is required\n\nExample batch file:\n" + json.dumps(EXAMPLE_BATCH, indent=2)
        )
    with translate_errors():
        try:
            items = load_batch_file(batch_file)
        except OSError as e:
            raise click.ClickException(f"Failed to read batch file: {e}") from e

    if not as_json:
        click.secho(f"Batch rendering {len(items)} designs...", bold=True, err=True)

    async def _run(client):
        engine = BatchEngine(
            RenderOrchestrator(client),
            output_dir,
            parallel=parallel,
            on_result=None if as_json else _report_item,
        )
        return await engine.run(items)

    summary = call_api(app, _run)

    if as_json:
        print_json(
            {
                "succeeded": summary.succeeded,
                "failed": summary.failed,
                "results": [
                    {
                        "position": r.position,
                        "label": r.label,
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
            f"Batch complete: {summary.succeeded} succeeded, {summary.failed} failed",
            bold=True,
            err=True,
        )
    if summary.failed:
        raise SystemExit(1)
