"""``canvelete watch`` and ``canvelete watch-dir``: long-running render sessions.

Both commands run until interrupted (Ctrl+C), which ends them with status 0.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click

from canvelete.bootstrap import AppContainer
from canvelete.service_layer.hooks import HookRunner
from canvelete.service_layer.render import RenderOrchestrator
from canvelete.service_layer.watch import (
    DEFAULT_DEBOUNCE_MS,
    WATCHED_SUFFIX,
    DirectoryWatch,
    FileWatch,
    WatchResult,
)

from .helpers import detail, error, pass_app, run, success
from .helpers.output import format_kb
from .render import build_request, format_option, with_target


def _stamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def _report_render(result: WatchResult) -> None:
    if result.ok:
        success(f"[{_stamp()}] Saved to {result.output} ({format_kb(result.size)})")
    else:
        error(f"[{_stamp()}] Render failed: {result.error}")


def _report_file(result: WatchResult) -> None:
    if not result.ok:
        error(f"{result.source.name}: {result.error}")
        return
    success(f"[{_stamp()}] {result.source.name} -> {result.output.name}")
    if result.deleted:
        detail(f"  Deleted {result.source.name}")


def _banner(title: str, fields: list[tuple[str, object]]) -> None:
    click.echo(err=True)
    click.secho(title, bold=True, err=True)
    click.echo("-" * 40, err=True)
    for label, value in fields:
        click.echo(f"{(label + ':').ljust(11)}{value}", err=True)
    detail("\nPress Ctrl+C to stop\n")


@click.command("watch")
@click.argument("data_file", type=click.Path(exists=True, dir_okay=False))
@with_target
@click.option(
    "--output", "-o", help="Output file; {{timestamp}} and {{count}} are substituted per render."
)
@format_option
@click.option(
    "--debounce", type=click.IntRange(min=0), default=DEFAULT_DEBOUNCE_MS, show_default=True,
    help="Debounce time in milliseconds.",
)
@click.option("--on-change", help="Shell command to run after each successful render.")
@pass_app
def watch(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer,
    data_file: str,
    design_id: str | None,
    template_id: str | None,
    output: str | None,
    fmt: str | None,
    debounce: int,
    on_change: str | None,
) -> None:
    """Re-render a design whenever DATA_FILE changes.

    The file's JSON becomes the render's dynamic data. A first render runs
    immediately; after that every burst of changes triggers one render once
    DEBOUNCE milliseconds have passed without further changes.
    """
    target = build_request(
        app, design_id=design_id, template_id=template_id, fmt=fmt, quality=None
    )
    _banner(
        "Watch Mode",
        [
            ("Watching", data_file),
            ("Design", target.target_id),
            ("Output", output or "auto"),
            ("Format", target.format),
        ],
    )

    async def _session() -> None:
        source = app.change_source_factory(Path(data_file))
        async with app.open_client() as client, HookRunner() as hooks:
            session = FileWatch(
                RenderOrchestrator(client),
                data_file,
                target,
                output=output,
                debounce_ms=debounce,
                on_change=on_change,
                hooks=hooks,
                on_result=_report_render,
            )
            await session.run(source)

    try:
        run(_session())
    except KeyboardInterrupt:
        detail("\nStopping watch mode...")


@click.command("watch-dir")
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@with_target
@click.option(
    "--output-dir", "-o", type=click.Path(file_okay=False), default="./output", show_default=True,
    help="Output directory.",
)
@format_option
@click.option("--delete-after", is_flag=True, help="Delete each input file after a successful render.")
@pass_app
def watch_dir(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer,
    directory: str,
    design_id: str | None,
    template_id: str | None,
    output_dir: str,
    fmt: str | None,
    delete_after: bool,
) -> None:
    """Render every JSON file that appears in DIRECTORY.

    Files already present are rendered first. Each file is rendered once,
    into ``<output-dir>/<name>.<format>``.
    """
    target = build_request(
        app, design_id=design_id, template_id=template_id, fmt=fmt, quality=None
    )
    _banner("Directory Watch Mode", [("Watching", directory), ("Output to", output_dir)])

    async def _session() -> None:
        source = app.change_source_factory(Path(directory), suffix=WATCHED_SUFFIX)
        async with app.open_client() as client:
            session = DirectoryWatch(
                RenderOrchestrator(client),
                directory,
                output_dir,
                target,
                delete_after=delete_after,
                on_result=_report_file,
            )
            await session.run(source)

    try:
        run(_session())
    except KeyboardInterrupt:
        detail("\nStopping watch mode...")
