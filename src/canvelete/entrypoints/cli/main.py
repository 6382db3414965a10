"""Canvelete CLI entry point.

Defines the top-level ``canvelete`` command (via Click-Extra), configures
logging, builds the application container and registers every command group.

Notes
- The CLI version is sourced from `canvelete.__version__` and displayed
  automatically by Click-Extra (``--version``).
- Commands receive the `AppContainer` through ``ctx.obj``; tests inject their
  own container with ``CliRunner().invoke(canvelete, ..., obj=container)``.

Examples
    $ canvelete --version
    $ canvelete auth login
    $ canvelete render -d <design-id> -o out.png
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx

from canvelete import __version__
from canvelete.bootstrap import bootstrap, build_redactor
from canvelete.config import CONFIG_DIR_ENV, get_log_dir
from canvelete.logging import (
    RedactingFilter,
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

from .apikeys import apikeys
from .assets import assets
from .auth import auth
from .canvas import canvas
from .compare import clone, diff
from .config_cmds import config_group
from .designs import designs
from .export import export, export_all
from .helpers import hyperlink, translate_errors
from .helpers.log_level_parser import parse_log_level
from .misc import completion, open_dashboard, quick_render, whoami
from .profiles import profiles
from .project import init, validate
from .render import batch_render, render, renders
from .templates import templates
from .usage import billing, usage
from .watch import watch, watch_dir

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """Canvelete command-line interface.

    Create, render and export Canvelete designs and templates from the
    terminal: single renders, async render jobs, batch files, watch mode for
    data-driven renders, and management of assets, API keys and profiles.
    """


EPILOG = "\b\n" + "\n".join(
    [
        f"{click.style('See Also:', fg='blue', bold=True, underline=True)}",
        "  Docs     : " + hyperlink("https://docs.canvelete.com/cli"),
        "  Dashboard: " + hyperlink("https://www.canvelete.com/dashboard"),
    ]
)


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
    epilog=EPILOG,
)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=CONFIG_DIR_ENV,
    show_envvar=True,
    help="Directory holding config.json and profiles.json [default: user config dir].",
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (enables extra developer diagnostics beyond -vvv).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=get_log_dir() / "latest.log",
    envvar="CANVELETE_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="CANVELETE_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Enable the in-memory flight recorder. Keeps the last N log records "
        "(tunable via CANVELETE_FLIGHT_RECORDER_CAPACITY) at DEBUG granularity "
        "(unaffected by -v/-q) and writes them to --log-path when a WARNING/ERROR "
        "occurs, or on clean exit if --force-flush is set. Console verbosity is "
        "unchanged. Use --no-flight-recorder to disable."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help=(
        "Force-flush the flight recorder buffer to --log-path on program exit. "
        "Normally the buffer only dumps on WARNING/ERROR; console output is unaffected."
    ),
    envvar="CANVELETE_FORCE_FLUSH_FLIGHT_RECORDER",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). This changes the "
        "logger's own level, so it applies to BOTH console and flight-recorder. "
        "Use to quiet verbose third-party libs. Repeatable (e.g. -L httpx=INFO "
        "-L httpcore=WARNING) or via CANVELETE_LOGGER_LEVELS (comma/space list)."
    ),
    envvar="CANVELETE_LOGGER_LEVELS",
    default=("httpx=WARNING", "httpcore=WARNING"),
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--redactor-mode",
    "redactor_mode",
    type=click.Choice(["lenient", "strict"], case_sensitive=False),
    help=(
        "Set the redaction mode for logs. "
        "'lenient' (default) redacts API keys and tokens; "
        "'strict' also redacts profile names, user ids and email addresses."
    ),
    envvar="CANVELETE_REDACTOR_MODE",
    default="lenient",
    show_envvar=True,
    show_default=True,
)
@clickx.pass_context
def canvelete(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    config_dir: Path | None,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
    redactor_mode: str,
) -> None:
    """Canvelete command-line interface."""

    # 0) compute effective verbosity
    base_level = logging.WARNING
    level = base_level - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = []

    # 1) configure console handler
    use_color = ctx.color is not False  # None or True => allow color
    handlers.append(config_console_handler(level=level, debug_mode=debug, color=use_color))

    # 2) configure flight recorder
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # 3) scrub secrets before any handler sees a record
    redacting_filter = RedactingFilter(build_redactor(redactor_mode))
    for handler in handlers:
        handler.addFilter(redacting_filter)

    # 4) configure root logger with configured handlers
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # 5) set 3rd-party logger levels
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    # 6) log startup info
    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
        redactor_mode=redactor_mode,
    )

    # 7) ensure logging is cleanly shutdown on program exit
    ctx.call_on_close(logging.shutdown)

    # 8) build the application unless a caller injected one
    if ctx.obj is None:
        with translate_errors():
            ctx.obj = bootstrap(config_dir)


for command in (
    auth,
    designs,
    templates,
    render,
    renders,
    batch_render,
    export,
    export_all,
    canvas,
    assets,
    apikeys,
    usage,
    billing,
    config_group,
    profiles,
    init,
    validate,
    watch,
    watch_dir,
    diff,
    clone,
    whoami,
    open_dashboard,
    quick_render,
    completion,
):
    canvelete.add_command(command)


def main() -> None:
    """Console-script entry point.

    Click handles usage errors and `click.ClickException`; anything else is
    logged with its traceback at DEBUG and reported as a generic failure.
    """
    try:
        canvelete.main(prog_name="canvelete")  # pylint: disable=no-value-for-parameter
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.debug("Unhandled error", exc_info=True)
        click.secho(f"Error: unexpected failure ({type(e).__name__}: {e})", fg="red", err=True)
        sys.exit(1)
