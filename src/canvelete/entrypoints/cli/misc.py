"""Utility commands: ``whoami``, ``open``, ``quick-render`` and ``completion``."""

from __future__ import annotations

from pathlib import Path

import click
from click.shell_completion import get_completion_class

from canvelete.bootstrap import AppContainer
from canvelete.config import DASHBOARD_PATH, EDITOR_PATH
from canvelete.domain.value_objects import RenderRequest
from canvelete.files import write_atomic
from canvelete.service_layer.render import RenderOrchestrator

from .helpers import call_api, detail, json_option, pass_app, success, warn
from .helpers.output import format_kb, mask_secret, print_json

COMPLETION_SHELLS = ("bash", "zsh", "fish")
COMPLETION_VAR = "_CANVELETE_COMPLETE"


@click.command("whoami")
@json_option
@pass_app
def whoami(app: AppContainer, as_json: bool) -> None:
    """Show which API key and profile are in use."""
    api_key = app.credentials.effective_api_key()
    profile, _ = app.credentials.current_profile()
    if as_json:
        print_json(
            {
                "authenticated": bool(api_key),
                "apiKey": mask_secret(api_key) if api_key else None,
                "source": app.credentials.key_source(),
                "profile": profile,
                "baseUrl": app.credentials.effective_base_url(),
            }
        )
        return
    if not api_key:
        warn("Not authenticated.")
        detail("Run: canvelete auth login")
        return
    success("Authenticated")
    detail(f"API Key: {mask_secret(api_key)}")
    detail(f"Source:  {app.credentials.key_source()}")
    detail(f"Profile: {profile}")


@click.command("open")
@click.option("--design", "-d", "design_id", help="Open this design in the editor.")
@pass_app
def open_dashboard(app: AppContainer, design_id: str | None) -> None:
    """Open the Canvelete dashboard (or a design) in the browser."""
    path = EDITOR_PATH.format(design_id=design_id) if design_id else DASHBOARD_PATH
    url = app.credentials.effective_base_url() + path
    detail(f"Opening {url}...")
    click.launch(url)


@click.command("quick-render")
@click.argument("design_id")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file [default: <id>.png].")
@pass_app
def quick_render(app: AppContainer, design_id: str, output: str | None) -> None:
    """Render a design to PNG at quality 90."""
    request = RenderRequest(design_id=design_id)
    image = call_api(app, lambda client: RenderOrchestrator(client).render_sync(request))
    path = Path(output or f"{design_id[:8]}.png")
    try:
        write_atomic(path, image)
    except OSError as e:
        raise click.ClickException(f"Could not write {path}: {e}") from e
    success(f"Saved to {path} ({format_kb(len(image))})")


@click.command("completion")
@click.option(
    "--shell", "-s", type=click.Choice(COMPLETION_SHELLS), default="bash", show_default=True,
    help="Shell to generate the script for.",
)
@click.pass_context
def completion(ctx: click.Context, shell: str) -> None:
    """Print a shell completion script.

    \b
    bash:  eval "$(canvelete completion --shell bash)"
    zsh:   eval "$(canvelete completion --shell zsh)"
    fish:  canvelete completion --shell fish > ~/.config/fish/completions/canvelete.fish
    """
    completion_class = get_completion_class(shell)
    if completion_class is None:
        raise click.UsageError(f"Unsupported shell: {shell}")
    root = ctx.find_root()
    script = completion_class(root.command, {}, root.info_name or "canvelete", COMPLETION_VAR)
    click.echo(script.source())
