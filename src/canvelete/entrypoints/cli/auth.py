"""``canvelete auth``: store, inspect and verify the API key."""

from __future__ import annotations

import click

from canvelete.bootstrap import AppContainer
from canvelete.interfaces.api_errors import ApiError, HttpError

from .helpers import detail, error, info, pass_app, run, success, translate_errors, warn
from .helpers.output import mask_secret

API_KEYS_PATH = "/dashboard/api-keys"


async def _verify_key(app: AppContainer, api_key: str) -> None:
    """One cheap authenticated request; raises `HttpError` on rejection."""
    async with app.client_factory(api_key, app.credentials.effective_base_url()) as client:
        await client.list_designs(limit=1)


@click.group()
def auth() -> None:
    """Manage authentication."""


@auth.command()
@click.option("--key", "-k", "api_key", help="API key (prompted for when omitted).")
@click.option("--browser", is_flag=True, help="Open the dashboard to create or copy an API key.")
@click.option(
    "--verify/--no-verify",
    default=True,
    show_default=True,
    help="Check the key against the API before saving it.",
)
@pass_app
def login(app: AppContainer, api_key: str | None, browser: bool, verify: bool) -> None:
    """Authenticate with Canvelete."""
    if browser:
        url = app.credentials.effective_base_url() + API_KEYS_PATH
        info("Opening browser to get your API key...")
        click.launch(url)
        detail("Create or copy an API key from the dashboard.")

    if not api_key:
        api_key = click.prompt("Enter your API key", hide_input=True, err=True)

    if verify:
        try:
            run(_verify_key(app, api_key.strip()))
        except click.ClickException as e:
            cause = e.__cause__
            if isinstance(cause, HttpError) and cause.status == 401:
                raise click.ClickException("Invalid API key. Please check and try again.") from cause
            raise click.ClickException(f"Authentication failed: {e.message}") from cause

    with translate_errors():
        app.credentials.login(api_key)
    success("Successfully authenticated!")
    detail(f"Config saved to: {app.config_store.path}")


@auth.command()
@pass_app
def logout(app: AppContainer) -> None:
    """Remove stored credentials."""
    app.credentials.logout()
    success("Logged out successfully.")
    if app.credentials.effective_api_key():
        warn(f"A key is still provided by the {app.credentials.key_source()}.")


@auth.command()
@click.option("--check/--no-check", default=True, help="Test the key against the API.")
@pass_app
def status(app: AppContainer, check: bool) -> None:
    """Check authentication status."""
    api_key = app.credentials.effective_api_key()
    if not api_key:
        warn("Not authenticated.")
        detail("Run: canvelete auth login")
        return

    success("Authenticated")
    click.echo(f"Key:     {mask_secret(api_key)}")
    click.echo(f"Source:  {app.credentials.key_source()}")
    click.echo(f"Config:  {app.config_store.path}")
    click.echo(f"API:     {app.credentials.effective_base_url()}")

    if not check:
        return
    try:
        run(_verify_key(app, api_key))
    except click.ClickException as e:
        if isinstance(e.__cause__, HttpError):
            error("API key may be invalid or expired")
        elif isinstance(e.__cause__, ApiError):
            warn("Could not verify API connection")
        else:
            raise
    else:
        success("API connection verified")


@auth.command()
@click.option("--show", is_flag=True, help="Show the full key (use with caution).")
@pass_app
def token(app: AppContainer, show: bool) -> None:
    """Display the current API key."""
    with translate_errors():
        api_key = app.credentials.require_api_key()
    click.echo(api_key if show else mask_secret(api_key))
