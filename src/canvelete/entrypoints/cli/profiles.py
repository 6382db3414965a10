"""``canvelete profiles``: named API keys for switching between accounts."""

from __future__ import annotations

import json

import click

from canvelete.bootstrap import AppContainer
from canvelete.service_layer.credentials import mask_key

from .helpers import detail, info, pass_app, success, translate_errors, warn
from .helpers.output import print_fields
from .helpers.runtime import load_json_option


@click.group()
def profiles() -> None:
    """Manage multiple API key profiles."""


@profiles.command("list")
@pass_app
def list_profiles(app: AppContainer) -> None:
    """List all profiles; the active one is marked with ``*``."""
    stored = app.profile_store.list()
    active = app.profile_store.active
    click.echo()
    click.secho("Profiles", bold=True)
    click.echo("-" * 40)
    if not stored:
        info("No profiles configured.")
        detail("Create one with: canvelete profiles add <name>")
        return
    for name, profile in stored.items():
        marker = "* " if name == active else "  "
        click.echo(f"{marker}{click.style(name.ljust(15), fg='cyan')} {mask_key(profile.api_key)}")
        if profile.description:
            detail(f"  {profile.description}")
    detail(f"Active: {active}")


@profiles.command("add")
@click.argument("name")
@click.option("--key", "-k", "api_key", help="API key for this profile (prompted when omitted).")
@click.option("--description", "-d", default="", help="Profile description.")
@click.option("--base-url", help="Custom API base URL.")
@click.option(
    "--switch/--no-switch",
    default=None,
    help="Activate the new profile [default: ask].",
)
@pass_app
def add_profile(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer,
    name: str,
    api_key: str | None,
    description: str,
    base_url: str | None,
    switch: bool | None,
) -> None:
    """Add (or overwrite) a profile."""
    if app.profile_store.get(name) is not None:
        click.confirm(f'Profile "{name}" already exists. Overwrite?', abort=True, err=True)
    if not api_key:
        api_key = click.prompt("API key", hide_input=True, err=True)

    with translate_errors():
        app.credentials.add_profile(name, api_key, description=description, base_url=base_url)
    success(f'Profile "{name}" created')

    if switch is None:
        switch = click.confirm(f'Switch to "{name}" profile now?', default=True, err=True)
    if switch:
        with translate_errors():
            app.credentials.switch_profile(name)
        success(f'Switched to "{name}"')


@profiles.command("remove")
@click.argument("name")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation.")
@pass_app
def remove_profile(app: AppContainer, name: str, force: bool) -> None:
    """Remove a profile."""
    if not force and app.profile_store.get(name) is not None:
        click.confirm(f'Remove profile "{name}"?', default=False, abort=True, err=True)
    with translate_errors():
        was_active = app.credentials.remove_profile(name)
    if was_active:
        warn('Active profile was removed. Switched to "default".')
    success(f'Profile "{name}" removed')


@profiles.command("use")
@click.argument("name")
@pass_app
def use_profile(app: AppContainer, name: str) -> None:
    """Switch to a profile."""
    with translate_errors():
        app.credentials.switch_profile(name)
    success(f'Switched to "{name}"')


@profiles.command("current")
@pass_app
def current_profile(app: AppContainer) -> None:
    """Show the active profile."""
    name, profile = app.credentials.current_profile()
    if profile is None:
        print_fields("Current Profile", [("Name", name)])
        detail("(using default configuration)")
        return
    fields = [
        ("Name", name),
        ("API Key", mask_key(profile.api_key)),
        ("Base URL", profile.base_url),
    ]
    if profile.description:
        fields.append(("Description", profile.description))
    print_fields("Current Profile", fields)


@profiles.command("export")
@click.option("--include-keys", is_flag=True, help="Include full API keys (use with caution).")
@pass_app
def export_profiles(app: AppContainer, include_keys: bool) -> None:
    """Print all profiles as JSON.

    Keys are masked unless --include-keys is given; masked entries are
    skipped by ``profiles import``.
    """
    if include_keys:
        warn("The output contains full API keys.")
    click.echo(json.dumps(app.credentials.export_profiles(include_keys), indent=2))


@profiles.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--merge", is_flag=True, help="Merge with the existing profiles.")
@pass_app
def import_profiles(app: AppContainer, file: str, merge: bool) -> None:
    """Import profiles from a JSON file written by ``profiles export``."""
    data = load_json_option(data_file=file)
    with translate_errors():
        count = app.credentials.import_profiles(data, merge=merge)
    success(f"Imported {count} profiles")
