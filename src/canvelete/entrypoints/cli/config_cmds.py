"""``canvelete config``: read and change persisted CLI settings."""

from __future__ import annotations

from typing import Any

import click

from canvelete.bootstrap import AppContainer
from canvelete.domain.errors import NotFoundError
from canvelete.domain.utils import camel_to_snake
from canvelete.interfaces.config_store import CONFIG_DEFAULTS

from .helpers import detail, json_option, pass_app, success, translate_errors
from .helpers.output import mask_secret, print_json


def _normalize_key(key: str) -> str:
    """Accept both ``defaultQuality`` and ``default_quality``."""
    normalized = camel_to_snake(key.replace("-", "_"))
    if normalized not in CONFIG_DEFAULTS:
        with translate_errors():
            raise NotFoundError("config key", key, list(CONFIG_DEFAULTS))
    return normalized


def _display(key: str, value: Any) -> Any:
    if key == "api_key":
        return mask_secret(value) if value else None
    return value


@click.group("config")
def config_group() -> None:
    """Manage CLI configuration."""


@config_group.command("list")
@json_option
@pass_app
def list_config(app: AppContainer, as_json: bool) -> None:
    """Show all configuration values (the API key is masked)."""
    values = {key: _display(key, value) for key, value in app.config_store.all().items()}
    if as_json:
        print_json(values)
        return
    click.echo()
    click.secho("Configuration", bold=True)
    click.echo("-" * 40)
    detail(f"Path: {app.config_store.path}")
    for key, value in values.items():
        shown = click.style("(not set)", dim=True) if value in (None, "") else value
        click.echo(f"{click.style(key.ljust(20), fg='cyan')} {shown}")


@config_group.command("get")
@click.argument("key")
@pass_app
def get_config(app: AppContainer, key: str) -> None:
    """Print one configuration value."""
    key = _normalize_key(key)
    value = _display(key, app.config_store.get(key))
    click.echo("" if value is None else value)


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@pass_app
def set_config(app: AppContainer, key: str, value: str) -> None:
    """Set a configuration value.

    \b
    Settable keys: base_url, default_format, default_quality
    (camelCase spellings such as defaultQuality are accepted too).
    """
    with translate_errors():
        stored = app.credentials.set_setting(_normalize_key(key), value)
    success(f"Set {camel_to_snake(key)} = {stored}")


@config_group.command("path")
@pass_app
def config_path(app: AppContainer) -> None:
    """Show the configuration file path."""
    click.echo(app.config_store.path)
