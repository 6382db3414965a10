"""``canvelete apikeys``: manage the account's API keys."""

from __future__ import annotations

import click

from canvelete.bootstrap import AppContainer
from canvelete.service_layer.designs import unwrap

from .designs import limit_option
from .helpers import call_api, detail, info, json_option, pass_app, success, warn
from .helpers.output import format_date, items_of, print_json, print_table, short_id, truncate


@click.group()
def apikeys() -> None:
    """Manage API keys."""


@apikeys.command("list")
@limit_option
@json_option
@pass_app
def list_keys(app: AppContainer, limit: int, as_json: bool) -> None:
    """List API keys."""
    result = call_api(app, lambda client: client.list_api_keys(limit=limit))
    if as_json:
        print_json(result)
        return
    keys = items_of(result)
    if not keys:
        info("No API keys found.")
        return
    print_table(
        ["ID", "Name", "Prefix", "Status", "Created", "Last Used"],
        [
            [
                short_id(k.get("id")),
                truncate(k.get("name"), 20),
                k.get("keyPrefix"),
                k.get("status"),
                format_date(k.get("createdAt")),
                format_date(k.get("lastUsedAt")) if k.get("lastUsedAt") else "Never",
            ]
            for k in keys
        ],
    )


@apikeys.command("create")
@click.option("--name", "-n", help="Key name (prompted when omitted).")
@click.option("--expires", "-e", help="Expiration date (ISO 8601).")
@json_option
@pass_app
def create_key(app: AppContainer, name: str | None, expires: str | None, as_json: bool) -> None:
    """Create a new API key.

    The full key is only shown once, right after creation.
    """
    if not name:
        name = click.prompt("Key name", default="CLI Key", err=True)
    result = call_api(app, lambda client: client.create_api_key(name, expires))
    if as_json:
        print_json(result)
        return
    key = unwrap(result)
    success("API key created!")
    warn("Save this key now. It will not be shown again!")
    click.echo(f"API Key: {key.get('key')}")
    detail(f"Name: {key.get('name')}")
    detail(f"ID: {key.get('id')}")


@apikeys.command("revoke")
@click.argument("key_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation.")
@pass_app
def revoke_key(app: AppContainer, key_id: str, force: bool) -> None:
    """Revoke an API key."""
    if not force:
        click.confirm(
            f"Revoke API key {key_id}? Applications using it will stop working.",
            default=False,
            abort=True,
            err=True,
        )
    call_api(app, lambda client: client.revoke_api_key(key_id))
    success("API key revoked successfully")
