"""``canvelete assets``: asset library, stock images, icons and fonts."""

from __future__ import annotations

import click

from canvelete.bootstrap import AppContainer

from .designs import limit_option, page_option
from .helpers import call_api, info, json_option, pass_app, success
from .helpers.output import (
    format_bytes,
    format_date,
    items_of,
    print_json,
    print_table,
    short_id,
    truncate,
)

ASSET_TYPES = ("IMAGE", "FONT", "VIDEO", "AUDIO")
FONT_CATEGORIES = ("serif", "sans-serif", "monospace", "display", "handwriting")


@click.group()
def assets() -> None:
    """Manage assets."""


@assets.command("list")
@limit_option
@page_option
@click.option(
    "--type", "-t", "asset_type", type=click.Choice(ASSET_TYPES, case_sensitive=False),
    help="Filter by type.",
)
@json_option
@pass_app
def list_assets(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer, limit: int, page: int, asset_type: str | None, as_json: bool
) -> None:
    """List assets in your library."""
    result = call_api(
        app,
        lambda client: client.list_assets(
            page=page, limit=limit, type=asset_type.upper() if asset_type else None
        ),
    )
    if as_json:
        print_json(result)
        return
    items = items_of(result)
    if not items:
        info("No assets found.")
        return
    print_table(
        ["ID", "Name", "Type", "Size", "Created"],
        [
            [
                short_id(a.get("id")),
                truncate(a.get("name"), 25),
                a.get("type"),
                format_bytes(a.get("size")),
                format_date(a.get("createdAt")),
            ]
            for a in items
        ],
    )


@assets.command("delete")
@click.argument("asset_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation.")
@pass_app
def delete_asset(app: AppContainer, asset_id: str, force: bool) -> None:
    """Delete an asset."""
    if not force:
        click.confirm(
            f"Are you sure you want to delete asset {asset_id}?", default=False, abort=True, err=True
        )
    call_api(app, lambda client: client.delete_asset(asset_id))
    success("Asset deleted successfully")


@assets.command("stock")
@click.argument("query")
@limit_option
@page_option
@json_option
@pass_app
def search_stock(app: AppContainer, query: str, limit: int, page: int, as_json: bool) -> None:
    """Search stock images."""
    result = call_api(
        app, lambda client: client.search_stock_images(query, page=page, per_page=limit)
    )
    if as_json:
        print_json(result)
        return
    images = items_of(result)
    if not images:
        info(f'No stock images found for "{query}".')
        return
    click.secho(f'Stock Images for "{query}"', bold=True)
    for i, image in enumerate(images, start=1):
        click.echo(f"{i:>2}. {image.get('tags')}")
        click.echo(
            f"    {image.get('imageWidth')}x{image.get('imageHeight')} | {image.get('previewURL')}"
        )


@assets.command("icons")
@click.argument("query")
@limit_option
@json_option
@pass_app
def search_icons(app: AppContainer, query: str, limit: int, as_json: bool) -> None:
    """Search icons."""
    result = call_api(app, lambda client: client.search_icons(query, per_page=limit))
    if as_json:
        print_json(result)
        return
    icons = items_of(result)
    if not icons:
        info(f'No icons found for "{query}".')
        return
    click.secho(f'Icons for "{query}"', bold=True)
    for i, icon in enumerate(icons, start=1):
        click.echo(f"{i:>2}. {icon.get('name')}")
        click.echo(f"    {icon.get('url')}")


@assets.command("fonts")
@click.option(
    "--category", "-c", type=click.Choice(FONT_CATEGORIES, case_sensitive=False),
    help="Filter by category.",
)
@json_option
@pass_app
def list_fonts(app: AppContainer, category: str | None, as_json: bool) -> None:
    """List available fonts."""
    result = call_api(app, lambda client: client.list_fonts(category))
    if as_json:
        print_json(result)
        return
    fonts = items_of(result)
    if not fonts:
        info("No fonts found.")
        return
    click.secho("Available Fonts", bold=True)
    for font in fonts:
        click.secho(str(font.get("family")), fg="cyan")
        variants = font.get("variants") or []
        if variants:
            click.echo(f"  Variants: {', '.join(map(str, variants))}")
