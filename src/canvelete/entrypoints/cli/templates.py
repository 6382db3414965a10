"""``canvelete templates``: browse templates and start designs from them."""

from __future__ import annotations

from typing import Any

import click

from canvelete.bootstrap import AppContainer, CanveleteClient
from canvelete.service_layer.designs import unwrap

from .designs import design_fields, limit_option, page_option
from .helpers import call_api, detail, info, json_option, pass_app, success
from .helpers.output import items_of, print_fields, print_json, print_table, short_id, total_of, truncate


def print_templates(templates: list[dict[str, Any]]) -> None:
    print_table(
        ["ID", "Name", "Size", "Category"],
        [
            [
                short_id(t.get("id")),
                truncate(t.get("name"), 30),
                f"{t.get('width')}x{t.get('height')}",
                t.get("category") or "-",
            ]
            for t in templates
        ],
    )


@click.group()
def templates() -> None:
    """Browse and use templates."""


@templates.command("list")
@limit_option
@page_option
@click.option("--search", "-s", help="Search templates.")
@click.option("--category", "-c", help="Filter by category.")
@json_option
@pass_app
def list_templates(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer,
    limit: int,
    page: int,
    search: str | None,
    category: str | None,
    as_json: bool,
) -> None:
    """List available templates."""
    result = call_api(
        app,
        lambda client: client.list_templates(
            page=page, limit=limit, search=search, category=category
        ),
    )
    if as_json:
        print_json(result)
        return
    items = items_of(result)
    if not items:
        info("No templates found.")
        return
    print_templates(items)
    detail(f"Showing {len(items)} of {total_of(result) or len(items)} templates")


@templates.command("get")
@click.argument("template_id")
@json_option
@pass_app
def get_template(app: AppContainer, template_id: str, as_json: bool) -> None:
    """Get template details."""
    result = call_api(app, lambda client: client.get_template(template_id))
    if as_json:
        print_json(result)
        return
    template = unwrap(result)
    print_fields("Template Details", design_fields(template))
    if dynamic_fields := template.get("dynamicFields"):
        click.echo()
        click.secho("Dynamic Fields:", fg="cyan")
        for name in dynamic_fields:
            click.echo(f"  - {name}")


@templates.command("search")
@click.argument("query")
@limit_option
@json_option
@pass_app
def search_templates(app: AppContainer, query: str, limit: int, as_json: bool) -> None:
    """Search templates."""
    result = call_api(app, lambda client: client.list_templates(search=query, limit=limit))
    if as_json:
        print_json(result)
        return
    items = items_of(result)
    if not items:
        info(f'No templates found for "{query}".')
        return
    print_templates(items)


@templates.command("use")
@click.argument("template_id")
@click.option("--name", "-n", help="Name for the new design.")
@json_option
@pass_app
def use_template(app: AppContainer, template_id: str, name: str | None, as_json: bool) -> None:
    """Create a new design from a template."""

    async def _use(client: CanveleteClient) -> Any:
        template = unwrap(await client.get_template(template_id))
        return await client.create_design(
            {
                "name": name or f"From {template.get('name')}",
                "width": template.get("width"),
                "height": template.get("height"),
                "canvasData": template.get("canvasData"),
                "isTemplate": False,
            }
        )

    result = call_api(app, _use)
    if as_json:
        print_json(result)
        return
    design = unwrap(result)
    success("Design created from template!")
    detail(f"ID: {design.get('id')}")
    detail(f"Name: {design.get('name')}")
