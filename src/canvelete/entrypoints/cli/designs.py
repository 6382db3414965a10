"""``canvelete designs``: list, inspect, create, update, delete and duplicate designs."""

from __future__ import annotations

from typing import Any

import click

from canvelete.bootstrap import AppContainer
from canvelete.service_layer.canvas import PRESETS
from canvelete.service_layer.designs import unwrap

from .helpers import call_api, detail, info, json_option, pass_app, success
from .helpers.output import (
    format_date,
    items_of,
    print_fields,
    print_json,
    print_table,
    short_id,
    total_of,
    truncate,
)

STATUSES = ("DRAFT", "PUBLISHED", "ARCHIVED")
VISIBILITIES = ("PRIVATE", "PUBLIC", "TEAM")

limit_option = click.option(
    "--limit", "-l", type=click.IntRange(min=1), default=20, show_default=True,
    help="Number of results.",
)
page_option = click.option(
    "--page", "-p", type=click.IntRange(min=1), default=1, show_default=True, help="Page number."
)


def design_fields(design: dict[str, Any]) -> list[tuple[str, Any]]:
    """Labelled fields shown by ``designs get`` / ``templates get``."""
    return [
        ("ID", design.get("id")),
        ("Name", design.get("name")),
        ("Size", f"{design.get('width')}x{design.get('height')}"),
        ("Status", design.get("status")),
        ("Visibility", design.get("visibility")),
        ("Template", "Yes" if design.get("isTemplate") else "No"),
        ("Created", format_date(design.get("createdAt"))),
        ("Updated", format_date(design.get("updatedAt"))),
    ]


def print_designs(designs: list[dict[str, Any]], total: Any = None) -> None:
    print_table(
        ["ID", "Name", "Size", "Status", "Created"],
        [
            [
                short_id(d.get("id")),
                truncate(d.get("name"), 30),
                f"{d.get('width')}x{d.get('height')}",
                d.get("status"),
                format_date(d.get("createdAt")),
            ]
            for d in designs
        ],
    )
    detail(f"Showing {len(designs)} of {total or len(designs)} designs")


@click.group()
def designs() -> None:
    """Manage designs."""


@designs.command("list")
@limit_option
@page_option
@click.option("--templates", "templates_only", is_flag=True, help="Show only templates.")
@click.option("--status", type=click.Choice(STATUSES, case_sensitive=False), help="Filter by status.")
@json_option
@pass_app
def list_designs(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer, limit: int, page: int, templates_only: bool, status: str | None, as_json: bool
) -> None:
    """List all designs."""
    result = call_api(
        app,
        lambda client: client.list_designs(
            page=page,
            limit=limit,
            is_template=True if templates_only else None,
            status=status.upper() if status else None,
        ),
    )
    if as_json:
        print_json(result)
        return
    items = items_of(result)
    if not items:
        info("No designs found.")
        return
    print_designs(items, total_of(result))


@designs.command("get")
@click.argument("design_id")
@json_option
@pass_app
def get_design(app: AppContainer, design_id: str, as_json: bool) -> None:
    """Get design details."""
    result = call_api(app, lambda client: client.get_design(design_id))
    if as_json:
        print_json(result)
        return
    print_fields("Design Details", design_fields(unwrap(result)))


def _parse_size(value: str) -> tuple[int, int]:
    if value.lower() in PRESETS:
        return PRESETS[value.lower()]
    try:
        width, height = (int(part) for part in value.lower().split("x", 1))
    except ValueError:
        raise click.BadParameter(
            f"Expected WIDTHxHEIGHT or a preset ({', '.join(PRESETS)})", param_hint="--size"
        ) from None
    return width, height


@designs.command("create")
@click.option("--name", "-n", help="Design name (prompted for when omitted).")
@click.option("--width", "-w", type=click.IntRange(min=1), default=1920, show_default=True)
@click.option("--height", "-H", type=click.IntRange(min=1), default=1080, show_default=True)
@click.option("--size", help="WIDTHxHEIGHT or a preset name (overrides --width/--height).")
@click.option("--description", "-d", help="Description.")
@click.option("--template", "is_template", is_flag=True, help="Create as template.")
@click.option(
    "--visibility",
    type=click.Choice(VISIBILITIES, case_sensitive=False),
    default="PRIVATE",
    show_default=True,
)
@json_option
@pass_app
def create_design(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer,
    name: str | None,
    width: int,
    height: int,
    size: str | None,
    description: str | None,
    is_template: bool,
    visibility: str,
    as_json: bool,
) -> None:
    """Create a new design."""
    if not name:
        name = click.prompt("Design name")
    if size:
        width, height = _parse_size(size)

    payload = {
        "name": name,
        "width": width,
        "height": height,
        "description": description,
        "isTemplate": is_template,
        "visibility": visibility.upper(),
        "canvasData": {"elements": []},
    }
    result = call_api(app, lambda client: client.create_design(payload))
    if as_json:
        print_json(result)
        return
    design = unwrap(result)
    success(f"Design created: {design.get('name')}")
    detail(f"ID: {design.get('id')}")
    detail(f"Size: {design.get('width')}x{design.get('height')}")


@designs.command("update")
@click.argument("design_id")
@click.option("--name", "-n", help="New name.")
@click.option("--description", "-d", help="New description.")
@click.option("--status", type=click.Choice(STATUSES, case_sensitive=False))
@click.option("--visibility", type=click.Choice(VISIBILITIES, case_sensitive=False))
@json_option
@pass_app
def update_design(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer,
    design_id: str,
    name: str | None,
    description: str | None,
    status: str | None,
    visibility: str | None,
    as_json: bool,
) -> None:
    """Update a design."""
    updates = {
        key: value
        for key, value in (
            ("name", name),
            ("description", description),
            ("status", status.upper() if status else None),
            ("visibility", visibility.upper() if visibility else None),
        )
        if value
    }
    if not updates:
        raise click.UsageError(
            "No updates specified. Use --name, --description, --status, or --visibility"
        )
    result = call_api(app, lambda client: client.update_design(design_id, updates))
    if as_json:
        print_json(result)
        return
    success("Design updated successfully")


@designs.command("delete")
@click.argument("design_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation.")
@pass_app
def delete_design(app: AppContainer, design_id: str, force: bool) -> None:
    """Delete a design."""
    if not force:
        click.confirm(
            f"Are you sure you want to delete design {design_id}?", abort=True, err=True
        )
    call_api(app, lambda client: client.delete_design(design_id))
    success("Design deleted successfully")


@designs.command("duplicate")
@click.argument("design_id")
@click.option("--name", "-n", help="Name for the copy (prompted for when omitted).")
@json_option
@pass_app
def duplicate_design(app: AppContainer, design_id: str, name: str | None, as_json: bool) -> None:
    """Duplicate a design."""
    if not name:
        name = click.prompt("Name for the copy", default="Copy of design")
    result = call_api(app, lambda client: client.duplicate_design(design_id, name))
    if as_json:
        print_json(result)
        return
    design = unwrap(result)
    success(f"Design duplicated: {design.get('name')}")
    detail(f"New ID: {design.get('id')}")
