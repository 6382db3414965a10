"""``canvelete canvas``: inspect and edit the elements of a design's canvas."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from canvelete.bootstrap import AppContainer
from canvelete.domain.errors import ValidationError
from canvelete.files import write_json_atomic
from canvelete.service_layer.canvas import (
    ELEMENT_TYPES,
    PRESETS,
    build_element,
    canvas_document,
    elements_from_response,
    merge_elements,
    resolve_size,
)
from canvelete.service_layer.designs import elements_of, unwrap

from .helpers import call_api, detail, info, json_option, pass_app, success, translate_errors
from .helpers.output import print_json, truncate
from .helpers.runtime import load_json_option


@click.group()
def canvas() -> None:
    """Manipulate canvas elements."""


@canvas.command("elements")
@click.argument("design_id")
@json_option
@pass_app
def list_elements(app: AppContainer, design_id: str, as_json: bool) -> None:
    """List all elements on a design's canvas."""
    result = call_api(app, lambda client: client.get_elements(design_id))
    if as_json:
        print_json(result)
        return
    elements = elements_from_response(result)
    if not elements:
        info("No elements found on canvas.")
        return

    click.secho(f"Canvas Elements ({len(elements)})", bold=True)
    for i, element in enumerate(elements, start=1):
        element_id = str(element.get("id") or "no-id")[:8]
        click.echo(f"{i:>2}. {element.get('type')} ({element_id})")
        click.echo(
            f"    Position: {element.get('x')}, {element.get('y')} | "
            f"Size: {element.get('width')}x{element.get('height')}"
        )
        if element.get("text"):
            click.echo(f'    Text: "{truncate(element["text"], 43)}"')
        if element.get("fill"):
            click.echo(f"    Fill: {element['fill']}")


@canvas.command("add")
@click.argument("design_id")
@click.option(
    "--type", "-t", "element_type", type=click.Choice(ELEMENT_TYPES), help="Element type."
)
@click.option("-x", "x", type=int, default=0, show_default=True, help="X position.")
@click.option("-y", "y", type=int, default=0, show_default=True, help="Y position.")
@click.option("--width", "-w", type=int, default=100, show_default=True, help="Width.")
@click.option("--height", "-H", type=int, default=100, show_default=True, help="Height.")
@click.option("--fill", help="Fill color.")
@click.option("--stroke", help="Stroke color.")
@click.option("--text", help="Text content (text elements).")
@click.option("--src", help="Image source URL (image elements).")
@click.option(
    "--from-file", type=click.Path(exists=True, dir_okay=False), help="Load the element from a JSON file."
)
@json_option
@pass_app
def add_element(  # pylint: disable=too-many-arguments,too-many-positional-arguments,too-many-locals
    app: AppContainer,
    design_id: str,
    element_type: str | None,
    x: int,
    y: int,
    width: int,
    height: int,
    fill: str | None,
    stroke: str | None,
    text: str | None,
    src: str | None,
    from_file: str | None,
    as_json: bool,
) -> None:
    """Add an element to the canvas."""
    element: Any
    if from_file:
        element = load_json_option(data_file=from_file)
        if not isinstance(element, dict):
            raise click.ClickException("Element file must contain a JSON object")
    else:
        if not element_type:
            with translate_errors():
                raise ValidationError(
                    f"Element type is required. Use --type ({', '.join(ELEMENT_TYPES)})"
                )
        element = build_element(
            element_type,
            x=x,
            y=y,
            width=width,
            height=height,
            fill=fill,
            stroke=stroke,
            text=text,
            src=src,
        )

    result = call_api(app, lambda client: client.add_element(design_id, element))
    if as_json:
        print_json(result)
        return
    success("Element added successfully")
    added = unwrap(result)
    if isinstance(added, dict) and added.get("id"):
        detail(f"Element ID: {added['id']}")


@canvas.command("clear")
@click.argument("design_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation.")
@pass_app
def clear_canvas(app: AppContainer, design_id: str, force: bool) -> None:
    """Remove all elements from the canvas."""
    if not force:
        click.confirm(
            f"Remove all elements from design {design_id}?", default=False, abort=True, err=True
        )
    call_api(app, lambda client: client.clear_canvas(design_id))
    success("Canvas cleared")


@canvas.command("resize")
@click.argument("design_id")
@click.option("--width", "-w", type=click.IntRange(min=1), help="New width.")
@click.option("--height", "-H", type=click.IntRange(min=1), help="New height.")
@click.option(
    "--preset", help=f"Preset size ({', '.join(PRESETS)}).", metavar="NAME"
)
@json_option
@pass_app
def resize_canvas(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer,
    design_id: str,
    width: int | None,
    height: int | None,
    preset: str | None,
    as_json: bool,
) -> None:
    """Resize the canvas."""
    with translate_errors():
        new_width, new_height = resolve_size(preset, width, height)
    result = call_api(app, lambda client: client.resize_canvas(design_id, new_width, new_height))
    if as_json:
        print_json(result)
        return
    success(f"Canvas resized to {new_width}x{new_height}")


@canvas.command("export")
@click.argument("design_id")
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False), default="canvas.json", show_default=True,
    help="Output file.",
)
@pass_app
def export_canvas(app: AppContainer, design_id: str, output: str) -> None:
    """Export canvas data to a JSON file."""
    design = unwrap(call_api(app, lambda client: client.get_design(design_id)))
    document = canvas_document(design_id, design if isinstance(design, dict) else {})
    try:
        write_json_atomic(output, document)
    except OSError as e:
        raise click.ClickException(f"Could not write {output}: {e}") from e
    success(f"Canvas exported to {output}")
    detail(f"Elements: {len(document['elements'])}")


@canvas.command("import")
@click.argument("design_id")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--merge", is_flag=True, help="Append to the existing elements instead of replacing them.")
@pass_app
def import_canvas(app: AppContainer, design_id: str, file: str, merge: bool) -> None:
    """Replace (or extend) the canvas elements with those of a JSON file."""
    document = load_json_option(data_file=file)
    if not isinstance(document, dict):
        raise click.ClickException("Canvas file must contain a JSON object")
    imported = list(document.get("elements") or [])

    async def _import(client):
        elements = imported
        if merge:
            existing = unwrap(await client.get_design(design_id))
            elements = merge_elements(
                elements_of(existing) if isinstance(existing, dict) else [], imported
            )
        await client.update_design(design_id, {"canvasData": {"elements": elements}})
        return elements

    elements = call_api(app, _import)
    success(f"Canvas imported from {Path(file).name}")
    detail(f"Elements: {len(elements)}")
