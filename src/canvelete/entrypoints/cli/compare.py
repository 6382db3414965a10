"""``canvelete diff`` and ``canvelete clone``."""

from __future__ import annotations

import click

from canvelete.bootstrap import AppContainer
from canvelete.service_layer.designs import (
    COMPARED_PROPERTIES,
    clone_payload,
    count_by_type,
    elements_of,
    fetch_pair,
    find_differences,
    unwrap,
)

from .helpers import call_api, detail, json_option, pass_app, success, translate_errors
from .helpers.output import print_json, print_table


@click.command("diff")
@click.argument("design_id1")
@click.argument("design_id2")
@click.option("--elements", "by_type", is_flag=True, help="Also compare element counts by type.")
@json_option
@pass_app
def diff(app: AppContainer, design_id1: str, design_id2: str, by_type: bool, as_json: bool) -> None:
    """Compare two designs."""
    design1, design2 = call_api(app, lambda client: fetch_pair(client, design_id1, design_id2))
    design1 = design1 if isinstance(design1, dict) else {}
    design2 = design2 if isinstance(design2, dict) else {}

    if as_json:
        print_json(
            {
                "design1": {"id": design_id1, **design1},
                "design2": {"id": design_id2, **design2},
                "differences": [d.to_dict() for d in find_differences(design1, design2)],
            }
        )
        return

    rows = []
    for prop in COMPARED_PROPERTIES:
        val1, val2 = design1.get(prop), design2.get(prop)
        marker = "*" if val1 != val2 else ""
        rows.append([prop, val1, val2, marker])
    print_table(["Property", "Design 1", "Design 2", "Diff"], rows, title="Design Comparison")

    elements1, elements2 = elements_of(design1), elements_of(design2)
    click.secho("\nElements:", bold=True)
    click.echo(f"Design 1: {len(elements1)} elements")
    click.echo(f"Design 2: {len(elements2)} elements")

    if by_type and elements1 and elements2:
        types1, types2 = count_by_type(elements1), count_by_type(elements2)
        click.secho("\nElement Types:", bold=True)
        for element_type in dict.fromkeys([*types1, *types2]):
            count1, count2 = types1.get(element_type, 0), types2.get(element_type, 0)
            delta = count2 - count1
            change = f"{delta:+d}" if delta else ""
            click.echo(f"  {element_type.ljust(12)} {count1} -> {count2} {change}".rstrip())


@click.command("clone")
@click.argument("design_id")
@click.option("--name", "-n", help="Name of the new design [default: 'Clone of <name>'].")
@click.option("--width", type=click.IntRange(min=1), help="New width.")
@click.option("--height", type=click.IntRange(min=1), help="New height.")
@click.option("--scale", type=float, help="Scale factor for both dimensions.")
@json_option
@pass_app
def clone(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    app: AppContainer,
    design_id: str,
    name: str | None,
    width: int | None,
    height: int | None,
    scale: float | None,
    as_json: bool,
) -> None:
    """Clone a design, optionally resized.

    --scale is applied first; --width and --height override the result.
    """

    async def _clone(client):
        original = unwrap(await client.get_design(design_id))
        with translate_errors():
            payload = clone_payload(
                design_id,
                original if isinstance(original, dict) else {},
                name=name,
                scale=scale,
                width=width,
                height=height,
            )
        return payload, await client.create_design(payload)

    payload, result = call_api(app, _clone)
    if as_json:
        print_json(result)
        return
    created = unwrap(result)
    success("Design cloned!")
    detail(f"Original: {design_id}")
    detail(f"New ID:   {created.get('id') if isinstance(created, dict) else '-'}")
    detail(f"Size:     {payload['width']}x{payload['height']}")
