"""Canvas helpers: size presets, element construction and canvas documents."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from canvelete.domain.errors import NotFoundError, ValidationError

PRESETS: dict[str, tuple[int, int]] = {
    "hd": (1920, 1080),
    "instagram-post": (1080, 1080),
    "instagram-story": (1080, 1920),
    "facebook-post": (1200, 630),
    "twitter-post": (1200, 675),
    "youtube-thumbnail": (1280, 720),
    "a4-portrait": (2480, 3508),
    "a4-landscape": (3508, 2480),
}

ELEMENT_TYPES = ("rectangle", "circle", "text", "image", "line", "polygon")


def resolve_size(
    preset: str | None = None, width: int | None = None, height: int | None = None
) -> tuple[int, int]:
    """Pick the target size from a preset name or explicit dimensions.

    Raises:
        NotFoundError: If the preset is unknown.
        ValidationError: If neither a preset nor both dimensions are given.
    """
    if preset:
        try:
            return PRESETS[preset.lower()]
        except KeyError:
            raise NotFoundError("preset", preset, list(PRESETS)) from None
    if width and height:
        return width, height
    raise ValidationError("Specify --width and --height, or use --preset")


def build_element(
    element_type: str,
    *,
    x: int = 0,
    y: int = 0,
    width: int = 100,
    height: int = 100,
    fill: str | None = None,
    stroke: str | None = None,
    text: str | None = None,
    src: str | None = None,
) -> dict[str, Any]:
    """Element document for ``canvas add``; unset optional styles are omitted."""
    element: dict[str, Any] = {
        "type": element_type,
        "x": x,
        "y": y,
        "width": width,
        "height": height,
    }
    for key, value in (("fill", fill), ("stroke", stroke), ("text", text), ("src", src)):
        if value:
            element[key] = value
    return element


def elements_from_response(result: Any) -> list[dict[str, Any]]:
    """Elements of a ``GET /canvas`` answer (top level or in ``data``)."""
    if not isinstance(result, dict):
        return []
    if result.get("elements") is not None:
        return list(result["elements"])
    data = result.get("data")
    if isinstance(data, dict):
        return list(data.get("elements") or [])
    return []


def canvas_document(design_id: str, design: dict[str, Any]) -> dict[str, Any]:
    """Portable canvas snapshot written by ``canvas export``."""
    return {
        "width": design.get("width"),
        "height": design.get("height"),
        "elements": list((design.get("canvasData") or {}).get("elements") or []),
        "exportedAt": datetime.now(timezone.utc).isoformat(),
        "sourceDesignId": design_id,
    }


def merge_elements(
    existing: list[dict[str, Any]], imported: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    """Existing elements first, then the imported ones."""
    return [*existing, *imported]
