"""Design comparison and cloning helpers."""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass
from typing import Any

from canvelete.domain.errors import ValidationError

COMPARED_PROPERTIES = ("name", "width", "height", "status", "visibility")
IGNORED_DIFF_KEYS = frozenset({"canvasData", "id", "createdAt", "updatedAt"})


def unwrap(payload: Any) -> Any:
    """Return the ``data`` member of an API envelope, or the payload itself."""
    if isinstance(payload, dict) and "data" in payload and payload["data"] is not None:
        return payload["data"]
    return payload


def elements_of(design: dict[str, Any]) -> list[dict[str, Any]]:
    """The canvas elements of a design (empty when it has no canvas)."""
    canvas = design.get("canvasData") or {}
    return list(canvas.get("elements") or [])


def count_by_type(elements: list[dict[str, Any]]) -> dict[str, int]:
    """Number of elements per ``type``, in first-seen order."""
    return dict(Counter(str(el.get("type")) for el in elements))


@dataclass(frozen=True)
class Difference:
    """A leaf value that differs between two designs."""

    path: str
    value1: Any
    value2: Any

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "value1": self.value1, "value2": self.value2}


def find_differences(obj1: Any, obj2: Any, path: str = "") -> list[Difference]:
    """List the differing leaves of two JSON documents, as dotted paths.

    Canvas data, ids and timestamps are ignored at every level. Nested
    objects are compared key by key; anything else is compared by value.
    """
    obj1 = obj1 if isinstance(obj1, dict) else {}
    obj2 = obj2 if isinstance(obj2, dict) else {}
    diffs: list[Difference] = []
    for key in dict.fromkeys([*obj1, *obj2]):
        if key in IGNORED_DIFF_KEYS:
            continue
        val1, val2 = obj1.get(key), obj2.get(key)
        current = f"{path}.{key}" if path else key
        if isinstance(val1, dict) and isinstance(val2, dict):
            diffs.extend(find_differences(val1, val2, current))
        elif val1 != val2:
            diffs.append(Difference(current, val1, val2))
    return diffs


async def fetch_pair(api: Any, design_id1: str, design_id2: str) -> tuple[Any, Any]:
    """Fetch two designs concurrently and unwrap their envelopes."""
    result1, result2 = await asyncio.gather(
        api.get_design(design_id1), api.get_design(design_id2)
    )
    return unwrap(result1), unwrap(result2)


def clone_dimensions(
    width: int,
    height: int,
    *,
    scale: float | None = None,
    new_width: int | None = None,
    new_height: int | None = None,
) -> tuple[int, int]:
    """Dimensions of a clone: scaled first, then explicit overrides win."""
    if scale is not None:
        if scale <= 0:
            raise ValidationError("Scale must be a positive number")
        width = round(width * scale)
        height = round(height * scale)
    if new_width is not None:
        width = new_width
    if new_height is not None:
        height = new_height
    return width, height


def clone_payload(
    design_id: str,
    design: dict[str, Any],
    *,
    name: str | None = None,
    scale: float | None = None,
    width: int | None = None,
    height: int | None = None,
) -> dict[str, Any]:
    """Body of the create request that clones `design`."""
    new_width, new_height = clone_dimensions(
        design.get("width") or 0,
        design.get("height") or 0,
        scale=scale,
        new_width=width,
        new_height=height,
    )
    return {
        "name": name or f"Clone of {design.get('name')}",
        "width": new_width,
        "height": new_height,
        "canvasData": design.get("canvasData"),
        "description": f"Cloned from {design_id}",
    }
