"""Domain layer utilities."""

import json
import re
from collections.abc import Callable
from dataclasses import MISSING, fields, is_dataclass
from typing import Any, TypeVar, cast

from .errors import DataParseError

D = TypeVar("D")

TIMESTAMP_PLACEHOLDER = "{{timestamp}}"
COUNT_PLACEHOLDER = "{{count}}"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def render_output_path(template: str, *, count: int, now_ms: int) -> str:
    """Substitute the watch-mode placeholders in an output path template.

    Args:
        template: Output path, possibly containing ``{{timestamp}}`` and
            ``{{count}}``.
        count: Value for ``{{count}}`` (1-based render counter).
        now_ms: Value for ``{{timestamp}}`` (epoch milliseconds).

    Returns:
        The path with every occurrence of both placeholders replaced.
    """
    return template.replace(TIMESTAMP_PLACEHOLDER, str(now_ms)).replace(
        COUNT_PLACEHOLDER, str(count)
    )


def parse_json_text(text: str, source: str) -> Any:
    """Parse JSON text, reporting failures as `DataParseError`.

    Args:
        text: Raw JSON document.
        source: Human-readable origin (file name, ``--data``) for messages.

    Raises:
        DataParseError: If the text is not valid JSON.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DataParseError(source, str(e)) from e


def camel_to_snake(name: str) -> str:
    """``createdAt`` -> ``created_at``; snake_case input is returned unchanged."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def dict_to_dataclass(dc_type: type[D], values: dict[str, Any]) -> D:
    """Build a flat dataclass instance from an API- or file-shaped mapping.

    Keys may be camelCase (as the API and the stored JSON use) or snake_case.

    Args:
        dc_type: The dataclass type to build.
        values: The mapping holding the data.

    Returns:
        An instance of dc_type populated with data from values.

    Note:
        - Keys that do not match a field are ignored.
        - All fields without defaults must be present in values.
    """
    if not is_dataclass(dc_type):
        raise TypeError(f"{dc_type} is not a dataclass type")
    normalized = {camel_to_snake(key): value for key, value in values.items()}
    kwargs: dict[str, Any] = {}
    for field in fields(dc_type):
        if not field.init:
            continue
        if field.name in normalized:
            kwargs[field.name] = normalized[field.name]
        elif field.default is not MISSING:
            kwargs[field.name] = field.default
        elif field.default_factory is not MISSING:
            factory = cast(Callable[[], Any], field.default_factory)
            kwargs[field.name] = factory()
        else:
            raise KeyError(f"Missing required field '{field.name}'")
    return cast(D, dc_type(**kwargs))
