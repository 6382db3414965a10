"""Formatting of command results: JSON, Rich tables and key/value blocks.

Command results go to **stdout**; notices go to stderr through `messages`.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

import click
from rich.console import Console
from rich.table import Table


def _console() -> Console:
    ctx = click.get_current_context(silent=True)
    no_color = ctx is not None and ctx.color is False
    return Console(file=click.get_text_stream("stdout"), no_color=no_color, soft_wrap=False)


def print_json(data: Any) -> None:
    """Pretty-print `data` as JSON on stdout."""
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def print_table(headers: Sequence[str], rows: Iterable[Sequence[Any]], title: str | None = None) -> None:
    """Render rows as a Rich table on stdout."""
    table = Table(title=title, header_style="bold cyan")
    for header in headers:
        table.add_column(header, overflow="fold")
    for row in rows:
        table.add_row(*("-" if cell is None else str(cell) for cell in row))
    _console().print(table)


def print_fields(title: str, fields: Iterable[tuple[str, Any]]) -> None:
    """Print a bold title, a rule, and aligned ``Label: value`` lines."""
    pairs = list(fields)
    width = max((len(label) for label, _ in pairs), default=0) + 2
    click.echo()
    click.secho(title, bold=True)
    click.echo("-" * 40)
    for label, value in pairs:
        click.echo(f"{(label + ':').ljust(width)} {'-' if value is None else value}")


def items_of(result: Any, key: str = "data") -> list[Any]:
    """The list in a paginated API answer (``{"data": [...]}``), or []."""
    if isinstance(result, list):
        return result
    if isinstance(result, dict) and isinstance(result.get(key), list):
        return result[key]
    return []


def short_id(value: Any, length: int = 12) -> str:
    """Shorten an id for tables: ``abcdefghijkl...``."""
    text = str(value or "")
    return f"{text[:length]}..." if len(text) > length else text or "-"


def truncate(text: Any, length: int) -> str:
    """Clip `text` to `length` characters with a trailing ``...``."""
    if not text:
        return "-"
    text = str(text)
    return f"{text[: length - 3]}..." if len(text) > length else text


def format_date(value: Any) -> str:
    """``2024-03-01T10:00:00Z`` -> ``Mar 1, 2024``; unparsable values pass through."""
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_bytes(size: Any) -> str:
    """Human-readable size: ``1536`` -> ``1.5 KB``."""
    try:
        size = float(size or 0)
    except (TypeError, ValueError):
        return "-"
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    exponent = min(int(math.log(size, 1024)), len(units) - 1)
    value = round(size / 1024**exponent, 1)
    return f"{value:g} {units[exponent]}"


def format_kb(size: int) -> str:
    """Size in kilobytes with one decimal, as shown after writing a file."""
    return f"{size / 1024:.1f} KB"


def mask_secret(value: str | None) -> str:
    """``abcdefgh...wxyz``: first 8 and last 4 characters of a key."""
    if not value:
        return "(not set)"
    if len(value) <= 12:
        return f"{value[:4]}..."
    return f"{value[:8]}...{value[-4:]}"


def total_of(result: Any) -> Any:
    """``pagination.total`` of a paginated API answer, if present."""
    if isinstance(result, dict) and isinstance(result.get("pagination"), dict):
        return result["pagination"].get("total")
    return None
