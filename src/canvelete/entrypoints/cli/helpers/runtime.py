"""Glue between Click commands and the async application core.

Commands receive the `AppContainer` through `pass_app`, run their API calls
with `call_api`, and let `translate_errors` turn application errors into
`click.ClickException` (``Error: ...`` on stderr, exit status 1).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar

import click

from canvelete.bootstrap import AppContainer, CanveleteClient
from canvelete.domain.errors import CanveleteError
from canvelete.domain.utils import parse_json_text
from canvelete.interfaces.api_errors import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

pass_app = click.make_pass_decorator(AppContainer)

json_option = click.option(
    "--json", "as_json", is_flag=True, help="Output the raw API response as JSON."
)


@contextmanager
def translate_errors() -> Iterator[None]:
    """Re-raise application errors as `click.ClickException`."""
    try:
        yield
    except (CanveleteError, ApiError) as e:
        logger.debug("Command failed", exc_info=True)
        raise click.ClickException(str(e)) from e


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run `coro` on a fresh event loop, translating application errors."""
    with translate_errors():
        return asyncio.run(coro)


def call_api(app: AppContainer, call: Callable[[CanveleteClient], Awaitable[T]]) -> T:
    """Open an authenticated client, await ``call(client)`` and close it."""

    async def _call() -> T:
        async with app.open_client() as client:
            return await call(client)

    return run(_call())


def load_json_option(data: str | None = None, data_file: str | Path | None = None) -> Any:
    """Dynamic data from ``--data-file`` (preferred) or ``--data``; None if neither."""
    with translate_errors():
        if data_file:
            path = Path(data_file)
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                raise click.ClickException(f"Failed to read data file: {e}") from e
            return parse_json_text(text, path.name)
        if data:
            return parse_json_text(data, "--data")
    return None
