"""Fixtures and test helpers for end-to-end CLI tests.

Commands run through `CliRunner` against a real `AppContainer` whose HTTP
client talks to `FakeApi`, an `httpx.MockTransport` router, so every test
sees the exact requests a command sends. A test-only `log-demo` command
exercises the logging and flight-recorder options.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import click
import httpx
import pytest
from click.testing import CliRunner

from canvelete.adapters.config_store import InMemoryConfigStore
from canvelete.adapters.profile_store import InMemoryProfileStore
from canvelete.bootstrap import AppContainer, build_container
from canvelete.entrypoints.cli.main import canvelete
from canvelete.interfaces.change_source import ChangeSource
from tests.conftest import TEST_API_KEY

# pylint: disable=redefined-outer-name,unused-argument

Handler = Callable[[httpx.Request], httpx.Response]


class FakeApi:
    """Routes ``(method, path)`` to canned responses and records every request.

    Unrouted requests answer 404 with a JSON error, like the real API.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        *,
        status: int = 200,
        content: bytes | None = None,
        handler: Handler | None = None,
    ) -> None:
        """Answer ``method path`` with JSON, raw bytes, or a custom handler."""

        def canned(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status, content=content)
            return httpx.Response(status, json=json_body)

        self.routes[(method.upper(), path)] = handler or canned

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": f"No route for {request.url.path}"})
        return handler(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        """Requests received for one route, in order."""
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def body(self, method: str, path: str, index: int = -1) -> Any:
        """Decoded JSON body of one recorded request."""
        return json.loads(self.calls(method, path)[index].content)


class ScriptedChangeSource(ChangeSource):
    """Reports a fixed list of changes, then interrupts the session like Ctrl+C."""

    def __init__(self, target: Path, events: Iterable[Path] = (), **_: Any) -> None:
        self.target = target
        self.events = list(events)
        self.closed = False

    async def changes(self):
        for path in self.events:
            yield path
        raise KeyboardInterrupt

    def close(self) -> None:
        self.closed = True


@click.command()
def log_demo():
    """Emit representative log messages for CLI/flight-recorder tests.

    Emits DEBUG/INFO/WARNING/ERROR/CRITICAL messages on the 'canvelete.demo'
    logger and additional messages on a 'some.thirdparty' logger to exercise
    logger-level filtering and flight-recorder behavior.
    """
    logger = logging.getLogger("canvelete.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and its internal sections.

    Ensures the test-only command is removed from the group and any internal
    registries Click may use so cleanup is robust across Click versions.
    """
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture(autouse=True)
def _no_user_state(isolated_environment):
    """Never read the developer's config directory or API key."""


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command for the duration of a test."""
    canvelete.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(canvelete, "log-demo")


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside an isolated working directory."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def change_events() -> list[Path]:
    """Paths the watch commands' change source reports before stopping."""
    return []


@pytest.fixture
def app(fake_api, change_events) -> AppContainer:
    """Authenticated container whose clients talk to `fake_api`."""
    return build_container(
        InMemoryConfigStore({"api_key": TEST_API_KEY}),
        InMemoryProfileStore(),
        environ={},
        transport=httpx.MockTransport(fake_api),
        change_source_factory=lambda target, **kw: ScriptedChangeSource(
            target, change_events, **kw
        ),
    )


@pytest.fixture
def invoke(runner, app, fs):
    """Run ``canvelete <args>`` with the test container; returns the Result."""

    def _invoke(*args: str, input: str | None = None, obj: AppContainer | None = None):  # pylint: disable=redefined-builtin
        return runner.invoke(
            canvelete, ["--no-flight-recorder", *args], obj=obj or app, input=input
        )

    return _invoke


@pytest.fixture
def anon_app(fake_api) -> AppContainer:
    """Container without any API key configured."""
    return build_container(
        InMemoryConfigStore(),
        InMemoryProfileStore(),
        environ={},
        transport=httpx.MockTransport(fake_api),
    )
