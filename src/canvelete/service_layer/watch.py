"""Watch sessions: re-render when a data file changes, or when new files land.

`FileWatch` debounces bursts of change events on one data file and renders
the configured design with the file's JSON as dynamic data. Renders of one
watch never overlap: a debounce timer that fires mid-render queues at most
one follow-up render.

`DirectoryWatch` renders every ``*.json`` file in a directory once: the files
already present first (in directory-listing order), then each new file as it
appears.

Failures (unreadable files, invalid JSON, API errors) are reported and the
session keeps running.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from canvelete.domain.errors import CanveleteError
from canvelete.domain.utils import parse_json_text, render_output_path
from canvelete.domain.value_objects import DEFAULT_QUALITY, RenderRequest
from canvelete.files import write_atomic
from canvelete.interfaces.api_errors import ApiError
from canvelete.interfaces.change_source import ChangeSource

from .hooks import HookRunner
from .render import RenderOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 500
DEFAULT_SETTLE_MS = 100
WATCHED_SUFFIX = ".json"


def epoch_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return time.time_ns() // 1_000_000


class WatchState(Enum):
    """Lifecycle of a single watch target."""

    IDLE = "idle"
    PENDING_RENDER = "pending_render"
    RENDERING = "rendering"


@dataclass(frozen=True)
class WatchResult:
    """Outcome of rendering one data file."""

    source: Path
    output: Path | None = None
    size: int = 0
    error: str | None = None
    deleted: bool = False

    @property
    def ok(self) -> bool:
        """True when the output was written."""
        return self.error is None


ResultCallback = Callable[[WatchResult], None]


async def _render_data_file(
    orchestrator: RenderOrchestrator,
    target: RenderRequest,
    source: Path,
    output_for: Callable[[], Path],
) -> tuple[Path, int]:
    """Read `source`, render it into `target`, and write the result."""
    text = source.read_text(encoding="utf-8")
    dynamic_data = parse_json_text(text, source.name)
    request = RenderRequest(
        design_id=target.design_id,
        template_id=target.template_id,
        format=target.format,
        quality=target.quality,
        width=target.width,
        height=target.height,
        dynamic_data=dynamic_data,
    )
    data = await orchestrator.render_sync(request)
    output = output_for()
    write_atomic(output, data)
    return output, len(data)


class FileWatch:
    """Debounced re-render of one data file.

    Args:
        orchestrator: Renders the design.
        data_file: JSON file whose contents become the dynamic data.
        target: Design/template, format and quality to render (its
            ``dynamic_data`` is ignored).
        output: Output path template; ``{{timestamp}}`` and ``{{count}}`` are
            substituted on every render. Defaults to
            ``output_{{timestamp}}.<format>``.
        debounce_ms: Quiet period after the last change before rendering.
        on_change: Shell command launched after every successful render.
        hooks: Runner for `on_change`.
        on_result: Called with the outcome of every render.
        now_ms: Wall clock for ``{{timestamp}}``.
    """

    def __init__(
        self,
        orchestrator: RenderOrchestrator,
        data_file: str | os.PathLike[str],
        target: RenderRequest,
        *,
        output: str | None = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        on_change: str | None = None,
        hooks: HookRunner | None = None,
        on_result: ResultCallback | None = None,
        now_ms: Callable[[], int] = epoch_ms,
    ) -> None:
        self.orchestrator = orchestrator
        self.data_file = Path(data_file)
        self.target = target
        self.output_template = output or f"output_{{{{timestamp}}}}.{target.format}"
        self.debounce_ms = debounce_ms
        self.on_change = on_change
        self.hooks = hooks or HookRunner()
        self._on_result = on_result
        self._now_ms = now_ms

        self.state = WatchState.IDLE
        self.render_count = 0
        self._timer: asyncio.TimerHandle | None = None
        self._rendering = False
        self._rerender_queued = False
        self._tasks: set[asyncio.Task[None]] = set()

    # --- Events ---

    def notify_change(self) -> None:
        """Record a change event: (re)arm the debounce timer."""
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        if not self._rendering:
            self.state = WatchState.PENDING_RENDER
        self._timer = loop.call_later(self.debounce_ms / 1000, self._fire)

    def _fire(self) -> None:
        self._timer = None
        if self._rendering:
            logger.debug("Render in progress; queueing one more for %s", self.data_file)
            self._rerender_queued = True
            return
        task = asyncio.get_running_loop().create_task(self._render_serialized())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _render_serialized(self) -> None:
        self._rendering = True
        try:
            while True:
                self._rerender_queued = False
                self.state = WatchState.RENDERING
                await self.render_once()
                if not self._rerender_queued:
                    break
        finally:
            self._rendering = False
            self.state = WatchState.PENDING_RENDER if self._timer else WatchState.IDLE

    # --- Rendering ---

    def _next_output(self) -> Path:
        return Path(
            render_output_path(
                self.output_template, count=self.render_count + 1, now_ms=self._now_ms()
            )
        )

    async def render_once(self) -> WatchResult:
        """Render the data file now and report the outcome; never raises."""
        try:
            output, size = await _render_data_file(
                self.orchestrator, self.target, self.data_file, self._next_output
            )
        except (CanveleteError, ApiError, OSError, UnicodeDecodeError) as e:
            logger.debug("Render of %s failed", self.data_file, exc_info=True)
            result = WatchResult(source=self.data_file, error=str(e))
        else:
            self.render_count += 1
            logger.info("Saved %s (%d bytes)", output, size)
            result = WatchResult(source=self.data_file, output=output, size=size)
            if self.on_change:
                self.hooks.launch(self.on_change)

        if self._on_result is not None:
            self._on_result(result)
        return result

    async def drain(self) -> None:
        """Wait until no render is in flight (armed timers are not awaited)."""
        while self._tasks or self._rendering:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
            if self._rendering and not self._tasks:
                await asyncio.sleep(0)

    def close(self) -> None:
        """Disarm the debounce timer and cancel any running render."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in list(self._tasks):
            task.cancel()

    # --- Session ---

    async def run(self, source: ChangeSource) -> None:
        """Render once, then re-render on every debounced change until cancelled."""
        await self._render_serialized()
        try:
            async for _ in source.changes():
                self.notify_change()
        finally:
            self.close()
            source.close()


class DirectoryWatch:
    """Render each ``*.json`` file of a directory exactly once.

    Args:
        orchestrator: Renders the design.
        directory: Directory to scan and watch.
        output_dir: Where ``<stem>.<format>`` outputs are written.
        target: Design/template, format and quality to render.
        delete_after: Remove the source file after a successful render.
        settle_ms: Delay before processing a new file, so the writer can
            finish.
        on_result: Called with the outcome of every processed file.
        sleep: Awaitable sleep (seconds) used for the settle delay.
    """

    def __init__(
        self,
        orchestrator: RenderOrchestrator,
        directory: str | os.PathLike[str],
        output_dir: str | os.PathLike[str],
        target: RenderRequest,
        *,
        delete_after: bool = False,
        settle_ms: int = DEFAULT_SETTLE_MS,
        on_result: ResultCallback | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.orchestrator = orchestrator
        self.directory = Path(directory)
        self.output_dir = Path(output_dir)
        self.target = target
        self.delete_after = delete_after
        self.settle_ms = settle_ms
        self._on_result = on_result
        self._sleep = sleep
        self.processed: set[Path] = set()

    def _key(self, path: Path) -> Path:
        return Path(os.path.abspath(path))

    def _output_for(self, source: Path) -> Path:
        return self.output_dir / f"{source.stem}.{self.target.format}"

    async def process_existing(self) -> list[WatchResult]:
        """Process the files already in the directory, one after another."""
        results = []
        for name in os.listdir(self.directory):
            if not name.endswith(WATCHED_SUFFIX):
                continue
            result = await self.process_file(self.directory / name)
            if result is not None:
                results.append(result)
        return results

    async def process_file(self, path: str | os.PathLike[str]) -> WatchResult | None:
        """Render one file unless it was seen before or is not JSON.

        Returns:
            The outcome, or None when the file was skipped.
        """
        source = Path(path)
        key = self._key(source)
        if key in self.processed or not source.name.endswith(WATCHED_SUFFIX):
            return None
        self.processed.add(key)

        try:
            output, size = await _render_data_file(
                self.orchestrator, self.target, source, lambda: self._output_for(source)
            )
        except (CanveleteError, ApiError, OSError, UnicodeDecodeError) as e:
            logger.debug("Processing %s failed", source, exc_info=True)
            result = WatchResult(source=source, error=str(e))
        else:
            deleted = False
            if self.delete_after:
                try:
                    source.unlink()
                    deleted = True
                except OSError as e:
                    logger.warning("Could not delete %s: %s", source, e)
            logger.info("%s -> %s (%d bytes)", source.name, output.name, size)
            result = WatchResult(source=source, output=output, size=size, deleted=deleted)

        if self._on_result is not None:
            self._on_result(result)
        return result

    async def run(self, source: ChangeSource) -> None:
        """Process existing files, then each new file reported by `source`."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        await self.process_existing()
        try:
            async for path in source.changes():
                if not path.name.endswith(WATCHED_SUFFIX) or not path.exists():
                    continue
                if self._key(path) in self.processed:
                    continue
                await self._sleep(self.settle_ms / 1000)
                await self.process_file(path)
        finally:
            source.close()
