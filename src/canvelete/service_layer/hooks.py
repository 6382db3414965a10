"""Fire-and-forget shell hooks run after successful watch renders."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from types import TracebackType

logger = logging.getLogger(__name__)


class HookRunner:
    """Launches shell commands in the background.

    `launch` never blocks the caller: the command runs in its own task and
    its output or failure is only logged. Used as an async context manager,
    commands still running on exit are killed rather than awaited.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    async def __aenter__(self) -> HookRunner:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.shutdown()

    def launch(self, command: str) -> asyncio.Task[None]:
        """Start `command` through the shell and return immediately."""
        task = asyncio.get_running_loop().create_task(self._run(command))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for every hook launched so far to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel every running hook and kill its command."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            logger.debug("Stopping %d running post-render command(s)", len(tasks))
            await asyncio.gather(*tasks, return_exceptions=True)

    @property
    def pending(self) -> int:
        """Number of hooks still running."""
        return len(self._tasks)

    async def _run(self, command: str) -> None:
        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning("Post-render command failed to start: %s", e)
            return

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
            raise

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()
            logger.warning(
                "Post-render command exited with %d%s",
                proc.returncode,
                f": {detail}" if detail else "",
            )
        elif stdout.strip():
            logger.info("  %s", stdout.decode(errors="replace").strip())
