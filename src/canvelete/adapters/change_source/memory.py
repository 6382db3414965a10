"""ChangeSource fed by hand, for tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import cast

from canvelete.interfaces.change_source import ChangeSource

_CLOSED = object()


class MemoryChangeSource(ChangeSource):
    """Yields whatever paths are pushed with `emit`, in order."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self.closed = False

    def emit(self, path: str | Path) -> None:
        """Queue a change event for `path`."""
        self._queue.put_nowait(Path(path))

    async def changes(self) -> AsyncIterator[Path]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield cast(Path, item)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(_CLOSED)
