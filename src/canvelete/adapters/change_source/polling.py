"""ChangeSource that polls ``os.stat`` snapshots of a file or directory."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator
from pathlib import Path

from canvelete.interfaces.change_source import ChangeSource

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.25

Snapshot = dict[Path, tuple[int, int]]


class PollingChangeSource(ChangeSource):
    """Detects created/modified files by comparing (mtime_ns, size) snapshots.

    Watching a file reports changes to that file only. Watching a directory
    reports files directly inside it (no recursion) whose names match
    `suffix`, when given. Deleted files are not reported.

    Args:
        target: File or directory to watch.
        interval: Seconds between two snapshots.
        suffix: Only report files with this suffix (directory mode), e.g.
            ``".json"``.
    """

    def __init__(
        self,
        target: str | os.PathLike[str],
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        suffix: str | None = None,
    ) -> None:
        self.target = Path(target)
        self.interval = interval
        self.suffix = suffix
        self._closed = False
        self._snapshot = self._take_snapshot()

    def _take_snapshot(self) -> Snapshot:
        if self.target.is_dir():
            candidates = [
                Path(entry.path)
                for entry in os.scandir(self.target)
                if entry.is_file() and (self.suffix is None or entry.name.endswith(self.suffix))
            ]
        else:
            candidates = [self.target]

        snapshot: Snapshot = {}
        for path in candidates:
            try:
                st = path.stat()
            except FileNotFoundError:
                continue
            snapshot[path] = (st.st_mtime_ns, st.st_size)
        return snapshot

    async def changes(self) -> AsyncIterator[Path]:
        while not self._closed:
            await asyncio.sleep(self.interval)
            try:
                current = self._take_snapshot()
            except OSError as e:
                logger.warning("Cannot scan %s: %s", self.target, e)
                continue
            previous, self._snapshot = self._snapshot, current
            for path, stamp in current.items():
                if previous.get(path) != stamp:
                    logger.debug("Change detected: %s", path)
                    yield path

    def close(self) -> None:
        self._closed = True
