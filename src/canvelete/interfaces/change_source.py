"""Filesystem change source interface definitions."""

import abc
from collections.abc import AsyncIterator
from pathlib import Path


class ChangeSource(abc.ABC):
    """Delivers filesystem change events for one file or one directory.

    The baseline (what counts as "already there") is fixed when the source is
    constructed, so callers can list pre-existing files afterwards without
    racing the first event.
    """

    @abc.abstractmethod
    def changes(self) -> AsyncIterator[Path]:
        """Yield the path of every created or modified file, until cancelled."""

    @abc.abstractmethod
    def close(self) -> None:
        """Stop delivering events; a pending `changes()` iteration ends."""
