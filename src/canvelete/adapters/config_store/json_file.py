"""ConfigStore persisted as a JSON document on the local filesystem."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from canvelete.domain.errors import DataParseError
from canvelete.files import PathLike, read_json_file, write_json_atomic
from canvelete.interfaces.config_store import CONFIG_DEFAULTS

from .memory import InMemoryConfigStore

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


class JsonConfigStore(InMemoryConfigStore):
    """ConfigStore that rewrites ``<root>/config.json`` after every change.

    Unknown keys found in the file are ignored (and dropped on the next
    write), so older or newer CLI versions can share the directory.
    """

    def __init__(self, root: PathLike) -> None:
        self._file = Path(root) / CONFIG_FILE_NAME
        try:
            stored = read_json_file(self._file) or {}
        except json.JSONDecodeError as e:
            raise DataParseError(str(self._file), str(e)) from e
        if not isinstance(stored, dict):
            raise DataParseError(str(self._file), "expected a JSON object")
        known = {key: value for key, value in stored.items() if key in CONFIG_DEFAULTS}
        logger.debug("Loaded %d config value(s) from %s", len(known), self._file)
        super().__init__(known)

    @property
    def path(self) -> str:
        return str(self._file)

    def _persist(self) -> None:
        write_json_atomic(self._file, self._values)
        logger.debug("Saved config to %s", self._file)
