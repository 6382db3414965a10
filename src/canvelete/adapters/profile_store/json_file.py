"""ProfileStore persisted as a JSON document on the local filesystem.

File layout (``<root>/profiles.json``)::

    {
      "activeProfile": "prod",
      "profiles": {
        "prod": {"apiKey": "...", "description": "", "baseUrl": "...", "createdAt": "..."}
      }
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from canvelete.domain.errors import DataParseError
from canvelete.domain.utils import dict_to_dataclass
from canvelete.files import PathLike, read_json_file, write_json_atomic
from canvelete.interfaces.profile_store import DEFAULT_PROFILE_NAME, Profile

from .memory import InMemoryProfileStore

logger = logging.getLogger(__name__)

PROFILES_FILE_NAME = "profiles.json"


class JsonProfileStore(InMemoryProfileStore):
    """ProfileStore that rewrites ``<root>/profiles.json`` after every change."""

    def __init__(self, root: PathLike) -> None:
        self._file = Path(root) / PROFILES_FILE_NAME
        try:
            document = read_json_file(self._file) or {}
        except json.JSONDecodeError as e:
            raise DataParseError(str(self._file), str(e)) from e
        if not isinstance(document, dict):
            raise DataParseError(str(self._file), "expected a JSON object")
        profiles = {
            name: _profile_from_entry(name, entry)
            for name, entry in (document.get("profiles") or {}).items()
        }
        logger.debug("Loaded %d profile(s) from %s", len(profiles), self._file)
        super().__init__(
            profiles, active=document.get("activeProfile") or DEFAULT_PROFILE_NAME
        )

    @property
    def path(self) -> str:
        return str(self._file)

    def _persist(self) -> None:
        document = {
            "activeProfile": self._active,
            "profiles": {name: p.to_dict() for name, p in self._profiles.items()},
        }
        write_json_atomic(self._file, document)
        logger.debug("Saved %d profile(s) to %s", len(self._profiles), self._file)


def _profile_from_entry(name: str, entry: Any) -> Profile:
    if not isinstance(entry, dict):
        raise DataParseError(PROFILES_FILE_NAME, f"profile {name!r} is not an object")
    try:
        return dict_to_dataclass(Profile, {**entry, "name": name})
    except KeyError as e:
        raise DataParseError(PROFILES_FILE_NAME, f"profile {name!r}: {e}") from e
