"""In-memory ConfigStore, used by tests and as the base of the file store."""

from __future__ import annotations

from typing import Any

from canvelete.interfaces.config_store import CONFIG_DEFAULTS, ConfigStore


class InMemoryConfigStore(ConfigStore):
    """ConfigStore backed by a dict; nothing survives the process."""

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = {}
        for key, value in (values or {}).items():
            self._check_key(key)
            self._values[key] = value

    def get(self, key: str) -> Any:
        self._check_key(key)
        return self._values.get(key, CONFIG_DEFAULTS[key])

    def set(self, key: str, value: Any) -> None:
        self._check_key(key)
        self._values[key] = value
        self._persist()

    def delete(self, key: str) -> None:
        self._check_key(key)
        if self._values.pop(key, None) is not None:
            self._persist()

    def all(self) -> dict[str, Any]:
        return {key: self._values.get(key, default) for key, default in CONFIG_DEFAULTS.items()}

    @property
    def path(self) -> str:
        return "memory://config"

    # --- Internal Helpers ---

    def _persist(self) -> None:
        """Hook for durable subclasses; called after every mutation."""

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in CONFIG_DEFAULTS:
            raise KeyError(key)
