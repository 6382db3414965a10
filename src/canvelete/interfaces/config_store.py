"""Config store interface definitions."""

import abc
from typing import Any

DEFAULT_BASE_URL = "https://www.canvelete.com"

CONFIG_DEFAULTS: dict[str, Any] = {
    "api_key": "",
    "base_url": DEFAULT_BASE_URL,
    "default_format": "png",
    "default_quality": 90,
}


class ConfigStore(abc.ABC):
    """Durable key-value settings of the CLI.

    Every key in `CONFIG_DEFAULTS` always has a value: reading a key that was
    never written (or was deleted) yields its default. Writes are visible to
    the next read on the same store immediately.
    """

    @abc.abstractmethod
    def get(self, key: str) -> Any:
        """Return the value stored under `key`, or its default.

        Raises:
            KeyError: If `key` is not a known configuration key.
        """

    @abc.abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Persist `value` under `key`.

        Raises:
            KeyError: If `key` is not a known configuration key.
        """

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        """Reset `key` to its default. Deleting an unset key is a no-op."""

    @abc.abstractmethod
    def all(self) -> dict[str, Any]:
        """Return every known key with its effective value."""

    @property
    @abc.abstractmethod
    def path(self) -> str:
        """Human-readable location of the store (a file path or ``memory://``)."""
