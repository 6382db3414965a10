"""Profile store interface definitions."""

import abc
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from .config_store import DEFAULT_BASE_URL

DEFAULT_PROFILE_NAME = "default"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Profile:
    """A named API key with its metadata."""

    name: str
    api_key: str
    description: str = ""
    base_url: str = DEFAULT_BASE_URL
    created_at: str = field(default_factory=_utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the stored file."""
        data = asdict(self)
        return {
            "apiKey": data["api_key"],
            "description": data["description"],
            "baseUrl": data["base_url"],
            "createdAt": data["created_at"],
        }


class ProfileStore(abc.ABC):
    """Named profiles plus a pointer to the active one.

    The active pointer may name a profile that has no stored entry (the
    `DEFAULT_PROFILE_NAME` fallback); stores never validate it.
    """

    @abc.abstractmethod
    def list(self) -> dict[str, Profile]:
        """Return all profiles keyed by name, in insertion order."""

    @abc.abstractmethod
    def get(self, name: str) -> Profile | None:
        """Return the profile called `name`, or None."""

    @abc.abstractmethod
    def put(self, profile: Profile) -> None:
        """Insert or replace the profile with the same name."""

    @abc.abstractmethod
    def remove(self, name: str) -> bool:
        """Delete a profile. Returns False if it did not exist."""

    @abc.abstractmethod
    def replace_all(self, profiles: dict[str, Profile]) -> None:
        """Replace every stored profile at once."""

    @property
    @abc.abstractmethod
    def active(self) -> str:
        """Name of the active profile."""

    @abc.abstractmethod
    def set_active(self, name: str) -> None:
        """Point the active profile at `name`."""

    @property
    @abc.abstractmethod
    def path(self) -> str:
        """Human-readable location of the store."""
