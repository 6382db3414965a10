"""In-memory ProfileStore, used by tests and as the base of the file store."""

from __future__ import annotations

from canvelete.interfaces.profile_store import DEFAULT_PROFILE_NAME, Profile, ProfileStore


class InMemoryProfileStore(ProfileStore):
    """ProfileStore backed by a dict; nothing survives the process."""

    def __init__(
        self,
        profiles: dict[str, Profile] | None = None,
        active: str = DEFAULT_PROFILE_NAME,
    ) -> None:
        self._profiles: dict[str, Profile] = dict(profiles or {})
        self._active = active

    def list(self) -> dict[str, Profile]:
        return dict(self._profiles)

    def get(self, name: str) -> Profile | None:
        return self._profiles.get(name)

    def put(self, profile: Profile) -> None:
        self._profiles[profile.name] = profile
        self._persist()

    def remove(self, name: str) -> bool:
        if self._profiles.pop(name, None) is None:
            return False
        self._persist()
        return True

    def replace_all(self, profiles: dict[str, Profile]) -> None:
        self._profiles = dict(profiles)
        self._persist()

    @property
    def active(self) -> str:
        return self._active

    def set_active(self, name: str) -> None:
        self._active = name
        self._persist()

    @property
    def path(self) -> str:
        return "memory://profiles"

    def _persist(self) -> None:
        """Hook for durable subclasses; called after every mutation."""
