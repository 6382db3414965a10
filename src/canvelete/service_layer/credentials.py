"""Credential resolution and profile management.

`CredentialService` is the only place that knows how the API key is chosen:

1. the ``CANVELETE_API_KEY`` environment variable,
2. the active profile's stored key,
3. the legacy ``api_key`` field of the configuration.

Switching profiles writes the profile's key and base URL through to the
configuration, so tools that only read the configuration keep working.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from canvelete.config import API_KEY_ENV, BASE_URL_ENV
from canvelete.domain.errors import NotAuthenticatedError, NotFoundError, ValidationError
from canvelete.domain.utils import dict_to_dataclass
from canvelete.domain.value_objects import RenderFormat
from canvelete.interfaces.config_store import CONFIG_DEFAULTS, DEFAULT_BASE_URL, ConfigStore
from canvelete.interfaces.profile_store import DEFAULT_PROFILE_NAME, Profile, ProfileStore

logger = logging.getLogger(__name__)

SETTABLE_KEYS = ("base_url", "default_format", "default_quality")
MASK_SUFFIX = "..."


def mask_key(api_key: str | None, visible: int = 8) -> str:
    """First `visible` characters of a key followed by ``...``."""
    return f"{(api_key or '')[:visible]}{MASK_SUFFIX}"


def is_masked(api_key: str | None) -> bool:
    """True for keys produced by `mask_key` (they cannot be imported)."""
    return not api_key or MASK_SUFFIX in api_key


class CredentialService:
    """Layers named profiles over the persisted configuration.

    Args:
        config_store: Persisted CLI settings.
        profile_store: Named profiles and the active pointer.
        environ: Environment mapping; defaults to ``os.environ``.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        profile_store: ProfileStore,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.config = config_store
        self.profiles = profile_store
        self._environ = os.environ if environ is None else environ

    # --- Resolution ---

    def effective_api_key(self) -> str | None:
        """Return the key commands should authenticate with, or None."""
        env_key = self._environ.get(API_KEY_ENV)
        if env_key:
            return env_key
        profile = self.profiles.get(self.profiles.active)
        if profile is not None and profile.api_key:
            return profile.api_key
        return self.config.get("api_key") or None

    def require_api_key(self) -> str:
        """Like `effective_api_key`, but fail when nothing is configured.

        Raises:
            NotAuthenticatedError: If no key can be resolved.
        """
        api_key = self.effective_api_key()
        if not api_key:
            raise NotAuthenticatedError()
        return api_key

    def effective_base_url(self) -> str:
        """``CANVELETE_BASE_URL`` if set, else the configured base URL."""
        return self._environ.get(BASE_URL_ENV) or self.config.get("base_url") or DEFAULT_BASE_URL

    def key_source(self) -> str:
        """Describe where `effective_api_key` comes from, for ``auth status``."""
        if self._environ.get(API_KEY_ENV):
            return f"environment ({API_KEY_ENV})"
        profile = self.profiles.get(self.profiles.active)
        if profile is not None and profile.api_key:
            return f"profile '{profile.name}'"
        if self.config.get("api_key"):
            return "config file"
        return "none"

    # --- Login ---

    def login(self, api_key: str) -> None:
        """Store `api_key` as the configured key."""
        if not api_key or not api_key.strip():
            raise ValidationError("API key cannot be empty")
        self.config.set("api_key", api_key.strip())
        logger.info("Stored API key in %s", self.config.path)

    def logout(self) -> None:
        """Forget the configured key. Profiles are left untouched."""
        self.config.delete("api_key")
        logger.info("Cleared API key from %s", self.config.path)

    # --- Settings ---

    def set_setting(self, key: str, value: Any) -> Any:
        """Validate and persist one user-settable configuration value.

        Returns:
            The value as stored (quality is converted to int).

        Raises:
            NotFoundError: If `key` is not a configuration key.
            ValidationError: If `key` cannot be set this way or `value` is
                out of range.
        """
        if key not in CONFIG_DEFAULTS:
            raise NotFoundError("config key", key, list(SETTABLE_KEYS))
        if key not in SETTABLE_KEYS:
            raise ValidationError(
                f"Cannot set '{key}'. Use 'canvelete auth login' for the API key "
                f"(settable keys: {', '.join(SETTABLE_KEYS)})"
            )

        if key == "default_quality":
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise ValidationError("Quality must be a number between 1 and 100") from None
            if not 1 <= value <= 100:
                raise ValidationError("Quality must be between 1 and 100")
        elif key == "default_format":
            value = str(value).lower()
            if value not in RenderFormat.values():
                raise ValidationError(
                    f"Invalid format: {value} (valid formats: {', '.join(RenderFormat.values())})"
                )
        elif key == "base_url":
            value = str(value).rstrip("/")
            if not value.startswith(("http://", "https://")):
                raise ValidationError("Base URL must start with http:// or https://")

        self.config.set(key, value)
        return value

    # --- Profiles ---

    def add_profile(
        self,
        name: str,
        api_key: str,
        *,
        description: str = "",
        base_url: str | None = None,
    ) -> Profile:
        """Create or replace a profile. The active pointer is not changed."""
        if not name:
            raise ValidationError("Profile name cannot be empty")
        if not api_key:
            raise ValidationError("API key cannot be empty")
        profile = Profile(
            name=name,
            api_key=api_key,
            description=description or "",
            base_url=(base_url or DEFAULT_BASE_URL).rstrip("/"),
        )
        self.profiles.put(profile)
        logger.info("Saved profile %r", name)
        return profile

    def remove_profile(self, name: str) -> bool:
        """Delete a profile.

        Returns:
            True if the removed profile was the active one (the pointer is
            then reset to ``"default"``).

        Raises:
            NotFoundError: If no such profile exists.
        """
        if not self.profiles.remove(name):
            raise NotFoundError("profile", name, list(self.profiles.list()))
        if self.profiles.active == name:
            self.profiles.set_active(DEFAULT_PROFILE_NAME)
            logger.info("Active profile %r removed; reset to %r", name, DEFAULT_PROFILE_NAME)
            return True
        return False

    def switch_profile(self, name: str) -> Profile:
        """Activate `name` and write its key and base URL to the configuration.

        Raises:
            NotFoundError: If no such profile exists. Nothing is modified.
        """
        profile = self.profiles.get(name)
        if profile is None:
            raise NotFoundError("profile", name, list(self.profiles.list()))
        self.profiles.set_active(name)
        self.config.set("api_key", profile.api_key)
        self.config.set("base_url", profile.base_url or DEFAULT_BASE_URL)
        logger.info("Switched to profile %r", name)
        return profile

    def current_profile(self) -> tuple[str, Profile | None]:
        """Return the active name and its stored profile (None if unstored)."""
        name = self.profiles.active
        return name, self.profiles.get(name)

    def export_profiles(self, include_keys: bool = False) -> dict[str, dict[str, Any]]:
        """Serialize every profile; keys are masked unless `include_keys`."""
        exported: dict[str, dict[str, Any]] = {}
        for name, profile in self.profiles.list().items():
            entry = profile.to_dict()
            if not include_keys:
                entry["apiKey"] = mask_key(profile.api_key)
            exported[name] = entry
        return exported

    def import_profiles(self, data: Any, merge: bool = False) -> int:
        """Load profiles from an export document.

        Entries whose key is missing or masked are skipped. Without `merge`
        the stored profiles are replaced wholesale.

        Returns:
            The number of profiles imported.
        """
        if not isinstance(data, dict):
            raise ValidationError("Profile file must contain a JSON object")
        profiles = self.profiles.list() if merge else {}
        count = 0
        for name, entry in data.items():
            if not isinstance(entry, dict) or is_masked(entry.get("apiKey")):
                logger.debug("Skipping profile %r without a usable key", name)
                continue
            profiles[name] = dict_to_dataclass(Profile, {**entry, "name": name})
            count += 1
        self.profiles.replace_all(profiles)
        logger.info("Imported %d profile(s)", count)
        return count
