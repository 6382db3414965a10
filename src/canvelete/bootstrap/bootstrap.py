"""Wire stores, credentials and the API client together."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import httpx

from canvelete import config
from canvelete.adapters.api import CanveleteClient
from canvelete.adapters.change_source import PollingChangeSource
from canvelete.adapters.config_store import JsonConfigStore
from canvelete.adapters.profile_store import JsonProfileStore
from canvelete.adapters.redactor import Redactor
from canvelete.interfaces.change_source import ChangeSource
from canvelete.interfaces.config_store import ConfigStore
from canvelete.interfaces.profile_store import ProfileStore
from canvelete.interfaces.redactor import RedactorMode
from canvelete.service_layer.credentials import CredentialService

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, str], CanveleteClient]
ChangeSourceFactory = Callable[..., ChangeSource]


def default_client_factory(api_key: str, base_url: str) -> CanveleteClient:
    """Build a client talking to the real API."""
    return CanveleteClient(api_key, base_url)


@dataclass(frozen=True)
class AppContainer:
    """Stores, credentials and factories shared by every command."""

    config_store: ConfigStore
    profile_store: ProfileStore
    credentials: CredentialService
    client_factory: ClientFactory = field(default=default_client_factory)
    change_source_factory: ChangeSourceFactory = field(default=PollingChangeSource)

    def open_client(self) -> CanveleteClient:
        """Client for the effective key and base URL.

        Raises:
            NotAuthenticatedError: If no API key is configured.
        """
        api_key = self.credentials.require_api_key()
        base_url = self.credentials.effective_base_url()
        logger.debug("Using API at %s (key from %s)", base_url, self.credentials.key_source())
        return self.client_factory(api_key, base_url)


def build_container(
    config_store: ConfigStore,
    profile_store: ProfileStore,
    *,
    environ: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    change_source_factory: ChangeSourceFactory = PollingChangeSource,
) -> AppContainer:
    """Assemble a container around existing stores.

    Args:
        config_store: Persisted settings.
        profile_store: Named profiles.
        environ: Environment used for credential resolution.
        transport: httpx transport handed to every client (tests pass an
            ``httpx.MockTransport``).
        change_source_factory: Builds the file watchers of `watch`/`watch-dir`;
            called as ``factory(path, suffix=...)``.
    """

    def client_factory(api_key: str, base_url: str) -> CanveleteClient:
        return CanveleteClient(api_key, base_url, transport=transport)

    return AppContainer(
        config_store=config_store,
        profile_store=profile_store,
        credentials=CredentialService(config_store, profile_store, environ),
        client_factory=client_factory if transport is not None else default_client_factory,
        change_source_factory=change_source_factory,
    )


def bootstrap(config_dir: str | os.PathLike[str] | None = None) -> AppContainer:
    """Build the application from the JSON stores in the config directory."""
    root = config.get_config_dir(config_dir)
    logger.debug("Config directory: %s", root)
    return build_container(JsonConfigStore(root), JsonProfileStore(root))


def build_redactor(mode: str) -> Redactor:
    """Redactor for log records (``lenient`` or ``strict``)."""
    return Redactor(RedactorMode(mode.lower()))
