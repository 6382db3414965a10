"""Configuration utilities for Canvelete.

This module centralizes the environment variable names and the location of
the CLI's persisted state (configuration and profiles).
"""

import os
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

APP_NAME = "canvelete-cli"

API_KEY_ENV = "CANVELETE_API_KEY"  # pragma: no mutate
BASE_URL_ENV = "CANVELETE_BASE_URL"  # pragma: no mutate
CONFIG_DIR_ENV = "CANVELETE_CONFIG_DIR"  # pragma: no mutate

DASHBOARD_PATH = "/dashboard"
EDITOR_PATH = "/editor/{design_id}"


def get_config_dir(override: str | os.PathLike[str] | None = None) -> Path:
    """Directory holding ``config.json`` and ``profiles.json``.

    Resolution order: `override` (the ``--config-dir`` option), the
    ``CANVELETE_CONFIG_DIR`` environment variable, then the platform's user
    configuration directory.

    The directory is not created here; the stores create it on first write.
    """
    if override:
        return Path(override)
    if env_dir := os.environ.get(CONFIG_DIR_ENV):
        return Path(env_dir)
    return Path(user_config_dir(APP_NAME, appauthor=False))


def get_log_dir() -> Path:
    """Directory for flight-recorder dumps."""
    return Path(user_log_dir(APP_NAME, appauthor=False))
