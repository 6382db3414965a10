"""Interfaces for redacting sensitive values.

This module defines the Redactor interface and the RedactorMode enumeration
used by adapters to scrub secrets (API keys, bearer tokens, passwords) from
free-form text such as log messages and HTTP error details.
"""

import abc
from enum import Enum

# pylint: disable=too-few-public-methods


class RedactorMode(Enum):
    """Enumeration for redactor modes.

    Modes:
    - LENIENT: redact keys/tokens but keep profile names and ids visible.
    - STRICT: redact keys/tokens and also profile names, emails and user ids.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class Redactor(abc.ABC):
    """Interface for sanitizing sensitive information from strings."""

    _mode: RedactorMode

    @abc.abstractmethod
    def sanitize(self, text: str) -> str:
        """Return `text` with sensitive values replaced by a placeholder."""

    @property
    def mode(self) -> RedactorMode:
        """Return the redaction mode."""
        return self._mode
