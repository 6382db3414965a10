"""Regex-based redactor for sanitizing secrets from strings.

This module provides a Redactor implementation that masks API keys and
bearer tokens found in HTTP Authorization headers, query strings, JSON
documents (``"apiKey": "..."``) and free-form ``key: value`` / ``key=value``
fragments. It supports lenient and strict modes (strict also redacts
profile names and email addresses).
"""

import re

from canvelete.interfaces import redactor
from canvelete.interfaces.redactor import RedactorMode

# pylint: disable=too-few-public-methods

PLACEHOLDER = "***"
SECRET_KEYWORDS = [
    "api_key",
    "apikey",
    "token",
    "access_token",
    "secret",
    "password",
    "authorization",
]
STRICT_MODE_ADDITIONAL_KEYWORDS = ["profile", "email", "user"]
STRICT_MODE_SECRET_KEYWORDS = SECRET_KEYWORDS + STRICT_MODE_ADDITIONAL_KEYWORDS


def _keyword_pattern(keywords: list[str]) -> str:
    return "|".join(kw.replace("_", "[-_]?") for kw in keywords)


SECRET_KEYWORDS_PATTERN = _keyword_pattern(SECRET_KEYWORDS)
STRICT_MODE_SECRET_KEYWORDS_PATTERN = _keyword_pattern(STRICT_MODE_SECRET_KEYWORDS)

BEARER_PATTERN = re.compile(r"Bearer\s+[^\s'\",]+", re.IGNORECASE)
QUERY_STRING_PATTERN = re.compile(
    rf"([?&](?:{SECRET_KEYWORDS_PATTERN})=)[^&#\s;]*", re.IGNORECASE
)
STRICT_MODE_QUERY_STRING_PATTERN = re.compile(
    rf"([?&](?:{STRICT_MODE_SECRET_KEYWORDS_PATTERN})=)[^&#\s;]*", re.IGNORECASE
)
JSON_SECRET_PATTERN = re.compile(
    rf"(['\"](?:{SECRET_KEYWORDS_PATTERN})['\"]\s*:\s*['\"])[^'\"]*", re.IGNORECASE
)
STRICT_MODE_JSON_SECRET_PATTERN = re.compile(
    rf"(['\"](?:{STRICT_MODE_SECRET_KEYWORDS_PATTERN})['\"]\s*:\s*['\"])[^'\"]*",
    re.IGNORECASE,
)
KEY_VALUE_SECRET_PATTERN = re.compile(
    rf"(\b(?:{SECRET_KEYWORDS_PATTERN})\s*[:=]\s*)(?!['\"])\S+", re.IGNORECASE
)
STRICT_MODE_KEY_VALUE_SECRET_PATTERN = re.compile(
    rf"(\b(?:{STRICT_MODE_SECRET_KEYWORDS_PATTERN})\s*[:=]\s*)(?!['\"])\S+",
    re.IGNORECASE,
)
EMAIL_PATTERN = re.compile(r"\b[\w.+-]+@[\w-]+(?:\.[\w-]+)+\b")


class Redactor(redactor.Redactor):
    """Redactor implementation using regex-based sanitization."""

    def __init__(self, mode: RedactorMode = RedactorMode.LENIENT) -> None:
        self._mode = mode

    def sanitize(self, text: str) -> str:
        strict = self._mode == RedactorMode.STRICT
        sanitized = str(text)

        # 1) Authorization headers: Bearer <token>
        sanitized = BEARER_PATTERN.sub(f"Bearer {PLACEHOLDER}", sanitized)

        # 2) Query-string secrets
        query_pattern = STRICT_MODE_QUERY_STRING_PATTERN if strict else QUERY_STRING_PATTERN
        sanitized = query_pattern.sub(rf"\1{PLACEHOLDER}", sanitized)

        # 3) JSON / repr fields: "apiKey": "..."
        json_pattern = STRICT_MODE_JSON_SECRET_PATTERN if strict else JSON_SECRET_PATTERN
        sanitized = json_pattern.sub(rf"\1{PLACEHOLDER}", sanitized)

        # 4) Free-form key: value and key=value
        key_value_pattern = (
            STRICT_MODE_KEY_VALUE_SECRET_PATTERN if strict else KEY_VALUE_SECRET_PATTERN
        )
        sanitized = key_value_pattern.sub(rf"\1{PLACEHOLDER}", sanitized)

        if strict:
            sanitized = EMAIL_PATTERN.sub(PLACEHOLDER, sanitized)

        return sanitized
