"""Redaction of sensitive values in records before they leave the process.

Keys are compared by whole words: ``apiKey``, ``API-Key`` and ``api_key`` all
normalize to ``api_key``, while ``author`` or ``monkey`` stay visible.
"""

import re
from typing import Any

from logship.observability.constants import (
    REDACTED_VALUE,
    SENSITIVE_FIELDS,
    SENSITIVE_WORDS,
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[^a-z0-9]+")


def _normalize_key(key: str) -> str:
    """Snake-case ``key``: ``"X-Api-Key"`` and ``"xApiKey"`` become ``"x_api_key"``."""
    key = _CAMEL_BOUNDARY.sub("_", key).lower()
    return _SEPARATORS.sub("_", key).strip("_")


def is_sensitive_key(key: str) -> bool:
    """True if values stored under ``key`` must not be shipped."""
    normalized = _normalize_key(key)
    if normalized in SENSITIVE_FIELDS:
        return True

    words = normalized.split("_")
    if any(word in SENSITIVE_WORDS for word in words):
        return True

    # Compound names such as `stripe_api_key` or `db_private_key`
    return any(
        f"{first}_{second}" in SENSITIVE_FIELDS for first, second in zip(words, words[1:])
    )


def sanitize(data: Any, max_depth: int = 10) -> Any:
    """Return a copy of ``data`` with sensitive values redacted.

    Dicts, lists and tuples are walked recursively; anything nested deeper
    than ``max_depth`` is replaced by the redaction marker.
    """
    if max_depth <= 0:
        return REDACTED_VALUE

    if isinstance(data, dict):
        return {
            key: REDACTED_VALUE if is_sensitive_key(str(key)) else sanitize(value, max_depth - 1)
            for key, value in data.items()
        }

    if isinstance(data, (list, tuple)):
        items = [sanitize(item, max_depth - 1) for item in data]
        return items if isinstance(data, list) else tuple(items)

    return data
