"""Helpers for stripping secrets out of payloads before they are persisted."""

from typing import Any, FrozenSet

SENSITIVE_KEYS: FrozenSet[str] = frozenset({"password", "password_hash", "token"})

REDACTED = "[REDACTED]"


def scrub_sensitive(value: Any) -> Any:
    """
    Return a copy of value with sensitive keys redacted at any depth.

    Dicts and lists are walked recursively; other values are returned unchanged.
    """
    if isinstance(value, dict):
        return {
            key: REDACTED if key in SENSITIVE_KEYS else scrub_sensitive(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [scrub_sensitive(item) for item in value]
    return value
