"""Shared pydantic validator helpers for partial-update payloads."""

from typing import Any


def reject_null(value: Any) -> Any:
    """
    Refuse an explicit null for a field that may be omitted but not cleared.

    Used as a ``mode="before"`` field validator on PATCH schemas so a
    ``{"name": null}`` body fails validation instead of reaching the database.
    """
    if value is None:
        raise ValueError("Field may be omitted but not set to null")
    return value
