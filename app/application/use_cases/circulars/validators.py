"""Common validation helpers for circular use cases."""

from __future__ import annotations

from collections.abc import Iterable

from app.domain.entities import RecipientGroup
from app.domain.exceptions import CircularValidationError

TITLE_MAX_LENGTH = 200
BODY_MAX_LENGTH = 5000


def _ensure_text(field: str, value: str | None, max_length: int) -> str:
    normalized = (value or "").strip()
    if not normalized:
        raise CircularValidationError(field, "must not be empty")
    if len(normalized) > max_length:
        raise CircularValidationError(
            field, f"must be at most {max_length} characters"
        )
    return normalized


def ensure_valid_title(title: str | None) -> str:
    """Return the trimmed title or raise :class:`CircularValidationError`."""

    return _ensure_text("title", title, TITLE_MAX_LENGTH)


def ensure_valid_body(body: str | None) -> str:
    """Return the trimmed body or raise :class:`CircularValidationError`."""

    return _ensure_text("body", body, BODY_MAX_LENGTH)


def ensure_recipient_groups(
    groups: Iterable[RecipientGroup | str] | None,
) -> frozenset[RecipientGroup]:
    """Return the selected groups as enum members.

    Raises :class:`CircularValidationError` for an empty selection or an
    unknown tag.
    """

    selection: set[RecipientGroup] = set()
    for group in groups or ():
        if isinstance(group, RecipientGroup):
            selection.add(group)
            continue
        try:
            selection.add(RecipientGroup(str(group).strip().upper()))
        except ValueError as exc:
            raise CircularValidationError(
                "recipient_groups", f"unknown group '{group}'"
            ) from exc
    if not selection:
        raise CircularValidationError(
            "recipient_groups", "at least one group must be selected"
        )
    return frozenset(selection)


__all__ = [
    "BODY_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "ensure_recipient_groups",
    "ensure_valid_body",
    "ensure_valid_title",
]
