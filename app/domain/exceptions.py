"""Errors raised by the circular use cases.

Every error derives from :class:`CircularError`, itself a ``ValueError``, so
callers that only care about "the request could not be honoured" can keep
catching ``ValueError`` while the API layer maps each concrete type to its
own status code.
"""

from __future__ import annotations

from collections.abc import Iterable


class CircularError(ValueError):
    """Base class for circular domain errors."""


class CircularValidationError(CircularError):
    """Raised when a field of a circular request is invalid."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class PermissionDenied(CircularError):
    """Raised when a role may not target a recipient group."""

    def __init__(self, role: object, group: object | None = None) -> None:
        role_label = getattr(role, "value", role) or "UNKNOWN"
        if group is None:
            message = f"Role {role_label} cannot issue circulars to the selected groups"
        else:
            group_label = getattr(group, "value", group)
            message = f"Role {role_label} cannot issue circulars to {group_label}"
        super().__init__(message)
        self.role = role
        self.group = group


class NoRecipients(CircularError):
    """Raised when the selected groups resolve to nobody besides the sender."""

    def __init__(self, groups: Iterable[object] = ()) -> None:
        labels = sorted(str(getattr(group, "value", group)) for group in groups)
        message = "The selected groups have no recipients"
        if labels:
            message = f"{message}: {', '.join(labels)}"
        super().__init__(message)
        self.groups = tuple(labels)


class CircularNotFound(CircularError):
    """Raised when a circular does not exist or is not visible to the caller."""

    def __init__(self, circular_id: str) -> None:
        super().__init__(f"Circular {circular_id} not found")
        self.circular_id = circular_id


class NotOwner(CircularError):
    """Raised when someone other than the sender manages a circular."""

    def __init__(self, circular_id: str, user_id: int) -> None:
        super().__init__(f"User {user_id} did not issue circular {circular_id}")
        self.circular_id = circular_id
        self.user_id = user_id


class AlreadyArchived(CircularError):
    """Raised when archiving a circular that is already archived."""

    def __init__(self, circular_id: str) -> None:
        super().__init__(f"Circular {circular_id} is already archived")
        self.circular_id = circular_id


class InvalidStatusTransition(CircularError):
    """Raised when the lifecycle does not allow the requested transition."""

    def __init__(self, circular_id: str, current: object, target: object) -> None:
        current_label = getattr(current, "value", current)
        target_label = getattr(target, "value", target)
        super().__init__(
            f"Circular {circular_id} cannot move from {current_label} to {target_label}"
        )
        self.circular_id = circular_id
        self.current = current
        self.target = target


class NotRecipient(CircularError):
    """Raised when a user acts on a circular that was not addressed to them."""

    def __init__(self, circular_id: str, user_id: int) -> None:
        super().__init__(f"User {user_id} is not a recipient of circular {circular_id}")
        self.circular_id = circular_id
        self.user_id = user_id


class TransientDependencyError(CircularError):
    """Raised when the user directory stays unavailable after every retry."""

    def __init__(self, operation: str, attempts: int) -> None:
        super().__init__(
            f"User directory unavailable for {operation} after {attempts} attempt(s)"
        )
        self.operation = operation
        self.attempts = attempts


class DirectoryLookupError(RuntimeError):
    """Raised by a directory adapter when a single lookup fails transiently."""


__all__ = [
    "AlreadyArchived",
    "CircularError",
    "CircularNotFound",
    "CircularValidationError",
    "DirectoryLookupError",
    "InvalidStatusTransition",
    "NoRecipients",
    "NotOwner",
    "NotRecipient",
    "PermissionDenied",
    "TransientDependencyError",
]
