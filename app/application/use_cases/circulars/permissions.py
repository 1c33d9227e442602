"""Which recipient groups each sender role may target."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from app.domain.entities import RecipientGroup, UserRole
from app.domain.exceptions import PermissionDenied

ALLOWED_GROUPS: Mapping[UserRole, frozenset[RecipientGroup]] = MappingProxyType(
    {
        UserRole.MANAGEMENT: frozenset(
            {RecipientGroup.STUDENTS, RecipientGroup.PROFESSORS, RecipientGroup.ALL}
        ),
        UserRole.PROFESSOR: frozenset(
            {RecipientGroup.STUDENTS, RecipientGroup.MANAGEMENT}
        ),
        UserRole.STUDENT: frozenset(),
        UserRole.ALUMNI: frozenset(),
    }
)

# Stable ordering used when reporting the first offending group.
_GROUP_ORDER = {group: index for index, group in enumerate(RecipientGroup)}


def _coerce_role(role: UserRole | str | None) -> UserRole | None:
    if role is None or isinstance(role, UserRole):
        return role
    return UserRole.from_alias(role)


def allowed_groups(role: UserRole | str | None) -> frozenset[RecipientGroup]:
    """Return the groups ``role`` may address; unknown roles get none."""

    resolved = _coerce_role(role)
    if resolved is None:
        return frozenset()
    return ALLOWED_GROUPS[resolved]


def can_issue(role: UserRole | str | None) -> bool:
    return bool(allowed_groups(role))


def validate_selection(
    role: UserRole | str | None, selected_groups: Iterable[RecipientGroup]
) -> None:
    """Raise :class:`PermissionDenied` unless every selected group is allowed."""

    selection = sorted(set(selected_groups), key=_GROUP_ORDER.__getitem__)
    if not selection:
        raise PermissionDenied(_coerce_role(role) or role, None)

    permitted = allowed_groups(role)
    for group in selection:
        if group not in permitted:
            raise PermissionDenied(_coerce_role(role) or role, group)


def normalize_selection(
    selected_groups: Iterable[RecipientGroup],
) -> frozenset[RecipientGroup]:
    """Collapse a selection containing ``ALL`` to ``{ALL}``."""

    selection = frozenset(selected_groups)
    if RecipientGroup.ALL in selection:
        return frozenset({RecipientGroup.ALL})
    return selection


__all__ = [
    "ALLOWED_GROUPS",
    "allowed_groups",
    "can_issue",
    "normalize_selection",
    "validate_selection",
]
