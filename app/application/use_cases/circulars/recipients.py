"""Expansion of recipient groups into a concrete recipient snapshot."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from concurrent import futures
from dataclasses import dataclass
from typing import Protocol, TypeVar

from app.config import Settings
from app.domain.entities import RecipientGroup, UserRole
from app.domain.exceptions import (
    DirectoryLookupError,
    NoRecipients,
    TransientDependencyError,
)

from .permissions import normalize_selection

logger = logging.getLogger(__name__)

T = TypeVar("T")

_GROUP_ROLES: dict[RecipientGroup, tuple[UserRole, ...]] = {
    RecipientGroup.STUDENTS: (UserRole.STUDENT,),
    RecipientGroup.PROFESSORS: (UserRole.PROFESSOR,),
    RecipientGroup.MANAGEMENT: (UserRole.MANAGEMENT,),
    RecipientGroup.ALL: (UserRole.STUDENT, UserRole.PROFESSOR),
}

# Shared by every resolver; running lookups are never cancelled, only abandoned.
_lookup_executor = futures.ThreadPoolExecutor(
    max_workers=4, thread_name_prefix="directory-lookup"
)


class UserDirectory(Protocol):
    """External directory of users."""

    def lookup_users_by_role(self, role: UserRole) -> set[int]: ...

    def lookup_user_name(self, user_id: int) -> str | None: ...


@dataclass(frozen=True)
class LookupPolicy:
    """Timeout and retry knobs applied to every directory lookup."""

    max_attempts: int = 3
    backoff_seconds: float = 0.2
    backoff_multiplier: float = 2.0
    timeout_seconds: float = 5.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "LookupPolicy":
        return cls(
            max_attempts=settings.directory_lookup_max_attempts,
            backoff_seconds=settings.directory_lookup_backoff_seconds,
            backoff_multiplier=settings.directory_lookup_backoff_multiplier,
            timeout_seconds=settings.directory_lookup_timeout_seconds,
        )

    def backoff_for(self, attempt: int) -> float:
        """Exponential backoff based on attempt number (1-indexed)."""

        return self.backoff_seconds * self.backoff_multiplier ** max(attempt - 1, 0)


class RecipientResolver:
    """Resolve group tags into user ids through a :class:`UserDirectory`.

    ``ALL`` always means students plus professors, whatever else was
    selected. The sender never receives their own circular. A lookup that
    fails or exceeds the policy timeout is retried with exponential backoff;
    once the attempts are exhausted :class:`TransientDependencyError` is
    raised and nothing is returned.

    A timed-out lookup is abandoned, not interrupted: it keeps one of the
    shared workers until the directory call returns. Directory adapters
    must therefore bound their own calls. :class:`SqlUserDirectory` waits
    at most ``DATABASE_POOL_TIMEOUT_SECONDS`` for a connection and reports
    the pool timeout as a failed lookup.
    """

    def __init__(
        self,
        directory: UserDirectory,
        policy: LookupPolicy | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._directory = directory
        self._policy = policy or LookupPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> LookupPolicy:
        return self._policy

    def resolve(
        self, selected_groups: Iterable[RecipientGroup], sender_id: int
    ) -> frozenset[int]:
        selection = normalize_selection(selected_groups)
        roles: list[UserRole] = []
        for group in sorted(selection, key=lambda item: item.value):
            for role in _GROUP_ROLES[group]:
                if role not in roles:
                    roles.append(role)

        recipients: set[int] = set()
        for role in roles:
            recipients |= set(
                self._call(
                    f"lookup_users_by_role({role.value})",
                    self._directory.lookup_users_by_role,
                    role,
                )
            )
        recipients.discard(sender_id)
        if not recipients:
            raise NoRecipients(selection)
        return frozenset(recipients)

    def lookup_user_name(self, user_id: int) -> str | None:
        return self._call(
            f"lookup_user_name({user_id})", self._directory.lookup_user_name, user_id
        )

    def _call(self, operation: str, func: Callable[..., T], *args: object) -> T:
        attempts = self._policy.max_attempts
        for attempt in range(1, attempts + 1):
            future = _lookup_executor.submit(func, *args)
            try:
                return future.result(timeout=self._policy.timeout_seconds)
            except (DirectoryLookupError, futures.TimeoutError) as exc:
                future.cancel()
                reason = str(exc) or exc.__class__.__name__
                if attempt >= attempts:
                    logger.error(
                        "Directory %s failed after %s attempt(s): %s",
                        operation,
                        attempt,
                        reason,
                    )
                    raise TransientDependencyError(operation, attempt) from exc
                delay = self._policy.backoff_for(attempt)
                logger.warning(
                    "Directory %s failed on attempt %s/%s (%s); retrying in %.2fs",
                    operation,
                    attempt,
                    attempts,
                    reason,
                    delay,
                )
                self._sleep(delay)
        raise AssertionError("unreachable")  # pragma: no cover


__all__ = ["LookupPolicy", "RecipientResolver", "UserDirectory"]
