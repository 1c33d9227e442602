"""User directory adapter backed by the ``user`` table."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from app.domain.entities import UserRole
from app.domain.exceptions import DirectoryLookupError
from app.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)


class SqlUserDirectory:
    """Look users up by role using a dedicated session per call.

    Lookups may run on a worker thread, so they never share the request
    session.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def lookup_users_by_role(self, role: UserRole) -> set[int]:
        with self._session() as session:
            return set(UserRepository(session).list_ids_by_role_alias(role.alias))

    def lookup_user_name(self, user_id: int) -> str | None:
        with self._session() as session:
            return UserRepository(session).get_name(user_id)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        except (OperationalError, PoolTimeoutError) as exc:
            logger.debug("Directory query failed: %s", exc)
            raise DirectoryLookupError(str(exc)) from exc
        except DBAPIError as exc:
            if not exc.connection_invalidated:
                raise
            raise DirectoryLookupError(str(exc)) from exc
        finally:
            session.close()


__all__ = ["SqlUserDirectory"]
