"""Use cases for retrieving a single circular."""

from sqlalchemy.orm import Session

from app.domain.entities import Circular
from app.domain.exceptions import CircularNotFound
from app.infrastructure.repositories import CircularRepository


def get_circular(session: Session, circular_id: str) -> Circular:
    """Return the requested circular or raise :class:`CircularNotFound`."""

    circular = CircularRepository(session).get(circular_id)
    if circular is None:
        raise CircularNotFound(circular_id)
    return circular


def get_circular_for_user(session: Session, circular_id: str, *, user_id: int) -> Circular:
    """Return the circular only to its sender or one of its recipients.

    Other users get :class:`CircularNotFound` so the id does not leak.
    """

    circular = get_circular(session, circular_id)
    if not circular.is_visible_to(user_id):
        raise CircularNotFound(circular_id)
    return circular


__all__ = ["get_circular", "get_circular_for_user"]
