"""Aggregate application use cases."""

from .circulars import archive_circular, create_circular, mark_circular_read
from .users import authenticate_user, create_user, record_login

__all__ = [
    "archive_circular",
    "authenticate_user",
    "create_circular",
    "create_user",
    "mark_circular_read",
    "record_login",
]
