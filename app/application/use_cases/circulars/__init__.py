"""Circular-related use cases."""

from .archive_circular import archive_circular
from .create_circular import create_circular
from .get_circular import get_circular, get_circular_for_user
from .list_circulars import (
    list_active_circulars,
    list_received_circulars,
    list_sent_circulars,
)
from .permissions import allowed_groups, can_issue, normalize_selection, validate_selection
from .read_receipts import is_circular_read, mark_circular_read
from .recipients import LookupPolicy, RecipientResolver, UserDirectory
from .stats import (
    count_unread_circulars,
    get_circular_summary,
    get_read_stats,
    read_stats_for,
)

__all__ = [
    "LookupPolicy",
    "RecipientResolver",
    "UserDirectory",
    "allowed_groups",
    "archive_circular",
    "can_issue",
    "count_unread_circulars",
    "create_circular",
    "get_circular",
    "get_circular_for_user",
    "get_circular_summary",
    "get_read_stats",
    "is_circular_read",
    "list_active_circulars",
    "list_received_circulars",
    "list_sent_circulars",
    "mark_circular_read",
    "normalize_selection",
    "read_stats_for",
    "validate_selection",
]
