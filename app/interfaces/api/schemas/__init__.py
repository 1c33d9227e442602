from .auth import Token
from .circular import (
    AllowedGroupsRead,
    CircularCreate,
    CircularDetailRead,
    CircularRead,
    CircularSummaryRead,
    ReadStatsRead,
    ReceivedCircularRead,
    SentCircularRead,
    UnreadCountRead,
)
from .notification import NotificationMarkReadRequest, NotificationRead

__all__ = [
    "AllowedGroupsRead",
    "CircularCreate",
    "CircularDetailRead",
    "CircularRead",
    "CircularSummaryRead",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "ReadStatsRead",
    "ReceivedCircularRead",
    "SentCircularRead",
    "Token",
    "UnreadCountRead",
]
