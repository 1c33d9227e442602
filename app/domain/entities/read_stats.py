"""Aggregated read metrics for circulars."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReadStats:
    """Read progress of a single circular."""

    read_count: int
    total_recipients: int
    percentage: int

    @classmethod
    def from_counts(cls, read_count: int, total_recipients: int) -> "ReadStats":
        """Build the stats rounding the percentage half up to an integer."""

        if total_recipients <= 0:
            return cls(read_count=read_count, total_recipients=0, percentage=0)
        percentage = (200 * read_count + total_recipients) // (2 * total_recipients)
        return cls(
            read_count=read_count,
            total_recipients=total_recipients,
            percentage=percentage,
        )


@dataclass(frozen=True)
class CircularSummary:
    """Per-user circular counters shown on dashboards."""

    sent_count: int | None
    received_count: int
    unread_count: int
    read_count: int


__all__ = ["CircularSummary", "ReadStats"]
