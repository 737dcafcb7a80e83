"""
Overlap detection.

Intervals are half-open [start, end): a booking ending at 14:00 does not
conflict with one starting at 14:00.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional


@dataclass(frozen=True)
class TimeRange:
    start: datetime
    end: datetime


def overlaps(a: Any, b: Any) -> bool:
    return a.start < b.end and b.start < a.end


def find_conflicts(candidate: Any, existing: Iterable[Any], exclude_id: Optional[Any] = None) -> List[Any]:
    """
    Bookings in `existing` that intersect `candidate`.
    The booking whose id equals `exclude_id` is skipped so an edit never collides with itself.
    """
    return [
        b
        for b in existing
        if (exclude_id is None or getattr(b, "id", None) != exclude_id) and overlaps(candidate, b)
    ]


def has_conflict(candidate: Any, existing: Iterable[Any], exclude_id: Optional[Any] = None) -> bool:
    return any(
        overlaps(candidate, b)
        for b in existing
        if exclude_id is None or getattr(b, "id", None) != exclude_id
    )
