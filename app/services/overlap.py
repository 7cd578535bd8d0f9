"""
Half-open interval overlap.

Every conflict check in the project goes through :func:`overlaps`:
server admission, availability queries (same comparison expressed in SQL)
and the client-side selector preview.
"""

from __future__ import annotations

from typing import Any, Iterable

from app.errors import ValidationError


def overlaps(a_start: Any, a_end: Any, b_start: Any, b_end: Any) -> bool:
    """
    True iff ``[a_start, a_end)`` and ``[b_start, b_end)`` intersect.

    Back-to-back intervals (one ends exactly when the other starts) do
    not overlap. Callers must reject empty or inverted intervals first.
    """
    return a_start < b_end and b_start < a_end


def overlaps_any(start: Any, end: Any, ranges: Iterable[tuple[Any, Any]]) -> bool:
    """True if ``[start, end)`` overlaps any of *ranges*."""
    return any(overlaps(start, end, r_start, r_end) for r_start, r_end in ranges)


def validate_interval(
    start: Any,
    end: Any,
    *,
    start_field: str = "start_time",
    end_field: str = "end_time",
) -> None:
    """Raise ValidationError unless both bounds are present and ``start < end``."""
    if start is None:
        raise ValidationError(start_field, f"{start_field} is required")
    if end is None:
        raise ValidationError(end_field, f"{end_field} is required")
    if not start < end:
        raise ValidationError(end_field, f"{end_field} must be after {start_field}")
