"""
Availability queries – which parts of a court's timeline are occupied.
"""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from app import db
from app.errors import ValidationError
from app.models import TimeRange
from app.services.overlap import validate_interval

logger = logging.getLogger(__name__)


async def query_availability(
    court_id: UUID | None,
    window_start: datetime,
    window_end: datetime,
) -> list[TimeRange]:
    """
    Return the occupied ranges of non-cancelled bookings on *court_id*
    overlapping ``[window_start, window_end)``.

    An unknown court simply has no bookings.
    """
    if court_id is None:
        raise ValidationError("court_id", "court_id is required")
    if window_start is not None:
        window_start = db.as_utc(window_start)
    if window_end is not None:
        window_end = db.as_utc(window_end)
    validate_interval(window_start, window_end)

    ranges = await db.list_occupied_ranges(court_id, window_start, window_end)
    logger.debug(
        "Availability for court %s in [%s, %s): %d occupied",
        court_id, window_start.isoformat(), window_end.isoformat(), len(ranges),
    )
    return [TimeRange(start_time=start, end_time=end) for start, end in ranges]
