"""
Booking form state: customer details plus the range chosen on the selector.

Submission is only possible with a non-empty selection. When the server
answers 409 the slot was taken after our last fetch, so the form tells the
user and re-fetches the court's availability.
"""

from __future__ import annotations

import logging
from datetime import date

import httpx

from app.models import Booking
from app.selector.client import BookingApiClient, BookingRejected
from app.selector.timeline import hhmm_to_instant
from app.selector.widget import TimeRangeSelector

logger = logging.getLogger(__name__)

SLOT_TAKEN = "Slot no longer available"
UNREACHABLE = "Could not reach the booking service"
CREATED = "Booking created successfully"


class BookingForm:
    def __init__(self, client: BookingApiClient, selector: TimeRangeSelector) -> None:
        self._client = client
        self.selector = selector
        selector.on_change = self._on_time_change

        self.court_id: str | None = None
        self.day: date | None = None
        self.customer_name: str = ""
        self.amount: float = 0
        self.start_time: str = ""
        self.end_time: str = ""
        self.message: str = ""
        self.submitting: bool = False

    def _on_time_change(self, start: str, end: str) -> None:
        self.start_time, self.end_time = start, end

    def choose(self, court_id: str | None, day: date | None) -> None:
        self.court_id, self.day = court_id, day
        self.selector.set_context(court_id, day)

    @property
    def has_selection(self) -> bool:
        return bool(self.start_time and self.end_time)

    @property
    def can_submit(self) -> bool:
        return (
            not self.submitting
            and self.has_selection
            and self.court_id is not None
            and self.day is not None
            and bool(self.customer_name.strip())
        )

    async def submit(self) -> Booking | None:
        if not self.can_submit:
            return None

        tz = self.selector.tz
        start = hhmm_to_instant(self.day, self.start_time, tz)  # type: ignore[arg-type]
        end = hhmm_to_instant(self.day, self.end_time, tz)  # type: ignore[arg-type]

        self.submitting = True
        try:
            booking = await self._client.create_booking(
                self.court_id,  # type: ignore[arg-type]
                start,
                end,
                self.customer_name.strip(),
                self.amount,
            )
        except BookingRejected as exc:
            if exc.is_conflict:
                logger.info("Slot %s-%s on %s was taken meanwhile", self.start_time, self.end_time, self.day)
                self.message = SLOT_TAKEN
                self.selector.refresh()
            else:
                self.message = exc.message
            return None
        except httpx.HTTPError as exc:
            logger.warning(
                "Failed to submit booking for court %s on %s: %s",
                self.court_id, self.day, exc,
            )
            self.message = UNREACHABLE
            return None
        finally:
            self.submitting = False

        self.message = CREATED
        self.customer_name = ""
        self.amount = 0
        # Show the new booking as occupied.
        self.selector.refresh()
        return booking
