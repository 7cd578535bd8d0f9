"""
HTTP client the selector and booking form use to talk to the API.

Handles request construction and JSON ↔ Pydantic parsing. One instance is
shared by a selector and its form for the lifetime of the view.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo

import httpx

from app.config import API_BASE_URL, API_TIMEOUT
from app.models import AvailabilityResponse, Booking
from app.selector.timeline import day_window, to_local_hours

logger = logging.getLogger(__name__)


class BookingRejected(Exception):
    """The API refused a booking; carries the HTTP status and server message."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_conflict(self) -> bool:
        return self.status_code == httpx.codes.CONFLICT


def _error_message(resp: httpx.Response) -> str:
    try:
        return resp.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return resp.reason_phrase or "Request failed"


class BookingApiClient:
    """Async HTTP client for the availability and booking endpoints."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token: str | None = None,
        timeout: float = API_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    # ── /api/availability ─────────────────────────────────────────────

    async def fetch_occupied(
        self,
        court_id: str,
        window_start: datetime,
        window_end: datetime,
    ) -> AvailabilityResponse:
        payload = {
            "court_id": court_id,
            "start_time": window_start.isoformat(),
            "end_time": window_end.isoformat(),
        }
        resp = await self._client.post("/api/availability", json=payload)
        resp.raise_for_status()
        return AvailabilityResponse.model_validate(resp.json())

    async def fetch_day(self, court_id: str, day: date, tz: tzinfo) -> list[tuple[float, float]]:
        """
        Occupied ranges on *day* (local to *tz*) as axis hours.

        Bookings crossing midnight are clipped to the day.
        """
        window_start, window_end = day_window(day, tz)
        data = await self.fetch_occupied(court_id, window_start, window_end)
        ranges = []
        for rng in data.bookings:
            start = to_local_hours(rng.start_time, day, tz)
            end = to_local_hours(rng.end_time, day, tz)
            if start < end:
                ranges.append((start, end))
        logger.debug("Fetched %d occupied ranges for court %s on %s", len(ranges), court_id, day)
        return ranges

    # ── /api/bookings ─────────────────────────────────────────────────

    async def create_booking(
        self,
        court_id: str,
        start_time: datetime,
        end_time: datetime,
        customer_name: str,
        amount: float = 0,
    ) -> Booking:
        payload = {
            "court_id": court_id,
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
            "customer_name": customer_name,
            "amount": amount,
        }
        resp = await self._client.post("/api/bookings", json=payload)
        if resp.is_error:
            raise BookingRejected(resp.status_code, _error_message(resp))
        return Booking.model_validate(resp.json())
