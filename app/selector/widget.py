"""
Controller that drives the selector state machine.

A view layer forwards pointer input (already mapped to axis hours, see
``timeline.pointer_to_hours``) and court/date changes; the controller
applies transitions, runs fetches in the background and reports the
chosen range to ``on_change``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, timezone, tzinfo
from typing import Callable

import httpx

from app.selector.client import BookingApiClient
from app.selector.machine import (
    BookingsLoaded,
    Clear,
    ContextChanged,
    EmitSelection,
    Event,
    FetchBookings,
    FetchFailed,
    PointerDown,
    PointerLeave,
    PointerMove,
    PointerUp,
    SelectorState,
    initial_state,
    transition,
)
from app.selector.render import TimelineView, render

logger = logging.getLogger(__name__)

SelectionCallback = Callable[[str, str], None]


class TimeRangeSelector:
    """One court, one date, one 24-hour axis."""

    def __init__(
        self,
        client: BookingApiClient,
        on_change: SelectionCallback | None = None,
        tz: tzinfo = timezone.utc,
    ) -> None:
        self._client = client
        self.on_change = on_change
        self.tz = tz
        self.state: SelectorState = initial_state()
        self._fetches: set[asyncio.Task[None]] = set()

    # ── Input ──────────────────────────────────────────────────────────

    def dispatch(self, event: Event) -> None:
        self.state, effects = transition(self.state, event)
        for effect in effects:
            if isinstance(effect, EmitSelection):
                if self.on_change is not None:
                    self.on_change(effect.start, effect.end)
            elif isinstance(effect, FetchBookings):
                task = asyncio.create_task(
                    self._fetch(effect), name=f"selector-fetch-{effect.generation}"
                )
                self._fetches.add(task)
                task.add_done_callback(self._fetches.discard)

    def set_context(self, court_id: str | None, day: date | None) -> None:
        """Switch court/date; a no-op when neither changed."""
        if court_id == self.state.court_id and day == self.state.day:
            return
        self.dispatch(ContextChanged(court_id, day))

    def refresh(self) -> None:
        """Re-fetch the current court/date, dropping any selection."""
        self.dispatch(ContextChanged(self.state.court_id, self.state.day))

    def pointer_down(self, hours: float) -> None:
        self.dispatch(PointerDown(hours))

    def pointer_move(self, hours: float) -> None:
        self.dispatch(PointerMove(hours))

    def pointer_up(self) -> None:
        self.dispatch(PointerUp())

    def pointer_leave(self) -> None:
        self.dispatch(PointerLeave())

    def clear(self) -> None:
        self.dispatch(Clear())

    # ── Output ─────────────────────────────────────────────────────────

    @property
    def view(self) -> TimelineView:
        return render(self.state)

    # ── Fetching ───────────────────────────────────────────────────────

    async def _fetch(self, request: FetchBookings) -> None:
        try:
            ranges = await self._client.fetch_day(request.court_id, request.day, self.tz)
        except httpx.HTTPError as exc:
            logger.warning(
                "Failed to fetch bookings for court %s on %s: %s",
                request.court_id, request.day, exc,
            )
            self.dispatch(FetchFailed(request.generation))
            return
        # Results for a superseded court/date are dropped by the state machine.
        self.dispatch(BookingsLoaded(request.generation, tuple(ranges)))

    async def wait_loaded(self) -> None:
        """Wait for all in-flight fetches to settle."""
        while self._fetches:
            await asyncio.gather(*list(self._fetches))

    async def aclose(self) -> None:
        for task in list(self._fetches):
            task.cancel()
        await asyncio.gather(*self._fetches, return_exceptions=True)
