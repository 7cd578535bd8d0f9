"""Tests for the selector controller against a fake availability API."""

import asyncio
from datetime import date

import pytest

from app.selector.client import BookingApiClient
from app.selector.machine import FETCH_FAILED, OVERLAPS_BOOKING, Phase
from app.selector.widget import TimeRangeSelector
from tests.mocks.api import FakeBookingApi, court_id
from tests.mocks.models import utc

_DAY = date(2024, 1, 1)


async def _until(predicate) -> None:
    for _ in range(1000):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


@pytest.fixture()
def api():
    return FakeBookingApi()


@pytest.fixture()
async def selector(api):
    changes: list[tuple[str, str]] = []
    client = BookingApiClient(base_url="http://test", transport=api.transport())
    widget = TimeRangeSelector(client, on_change=lambda s, e: changes.append((s, e)))
    widget.changes = changes
    yield widget
    await widget.aclose()
    await client.close()


class TestFetching:
    async def test_loads_day_as_axis_hours(self, api, selector):
        court = court_id()
        api.booked[court] = [(utc(2024, 1, 1, 13), utc(2024, 1, 1, 14))]

        selector.set_context(court, _DAY)
        assert selector.state.loading
        await selector.wait_loaded()

        assert not selector.state.loading
        assert selector.state.booked == ((13.0, 14.0),)
        call = api.availability_calls()[0]
        assert call["court_id"] == court
        assert call["start_time"] == "2024-01-01T00:00:00+00:00"
        assert call["end_time"] == "2024-01-02T00:00:00+00:00"

    async def test_overnight_booking_clipped(self, api, selector):
        court = court_id()
        api.booked[court] = [(utc(2023, 12, 31, 22), utc(2024, 1, 1, 2))]
        selector.set_context(court, _DAY)
        await selector.wait_loaded()
        assert selector.state.booked == ((0.0, 2.0),)

    async def test_same_context_does_not_refetch(self, api, selector):
        court = court_id()
        selector.set_context(court, _DAY)
        await selector.wait_loaded()
        selector.set_context(court, _DAY)
        await selector.wait_loaded()
        assert len(api.availability_calls()) == 1

    async def test_context_change_emits_empty_selection(self, selector):
        selector.set_context(court_id(), _DAY)
        assert selector.changes == [("", "")]

    async def test_stale_response_is_discarded(self, api, selector):
        slow, fast = court_id(), court_id()
        api.booked[slow] = [(utc(2024, 1, 1, 8), utc(2024, 1, 1, 9))]
        api.booked[fast] = [(utc(2024, 1, 1, 15), utc(2024, 1, 1, 16))]
        api.gates[slow] = asyncio.Event()

        selector.set_context(slow, _DAY)
        selector.set_context(fast, _DAY)
        await _until(lambda: not selector.state.loading)
        assert selector.state.booked == ((15.0, 16.0),)

        api.gates[slow].set()
        await selector.wait_loaded()
        assert selector.state.court_id == fast
        assert selector.state.booked == ((15.0, 16.0),)

    async def test_fetch_failure_reported(self, api, selector):
        api.fail_availability = True
        selector.set_context(court_id(), _DAY)
        await selector.wait_loaded()
        assert not selector.state.loading
        assert selector.view.error == FETCH_FAILED


class TestSelecting:
    async def test_drag_blocked_until_loaded(self, api, selector):
        selector.set_context(court_id(), _DAY)
        selector.pointer_down(9.0)
        assert selector.state.phase is Phase.IDLE

        await selector.wait_loaded()
        selector.pointer_down(9.0)
        assert selector.state.phase is Phase.DRAGGING

    async def test_valid_drag_reports_range(self, api, selector):
        selector.set_context(court_id(), _DAY)
        await selector.wait_loaded()

        selector.pointer_down(9.1)
        selector.pointer_move(9.4)
        selector.pointer_up()

        assert selector.changes[-1] == ("09:00", "09:30")
        assert selector.view.selection.label == "9:00 AM - 9:30 AM"

    async def test_overlap_rejected_without_network(self, api, selector):
        court = court_id()
        api.booked[court] = [(utc(2024, 1, 1, 13), utc(2024, 1, 1, 14))]
        selector.set_context(court, _DAY)
        await selector.wait_loaded()
        requests_before = len(api.requests)

        selector.pointer_down(12.0)
        selector.pointer_move(13.5)
        selector.pointer_up()

        assert selector.changes[-1] == ("", "")
        assert selector.view.error == OVERLAPS_BOOKING
        assert len(api.requests) == requests_before

    async def test_pointer_leave_finalizes(self, api, selector):
        selector.set_context(court_id(), _DAY)
        await selector.wait_loaded()
        selector.pointer_down(10.0)
        selector.pointer_move(11.0)
        selector.pointer_leave()
        assert selector.changes[-1] == ("10:00", "11:00")

    async def test_clear(self, api, selector):
        selector.set_context(court_id(), _DAY)
        await selector.wait_loaded()
        selector.pointer_down(10.0)
        selector.pointer_up()
        selector.clear()
        assert selector.changes[-2:] == [("10:00", "10:30"), ("", "")]
        assert selector.view.selection is None

    async def test_drag_after_failed_fetch_is_provisional(self, api, selector):
        api.fail_availability = True
        selector.set_context(court_id(), _DAY)
        await selector.wait_loaded()

        selector.pointer_down(9.0)
        selector.pointer_move(10.0)
        selector.pointer_up()

        view = selector.view
        assert selector.changes[-1] == ("09:00", "10:00")
        assert view.provisional
        assert view.selection.provisional
        assert view.error == FETCH_FAILED

        api.fail_availability = False
        selector.refresh()
        await selector.wait_loaded()
        assert not selector.view.provisional
        assert selector.view.error == ""
