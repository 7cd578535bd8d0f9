"""Tests for the database layer's timestamp encoding."""

from datetime import datetime, timedelta, timezone

from app import db
from app.models import BookingStatus, CourtCreate
from app.services.courts import create_court
from tests.mocks.models import OWNER, utc


class TestTimestamps:
    def test_fixed_width(self):
        assert db._ts(utc(2024, 1, 1, 9, 30)) == "2024-01-01T09:30:00.000000Z"
        assert db._ts(datetime(999, 12, 31, 23, tzinfo=timezone.utc)) == "0999-12-31T23:00:00.000000Z"
        assert db._ts(datetime(5, 1, 1, tzinfo=timezone.utc)) == "0005-01-01T00:00:00.000000Z"

    def test_text_order_matches_time_order(self):
        instants = [
            datetime(5, 6, 1, tzinfo=timezone.utc),
            datetime(999, 12, 31, 23, tzinfo=timezone.utc),
            datetime(1000, 1, 1, tzinfo=timezone.utc),
            utc(2024, 1, 1, 9),
        ]
        encoded = [db._ts(i) for i in instants]
        assert encoded == sorted(encoded)

    def test_parse_round_trips_early_years(self):
        instant = datetime(999, 12, 31, 23, 15, tzinfo=timezone.utc)
        assert db._parse_ts(db._ts(instant)) == instant

    def test_offsets_normalized_to_utc(self):
        vilnius = timezone(timedelta(hours=2))
        assert db._ts(datetime(2024, 1, 1, 11, tzinfo=vilnius)) == "2024-01-01T09:00:00.000000Z"


class TestOccupiedRanges:
    async def test_window_spanning_year_1000(self, database):
        court = await create_court(OWNER, CourtCreate(name="Old Court", sport_type="Tennis", price_per_hour=10))
        start = datetime(999, 12, 31, 23, tzinfo=timezone.utc)
        end = datetime(1000, 1, 1, 1, tzinfo=timezone.utc)
        await db.insert_booking_if_free(
            court_id=court.id,
            owner_id=court.owner_id,
            customer_name="A",
            start_time=start,
            end_time=end,
            amount=0,
            status=BookingStatus.PENDING,
        )

        ranges = await db.list_occupied_ranges(
            court.id,
            datetime(999, 12, 31, tzinfo=timezone.utc),
            datetime(1000, 1, 2, tzinfo=timezone.utc),
        )
        assert ranges == [(start, end)]
