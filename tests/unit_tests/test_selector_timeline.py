"""Tests for timeline snapping, formatting and local-day conversions."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from app.selector.timeline import (
    day_window,
    finalize_range,
    format_12h,
    format_axis_label,
    format_duration,
    format_hhmm,
    hhmm_to_instant,
    pointer_to_hours,
    snap,
    to_local_hours,
)

_VILNIUS = ZoneInfo("Europe/Vilnius")


class TestSnap:
    @pytest.mark.parametrize(
        "raw,expected",
        [(9.1, 9.0), (9.4, 9.5), (9.74, 9.5), (9.76, 10.0), (0.2, 0.0), (23.9, 24.0)],
    )
    def test_nearest_half_hour(self, raw, expected):
        assert snap(raw) == expected

    def test_exact_half_unit_rounds_up(self):
        assert snap(9.25) == 9.5
        assert snap(10.75) == 11.0


class TestFinalizeRange:
    def test_drag_9_1_to_9_4(self):
        assert finalize_range(9.1, 9.4) == (9.0, 9.5)

    def test_backwards_drag(self):
        assert finalize_range(14.2, 11.9) == (12.0, 14.0)

    def test_click_without_drag_gets_one_unit(self):
        assert finalize_range(10.0, 10.0) == (10.0, 10.5)

    def test_end_of_day_collapses(self):
        assert finalize_range(24.0, 24.0) == (24.0, 24.0)

    def test_last_slot(self):
        assert finalize_range(23.5, 23.5) == (23.5, 24.0)


class TestPointerToHours:
    def test_maps_across_box(self):
        assert pointer_to_hours(150, left=100, width=240) == pytest.approx(5.0)

    def test_clamped(self):
        assert pointer_to_hours(50, left=100, width=240) == 0.0
        assert pointer_to_hours(900, left=100, width=240) == 24.0

    def test_zero_width(self):
        assert pointer_to_hours(150, left=100, width=0) == 0.0


class TestFormatting:
    def test_hhmm(self):
        assert format_hhmm(9.5) == "09:30"
        assert format_hhmm(0) == "00:00"
        assert format_hhmm(24) == "24:00"

    def test_12h(self):
        assert format_12h(0) == "12:00 AM"
        assert format_12h(9.5) == "9:30 AM"
        assert format_12h(12) == "12:00 PM"
        assert format_12h(18.5) == "6:30 PM"
        assert format_12h(24) == "12:00 AM"

    def test_axis_labels(self):
        assert [format_axis_label(h) for h in (0, 6, 12, 18, 24)] == [
            "12 AM", "6 AM", "12 PM", "6 PM", "12 AM",
        ]

    def test_duration(self):
        assert format_duration(1.5) == "1h 30m"
        assert format_duration(0.5) == "0h 30m"


class TestLocalDay:
    def test_day_window_utc(self):
        start, end = day_window(date(2024, 1, 1), timezone.utc)
        assert start == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert end == datetime(2024, 1, 2, tzinfo=timezone.utc)

    def test_to_local_hours_in_zone(self):
        # 07:00Z is 09:00 in Vilnius in winter (UTC+2).
        instant = datetime(2024, 1, 1, 7, 0, tzinfo=timezone.utc)
        assert to_local_hours(instant, date(2024, 1, 1), _VILNIUS) == 9.0

    def test_to_local_hours_clips_other_days(self):
        day = date(2024, 1, 1)
        assert to_local_hours(datetime(2023, 12, 31, 20, tzinfo=timezone.utc), day, timezone.utc) == 0.0
        assert to_local_hours(datetime(2024, 1, 2, 1, tzinfo=timezone.utc), day, timezone.utc) == 24.0

    def test_hhmm_to_instant(self):
        day = date(2024, 1, 1)
        assert hhmm_to_instant(day, "09:30", timezone.utc) == datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)
        assert hhmm_to_instant(day, "24:00", timezone.utc) == datetime(2024, 1, 2, tzinfo=timezone.utc)

    def test_hhmm_to_instant_in_zone(self):
        instant = hhmm_to_instant(date(2024, 1, 1), "09:00", _VILNIUS)
        assert instant.astimezone(timezone.utc) == datetime(2024, 1, 1, 7, tzinfo=timezone.utc)
