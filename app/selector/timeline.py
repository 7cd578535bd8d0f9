"""
Geometry and time arithmetic for the 24-hour booking timeline.

Positions on the axis are float hours since local midnight of the
selected date, ``0.0`` to ``24.0``.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, tzinfo

from app.config import SELECTOR_SNAP_HOURS

HOURS_PER_DAY = 24.0

# Axis labels shown above the timeline
AXIS_HOURS = (0, 6, 12, 18, 24)


def clamp_hours(hours: float) -> float:
    return min(HOURS_PER_DAY, max(0.0, hours))


def snap(hours: float, unit: float = SELECTOR_SNAP_HOURS) -> float:
    """
    Round to the nearest *unit*.

    Exact halves round up (9.25 → 9.5), like a browser's ``Math.round``;
    Python's ``round`` would round half to even.
    """
    return math.floor(hours / unit + 0.5) * unit


def finalize_range(
    anchor: float,
    current: float,
    unit: float = SELECTOR_SNAP_HOURS,
) -> tuple[float, float]:
    """
    Turn a drag ``anchor → current`` (either direction) into a snapped range.

    The end is at least one *unit* after the start, except that it never
    passes the end of the day: a drag that snaps to 24:00 on both ends
    yields an empty range, which validation rejects.
    """
    start = snap(min(anchor, current), unit)
    end = max(start + unit, snap(max(anchor, current), unit))
    return start, min(end, HOURS_PER_DAY)


def pointer_to_hours(client_x: float, left: float, width: float) -> float:
    """Map a pointer x coordinate over a timeline box to hours, clamped."""
    if width <= 0:
        return 0.0
    fraction = max(0.0, min(1.0, (client_x - left) / width))
    return fraction * HOURS_PER_DAY


def percent(hours: float) -> float:
    """Horizontal position of *hours* as a percentage of the axis width."""
    return hours / HOURS_PER_DAY * 100


# ── Formatting ────────────────────────────────────────────────────────────


def _split(hours: float) -> tuple[int, int]:
    total_minutes = int(math.floor(hours * 60 + 0.5))
    return divmod(total_minutes, 60)


def format_hhmm(hours: float) -> str:
    """24-hour wall-clock string; the end of the day is ``"24:00"``."""
    h, m = _split(hours)
    return f"{h:02d}:{m:02d}"


def format_12h(hours: float) -> str:
    """``h:mm AM/PM`` label, e.g. ``9:30 AM``."""
    h, m = _split(hours)
    suffix = "PM" if 12 <= h < 24 else "AM"
    display_h = h % 12 or 12
    return f"{display_h}:{m:02d} {suffix}"


def format_axis_label(hour: int) -> str:
    display_h = hour % 12 or 12
    suffix = "PM" if 12 <= hour < 24 else "AM"
    return f"{display_h} {suffix}"


def format_duration(hours: float) -> str:
    h, m = _split(hours)
    return f"{h}h {m}m"


# ── Local day ↔ instants ──────────────────────────────────────────────────


def _local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time(0, 0), tzinfo=tz)


def day_window(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Half-open ``[local midnight, next local midnight)`` for *day*."""
    return _local_midnight(day, tz), _local_midnight(day + timedelta(days=1), tz)


def to_local_hours(instant: datetime, day: date, tz: tzinfo) -> float:
    """
    Wall-clock position of *instant* on *day*'s axis.

    Instants before the day map to 0, after it to 24.
    """
    local = instant.astimezone(tz)
    if local.date() < day:
        return 0.0
    if local.date() > day:
        return HOURS_PER_DAY
    return local.hour + local.minute / 60 + local.second / 3600


def hours_to_instant(day: date, hours: float, tz: tzinfo) -> datetime:
    """Wall-clock *hours* on *day* as an aware datetime; 24:00 is next midnight."""
    h, m = _split(hours)
    if h >= 24:
        return _local_midnight(day + timedelta(days=1), tz)
    return datetime.combine(day, time(h, m), tzinfo=tz)


def hhmm_to_instant(day: date, value: str, tz: tzinfo) -> datetime:
    """Parse an ``HH:MM`` string emitted by the selector back to an instant."""
    h, m = (int(part) for part in value.split(":"))
    return hours_to_instant(day, h + m / 60, tz)
