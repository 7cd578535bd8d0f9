"""
State machine behind the time-range selector.

Every transition is a pure function ``(state, event) -> (state, effects)``.
Nothing here touches the network or a UI toolkit: the controller in
``app.selector.widget`` feeds pointer and fetch events in and carries out
the returned effects.

Phases:

* ``IDLE``      – no drag; on mount, after clear, after a context change.
* ``DRAGGING``  – pointer is down; the preview follows the pointer.
* ``SELECTED``  – the last drag produced a valid, snapped range.
* ``REJECTED``  – the last drag was invalid.  Interacts like ``IDLE`` but
  keeps the reason on screen until the next pointer-down.

After a failed fetch the state is ``provisional``: drags still work, but
their results are only checked against whatever was loaded (nothing) and
the view keeps the fetch-failed banner until a fetch succeeds.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Callable, Union

from app.selector.timeline import clamp_hours, finalize_range, format_hhmm, snap
from app.services.overlap import overlaps_any

INVALID_RANGE = "Invalid time range"
OVERLAPS_BOOKING = "Selected time overlaps with an existing booking"
FETCH_FAILED = "Could not load existing bookings"

HourRange = tuple[float, float]


class Phase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    SELECTED = "selected"
    REJECTED = "rejected"


# ── Events ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PointerDown:
    hours: float


@dataclass(frozen=True)
class PointerMove:
    hours: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class PointerLeave:
    pass


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class ContextChanged:
    court_id: str | None
    day: date | None


@dataclass(frozen=True)
class BookingsLoaded:
    generation: int
    ranges: tuple[HourRange, ...]


@dataclass(frozen=True)
class FetchFailed:
    generation: int


Event = Union[
    PointerDown, PointerMove, PointerUp, PointerLeave, Clear,
    ContextChanged, BookingsLoaded, FetchFailed,
]


# ── Effects ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class EmitSelection:
    """Tell the parent the current choice; an empty pair means none."""
    start: str = ""
    end: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.start and self.end)


@dataclass(frozen=True)
class FetchBookings:
    court_id: str
    day: date
    generation: int


Effect = Union[EmitSelection, FetchBookings]

_EMPTY = EmitSelection()


# ── State ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SelectorState:
    phase: Phase = Phase.IDLE
    court_id: str | None = None
    day: date | None = None
    # Incremented on every context change; fetch results carry it back.
    generation: int = 0
    loading: bool = False
    booked: tuple[HourRange, ...] = field(default_factory=tuple)
    anchor: float | None = None
    current: float | None = None
    selection: HourRange | None = None
    hover: float | None = None
    error: str = ""
    # The last fetch failed: selections are checked against an unknown
    # booked set until a fetch succeeds.
    provisional: bool = False

    @property
    def has_context(self) -> bool:
        return self.court_id is not None and self.day is not None

    @property
    def preview(self) -> HourRange | None:
        """Range to draw: the live drag, or the finalized selection."""
        if self.phase is Phase.DRAGGING and self.anchor is not None and self.current is not None:
            return min(self.anchor, self.current), max(self.anchor, self.current)
        return self.selection

    @property
    def duration(self) -> float:
        rng = self.preview
        return rng[1] - rng[0] if rng else 0.0


def initial_state() -> SelectorState:
    return SelectorState()


def validate_selection(start: float, end: float, booked: tuple[HourRange, ...]) -> str:
    """Reason a finalized range is unacceptable, or ``""`` if it is fine."""
    if start >= end:
        return INVALID_RANGE
    if overlaps_any(start, end, booked):
        return OVERLAPS_BOOKING
    return ""


# ── Transitions ────────────────────────────────────────────────────────────

Transition = tuple[SelectorState, list[Effect]]


def _on_pointer_down(state: SelectorState, event: PointerDown) -> Transition:
    # Never start a drag against a missing or half-loaded booked set.
    if not state.has_context or state.loading:
        return state, []
    if state.phase is Phase.DRAGGING:
        return state, []
    point = snap(clamp_hours(event.hours))
    effects: list[Effect] = [_EMPTY] if state.selection is not None else []
    return replace(
        state,
        phase=Phase.DRAGGING,
        anchor=point,
        current=point,
        selection=None,
        error="",
    ), effects


def _on_pointer_move(state: SelectorState, event: PointerMove) -> Transition:
    point = snap(clamp_hours(event.hours))
    if state.phase is Phase.DRAGGING:
        return replace(state, hover=point, current=point), []
    return replace(state, hover=point), []


def _finish_drag(state: SelectorState) -> Transition:
    start, end = finalize_range(state.anchor, state.current)  # type: ignore[arg-type]
    reason = validate_selection(start, end, state.booked)
    if reason:
        return replace(
            state,
            phase=Phase.REJECTED,
            anchor=None,
            current=None,
            selection=None,
            error=reason,
        ), [_EMPTY]
    return replace(
        state,
        phase=Phase.SELECTED,
        anchor=None,
        current=None,
        selection=(start, end),
        error="",
    ), [EmitSelection(format_hhmm(start), format_hhmm(end))]


def _on_pointer_up(state: SelectorState, event: PointerUp) -> Transition:
    if state.phase is not Phase.DRAGGING:
        return state, []
    return _finish_drag(state)


def _on_pointer_leave(state: SelectorState, event: PointerLeave) -> Transition:
    # Leaving mid-drag finalizes at the last known position.
    if state.phase is Phase.DRAGGING:
        state, effects = _finish_drag(state)
        return replace(state, hover=None), effects
    return replace(state, hover=None), []


def _on_clear(state: SelectorState, event: Clear) -> Transition:
    return replace(
        state,
        phase=Phase.IDLE,
        anchor=None,
        current=None,
        selection=None,
        error="",
    ), [_EMPTY]


def _on_context_changed(state: SelectorState, event: ContextChanged) -> Transition:
    generation = state.generation + 1
    fresh = SelectorState(
        court_id=event.court_id or None,
        day=event.day,
        generation=generation,
    )
    if not fresh.has_context:
        return fresh, [_EMPTY]
    return replace(fresh, loading=True), [
        _EMPTY,
        FetchBookings(court_id=fresh.court_id, day=fresh.day, generation=generation),  # type: ignore[arg-type]
    ]


def _on_bookings_loaded(state: SelectorState, event: BookingsLoaded) -> Transition:
    if event.generation != state.generation:
        return state, []
    booked = tuple(sorted((s, e) for s, e in event.ranges if s < e))
    return replace(state, loading=False, booked=booked, provisional=False), []


def _on_fetch_failed(state: SelectorState, event: FetchFailed) -> Transition:
    if event.generation != state.generation:
        return state, []
    return replace(state, loading=False, booked=(), error=FETCH_FAILED, provisional=True), []


_HANDLERS: dict[type, Callable[[SelectorState, object], Transition]] = {
    PointerDown: _on_pointer_down,
    PointerMove: _on_pointer_move,
    PointerUp: _on_pointer_up,
    PointerLeave: _on_pointer_leave,
    Clear: _on_clear,
    ContextChanged: _on_context_changed,
    BookingsLoaded: _on_bookings_loaded,
    FetchFailed: _on_fetch_failed,
}


def transition(state: SelectorState, event: Event) -> Transition:
    """Apply *event* to *state*, returning the new state and its effects."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown selector event: {event!r}")
    return handler(state, event)
