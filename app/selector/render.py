"""
Render model for the selector: everything a view layer needs to draw the
timeline, as plain data (percent offsets and labels).
"""

from __future__ import annotations

from dataclasses import dataclass

from app.selector.machine import FETCH_FAILED, Phase, SelectorState
from app.selector.timeline import (
    AXIS_HOURS,
    format_12h,
    format_axis_label,
    format_duration,
    percent,
)


@dataclass(frozen=True)
class Band:
    """Horizontal band on the axis, in percent of its width."""
    left: float
    width: float


@dataclass(frozen=True)
class SelectionBand(Band):
    label: str
    duration: str
    error: bool
    # Checked against an incomplete booked set; the server decides.
    provisional: bool = False


@dataclass(frozen=True)
class HoverMarker:
    left: float
    label: str


@dataclass(frozen=True)
class TimelineView:
    axis_labels: tuple[str, ...]
    gridlines: tuple[float, ...]
    occupied: tuple[Band, ...]
    selection: SelectionBand | None
    hover: HoverMarker | None
    loading: bool
    error: str
    provisional: bool
    # No court/date chosen yet: show a prompt instead of the axis.
    needs_context: bool


def _band(start: float, end: float) -> Band:
    return Band(left=percent(start), width=percent(end - start))


def render(state: SelectorState) -> TimelineView:
    selection = None
    preview = state.preview
    if preview is not None:
        start, end = preview
        selection = SelectionBand(
            left=percent(start),
            width=percent(end - start),
            label=f"{format_12h(start)} - {format_12h(end)}",
            duration=format_duration(state.duration),
            error=bool(state.error),
            provisional=state.provisional,
        )

    hover = None
    if state.hover is not None and state.phase is not Phase.DRAGGING:
        hover = HoverMarker(left=percent(state.hover), label=format_12h(state.hover))

    return TimelineView(
        axis_labels=tuple(format_axis_label(h) for h in AXIS_HOURS),
        gridlines=tuple(percent(h) for h in range(25)),
        occupied=tuple(_band(s, e) for s, e in state.booked),
        selection=selection,
        hover=hover,
        loading=state.loading,
        error=state.error or (FETCH_FAILED if state.provisional else ""),
        provisional=state.provisional,
        needs_context=not state.has_context,
    )
