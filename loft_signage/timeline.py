"""Timeline layout for the daily reservation view.

Positions on the timeline are fractions of its total height: ``0`` is the
top edge (the window's start hour) and ``1`` the bottom edge (its end
hour). The page multiplies them by 100 to get CSS percentages.

Everything here is a pure function of its arguments, so the renderer can be
called on every clock tick without caching.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Iterable, List, Optional

from .models import (
    ClockPanel,
    GridLine,
    NowMarker,
    Reservation,
    ReservationBlock,
    Timeline,
    TimelineWindow,
)

DEFAULT_WINDOW = TimelineWindow()

# Blocks are shown without the booking title; the room display is public.
BLOCK_LABEL = "Reserved"


def time_position(hour: float, minute: float = 0, window: TimelineWindow = DEFAULT_WINDOW) -> float:
    """Map a time of day to a vertical position on the timeline.

    The end hour always maps to exactly ``1`` whatever the minute, so the
    closing grid line sits on the bottom edge. Times before the window give
    negative values and are not clamped; callers decide what to draw.
    """
    if hour == window.end_hour:
        return 1
    total_minutes = (hour - window.start_hour) * 60 + minute
    return total_minutes / ((window.end_hour - window.start_hour) * 60)


def format_hour(hour: int) -> str:
    """Return an hour label such as ``7 AM`` or ``12 PM``."""
    suffix = "AM" if hour % 24 < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"


def format_clock(moment: datetime) -> str:
    """Return a wall-clock label such as ``9:05 PM``."""
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{moment.hour % 12 or 12}:{moment.minute:02d} {suffix}"


def format_date(moment: datetime) -> str:
    """Return a short date label such as ``Mon, Jan 15``."""
    return f"{moment.strftime('%a, %b')} {moment.day}"


def grid_lines(window: TimelineWindow = DEFAULT_WINDOW) -> List[GridLine]:
    """Build the hour and sub-hour rules for ``window``.

    Hour rules run from the start hour to the end hour inclusive. Sub-hour
    rules stop before the end hour so nothing is drawn past the bottom edge.
    """
    lines: List[GridLine] = []
    for hour in range(window.start_hour, window.end_hour + 1):
        lines.append(
            GridLine(hour=hour, minute=0, kind="hour", position=time_position(hour, 0, window), label=format_hour(hour))
        )
    for hour in range(window.start_hour, window.end_hour):
        for minute in range(window.slot_minutes, 60, window.slot_minutes):
            lines.append(
                GridLine(hour=hour, minute=minute, kind="half-hour", position=time_position(hour, minute, window))
            )
    return lines


def now_marker(now: datetime, window: TimelineWindow = DEFAULT_WINDOW) -> Optional[NowMarker]:
    """Return the current-time indicator, or ``None`` outside the window.

    The indicator is shown from ``start_hour:00`` through ``end_hour:00``
    inclusive; any later minute of the end hour hides it.
    """
    if now.hour < window.start_hour:
        return None
    if now.hour > window.end_hour or (now.hour == window.end_hour and now.minute > 0):
        return None
    return NowMarker(position=time_position(now.hour, now.minute, window), label=format_clock(now))


def _localize(moment: datetime, tz: Optional[tzinfo]) -> datetime:
    # Naive timestamps are already wall-clock times for the room.
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(tz)


def reservation_block(
    reservation: Reservation,
    window: TimelineWindow = DEFAULT_WINDOW,
    tz: Optional[tzinfo] = None,
) -> ReservationBlock:
    """Compute the vertical extent of one reservation.

    A reservation that ends before it starts gets a zero height rather than
    a negative one.
    """
    start = _localize(reservation.startTime, tz)
    end = _localize(reservation.endTime, tz)
    top = time_position(start.hour, start.minute, window)
    bottom = time_position(end.hour, end.minute, window)
    return ReservationBlock(
        id=reservation.id,
        label=BLOCK_LABEL,
        top=top,
        height=max(0.0, bottom - top),
        startTime=reservation.startTime,
        endTime=reservation.endTime,
    )


def render_timeline(
    reservations: Iterable[Reservation],
    now: datetime,
    window: TimelineWindow = DEFAULT_WINDOW,
    tz: Optional[tzinfo] = None,
) -> Timeline:
    """Render the full timeline for ``now`` and the current reservations.

    Blocks keep the order of ``reservations``. Overlapping bookings are
    drawn on top of each other; no lateral offset is applied.
    """
    local_now = _localize(now, tz)
    return Timeline(
        generatedAt=now,
        clock=ClockPanel(time=format_clock(local_now), date=format_date(local_now)),
        lines=grid_lines(window),
        now=now_marker(local_now, window),
        blocks=[reservation_block(r, window, tz) for r in reservations],
    )
