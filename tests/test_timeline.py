"""Unit tests for loft_signage.timeline."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from pydantic import ValidationError

from loft_signage.models import Reservation, TimelineWindow
from loft_signage.timeline import (
    format_clock,
    format_date,
    format_hour,
    grid_lines,
    now_marker,
    render_timeline,
    reservation_block,
    time_position,
)

pytestmark = [pytest.mark.unit]


def _reservation(rid, start, end):
    return Reservation(id=rid, title="Booked", startTime=start, endTime=end, room="The Loft")


def test_time_position_when_window_start_then_zero() -> None:
    assert time_position(7, 0) == 0


@pytest.mark.parametrize("minute", range(60))
def test_time_position_when_end_hour_then_clamped_to_one(minute: int) -> None:
    assert time_position(21, minute) == 1


def test_time_position_when_midpoint_then_exactly_half() -> None:
    assert time_position(14, 0) == 0.5


def test_time_position_when_walking_window_then_monotonic() -> None:
    positions = [time_position(h, m) for h in range(7, 22) for m in range(60)]
    assert all(a <= b for a, b in zip(positions, positions[1:]))


def test_time_position_when_called_twice_then_identical() -> None:
    assert time_position(13, 17) == time_position(13, 17)


def test_time_position_when_before_window_then_not_clamped() -> None:
    assert time_position(6, 0) == pytest.approx(-1 / 14)


def test_time_position_when_custom_window_then_uses_its_bounds() -> None:
    window = TimelineWindow(start_hour=8, end_hour=18)
    assert time_position(13, 0, window) == 0.5
    assert time_position(18, 45, window) == 1


@pytest.mark.parametrize(
    "bounds",
    [
        {"slot_minutes": 0},
        {"slot_minutes": -15},
        {"slot_minutes": 90},
        {"start_hour": 21, "end_hour": 7},
        {"start_hour": 9, "end_hour": 9},
        {"end_hour": 24},
    ],
)
def test_timeline_window_when_bounds_invalid_then_rejected(bounds) -> None:
    with pytest.raises(ValidationError):
        TimelineWindow(**bounds)


def test_grid_lines_when_quarter_hour_slots_then_three_rules_per_hour() -> None:
    window = TimelineWindow(start_hour=9, end_hour=11, slot_minutes=15)
    minutes = [(l.hour, l.minute) for l in grid_lines(window) if l.kind == "half-hour"]
    assert minutes == [(9, 15), (9, 30), (9, 45), (10, 15), (10, 30), (10, 45)]


def test_grid_lines_when_default_window_then_hour_and_half_hour_rules() -> None:
    lines = grid_lines()
    hours = [l for l in lines if l.kind == "hour"]
    halves = [l for l in lines if l.kind == "half-hour"]

    assert [l.hour for l in hours] == list(range(7, 22))
    assert hours[0].label == "7 AM"
    assert hours[-1].label == "9 PM"
    assert hours[-1].position == 1
    assert len(halves) == 14
    assert (halves[0].hour, halves[0].minute) == (7, 30)
    assert (halves[-1].hour, halves[-1].minute) == (20, 30)
    assert all(l.label is None for l in halves)


@pytest.mark.parametrize(
    "hour,expected",
    [(0, "12 AM"), (7, "7 AM"), (12, "12 PM"), (13, "1 PM"), (21, "9 PM")],
)
def test_format_hour_when_hour_given_then_twelve_hour_label(hour: int, expected: str) -> None:
    assert format_hour(hour) == expected


def test_format_clock_and_date_when_morning_then_short_labels() -> None:
    moment = datetime(2024, 1, 15, 9, 5)
    assert format_clock(moment) == "9:05 AM"
    assert format_clock(datetime(2024, 1, 15, 0, 30)) == "12:30 AM"
    assert format_date(moment) == "Mon, Jan 15"


def test_now_marker_when_before_window_then_suppressed() -> None:
    assert now_marker(datetime(2024, 1, 15, 6, 59)) is None


def test_now_marker_when_window_opens_then_at_top() -> None:
    marker = now_marker(datetime(2024, 1, 15, 7, 0))
    assert marker is not None
    assert marker.position == 0
    assert marker.label == "7:00 AM"


def test_now_marker_when_window_closes_then_at_bottom() -> None:
    marker = now_marker(datetime(2024, 1, 15, 21, 0))
    assert marker is not None
    assert marker.position == 1


def test_now_marker_when_after_window_then_suppressed() -> None:
    assert now_marker(datetime(2024, 1, 15, 21, 1)) is None
    assert now_marker(datetime(2024, 1, 15, 23, 30)) is None


def test_reservation_block_when_board_meeting_then_expected_geometry() -> None:
    block = reservation_block(
        _reservation(1, datetime(2024, 1, 15, 10, 0), datetime(2024, 1, 15, 11, 0))
    )
    assert block.top == time_position(10, 0)
    assert block.top == pytest.approx(0.2142857, abs=1e-6)
    assert block.height == pytest.approx(0.0714285, abs=1e-6)
    assert block.label == "Reserved"


def test_reservation_block_when_end_before_start_then_zero_height() -> None:
    block = reservation_block(
        _reservation(2, datetime(2024, 1, 15, 12, 0), datetime(2024, 1, 15, 11, 0))
    )
    assert block.height == 0


def test_reservation_block_when_aware_times_then_converted_to_display_zone() -> None:
    reservation = _reservation(
        3,
        datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc),
        datetime(2024, 1, 15, 16, 0, tzinfo=timezone.utc),
    )
    block = reservation_block(reservation, tz=ZoneInfo("America/New_York"))
    assert block.top == time_position(10, 0)


def test_render_timeline_when_overlapping_then_blocks_kept_in_order() -> None:
    first = _reservation("a", datetime(2024, 1, 15, 10, 0), datetime(2024, 1, 15, 12, 0))
    second = _reservation("b", datetime(2024, 1, 15, 11, 0), datetime(2024, 1, 15, 13, 0))

    timeline = render_timeline([first, second], datetime(2024, 1, 15, 14, 0))

    assert [b.id for b in timeline.blocks] == ["a", "b"]
    assert timeline.blocks[1].top < timeline.blocks[0].top + timeline.blocks[0].height
    assert timeline.now is not None and timeline.now.position == 0.5
    assert timeline.clock.time == "2:00 PM"
    assert timeline.clock.date == "Mon, Jan 15"


def test_render_timeline_when_no_reservations_then_grid_still_drawn() -> None:
    timeline = render_timeline([], datetime(2024, 1, 15, 5, 0))
    assert timeline.blocks == []
    assert timeline.now is None
    assert len(timeline.lines) == 29
