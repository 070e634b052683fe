"""Sample reservations for demo mode.

Used when ``SIGNAGE_DEMO_MODE`` is set, so a display can be set up and
checked before it has network access to the events API.
"""

from datetime import date, datetime, time
from typing import List

from .models import Reservation

# (id, title, start, end, organizer)
_SAMPLE_DAY = [
    (1, "Team Standup", time(9, 0), time(9, 30), "John Smith"),
    (2, "Client Presentation", time(10, 0), time(11, 30), "Sarah Johnson"),
    (3, "Lunch Meeting", time(12, 0), time(13, 0), "Mike Davis"),
    (4, "Product Review", time(14, 0), time(15, 30), "Lisa Chen"),
    (5, "Training Session", time(16, 0), time(18, 0), "David Wilson"),
    (6, "Evening Workshop", time(19, 0), time(21, 0), "Emily Brown"),
]


def sample_reservations(day: date, room_name: str) -> List[Reservation]:
    """Return the sample bookings placed on ``day``, ordered by start time."""
    return [
        Reservation(
            id=rid,
            title=title,
            startTime=datetime.combine(day, start),
            endTime=datetime.combine(day, end),
            organizer=organizer,
            room=room_name,
            location=room_name,
        )
        for rid, title, start, end, organizer in _SAMPLE_DAY
    ]
