"""Pydantic data models used by the signage service.

``Resource`` and ``Reservation`` describe bookings after they have been
normalised from the external calendar feed. The remaining models describe
the rendered timeline returned to the display page. They are separate from
the provider's event records to decouple our internal representation from
that feed.
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator


def _as_text(value: Any) -> Any:
    # Providers sometimes send numbers or objects for free-text fields.
    if value is None or isinstance(value, str):
        return value
    return str(value)


DisplayText = Annotated[Optional[str], BeforeValidator(_as_text)]


class ResourceStatus(BaseModel):
    """Booking state of a resource, e.g. ``Approved`` or ``Pending``."""

    model_config = ConfigDict(extra="ignore")

    value: Optional[str] = None


class Resource(BaseModel):
    """A bookable resource attached to a provider event."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    status: Optional[ResourceStatus] = None


class Reservation(BaseModel):
    """A room booking derived from an approved provider event."""

    id: Union[int, str]
    title: Annotated[str, BeforeValidator(_as_text)] = Field(default="Reserved", min_length=1)
    startTime: datetime
    endTime: datetime
    organizer: DisplayText = None
    room: str
    description: DisplayText = None
    location: DisplayText = None
    recurrence: Any = None


class TimelineWindow(BaseModel):
    """The fixed span of the day drawn on the timeline."""

    model_config = ConfigDict(frozen=True)

    start_hour: int = Field(default=7, ge=0, le=23)
    end_hour: int = Field(default=21, ge=1, le=23)
    slot_minutes: int = Field(default=30, gt=0, le=60)

    @model_validator(mode="after")
    def _check_bounds(self) -> "TimelineWindow":
        if self.start_hour >= self.end_hour:
            raise ValueError(f"start_hour ({self.start_hour}) must be before end_hour ({self.end_hour})")
        return self


class GridLine(BaseModel):
    """A horizontal rule at an hour or half-hour boundary."""

    hour: int
    minute: int
    kind: str  # "hour" or "half-hour"
    position: float
    label: Optional[str] = None


class NowMarker(BaseModel):
    position: float
    label: str


class ReservationBlock(BaseModel):
    """Vertical extent of one reservation, as fractions of the timeline height."""

    id: Union[int, str]
    label: str
    top: float
    height: float
    startTime: datetime
    endTime: datetime


class ClockPanel(BaseModel):
    time: str
    date: str


class Timeline(BaseModel):
    """Everything the page needs to draw one frame."""

    generatedAt: datetime
    clock: ClockPanel
    lines: List[GridLine] = []
    now: Optional[NowMarker] = None
    blocks: List[ReservationBlock] = []
