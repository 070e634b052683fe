"""Application configuration settings.

This module defines the ``Settings`` class using ``pydantic-settings`` to
load configuration from environment variables. It centralises all
runtime configuration for the display, such as the calendar endpoint,
the monitored room, the timeline window and the refresh cadences.

Values may also be supplied through a dotenv file. When running under
systemd the ``EnvironmentFile`` option supplies the same variables, so
loading the file here is harmless.
"""

import os

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv(os.getenv("SIGNAGE_ENV_FILE", "/opt/kiosk/.env"))


class Settings(BaseSettings):
    """Configuration values loaded from environment variables.

    Environment variable names map to fields by alias. Every field has a
    default suited to the Loft display, so the service starts with no
    environment at all.
    """

    # Calendar source
    events_url: str = Field(
        default="https://api2.grace.church/v2/events/today",
        alias="SIGNAGE_EVENTS_URL",
        description="Events endpoint. A '{date}' placeholder is replaced with the queried ISO date.",
    )
    room_name: str = Field(
        default="The Loft",
        alias="SIGNAGE_ROOM_NAME",
        description="Resource name of the monitored room (exact match).",
    )
    approval_status: str = Field(
        default="Approved",
        alias="SIGNAGE_APPROVAL_STATUS",
        description="Resource status value that marks a booking as confirmed (exact match).",
    )
    fetch_timeout_seconds: float = Field(
        default=15.0,
        alias="SIGNAGE_FETCH_TIMEOUT_SECONDS",
        description="Upper bound on a single fetch cycle before it is treated as failed.",
    )

    # Timeline window
    timeline_start_hour: int = Field(default=7, alias="SIGNAGE_TIMELINE_START_HOUR")
    timeline_end_hour: int = Field(default=21, alias="SIGNAGE_TIMELINE_END_HOUR")
    slot_minutes: int = Field(default=30, alias="SIGNAGE_SLOT_MINUTES")

    # Refresh cadences
    clock_seconds: int = Field(
        default=5,
        alias="SIGNAGE_CLOCK_SECONDS",
        description="Interval (in seconds) between clock updates.",
    )
    refresh_seconds: int = Field(
        default=300,
        alias="SIGNAGE_REFRESH_SECONDS",
        description="Interval (in seconds) between reservation fetches.",
    )

    # Display
    timezone: str = Field(
        default="",
        alias="SIGNAGE_TIMEZONE",
        description="IANA zone name for the display. Empty means the host's local time.",
    )
    background_image: str = Field(
        default="",
        alias="SIGNAGE_BACKGROUND_IMAGE",
        description="Path to the image shown above the timeline. Empty uses the bundled default.",
    )
    demo_mode: bool = Field(
        default=False,
        alias="SIGNAGE_DEMO_MODE",
        description="Serve built-in sample reservations instead of calling the events API.",
    )

    # Server
    host: str = Field(default="127.0.0.1", alias="SIGNAGE_HOST")
    port: int = Field(default=9000, alias="SIGNAGE_PORT")
    log_level: str = Field(default="INFO", alias="SIGNAGE_LOG_LEVEL")

    class Config:
        extra = "ignore"


# Instantiate settings at module import time. This allows other modules to
# import ``settings`` directly without repeatedly reading environment variables.
settings = Settings()
