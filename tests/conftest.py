"""Shared fixtures for the signage service tests."""

from typing import Any, Callable, Dict

import pytest


@pytest.fixture
def make_event() -> Callable[..., Dict[str, Any]]:
    """Build a provider event booked for The Loft, overridable per field."""

    def _make(**overrides: Any) -> Dict[str, Any]:
        event: Dict[str, Any] = {
            "ID": 1,
            "Name": "Board Mtg",
            "StartTime": "2024-01-15T10:00:00",
            "EndTime": "2024-01-15T11:00:00",
            "Organizer": "Pat Lee",
            "Description": "Quarterly board meeting",
            "Resources": {"name": "The Loft", "status": {"value": "Approved"}},
        }
        event.update(overrides)
        return event

    return _make
