"""Church calendar client utilities for the signage service.

This module fetches the day's events from the church events API, keeps the
ones booked for the monitored room in an approved state, and reshapes them
into ``Reservation`` models. The events endpoint is public, so no
credentials are sent.

Failures never propagate to the display. A transport or parse error yields
an empty event list, a malformed event is dropped on its own, and anything
unexpected empties the reservation set for that cycle. The next data
cadence acts as the retry.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .models import Reservation, Resource

logger = logging.getLogger(__name__)

# Keys under which some deployments of the API wrap the event array.
_WRAPPER_KEYS = ("events", "items", "data")


def events_url_for(url: str, day: date) -> str:
    """Substitute the queried day into ``url`` when it has a ``{date}`` slot."""
    if "{date}" in url:
        return url.replace("{date}", day.isoformat())
    return url


def _unwrap_events(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _WRAPPER_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
    logger.warning("Events payload is not a list (got %s); treating as empty", type(payload).__name__)
    return []


async def fetch_events(
    day: date,
    *,
    url: str,
    timeout: float = 15.0,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Dict[str, Any]]:
    """Retrieve the raw event records for ``day``.

    Args:
        day: the date being displayed.
        url: the events endpoint, optionally containing ``{date}``.
        timeout: per-request timeout in seconds.
        client: an existing client to reuse; one is created otherwise.

    Returns:
        The provider's event dictionaries, or an empty list if the request
        or the JSON decoding fails.
    """
    target = events_url_for(url, day)
    headers = {"Accept": "application/json"}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
                response = await own_client.get(target, headers=headers)
        else:
            response = await client.get(target, headers=headers, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as exc:
        logger.error("Events API returned HTTP %s for %s", exc.response.status_code, target)
        return []
    except httpx.HTTPError as exc:
        logger.error("Error fetching events from %s: %s", target, exc)
        return []
    except ValueError as exc:
        logger.error("Events API returned malformed JSON from %s: %s", target, exc)
        return []
    events = _unwrap_events(payload)
    logger.debug("Fetched %d events for %s", len(events), day.isoformat())
    return events


def normalize_resources(value: Any) -> List[Dict[str, Any]]:
    """Coerce an event's ``Resources`` field into a list of dictionaries.

    The provider sends a bare object for a single resource and an array for
    several. Anything else (missing, a string, a number) has no resources.
    """
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []


def _resource_matches(raw: Dict[str, Any], room_name: str, approval_status: str) -> bool:
    try:
        resource = Resource.model_validate(raw)
    except ValidationError:
        return False
    return (
        resource.name == room_name
        and resource.status is not None
        and resource.status.value == approval_status
    )


def filter_room_events(
    events: Any,
    room_name: str,
    approval_status: str,
) -> List[Dict[str, Any]]:
    """Keep events holding an approved booking of ``room_name``.

    Input order is preserved. Non-dictionary entries are skipped.
    """
    if not isinstance(events, list):
        return []
    kept: List[Dict[str, Any]] = []
    for event in events:
        if not isinstance(event, dict):
            continue
        resources = normalize_resources(event.get("Resources"))
        if any(_resource_matches(r, room_name, approval_status) for r in resources):
            kept.append(event)
    return kept


def transform_event(event: Dict[str, Any], room_name: str) -> Reservation:
    """Reshape a provider event into a ``Reservation``.

    The setup window, when the event has one, replaces the nominal start
    and end so the block covers set-up and tear-down time in the room.

    Raises:
        ValidationError: if the event lacks an ID or usable start/end times.
    """
    location = event.get("Location")
    location_name = location.get("Name") if isinstance(location, dict) else None
    data: Dict[str, Any] = {
        "id": event.get("ID"),
        "startTime": event.get("SetupStart") or event.get("StartTime"),
        "endTime": event.get("SetupEnd") or event.get("EndTime"),
        "organizer": event.get("Organizer"),
        "room": room_name,
        "description": event.get("Description"),
        "location": location_name or room_name,
        "recurrence": event.get("Recurrence"),
    }
    if event.get("Name"):
        data["title"] = event["Name"]
    return Reservation.model_validate(data)


async def load_reservations(
    day: date,
    *,
    url: str,
    room_name: str,
    approval_status: str,
    timeout: float = 15.0,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Reservation]:
    """Fetch, filter and transform the reservations for ``day``.

    Returns an empty list rather than raising, whatever goes wrong.
    """
    try:
        events = await fetch_events(day, url=url, timeout=timeout, client=client)
        reservations: List[Reservation] = []
        for event in filter_room_events(events, room_name, approval_status):
            try:
                reservations.append(transform_event(event, room_name))
            except ValidationError as exc:
                logger.warning("Dropping event %r: %s", event.get("ID"), exc.errors()[0].get("msg", exc))
        logger.info("Loaded %d %s reservations for %s", len(reservations), room_name, day.isoformat())
        return reservations
    except Exception as exc:
        logger.exception("Error getting %s reservations: %s", room_name, exc)
        return []
