"""Refresh cadences for the signage display.

Two independent loops run on the application's event loop:

- the clock cadence replaces ``DisplayState.clock`` every few seconds;
- the data cadence reloads the day's reservations every few minutes and
  replaces ``DisplayState.reservations`` wholesale.

Each loop does its work once immediately, then sleeps for its interval.
Both loops run on a single event loop and each only ever assigns a whole
new value to its own piece of state, so no locking is needed. A slow fetch
suspends only the data loop; the clock keeps ticking.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Awaitable, Callable, List, Optional

from .models import Reservation

logger = logging.getLogger(__name__)

ReservationLoader = Callable[[date], Awaitable[List[Reservation]]]


class DisplayState:
    """In-memory state shown by the display. Never persisted."""

    def __init__(self, clock: datetime) -> None:
        self.clock: datetime = clock
        self.reservations: List[Reservation] = []
        self.reservations_updated_at: Optional[datetime] = None


class RefreshScheduler:
    """Owns the clock and data refresh tasks for a ``DisplayState``.

    Args:
        state: the state to update.
        loader: coroutine function returning the reservations for a date.
        now: clock provider; the current time in the display's timezone.
        clock_seconds: clock cadence interval.
        refresh_seconds: data cadence interval.
        fetch_timeout: upper bound on a single data refresh.
        sleep: coroutine used between ticks; replaced in tests.
    """

    def __init__(
        self,
        state: DisplayState,
        loader: ReservationLoader,
        *,
        now: Callable[[], datetime],
        clock_seconds: float = 5,
        refresh_seconds: float = 300,
        fetch_timeout: Optional[float] = 15.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.state = state
        self._loader = loader
        self._now = now
        self.clock_seconds = clock_seconds
        self.refresh_seconds = refresh_seconds
        self.fetch_timeout = fetch_timeout
        self._sleep = sleep
        self._clock_task: Optional[asyncio.Task] = None
        self._data_task: Optional[asyncio.Task] = None
        self._fetch_in_flight = False

    @property
    def running(self) -> bool:
        return any(t is not None and not t.done() for t in (self._clock_task, self._data_task))

    def tick_clock(self) -> datetime:
        """Replace the displayed time. Does not touch reservations."""
        self.state.clock = self._now()
        return self.state.clock

    async def refresh_reservations(self) -> bool:
        """Run one fetch cycle and replace the reservation set.

        Returns ``False`` without doing anything if a refresh is already in
        flight. A timeout or error leaves an empty set, not the previous one.
        """
        if self._fetch_in_flight:
            logger.warning("Reservation refresh already in flight; skipping this tick")
            return False
        self._fetch_in_flight = True
        try:
            day = self._now().date()
            try:
                reservations = await asyncio.wait_for(self._loader(day), timeout=self.fetch_timeout)
            except asyncio.TimeoutError:
                logger.error("Reservation refresh timed out after %ss", self.fetch_timeout)
                reservations = []
            except Exception as exc:
                logger.exception("Reservation refresh failed: %s", exc)
                reservations = []
            self.state.reservations = list(reservations)
            self.state.reservations_updated_at = self._now()
            if not reservations:
                logger.info("No reservations found, showing empty calendar")
            return True
        finally:
            self._fetch_in_flight = False

    async def _clock_loop(self) -> None:
        while True:
            self.tick_clock()
            await self._sleep(self.clock_seconds)

    async def _data_loop(self) -> None:
        while True:
            await self.refresh_reservations()
            await self._sleep(self.refresh_seconds)

    def start_clock(self) -> None:
        if self._clock_task is None or self._clock_task.done():
            self._clock_task = asyncio.create_task(self._clock_loop(), name="signage-clock")

    def start_data(self) -> None:
        if self._data_task is None or self._data_task.done():
            self._data_task = asyncio.create_task(self._data_loop(), name="signage-data")

    def start(self) -> None:
        """Start both cadences."""
        logger.info(
            "Starting refresh cadences: clock every %ss, data every %ss",
            self.clock_seconds,
            self.refresh_seconds,
        )
        self.start_clock()
        self.start_data()

    @staticmethod
    async def _cancel(task: Optional[asyncio.Task]) -> None:
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def stop_clock(self) -> None:
        await self._cancel(self._clock_task)
        self._clock_task = None

    async def stop_data(self) -> None:
        await self._cancel(self._data_task)
        self._data_task = None

    async def stop(self) -> None:
        """Cancel both cadences and wait for them to finish."""
        await self.stop_clock()
        await self.stop_data()
        logger.info("Refresh cadences stopped")
