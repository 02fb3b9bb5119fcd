"""The virtual simulation clock and its event loop.

EventScheduler owns the only authoritative ordering of pending work. Time
jumps from one event to the next, so a run completes as fast as the
handlers execute while producing exactly the ordering a wall-clock paced
run would.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any

from airportqueue.core.clock import Clock
from airportqueue.core.entity import Entity
from airportqueue.core.event import Event
from airportqueue.core.event_heap import EventHeap
from airportqueue.core.temporal import Instant
from airportqueue.errors import InvariantViolation

logger = logging.getLogger(__name__)

STOPPED = "stopped"
EXHAUSTED = "exhausted"
UNTIL = "until"


@dataclass
class RunSummary:
    """What happened during one call to EventScheduler.run()."""
    start_time_s: float
    end_time_s: float
    events_processed: int
    wall_clock_seconds: float
    stop_reason: str

    def __str__(self) -> str:
        return (
            f"Run {self.stop_reason}: {self.start_time_s:.2f}s -> {self.end_time_s:.2f}s (sim), "
            f"{self.events_processed} events in {self.wall_clock_seconds:.3f}s (wall)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_time_s": self.start_time_s,
            "end_time_s": self.end_time_s,
            "events_processed": self.events_processed,
            "wall_clock_seconds": self.wall_clock_seconds,
            "stop_reason": self.stop_reason,
        }


class EventScheduler:
    """Time-ordered queue of pending events plus the loop that drains it.

    Handlers run one at a time, each to completion, in (time, sequence)
    order. A handler may schedule further events either by calling
    ``schedule`` or by returning them from ``handle_event``.

    Args:
        start_time: Initial clock value.
    """

    def __init__(self, start_time: Instant = Instant.Epoch):
        self._clock = Clock(start_time)
        self._heap = EventHeap()
        self._sequence = 0
        self._events_processed = 0
        self._stop_requested = False
        self._running = False

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def now(self) -> Instant:
        return self._clock.now

    @property
    def pending_count(self) -> int:
        return self._heap.size()

    @property
    def events_processed(self) -> int:
        return self._events_processed

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def attach(self, *entities: Entity) -> None:
        """Give entities access to this scheduler's clock."""
        for entity in entities:
            entity.set_clock(self._clock)

    def schedule(
        self,
        delay: float,
        event_type: str,
        target: Entity,
        *,
        daemon: bool = False,
        context: dict[str, Any] | None = None,
    ) -> Event:
        """Schedule an event ``delay`` seconds after the current time."""
        if not math.isfinite(delay) or delay < 0:
            logger.error("Invalid delay %r for %s at %r", delay, event_type, self.now)
            raise InvariantViolation(
                f"Cannot schedule '{event_type}' with delay {delay!r}"
            )
        return self.schedule_at(self.now + delay, event_type, target, daemon=daemon, context=context)

    def schedule_at(
        self,
        time: Instant,
        event_type: str,
        target: Entity,
        *,
        daemon: bool = False,
        context: dict[str, Any] | None = None,
    ) -> Event:
        """Schedule an event at an absolute simulated time."""
        event = Event(time, event_type, target, daemon=daemon, context=context)
        return self.schedule_event(event)

    def schedule_event(self, event: Event) -> Event:
        """Accept an already-built event and assign its sequence number.

        Raises:
            InvariantViolation: If the event lies before the current time or
                was already scheduled.
        """
        if event.time < self.now:
            logger.error("Event %r scheduled before current time %r", event, self.now)
            raise InvariantViolation(
                f"Cannot schedule {event!r} in the past (now={self.now!r})"
            )
        if event.sequence is not None:
            raise InvariantViolation(f"{event!r} is already scheduled")

        event.sequence = self._sequence
        self._sequence += 1
        self._heap.push(event)
        return event

    def stop(self) -> None:
        """Request termination. The loop exits once the current handler returns."""
        if not self._stop_requested:
            logger.debug("Stop requested at %r", self.now)
        self._stop_requested = True

    def run(self, until: Instant | None = None) -> RunSummary:
        """Process events until stopped, out of work, or past ``until``.

        The loop also ends when only daemon events remain pending.
        """
        if self._running:
            raise InvariantViolation("EventScheduler.run() is not re-entrant")

        self._running = True
        start_time = self.now
        processed_before = self._events_processed
        wall_start = time.perf_counter()
        logger.info("Event loop starting at %r with %d pending events", start_time, self._heap.size())

        try:
            reason = self._loop(until)
        finally:
            self._running = False

        summary = RunSummary(
            start_time_s=start_time.to_seconds(),
            end_time_s=self.now.to_seconds(),
            events_processed=self._events_processed - processed_before,
            wall_clock_seconds=time.perf_counter() - wall_start,
            stop_reason=reason,
        )
        logger.info("Event loop finished: %s", summary)
        return summary

    def _loop(self, until: Instant | None) -> str:
        while True:
            if self._stop_requested:
                return STOPPED
            if not self._heap.has_primary_events():
                return EXHAUSTED

            upcoming = self._heap.peek()
            if until is not None and upcoming.time > until:
                if until > self.now:
                    self._clock.update(until)
                return UNTIL

            event = self._heap.pop()
            if event.cancelled:
                continue
            if event.time < self.now:
                logger.error("Popped %r behind the clock at %r", event, self.now)
                raise InvariantViolation(f"{event!r} is earlier than current time {self.now!r}")

            self._clock.update(event.time)
            self._events_processed += 1
            for follow_up in event.invoke():
                self.schedule_event(follow_up)
