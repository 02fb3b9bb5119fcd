"""Events: the units of work processed by the EventScheduler.

Each event names a target entity. When the scheduler pops the event it
calls ``target.handle_event(event)`` and schedules whatever events the
handler returns.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from airportqueue.core.temporal import Instant

if TYPE_CHECKING:
    from airportqueue.core.entity import Entity

logger = logging.getLogger(__name__)


class Event:
    """A state transition scheduled at a point in simulated time.

    Ordering is by (time, sequence). The sequence number is assigned by the
    scheduler when the event is accepted, so events at the same instant are
    handled in the order they were scheduled.

    Attributes:
        time: When this event should be processed.
        event_type: Label such as "Arrival", "Departure" or "QueueSample".
        target: Entity that handles the event.
        daemon: If True, this event does not keep the simulation alive.
        context: Event payload, e.g. ``{"passenger": ...}``.
    """

    __slots__ = (
        "_cancelled",
        "context",
        "daemon",
        "event_type",
        "sequence",
        "target",
        "time",
    )

    def __init__(
        self,
        time: Instant,
        event_type: str,
        target: Entity | None = None,
        *,
        daemon: bool = False,
        context: dict[str, Any] | None = None,
    ):
        if target is None:
            raise ValueError(f"Event '{event_type}' must have a 'target'.")

        self.time = time
        self.event_type = event_type
        self.target = target
        self.daemon = daemon
        self.context = context if context is not None else {}
        self.sequence: int | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Mark this event as cancelled. The scheduler skips it on pop."""
        self._cancelled = True

    def invoke(self) -> list[Event]:
        """Run the target's handler and normalize its result to a list."""
        result = self.target.handle_event(self)
        if result is None:
            return []
        if isinstance(result, Event):
            return [result]
        return list(result)

    def __repr__(self) -> str:
        target_name = getattr(self.target, "name", None) or type(self.target).__name__
        return f"Event({self.time!r}, {self.event_type!r}, target={target_name})"
