from __future__ import annotations

from airportqueue.core.event import Event
from airportqueue.core.priority_queue import PriorityQueue


def _event_before(a: Event, b: Event) -> bool:
    if a.time != b.time:
        return a.time < b.time
    return a.sequence < b.sequence


class EventHeap:
    """Pending events ordered by (time, sequence).

    Keeps a running count of non-daemon events so the scheduler can tell
    when only background work (such as periodic sampling) is left.
    """

    def __init__(self):
        self._queue: PriorityQueue[Event] = PriorityQueue(_event_before, key=id)
        self._primary = 0

    def push(self, event: Event) -> None:
        if event.sequence is None:
            raise ValueError(f"{event!r} has no sequence number; schedule it through EventScheduler")
        self._queue.push(event)
        if not event.daemon:
            self._primary += 1

    def pop(self) -> Event | None:
        event = self._queue.pop()
        if event is not None and not event.daemon:
            self._primary -= 1
        return event

    def peek(self) -> Event | None:
        return self._queue.peek()

    def has_events(self) -> bool:
        return not self._queue.is_empty()

    def has_primary_events(self) -> bool:
        return self._primary > 0

    def size(self) -> int:
        return len(self._queue)
