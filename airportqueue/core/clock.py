from airportqueue.core.temporal import Instant


class Clock:
    """Current simulated time, advanced only by the event scheduler."""

    def __init__(self, start_time: Instant):
        self._current_time = start_time

    @property
    def now(self) -> Instant:
        return self._current_time

    def update(self, time: Instant) -> None:
        self._current_time = time
