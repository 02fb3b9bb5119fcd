"""Servers: class-bound desks that serve one passenger at a time."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from airportqueue.core.entity import Entity
from airportqueue.core.event import Event
from airportqueue.core.priority_queue import PriorityQueue
from airportqueue.core.temporal import Instant
from airportqueue.errors import InvariantViolation
from airportqueue.passenger import FareClass, Passenger

logger = logging.getLogger(__name__)

DEPARTURE = "Departure"


class ServerState(Enum):
    IDLE = "idle"
    SERVING = "serving"


class PassengerServedListener(Protocol):
    """Receives a notification each time a server finishes a passenger."""

    def on_passenger_served(self, passenger: Passenger, completion_time: Instant) -> None:
        ...


class Server(Entity):
    """A desk bound for its whole lifetime to one fare class queue.

    The server only ever pops from the queue it was constructed with. It
    starts Idle at ``start_time`` and accumulates idle time for every
    stretch spent without a passenger.

    Args:
        name: Identifier for logging and reports.
        fare_class: Class of passengers this server may serve.
        queue: The class queue for ``fare_class``.
        listener: Notified on every completed service.
        start_time: Simulation start; the first idle stretch begins here.
    """

    def __init__(
        self,
        name: str,
        fare_class: FareClass,
        queue: PriorityQueue[Passenger],
        listener: PassengerServedListener,
        start_time: Instant = Instant.Epoch,
    ):
        super().__init__(name)
        self.fare_class = fare_class
        self._queue = queue
        self._listener = listener
        self.state = ServerState.IDLE
        self.idle_since: Instant | None = start_time
        self.current_passenger: Passenger | None = None
        self.passengers_served = 0
        self._idle_nanos = 0

    @property
    def is_idle(self) -> bool:
        return self.state is ServerState.IDLE

    @property
    def total_idle_time(self) -> float:
        """Idle seconds from start up to the current time."""
        return self.idle_time_at(self.now)

    @property
    def closed_idle_time(self) -> float:
        """Idle seconds over stretches already ended by a dispatch."""
        return self._idle_nanos / 1_000_000_000

    def idle_time_at(self, time: Instant) -> float:
        """Idle seconds up to ``time``, including a stretch still in progress."""
        nanos = self._idle_nanos
        if self.idle_since is not None and time > self.idle_since:
            nanos += (time - self.idle_since).nanoseconds
        return nanos / 1_000_000_000

    def call_next_passenger(self) -> Event | None:
        """Take the next passenger from the bound queue, if there is one.

        Returns:
            The departure event for the dispatched passenger, or None when
            the queue is empty and the server stays idle.
        """
        if self.state is ServerState.SERVING:
            raise InvariantViolation(f"{self.name} asked for a passenger while serving")

        passenger = self._queue.pop()
        if passenger is None:
            if self.idle_since is None:
                self.idle_since = self.now
            return None
        return self._serve(passenger)

    def _serve(self, passenger: Passenger) -> Event:
        if passenger.fare_class is not self.fare_class:
            logger.error("[%s] %s server received %s passenger %d",
                         self.name, self.fare_class, passenger.fare_class, passenger.passenger_id)
            raise InvariantViolation(
                f"{self.name} is bound to {self.fare_class} but got a {passenger.fare_class} passenger"
            )

        now = self.now
        passenger.dispatch_time = now
        passenger.total_wait_time = (now - passenger.enqueue_time).to_seconds()

        if self.idle_since is not None:
            self._idle_nanos += (now - self.idle_since).nanoseconds
            self.idle_since = None

        self.state = ServerState.SERVING
        self.current_passenger = passenger
        logger.debug("[%s] Serving passenger %d at %r (waited %.3fs)",
                     self.name, passenger.passenger_id, now, passenger.total_wait_time)

        return Event(
            time=now + passenger.service_time,
            event_type=DEPARTURE,
            target=self,
            context={"passenger": passenger},
        )

    def handle_event(self, event: Event) -> Event | None:
        if event.event_type != DEPARTURE:
            raise ValueError(f"{self.name} cannot handle event type {event.event_type!r}")

        passenger = event.context["passenger"]
        if passenger is not self.current_passenger:
            raise InvariantViolation(
                f"{self.name} got a departure for passenger {passenger.passenger_id} it is not serving"
            )

        passenger.completion_time = self.now
        self.current_passenger = None
        self.state = ServerState.IDLE
        self.passengers_served += 1
        logger.debug("[%s] Finished passenger %d at %r", self.name, passenger.passenger_id, self.now)

        self._listener.on_passenger_served(passenger, self.now)
        return self.call_next_passenger()

    def __repr__(self) -> str:
        return f"Server({self.name!r}, {self.fare_class}, {self.state.value})"
