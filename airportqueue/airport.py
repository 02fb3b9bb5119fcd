"""The airport: class queues, the server pool, and the dispatch policy."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from airportqueue.core.entity import Entity
from airportqueue.core.event import Event
from airportqueue.core.priority_queue import PriorityQueue
from airportqueue.core.scheduler import EventScheduler
from airportqueue.core.temporal import Instant
from airportqueue.errors import InvariantViolation, ValidationError
from airportqueue.passenger import FareClass, Passenger, PassengerRecord, arrived_earlier, passenger_key
from airportqueue.server import Server
from airportqueue.stats import AirportReport, StatsCollector

logger = logging.getLogger(__name__)

ARRIVAL = "Arrival"

ReportListener = Callable[[AirportReport], None]


def _validate_server_count(fare_class: FareClass, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{fare_class} server count must be a non-negative integer, got {value!r}")
    return value


class Airport(Entity):
    """Dispatcher owning one queue per fare class and the class-bound servers.

    On each arrival the passenger joins its class queue and, if one of the
    servers bound to that class is idle, that server is asked to call the
    next passenger. Servers of the other class are never considered.

    When the last admitted passenger has been served, the airport stops the
    scheduler and builds the final report exactly once.

    Args:
        scheduler: The event loop driving this airport.
        economy_servers: Number of servers bound to the economy queue.
        business_servers: Number of servers bound to the business queue.
        sample_interval_s: Simulated seconds between queue-length samples.
    """

    def __init__(
        self,
        scheduler: EventScheduler,
        economy_servers: int,
        business_servers: int,
        sample_interval_s: float = 1.0,
        name: str = "Airport",
    ):
        super().__init__(name)
        counts = {
            FareClass.ECONOMY: _validate_server_count(FareClass.ECONOMY, economy_servers),
            FareClass.BUSINESS: _validate_server_count(FareClass.BUSINESS, business_servers),
        }

        self._scheduler = scheduler
        self.start_time: Instant = scheduler.now
        self.queues: dict[FareClass, PriorityQueue[Passenger]] = {
            fc: PriorityQueue(arrived_earlier, key=passenger_key) for fc in FareClass
        }
        self.stats = StatsCollector(self.queues, sample_interval_s)

        self._servers_by_class: dict[FareClass, list[Server]] = {fc: [] for fc in FareClass}
        self.servers: list[Server] = []
        for fare_class in FareClass:
            for index in range(counts[fare_class]):
                server = Server(
                    name=f"{fare_class}-{index}",
                    fare_class=fare_class,
                    queue=self.queues[fare_class],
                    listener=self,
                    start_time=self.start_time,
                )
                self.servers.append(server)
                self._servers_by_class[fare_class].append(server)

        scheduler.attach(self, self.stats, *self.servers)

        self.active_passenger_count = 0
        self.total_accepted = 0
        self.report: AirportReport | None = None
        self._report_listeners: list[ReportListener] = []
        self._next_passenger_id = 0
        self._started = False

    @property
    def finished(self) -> bool:
        return self.report is not None

    def servers_for(self, fare_class: FareClass) -> list[Server]:
        return list(self._servers_by_class[fare_class])

    def add_report_listener(self, listener: ReportListener) -> None:
        self._report_listeners.append(listener)

    def admit(self, records: Iterable[PassengerRecord]) -> list[Passenger]:
        """Validate records and schedule one arrival event per passenger.

        Raises:
            ValidationError: If a record is invalid or its fare class has no
                servers to serve it.
        """
        if self._started:
            raise InvariantViolation("Passengers must be admitted before the airport starts")

        passengers = []
        for record in records:
            passenger = Passenger.from_record(self._next_passenger_id, record)
            if not self._servers_by_class[passenger.fare_class]:
                raise ValidationError(
                    f"Passenger {passenger.passenger_id} is {passenger.fare_class} but there are no "
                    f"{passenger.fare_class} servers"
                )
            self._next_passenger_id += 1
            passengers.append(passenger)

        for passenger in passengers:
            self._scheduler.schedule_at(
                self.start_time + passenger.arrival_time,
                ARRIVAL,
                self,
                context={"passenger": passenger},
            )
        self.active_passenger_count += len(passengers)
        self.total_accepted += len(passengers)
        logger.debug("[%s] Admitted %d passengers", self.name, len(passengers))
        return passengers

    def start(self) -> None:
        """Begin periodic sampling, or finish at once if nobody is coming."""
        if self._started:
            raise InvariantViolation(f"{self.name} already started")
        self._started = True
        logger.info("[%s] Starting with %d servers and %d passengers",
                    self.name, len(self.servers), self.active_passenger_count)

        if self.active_passenger_count == 0:
            self._finish()
            return
        self._scheduler.schedule_event(self.stats.first_sample())

    def handle_event(self, event: Event) -> Event | None:
        if event.event_type != ARRIVAL:
            raise ValueError(f"{self.name} cannot handle event type {event.event_type!r}")

        passenger: Passenger = event.context["passenger"]
        passenger.enqueue_time = self.now
        queue = self.queues[passenger.fare_class]
        queue.push(passenger)
        self.stats.record_queue_length(passenger.fare_class, len(queue))
        logger.debug("[%s] Passenger %d joined %s queue (length %d)",
                     self.name, passenger.passenger_id, passenger.fare_class, len(queue))

        return self.dispatch(passenger.fare_class)

    def dispatch(self, fare_class: FareClass) -> Event | None:
        """Hand the head of ``fare_class``'s queue to an idle server of that class.

        Returns the departure event of the dispatched passenger, or None if
        no server of that class is idle.
        """
        for server in self._servers_by_class[fare_class]:
            if server.is_idle:
                return server.call_next_passenger()
        return None

    def on_passenger_served(self, passenger: Passenger, completion_time: Instant) -> None:
        self.stats.record_completion(passenger, completion_time)
        self.active_passenger_count -= 1
        logger.info("%d Finished serving %s passenger", self.active_passenger_count, passenger.fare_class)

        if self.active_passenger_count < 0:
            raise InvariantViolation("More passengers served than admitted")
        if self.active_passenger_count == 0:
            self._finish()

    def _finish(self) -> None:
        if self.report is not None:
            raise InvariantViolation(f"{self.name} finished twice")

        logger.info("[%s] Finished processing all passengers at %r", self.name, self.now)
        self._scheduler.stop()
        self.report = self.stats.build_report(self.servers, self.now)
        for listener in self._report_listeners:
            listener(self.report)
