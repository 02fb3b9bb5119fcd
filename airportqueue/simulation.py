"""The simulation context: one scheduler, one airport, one run.

Every run owns its own AirportSimulation, so independent runs never share
queues, servers or statistics.

Example:
    >>> sim = AirportSimulation()
    >>> sim.initialize(1, 0, [(FareClass.ECONOMY, 0.0, 5.0), (FareClass.ECONOMY, 1.0, 2.0)])
    >>> report = sim.run()
    >>> report.average_wait[FareClass.ECONOMY]
    2.0
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Union

from airportqueue.airport import Airport
from airportqueue.config import SimulationConfig
from airportqueue.core.scheduler import EventScheduler, RunSummary
from airportqueue.core.temporal import Instant
from airportqueue.errors import InvariantViolation, ValidationError
from airportqueue.passenger import FareClass, PassengerRecord
from airportqueue.stats import AirportReport

logger = logging.getLogger(__name__)

RecordLike = Union[PassengerRecord, Sequence]


def _coerce_record(raw: RecordLike) -> PassengerRecord:
    if isinstance(raw, PassengerRecord):
        return raw
    try:
        fare_class, arrival_time, service_time = raw
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Expected (fare_class, arrival_time, service_time), got {raw!r}") from e

    if not isinstance(fare_class, FareClass):
        try:
            fare_class = FareClass(fare_class)
        except ValueError as e:
            raise ValidationError(f"Unknown fare class {fare_class!r}") from e
    try:
        return PassengerRecord(fare_class, float(arrival_time), float(service_time))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Times must be numbers, got {raw!r}") from e


class AirportSimulation:
    """Owns the scheduler and airport for a single simulation run.

    Args:
        config: Sampling interval and start time. Defaults to
            ``SimulationConfig()``.
    """

    def __init__(self, config: SimulationConfig | None = None):
        self.config = config or SimulationConfig()
        self.scheduler = EventScheduler(Instant.from_seconds(self.config.start_time_s))
        self.airport: Airport | None = None
        self.summary: RunSummary | None = None

    def initialize(
        self,
        economy_server_count: int,
        business_server_count: int,
        passenger_records: Iterable[RecordLike],
    ) -> None:
        """Create the servers and schedule every passenger's arrival.

        Raises:
            ValidationError: On a negative server count or an invalid record.
        """
        if self.airport is not None:
            raise InvariantViolation("AirportSimulation is already initialized")

        records = [_coerce_record(raw) for raw in passenger_records]
        airport = Airport(
            self.scheduler,
            economy_server_count,
            business_server_count,
            sample_interval_s=self.config.sample_interval_s,
        )
        airport.admit(records)
        self.airport = airport
        logger.info("Initialized %d economy / %d business servers with %d passengers",
                    economy_server_count, business_server_count, len(records))

    @property
    def report(self) -> AirportReport | None:
        return self.airport.report if self.airport is not None else None

    def run(self) -> AirportReport:
        """Run until every passenger has been served and return the report."""
        if self.airport is None:
            raise InvariantViolation("Call initialize() before run()")
        if self.summary is not None:
            raise InvariantViolation("AirportSimulation can only run once")

        self.airport.start()
        self.summary = self.scheduler.run()

        if self.airport.report is None:
            logger.error("Event loop ended (%s) with %d passengers still active",
                         self.summary.stop_reason, self.airport.active_passenger_count)
            raise InvariantViolation("Simulation ended before every passenger was served")
        return self.airport.report


def simulate(
    economy_server_count: int,
    business_server_count: int,
    passenger_records: Iterable[RecordLike],
    config: SimulationConfig | None = None,
) -> AirportReport:
    """Initialize and run a fresh simulation in one call."""
    sim = AirportSimulation(config)
    sim.initialize(economy_server_count, business_server_count, passenger_records)
    return sim.run()
