"""Statistics collection and the final report of a simulation run.

StatsCollector only aggregates. It never decides when the simulation ends;
the Airport tells it when to build the report. Averages are derived at
report time and are NaN whenever their denominator is zero.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from airportqueue.core.entity import Entity
from airportqueue.core.event import Event
from airportqueue.core.priority_queue import PriorityQueue
from airportqueue.core.temporal import Instant
from airportqueue.errors import ValidationError
from airportqueue.instrumentation.data import Data
from airportqueue.passenger import FareClass, Passenger
from airportqueue.server import Server

logger = logging.getLogger(__name__)

QUEUE_SAMPLE = "QueueSample"


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan
    return numerator / denominator


def _json_number(value: float) -> float | None:
    return None if math.isnan(value) else value


def _fmt(value: float) -> str:
    return "undefined" if math.isnan(value) else f"{value:.4f}"


@dataclass
class ServerIdleTime:
    name: str
    fare_class: FareClass
    idle_time_s: float
    passengers_served: int


@dataclass
class AirportReport:
    """Final snapshot of a run, built once when the last passenger leaves."""
    served: dict[FareClass, int]
    average_service_time: float
    average_wait: dict[FareClass, float]
    overall_average_wait: float
    average_queue_length: dict[FareClass, float]
    max_queue_length: dict[FareClass, int]
    last_completion_time_s: float | None
    end_time_s: float
    servers: list[ServerIdleTime] = field(default_factory=list)

    @property
    def served_total(self) -> int:
        return sum(self.served.values())

    def __str__(self) -> str:
        lines = [
            "STATS",
            f"Number of people served: {self.served_total}",
        ]
        if self.last_completion_time_s is not None:
            lines.append(f"Last completed service: {self.last_completion_time_s:.4f}s")
        lines.append(f"Average service time: {_fmt(self.average_service_time)}")
        for fare_class in FareClass:
            lines.append(f"Average wait time for {fare_class}: {_fmt(self.average_wait[fare_class])}")
        lines.append(f"Average wait time: {_fmt(self.overall_average_wait)}")
        for fare_class in FareClass:
            lines.append(
                f"Average queue length for {fare_class}: {_fmt(self.average_queue_length[fare_class])}"
            )
        for fare_class in FareClass:
            lines.append(f"Maximum queue length for {fare_class}: {self.max_queue_length[fare_class]}")
        for server in self.servers:
            lines.append(f"Server {server.name} ({server.fare_class}) idle time: {server.idle_time_s:.4f}s")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe form; undefined averages become None."""
        return {
            "served": {str(fc): n for fc, n in self.served.items()},
            "served_total": self.served_total,
            "average_service_time": _json_number(self.average_service_time),
            "average_wait": {str(fc): _json_number(v) for fc, v in self.average_wait.items()},
            "overall_average_wait": _json_number(self.overall_average_wait),
            "average_queue_length": {
                str(fc): _json_number(v) for fc, v in self.average_queue_length.items()
            },
            "max_queue_length": {str(fc): n for fc, n in self.max_queue_length.items()},
            "last_completion_time_s": self.last_completion_time_s,
            "end_time_s": self.end_time_s,
            "servers": [
                {
                    "name": s.name,
                    "fare_class": str(s.fare_class),
                    "idle_time_s": s.idle_time_s,
                    "passengers_served": s.passengers_served,
                }
                for s in self.servers
            ],
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_dataframe(self) -> pd.DataFrame:
        """Per-server idle times, one row per server in creation order."""
        return pd.DataFrame(
            [
                {
                    "server": s.name,
                    "fare_class": str(s.fare_class),
                    "idle_time_s": s.idle_time_s,
                    "passengers_served": s.passengers_served,
                }
                for s in self.servers
            ],
            columns=["server", "fare_class", "idle_time_s", "passengers_served"],
        )


class StatsCollector(Entity):
    """Aggregates counts, wait and service times, and queue-length samples.

    Also acts as the target of the periodic ``QueueSample`` event, which it
    re-schedules every ``sample_interval_s`` as a daemon event so sampling
    never keeps a finished simulation alive.

    Args:
        queues: The class queues to sample, keyed by fare class.
        sample_interval_s: Simulated seconds between samples. Must be
            positive and finite.

    Raises:
        ValidationError: If ``sample_interval_s`` is not a positive number.
    """

    def __init__(
        self,
        queues: Mapping[FareClass, PriorityQueue[Passenger]],
        sample_interval_s: float = 1.0,
        name: str = "Stats",
    ):
        if isinstance(sample_interval_s, bool) or not isinstance(sample_interval_s, (int, float)):
            raise ValidationError(f"sample_interval_s must be a number, got {sample_interval_s!r}")
        if not math.isfinite(sample_interval_s) or sample_interval_s <= 0:
            raise ValidationError(f"sample_interval_s must be positive and finite, got {sample_interval_s!r}")
        super().__init__(name)
        self._queues = dict(queues)
        self.sample_interval_s = sample_interval_s

        self.served_count: dict[FareClass, int] = {fc: 0 for fc in FareClass}
        self.wait_time_sum: dict[FareClass, float] = {fc: 0.0 for fc in FareClass}
        self.total_service_time = 0.0
        self.max_queue_length: dict[FareClass, int] = {fc: 0 for fc in FareClass}
        self.queue_length_samples: dict[FareClass, Data] = {fc: Data() for fc in FareClass}
        self.last_completion_time: Instant | None = None

    # --- observations ---

    def record_queue_length(self, fare_class: FareClass, length: int) -> None:
        if length > self.max_queue_length[fare_class]:
            self.max_queue_length[fare_class] = length

    def record_completion(self, passenger: Passenger, completion_time: Instant) -> None:
        fare_class = passenger.fare_class
        self.served_count[fare_class] += 1
        self.wait_time_sum[fare_class] += passenger.total_wait_time
        self.total_service_time += passenger.service_time
        self.last_completion_time = completion_time

    def first_sample(self) -> Event:
        """The initial sampling tick, one interval after the current time."""
        return self._next_sample()

    def handle_event(self, event: Event) -> Event:
        if event.event_type != QUEUE_SAMPLE:
            raise ValueError(f"{self.name} cannot handle event type {event.event_type!r}")
        for fare_class, queue in self._queues.items():
            self.queue_length_samples[fare_class].add_stat(len(queue), self.now)
        return self._next_sample()

    def _next_sample(self) -> Event:
        return Event(
            time=self.now + self.sample_interval_s,
            event_type=QUEUE_SAMPLE,
            target=self,
            daemon=True,
        )

    # --- derived metrics ---

    @property
    def served_total(self) -> int:
        return sum(self.served_count.values())

    def average_service_time(self) -> float:
        return _ratio(self.total_service_time, self.served_total)

    def average_wait(self, fare_class: FareClass) -> float:
        return _ratio(self.wait_time_sum[fare_class], self.served_count[fare_class])

    def overall_average_wait(self) -> float:
        return _ratio(sum(self.wait_time_sum.values()), self.served_total)

    def average_queue_length(self, fare_class: FareClass) -> float:
        return self.queue_length_samples[fare_class].mean()

    def build_report(self, servers: Iterable[Server], end_time: Instant) -> AirportReport:
        """Snapshot every metric. Server idle time is measured up to ``end_time``."""
        report = AirportReport(
            served=dict(self.served_count),
            average_service_time=self.average_service_time(),
            average_wait={fc: self.average_wait(fc) for fc in FareClass},
            overall_average_wait=self.overall_average_wait(),
            average_queue_length={fc: self.average_queue_length(fc) for fc in FareClass},
            max_queue_length=dict(self.max_queue_length),
            last_completion_time_s=(
                self.last_completion_time.to_seconds() if self.last_completion_time is not None else None
            ),
            end_time_s=end_time.to_seconds(),
            servers=[
                ServerIdleTime(
                    name=server.name,
                    fare_class=server.fare_class,
                    idle_time_s=server.idle_time_at(end_time),
                    passengers_served=server.passengers_served,
                )
                for server in servers
            ],
        )
        logger.debug("Built report for %d served passengers", report.served_total)
        return report
