"""Passengers and the fare classes that route them."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from airportqueue.core.temporal import Instant
from airportqueue.errors import ValidationError


class FareClass(Enum):
    """Which class queue and which servers a passenger may use.

    Values match the class codes of the input format.
    """
    ECONOMY = 0
    BUSINESS = 1

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class PassengerRecord:
    """An accepted input record, before it becomes a Passenger."""
    fare_class: FareClass
    arrival_time: float
    service_time: float

    def validate(self) -> None:
        """Raise ValidationError unless this record may enter the simulation."""
        if not isinstance(self.fare_class, FareClass):
            raise ValidationError(f"Unknown fare class {self.fare_class!r}")
        if not math.isfinite(self.arrival_time) or self.arrival_time < 0:
            raise ValidationError(f"Arrival time must be a non-negative number, got {self.arrival_time!r}")
        if not math.isfinite(self.service_time) or self.service_time <= 0:
            raise ValidationError(f"Service time must be positive, got {self.service_time!r}")


@dataclass
class Passenger:
    """A passenger moving through one class queue and one server.

    Only one owner holds a passenger at a time: the class queue while it
    waits, then the server that dispatched it.
    """
    passenger_id: int
    fare_class: FareClass
    arrival_time: float
    service_time: float
    enqueue_time: Instant | None = field(default=None, compare=False)
    dispatch_time: Instant | None = field(default=None, compare=False)
    completion_time: Instant | None = field(default=None, compare=False)
    total_wait_time: float = field(default=0.0, compare=False)

    @classmethod
    def from_record(cls, passenger_id: int, record: PassengerRecord) -> Passenger:
        record.validate()
        return cls(
            passenger_id=passenger_id,
            fare_class=record.fare_class,
            arrival_time=float(record.arrival_time),
            service_time=float(record.service_time),
        )


def arrived_earlier(a: Passenger, b: Passenger) -> bool:
    """Class-queue ordering: earliest arrival first."""
    return a.arrival_time < b.arrival_time


def passenger_key(passenger: Passenger) -> int:
    return passenger.passenger_id
