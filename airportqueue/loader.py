"""Reads simulation input from the plain-text record format.

The first line holds ``economyServerCount, businessServerCount``. Every
following non-blank line is ``arrivalTime,serviceTime,classCode`` with class
code 0 for economy and 1 for business. Records whose service time is not
positive are dropped here and never reach the simulation.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from airportqueue.errors import ConfigurationError
from airportqueue.passenger import FareClass, PassengerRecord

logger = logging.getLogger(__name__)


@dataclass
class AirportInput:
    economy_servers: int
    business_servers: int
    records: list[PassengerRecord] = field(default_factory=list)
    dropped: int = 0


def _parse_count(text: str, what: str, line_number: int) -> int:
    try:
        value = int(text.strip())
    except ValueError as e:
        raise ConfigurationError(f"{what} server count {text.strip()!r} is not an integer", line_number) from e
    if value < 0:
        raise ConfigurationError(f"{what} server count must not be negative, got {value}", line_number)
    return value


def _parse_record(line: str, line_number: int) -> PassengerRecord:
    parts = [part.strip() for part in line.split(",")]
    if len(parts) != 3:
        raise ConfigurationError(f"expected 3 fields, got {len(parts)}: {line!r}", line_number)

    try:
        arrival_time = float(parts[0])
        service_time = float(parts[1])
        class_value = float(parts[2])
    except ValueError as e:
        raise ConfigurationError(f"unparsable record {line!r}", line_number) from e

    if not class_value.is_integer():
        raise ConfigurationError(f"class code must be a whole number, got {parts[2]!r}", line_number)
    class_code = int(class_value)

    try:
        fare_class = FareClass(class_code)
    except ValueError as e:
        raise ConfigurationError(f"unknown class code {class_code}", line_number) from e

    if not math.isfinite(arrival_time) or arrival_time < 0:
        raise ConfigurationError(f"arrival time must be a non-negative number, got {arrival_time}", line_number)
    if not math.isfinite(service_time):
        raise ConfigurationError(f"service time must be a number, got {service_time}", line_number)
    return PassengerRecord(fare_class, arrival_time, service_time)


def parse_lines(lines: Iterable[str]) -> AirportInput:
    """Parse the server header and passenger records from text lines."""
    header: AirportInput | None = None

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue

        if header is None:
            counts = line.split(",")
            if len(counts) != 2:
                raise ConfigurationError(f"expected 'economy, business' server counts, got {line!r}", line_number)
            header = AirportInput(
                economy_servers=_parse_count(counts[0], "economy", line_number),
                business_servers=_parse_count(counts[1], "business", line_number),
            )
            continue

        record = _parse_record(line, line_number)
        if record.service_time <= 0:
            header.dropped += 1
            logger.debug("Dropping record on line %d with service time %s", line_number, record.service_time)
            continue
        header.records.append(record)

    if header is None:
        raise ConfigurationError("input is empty; expected a server count line")

    logger.info("Loaded %d passenger records (%d dropped) for %d economy / %d business servers",
                len(header.records), header.dropped, header.economy_servers, header.business_servers)
    return header


def parse_text(text: str) -> AirportInput:
    return parse_lines(text.splitlines())


def load_file(path: str | Path) -> AirportInput:
    """Read and parse an input file.

    Raises:
        ConfigurationError: If the file cannot be read or is malformed.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return parse_lines(f)
    except OSError as e:
        raise ConfigurationError(f"cannot load {path}: {e}") from e
