"""airportqueue: discrete-event simulation of class-bound airport queues.

Passengers arrive, wait in an economy or business queue, and are served by
servers bound to their class. The simulation runs on a virtual clock and
reports throughput, wait times, queue lengths and server idle time.

Logging is silent by default; see ``airportqueue.logging_config``.
"""

import logging

from airportqueue.airport import Airport
from airportqueue.config import SimulationConfig
from airportqueue.core import (
    Clock,
    Entity,
    Event,
    EventHeap,
    EventScheduler,
    Instant,
    PriorityQueue,
    RunSummary,
)
from airportqueue.errors import (
    AirportSimError,
    ConfigurationError,
    InvariantViolation,
    ValidationError,
)
from airportqueue.instrumentation import Data
from airportqueue.loader import AirportInput, load_file, parse_lines, parse_text
from airportqueue.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)
from airportqueue.passenger import FareClass, Passenger, PassengerRecord
from airportqueue.server import PassengerServedListener, Server, ServerState
from airportqueue.simulation import AirportSimulation, simulate
from airportqueue.stats import AirportReport, ServerIdleTime, StatsCollector

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Airport",
    "AirportInput",
    "AirportReport",
    "AirportSimError",
    "AirportSimulation",
    "Clock",
    "ConfigurationError",
    "Data",
    "Entity",
    "Event",
    "EventHeap",
    "EventScheduler",
    "FareClass",
    "Instant",
    "InvariantViolation",
    "Passenger",
    "PassengerRecord",
    "PassengerServedListener",
    "PriorityQueue",
    "RunSummary",
    "Server",
    "ServerIdleTime",
    "ServerState",
    "SimulationConfig",
    "StatsCollector",
    "ValidationError",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "load_file",
    "parse_lines",
    "parse_text",
    "set_level",
    "set_module_level",
    "simulate",
]
