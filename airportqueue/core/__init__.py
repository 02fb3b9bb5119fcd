"""Core simulation engine components."""

from airportqueue.core.clock import Clock
from airportqueue.core.entity import Entity
from airportqueue.core.event import Event
from airportqueue.core.event_heap import EventHeap
from airportqueue.core.priority_queue import PriorityQueue
from airportqueue.core.scheduler import EventScheduler, RunSummary
from airportqueue.core.temporal import Instant

__all__ = [
    "Clock",
    "Entity",
    "Event",
    "EventHeap",
    "EventScheduler",
    "Instant",
    "PriorityQueue",
    "RunSummary",
]
