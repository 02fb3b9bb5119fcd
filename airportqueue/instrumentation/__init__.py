"""Measurement containers used by the statistics collector."""

from airportqueue.instrumentation.data import Data

__all__ = ["Data"]
