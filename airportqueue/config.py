"""Run configuration for the airport simulation."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from airportqueue.errors import ValidationError

SAMPLE_INTERVAL_ENV = "AQ_SAMPLE_INTERVAL"
START_TIME_ENV = "AQ_START_TIME"


@dataclass(frozen=True)
class SimulationConfig:
    """Knobs that are not part of the input file.

    Attributes:
        sample_interval_s: Simulated seconds between queue-length samples.
        start_time_s: Clock value at which the simulation begins. Arrival
            times are offsets from this point.
    """

    sample_interval_s: float = 1.0
    start_time_s: float = 0.0

    def __post_init__(self):
        if not math.isfinite(self.sample_interval_s) or self.sample_interval_s <= 0:
            raise ValidationError(f"sample_interval_s must be positive, got {self.sample_interval_s!r}")
        if not math.isfinite(self.start_time_s) or self.start_time_s < 0:
            raise ValidationError(f"start_time_s must be non-negative, got {self.start_time_s!r}")

    @classmethod
    def from_env(cls) -> SimulationConfig:
        """Build a config, overriding defaults from AQ_* environment variables."""
        kwargs = {}
        for env_name, field_name in ((SAMPLE_INTERVAL_ENV, "sample_interval_s"), (START_TIME_ENV, "start_time_s")):
            raw = os.environ.get(env_name, "").strip()
            if not raw:
                continue
            try:
                kwargs[field_name] = float(raw)
            except ValueError as e:
                raise ValidationError(f"{env_name} must be a number, got {raw!r}") from e
        return cls(**kwargs)
