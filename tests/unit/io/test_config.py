"""Unit tests for SimulationConfig."""

import pytest

from airportqueue.config import SAMPLE_INTERVAL_ENV, START_TIME_ENV, SimulationConfig
from airportqueue.errors import ValidationError


class TestSimulationConfig:
    def test_defaults(self):
        config = SimulationConfig()
        assert config.sample_interval_s == 1.0
        assert config.start_time_s == 0.0

    @pytest.mark.parametrize("interval", [0.0, -1.0, float("inf")])
    def test_bad_interval(self, interval):
        with pytest.raises(ValidationError):
            SimulationConfig(sample_interval_s=interval)

    def test_negative_start(self):
        with pytest.raises(ValidationError):
            SimulationConfig(start_time_s=-5.0)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv(SAMPLE_INTERVAL_ENV, "0.25")
        monkeypatch.setenv(START_TIME_ENV, "10")
        config = SimulationConfig.from_env()
        assert config == SimulationConfig(sample_interval_s=0.25, start_time_s=10.0)

    def test_from_env_defaults_when_unset(self, monkeypatch):
        monkeypatch.delenv(SAMPLE_INTERVAL_ENV, raising=False)
        monkeypatch.delenv(START_TIME_ENV, raising=False)
        assert SimulationConfig.from_env() == SimulationConfig()

    def test_from_env_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv(SAMPLE_INTERVAL_ENV, "often")
        with pytest.raises(ValidationError):
            SimulationConfig.from_env()
